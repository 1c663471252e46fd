"""
In-memory ledger for simulated trading.

Holds simulated balances, open orders and closed (filled) orders. The ledger
does no locking of its own: it is owned by a single OrderSimulation, which
serializes every mutation.
"""
from decimal import Decimal
from typing import Dict, List, Optional

from bittrex_async.domain.models import CurrencyBalance, OpenOrder, Order
from bittrex_async.exceptions import OrderNotFoundError


class SimulationLedger:
    """Simulated balances and order book of one account."""

    def __init__(self):
        self._balances: Dict[str, CurrencyBalance] = {}
        self._open_orders: Dict[str, OpenOrder] = {}
        self._closed_orders: Dict[str, Order] = {}

    # Balances

    def credit(self, currency: str, quantity: Decimal) -> CurrencyBalance:
        """Add ``quantity`` to a currency, creating the entry on first touch."""
        current = self._balances.get(currency)
        if current is None:
            updated = CurrencyBalance(currency=currency, balance=quantity)
        else:
            updated = current.model_copy(update={"balance": current.balance + quantity})
        self._balances[currency] = updated
        return updated

    def debit(self, currency: str, quantity: Decimal) -> CurrencyBalance:
        """Subtract ``quantity``. The result may go negative."""
        return self.credit(currency, -quantity)

    def balance(self, currency: str) -> Optional[CurrencyBalance]:
        return self._balances.get(currency)

    def balances(self) -> List[CurrencyBalance]:
        return list(self._balances.values())

    # Open orders

    def add_open_order(self, order: OpenOrder) -> None:
        self._open_orders[order.order_uuid] = order

    def remove_open_order(self, order_id: str) -> OpenOrder:
        """
        Delete an open order.

        Raises:
            OrderNotFoundError: If no open order has that id
        """
        try:
            return self._open_orders.pop(order_id)
        except KeyError:
            raise OrderNotFoundError(f"No open simulated order with id {order_id}") from None

    def open_order(self, order_id: str) -> Optional[OpenOrder]:
        return self._open_orders.get(order_id)

    def open_orders(self, market: Optional[str] = None) -> List[OpenOrder]:
        orders = self._open_orders.values()
        if market is None:
            return list(orders)
        return [o for o in orders if o.exchange == market]

    # Closed orders

    def add_closed_order(self, order: Order) -> None:
        self._closed_orders[order.order_uuid] = order

    def closed_order(self, order_id: str) -> Optional[Order]:
        return self._closed_orders.get(order_id)

    def closed_orders(self, market: Optional[str] = None) -> List[Order]:
        orders = self._closed_orders.values()
        if market is None:
            return list(orders)
        return [o for o in orders if o.exchange == market]

    def clear(self) -> None:
        self._balances.clear()
        self._open_orders.clear()
        self._closed_orders.clear()
