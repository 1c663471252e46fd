"""
Order simulation (paper trading) runtime.

Behaves like the live client, except that buy and sell orders never reach
the exchange. Each limit order is decided once, at submission, against the
market's live last-trade price:

- buy fills when ``last <= rate``, sell fills when ``last >= rate``;
- a fill is recorded as a closed order and moves the target-currency balance;
- otherwise the order stays open until cancelled. Later price moves never
  fill it, and cancelling deletes it without keeping history.

Market data and the remaining account calls are passed through to the
wrapped client unchanged.
"""
import asyncio
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, List, Optional

from bittrex_async.data.symbol_utils import target_currency
from bittrex_async.domain.models import (
    AcceptedOrder,
    AcceptedWithdrawal,
    CurrencyBalance,
    DepositAddress,
    HistoricDeposit,
    HistoricOrder,
    HistoricWithdrawal,
    Market,
    MarketSummary,
    OpenOrder,
    Order,
    OrderBook,
    OrderBookType,
    SupportedCurrency,
    Ticker,
    Trade,
)
from bittrex_async.domain.protocols import TradingApi
from bittrex_async.exceptions import QuoteUnavailableError, ValidationError
from bittrex_async.monitoring.logger import get_logger
from bittrex_async.paper.ledger import SimulationLedger

logger = get_logger(__name__)

LIMIT_BUY = "LIMIT_BUY"
LIMIT_SELL = "LIMIT_SELL"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _positive_decimal(name: str, value) -> Decimal:
    try:
        value = Decimal(str(value))
    except ArithmeticError:
        raise ValidationError(f"{name} must be a number, got {value!r}") from None
    if not value.is_finite() or value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


class OrderSimulation:
    """
    Simulated trading on top of a live market-data source.

    The ledger is only mutated while holding ``self._lock`` so concurrent
    callers see each order applied atomically.
    """

    def __init__(self, client: TradingApi, clock: Callable[[], datetime] = _utcnow):
        """
        Initialize order simulation.

        Args:
            client: Live client used for tickers and pass-through calls
            clock: Source of order timestamps (default: UTC now)
        """
        self.client = client
        self._clock = clock
        self._ledger = SimulationLedger()
        self._lock = asyncio.Lock()

        logger.info("Order simulation initialized")

    async def __aenter__(self) -> "OrderSimulation":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self):
        await self.client.close()

    async def reset(self):
        """Drop all simulated balances and orders."""
        async with self._lock:
            self._ledger.clear()
        logger.info("Order simulation reset")

    # ------------------------------------------------------------------
    # Simulated market API
    # ------------------------------------------------------------------

    async def buy_limit(self, market: str, quantity: Decimal, rate: Decimal) -> AcceptedOrder:
        """Simulate a limit buy; fills now if the last price is at or below ``rate``."""
        quantity = _positive_decimal("quantity", quantity)
        rate = _positive_decimal("rate", rate)
        currency = target_currency(market)

        last = await self._last_price(market)
        return await self._submit(market, currency, quantity, rate, fills=last <= rate, order_type=LIMIT_BUY, last=last)

    async def sell_limit(self, market: str, quantity: Decimal, rate: Decimal) -> AcceptedOrder:
        """Simulate a limit sell; fills now if the last price is at or above ``rate``."""
        quantity = _positive_decimal("quantity", quantity)
        rate = _positive_decimal("rate", rate)
        currency = target_currency(market)

        last = await self._last_price(market)
        return await self._submit(market, currency, quantity, rate, fills=last >= rate, order_type=LIMIT_SELL, last=last)

    async def cancel_order(self, order_id: str) -> None:
        """
        Cancel an open simulated order. The order is deleted, not archived.

        Raises:
            OrderNotFoundError: If no open order has that id (filled orders included)
        """
        async with self._lock:
            order = self._ledger.remove_open_order(order_id)
        logger.info("Simulated order cancelled", order_id=order_id, market=order.exchange)

    async def get_open_orders(self, market: Optional[str] = None) -> List[OpenOrder]:
        return self._ledger.open_orders(market)

    # ------------------------------------------------------------------
    # Simulated account API
    # ------------------------------------------------------------------

    async def get_balances(self) -> List[CurrencyBalance]:
        return self._ledger.balances()

    async def get_balance(self, currency: str) -> CurrencyBalance:
        """Balance of ``currency``; zero for a currency never traded."""
        balance = self._ledger.balance(currency)
        if balance is None:
            return CurrencyBalance(currency=currency, balance=Decimal("0"))
        return balance

    async def get_order(self, order_id: str) -> Optional[Order]:
        """Look up an order among open orders first, then filled ones. None if unknown."""
        open_order = self._ledger.open_order(order_id)
        if open_order is not None:
            return Order(
                order_uuid=open_order.order_uuid,
                exchange=open_order.exchange,
                order_type=open_order.order_type,
                quantity=open_order.quantity,
                quantity_remaining=open_order.quantity_remaining,
                limit=open_order.limit,
                price=open_order.price,
                price_per_unit=open_order.price_per_unit,
                opened=open_order.opened,
                closed=open_order.closed,
                is_open=True,
            )
        return self._ledger.closed_order(order_id)

    async def get_order_history(self, market: Optional[str] = None) -> List[HistoricOrder]:
        """Filled simulated orders; all markets when ``market`` is None."""
        return [
            HistoricOrder(
                order_uuid=o.order_uuid,
                exchange=o.exchange,
                time_stamp=o.closed,
                order_type=o.order_type,
                limit=o.limit,
                quantity=o.quantity,
                quantity_remaining=o.quantity_remaining,
                price=o.price,
                price_per_unit=o.price_per_unit,
            )
            for o in self._ledger.closed_orders(market)
        ]

    # ------------------------------------------------------------------
    # Pass-through to the live client
    # ------------------------------------------------------------------

    async def get_markets(self) -> List[Market]:
        return await self.client.get_markets()

    async def get_currencies(self) -> List[SupportedCurrency]:
        return await self.client.get_currencies()

    async def get_ticker(self, market: str) -> Optional[Ticker]:
        return await self.client.get_ticker(market)

    async def get_market_summaries(self) -> List[MarketSummary]:
        return await self.client.get_market_summaries()

    async def get_market_summary(self, market: str) -> Optional[MarketSummary]:
        return await self.client.get_market_summary(market)

    async def get_order_book(
        self, market: str, order_type: OrderBookType = OrderBookType.BOTH, depth: int = 20
    ) -> OrderBook:
        return await self.client.get_order_book(market, order_type, depth)

    async def get_market_history(self, market: str) -> List[Trade]:
        return await self.client.get_market_history(market)

    async def get_deposit_address(self, currency: str) -> DepositAddress:
        return await self.client.get_deposit_address(currency)

    async def withdraw(
        self, currency: str, quantity: Decimal, address: str, payment_id: Optional[str] = None
    ) -> AcceptedWithdrawal:
        # Not simulated: this moves real funds
        logger.warning("Withdrawal passed through to live exchange", currency=currency)
        return await self.client.withdraw(currency, quantity, address, payment_id)

    async def get_withdrawal_history(self, currency: Optional[str] = None) -> List[HistoricWithdrawal]:
        return await self.client.get_withdrawal_history(currency)

    async def get_deposit_history(self, currency: Optional[str] = None) -> List[HistoricDeposit]:
        return await self.client.get_deposit_history(currency)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _last_price(self, market: str) -> Decimal:
        ticker = await self.client.get_ticker(market)
        if ticker is None or ticker.last is None:
            raise QuoteUnavailableError(f"No last price for {market}")
        return ticker.last

    async def _submit(
        self,
        market: str,
        currency: str,
        quantity: Decimal,
        rate: Decimal,
        *,
        fills: bool,
        order_type: str,
        last: Decimal,
    ) -> AcceptedOrder:
        """
        Record an order as filled or open.

        ``quantity`` is unsigned; the stored order carries it negated for sells.
        """
        is_sell = order_type == LIMIT_SELL
        signed_quantity = -quantity if is_sell else quantity
        order_id = str(uuid.uuid4())
        now = self._clock()
        price = signed_quantity * rate

        async with self._lock:
            if fills:
                self._ledger.add_closed_order(Order(
                    order_uuid=order_id,
                    exchange=market,
                    order_type=order_type,
                    quantity=signed_quantity,
                    quantity_remaining=Decimal("0"),
                    limit=rate,
                    price=price,
                    price_per_unit=rate,
                    opened=now,
                    closed=now,
                    is_open=False,
                ))
                if is_sell:
                    balance = self._ledger.debit(currency, quantity)
                else:
                    balance = self._ledger.credit(currency, quantity)
            else:
                self._ledger.add_open_order(OpenOrder(
                    order_uuid=order_id,
                    exchange=market,
                    order_type=order_type,
                    quantity=signed_quantity,
                    quantity_remaining=signed_quantity,
                    limit=rate,
                    price=price,
                    price_per_unit=rate,
                    opened=now,
                ))
                balance = None

        if fills:
            logger.info(
                "Simulated order filled",
                order_id=order_id, market=market, order_type=order_type,
                quantity=str(signed_quantity), rate=str(rate), last=str(last),
                balance=str(balance.balance),
            )
        else:
            logger.info(
                "Simulated order queued",
                order_id=order_id, market=market, order_type=order_type,
                quantity=str(signed_quantity), rate=str(rate), last=str(last),
            )

        return AcceptedOrder(uuid=order_id)
