"""
Domain protocols (interfaces) for dependency inversion.

``TradingApi`` is the capability shared by the live exchange client and the
order simulation, so strategy code can be handed either one at construction
time without knowing which it got.
"""
from decimal import Decimal
from typing import List, Optional, Protocol, runtime_checkable

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


@runtime_checkable
class TradingApi(Protocol):
    """Full Bittrex operation set: market data, trading and account."""

    # Public
    async def get_markets(self) -> List[Market]: ...

    async def get_currencies(self) -> List[SupportedCurrency]: ...

    async def get_ticker(self, market: str) -> Optional[Ticker]: ...

    async def get_market_summaries(self) -> List[MarketSummary]: ...

    async def get_market_summary(self, market: str) -> Optional[MarketSummary]: ...

    async def get_order_book(
        self, market: str, order_type: OrderBookType = OrderBookType.BOTH, depth: int = 20
    ) -> OrderBook: ...

    async def get_market_history(self, market: str) -> List[Trade]: ...

    # Market
    async def buy_limit(self, market: str, quantity: Decimal, rate: Decimal) -> AcceptedOrder: ...

    async def sell_limit(self, market: str, quantity: Decimal, rate: Decimal) -> AcceptedOrder: ...

    async def cancel_order(self, order_id: str) -> None: ...

    async def get_open_orders(self, market: Optional[str] = None) -> List[OpenOrder]: ...

    # Account
    async def get_balances(self) -> List[CurrencyBalance]: ...

    async def get_balance(self, currency: str) -> CurrencyBalance: ...

    async def get_deposit_address(self, currency: str) -> DepositAddress: ...

    async def withdraw(
        self, currency: str, quantity: Decimal, address: str, payment_id: Optional[str] = None
    ) -> AcceptedWithdrawal: ...

    async def get_order(self, order_id: str) -> Optional[Order]: ...

    async def get_order_history(self, market: Optional[str] = None) -> List[HistoricOrder]: ...

    async def get_withdrawal_history(self, currency: Optional[str] = None) -> List[HistoricWithdrawal]: ...

    async def get_deposit_history(self, currency: Optional[str] = None) -> List[HistoricDeposit]: ...

    async def close(self) -> None: ...
