"""
Domain models for the Bittrex client.

Every API result is decoded into one of these models. Field names are
snake_case; the exchange's PascalCase keys are accepted through aliases and
``model_dump(by_alias=True)`` reproduces the wire shape. Unknown keys are
ignored. Models are frozen: updates go through ``model_copy(update=...)``.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal


class OrderBookType(str, Enum):
    """Which side(s) of the order book to request."""
    BUY = "buy"
    SELL = "sell"
    BOTH = "both"


class BittrexModel(BaseModel):
    """Base for all result models."""
    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


# ============ PUBLIC ============

class Market(BittrexModel):
    market_currency: str
    base_currency: str
    market_currency_long: Optional[str] = None
    base_currency_long: Optional[str] = None
    min_trade_size: Optional[Decimal] = None
    market_name: str
    is_active: Optional[bool] = True
    created: Optional[datetime] = None
    notice: Optional[str] = None
    is_sponsored: Optional[bool] = None
    logo_url: Optional[str] = None


class SupportedCurrency(BittrexModel):
    currency: str
    currency_long: Optional[str] = None
    min_confirmation: Optional[int] = None
    tx_fee: Optional[Decimal] = None
    is_active: Optional[bool] = True
    coin_type: Optional[str] = None
    base_address: Optional[str] = None
    notice: Optional[str] = None


class Ticker(BittrexModel):
    """Current bid, ask and last-trade price of a market."""
    bid: Optional[Decimal] = None
    ask: Optional[Decimal] = None
    last: Optional[Decimal] = None
    market_name: Optional[str] = None  # not on the wire; filled in by the client


class MarketSummary(BittrexModel):
    """24h summary of a market."""
    market_name: str
    high: Optional[Decimal] = None
    low: Optional[Decimal] = None
    volume: Optional[Decimal] = None
    last: Optional[Decimal] = None
    base_volume: Optional[Decimal] = None
    time_stamp: Optional[datetime] = None
    bid: Optional[Decimal] = None
    ask: Optional[Decimal] = None
    open_buy_orders: Optional[int] = None
    open_sell_orders: Optional[int] = None
    prev_day: Optional[Decimal] = None
    created: Optional[datetime] = None


class OrderBookEntry(BittrexModel):
    quantity: Decimal
    rate: Decimal


class OrderBook(BittrexModel):
    market_name: Optional[str] = None
    buy: List[OrderBookEntry] = Field(default_factory=list)
    sell: List[OrderBookEntry] = Field(default_factory=list)


class Trade(BittrexModel):
    """A fill from a market's recent trade history."""
    id: int
    time_stamp: datetime
    quantity: Decimal
    price: Decimal
    total: Decimal
    fill_type: Optional[str] = None
    order_type: Optional[str] = None


# ============ MARKET ============

class AcceptedOrder(BittrexModel):
    uuid: str


class OpenOrder(BittrexModel):
    uuid: Optional[str] = None
    order_uuid: str
    exchange: str
    order_type: Optional[str] = None
    quantity: Decimal
    quantity_remaining: Optional[Decimal] = None
    limit: Decimal
    commission_paid: Optional[Decimal] = None
    price: Decimal
    price_per_unit: Optional[Decimal] = None
    opened: Optional[datetime] = None
    closed: Optional[datetime] = None
    cancel_initiated: Optional[bool] = False
    immediate_or_cancel: Optional[bool] = False
    is_conditional: Optional[bool] = False
    condition: Optional[str] = None
    condition_target: Optional[Decimal] = None


# ============ ACCOUNT ============

class CurrencyBalance(BittrexModel):
    currency: str
    balance: Decimal = Decimal("0")
    available: Optional[Decimal] = None
    pending: Optional[Decimal] = None
    crypto_address: Optional[str] = None
    requested: Optional[bool] = None
    uuid: Optional[str] = None


class DepositAddress(BittrexModel):
    currency: str
    address: Optional[str] = None


class AcceptedWithdrawal(BittrexModel):
    uuid: str


class Order(BittrexModel):
    """Full detail of a single order, open or closed."""
    account_id: Optional[str] = None
    order_uuid: str
    exchange: str
    order_type: Optional[str] = Field(default=None, alias="Type")
    quantity: Decimal
    quantity_remaining: Optional[Decimal] = None
    limit: Decimal
    reserved: Optional[Decimal] = None
    reserve_remaining: Optional[Decimal] = None
    commission_reserved: Optional[Decimal] = None
    commission_reserve_remaining: Optional[Decimal] = None
    commission_paid: Optional[Decimal] = None
    price: Decimal
    price_per_unit: Optional[Decimal] = None
    opened: Optional[datetime] = None
    closed: Optional[datetime] = None
    is_open: bool = False
    sentinel: Optional[str] = None
    cancel_initiated: Optional[bool] = False
    immediate_or_cancel: Optional[bool] = False
    is_conditional: Optional[bool] = False
    condition: Optional[str] = None
    condition_target: Optional[Decimal] = None


class HistoricOrder(BittrexModel):
    order_uuid: str
    exchange: str
    time_stamp: datetime
    order_type: Optional[str] = None
    limit: Decimal
    quantity: Decimal
    quantity_remaining: Optional[Decimal] = None
    commission: Optional[Decimal] = None
    price: Decimal
    price_per_unit: Optional[Decimal] = None
    is_conditional: Optional[bool] = False
    condition: Optional[str] = None
    condition_target: Optional[Decimal] = None
    immediate_or_cancel: Optional[bool] = False


class HistoricWithdrawal(BittrexModel):
    payment_uuid: str
    currency: str
    amount: Decimal
    address: Optional[str] = None
    opened: Optional[datetime] = None
    authorized: Optional[bool] = False
    pending_payment: Optional[bool] = False
    tx_cost: Optional[Decimal] = None
    tx_id: Optional[str] = None
    canceled: Optional[bool] = False
    invalid_address: Optional[bool] = False


class HistoricDeposit(BittrexModel):
    id: int
    amount: Decimal
    currency: str
    confirmations: Optional[int] = None
    last_updated: Optional[datetime] = None
    tx_id: Optional[str] = None
    crypto_address: Optional[str] = None
