"""
Bittrex v1.1 REST API client.

Handles:
- Request construction and HMAC-SHA512 authentication (see signing.py)
- Response envelope decoding (see envelope.py)
- Transport over a shared aiohttp session
- Bounded retry with exponential backoff on transport failures
- Typed decoding of every public, market and account endpoint
"""
import asyncio
import ssl
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

import aiohttp
import certifi
import pydantic
from yarl import URL

from bittrex_async.config.config import Config
from bittrex_async.constants import (
    ACCOUNT_GETBALANCE_ENDPOINT,
    ACCOUNT_GETBALANCES_ENDPOINT,
    ACCOUNT_GETDEPOSITADDRESS_ENDPOINT,
    ACCOUNT_GETDEPOSITHISTORY_ENDPOINT,
    ACCOUNT_GETORDER_ENDPOINT,
    ACCOUNT_GETORDERHISTORY_ENDPOINT,
    ACCOUNT_GETWITHDRAWALHISTORY_ENDPOINT,
    ACCOUNT_WITHDRAW_ENDPOINT,
    BITTREX_BASE_URL,
    DEFAULT_API_TIMEOUT,
    ERROR_BODY_EXCERPT_CHARS,
    MARKET_BUYLIMIT_ENDPOINT,
    MARKET_CANCEL_ENDPOINT,
    MARKET_GETOPENORDERS_ENDPOINT,
    MARKET_SELLLIMIT_ENDPOINT,
    MAX_RETRY_ATTEMPTS,
    PUBLIC_GETCURRENCIES_ENDPOINT,
    PUBLIC_GETMARKETHISTORY_ENDPOINT,
    PUBLIC_GETMARKETS_ENDPOINT,
    PUBLIC_GETMARKETSUMMARIES_ENDPOINT,
    PUBLIC_GETMARKETSUMMARY_ENDPOINT,
    PUBLIC_GETORDERBOOK_ENDPOINT,
    PUBLIC_GETTICKER_ENDPOINT,
    RETRY_BASE_DELAY_SECONDS,
    RETRY_MAX_BACKOFF_SECONDS,
)
from bittrex_async.data.envelope import unwrap_response
from bittrex_async.data.signing import Credentials, RequestDescriptor, build_request
from bittrex_async.domain.models import (
    AcceptedOrder,
    AcceptedWithdrawal,
    BittrexModel,
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
    OrderBookEntry,
    OrderBookType,
    SupportedCurrency,
    Ticker,
    Trade,
)
from bittrex_async.exceptions import (
    ExchangeRejectedError,
    HttpStatusError,
    MalformedResponseError,
    TransportError,
)
from bittrex_async.monitoring.logger import get_logger
from bittrex_async.utils.nonce import NonceGenerator
from bittrex_async.utils.retry import retry_on_transient_errors

logger = get_logger(__name__)

M = TypeVar("M", bound=BittrexModel)


def _format_decimal(value: Any) -> str:
    """Plain (non-scientific) decimal string for query parameters."""
    return format(Decimal(str(value)), "f")


def _excerpt(body: bytes | str) -> str:
    """Leading part of a response body, for errors and logs."""
    if isinstance(body, bytes):
        body = body[:ERROR_BODY_EXCERPT_CHARS].decode("utf-8", errors="replace")
    return body[:ERROR_BODY_EXCERPT_CHARS]


def _parse(model: Type[M], payload: Any) -> M:
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as e:
        raise MalformedResponseError(f"Unexpected {model.__name__} payload: {e}") from e


def _parse_list(model: Type[M], payload: Any) -> List[M]:
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise MalformedResponseError(f"Expected a list of {model.__name__}, got {type(payload).__name__}")
    return [_parse(model, item) for item in payload]


class BittrexClient:
    """
    Bittrex REST API client (live exchange).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        *,
        base_url: str = BITTREX_BASE_URL,
        request_timeout: float = DEFAULT_API_TIMEOUT,
        max_retries: int = MAX_RETRY_ATTEMPTS,
        base_delay: float = RETRY_BASE_DELAY_SECONDS,
        max_backoff: float = RETRY_MAX_BACKOFF_SECONDS,
        nonce_generator: Optional[NonceGenerator] = None,
    ):
        """
        Initialize Bittrex client.

        Args:
            api_key: Bittrex API key (omit for public-only use)
            api_secret: Bittrex API secret (omit for public-only use)
            base_url: Versioned API base URL
            request_timeout: Total per-request timeout in seconds
            max_retries: Transport retries before giving up
            base_delay: First backoff delay in seconds
            max_backoff: Backoff ceiling in seconds
            nonce_generator: Nonce source (default: wall clock, strictly increasing)
        """
        self.credentials = Credentials(api_key, api_secret) if api_key and api_secret else None
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.request_timeout = request_timeout
        self.max_retries = max_retries

        self._nonces = nonce_generator or NonceGenerator()
        self._session: Optional[aiohttp.ClientSession] = None
        self._ssl_context: Optional[ssl.SSLContext] = None

        # Each attempt rebuilds (and re-signs) the request
        self._dispatch_with_retry = retry_on_transient_errors(
            max_retries=max_retries,
            base_delay=base_delay,
            max_backoff=max_backoff,
            transient_errors=(TransportError,),
        )(self._dispatch)

        logger.info(
            "Bittrex client configuration loaded",
            base_url=self.base_url,
            authenticated=self.has_valid_credentials(),
            max_retries=max_retries,
        )

    @classmethod
    def from_config(cls, config: Config) -> "BittrexClient":
        """Build a client from the exchange and retry sections of a Config."""
        exchange = config.exchange
        if not exchange.has_credentials():
            logger.info("No API credentials in config, client is public-only")
        return cls(
            api_key=exchange.api_key if exchange.has_credentials() else None,
            api_secret=exchange.api_secret if exchange.has_credentials() else None,
            base_url=exchange.base_url,
            request_timeout=exchange.request_timeout_seconds,
            max_retries=config.retry.max_retries,
            base_delay=config.retry.base_delay,
            max_backoff=config.retry.max_backoff,
        )

    def has_valid_credentials(self) -> bool:
        """Check if API key and secret are present."""
        return self.credentials is not None

    async def __aenter__(self) -> "BittrexClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self):
        """Close the underlying HTTP session."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    # ------------------------------------------------------------------
    # Core request path
    # ------------------------------------------------------------------

    async def request(
        self,
        method: str,
        path: str,
        parameters: Optional[Dict[str, str]] = None,
        requires_auth: bool = True,
    ) -> Any:
        """
        Perform one API call and return the envelope's ``result``.

        Args:
            method: HTTP method (Bittrex v1.1 only uses GET)
            path: Endpoint path relative to the base URL, e.g. "public/getticker"
            parameters: Query parameters in signing order
            requires_auth: Sign the request with the configured credentials

        Raises:
            InvalidCredentialError: Authenticated call without credentials
            TransportError: Network failure after all retries
            HttpStatusError: Non-2xx response
            MalformedResponseError: Body is not a Bittrex envelope
            ExchangeRejectedError: Envelope reported success=false
        """
        return await self._dispatch_with_retry(method, path, dict(parameters or {}), requires_auth)

    def build(self, method: str, path: str, parameters: Dict[str, str], requires_auth: bool) -> RequestDescriptor:
        """Build a request descriptor, drawing a fresh nonce for signed calls."""
        return build_request(
            method,
            self.base_url + path,
            parameters,
            requires_auth,
            credentials=self.credentials,
            nonce=self._nonces.next() if requires_auth else None,
        )

    async def _dispatch(self, method: str, path: str, parameters: Dict[str, str], requires_auth: bool) -> Any:
        request = self.build(method, path, parameters, requires_auth)
        logger.debug("Dispatching request", method=method, path=path, signed=request.is_signed)

        status, body = await self._send(request)
        if not 200 <= status < 300:
            excerpt = _excerpt(body)
            logger.error("HTTP error from Bittrex", path=path, status=status, body=excerpt)
            raise HttpStatusError(status, excerpt, url=self.base_url + path)

        try:
            return unwrap_response(body)
        except ExchangeRejectedError as e:
            logger.warning("Bittrex rejected request", path=path, message=e.message)
            raise

    async def _send(self, request: RequestDescriptor) -> Tuple[int, bytes]:
        """Send over the shared session. Returns (status, raw body bytes)."""
        session = self._get_session()
        try:
            # encoded=True: the URI must reach the wire byte-for-byte as signed
            async with session.request(
                request.method, URL(request.uri, encoded=True), headers=request.headers
            ) as response:
                # Raw bytes: decoding is left to the envelope parser
                body = await response.read()
                return response.status, body
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"{request.method} {request.uri.split('?', 1)[0]} failed: {e!r}") from e

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(ssl=self._get_ssl_context())
            timeout = aiohttp.ClientTimeout(total=self.request_timeout)
            self._session = aiohttp.ClientSession(connector=connector, timeout=timeout)
        return self._session

    def _get_ssl_context(self) -> ssl.SSLContext:
        if self._ssl_context is None:
            self._ssl_context = ssl.create_default_context(cafile=certifi.where())
        return self._ssl_context

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_markets(self) -> List[Market]:
        """Get all markets and associated metadata."""
        result = await self.request("GET", PUBLIC_GETMARKETS_ENDPOINT, requires_auth=False)
        return _parse_list(Market, result)

    async def get_currencies(self) -> List[SupportedCurrency]:
        """Get all supported currencies and associated metadata."""
        result = await self.request("GET", PUBLIC_GETCURRENCIES_ENDPOINT, requires_auth=False)
        return _parse_list(SupportedCurrency, result)

    async def get_ticker(self, market: str) -> Optional[Ticker]:
        """
        Get the current bid, ask and last prices for a market.

        Args:
            market: Market name, e.g. "BTC-LTC"

        Returns:
            Ticker with ``market_name`` set, or None if the exchange returned no ticker
        """
        result = await self.request("GET", PUBLIC_GETTICKER_ENDPOINT, {"market": market}, requires_auth=False)
        if result is None:
            return None
        return _parse(Ticker, result).model_copy(update={"market_name": market})

    async def get_market_summaries(self) -> List[MarketSummary]:
        """Get 24h summaries of all markets."""
        result = await self.request("GET", PUBLIC_GETMARKETSUMMARIES_ENDPOINT, requires_auth=False)
        return _parse_list(MarketSummary, result)

    async def get_market_summary(self, market: str) -> Optional[MarketSummary]:
        """Get the 24h summary of a market."""
        result = await self.request(
            "GET", PUBLIC_GETMARKETSUMMARY_ENDPOINT, {"market": market}, requires_auth=False
        )
        # The exchange wraps the single summary in a list
        if isinstance(result, list):
            result = result[0] if result else None
        if result is None:
            return None
        return _parse(MarketSummary, result)

    async def get_order_book(
        self,
        market: str,
        order_type: OrderBookType | str = OrderBookType.BOTH,
        depth: int = 20,
    ) -> OrderBook:
        """
        Get the order book of a market.

        Args:
            market: Market name, e.g. "BTC-LTC"
            order_type: "buy", "sell" or "both"
            depth: Number of entries per side
        """
        order_type = OrderBookType(order_type)
        parameters = {
            "market": market,
            "type": order_type.value,
            "depth": str(depth),
        }
        result = await self.request("GET", PUBLIC_GETORDERBOOK_ENDPOINT, parameters, requires_auth=False)

        if order_type == OrderBookType.BOTH:
            book = _parse(OrderBook, result or {})
        elif order_type == OrderBookType.BUY:
            book = OrderBook(buy=_parse_list(OrderBookEntry, result))
        else:
            book = OrderBook(sell=_parse_list(OrderBookEntry, result))

        return book.model_copy(update={"market_name": market})

    async def get_market_history(self, market: str) -> List[Trade]:
        """Get recent trades of a market."""
        result = await self.request(
            "GET", PUBLIC_GETMARKETHISTORY_ENDPOINT, {"market": market}, requires_auth=False
        )
        return _parse_list(Trade, result)

    # ------------------------------------------------------------------
    # Market API
    # ------------------------------------------------------------------

    async def buy_limit(self, market: str, quantity: Decimal, rate: Decimal) -> AcceptedOrder:
        """
        Place a limit buy order.

        Args:
            market: Market name, e.g. "BTC-LTC"
            quantity: Amount of the target currency to buy
            rate: Limit price in the base currency
        """
        parameters = {
            "market": market,
            "quantity": _format_decimal(quantity),
            "rate": _format_decimal(rate),
        }
        logger.info("Placing buy limit order", market=market, quantity=parameters["quantity"], rate=parameters["rate"])
        result = await self.request("GET", MARKET_BUYLIMIT_ENDPOINT, parameters)
        return _parse(AcceptedOrder, result)

    async def sell_limit(self, market: str, quantity: Decimal, rate: Decimal) -> AcceptedOrder:
        """
        Place a limit sell order.

        Args:
            market: Market name, e.g. "BTC-LTC"
            quantity: Amount of the target currency to sell
            rate: Limit price in the base currency
        """
        parameters = {
            "market": market,
            "quantity": _format_decimal(quantity),
            "rate": _format_decimal(rate),
        }
        logger.info("Placing sell limit order", market=market, quantity=parameters["quantity"], rate=parameters["rate"])
        result = await self.request("GET", MARKET_SELLLIMIT_ENDPOINT, parameters)
        return _parse(AcceptedOrder, result)

    async def cancel_order(self, order_id: str) -> None:
        """Cancel the order with the given uuid."""
        await self.request("GET", MARKET_CANCEL_ENDPOINT, {"uuid": order_id})
        logger.info("Order cancelled", order_id=order_id)

    async def get_open_orders(self, market: Optional[str] = None) -> List[OpenOrder]:
        """Get open orders, optionally restricted to one market."""
        parameters = {}
        if market is not None:
            parameters["market"] = market
        result = await self.request("GET", MARKET_GETOPENORDERS_ENDPOINT, parameters)
        return _parse_list(OpenOrder, result)

    # ------------------------------------------------------------------
    # Account API
    # ------------------------------------------------------------------

    async def get_balances(self) -> List[CurrencyBalance]:
        """Get balances of all currencies."""
        result = await self.request("GET", ACCOUNT_GETBALANCES_ENDPOINT)
        return _parse_list(CurrencyBalance, result)

    async def get_balance(self, currency: str) -> CurrencyBalance:
        """Get the balance of one currency, e.g. "BTC"."""
        result = await self.request("GET", ACCOUNT_GETBALANCE_ENDPOINT, {"currency": currency})
        return _parse(CurrencyBalance, result)

    async def get_deposit_address(self, currency: str) -> DepositAddress:
        """Get the deposit address for a currency."""
        result = await self.request("GET", ACCOUNT_GETDEPOSITADDRESS_ENDPOINT, {"currency": currency})
        return _parse(DepositAddress, result)

    async def withdraw(
        self,
        currency: str,
        quantity: Decimal,
        address: str,
        payment_id: Optional[str] = None,
    ) -> AcceptedWithdrawal:
        """
        Send funds to another address.

        Args:
            currency: Currency symbol, e.g. "BTC"
            quantity: Amount to withdraw
            address: Destination address
            payment_id: Memo / payment id for currencies that need one
        """
        parameters = {
            "currency": currency,
            "quantity": _format_decimal(quantity),
            "address": address,
        }
        if payment_id is not None:
            parameters["paymentid"] = payment_id
        logger.info("Requesting withdrawal", currency=currency, quantity=parameters["quantity"])
        result = await self.request("GET", ACCOUNT_WITHDRAW_ENDPOINT, parameters)
        return _parse(AcceptedWithdrawal, result)

    async def get_order(self, order_id: str) -> Optional[Order]:
        """Get a single order by uuid."""
        result = await self.request("GET", ACCOUNT_GETORDER_ENDPOINT, {"uuid": order_id})
        if result is None:
            return None
        return _parse(Order, result)

    async def get_order_history(self, market: Optional[str] = None) -> List[HistoricOrder]:
        """Get the account's order history, optionally restricted to one market."""
        parameters = {}
        if market is not None:
            parameters["market"] = market
        result = await self.request("GET", ACCOUNT_GETORDERHISTORY_ENDPOINT, parameters)
        return _parse_list(HistoricOrder, result)

    async def get_withdrawal_history(self, currency: Optional[str] = None) -> List[HistoricWithdrawal]:
        """Get withdrawal history, optionally restricted to one currency."""
        parameters = {}
        if currency is not None:
            parameters["currency"] = currency
        result = await self.request("GET", ACCOUNT_GETWITHDRAWALHISTORY_ENDPOINT, parameters)
        return _parse_list(HistoricWithdrawal, result)

    async def get_deposit_history(self, currency: Optional[str] = None) -> List[HistoricDeposit]:
        """Get deposit history, optionally restricted to one currency."""
        parameters = {}
        if currency is not None:
            parameters["currency"] = currency
        result = await self.request("GET", ACCOUNT_GETDEPOSITHISTORY_ENDPOINT, parameters)
        return _parse_list(HistoricDeposit, result)
