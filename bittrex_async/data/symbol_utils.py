"""
Market name helpers.

Bittrex market names are ``BASE-TARGET`` (e.g. ``BTC-LTC``: LTC priced in
BTC). The target currency is the one bought or sold by an order on the
market, so it is the balance a fill moves.
"""
from __future__ import annotations

from typing import Tuple

from bittrex_async.constants import MARKET_NAME_SEPARATOR
from bittrex_async.exceptions import ValidationError


def split_market_name(market: str) -> Tuple[str, str]:
    """
    Split ``BASE-TARGET`` into ``(base, target)``.

    Raises:
        ValidationError: If the name does not have exactly two non-empty parts
    """
    parts = (market or "").split(MARKET_NAME_SEPARATOR)
    if len(parts) != 2 or not all(parts):
        raise ValidationError(f"Invalid market name: {market!r} (expected BASE-TARGET)")
    return parts[0], parts[1]


def target_currency(market: str) -> str:
    """BTC-LTC -> LTC."""
    return split_market_name(market)[1]
