"""
Pytest configuration and shared fixtures.
"""
import json
from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from bittrex_async.data.bittrex_client import BittrexClient
from bittrex_async.domain.models import Ticker
from bittrex_async.utils.nonce import NonceGenerator

# Frozen wall clock: every nonce after the first is last + 1
FIXED_EPOCH_SECONDS = 1_700_000_000.0


def pytest_configure(config):
    """Register custom marks. Async tests require pytest-asyncio."""
    config.addinivalue_line("markers", "asyncio: mark test as async (pytest-asyncio).")


def _envelope(result: Any = None, success: bool = True, message: str = "") -> str:
    return json.dumps({"success": success, "message": message, "result": result})


@pytest.fixture
def envelope():
    """Serializer for Bittrex response envelopes: envelope(result, success=True, message="")."""
    return _envelope


@pytest.fixture
def api_credentials():
    return {"api_key": "test-key", "api_secret": "test-secret"}


@pytest.fixture
def first_nonce() -> int:
    return int(FIXED_EPOCH_SECONDS * 1000)


@pytest.fixture
def fixed_nonces():
    """Factory for nonce generators on the frozen clock."""
    return lambda: NonceGenerator(clock=lambda: FIXED_EPOCH_SECONDS)


@pytest.fixture
def make_client(api_credentials, fixed_nonces):
    """Factory for authenticated clients with a frozen nonce clock and a mocked transport."""

    def factory(**overrides) -> BittrexClient:
        kwargs = dict(
            api_credentials,
            nonce_generator=fixed_nonces(),
            max_retries=2,
            base_delay=0.0,
            max_backoff=0.0,
        )
        kwargs.update(overrides)
        client = BittrexClient(**kwargs)
        client._send = AsyncMock(return_value=(200, _envelope()))
        return client

    return factory


@pytest.fixture
def client(make_client) -> BittrexClient:
    return make_client()


@pytest.fixture
def quote_client():
    """Factory for stand-in live clients whose ticker always quotes ``last``."""

    def factory(last: Any = Decimal("10"), market: str = "BTC-LTC") -> MagicMock:
        live = MagicMock()
        ticker = None if last is None else Ticker(bid=last, ask=last, last=last, market_name=market)
        live.get_ticker = AsyncMock(return_value=ticker)
        live.close = AsyncMock()
        return live

    return factory
