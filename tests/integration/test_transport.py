"""
Integration test: BittrexClient over real HTTP.

A local aiohttp server stands in for the exchange, so requests go through
the client's own session, connector and timeout handling.
"""
import asyncio
import hashlib
import hmac
from contextlib import asynccontextmanager
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest
from aiohttp import test_utils, web

from bittrex_async.data.bittrex_client import BittrexClient
from bittrex_async.exceptions import HttpStatusError, MalformedResponseError, TransportError

API_PATH = "/api/v1.1/"


@asynccontextmanager
async def _exchange(handler):
    """Serve ``handler`` for every GET on 127.0.0.1; yields the server."""
    app = web.Application()
    app.router.add_get("/{tail:.*}", handler)
    server = test_utils.TestServer(app, host="127.0.0.1")
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()


@pytest.fixture
def live_client(api_credentials, fixed_nonces):
    """Factory for clients with the real transport pointed at ``base_url``."""

    def factory(base_url: str, **overrides) -> BittrexClient:
        kwargs = dict(
            api_credentials,
            base_url=base_url,
            nonce_generator=fixed_nonces(),
            max_retries=0,
            base_delay=0.0,
            max_backoff=0.0,
            request_timeout=5.0,
        )
        kwargs.update(overrides)
        return BittrexClient(**kwargs)

    return factory


@pytest.mark.asyncio
async def test_signed_uri_arrives_unchanged(live_client, envelope, api_credentials, first_nonce):
    received = []

    async def handler(request: web.Request) -> web.Response:
        received.append((request.raw_path, dict(request.headers)))
        return web.Response(text=envelope({"uuid": "w-1"}), content_type="application/json")

    async with _exchange(handler) as server:
        origin = f"http://127.0.0.1:{server.port}"
        async with live_client(origin + API_PATH) as client:
            accepted = await client.withdraw("XRP", Decimal("10"), "rAddress", payment_id="memo 1/2")

    assert accepted.uuid == "w-1"
    expected_uri = (
        f"{origin}{API_PATH}account/withdraw?currency=XRP&quantity=10&address=rAddress"
        f"&paymentid=memo+1%2F2&apikey={api_credentials['api_key']}&nonce={first_nonce}"
    )
    [(raw_path, headers)] = received
    assert origin + raw_path == expected_uri

    expected_sign = hmac.new(
        api_credentials["api_secret"].encode(), expected_uri.encode(), hashlib.sha512
    ).hexdigest().upper()
    assert headers["apisign"] == expected_sign


@pytest.mark.asyncio
async def test_public_request_is_unsigned_and_decoded(live_client, envelope):
    received = []

    async def handler(request: web.Request) -> web.Response:
        received.append(request)
        return web.Response(text=envelope({"Bid": 0.01, "Ask": 0.02, "Last": 0.015}))

    async with _exchange(handler) as server:
        async with live_client(str(server.make_url(API_PATH))) as client:
            ticker = await client.get_ticker("BTC-LTC")

    assert ticker.last == Decimal("0.015")
    assert received[0].raw_path == API_PATH + "public/getticker?market=BTC-LTC"
    assert "apisign" not in received[0].headers


@pytest.mark.asyncio
async def test_server_error_status_surfaces(live_client):
    hits = []

    async def handler(request: web.Request) -> web.Response:
        hits.append(request.raw_path)
        return web.Response(status=500, text="boom")

    async with _exchange(handler) as server:
        async with live_client(str(server.make_url(API_PATH)), max_retries=2) as client:
            with pytest.raises(HttpStatusError) as exc_info:
                await client.get_markets()

    assert exc_info.value.status == 500
    assert exc_info.value.body == "boom"
    assert len(hits) == 1


@pytest.mark.asyncio
async def test_undecodable_body_is_malformed(live_client):

    async def handler(request: web.Request) -> web.Response:
        return web.Response(
            body=b'{"success": true, "message": "", "result": ["\xff\xfe"]}',
            content_type="application/json",
        )

    async with _exchange(handler) as server:
        async with live_client(str(server.make_url(API_PATH))) as client:
            with pytest.raises(MalformedResponseError):
                await client.get_markets()


@pytest.mark.asyncio
async def test_refused_connection_is_retried_then_raised(live_client):
    port = test_utils.unused_port()
    client = live_client(f"http://127.0.0.1:{port}{API_PATH}", max_retries=2)

    try:
        with patch.object(client, "_send", wraps=client._send) as send:
            with patch("bittrex_async.utils.retry.asyncio.sleep", new_callable=AsyncMock):
                with pytest.raises(TransportError):
                    await client.get_balances()
    finally:
        await client.close()

    assert send.call_count == 3
    nonces = {call.args[0].uri.rsplit("nonce=", 1)[1] for call in send.call_args_list}
    assert len(nonces) == 3


@pytest.mark.asyncio
async def test_slow_response_times_out(live_client):
    release = asyncio.Event()

    async def handler(request: web.Request) -> web.Response:
        await release.wait()
        return web.Response(text="late")

    async with _exchange(handler) as server:
        try:
            async with live_client(str(server.make_url(API_PATH)), request_timeout=0.2) as client:
                with pytest.raises(TransportError):
                    await client.get_markets()
        finally:
            release.set()
