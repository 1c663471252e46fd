"""
Unit tests for response envelope decoding.
"""
from decimal import Decimal

import pytest

from bittrex_async.data.envelope import decode_json, unwrap_response
from bittrex_async.exceptions import APIError, ExchangeRejectedError, MalformedResponseError


def test_success_returns_result_unchanged():
    body = '{"success": true, "message": "", "result": [{"Currency": "BTC", "Balance": 1}]}'
    assert unwrap_response(body) == [{"Currency": "BTC", "Balance": 1}]


def test_success_with_null_result():
    assert unwrap_response('{"success": true, "message": "", "result": null}') is None


def test_missing_result_is_none():
    assert unwrap_response('{"success": true, "message": ""}') is None


def test_fractions_decode_as_exact_decimal():
    result = unwrap_response('{"success": true, "message": "", "result": {"Last": 0.1, "Bid": 0.00000001}}')
    assert result["Last"] == Decimal("0.1")
    assert isinstance(result["Bid"], Decimal)
    assert result["Bid"] == Decimal("0.00000001")


def test_bytes_body_accepted():
    assert unwrap_response(b'{"success": true, "message": "", "result": 3}') == 3


def test_rejection_carries_message_verbatim():
    with pytest.raises(ExchangeRejectedError) as exc_info:
        unwrap_response('{"success": false, "message": "INVALID_MARKET", "result": null}')
    assert exc_info.value.message == "INVALID_MARKET"
    assert "INVALID_MARKET" in str(exc_info.value)


def test_rejection_with_null_message():
    with pytest.raises(ExchangeRejectedError) as exc_info:
        unwrap_response('{"success": false, "message": null, "result": null}')
    assert exc_info.value.message == ""


def test_rejection_is_api_error():
    with pytest.raises(APIError):
        unwrap_response('{"success": false, "message": "APIKEY_INVALID"}')


@pytest.mark.parametrize(
    "body",
    [
        "<html>502 Bad Gateway</html>",
        "",
        "[1, 2, 3]",
        '"success"',
        '{"message": "", "result": null}',
        '{"success": "true", "message": "", "result": null}',
        '{"success": 1, "message": "", "result": null}',
    ],
)
def test_malformed_envelopes(body):
    with pytest.raises(MalformedResponseError):
        unwrap_response(body)


def test_decode_json_integers_stay_int():
    assert decode_json('{"Id": 12}') == {"Id": 12}
