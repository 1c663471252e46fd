"""
Response envelope decoding.

Every Bittrex response body is ``{"success": bool, "message": str, "result": ...}``.
Numbers with a fraction are decoded as Decimal so amounts are never rounded
through float.
"""
import json
from decimal import Decimal
from typing import Any

from bittrex_async.exceptions import ExchangeRejectedError, MalformedResponseError


def decode_json(raw_body: str | bytes) -> Any:
    """Parse JSON with exact decimals."""
    return json.loads(raw_body, parse_float=Decimal)


def unwrap_response(raw_body: str | bytes) -> Any:
    """
    Return the ``result`` payload of an envelope.

    The caller must already have rejected non-2xx statuses.

    Raises:
        MalformedResponseError: If the body is not a well-formed envelope
        ExchangeRejectedError: If the envelope reports ``success: false``
    """
    try:
        envelope = decode_json(raw_body)
    except (ValueError, TypeError) as e:
        raise MalformedResponseError(f"Response is not valid JSON: {e}") from e

    if not isinstance(envelope, dict) or not isinstance(envelope.get("success"), bool):
        raise MalformedResponseError(f"Response is not a Bittrex envelope: {str(raw_body)[:200]}")

    if not envelope["success"]:
        raise ExchangeRejectedError(envelope.get("message") or "")

    return envelope.get("result")
