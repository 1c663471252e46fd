"""
Custom exception hierarchy for the Bittrex client.

Provides clear, specific exceptions for the failure modes of a request
and of the order simulation.

Hierarchy:

    BittrexError (base)
    ├── OperationalError   (exchange or network side)
    │   ├── TransportError       (connection failed or timed out, retried)
    │   ├── HttpStatusError      (non-2xx status, fatal, never retried)
    │   └── APIError
    │       ├── ExchangeRejectedError (envelope success=false)
    │       └── AuthenticationError
    │           └── InvalidCredentialError
    └── DataError          (bad input or bad payload)
        ├── MalformedResponseError
        ├── ValidationError
        ├── QuoteUnavailableError
        └── OrderNotFoundError

Rules:
    - TransportError: retried with bounded backoff, then surfaced.
    - Everything else surfaces to the caller on first occurrence.
"""
from typing import Optional


class BittrexError(Exception):
    """Base exception for all client errors."""
    pass


# ============ OPERATIONAL (exchange / network) ============

class OperationalError(BittrexError):
    """Error on the exchange or network side of a call."""
    pass


class TransportError(OperationalError):
    """Network-level failure: connection refused/reset, DNS, timeout.

    Treatment: retried by the client's retry policy, then raised.
    """
    pass


class HttpStatusError(OperationalError):
    """Exchange answered with a non-2xx HTTP status."""

    def __init__(self, status: int, body: str = "", url: Optional[str] = None):
        self.status = status
        self.body = body
        self.url = url
        super().__init__(f"HTTP {status}: {body}")


class APIError(OperationalError):
    """API-specific error (exchange returned an error)."""
    pass


class ExchangeRejectedError(APIError):
    """Envelope reported success=false. Carries the exchange message verbatim."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Request failed: {message}")


class AuthenticationError(APIError):
    """Raised when request authentication cannot be performed."""
    pass


class InvalidCredentialError(AuthenticationError):
    """Signing attempted without an API key / secret configured."""
    pass


# ============ DATA (bad input / payload) ============

class DataError(BittrexError):
    """Bad data going in or coming back."""
    pass


class MalformedResponseError(DataError):
    """Response body is not a well-formed envelope."""
    pass


class ValidationError(DataError):
    """Raised when call arguments fail validation."""
    pass


class QuoteUnavailableError(DataError):
    """No last-trade price available for a market."""
    pass


class OrderNotFoundError(DataError):
    """No open simulated order with the given id."""
    pass
