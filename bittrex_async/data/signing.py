"""
Request signing and request construction for the Bittrex v1.1 API.

Authenticated calls append ``apikey`` and ``nonce`` to the query string and
send an HMAC-SHA512 of the complete URI (keyed with the API secret) in the
``apisign`` header. Public calls carry no authentication.

Everything here is synchronous and free of I/O; dispatch is the caller's job.
"""
import hashlib
import hmac
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional
from urllib.parse import urlencode

from bittrex_async.constants import (
    APIKEY_PARAM,
    NONCE_PARAM,
    RESERVED_AUTH_PARAMS,
    SIGN_HEADER_NAME,
)
from bittrex_async.exceptions import InvalidCredentialError, ValidationError


@dataclass(frozen=True)
class Credentials:
    """API key pair. The secret is only ever used as the HMAC key."""
    api_key: str
    api_secret: str = field(repr=False)

    @property
    def secret_bytes(self) -> bytes:
        return self.api_secret.encode("utf-8")


@dataclass(frozen=True)
class SignedRequest:
    """Complete URI plus its signature. Single use: the nonce is baked in."""
    uri: str
    signature: str = field(repr=False)


@dataclass(frozen=True)
class RequestDescriptor:
    """Transport-ready request: method, complete URI and headers."""
    method: str
    uri: str
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def is_signed(self) -> bool:
        return SIGN_HEADER_NAME in self.headers


def encode_parameters(parameters: Mapping[str, str]) -> str:
    """
    Form-encode parameters in iteration order.

    Keys and values are encoded independently (space -> ``+``) and joined as
    ``k=v`` pairs separated by ``&``. An empty mapping encodes to ``""``.
    """
    return urlencode(list(parameters.items()))


def compute_signature(secret: bytes, message: str) -> str:
    """HMAC-SHA512 of the UTF-8 message, as uppercase hex (128 chars)."""
    return hmac.new(secret, message.encode("utf-8"), hashlib.sha512).hexdigest().upper()


def sign_request(
    credentials: Optional[Credentials],
    base_uri: str,
    parameters: Mapping[str, str],
    nonce: int,
) -> SignedRequest:
    """
    Build the canonical URI for an authenticated call and sign it.

    Args:
        credentials: API key pair
        base_uri: Endpoint URI without query string
        parameters: Endpoint parameters; must not contain ``apikey``/``nonce``
        nonce: Fresh, strictly increasing nonce for this request

    Returns:
        SignedRequest with ``base_uri?params&apikey=..&nonce=..`` and its MAC

    Raises:
        InvalidCredentialError: If no API key or secret is configured
        ValidationError: If parameters already contain a reserved name
    """
    if credentials is None or not credentials.api_key or not credentials.api_secret:
        raise InvalidCredentialError("API key and secret are required for authenticated requests")

    reserved = [name for name in RESERVED_AUTH_PARAMS if name in parameters]
    if reserved:
        raise ValidationError(f"Reserved authentication parameters supplied: {reserved}")

    signed_parameters = dict(parameters)
    signed_parameters[APIKEY_PARAM] = credentials.api_key
    signed_parameters[NONCE_PARAM] = str(nonce)

    complete_uri = f"{base_uri}?{encode_parameters(signed_parameters)}"
    return SignedRequest(uri=complete_uri, signature=compute_signature(credentials.secret_bytes, complete_uri))


def build_request(
    method: str,
    base_uri: str,
    parameters: Mapping[str, str],
    requires_auth: bool,
    credentials: Optional[Credentials] = None,
    nonce: Optional[int] = None,
) -> RequestDescriptor:
    """
    Compose a request descriptor, signing it when ``requires_auth`` is set.

    The signature travels in the ``apisign`` header, never in the query string.
    """
    if not requires_auth:
        return RequestDescriptor(method=method, uri=f"{base_uri}?{encode_parameters(parameters)}")

    if nonce is None:
        raise ValidationError("A nonce is required for authenticated requests")

    signed = sign_request(credentials, base_uri, parameters, nonce)
    return RequestDescriptor(
        method=method,
        uri=signed.uri,
        headers={SIGN_HEADER_NAME: signed.signature},
    )
