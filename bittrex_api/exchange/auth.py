"""
Authentication utilities for Bittrex API.

This module provides the HMAC-SHA512 signature, the nonce generator and
the credential signer used for every market and account endpoint.
"""

import hmac
import hashlib
import time
from typing import Callable, Optional, Union

from .query import set_param
from .request import RequestDescriptor


def generate_signature(message: str, api_secret: str) -> str:
    """
    Generate HMAC SHA512 signature for Bittrex API authentication.

    Args:
        message: The full request URI to sign
        api_secret: The API secret key

    Returns:
        Hexadecimal signature string
    """
    return hmac.new(
        api_secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha512
    ).hexdigest()


class NonceGenerator:
    """
    Source of UNIX-second nonces that never go backwards.

    Two calls within the same second get the same value; a clock that steps
    back keeps returning the last value handed out.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0

    def __call__(self) -> int:
        nonce = max(int(self._clock()), self._last)
        self._last = nonce
        return nonce


def sign_request(
    target: Union[str, RequestDescriptor],
    api_key: str,
    api_secret: str,
    nonce: Optional[Callable[[], int]] = None,
) -> RequestDescriptor:
    """
    Add credentials to a request and sign it.

    ``apikey`` is inserted before ``nonce``; the signature is computed over
    the resulting URI and sent in the ``apisign`` header.

    Args:
        target: Bare URI or a descriptor whose URI should be signed
        api_key: The API key
        api_secret: The API secret key
        nonce: Nonce source (defaults to current UNIX seconds)

    Returns:
        A new descriptor carrying the signed URI and the ``apisign`` header
    """
    if isinstance(target, RequestDescriptor):
        descriptor = target.model_copy(deep=True)
    else:
        descriptor = RequestDescriptor(uri=target)

    nonce_value = nonce() if nonce is not None else int(time.time())

    uri = set_param(descriptor.uri, "apikey", api_key)
    uri = set_param(uri, "nonce", nonce_value)

    descriptor.headers["apisign"] = generate_signature(uri, api_secret)
    descriptor.uri = uri

    return descriptor
