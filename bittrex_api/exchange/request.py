"""
Request descriptors.

A descriptor holds everything the dispatcher needs to perform one HTTP call.
Every build returns a new descriptor; nothing is shared between calls.
"""

from typing import Any, Callable, Dict, Mapping, Optional, Union

from pydantic import BaseModel, Field

from .query import set_params

USER_AGENT = "Mozilla/4.0 (compatible; Bittrex API Python client)"


def default_headers() -> Dict[str, str]:
    """Headers sent with every request."""
    return {
        "User-Agent": USER_AGENT,
        "Content-type": "application/x-www-form-urlencoded",
    }


class RequestDescriptor(BaseModel):
    """A fully assembled request, ready for the transport."""

    method: str = "GET"
    uri: str
    headers: Dict[str, str] = Field(default_factory=default_headers)
    # False opens a fresh connection per request, True reuses the pooled one
    agent: bool = False


Signer = Callable[[Any], RequestDescriptor]


def build_request(
    base_url: str,
    endpoint: str,
    options: Optional[Mapping[str, Any]] = None,
    signer: Optional[Signer] = None,
) -> RequestDescriptor:
    """
    Build the descriptor for an endpoint.

    For authenticated endpoints the bare endpoint URI is signed first and the
    caller's options are appended afterwards, so ``apikey`` and ``nonce``
    always lead the query string and ``apisign`` covers only the URI as it
    was when signed.

    Args:
        base_url: API root, e.g. ``https://bittrex.com/api/v1.1``
        endpoint: Endpoint template, e.g. ``/public/getticker``
        options: Query parameters for the call
        signer: Credential signer; None for public endpoints

    Returns:
        A new request descriptor
    """
    uri = f"{base_url}{endpoint}"

    if signer is None:
        descriptor = RequestDescriptor(uri=uri)
    else:
        descriptor = signer(uri)

    descriptor.uri = set_params(descriptor.uri, options)
    return descriptor


def build_custom_request(
    request_string: Union[str, RequestDescriptor], signer: Optional[Signer] = None
) -> RequestDescriptor:
    """
    Build a descriptor from a literal URI or an existing descriptor.

    Args:
        request_string: Complete request URI, or a descriptor to send as is
        signer: Credential signer when the call needs credentials

    Returns:
        A new request descriptor
    """
    if signer is not None:
        return signer(request_string)
    if isinstance(request_string, RequestDescriptor):
        return request_string.model_copy(deep=True)
    return RequestDescriptor(uri=request_string)
