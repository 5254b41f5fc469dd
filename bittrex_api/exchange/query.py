"""
Query string helpers.

Bittrex expects raw parameter values in the query string, so nothing here
URL-encodes values.
"""

import re
from typing import Any, Mapping, Optional


def format_value(value: Any) -> str:
    """Render a parameter value the way the exchange expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def set_param(uri: str, key: str, value: Any) -> str:
    """
    Insert or replace a ``key=value`` pair in the query string of a URI.

    Args:
        uri: URI with or without a query string
        key: Parameter name, matched case-insensitively
        value: Parameter value, inserted without URL-encoding

    Returns:
        The URI with the parameter set
    """
    pair = f"{key}={format_value(value)}"
    pattern = re.compile(r"([?&])" + re.escape(key) + r"=.*?(&|$)", re.IGNORECASE)

    if pattern.search(uri):
        # Only the first occurrence is replaced
        return pattern.sub(lambda m: m.group(1) + pair + m.group(2), uri, count=1)

    separator = "&" if "?" in uri else "?"
    return f"{uri}{separator}{pair}"


def set_params(uri: str, options: Optional[Mapping[str, Any]]) -> str:
    """
    Fold every entry of a mapping into a URI, in iteration order.

    Args:
        uri: Base URI
        options: Parameters to set (may be None)

    Returns:
        The URI with all parameters set
    """
    for key, value in (options or {}).items():
        uri = set_param(uri, key, value)
    return uri
