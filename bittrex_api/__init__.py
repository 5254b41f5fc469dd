"""
Python client for the Bittrex v1.1 HTTP API.

This package provides an asyncio client that builds signed requests for the
public, market and account endpoints and dispatches them in buffered or
streaming mode.
"""

from .config import ClientOptions, setup_logging
from .exchange import (
    BittrexClient,
    BittrexError,
    ParseError,
    ProtocolError,
    RequestDescriptor,
    TransportError,
)

__version__ = "0.4.0"

__all__ = [
    "BittrexClient",
    "BittrexError",
    "ClientOptions",
    "ParseError",
    "ProtocolError",
    "RequestDescriptor",
    "TransportError",
    "setup_logging",
]
