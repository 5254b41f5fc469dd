"""
Exchange module for interacting with the Bittrex API.

This module provides the request pipeline (query assembly, signing,
descriptor building and dispatch) and the client exposing one coroutine
per exchange endpoint.
"""

from .bittrex import BittrexClient
from .errors import BittrexError, ParseError, ProtocolError, TransportError
from .request import RequestDescriptor

__all__ = [
    "BittrexClient",
    "BittrexError",
    "ParseError",
    "ProtocolError",
    "RequestDescriptor",
    "TransportError",
]
