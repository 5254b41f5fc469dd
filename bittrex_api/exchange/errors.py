"""Exceptions raised by the Bittrex client."""

from typing import Optional

UNKNOWN_ERROR = "An unknown error occurred when performing API request"


class BittrexError(Exception):
    """Base exception for Bittrex API calls."""

    pass


class TransportError(BittrexError):
    """Exception raised when the HTTP request itself fails."""

    pass


class ProtocolError(BittrexError):
    """
    Exception raised when the exchange answers with an unusable response.

    Covers non-200 status codes, empty bodies, empty envelopes and envelopes
    with ``success`` set to false.
    """

    def __init__(self, message: str = UNKNOWN_ERROR, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ParseError(ProtocolError):
    """Exception raised when a response body is not valid JSON."""

    pass
