"""
Pytest configuration file.

This module contains fixtures that can be used across all test files.
"""

import pytest
import httpx

from bittrex_api.exchange.bittrex import BittrexClient

BASE_URL = "https://api.example/api/v1.1"


def envelope(result=None, success=True, message=""):
    """Build a standard exchange response body."""
    return {"success": success, "message": message, "result": result}


@pytest.fixture
def sent_requests():
    """Requests seen by the mock transport."""
    return []


@pytest.fixture
def make_transport(sent_requests):
    """Create a mock httpx transport answering every request the same way."""

    def factory(status_code=200, payload=None, content=None, error=None):
        def handler(request):
            sent_requests.append(request)
            if error is not None:
                raise error
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, json=payload)

        return httpx.MockTransport(handler)

    return factory


@pytest.fixture
def make_client(make_transport):
    """Create a BittrexClient wired to a mock transport."""

    def factory(payload=None, status_code=200, content=None, error=None, **options):
        transport = make_transport(
            status_code=status_code, payload=payload, content=content, error=error
        )
        return BittrexClient(
            api_key="test_key",
            api_secret="test_secret",
            transport=transport,
            baseUrl=BASE_URL,
            **options,
        )

    return factory
