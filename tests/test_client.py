"""
Unit tests for the Bittrex client.

This module contains tests for the public, market and account operations
and for client configuration.
"""

import re
from unittest.mock import MagicMock, call

import pytest

from bittrex_api.exchange.auth import generate_signature
from bittrex_api.exchange.errors import ProtocolError
from bittrex_api.exchange.request import RequestDescriptor

BASE_URL = "https://api.example/api/v1.1"

PUBLIC_OPERATIONS = [
    ("get_markets", "/public/getmarkets"),
    ("get_currencies", "/public/getcurrencies"),
    ("get_ticker", "/public/getticker"),
    ("get_market_summaries", "/public/getmarketsummaries"),
    ("get_market_summary", "/public/getmarketsummary"),
    ("get_order_book", "/public/getorderbook"),
    ("get_market_history", "/public/getmarkethistory"),
]

AUTHENTICATED_OPERATIONS = [
    ("buy_limit", "/market/buylimit"),
    ("buy_market", "/market/buymarket"),
    ("sell_limit", "/market/selllimit"),
    ("sell_market", "/market/sellmarket"),
    ("cancel", "/market/cancel"),
    ("get_open_orders", "/market/getopenorders"),
    ("get_balances", "/account/getbalances"),
    ("get_balance", "/account/getbalance"),
    ("get_deposit_address", "/account/getdepositaddress"),
    ("get_deposit_history", "/account/getdeposithistory"),
    ("get_withdrawal_history", "/account/getwithdrawalhistory"),
    ("withdraw", "/account/withdraw"),
    ("get_order", "/account/getorder"),
    ("get_order_history", "/account/getorderhistory"),
]


def envelope(result=None, success=True, message=""):
    return {"success": success, "message": message, "result": result}


class TestBittrexClient:
    """Tests for the Bittrex API client."""

    @pytest.mark.asyncio
    async def test_get_ticker(self, make_client, sent_requests):
        """Test the ticker request and result."""
        ticker = {"Bid": 0.01, "Ask": 0.011, "Last": 0.0105}
        client = make_client(envelope(ticker))

        result = await client.get_ticker({"market": "BTC-LTC"})

        assert result == ticker
        request = sent_requests[0]
        assert request.method == "GET"
        assert str(request.url) == f"{BASE_URL}/public/getticker?market=BTC-LTC"
        assert "apisign" not in request.headers

    @pytest.mark.asyncio
    async def test_buy_limit_is_signed(self, make_client, sent_requests):
        """Test credentials lead the query and the request carries apisign."""
        client = make_client(envelope({"uuid": "e606d53c"}))

        result = await client.buy_limit({"market": "BTC-LTC", "quantity": 1, "rate": 0.01})

        assert result == {"uuid": "e606d53c"}
        uri = str(sent_requests[0].url)
        match = re.fullmatch(
            re.escape(f"{BASE_URL}/market/buylimit?apikey=test_key&nonce=")
            + r"(\d+)"
            + re.escape("&market=BTC-LTC&quantity=1&rate=0.01"),
            uri,
        )
        assert match is not None

        signed_part = f"{BASE_URL}/market/buylimit?apikey=test_key&nonce={match.group(1)}"
        apisign = sent_requests[0].headers["apisign"]
        assert apisign
        assert apisign == generate_signature(signed_part, "test_secret")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method, endpoint", PUBLIC_OPERATIONS)
    async def test_public_operations(self, make_client, sent_requests, method, endpoint):
        """Test public operations hit their endpoint without credentials."""
        client = make_client(envelope([]))

        assert await getattr(client, method)() == []

        assert str(sent_requests[0].url) == f"{BASE_URL}{endpoint}"
        assert "apisign" not in sent_requests[0].headers

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method, endpoint", AUTHENTICATED_OPERATIONS)
    async def test_authenticated_operations(
        self, make_client, sent_requests, method, endpoint
    ):
        """Test market and account operations are signed."""
        client = make_client(envelope({}))

        await getattr(client, method)({"currency": "BTC"})

        uri = str(sent_requests[0].url)
        assert uri.startswith(f"{BASE_URL}{endpoint}?apikey=test_key&nonce=")
        assert uri.endswith("&currency=BTC")
        assert sent_requests[0].headers["apisign"]

    @pytest.mark.asyncio
    async def test_callback_and_result(self, make_client):
        """Test the callback and the awaited value carry the same result."""
        client = make_client(envelope([{"Currency": "BTC", "Balance": 1.5}]))
        callback = MagicMock(return_value=None)

        result = await client.get_balances(callback=callback)

        assert result == [{"Currency": "BTC", "Balance": 1.5}]
        callback.assert_called_once_with(None, result)

    @pytest.mark.asyncio
    async def test_failure(self, make_client):
        """Test exchange errors reach both the caller and the callback."""
        client = make_client(envelope(None, success=False, message="INSUFFICIENT_FUNDS"))
        callback = MagicMock(return_value=None)

        with pytest.raises(ProtocolError, match="INSUFFICIENT_FUNDS"):
            await client.sell_limit({"market": "BTC-LTC"}, callback)

        assert isinstance(callback.call_args[0][0], ProtocolError)

    @pytest.mark.asyncio
    async def test_options_are_not_validated(self, make_client, sent_requests):
        """Test malformed options are forwarded verbatim."""
        client = make_client(envelope(None))

        await client.get_order_book({"market": "", "type": "sideways", "depth": -1})

        assert str(sent_requests[0].url).endswith("?market=&type=sideways&depth=-1")

    @pytest.mark.asyncio
    async def test_streaming_mode(self, make_client):
        """Test stream mode hands out each value through the callback."""
        client = make_client(content=b'{"a": 1}\n{"a": 2}\n', stream=True)
        callback = MagicMock(return_value=None)

        values = await client.get_market_summaries(callback=callback)

        assert values == [{"a": 1}, {"a": 2}]
        assert callback.call_args_list == [call(None, {"a": 1}), call(None, {"a": 2})]

    @pytest.mark.asyncio
    async def test_iter_stream(self, make_client, sent_requests):
        """Test the lazy stream iterator."""
        client = make_client(content=b"1 2 3")

        values = [v async for v in client.iter_stream("/public/getmarkets")]

        assert values == [1, 2, 3]
        assert str(sent_requests[0].url) == f"{BASE_URL}/public/getmarkets"

    @pytest.mark.asyncio
    async def test_send_custom_request(self, make_client, sent_requests):
        """Test the raw request escape hatch with and without credentials."""
        client = make_client(envelope("ok"))

        await client.send_custom_request(f"{BASE_URL}/public/getmarkets?x=1")
        await client.send_custom_request(
            f"{BASE_URL}/account/getbalances", credentials=True
        )

        assert str(sent_requests[0].url) == f"{BASE_URL}/public/getmarkets?x=1"
        assert "apisign" not in sent_requests[0].headers
        assert str(sent_requests[1].url).startswith(
            f"{BASE_URL}/account/getbalances?apikey=test_key&nonce="
        )
        assert sent_requests[1].headers["apisign"]

    @pytest.mark.asyncio
    async def test_nonces_never_decrease(self, make_client, sent_requests):
        """Test consecutive signed calls use non-decreasing nonces."""
        client = make_client(envelope({}))

        for _ in range(3):
            await client.get_balances()

        nonces = [int(re.search(r"nonce=(\d+)", str(r.url)).group(1)) for r in sent_requests]
        assert nonces == sorted(nonces)

    @pytest.mark.asyncio
    async def test_async_context_manager(self, make_client):
        """Test the client closes its dispatcher on exit."""
        client = make_client(envelope(1))

        async with client as entered:
            assert entered is client
            assert await client.get_markets() == 1

    @pytest.mark.asyncio
    async def test_send_custom_descriptor(self, make_client, sent_requests):
        """Test a prepared descriptor is sent as is over the pooled connection."""
        client = make_client(envelope("ok"))
        descriptor = RequestDescriptor(uri=f"{BASE_URL}/public/getmarkets", agent=True)
        descriptor.headers["X-Trace"] = "abc"
        callback = MagicMock(return_value=None)

        result = await client.send_custom_request(descriptor, callback)
        await client.send_custom_request(descriptor)

        assert result == "ok"
        callback.assert_called_once_with(None, "ok")
        assert len(sent_requests) == 2
        assert str(sent_requests[0].url) == f"{BASE_URL}/public/getmarkets"
        assert sent_requests[0].headers["X-Trace"] == "abc"
        assert "apisign" not in sent_requests[0].headers
        assert client._dispatcher._client is not None

        await client.aclose()
        assert client._dispatcher._client is None

    @pytest.mark.asyncio
    async def test_empty_stream(self, make_client):
        """Test an empty streamed body yields no values and no error."""
        client = make_client(content=b"", stream=True)
        callback = MagicMock(return_value=None)

        assert await client.get_markets(callback=callback) == []
        callback.assert_not_called()
