"""
Bittrex API client implementation.

This module provides a client for the Bittrex v1.1 REST API: public market
data, market (trading) calls and account calls. Every call returns its
result when awaited and can also report it through a ``callback(error,
result)`` completion handler.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Union

import httpx

from bittrex_api.config.options import ClientOptions

from .auth import NonceGenerator, sign_request
from .dispatch import Callback, Dispatcher
from .request import RequestDescriptor, build_custom_request, build_request

logger = logging.getLogger(__name__)

Options = Optional[Mapping[str, Any]]


class BittrexClient:
    """
    Client for interacting with the Bittrex API.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        options: Optional[ClientOptions] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **overrides: Any,
    ):
        """
        Initialize the Bittrex client.

        Args:
            api_key: API key for authenticated endpoints
            api_secret: API secret for authenticated endpoints
            options: Base options (defaults to ``ClientOptions()``)
            transport: Optional httpx transport used for every request
            **overrides: Further options, e.g. ``baseUrl`` or ``stream``
        """
        values: Dict[str, Any] = dict(overrides)
        if api_key is not None:
            values["api_key"] = api_key
        if api_secret is not None:
            values["api_secret"] = api_secret

        self._options = (options or ClientOptions()).merge(values)
        self._nonce = NonceGenerator()
        self._dispatcher = Dispatcher(transport=transport)

    @property
    def settings(self) -> ClientOptions:
        """Current client options."""
        return self._options

    def options(self, **overrides: Any) -> ClientOptions:
        """
        Overlay options on the current configuration.

        Args:
            **overrides: Options such as ``baseUrl``, ``apiKey``, ``verbose``

        Returns:
            The updated options
        """
        return self.set_options(overrides)

    def set_options(self, overrides: Mapping[str, Any]) -> ClientOptions:
        """
        Overlay a mapping of options on the current configuration.

        Args:
            overrides: Partial mapping of options

        Returns:
            The updated options
        """
        self._options = self._options.merge(overrides)
        logger.debug(f"Client options updated: {sorted(overrides)}")
        return self._options

    async def aclose(self) -> None:
        await self._dispatcher.aclose()

    async def __aenter__(self) -> "BittrexClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def _sign(self, target: Any) -> RequestDescriptor:
        return sign_request(
            target, self._options.api_key, self._options.api_secret, self._nonce
        )

    def _build(
        self, endpoint: str, options: Options, authenticated: bool
    ) -> RequestDescriptor:
        return build_request(
            self._options.base_url,
            endpoint,
            options,
            signer=self._sign if authenticated else None,
        )

    async def _call(
        self,
        endpoint: str,
        options: Options,
        callback: Optional[Callback],
        authenticated: bool = False,
    ) -> Any:
        # Options are read once per call
        settings = self._options
        descriptor = self._build(endpoint, options, authenticated)
        return await self._dispatcher.dispatch(descriptor, settings, callback)

    async def send_custom_request(
        self,
        request_string: Union[str, RequestDescriptor],
        callback: Optional[Callback] = None,
        credentials: bool = False,
    ) -> Any:
        """
        Send a request to an arbitrary URI.

        Args:
            request_string: Complete request URI, or a prepared descriptor
            callback: Optional ``callback(error, result)``
            credentials: Sign the request with the API credentials

        Returns:
            The call's result
        """
        settings = self._options
        descriptor = build_custom_request(
            request_string, signer=self._sign if credentials else None
        )
        return await self._dispatcher.dispatch(descriptor, settings, callback)

    async def iter_stream(
        self, endpoint: str, options: Options = None, authenticated: bool = False
    ):
        """
        Stream an endpoint and yield each JSON value of the body.

        Args:
            endpoint: Endpoint template, e.g. ``/public/getmarketsummaries``
            options: Query parameters
            authenticated: Sign the request

        Yields:
            Parsed JSON values, in stream order
        """
        descriptor = self._build(endpoint, options, authenticated)
        async for value in self._dispatcher.iter_stream(descriptor):
            yield value

    # Public market data

    async def get_markets(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Get the open and available trading markets."""
        return await self._call("/public/getmarkets", options, callback)

    async def get_currencies(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Get all supported currencies."""
        return await self._call("/public/getcurrencies", options, callback)

    async def get_ticker(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """
        Get the current tick values for a market.

        Args:
            options: ``{"market": "BTC-LTC"}``
            callback: Optional ``callback(error, result)``

        Returns:
            Bid, ask and last price
        """
        return await self._call("/public/getticker", options, callback)

    async def get_market_summaries(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Get the last 24 hour summary of all active markets."""
        return await self._call("/public/getmarketsummaries", options, callback)

    async def get_market_summary(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Get the last 24 hour summary of one market (``market``)."""
        return await self._call("/public/getmarketsummary", options, callback)

    async def get_order_book(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """
        Get the order book for a market.

        Args:
            options: ``market`` and ``type`` (``buy``, ``sell`` or ``both``)
            callback: Optional ``callback(error, result)``

        Returns:
            Order book data
        """
        return await self._call("/public/getorderbook", options, callback)

    async def get_market_history(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Get the latest trades for a market (``market``)."""
        return await self._call("/public/getmarkethistory", options, callback)

    # Market (trading)

    async def buy_limit(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """
        Place a limit buy order.

        Args:
            options: ``market``, ``quantity`` and ``rate``
            callback: Optional ``callback(error, result)``

        Returns:
            The order uuid
        """
        return await self._call("/market/buylimit", options, callback, True)

    async def buy_market(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Place a market buy order (``market``, ``quantity``)."""
        return await self._call("/market/buymarket", options, callback, True)

    async def sell_limit(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """
        Place a limit sell order.

        Args:
            options: ``market``, ``quantity`` and ``rate``
            callback: Optional ``callback(error, result)``

        Returns:
            The order uuid
        """
        return await self._call("/market/selllimit", options, callback, True)

    async def sell_market(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Place a market sell order (``market``, ``quantity``)."""
        return await self._call("/market/sellmarket", options, callback, True)

    async def cancel(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Cancel an order (``uuid``)."""
        return await self._call("/market/cancel", options, callback, True)

    async def get_open_orders(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Get open orders, optionally for one ``market``."""
        return await self._call("/market/getopenorders", options, callback, True)

    # Account

    async def get_balances(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Get balances for all currencies."""
        return await self._call("/account/getbalances", options, callback, True)

    async def get_balance(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Get the balance of one ``currency``."""
        return await self._call("/account/getbalance", options, callback, True)

    async def get_deposit_address(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Get or generate the deposit address for a ``currency``."""
        return await self._call("/account/getdepositaddress", options, callback, True)

    async def get_deposit_history(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Get deposit history, optionally for one ``currency``."""
        return await self._call("/account/getdeposithistory", options, callback, True)

    async def get_withdrawal_history(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Get withdrawal history, optionally for one ``currency``."""
        return await self._call(
            "/account/getwithdrawalhistory", options, callback, True
        )

    async def withdraw(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """
        Request a withdrawal.

        Args:
            options: ``currency``, ``quantity``, ``address`` and optional
                ``paymentid``
            callback: Optional ``callback(error, result)``

        Returns:
            The withdrawal uuid
        """
        return await self._call("/account/withdraw", options, callback, True)

    async def get_order(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Get a single order (``uuid``)."""
        return await self._call("/account/getorder", options, callback, True)

    async def get_order_history(
        self, options: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Get order history, optionally for one ``market``."""
        return await self._call("/account/getorderhistory", options, callback, True)
