"""
Request dispatching.

This module executes request descriptors over HTTP, either buffering the
whole response and unwrapping the exchange envelope, or streaming the body
through an incremental JSON parser and handing out each value as it arrives.
"""

import inspect
import json
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, List, Optional, Union

import httpx
import ijson
from pydantic import BaseModel, ConfigDict

from bittrex_api.config.options import ClientOptions

from .errors import UNKNOWN_ERROR, BittrexError, ParseError, ProtocolError, TransportError
from .request import RequestDescriptor

logger = logging.getLogger(__name__)

Callback = Callable[[Optional[BaseException], Any], Union[None, Awaitable[None]]]


class Envelope(BaseModel):
    """Standard response wrapper returned by every endpoint."""

    model_config = ConfigDict(extra="allow")

    success: Any = False
    message: Any = None
    result: Any = None


async def notify(
    callback: Optional[Callback], error: Optional[BaseException], result: Any
) -> None:
    """
    Invoke a completion callback with ``(error, result)``.

    Coroutine callbacks are awaited.
    """
    if callback is None:
        return

    outcome = callback(error, result)
    if inspect.isawaitable(outcome):
        await outcome


def _drain(events: List[Any]) -> List[Any]:
    values = list(events)
    del events[:]
    return values


class Dispatcher:
    """
    Executes request descriptors against the exchange.

    Each call runs to either a result or an error; there are no retries and
    the transport's default timeout applies.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize the dispatcher.

        Args:
            transport: Optional httpx transport, mainly for tests
        """
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @asynccontextmanager
    async def _session(self, descriptor: RequestDescriptor):
        if descriptor.agent:
            if self._client is None:
                self._client = httpx.AsyncClient(transport=self._transport)
            yield self._client
        else:
            async with httpx.AsyncClient(transport=self._transport) as client:
                yield client

    async def aclose(self) -> None:
        """Close the pooled connection, if one was opened."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def dispatch(
        self,
        descriptor: RequestDescriptor,
        options: ClientOptions,
        callback: Optional[Callback] = None,
    ) -> Any:
        """
        Execute a request.

        In buffered mode the envelope's ``result`` is returned (or its JSON
        text when ``cleartext`` is set). In streaming mode every parsed JSON
        value is passed to the callback as it arrives and the list of all
        values is returned once the stream ends.

        Args:
            descriptor: Request to execute
            options: Client options read for this call
            callback: Optional ``callback(error, result)``

        Returns:
            The call's result

        Raises:
            TransportError: If the HTTP request fails
            ProtocolError: If the exchange response is unusable
        """
        if options.stream:
            return await self._dispatch_stream(descriptor, options, callback)
        return await self._dispatch_buffered(descriptor, options, callback)

    async def _dispatch_buffered(
        self,
        descriptor: RequestDescriptor,
        options: ClientOptions,
        callback: Optional[Callback],
    ) -> Any:
        start = time.monotonic()

        try:
            response = await self._send(descriptor)
            result = self._unwrap(response, options.cleartext)
        except BittrexError as e:
            await self._fail(e, callback)
            raise

        if options.verbose:
            logger.info(
                f"requested from {response.url} in: {time.monotonic() - start:.3f}s"
            )

        await notify(callback, None, result)
        return result

    async def _dispatch_stream(
        self,
        descriptor: RequestDescriptor,
        options: ClientOptions,
        callback: Optional[Callback],
    ) -> List[Any]:
        start = time.monotonic()
        values = []

        stream = self.iter_stream(descriptor)
        try:
            async for value in stream:
                values.append(value)
                await notify(callback, None, value)

                if options.verbose:
                    logger.info(
                        f"streamed from {descriptor.uri} in: {time.monotonic() - start:.3f}s"
                    )
        except BittrexError as e:
            await self._fail(e, callback)
            raise
        finally:
            await stream.aclose()

        return values

    async def iter_stream(self, descriptor: RequestDescriptor) -> AsyncIterator[Any]:
        """
        Stream a request and yield each JSON value in the body, in order.

        Args:
            descriptor: Request to execute

        Yields:
            Parsed JSON values
        """
        events = ijson.sendable_list()
        parser = ijson.items_coro(events, "", multiple_values=True, use_float=True)
        received = False

        try:
            async with self._session(descriptor) as client:
                async with client.stream(
                    descriptor.method, descriptor.uri, headers=descriptor.headers
                ) as response:
                    if response.status_code != 200:
                        await response.aread()
                        self._unwrap(response, cleartext=False)

                    async for chunk in response.aiter_bytes():
                        received = received or bool(chunk.strip())
                        parser.send(chunk)
                        for value in _drain(events):
                            yield value

            # A body without any JSON text carries zero values
            if received:
                parser.close()
                for value in _drain(events):
                    yield value
        except httpx.HTTPError as e:
            raise TransportError(str(e) or type(e).__name__) from e
        except ijson.JSONError as e:
            raise ParseError(f"Malformed JSON in stream from {descriptor.uri}: {e}") from e

    async def _send(self, descriptor: RequestDescriptor) -> httpx.Response:
        try:
            async with self._session(descriptor) as client:
                return await client.request(
                    descriptor.method, descriptor.uri, headers=descriptor.headers
                )
        except httpx.HTTPError as e:
            raise TransportError(str(e) or type(e).__name__) from e

    def _unwrap(self, response: httpx.Response, cleartext: bool) -> Any:
        """
        Check a buffered response and extract its result.

        Args:
            response: Response with its body loaded
            cleartext: Return the result as JSON text

        Returns:
            The envelope's result
        """
        status = response.status_code

        if not response.content:
            raise ProtocolError(UNKNOWN_ERROR, status_code=status)

        try:
            payload = response.json()
        except ValueError as e:
            if status != 200:
                raise ProtocolError(UNKNOWN_ERROR, status_code=status) from e
            raise ParseError(
                f"Malformed JSON in response from {response.url}: {e}",
                status_code=status,
            ) from e

        if not isinstance(payload, dict) or not payload:
            raise ProtocolError(UNKNOWN_ERROR, status_code=status)

        envelope = Envelope.model_validate(payload)

        if status != 200 or not envelope.success:
            raise ProtocolError(str(envelope.message or UNKNOWN_ERROR), status_code=status)

        if cleartext:
            return json.dumps(envelope.result)
        return envelope.result

    async def _fail(self, error: BittrexError, callback: Optional[Callback]) -> None:
        logger.error(f"Bittrex request failed: {error}")
        await notify(callback, error, None)
