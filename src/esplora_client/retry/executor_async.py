r"""Asynchronous retry executor for HTTP requests."""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor"]

import asyncio
from typing import TYPE_CHECKING

from esplora_client.retry.executor_core import RetryState

if TYPE_CHECKING:
    from esplora_client.retry.config import RetryConfig
    from esplora_client.transport import AsyncBaseTransport, RawResponse, Request


class AsyncRetryExecutor:
    """Executes async HTTP requests with automatic retry logic.

    This is the asynchronous twin of ``RetryExecutor``: the decisions are
    made by the same ``RetryState`` and the waits use ``asyncio.sleep``
    so that other tasks run during backoff.

    Cancelling the enclosing task at any await point (transport call or
    backoff sleep) aborts the loop: ``asyncio.CancelledError`` is never
    caught here.

    Attributes:
        transport: The transport performing the HTTP attempts.
        config: Retry configuration.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from esplora_client.retry import AsyncRetryExecutor, RetryConfig
        >>> from esplora_client.transport import AsyncHttpxTransport, Request
        >>> async def main():
        ...     client = httpx.AsyncClient(
        ...         transport=httpx.MockTransport(lambda r: httpx.Response(200))
        ...     )
        ...     executor = AsyncRetryExecutor(
        ...         AsyncHttpxTransport(client),
        ...         RetryConfig(max_retries=3, status_forcelist=(429,), base_delay=0.256),
        ...     )
        ...     response = await executor.execute(Request("GET", "https://example.com/blocks"))
        ...     return response.status
        ...
        >>> asyncio.run(main())
        200

        ```
    """

    def __init__(self, transport: AsyncBaseTransport, config: RetryConfig) -> None:
        self.transport = transport
        self.config = config

    async def execute(
        self, request: Request, status_forcelist: tuple[int, ...] | None = None
    ) -> RawResponse:
        """Execute an async request with automatic retry logic.

        Attempts the request up to max_retries + 1 times.

        Args:
            request: The request to send.
            status_forcelist: Optional override of the configured retryable
                status codes, e.g. a narrower set for POST requests.

        Returns:
            The final response.

        Raises:
            EsploraTransportError: If the transport fails.
        """
        state = RetryState(self.config, request, status_forcelist)
        while True:
            response = await self.transport.send(request)
            delay = state.next_delay(response)
            if delay is None:
                return response
            await asyncio.sleep(delay)
