r"""Synchronous retry executor for HTTP requests."""

from __future__ import annotations

__all__ = ["RetryExecutor"]

import time
from typing import TYPE_CHECKING

from esplora_client.retry.executor_core import RetryState

if TYPE_CHECKING:
    from esplora_client.retry.config import RetryConfig
    from esplora_client.transport import BaseTransport, RawResponse, Request


class RetryExecutor:
    """Executes HTTP requests with automatic retry logic.

    The executor sends the request through the transport and, as long as
    the response status is retryable and the retry budget is not spent,
    sleeps for the backoff delay and tries again. The last response is
    returned whatever its status code: turning it into a value or an
    error is the job of the response decoder.

    Transport failures are not retried and propagate immediately.

    Attributes:
        transport: The transport performing the HTTP attempts.
        config: Retry configuration.

    Example:
        ```pycon
        >>> import httpx
        >>> from esplora_client.retry import RetryConfig, RetryExecutor
        >>> from esplora_client.transport import HttpxTransport, Request
        >>> transport = HttpxTransport(
        ...     httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        ... )
        >>> executor = RetryExecutor(
        ...     transport, RetryConfig(max_retries=3, status_forcelist=(429,), base_delay=0.256)
        ... )
        >>> executor.execute(Request("GET", "https://example.com/blocks")).status
        200

        ```
    """

    def __init__(self, transport: BaseTransport, config: RetryConfig) -> None:
        self.transport = transport
        self.config = config

    def execute(
        self, request: Request, status_forcelist: tuple[int, ...] | None = None
    ) -> RawResponse:
        """Execute a request with automatic retry logic.

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
            response = self.transport.send(request)
            delay = state.next_delay(response)
            if delay is None:
                return response
            time.sleep(delay)
