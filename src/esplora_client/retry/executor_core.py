r"""Shared core logic for retry executors.

The blocking and asynchronous executors only differ in how they send a
request and how they wait. Everything else (budget accounting, retry
classification, backoff and deadline) lives in ``RetryState`` so that
both executors make the exact same decisions.
"""

from __future__ import annotations

__all__ = ["RetryState"]

import logging
import time
from typing import TYPE_CHECKING

from esplora_client.callbacks import invoke_on_retry
from esplora_client.retry.decider import RetryDecider
from esplora_client.utils.backoff import compute_next_delay

if TYPE_CHECKING:
    from esplora_client.retry.config import RetryConfig
    from esplora_client.transport import RawResponse, Request

logger: logging.Logger = logging.getLogger(__name__)


class RetryState:
    """Bookkeeping of one logical call.

    A new instance is created for every call and discarded at its end,
    so concurrent calls never share backoff state.

    Args:
        config: The retry configuration.
        request: The request being executed, used for logging and callbacks.
        status_forcelist: Optional override of the retryable status codes.

    Example:
        ```pycon
        >>> from esplora_client.retry import RetryConfig, RetryState
        >>> from esplora_client.transport import RawResponse, Request
        >>> config = RetryConfig(max_retries=1, status_forcelist=(503,), base_delay=1.0)
        >>> state = RetryState(config, Request("GET", "https://example.com/blocks"))
        >>> state.next_delay(RawResponse(status=503))
        2.0
        >>> state.next_delay(RawResponse(status=503)) is None
        True

        ```
    """

    def __init__(
        self,
        config: RetryConfig,
        request: Request,
        status_forcelist: tuple[int, ...] | None = None,
    ) -> None:
        self.config = config
        self.request = request
        self.decider = RetryDecider(
            config.status_forcelist if status_forcelist is None else status_forcelist
        )
        self.attempt = 0
        self.delay = config.base_delay
        self.start_time = time.monotonic()

    def next_delay(self, response: RawResponse) -> float | None:
        """Decide what to do with the response of the last attempt.

        Args:
            response: The response of the last attempt.

        Returns:
            The number of seconds to wait before the next attempt, or
            ``None`` if the response is final.
        """
        method, url = self.request.method, self.request.url
        if not self.decider.should_retry(response.status, self.attempt, self.config.max_retries):
            return None

        delay = compute_next_delay(response.retry_after, self.delay)
        if self.config.max_wait_time is not None and delay > self.config.max_wait_time:
            logger.debug(
                f"{method} to {url}: capping wait of {delay:.2f}s to "
                f"max_wait_time={self.config.max_wait_time:.2f}s"
            )
            delay = self.config.max_wait_time
        if self.config.max_total_time is not None:
            elapsed = time.monotonic() - self.start_time
            if elapsed + delay > self.config.max_total_time:
                logger.debug(
                    f"{method} to {url}: not retrying status {response.status}, "
                    f"waiting {delay:.2f}s would exceed max_total_time="
                    f"{self.config.max_total_time:.2f}s"
                )
                return None

        invoke_on_retry(
            self.config.on_retry,
            url=url,
            method=method,
            attempt=self.attempt,
            max_retries=self.config.max_retries,
            wait_time=delay,
            status_code=response.status,
        )
        logger.debug(
            f"{method} to {url}: status {response.status}, retry "
            f"{self.attempt + 1}/{self.config.max_retries} in {delay:.2f}s"
        )
        # A zero Retry-After must not zero the following backoff delays
        self.delay = max(delay, self.config.base_delay)
        self.attempt += 1
        return delay
