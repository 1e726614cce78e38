r"""Callback types for observing the retry loop.

The executors accept an optional ``on_retry`` callable. It is invoked
with a ``RetryInfo`` right before the executor sleeps, which makes it a
convenient hook for metrics or alerting on rate limiting.

Example:
    ```pycon
    >>> from esplora_client import ClientConfig
    >>> from esplora_client.callbacks import RetryInfo
    >>> def log_retry(retry_info: RetryInfo) -> None:
    ...     print(f"Retry {retry_info.attempt}/{retry_info.max_retries}")
    ...
    >>> config = ClientConfig("https://blockstream.info/api", on_retry=log_retry)

    ```
"""

from __future__ import annotations

__all__ = ["RetryInfo", "invoke_on_retry"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True)
class RetryInfo:
    """Information passed to the ``on_retry`` callback.

    Attributes:
        url: The URL being requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The number of the retry about to happen (1-indexed).
        max_retries: Maximum number of retry attempts configured.
        wait_time: The sleep time in seconds before this retry.
        status_code: The HTTP status code that triggered the retry.
    """

    url: str
    method: str
    attempt: int
    max_retries: int
    wait_time: float
    status_code: int


def invoke_on_retry(
    on_retry: Callable[[RetryInfo], None] | None,
    *,
    url: str,
    method: str,
    attempt: int,
    max_retries: int,
    wait_time: float,
    status_code: int,
) -> None:
    """Invoke the ``on_retry`` callback if one is configured.

    Args:
        on_retry: The callback, or ``None``.
        url: The URL being requested.
        method: The HTTP method.
        attempt: Current attempt number (0-indexed).
        max_retries: Maximum number of retries.
        wait_time: The sleep time in seconds before the retry.
        status_code: The HTTP status code that triggered the retry.
    """
    if on_retry is None:
        return
    on_retry(
        RetryInfo(
            url=url,
            method=method,
            attempt=attempt + 1,
            max_retries=max_retries,
            wait_time=wait_time,
            status_code=status_code,
        )
    )
