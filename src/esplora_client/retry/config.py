r"""Configuration dataclass for retry behavior."""

from __future__ import annotations

__all__ = ["RetryConfig"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from esplora_client.callbacks import RetryInfo


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior.

    Attributes:
        max_retries: Maximum number of retry attempts.
        status_forcelist: Tuple of HTTP status codes that trigger retries.
        base_delay: Initial backoff delay in seconds.
        max_total_time: Optional maximum total time budget for all retries.
        max_wait_time: Optional maximum backoff delay cap, also applied
            to the server's Retry-After value.
        on_retry: Optional callback invoked before each retry sleep.
    """

    max_retries: int
    status_forcelist: tuple[int, ...]
    base_delay: float
    max_total_time: float | None = None
    max_wait_time: float | None = None
    on_retry: Callable[[RetryInfo], None] | None = None
