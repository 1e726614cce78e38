r"""Backoff delay calculation utilities.

This module provides the function computing the delay before the next
retry from the previous delay and the server's Retry-After header.
"""

from __future__ import annotations

__all__ = ["compute_next_delay"]

import logging
from typing import TYPE_CHECKING

from esplora_client.utils.retry_after import parse_retry_after

if TYPE_CHECKING:
    from datetime import datetime

logger: logging.Logger = logging.getLogger(__name__)


def compute_next_delay(
    retry_after_header: str | None,
    previous_delay: float,
    now: datetime | None = None,
) -> float:
    """Compute the delay before the next retry attempt.

    The sleep time is calculated as follows:
    1. If the Retry-After header parses as an HTTP-date, wait until that
       date (0 if the date is in the past).
    2. Else, if it parses as an integer, wait that many seconds.
    3. Otherwise (header absent or unparseable), double the previous delay.

    Args:
        retry_after_header: The value of the Retry-After header, or None.
        previous_delay: The previous delay in seconds. For the first retry
            this is the configured base delay.
        now: The current time used to resolve HTTP-dates. Defaults to
            the current UTC time.

    Returns:
        The delay in seconds before the next attempt.

    Example:
        ```pycon
        >>> from esplora_client.utils import compute_next_delay
        >>> compute_next_delay(None, 0.256)
        0.512
        >>> compute_next_delay("3600", 0.256)
        3600.0
        >>> compute_next_delay("bogus", 1.0)
        2.0

        ```
    """
    retry_after = parse_retry_after(retry_after_header, now=now)
    if retry_after is not None:
        logger.debug(f"Using Retry-After header value: {retry_after:.2f}s")
        return retry_after
    return previous_delay * 2
