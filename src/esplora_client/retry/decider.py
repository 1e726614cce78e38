r"""Retry decision logic for determining whether to retry requests.

This module provides the RetryDecider class that decides whether a
response status code warrants another attempt.
"""

from __future__ import annotations

__all__ = ["RetryDecider", "is_retryable"]

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Collection

logger: logging.Logger = logging.getLogger(__name__)


def is_retryable(status_code: int, status_forcelist: Collection[int]) -> bool:
    """Indicate whether a status code belongs to the retryable set.

    Args:
        status_code: The HTTP status code of the response.
        status_forcelist: The configured retryable status codes.

    Returns:
        ``True`` if the status code is retryable.

    Example:
        ```pycon
        >>> from esplora_client.retry.decider import is_retryable
        >>> is_retryable(503, (429, 500, 503))
        True
        >>> is_retryable(404, (429, 500, 503))
        False

        ```
    """
    return status_code in status_forcelist


class RetryDecider:
    """Decides whether a request should be retried.

    Args:
        status_forcelist: Tuple of retryable HTTP status codes.
    """

    def __init__(self, status_forcelist: tuple[int, ...]) -> None:
        self.status_forcelist = status_forcelist

    def should_retry(self, status_code: int, attempt: int, max_retries: int) -> bool:
        """Determine if a response should trigger a retry.

        Args:
            status_code: The HTTP status code of the response.
            attempt: Number of retries already performed.
            max_retries: Maximum number of retries.

        Returns:
            ``True`` if the status is retryable and the budget is not spent.
        """
        if not is_retryable(status_code, self.status_forcelist):
            return False
        if attempt >= max_retries:
            logger.debug(f"Status {status_code} is retryable but {max_retries} retries are spent")
            return False
        return True
