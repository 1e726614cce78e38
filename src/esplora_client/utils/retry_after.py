r"""Retry-After header parsing utilities.

This module provides functions for parsing the Retry-After header value
from HTTP responses according to RFC 7231.
"""

from __future__ import annotations

__all__ = ["parse_retry_after"]

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

logger: logging.Logger = logging.getLogger(__name__)


def parse_retry_after(
    retry_after_header: str | None, now: datetime | None = None
) -> float | None:
    """Parse the Retry-After header value from an HTTP response.

    The Retry-After header can be specified in two formats according to RFC 7231:
    1. An HTTP-date in RFC 5322 format (e.g., "Wed, 21 Oct 2015 07:28:00 GMT")
    2. An integer representing the number of seconds to wait (e.g., "120")

    Args:
        retry_after_header: The value of the Retry-After header as a string,
            or None if the header is not present in the response.
        now: The current time used to resolve HTTP-dates. Defaults to
            ``datetime.now(timezone.utc)``.

    Returns:
        The number of seconds to wait before retrying, or None if:
        - The header is not present (retry_after_header is None)
        - The header value cannot be parsed as either an HTTP-date or integer
        For HTTP-date format, dates in the past are clamped to 0.0.

    Example:
        ```pycon
        >>> from datetime import datetime, timezone
        >>> from esplora_client.utils import parse_retry_after
        >>> parse_retry_after("120")
        120.0
        >>> now = datetime(2015, 10, 21, 7, 28, tzinfo=timezone.utc)
        >>> parse_retry_after("Wed, 21 Oct 2015 09:28:00 GMT", now=now)
        7200.0
        >>> parse_retry_after(None) is None
        True
        >>> parse_retry_after("3600!") is None
        True

        ```
    """
    if retry_after_header is None:
        return None

    value = retry_after_header.strip()
    try:
        retry_date: datetime = parsedate_to_datetime(value)
    except (ValueError, TypeError, IndexError, OverflowError):
        pass
    else:
        if retry_date.tzinfo is None:
            retry_date = retry_date.replace(tzinfo=timezone.utc)
        current = now if now is not None else datetime.now(timezone.utc)
        return max(0.0, (retry_date - current).total_seconds())

    if value.isascii() and value.isdigit():
        return float(value)

    logger.debug(f"Failed to parse Retry-After header: {retry_after_header!r}")
    return None
