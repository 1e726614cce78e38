r"""Parameter validation utilities for the Esplora clients.

This module provides validation functions for the client and retry
parameters, and for the hashes that are interpolated into endpoint
paths.
"""

from __future__ import annotations

__all__ = [
    "validate_base_url",
    "validate_hash",
    "validate_retry_params",
    "validate_status_codes",
    "validate_timeout",
]

import re

_HASH_PATTERN = re.compile(r"[0-9a-fA-F]{64}")


def validate_timeout(timeout: float | None) -> None:
    """Validate timeout parameter.

    Args:
        timeout: Maximum seconds to wait for each server response,
            or ``None`` to disable the timeout.

    Raises:
        ValueError: If timeout is a numeric value <= 0.

    Example:
        ```pycon
        >>> from esplora_client.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(None)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if timeout is not None and timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_retry_params(
    max_retries: int,
    base_delay: float = 0.256,
    max_total_time: float | None = None,
    max_wait_time: float | None = None,
) -> None:
    """Validate retry parameters.

    Args:
        max_retries: Maximum number of retry attempts for failed requests.
            Must be >= 0. A value of 0 means no retries (only the initial attempt).
        base_delay: Initial backoff delay in seconds. Must be >= 0.
        max_total_time: Maximum total time budget for a call and all its
            retries. Must be > 0 if provided.
        max_wait_time: Maximum wait before a single retry. Must be > 0 if
            provided.

    Raises:
        ValueError: If max_retries or base_delay are negative,
            or if max_total_time is non-positive or max_wait_time is non-positive.

    Example:
        ```pycon
        >>> from esplora_client.core.validation import validate_retry_params
        >>> validate_retry_params(max_retries=3)
        >>> validate_retry_params(max_retries=0, base_delay=5.0)
        >>> validate_retry_params(max_retries=3, max_total_time=30.0)

        ```
    """
    if max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise ValueError(msg)
    if base_delay < 0:
        msg = f"base_delay must be >= 0, got {base_delay}"
        raise ValueError(msg)
    if max_total_time is not None and max_total_time <= 0:
        msg = f"max_total_time must be > 0, got {max_total_time}"
        raise ValueError(msg)
    if max_wait_time is not None and max_wait_time <= 0:
        msg = f"max_wait_time must be > 0, got {max_wait_time}"
        raise ValueError(msg)


def validate_status_codes(status_codes: tuple[int, ...]) -> None:
    """Validate a tuple of retryable HTTP status codes.

    Args:
        status_codes: The status codes to validate.

    Raises:
        ValueError: If a status code is outside the 100-599 range.
    """
    for code in status_codes:
        if not 100 <= code <= 599:
            msg = f"invalid HTTP status code in retry set: {code}"
            raise ValueError(msg)


def validate_base_url(base_url: str) -> None:
    """Validate the base URL of an Esplora server.

    Args:
        base_url: The base URL, e.g. ``https://blockstream.info/api``.

    Raises:
        ValueError: If the URL is empty or has no http(s) scheme.
    """
    if not base_url.startswith(("http://", "https://")):
        msg = f"base_url must start with http:// or https://, got {base_url!r}"
        raise ValueError(msg)


def validate_hash(value: str, name: str = "hash") -> str:
    """Validate a 32-byte hash given as hex and return it lowercased.

    Args:
        value: The hex encoded hash (txid, block hash).
        name: The parameter name used in the error message.

    Returns:
        The lowercased hash.

    Raises:
        ValueError: If the value is not 64 hex characters.

    Example:
        ```pycon
        >>> from esplora_client.core.validation import validate_hash
        >>> validate_hash("00" * 31 + "AB")
        '00000000000000000000000000000000000000000000000000000000000000ab'

        ```
    """
    if not _HASH_PATTERN.fullmatch(value):
        msg = f"{name} must be 64 hex characters, got {value!r}"
        raise ValueError(msg)
    return value.lower()
