r"""Configuration dataclass and defaults for the Esplora clients.

This module provides configuration constants and a dataclass-based
configuration object shared by ``EsploraClient`` and
``AsyncEsploraClient``.
"""

from __future__ import annotations

__all__ = [
    "BROADCAST_RETRY_STATUS_CODES",
    "ClientConfig",
    "DEFAULT_BASE_DELAY",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_MAX_WAIT_TIME",
    "DEFAULT_TIMEOUT",
    "RETRY_STATUS_CODES",
]

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from esplora_client.core.validation import (
    validate_base_url,
    validate_retry_params,
    validate_status_codes,
    validate_timeout,
)
from esplora_client.retry.config import RetryConfig

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from esplora_client.callbacks import RetryInfo


# Default timeout in seconds for each HTTP attempt
DEFAULT_TIMEOUT = 10.0

# Default maximum number of retry attempts
# Total attempts = max_retries + 1 (initial attempt)
DEFAULT_MAX_RETRIES = 6

# Initial backoff delay in seconds
# The delay doubles before every sleep unless the server sends Retry-After:
# with 0.256 the retries wait 0.512s, 1.024s, 2.048s, ...
DEFAULT_BASE_DELAY = 0.256

# HTTP status codes that should trigger automatic retry of GET requests
# 429: Too Many Requests - Rate limiting
# 500: Internal Server Error - Temporary server issue
# 503: Service Unavailable - Server overloaded or down
RETRY_STATUS_CODES = (429, 500, 503)

# HTTP status codes that should trigger automatic retry of POST requests
# Only rate limiting: the server refused the request before looking at it
BROADCAST_RETRY_STATUS_CODES = (429,)

# Upper bound in seconds of a single retry wait, including Retry-After values
DEFAULT_MAX_WAIT_TIME = 60.0


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for the Esplora clients.

    The configuration is immutable: a client instance can be shared by
    many threads or tasks. Use ``merge`` to derive a new configuration.

    Args:
        base_url: The URL of the Esplora server, e.g.
            ``https://blockstream.info/api``. A trailing slash is removed.
        proxy: Optional proxy URL, e.g. ``socks5://127.0.0.1:9050``.
        timeout: Per-attempt timeout in seconds, or ``None`` to disable it.
        headers: HTTP headers sent with every request.
        max_retries: Maximum number of retry attempts. Must be >= 0.
        retry_status_codes: Status codes that trigger a retry of GET requests.
        broadcast_retry_status_codes: Status codes that trigger a retry of
            POST requests (transaction broadcast).
        base_delay: Initial backoff delay in seconds. Must be >= 0.
        max_total_time: Optional wall-clock budget in seconds for one call
            including its retries. ``None`` disables the deadline.
        max_wait_time: Maximum wait in seconds before a single retry. A
            longer Retry-After or backoff delay is capped to it. ``None``
            removes the cap.
        on_retry: Optional callback invoked before each retry sleep.

    Example:
        ```pycon
        >>> from esplora_client import ClientConfig
        >>> config = ClientConfig("https://blockstream.info/api/")
        >>> config.base_url
        'https://blockstream.info/api'
        >>> config.max_retries
        6
        >>> config.merge(max_retries=2).max_retries
        2

        ```
    """

    base_url: str
    proxy: str | None = None
    timeout: float | None = DEFAULT_TIMEOUT
    headers: Mapping[str, str] = field(default_factory=dict)
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_status_codes: tuple[int, ...] = RETRY_STATUS_CODES
    broadcast_retry_status_codes: tuple[int, ...] = BROADCAST_RETRY_STATUS_CODES
    base_delay: float = DEFAULT_BASE_DELAY
    max_total_time: float | None = None
    max_wait_time: float | None = DEFAULT_MAX_WAIT_TIME
    on_retry: Callable[[RetryInfo], None] | None = None

    def __post_init__(self) -> None:
        """Validate and normalize configuration parameters.

        Raises:
            ValueError: If any parameter fails validation.
        """
        validate_base_url(self.base_url)
        validate_timeout(self.timeout)
        validate_retry_params(
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            max_total_time=self.max_total_time,
            max_wait_time=self.max_wait_time,
        )
        validate_status_codes(self.retry_status_codes)
        validate_status_codes(self.broadcast_retry_status_codes)
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        object.__setattr__(self, "headers", dict(self.headers))
        object.__setattr__(self, "retry_status_codes", tuple(self.retry_status_codes))
        object.__setattr__(
            self, "broadcast_retry_status_codes", tuple(self.broadcast_retry_status_codes)
        )

    def merge(self, **overrides: Any) -> ClientConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ClientConfig instance with overrides applied.

        Example:
            ```pycon
            >>> from esplora_client import ClientConfig
            >>> config = ClientConfig("https://mempool.space/api", max_retries=3)
            >>> new_config = config.merge(max_retries=5)
            >>> new_config.max_retries
            5
            >>> config.max_retries  # Original unchanged
            3

            ```
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

    def to_retry_config(self) -> RetryConfig:
        """Extract the settings used by the retry executors.

        Returns:
            The retry configuration.
        """
        return RetryConfig(
            max_retries=self.max_retries,
            status_forcelist=self.retry_status_codes,
            base_delay=self.base_delay,
            max_total_time=self.max_total_time,
            max_wait_time=self.max_wait_time,
            on_retry=self.on_retry,
        )
