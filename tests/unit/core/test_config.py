r"""Unit tests for the client configuration."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from esplora_client.core.config import (
    BROADCAST_RETRY_STATUS_CODES,
    DEFAULT_BASE_DELAY,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_WAIT_TIME,
    DEFAULT_TIMEOUT,
    RETRY_STATUS_CODES,
    ClientConfig,
)
from esplora_client.retry import RetryConfig

BASE_URL = "https://blockstream.info/api"


###############################
#     Tests for constants     #
###############################


def test_default_constants() -> None:
    """Test the default values."""
    assert DEFAULT_TIMEOUT == 10.0
    assert DEFAULT_MAX_RETRIES == 6
    assert DEFAULT_BASE_DELAY == 0.256
    assert DEFAULT_MAX_WAIT_TIME == 60.0
    assert RETRY_STATUS_CODES == (429, 500, 503)
    assert BROADCAST_RETRY_STATUS_CODES == (429,)


##################################
#     Tests for ClientConfig     #
##################################


def test_client_config_defaults() -> None:
    """Test ClientConfig with default values."""
    config = ClientConfig(BASE_URL)

    assert config.base_url == BASE_URL
    assert config.proxy is None
    assert config.timeout == DEFAULT_TIMEOUT
    assert config.headers == {}
    assert config.max_retries == DEFAULT_MAX_RETRIES
    assert config.retry_status_codes == RETRY_STATUS_CODES
    assert config.broadcast_retry_status_codes == BROADCAST_RETRY_STATUS_CODES
    assert config.base_delay == DEFAULT_BASE_DELAY
    assert config.max_total_time is None
    assert config.max_wait_time == DEFAULT_MAX_WAIT_TIME
    assert config.on_retry is None


def test_client_config_custom_values() -> None:
    """Test ClientConfig with custom values."""
    callback = Mock()
    config = ClientConfig(
        "http://127.0.0.1:3002",
        proxy="socks5://127.0.0.1:9050",
        timeout=30.0,
        headers={"User-Agent": "wallet/1.0"},
        max_retries=2,
        retry_status_codes=[429],
        base_delay=1.0,
        max_total_time=60.0,
        on_retry=callback,
    )

    assert config.base_url == "http://127.0.0.1:3002"
    assert config.proxy == "socks5://127.0.0.1:9050"
    assert config.timeout == 30.0
    assert config.headers == {"User-Agent": "wallet/1.0"}
    assert config.max_retries == 2
    assert config.retry_status_codes == (429,)
    assert config.base_delay == 1.0
    assert config.max_total_time == 60.0
    assert config.on_retry is callback


def test_client_config_strips_trailing_slash() -> None:
    """Test that the trailing slash of the base URL is removed."""
    assert ClientConfig(BASE_URL + "/").base_url == BASE_URL


def test_client_config_no_timeout() -> None:
    """Test that the timeout can be disabled."""
    assert ClientConfig(BASE_URL, timeout=None).timeout is None


def test_client_config_headers_are_copied() -> None:
    """Test that later changes to the headers mapping are not seen."""
    headers = {"User-Agent": "wallet/1.0"}
    config = ClientConfig(BASE_URL, headers=headers)
    headers["User-Agent"] = "other"
    assert config.headers == {"User-Agent": "wallet/1.0"}


def test_client_config_is_frozen() -> None:
    """Test that ClientConfig is immutable."""
    config = ClientConfig(BASE_URL)
    with pytest.raises(AttributeError):
        config.max_retries = 1  # type: ignore[misc]


@pytest.mark.parametrize("base_url", ["", "blockstream.info/api", "ftp://example.com"])
def test_client_config_invalid_base_url(base_url: str) -> None:
    """Test that URLs without http(s) scheme are rejected."""
    with pytest.raises(ValueError, match=r"base_url must start with http:// or https://"):
        ClientConfig(base_url)


def test_client_config_invalid_max_retries() -> None:
    """Test that negative max_retries is rejected."""
    with pytest.raises(ValueError, match=r"max_retries must be >= 0, got -1"):
        ClientConfig(BASE_URL, max_retries=-1)


def test_client_config_invalid_base_delay() -> None:
    """Test that negative base_delay is rejected."""
    with pytest.raises(ValueError, match=r"base_delay must be >= 0"):
        ClientConfig(BASE_URL, base_delay=-0.1)


@pytest.mark.parametrize("timeout", [0, -1.0])
def test_client_config_invalid_timeout(timeout: float) -> None:
    """Test that non-positive timeouts are rejected."""
    with pytest.raises(ValueError, match=r"timeout must be > 0"):
        ClientConfig(BASE_URL, timeout=timeout)


def test_client_config_invalid_max_total_time() -> None:
    """Test that non-positive max_total_time is rejected."""
    with pytest.raises(ValueError, match=r"max_total_time must be > 0"):
        ClientConfig(BASE_URL, max_total_time=0)


@pytest.mark.parametrize("max_wait_time", [0, -1.0])
def test_client_config_invalid_max_wait_time(max_wait_time: float) -> None:
    with pytest.raises(ValueError, match=r"max_wait_time must be > 0"):
        ClientConfig(BASE_URL, max_wait_time=max_wait_time)


def test_client_config_max_wait_time_none() -> None:
    assert ClientConfig(BASE_URL, max_wait_time=None).to_retry_config().max_wait_time is None


def test_client_config_invalid_status_code() -> None:
    """Test that status codes outside 100-599 are rejected."""
    with pytest.raises(ValueError, match=r"invalid HTTP status code in retry set: 99"):
        ClientConfig(BASE_URL, broadcast_retry_status_codes=(99,))


def test_client_config_merge() -> None:
    """Test that merge overrides the given values only."""
    config = ClientConfig(BASE_URL, max_retries=3)
    merged = config.merge(max_retries=5, base_delay=None)

    assert merged.max_retries == 5
    assert merged.base_delay == DEFAULT_BASE_DELAY
    assert merged.base_url == BASE_URL
    assert config.max_retries == 3


def test_client_config_merge_validates() -> None:
    """Test that merged values are validated."""
    with pytest.raises(ValueError, match=r"max_retries must be >= 0"):
        ClientConfig(BASE_URL).merge(max_retries=-2)


def test_client_config_to_retry_config() -> None:
    """Test the extraction of the retry settings."""
    callback = Mock()
    config = ClientConfig(BASE_URL, max_retries=4, max_total_time=20.0, on_retry=callback)

    assert config.to_retry_config() == RetryConfig(
        max_retries=4,
        status_forcelist=(429, 500, 503),
        base_delay=0.256,
        max_total_time=20.0,
        max_wait_time=DEFAULT_MAX_WAIT_TIME,
        on_retry=callback,
    )
