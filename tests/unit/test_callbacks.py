r"""Unit tests for the retry callback."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from esplora_client.callbacks import RetryInfo, invoke_on_retry

if TYPE_CHECKING:
    from unittest.mock import Mock


def test_retry_info_is_frozen() -> None:
    info = RetryInfo(
        url="https://example.com",
        method="GET",
        attempt=1,
        max_retries=6,
        wait_time=0.512,
        status_code=429,
    )
    with pytest.raises(AttributeError):
        info.attempt = 2  # type: ignore[misc]


def test_invoke_on_retry_none() -> None:
    invoke_on_retry(
        None,
        url="https://example.com",
        method="GET",
        attempt=0,
        max_retries=6,
        wait_time=0.512,
        status_code=429,
    )


def test_invoke_on_retry_one_indexed_attempt(mock_callback: Mock) -> None:
    invoke_on_retry(
        mock_callback,
        url="https://example.com",
        method="POST",
        attempt=0,
        max_retries=6,
        wait_time=0.512,
        status_code=429,
    )
    mock_callback.assert_called_once_with(
        RetryInfo(
            url="https://example.com",
            method="POST",
            attempt=1,
            max_retries=6,
            wait_time=0.512,
            status_code=429,
        )
    )
