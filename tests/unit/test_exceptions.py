r"""Unit tests for the exception hierarchy."""

from __future__ import annotations

import httpx
import pytest

from esplora_client.exceptions import (
    EncodingError,
    EsploraError,
    EsploraTransportError,
    HexError,
    HttpResponseError,
    ParsingError,
    TransactionNotFoundError,
)


@pytest.mark.parametrize(
    "exc_type",
    [EsploraTransportError, HttpResponseError, EncodingError, HexError, ParsingError],
)
def test_exceptions_derive_from_esplora_error(exc_type: type[Exception]) -> None:
    assert issubclass(exc_type, EsploraError)


def test_hex_error_is_encoding_error() -> None:
    assert issubclass(HexError, EncodingError)


def test_esplora_transport_error() -> None:
    cause = httpx.ConnectError("refused")
    error = EsploraTransportError(
        method="POST", url="https://example.com/tx", message="POST failed", cause=cause
    )
    assert str(error) == "POST failed"
    assert error.method == "POST"
    assert error.url == "https://example.com/tx"
    assert error.cause is cause


def test_http_response_error() -> None:
    error = HttpResponseError(status=503, message="overloaded")
    assert str(error) == "HTTP 503: overloaded"
    assert error.status == 503
    assert error.message == "overloaded"


def test_transaction_not_found_error() -> None:
    error = TransactionNotFoundError("ab" * 32)
    assert error.txid == "ab" * 32
    assert str(error) == f"transaction {'ab' * 32} not found"
