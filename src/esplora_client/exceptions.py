r"""Exception hierarchy for Esplora API calls.

Every error raised by ``esplora_client`` while talking to a server or
decoding its answer derives from ``EsploraError``. Invalid arguments
raise ``ValueError`` instead.
"""

from __future__ import annotations

__all__ = [
    "EncodingError",
    "EsploraError",
    "EsploraTransportError",
    "HexError",
    "HttpResponseError",
    "ParsingError",
    "TransactionNotFoundError",
]


class EsploraError(Exception):
    """Base class of all the errors raised by the Esplora clients."""


class EsploraTransportError(EsploraError):
    """Raised when the transport cannot complete a request.

    Connection failures, DNS or TLS errors and timeouts end up here. They
    are not retried by the retry executor.

    Args:
        method: The HTTP method of the failed request.
        url: The URL of the failed request.
        message: A human readable description of the failure.
        cause: The original exception raised by the HTTP library.

    Example:
        ```pycon
        >>> from esplora_client.exceptions import EsploraTransportError
        >>> error = EsploraTransportError(
        ...     method="GET", url="https://example.com/blocks", message="connection refused"
        ... )
        >>> error.url
        'https://example.com/blocks'

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.cause = cause


class HttpResponseError(EsploraError):
    """Raised when the server answers with a non-success status code.

    Args:
        status: The HTTP status code of the response.
        message: The response body, decoded as text.

    Example:
        ```pycon
        >>> from esplora_client.exceptions import HttpResponseError
        >>> error = HttpResponseError(status=400, message="bad-txns-inputs-missingorspent")
        >>> error.status
        400
        >>> str(error)
        'HTTP 400: bad-txns-inputs-missingorspent'

        ```
    """

    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"HTTP {status}: {message}")
        self.status = status
        self.message = message


class EncodingError(EsploraError):
    """Raised when a successful response body cannot be decoded."""


class HexError(EncodingError):
    """Raised when a response that should be hex encoded is not."""


class ParsingError(EsploraError):
    """Raised when a plain text response cannot be parsed into a
    scalar value (height, block hash, txid)."""


class TransactionNotFoundError(EsploraError):
    """Raised when a transaction is required but the server does not
    know it.

    Args:
        txid: The id of the missing transaction.
    """

    def __init__(self, txid: str) -> None:
        super().__init__(f"transaction {txid} not found")
        self.txid = txid
