r"""Transports performing single HTTP attempts.

A transport sends one request and returns the raw status, headers and
body. It does not retry and does not interpret the status code: the
retry executors and the response decoder do that, identically for the
blocking and the asynchronous transport.
"""

from __future__ import annotations

__all__ = [
    "AsyncBaseTransport",
    "AsyncHttpxTransport",
    "BaseTransport",
    "HttpxTransport",
    "RawResponse",
    "Request",
]

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

from esplora_client.exceptions import EsploraTransportError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from esplora_client.core.config import ClientConfig

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Request:
    """Description of one HTTP request.

    Attributes:
        method: The HTTP method, ``GET`` or ``POST``.
        url: The absolute URL.
        body: The request body, for POST requests.
        params: Optional query string parameters.
        headers: Optional headers added to the transport's static headers.
    """

    method: str
    url: str
    body: bytes | None = None
    params: Mapping[str, str] | None = None
    headers: Mapping[str, str] | None = None


@dataclass(frozen=True)
class RawResponse:
    """Status, headers and body returned by one transport attempt.

    Header lookups are case-insensitive.

    Example:
        ```pycon
        >>> from esplora_client.transport import RawResponse
        >>> response = RawResponse(status=429, body=b"", headers={"retry-after": "3"})
        >>> response.retry_after
        '3'
        >>> response.text
        ''

        ```
    """

    status: int
    body: bytes = b""
    headers: httpx.Headers = field(default_factory=httpx.Headers)

    def __post_init__(self) -> None:
        if not isinstance(self.headers, httpx.Headers):
            object.__setattr__(self, "headers", httpx.Headers(self.headers))

    @property
    def retry_after(self) -> str | None:
        """The value of the ``Retry-After`` header, if any."""
        return self.headers.get("Retry-After")

    @property
    def text(self) -> str:
        """The body decoded as UTF-8, undecodable bytes replaced."""
        return self.body.decode("utf-8", errors="replace")

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> RawResponse:
        """Build a raw response from a fully read ``httpx.Response``."""
        return cls(status=response.status_code, body=response.content, headers=response.headers)


def _client_kwargs(config: ClientConfig) -> dict[str, Any]:
    return {
        "headers": dict(config.headers),
        "timeout": config.timeout,
        "proxy": config.proxy,
    }


def _transport_error(exc: httpx.HTTPError, request: Request) -> EsploraTransportError:
    if isinstance(exc, httpx.TimeoutException):
        message = f"{request.method} request to {request.url} timed out"
    else:
        message = f"{request.method} request to {request.url} failed: {exc}"
    logger.debug(f"{message} ({type(exc).__name__})")
    return EsploraTransportError(
        method=request.method, url=request.url, message=message, cause=exc
    )


class BaseTransport(ABC):
    """Abstract blocking transport."""

    @abstractmethod
    def send(self, request: Request) -> RawResponse:
        """Perform one HTTP attempt.

        Args:
            request: The request to send.

        Returns:
            The response, whatever its status code.

        Raises:
            EsploraTransportError: If no response could be obtained.
        """

    def close(self) -> None:
        """Release the resources held by the transport."""


class AsyncBaseTransport(ABC):
    """Abstract asynchronous transport."""

    @abstractmethod
    async def send(self, request: Request) -> RawResponse:
        """Perform one HTTP attempt.

        Args:
            request: The request to send.

        Returns:
            The response, whatever its status code.

        Raises:
            EsploraTransportError: If no response could be obtained.
        """

    async def aclose(self) -> None:
        """Release the resources held by the transport."""


class HttpxTransport(BaseTransport):
    r"""Blocking transport backed by ``httpx.Client``.

    Args:
        client: The ``httpx.Client`` used to send requests. The transport
            does not close a client it did not create.

    Example:
        ```pycon
        >>> import httpx
        >>> from esplora_client.transport import HttpxTransport, Request
        >>> transport = HttpxTransport(
        ...     httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200, text="42")))
        ... )
        >>> transport.send(Request("GET", "https://example.com/blocks/tip/height")).body
        b'42'

        ```
    """

    def __init__(self, client: httpx.Client, *, owns_client: bool = False) -> None:
        self._client = client
        self._owns_client = owns_client

    @classmethod
    def from_config(cls, config: ClientConfig) -> HttpxTransport:
        """Create a transport with its own client built from the proxy,
        timeout and headers of ``config``."""
        return cls(httpx.Client(**_client_kwargs(config)), owns_client=True)

    @property
    def client(self) -> httpx.Client:
        """The underlying ``httpx.Client``."""
        return self._client

    def send(self, request: Request) -> RawResponse:
        try:
            response = self._client.request(
                request.method,
                request.url,
                content=request.body,
                params=request.params,
                headers=request.headers,
            )
        except httpx.HTTPError as exc:
            raise _transport_error(exc, request) from exc
        return RawResponse.from_httpx(response)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


class AsyncHttpxTransport(AsyncBaseTransport):
    r"""Asynchronous transport backed by ``httpx.AsyncClient``.

    Args:
        client: The ``httpx.AsyncClient`` used to send requests. The
            transport does not close a client it did not create.
    """

    def __init__(self, client: httpx.AsyncClient, *, owns_client: bool = False) -> None:
        self._client = client
        self._owns_client = owns_client

    @classmethod
    def from_config(cls, config: ClientConfig) -> AsyncHttpxTransport:
        """Create a transport with its own client built from the proxy,
        timeout and headers of ``config``."""
        return cls(httpx.AsyncClient(**_client_kwargs(config)), owns_client=True)

    @property
    def client(self) -> httpx.AsyncClient:
        """The underlying ``httpx.AsyncClient``."""
        return self._client

    async def send(self, request: Request) -> RawResponse:
        try:
            response = await self._client.request(
                request.method,
                request.url,
                content=request.body,
                params=request.params,
                headers=request.headers,
            )
        except httpx.HTTPError as exc:
            raise _transport_error(exc, request) from exc
        return RawResponse.from_httpx(response)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
