r"""esplora_client - Client of the Esplora block explorer HTTP API.

This package provides blocking and asynchronous clients of the Esplora
API (Blockstream's block explorer, also served by mempool.space and
electrs). Built on top of the httpx library, every call retries
transient failures with exponential backoff that honors the server's
Retry-After header, then decodes the response into typed values.

Key Features:
    - One method per Esplora endpoint, identical on both clients
    - Automatic retry of rate limited and overloaded responses (429, 500, 503)
    - Retry-After header support (both integer seconds and HTTP-date formats)
    - Optional lookups returning ``None`` when the server answers 404
    - Pydantic models for the JSON endpoints
    - Pluggable Bitcoin consensus codec for the binary endpoints
    - HTTP and SOCKS proxy support, configurable timeout and headers

Example:
    ```pycon
    >>> from esplora_client import ClientConfig, EsploraClient
    >>> config = ClientConfig("https://blockstream.info/api", max_retries=3)
    >>> with EsploraClient(config) as client:  # doctest: +SKIP
    ...     height = client.get_height()
    ...     estimates = client.get_fee_estimates()
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "AsyncEsploraClient",
    "ClientConfig",
    "ConsensusTypes",
    "EncodingError",
    "EsploraClient",
    "EsploraError",
    "EsploraTransportError",
    "HexError",
    "HttpResponseError",
    "ParsingError",
    "RetryInfo",
    "TransactionNotFoundError",
    "__version__",
    "convert_fee_rate",
]

from importlib.metadata import PackageNotFoundError, version

from esplora_client.callbacks import RetryInfo
from esplora_client.client import EsploraClient
from esplora_client.client_async import AsyncEsploraClient
from esplora_client.codec import ConsensusTypes
from esplora_client.core.config import ClientConfig
from esplora_client.exceptions import (
    EncodingError,
    EsploraError,
    EsploraTransportError,
    HexError,
    HttpResponseError,
    ParsingError,
    TransactionNotFoundError,
)
from esplora_client.models import convert_fee_rate

try:
    __version__ = version("esplora-client")
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
