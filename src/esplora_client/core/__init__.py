r"""Core shared logic of the blocking and asynchronous clients.

This package contains the configuration, the argument validation and
the response decoding used identically by ``EsploraClient`` and
``AsyncEsploraClient``.
"""

from __future__ import annotations

__all__ = [
    "BROADCAST_RETRY_STATUS_CODES",
    "DEFAULT_BASE_DELAY",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_MAX_WAIT_TIME",
    "DEFAULT_TIMEOUT",
    "RETRY_STATUS_CODES",
    "ClientConfig",
    "DecodeMode",
    "decode_optional_response",
    "decode_response",
    "validate_base_url",
    "validate_hash",
    "validate_retry_params",
    "validate_status_codes",
    "validate_timeout",
]

from esplora_client.core.config import (
    BROADCAST_RETRY_STATUS_CODES,
    DEFAULT_BASE_DELAY,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_WAIT_TIME,
    DEFAULT_TIMEOUT,
    RETRY_STATUS_CODES,
    ClientConfig,
)
from esplora_client.core.decoding import (
    DecodeMode,
    decode_optional_response,
    decode_response,
)
from esplora_client.core.validation import (
    validate_base_url,
    validate_hash,
    validate_retry_params,
    validate_status_codes,
    validate_timeout,
)
