r"""Decoding of final responses into typed values.

The Esplora API answers in four flavors: raw consensus bytes, consensus
bytes as ASCII hex, JSON documents and bare text. ``decode_response``
turns the final response of a call into a value of the requested type
or raises an ``EsploraError``; ``decode_optional_response`` additionally
maps "404 Not Found" to ``None`` for lookups of things that may not
exist.
"""

from __future__ import annotations

__all__ = ["DecodeMode", "decode_optional_response", "decode_response"]

import enum
import logging
import re
from functools import lru_cache
from typing import TYPE_CHECKING, Any

import pydantic

from esplora_client.exceptions import EncodingError, HexError, HttpResponseError

if TYPE_CHECKING:
    from esplora_client.transport import RawResponse

logger: logging.Logger = logging.getLogger(__name__)

# The API only signals success with 200, other 2xx codes are errors
SUCCESS_STATUS = 200
NOT_FOUND_STATUS = 404

# Whole bytes only, bytes.fromhex alone would accept inner whitespace
_HEX_PATTERN = re.compile(rb"(?:[0-9a-fA-F]{2})*")


class DecodeMode(enum.Enum):
    """Deserialization strategy of an endpoint's response body."""

    BINARY = "binary"
    HEX_THEN_BINARY = "hex"
    JSON = "json"
    PLAIN_TEXT = "text"


@lru_cache(maxsize=128)
def _type_adapter(target: Any) -> pydantic.TypeAdapter:
    return pydantic.TypeAdapter(target)


def _decode_binary(data: bytes, target: Any) -> Any:
    if target is None:
        msg = "a consensus type is required to decode binary responses"
        raise TypeError(msg)
    try:
        return target.deserialize(data)
    # Codec implementations raise their own error types
    except Exception as exc:
        msg = f"invalid consensus encoding for {getattr(target, '__name__', target)}: {exc}"
        raise EncodingError(msg) from exc


def _decode_text(body: bytes) -> str:
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as exc:
        msg = f"response body is not valid UTF-8: {exc}"
        raise EncodingError(msg) from exc


def _decode_hex(body: bytes) -> bytes:
    data = body.strip()
    if not _HEX_PATTERN.fullmatch(data):
        msg = f"response body is not valid hex: {body[:64]!r}"
        raise HexError(msg)
    return bytes.fromhex(data.decode("ascii"))


def _decode_json(body: bytes, target: Any) -> Any:
    try:
        return _type_adapter(target).validate_json(body)
    except pydantic.ValidationError as exc:
        msg = f"invalid JSON response for {target!r}: {exc}"
        raise EncodingError(msg) from exc


def decode_response(response: RawResponse, mode: DecodeMode, target: Any = None) -> Any:
    """Decode the final response of a call.

    Args:
        response: The final response returned by the retry executor.
        mode: How the body is encoded.
        target: The type to decode into. For ``BINARY`` and
            ``HEX_THEN_BINARY`` a type with a ``deserialize(bytes)``
            classmethod; for ``JSON`` any type pydantic can validate
            (a model, ``list[Model]``, ``dict[int, float]``...). Ignored
            for ``PLAIN_TEXT``.

    Returns:
        The decoded value.

    Raises:
        HttpResponseError: If the status code is not 200.
        EncodingError: If the body does not match the expected encoding.

    Example:
        ```pycon
        >>> from esplora_client.core.decoding import DecodeMode, decode_response
        >>> from esplora_client.transport import RawResponse
        >>> decode_response(RawResponse(status=200, body=b"840000"), DecodeMode.PLAIN_TEXT)
        '840000'
        >>> response = RawResponse(status=200, body=b'{"6": 2.5}')
        >>> decode_response(response, DecodeMode.JSON, dict[int, float])
        {6: 2.5}

        ```
    """
    if response.status != SUCCESS_STATUS:
        logger.debug(f"Request failed with status {response.status}")
        raise HttpResponseError(status=response.status, message=response.text)

    if mode is DecodeMode.BINARY:
        return _decode_binary(response.body, target)
    if mode is DecodeMode.HEX_THEN_BINARY:
        return _decode_binary(_decode_hex(response.body), target)
    if mode is DecodeMode.JSON:
        return _decode_json(response.body, target)
    return _decode_text(response.body)


def decode_optional_response(
    response: RawResponse, mode: DecodeMode, target: Any = None
) -> Any | None:
    """Decode the final response of a lookup that may find nothing.

    Same as ``decode_response`` except that a 404 status yields ``None``
    instead of raising ``HttpResponseError``.

    Args:
        response: The final response returned by the retry executor.
        mode: How the body is encoded.
        target: The type to decode into.

    Returns:
        The decoded value, or ``None`` if the server answered 404.

    Raises:
        HttpResponseError: If the status code is neither 200 nor 404.
        EncodingError: If the body does not match the expected encoding.

    Example:
        ```pycon
        >>> from esplora_client.core.decoding import DecodeMode, decode_optional_response
        >>> from esplora_client.transport import RawResponse
        >>> response = RawResponse(status=404, body=b"Transaction not found")
        >>> decode_optional_response(response, DecodeMode.PLAIN_TEXT) is None
        True

        ```
    """
    try:
        return decode_response(response, mode, target)
    except HttpResponseError as exc:
        if exc.status == NOT_FOUND_STATUS:
            return None
        raise
