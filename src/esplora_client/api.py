r"""Endpoint path table of the Esplora API.

Each domain operation is described by an ``Endpoint``: the HTTP method,
the path relative to the server's base URL, how the response is decoded
and whether "404 Not Found" means an absent value. The builders are
grouped by API area like the upstream documentation.
"""

from __future__ import annotations

__all__ = [
    "AddressApi",
    "BlocksApi",
    "Endpoint",
    "FeeEstimatesApi",
    "MempoolApi",
    "TransactionApi",
    "parse_block_hash",
    "parse_height",
    "script_hash",
]

import hashlib
import json
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import quote

from esplora_client.core.decoding import DecodeMode
from esplora_client.core.validation import validate_hash
from esplora_client.exceptions import ParsingError

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True)
class Endpoint:
    """An Esplora endpoint.

    Attributes:
        method: ``GET`` or ``POST``.
        path: The path, relative to the base URL, starting with ``/``.
        mode: How the response body is decoded.
        optional: Whether a 404 response means an absent value.
        body: The request body, for POST endpoints.
        params: Optional query string parameters.

    Example:
        ```pycon
        >>> from esplora_client.api import TransactionApi
        >>> endpoint = TransactionApi.raw("ab" * 32)
        >>> endpoint.path == f"/tx/{'ab' * 32}/raw"
        True
        >>> endpoint.mode, endpoint.optional
        (<DecodeMode.BINARY: 'binary'>, True)

        ```
    """

    method: str
    path: str
    mode: DecodeMode
    optional: bool = False
    body: bytes | None = None
    params: Mapping[str, str] | None = None

    def url(self, base_url: str) -> str:
        """Return the absolute URL of the endpoint on a server."""
        return f"{base_url}{self.path}"


def _get(path: str, mode: DecodeMode, optional: bool = False) -> Endpoint:
    return Endpoint(method="GET", path=path, mode=mode, optional=optional)


def _index(value: int, name: str) -> int:
    if value < 0:
        msg = f"{name} must be >= 0, got {value}"
        raise ValueError(msg)
    return value


def script_hash(script: bytes) -> str:
    """Return the Esplora script hash (hex SHA256) of a script.

    Example:
        ```pycon
        >>> from esplora_client.api import script_hash
        >>> script_hash(b"")
        'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'

        ```
    """
    return hashlib.sha256(script).hexdigest()


class TransactionApi:
    """Endpoints under ``/tx``."""

    @staticmethod
    def raw(txid: str) -> Endpoint:
        return _get(f"/tx/{validate_hash(txid, 'txid')}/raw", DecodeMode.BINARY, optional=True)

    @staticmethod
    def info(txid: str) -> Endpoint:
        return _get(f"/tx/{validate_hash(txid, 'txid')}", DecodeMode.JSON, optional=True)

    @staticmethod
    def status(txid: str) -> Endpoint:
        return _get(f"/tx/{validate_hash(txid, 'txid')}/status", DecodeMode.JSON)

    @staticmethod
    def merkle_proof(txid: str) -> Endpoint:
        return _get(
            f"/tx/{validate_hash(txid, 'txid')}/merkle-proof", DecodeMode.JSON, optional=True
        )

    @staticmethod
    def merkle_block(txid: str) -> Endpoint:
        return _get(
            f"/tx/{validate_hash(txid, 'txid')}/merkleblock-proof",
            DecodeMode.HEX_THEN_BINARY,
            optional=True,
        )

    @staticmethod
    def output_status(txid: str, index: int) -> Endpoint:
        return _get(
            f"/tx/{validate_hash(txid, 'txid')}/outspend/{_index(index, 'index')}",
            DecodeMode.JSON,
            optional=True,
        )

    @staticmethod
    def outspends(txid: str) -> Endpoint:
        return _get(f"/tx/{validate_hash(txid, 'txid')}/outspends", DecodeMode.JSON)

    @staticmethod
    def broadcast(tx_hex: str) -> Endpoint:
        return Endpoint(
            method="POST", path="/tx", mode=DecodeMode.PLAIN_TEXT, body=tx_hex.encode("ascii")
        )

    @staticmethod
    def submit_package(
        txs_hex: list[str],
        maxfeerate: float | None = None,
        maxburnamount: float | None = None,
    ) -> Endpoint:
        """``POST /txs/package``; ``maxfeerate`` in sat/vB and
        ``maxburnamount`` in BTC are forwarded as query parameters."""
        params = {}
        if maxfeerate is not None:
            params["maxfeerate"] = str(maxfeerate)
        if maxburnamount is not None:
            params["maxburnamount"] = str(maxburnamount)
        body = json.dumps(list(txs_hex)).encode("ascii")
        return Endpoint(
            method="POST",
            path="/txs/package",
            mode=DecodeMode.JSON,
            body=body,
            params=params or None,
        )


class BlocksApi:
    """Endpoints under ``/block``, ``/blocks`` and ``/block-height``."""

    @staticmethod
    def info(block_hash: str) -> Endpoint:
        return _get(f"/block/{validate_hash(block_hash, 'block_hash')}", DecodeMode.JSON)

    @staticmethod
    def header(block_hash: str) -> Endpoint:
        return _get(
            f"/block/{validate_hash(block_hash, 'block_hash')}/header",
            DecodeMode.HEX_THEN_BINARY,
        )

    @staticmethod
    def status(block_hash: str) -> Endpoint:
        return _get(f"/block/{validate_hash(block_hash, 'block_hash')}/status", DecodeMode.JSON)

    @staticmethod
    def raw(block_hash: str) -> Endpoint:
        return _get(
            f"/block/{validate_hash(block_hash, 'block_hash')}/raw",
            DecodeMode.BINARY,
            optional=True,
        )

    @staticmethod
    def txids(block_hash: str) -> Endpoint:
        return _get(f"/block/{validate_hash(block_hash, 'block_hash')}/txids", DecodeMode.JSON)

    @staticmethod
    def txid_at_index(block_hash: str, index: int) -> Endpoint:
        return _get(
            f"/block/{validate_hash(block_hash, 'block_hash')}/txid/{_index(index, 'index')}",
            DecodeMode.PLAIN_TEXT,
            optional=True,
        )

    @staticmethod
    def tip_height() -> Endpoint:
        return _get("/blocks/tip/height", DecodeMode.PLAIN_TEXT)

    @staticmethod
    def tip_hash() -> Endpoint:
        return _get("/blocks/tip/hash", DecodeMode.PLAIN_TEXT)

    @staticmethod
    def block_hash(height: int) -> Endpoint:
        return _get(f"/block-height/{_index(height, 'height')}", DecodeMode.PLAIN_TEXT)

    @staticmethod
    def summaries(height: int | None = None) -> Endpoint:
        if height is None:
            return _get("/blocks", DecodeMode.JSON)
        return _get(f"/blocks/{_index(height, 'height')}", DecodeMode.JSON)


class AddressApi:
    """Endpoints under ``/address`` and ``/scripthash``."""

    @staticmethod
    def address_stats(address: str) -> Endpoint:
        return _get(f"/address/{quote(address, safe='')}", DecodeMode.JSON)

    @staticmethod
    def address_txs(address: str, last_seen: str | None = None) -> Endpoint:
        path = f"/address/{quote(address, safe='')}/txs"
        if last_seen is not None:
            path += f"/chain/{validate_hash(last_seen, 'last_seen')}"
        return _get(path, DecodeMode.JSON)

    @staticmethod
    def address_utxos(address: str) -> Endpoint:
        return _get(f"/address/{quote(address, safe='')}/utxo", DecodeMode.JSON)

    @staticmethod
    def scripthash_stats(script: bytes) -> Endpoint:
        return _get(f"/scripthash/{script_hash(script)}", DecodeMode.JSON)

    @staticmethod
    def scripthash_txs(script: bytes, last_seen: str | None = None) -> Endpoint:
        path = f"/scripthash/{script_hash(script)}/txs"
        if last_seen is not None:
            path += f"/chain/{validate_hash(last_seen, 'last_seen')}"
        return _get(path, DecodeMode.JSON)

    @staticmethod
    def scripthash_utxos(script: bytes) -> Endpoint:
        return _get(f"/scripthash/{script_hash(script)}/utxo", DecodeMode.JSON)


class MempoolApi:
    """Endpoints under ``/mempool``."""

    @staticmethod
    def stats() -> Endpoint:
        return _get("/mempool", DecodeMode.JSON)

    @staticmethod
    def recent() -> Endpoint:
        return _get("/mempool/recent", DecodeMode.JSON)


class FeeEstimatesApi:
    """The ``/fee-estimates`` endpoint."""

    @staticmethod
    def fee_rate() -> Endpoint:
        return _get("/fee-estimates", DecodeMode.JSON)


def parse_height(text: str) -> int:
    """Parse a block height returned as plain text.

    Raises:
        ParsingError: If the text is not a non-negative integer.

    Example:
        ```pycon
        >>> from esplora_client.api import parse_height
        >>> parse_height("840000")
        840000

        ```
    """
    value = text.strip()
    if not (value.isascii() and value.isdigit()):
        msg = f"invalid block height: {text!r}"
        raise ParsingError(msg)
    return int(value)


def parse_block_hash(text: str) -> str:
    """Parse a block hash or txid returned as plain text.

    Raises:
        ParsingError: If the text is not 64 hex characters.
    """
    try:
        return validate_hash(text.strip())
    except ValueError as exc:
        msg = f"invalid hash: {text!r}"
        raise ParsingError(msg) from exc
