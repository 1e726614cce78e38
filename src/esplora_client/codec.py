r"""Seam to the Bitcoin consensus binary codec.

``esplora_client`` does not implement the consensus serialization of
transactions and blocks. Binary endpoints decode their responses with
any type exposing a ``deserialize(data: bytes)`` classmethod, and the
broadcast endpoint encodes transactions with their ``serialize()``
method. This is the interface of ``python-bitcoinlib``'s
``bitcoin.core`` types, which are used by default when installed
(``pip install esplora-client[bitcoin]``).
"""

from __future__ import annotations

__all__ = [
    "ConsensusDecodable",
    "ConsensusEncodable",
    "ConsensusTypes",
    "encode_transaction",
    "load_default_consensus_types",
]

import importlib
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ConsensusDecodable(Protocol):
    """A type that can be built from its consensus serialization."""

    @classmethod
    def deserialize(cls, data: bytes) -> Any: ...


@runtime_checkable
class ConsensusEncodable(Protocol):
    """An object that can produce its consensus serialization."""

    def serialize(self) -> bytes: ...


@dataclass(frozen=True)
class ConsensusTypes:
    """Types used to decode the binary responses.

    Attributes:
        transaction: Type of ``/tx/{txid}/raw`` responses.
        block: Type of ``/block/{hash}/raw`` responses.
        block_header: Type of ``/block/{hash}/header`` responses.
        merkle_block: Type of ``/tx/{txid}/merkleblock-proof`` responses,
            or ``None`` if merkle block proofs are not needed.
    """

    transaction: type[ConsensusDecodable]
    block: type[ConsensusDecodable]
    block_header: type[ConsensusDecodable]
    merkle_block: type[ConsensusDecodable] | None = None

    def require_merkle_block(self) -> type[ConsensusDecodable]:
        """Return the merkle block type.

        Raises:
            ValueError: If no merkle block type is configured.
        """
        if self.merkle_block is None:
            msg = "no merkle block type configured, pass ConsensusTypes(merkle_block=...)"
            raise ValueError(msg)
        return self.merkle_block


@lru_cache(maxsize=1)
def load_default_consensus_types() -> ConsensusTypes:
    """Load the consensus types of ``python-bitcoinlib``.

    Returns:
        The transaction, block and block header types of ``bitcoin.core``.

    Raises:
        ImportError: If ``python-bitcoinlib`` is not installed.
    """
    try:
        core = importlib.import_module("bitcoin.core")
    except ImportError as exc:
        msg = (
            "binary endpoints need a consensus codec: install python-bitcoinlib "
            "(pip install esplora-client[bitcoin]) or pass ConsensusTypes to the client"
        )
        raise ImportError(msg) from exc
    return ConsensusTypes(
        transaction=core.CTransaction,
        block=core.CBlock,
        block_header=core.CBlockHeader,
    )


def encode_transaction(transaction: ConsensusEncodable | bytes) -> str:
    """Return the lowercase hex consensus serialization of a transaction.

    Args:
        transaction: A transaction object or its raw serialization.

    Returns:
        The hex encoded transaction.

    Example:
        ```pycon
        >>> from esplora_client.codec import encode_transaction
        >>> encode_transaction(bytes.fromhex("0200AB"))
        '0200ab'

        ```
    """
    if isinstance(transaction, (bytes, bytearray)):
        return bytes(transaction).hex()
    return transaction.serialize().hex()
