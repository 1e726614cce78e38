r"""Asynchronous client of the Esplora HTTP API.

This module provides ``AsyncEsploraClient``, which exposes one method per
Esplora endpoint. Every call goes through the retry executor and the
response decoder, so transient failures (rate limiting, overloaded
server) are retried with exponential backoff before a value or an
``EsploraError`` is returned.
"""

from __future__ import annotations

__all__ = ["AsyncEsploraClient"]

import logging
from typing import TYPE_CHECKING, Any

from esplora_client.api import (
    AddressApi,
    BlocksApi,
    Endpoint,
    FeeEstimatesApi,
    MempoolApi,
    TransactionApi,
    parse_block_hash,
    parse_height,
)
from esplora_client.codec import ConsensusTypes, encode_transaction, load_default_consensus_types
from esplora_client.core.config import ClientConfig
from esplora_client.core.decoding import decode_optional_response, decode_response
from esplora_client.exceptions import TransactionNotFoundError
from esplora_client.models import (
    AddressStats,
    BlockInfo,
    BlockStatus,
    BlockSummary,
    MempoolRecentTx,
    MempoolStats,
    MerkleProof,
    OutputStatus,
    ScriptHashStats,
    SubmitPackageResult,
    Tx,
    TxStatus,
    Utxo,
)
from esplora_client.retry import AsyncRetryExecutor
from esplora_client.transport import AsyncHttpxTransport, Request

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

    from esplora_client.codec import ConsensusEncodable
    from esplora_client.transport import AsyncBaseTransport

logger: logging.Logger = logging.getLogger(__name__)


class AsyncEsploraClient:
    r"""Asynchronous client of an Esplora server.

    The client is safe to share between tasks: the configuration is
    immutable and each call keeps its own retry state.

    Args:
        config: The client configuration, or the base URL of the server.
        transport: Optional transport performing the HTTP attempts. If
            ``None``, an ``AsyncHttpxTransport`` is created from ``config`` and
            closed by ``aclose()``. A transport passed in is never closed
            by the client.
        consensus: Optional types used to decode binary responses. If
            ``None``, the ``python-bitcoinlib`` types are loaded on the
            first binary call.

    Example:
        ```pycon
        >>> import asyncio
        >>> from esplora_client import AsyncEsploraClient
        >>> async def tip_hash() -> str:
        ...     async with AsyncEsploraClient("https://blockstream.info/api") as client:
        ...         return await client.get_tip_hash()
        ...
        >>> asyncio.run(tip_hash())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        config: ClientConfig | str,
        *,
        transport: AsyncBaseTransport | None = None,
        consensus: ConsensusTypes | None = None,
    ) -> None:
        self._config = ClientConfig(config) if isinstance(config, str) else config
        self._owns_transport = transport is None
        self._transport = (
            AsyncHttpxTransport.from_config(self._config) if transport is None else transport
        )
        self._executor = AsyncRetryExecutor(self._transport, self._config.to_retry_config())
        self._consensus = consensus

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport if it was created by the client."""
        if self._owns_transport:
            await self._transport.aclose()

    @property
    def config(self) -> ClientConfig:
        """The client configuration."""
        return self._config

    @property
    def url(self) -> str:
        """The base URL of the Esplora server."""
        return self._config.base_url

    @property
    def consensus(self) -> ConsensusTypes:
        """The types used to decode binary responses."""
        if self._consensus is None:
            self._consensus = load_default_consensus_types()
        return self._consensus

    async def _call(self, endpoint: Endpoint, target: Any = None) -> Any:
        request = Request(
            method=endpoint.method,
            url=endpoint.url(self._config.base_url),
            body=endpoint.body,
            params=endpoint.params,
        )
        status_forcelist = (
            self._config.broadcast_retry_status_codes if endpoint.method == "POST" else None
        )
        response = await self._executor.execute(request, status_forcelist=status_forcelist)
        if endpoint.optional:
            return decode_optional_response(response, endpoint.mode, target)
        return decode_response(response, endpoint.mode, target)

    ########################
    #     Transactions     #
    ########################

    async def get_tx(self, txid: str) -> Any | None:
        """Get a transaction by its txid.

        Returns:
            The decoded transaction, or ``None`` if the server does not
            know it.
        """
        return await self._call(TransactionApi.raw(txid), self.consensus.transaction)

    async def get_tx_no_opt(self, txid: str) -> Any:
        """Get a transaction by its txid.

        Raises:
            TransactionNotFoundError: If the server does not know it.
        """
        tx = await self.get_tx(txid)
        if tx is None:
            raise TransactionNotFoundError(txid)
        return tx

    async def get_txid_at_block_index(self, block_hash: str, index: int) -> str | None:
        """Get the txid at an index of a block's transaction list, or
        ``None`` if the index is out of range."""
        text = await self._call(BlocksApi.txid_at_index(block_hash, index))
        if text is None:
            return None
        return parse_block_hash(text)

    async def get_tx_status(self, txid: str) -> TxStatus:
        """Get the confirmation status of a transaction."""
        return await self._call(TransactionApi.status(txid), TxStatus)

    async def get_tx_info(self, txid: str) -> Tx | None:
        """Get a transaction in the JSON format of Esplora, with its
        status, fee and previous outputs."""
        return await self._call(TransactionApi.info(txid), Tx)

    async def get_tx_outspends(self, txid: str) -> list[OutputStatus]:
        """Get the spend status of every output of a transaction."""
        return await self._call(TransactionApi.outspends(txid), list[OutputStatus])

    async def get_merkle_proof(self, txid: str) -> MerkleProof | None:
        """Get the merkle inclusion proof of a confirmed transaction."""
        return await self._call(TransactionApi.merkle_proof(txid), MerkleProof)

    async def get_merkle_block(self, txid: str) -> Any | None:
        """Get a ``MerkleBlock`` inclusion proof of a confirmed transaction.

        Raises:
            ValueError: If the client has no merkle block type.
        """
        return await self._call(
            TransactionApi.merkle_block(txid), self.consensus.require_merkle_block()
        )

    async def get_output_status(self, txid: str, index: int) -> OutputStatus | None:
        """Get the spend status of one output of a transaction."""
        return await self._call(TransactionApi.output_status(txid, index), OutputStatus)

    async def broadcast(self, transaction: ConsensusEncodable | bytes) -> str:
        """Broadcast a transaction.

        Args:
            transaction: A transaction object or its raw serialization.

        Returns:
            The txid reported by the server.
        """
        tx_hex = encode_transaction(transaction)
        logger.debug(f"Broadcasting transaction of {len(tx_hex) // 2} bytes")
        txid = await self._call(TransactionApi.broadcast(tx_hex))
        return txid.strip()

    async def submit_package(
        self,
        transactions: list[ConsensusEncodable | bytes],
        maxfeerate: float | None = None,
        maxburnamount: float | None = None,
    ) -> SubmitPackageResult:
        """Submit a package of transactions to the mempool.

        Args:
            transactions: The transactions, parents first.
            maxfeerate: Optional maximum feerate in sat/vB; transactions
                paying more are rejected.
            maxburnamount: Optional maximum amount in BTC for provably
                unspendable outputs.

        Returns:
            The result of the package submission.
        """
        txs_hex = [encode_transaction(tx) for tx in transactions]
        return await self._call(
            TransactionApi.submit_package(txs_hex, maxfeerate, maxburnamount),
            SubmitPackageResult,
        )

    ##################
    #     Blocks     #
    ##################

    async def get_header_by_hash(self, block_hash: str) -> Any:
        """Get the header of a block."""
        return await self._call(BlocksApi.header(block_hash), self.consensus.block_header)

    async def get_block_status(self, block_hash: str) -> BlockStatus:
        """Get the status of a block."""
        return await self._call(BlocksApi.status(block_hash), BlockStatus)

    async def get_block_info(self, block_hash: str) -> BlockInfo:
        """Get information about a block."""
        return await self._call(BlocksApi.info(block_hash), BlockInfo)

    async def get_block_by_hash(self, block_hash: str) -> Any | None:
        """Get a full block, or ``None`` if the server does not know it."""
        return await self._call(BlocksApi.raw(block_hash), self.consensus.block)

    async def get_block_txids(self, block_hash: str) -> list[str]:
        """Get the txids of all the transactions of a block."""
        return await self._call(BlocksApi.txids(block_hash), list[str])

    async def get_height(self) -> int:
        """Get the height of the current blockchain tip."""
        return parse_height(await self._call(BlocksApi.tip_height()))

    async def get_tip_hash(self) -> str:
        """Get the hash of the current blockchain tip."""
        return parse_block_hash(await self._call(BlocksApi.tip_hash()))

    async def get_block_hash(self, height: int) -> str:
        """Get the hash of the block at a height of the best chain."""
        return parse_block_hash(await self._call(BlocksApi.block_hash(height)))

    async def get_blocks(self, height: int | None = None) -> list[BlockSummary]:
        """Get summaries of the 10 blocks ending at ``height``, or at the
        tip if ``height`` is ``None``."""
        return await self._call(BlocksApi.summaries(height), list[BlockSummary])

    #####################
    #     Addresses     #
    #####################

    async def get_address_stats(self, address: str) -> AddressStats:
        """Get statistics about an address."""
        return await self._call(AddressApi.address_stats(address), AddressStats)

    async def get_address_txs(self, address: str, last_seen: str | None = None) -> list[Tx]:
        """Get the transactions of an address.

        Up to 50 mempool transactions are returned first, followed by up
        to 25 confirmed transactions. Pass the txid of the last confirmed
        transaction seen as ``last_seen`` to get the next page.
        """
        return await self._call(AddressApi.address_txs(address, last_seen), list[Tx])

    async def get_address_utxos(self, address: str) -> list[Utxo]:
        """Get the unspent outputs of an address."""
        return await self._call(AddressApi.address_utxos(address), list[Utxo])

    async def scripthash_txs(self, script: bytes, last_seen: str | None = None) -> list[Tx]:
        """Get the transactions of a script, paginated like
        ``get_address_txs``."""
        return await self._call(AddressApi.scripthash_txs(script, last_seen), list[Tx])

    async def get_scripthash_stats(self, script: bytes) -> ScriptHashStats:
        """Get statistics about a script."""
        return await self._call(AddressApi.scripthash_stats(script), ScriptHashStats)

    async def get_scripthash_utxos(self, script: bytes) -> list[Utxo]:
        """Get the unspent outputs of a script."""
        return await self._call(AddressApi.scripthash_utxos(script), list[Utxo])

    ###################
    #     Mempool     #
    ###################

    async def get_mempool_stats(self) -> MempoolStats:
        """Get statistics about the mempool."""
        return await self._call(MempoolApi.stats(), MempoolStats)

    async def get_mempool_recent_txs(self) -> list[MempoolRecentTx]:
        """Get the last 10 transactions that entered the mempool."""
        return await self._call(MempoolApi.recent(), list[MempoolRecentTx])

    async def get_fee_estimates(self) -> dict[int, float]:
        """Get fee estimates in sat/vB keyed by confirmation target in
        blocks."""
        return await self._call(FeeEstimatesApi.fee_rate(), dict[int, float])
