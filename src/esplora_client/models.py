r"""Response models of the Esplora JSON API.

The models follow the upstream schema
(https://github.com/Blockstream/esplora/blob/master/API.md). Unknown
fields are ignored and missing required fields are validation errors.
Hashes (txids, block hashes) are kept as lowercase hex strings, scripts
and witness items are decoded from hex to ``bytes``.
"""

from __future__ import annotations

__all__ = [
    "AddressStats",
    "AddressTxsSummary",
    "BlockInfo",
    "BlockStatus",
    "BlockSummary",
    "BlockTime",
    "MempoolFeesSubmitPackage",
    "MempoolRecentTx",
    "MempoolStats",
    "MerkleProof",
    "OutputStatus",
    "PrevOut",
    "ScriptHashStats",
    "ScriptHashTxsSummary",
    "SubmitPackageResult",
    "Tx",
    "TxResult",
    "TxStatus",
    "Utxo",
    "UtxoStatus",
    "Vin",
    "Vout",
    "btc_per_kvb_to_sat_per_kwu",
    "btc_to_sat",
    "convert_fee_rate",
]

import math
from decimal import Decimal
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)

SAT_PER_BTC = 100_000_000
# 1 BTC/kvB = 1e8 sat / 4000 wu
SAT_PER_KWU_PER_BTC_PER_KVB = 25_000_000


def _hex_to_bytes(value: Any) -> Any:
    if isinstance(value, str):
        return bytes.fromhex(value)
    return value


Hash = Annotated[str, StringConstraints(pattern=r"^[0-9a-fA-F]{64}$", to_lower=True)]
HexBytes = Annotated[bytes, BeforeValidator(_hex_to_bytes)]


def btc_to_sat(btc: float) -> int:
    """Convert an amount in BTC to satoshis.

    Example:
        ```pycon
        >>> from esplora_client.models import btc_to_sat
        >>> btc_to_sat(0.00012345)
        12345

        ```
    """
    if not math.isfinite(btc) or btc < 0:
        msg = f"invalid BTC amount: {btc}"
        raise ValueError(msg)
    return int((Decimal(str(btc)) * SAT_PER_BTC).to_integral_value())


def btc_per_kvb_to_sat_per_kwu(btc_per_kvb: float) -> int:
    """Convert a fee rate in BTC/kvB to sat/kwu.

    Example:
        ```pycon
        >>> from esplora_client.models import btc_per_kvb_to_sat_per_kwu
        >>> btc_per_kvb_to_sat_per_kwu(0.0001)
        2500

        ```
    """
    sat_per_kwu = btc_per_kvb * SAT_PER_KWU_PER_BTC_PER_KVB
    if not math.isfinite(sat_per_kwu):
        msg = "feerate overflow"
        raise ValueError(msg)
    return max(0, int(sat_per_kwu))


class _EsploraModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class PrevOut(_EsploraModel):
    """Information about a previous output.

    Attributes:
        value: The value of the previous output, in satoshis.
        scriptpubkey: The script the previous output is locked to.
    """

    value: int
    scriptpubkey: HexBytes


class Vin(_EsploraModel):
    """Information about an input of a transaction.

    Attributes:
        txid: The txid of the transaction this input spends from.
        vout: The output index of the spent output.
        prevout: The spent output, ``None`` for a coinbase input.
        scriptsig: The script authorizing the spend.
        witness: The witness items, empty for non-SegWit spends.
        sequence: The sequence value of the input.
        is_coinbase: Whether this is a coinbase input.
    """

    txid: Hash
    vout: int
    prevout: PrevOut | None = None
    scriptsig: HexBytes
    witness: list[HexBytes] = Field(default_factory=list)
    sequence: int
    is_coinbase: bool


class Vout(_EsploraModel):
    """Information about an output of a transaction.

    Attributes:
        value: The value of the output, in satoshis.
        scriptpubkey: The script the output is locked to.
    """

    value: int
    scriptpubkey: HexBytes


class TxStatus(_EsploraModel):
    """The confirmation status of a transaction.

    ``block_time`` is set by the miner and may not reflect the exact
    time of mining.
    """

    confirmed: bool
    block_height: int | None = None
    block_hash: Hash | None = None
    block_time: int | None = None


class BlockTime(_EsploraModel):
    """Time-related information about a block."""

    timestamp: int
    height: int


class Tx(_EsploraModel):
    """A transaction in the format returned by Esplora.

    Attributes:
        txid: The transaction id.
        version: The version number.
        locktime: The locktime.
        vin: The inputs.
        vout: The outputs.
        size: The size in raw bytes (not virtual bytes).
        weight: The weight in weight units.
        status: The confirmation status.
        fee: The fee paid, in satoshis.
    """

    txid: Hash
    version: int
    locktime: int
    vin: list[Vin]
    vout: list[Vout]
    size: int
    weight: int
    status: TxStatus
    fee: int

    def confirmation_time(self) -> BlockTime | None:
        """Return the height and time of the confirming block, or
        ``None`` if the transaction is unconfirmed."""
        status = self.status
        if status.confirmed and status.block_height is not None and status.block_time is not None:
            return BlockTime(timestamp=status.block_time, height=status.block_height)
        return None

    def previous_outputs(self) -> list[PrevOut | None]:
        """Return the outputs spent by each input, ``None`` for coinbase
        inputs."""
        return [vin.prevout for vin in self.vin]


class MerkleProof(_EsploraModel):
    """A merkle inclusion proof for a transaction.

    Attributes:
        block_height: The height of the block the transaction was confirmed in.
        merkle: The hashes the transaction hash is paired with, deepest
            pairing first.
        pos: The 0-based position of the transaction in the block.
    """

    block_height: int
    merkle: list[Hash]
    pos: int


class OutputStatus(_EsploraModel):
    """The spend status of an output."""

    spent: bool
    txid: Hash | None = None
    vin: int | None = None
    status: TxStatus | None = None


class BlockStatus(_EsploraModel):
    """Information about a block's status.

    Attributes:
        in_best_chain: ``False`` for blocks of a stale chain.
        height: The height of the block.
        next_best: The hash of the block building on top of this one.
    """

    in_best_chain: bool
    height: int | None = None
    next_best: Hash | None = None


class BlockInfo(_EsploraModel):
    """Information about a block."""

    id: Hash
    height: int
    version: int
    timestamp: int
    tx_count: int
    size: int
    weight: int
    merkle_root: Hash
    previousblockhash: Hash | None = None
    mediantime: int
    nonce: int
    bits: int
    difficulty: float


class BlockSummary(_EsploraModel):
    """Summary of a block.

    The ``timestamp`` and ``height`` fields of the JSON object are
    grouped in ``time``.
    """

    id: Hash
    time: BlockTime
    previousblockhash: Hash | None = None
    merkle_root: Hash

    @model_validator(mode="before")
    @classmethod
    def _group_time(cls, data: Any) -> Any:
        if isinstance(data, dict) and "time" not in data:
            data = dict(data)
            data["time"] = {
                "timestamp": data.pop("timestamp", None),
                "height": data.pop("height", None),
            }
        return data


class AddressTxsSummary(_EsploraModel):
    """A summary of the transactions an address or script hash was
    involved in."""

    funded_txo_count: int
    funded_txo_sum: int
    spent_txo_count: int
    spent_txo_sum: int
    tx_count: int


ScriptHashTxsSummary = AddressTxsSummary


class AddressStats(_EsploraModel):
    """Confirmed and mempool statistics about an address."""

    address: str
    chain_stats: AddressTxsSummary
    mempool_stats: AddressTxsSummary


class ScriptHashStats(_EsploraModel):
    """Confirmed and mempool statistics about a script hash."""

    chain_stats: ScriptHashTxsSummary
    mempool_stats: ScriptHashTxsSummary


class UtxoStatus(_EsploraModel):
    """The confirmation status of an unspent output."""

    confirmed: bool
    block_height: int | None = None
    block_hash: Hash | None = None
    block_time: int | None = None


class Utxo(_EsploraModel):
    """An unspent output.

    Attributes:
        txid: The txid of the transaction that created the output.
        vout: The output index.
        status: The confirmation status.
        value: The value, in satoshis.
    """

    txid: Hash
    vout: int
    status: UtxoStatus
    value: int


class MempoolStats(_EsploraModel):
    """Statistics about the mempool.

    Attributes:
        count: The number of transactions in the mempool.
        vsize: The total size of the transactions, in virtual bytes.
        total_fee: The total fee paid, in satoshis.
        fee_histogram: ``(feerate, vsize)`` pairs, each ``vsize`` being the
            total size of transactions paying more than ``feerate`` but
            less than the previous entry's ``feerate``.
    """

    count: int
    vsize: int
    total_fee: int
    fee_histogram: list[tuple[float, int]]


class MempoolRecentTx(_EsploraModel):
    """A transaction that recently entered the mempool."""

    txid: Hash
    fee: int
    vsize: int
    value: int


class MempoolFeesSubmitPackage(_EsploraModel):
    """The fees of a transaction submitted in a package.

    Attributes:
        base: The transaction fee, in satoshis (sent as BTC).
        effective_feerate: The effective feerate in sat/kwu (sent as
            BTC/kvB), ``None`` if the transaction was already in the mempool.
        effective_includes: The wtxids whose fees and vsizes are included
            in ``effective_feerate``.
    """

    base: int
    effective_feerate: int | None = Field(default=None, alias="effective-feerate")
    effective_includes: list[Hash] | None = Field(default=None, alias="effective-includes")

    @field_validator("base", mode="before")
    @classmethod
    def _base_from_btc(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return btc_to_sat(float(value))
        return value

    @field_validator("effective_feerate", mode="before")
    @classmethod
    def _feerate_from_btc_per_kvb(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return btc_per_kvb_to_sat_per_kwu(float(value))
        return value


class TxResult(_EsploraModel):
    """The result of one transaction of a submitted package.

    Attributes:
        txid: The transaction id.
        other_wtxid: Set when a transaction with the same txid but a
            different witness was already in the mempool, in which case
            the submitted one was ignored.
        vsize: Sigops-adjusted virtual size.
        fees: The transaction fees.
        error: The rejection reason, if any.
    """

    txid: Hash
    other_wtxid: Hash | None = Field(default=None, alias="other-wtxid")
    vsize: int | None = None
    fees: MempoolFeesSubmitPackage | None = None
    error: str | None = None


class SubmitPackageResult(_EsploraModel):
    """The result of a submitted package of transactions.

    Attributes:
        package_msg: ``"success"`` when all transactions were accepted or
            were already in the mempool.
        tx_results: Transaction results keyed by wtxid.
        replaced_transactions: Txids of replaced transactions.
    """

    package_msg: str
    tx_results: dict[Hash, TxResult] = Field(alias="tx-results")
    replaced_transactions: list[Hash] | None = Field(default=None, alias="replaced-transactions")


def convert_fee_rate(target: int, estimates: dict[int, float]) -> float | None:
    """Pick a fee rate estimate for a confirmation target.

    Args:
        target: The confirmation target, in blocks.
        estimates: Fee estimates as returned by ``get_fee_estimates``.

    Returns:
        The estimate of the highest confirmation target that is lower or
        equal to ``target``, or ``None`` if there is none.

    Example:
        ```pycon
        >>> from esplora_client.models import convert_fee_rate
        >>> convert_fee_rate(10, {1: 20.0, 6: 8.5, 144: 1.0})
        8.5
        >>> convert_fee_rate(0, {1: 20.0}) is None
        True

        ```
    """
    candidates = [k for k in estimates if k <= target]
    if not candidates:
        return None
    return estimates[max(candidates)]
