"""
BlockGenesis - Core Domain Models
===================================
Block, header and transaction structures with their wire serialization.

Security Level: CRITICAL
Last Updated: 2026-10-12
Version: 1.0.0

Models:
- OutPoint: Reference to a previous transaction output
- TxIn: Transaction input
- TxOut: Transaction output
- Transaction: Inputs + outputs + lock time
- BlockHeader: 80-byte header
- Block: Header + transactions (+ optional PacketCrypt proof)

All structures are frozen and hold tuples, so shared instances are
safe to read from any thread.

Serialization here is the encode half of the wire format; decoding lives
in block_genesis.wire.codec.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple, Dict, Any
import struct

from block_genesis.constants import (
    NULL_OUTPOINT_INDEX,
    MAX_SEQUENCE,
)
from block_genesis.domain.crypto_core import Hash256, ZERO_HASH, hash256
from block_genesis.domain.packetcrypt import PacketCryptProof
from block_genesis.errors import ValidationError
from block_genesis.utils.serialization import compact_size


INT32_RANGE = (-(1 << 31), (1 << 31) - 1)
UINT32_RANGE = (0, (1 << 32) - 1)
INT64_RANGE = (-(1 << 63), (1 << 63) - 1)


def _check_range(name: str, value: int, bounds: Tuple[int, int]) -> None:
    low, high = bounds
    if not isinstance(value, int) or not (low <= value <= high):
        raise ValidationError(
            f"{name} out of range: {value!r}",
            code="FIELD_OUT_OF_RANGE",
            details={"field": name, "value": value, "min": low, "max": high}
        )


def _check_hash(name: str, value: Any) -> None:
    if not isinstance(value, Hash256):
        raise ValidationError(
            f"{name} must be Hash256, got {type(value).__name__}",
            code="INVALID_HASH_TYPE"
        )


def _freeze_bytes(obj: Any, name: str) -> None:
    value = getattr(obj, name)
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise ValidationError(
            f"{name} must be bytes, got {type(value).__name__}",
            code="INVALID_SCRIPT_TYPE"
        )
    if not isinstance(value, bytes):
        object.__setattr__(obj, name, bytes(value))


# ============================================================================
# OUTPOINT
# ============================================================================

@dataclass(frozen=True)
class OutPoint:
    """
    Reference to a previous transaction output.

    Attributes:
        hash (Hash256): Previous transaction hash
        index (int): Output index (uint32)

    The null outpoint (zero hash, index 0xffffffff) marks a coinbase input.
    """

    hash: Hash256
    index: int

    def __post_init__(self):
        _check_hash("outpoint.hash", self.hash)
        _check_range("outpoint.index", self.index, UINT32_RANGE)

    @classmethod
    def null(cls) -> OutPoint:
        return cls(hash=ZERO_HASH, index=NULL_OUTPOINT_INDEX)

    def is_null(self) -> bool:
        return self.index == NULL_OUTPOINT_INDEX and self.hash.is_zero()

    def serialize(self) -> bytes:
        return self.hash.raw + struct.pack("<I", self.index)

    def to_dict(self) -> Dict[str, Any]:
        return {"hash": self.hash.hex(), "index": self.index}


# ============================================================================
# TRANSACTION INPUT / OUTPUT
# ============================================================================

@dataclass(frozen=True)
class TxIn:
    """
    Transaction input.

    Attributes:
        previous_outpoint (OutPoint): Output being spent
        signature_script (bytes): Unlocking script (free-form for coinbase)
        sequence (int): Sequence number (uint32)
    """

    previous_outpoint: OutPoint
    signature_script: bytes = b""
    sequence: int = MAX_SEQUENCE

    def __post_init__(self):
        if not isinstance(self.previous_outpoint, OutPoint):
            raise ValidationError(
                "previous_outpoint must be OutPoint",
                code="INVALID_OUTPOINT"
            )
        _freeze_bytes(self, "signature_script")
        _check_range("txin.sequence", self.sequence, UINT32_RANGE)

    def serialize(self) -> bytes:
        return (
            self.previous_outpoint.serialize()
            + compact_size(len(self.signature_script))
            + self.signature_script
            + struct.pack("<I", self.sequence)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "previous_outpoint": self.previous_outpoint.to_dict(),
            "signature_script": self.signature_script.hex(),
            "sequence": self.sequence,
        }


@dataclass(frozen=True)
class TxOut:
    """
    Transaction output.

    Attributes:
        value (int): Amount in smallest units (int64)
        pk_script (bytes): Locking script
    """

    value: int
    pk_script: bytes = b""

    def __post_init__(self):
        _check_range("txout.value", self.value, INT64_RANGE)
        _freeze_bytes(self, "pk_script")

    def serialize(self) -> bytes:
        return (
            struct.pack("<q", self.value)
            + compact_size(len(self.pk_script))
            + self.pk_script
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "pk_script": self.pk_script.hex()}


# ============================================================================
# TRANSACTION
# ============================================================================

@dataclass(frozen=True)
class Transaction:
    """
    Transaction.

    Attributes:
        version (int): Transaction version (int32)
        inputs (Tuple[TxIn, ...]): Inputs, order is hashed
        outputs (Tuple[TxOut, ...]): Outputs, order is hashed
        lock_time (int): Lock time (uint32)

    Examples:
        >>> tx = Transaction(
        ...     version=1,
        ...     inputs=[TxIn(OutPoint.null(), b"\\x00")],
        ...     outputs=[TxOut(5000000000, b"\\x51")],
        ... )
        >>> tx.is_coinbase()
        True
    """

    version: int
    inputs: Tuple[TxIn, ...]
    outputs: Tuple[TxOut, ...]
    lock_time: int = 0

    def __post_init__(self):
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "outputs", tuple(self.outputs))
        _check_range("tx.version", self.version, INT32_RANGE)
        _check_range("tx.lock_time", self.lock_time, UINT32_RANGE)

    def serialize(self) -> bytes:
        """Full wire serialization"""
        parts = [struct.pack("<i", self.version), compact_size(len(self.inputs))]
        parts.extend(txin.serialize() for txin in self.inputs)
        parts.append(compact_size(len(self.outputs)))
        parts.extend(txout.serialize() for txout in self.outputs)
        parts.append(struct.pack("<I", self.lock_time))
        return b"".join(parts)

    def tx_hash(self) -> Hash256:
        """Identity hash: double SHA-256 of the full serialization"""
        return hash256(self.serialize())

    def is_coinbase(self) -> bool:
        return len(self.inputs) == 1 and self.inputs[0].previous_outpoint.is_null()

    def total_output_value(self) -> int:
        return sum(txout.value for txout in self.outputs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "txid": self.tx_hash().hex(),
            "version": self.version,
            "inputs": [txin.to_dict() for txin in self.inputs],
            "outputs": [txout.to_dict() for txout in self.outputs],
            "lock_time": self.lock_time,
        }


# ============================================================================
# BLOCK HEADER
# ============================================================================

@dataclass(frozen=True)
class BlockHeader:
    """
    Block header, always 80 bytes on the wire.

    Attributes:
        version (int): Block version (int32)
        prev_block (Hash256): Previous block hash
        merkle_root (Hash256): Transaction merkle root
        timestamp (int): Unix seconds; written as uint32 (low 32 bits)
        bits (int): Compact difficulty target (uint32)
        nonce (int): Nonce (uint32)

    Examples:
        >>> header = BlockHeader(
        ...     version=1,
        ...     prev_block=ZERO_HASH,
        ...     merkle_root=Hash256.from_hex(GENESIS_MERKLE_ROOT),
        ...     timestamp=0x495fab29,
        ...     bits=0x1d00ffff,
        ...     nonce=0x7c2bac1d,
        ... )
        >>> str(header.block_hash())
        '000000000019d6689c085ae165831e934ff763ae46a2a6c172b3f1b60a8ce26f'
    """

    version: int
    prev_block: Hash256
    merkle_root: Hash256
    timestamp: int
    bits: int
    nonce: int

    def __post_init__(self):
        _check_range("header.version", self.version, INT32_RANGE)
        _check_hash("header.prev_block", self.prev_block)
        _check_hash("header.merkle_root", self.merkle_root)
        if not isinstance(self.timestamp, int) or self.timestamp < 0:
            raise ValidationError(
                f"Invalid timestamp: {self.timestamp!r}",
                code="INVALID_TIMESTAMP"
            )
        _check_range("header.bits", self.bits, UINT32_RANGE)
        _check_range("header.nonce", self.nonce, UINT32_RANGE)

    def serialize(self) -> bytes:
        return (
            struct.pack("<i", self.version)
            + self.prev_block.raw
            + self.merkle_root.raw
            + struct.pack("<III", self.timestamp & 0xFFFFFFFF, self.bits, self.nonce)
        )

    def block_hash(self) -> Hash256:
        """Identity hash: double SHA-256 of the 80-byte header"""
        return hash256(self.serialize())

    @property
    def time(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp & 0xFFFFFFFF, tz=timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "prev_block": self.prev_block.hex(),
            "merkle_root": self.merkle_root.hex(),
            "timestamp": self.timestamp,
            "time": self.time.isoformat(),
            "bits": f"{self.bits:08x}",
            "nonce": self.nonce,
        }

    def __repr__(self) -> str:
        return (
            f"BlockHeader(version={self.version}, "
            f"merkle_root={self.merkle_root.hex()[:16]}..., "
            f"timestamp={self.timestamp}, bits={self.bits:08x}, "
            f"nonce={self.nonce})"
        )


# ============================================================================
# BLOCK
# ============================================================================

@dataclass(frozen=True)
class Block:
    """
    Block: header, transactions and optional PacketCrypt proof.

    The proof is auxiliary data carried by the augmented envelope; it is
    never part of the block hash or the merkle root.

    Attributes:
        header (BlockHeader): Block header
        transactions (Tuple[Transaction, ...]): Transactions, coinbase first
        proof (Optional[PacketCryptProof]): Augmented envelope payload
    """

    header: BlockHeader
    transactions: Tuple[Transaction, ...]
    proof: Optional[PacketCryptProof] = None

    def __post_init__(self):
        if not isinstance(self.header, BlockHeader):
            raise ValidationError("header must be BlockHeader", code="INVALID_HEADER")
        object.__setattr__(self, "transactions", tuple(self.transactions))

    def block_hash(self) -> Hash256:
        return self.header.block_hash()

    def tx_hashes(self) -> Tuple[Hash256, ...]:
        return tuple(tx.tx_hash() for tx in self.transactions)

    def coinbase(self) -> Optional[Transaction]:
        """First transaction if it is a coinbase"""
        if self.transactions and self.transactions[0].is_coinbase():
            return self.transactions[0]
        return None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "hash": self.block_hash().hex(),
            "header": self.header.to_dict(),
            "transactions": [tx.to_dict() for tx in self.transactions],
        }
        if self.proof is not None:
            data["proof"] = self.proof.to_dict()
        return data

    def __repr__(self) -> str:
        return (
            f"Block(hash={self.block_hash().hex()[:16]}..., "
            f"txs={len(self.transactions)}, "
            f"proof={'yes' if self.proof is not None else 'no'})"
        )


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "OutPoint",
    "TxIn",
    "TxOut",
    "Transaction",
    "BlockHeader",
    "Block",
]
