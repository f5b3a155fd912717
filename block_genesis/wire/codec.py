"""
BlockGenesis - Block Codec
============================
Binary block decoding/encoding for the base and augmented envelopes.

Security Level: CRITICAL
Last Updated: 2026-10-12
Version: 1.0.0

Wire layout:
- Header (80 bytes): version int32 | prev_block 32 | merkle_root 32 |
  timestamp uint32 | bits uint32 | nonce uint32
- Proof segment (augmented envelopes only, right after the header)
- varint tx count, then each transaction:
  version int32 | varint n_in | inputs | varint n_out | outputs | lock_time uint32
- TxIn: prev hash 32 | prev index uint32 | var_bytes script | sequence uint32
- TxOut: value int64 | var_bytes script

All fixed-width integers are little-endian.
"""

import logging
from typing import Optional

from block_genesis.constants import (
    Envelope,
    PROTOCOL_VERSION,
    MIN_TX_SIZE,
    MIN_TXIN_SIZE,
    MIN_TXOUT_SIZE,
)
from block_genesis.config import GenesisSettings, get_settings
from block_genesis.domain.models import (
    Block,
    BlockHeader,
    OutPoint,
    Transaction,
    TxIn,
    TxOut,
)
from block_genesis.errors import (
    DecodeError,
    EncodeError,
    OversizedLengthError,
    TrailingDataError,
)
from block_genesis.logging_setup import get_logger
from block_genesis.utils.serialization import compact_size
from block_genesis.wire.proof import PROOF_CODECS, ProofCodec
from block_genesis.wire.reader import ByteReader


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("codec")


# ============================================================================
# FIELD READERS
# ============================================================================

def read_header(reader: ByteReader, field: str = "header") -> BlockHeader:
    """Read the 80-byte block header"""
    return BlockHeader(
        version=reader.read_int32(f"{field}.version"),
        prev_block=reader.read_hash(f"{field}.prev_block"),
        merkle_root=reader.read_hash(f"{field}.merkle_root"),
        timestamp=reader.read_uint32(f"{field}.timestamp"),
        bits=reader.read_uint32(f"{field}.bits"),
        nonce=reader.read_uint32(f"{field}.nonce"),
    )


def read_txin(reader: ByteReader, field: str) -> TxIn:
    outpoint = OutPoint(
        hash=reader.read_hash(f"{field}.previous_outpoint.hash"),
        index=reader.read_uint32(f"{field}.previous_outpoint.index"),
    )
    return TxIn(
        previous_outpoint=outpoint,
        signature_script=reader.read_var_bytes(f"{field}.signature_script"),
        sequence=reader.read_uint32(f"{field}.sequence"),
    )


def read_txout(reader: ByteReader, field: str) -> TxOut:
    return TxOut(
        value=reader.read_int64(f"{field}.value"),
        pk_script=reader.read_var_bytes(f"{field}.pk_script"),
    )


def read_transaction(reader: ByteReader, field: str = "transaction") -> Transaction:
    """Read one transaction"""
    version = reader.read_int32(f"{field}.version")

    n_in = reader.read_count(f"{field}.inputs", MIN_TXIN_SIZE)
    inputs = [read_txin(reader, f"{field}.inputs[{i}]") for i in range(n_in)]

    n_out = reader.read_count(f"{field}.outputs", MIN_TXOUT_SIZE)
    outputs = [read_txout(reader, f"{field}.outputs[{i}]") for i in range(n_out)]

    lock_time = reader.read_uint32(f"{field}.lock_time")

    return Transaction(
        version=version,
        inputs=inputs,
        outputs=outputs,
        lock_time=lock_time,
    )


def decode_transaction(data: bytes) -> Transaction:
    """Decode a standalone serialized transaction (no trailing bytes allowed)"""
    reader = ByteReader(data)
    tx = read_transaction(reader)
    if not reader.at_end():
        raise TrailingDataError(reader.offset, reader.remaining)
    return tx


# ============================================================================
# BLOCK CODEC
# ============================================================================

class BlockCodec:
    """
    Block decoder/encoder.

    Args:
        settings: Decoding limits (defaults to get_settings())

    Examples:
        >>> codec = BlockCodec()
        >>> block = codec.decode(raw, envelope=Envelope.PACKETCRYPT)
        >>> codec.encode(block, Envelope.PACKETCRYPT) == raw
        True
    """

    def __init__(self, settings: Optional[GenesisSettings] = None):
        self.settings = settings or get_settings()

    @staticmethod
    def _proof_codec(envelope: Envelope) -> Optional[ProofCodec]:
        envelope = Envelope(envelope)
        return PROOF_CODECS.get(envelope)

    def decode(
        self,
        data: bytes,
        protocol_version: int = PROTOCOL_VERSION,
        envelope: Envelope = Envelope.BASE,
        strict: Optional[bool] = None,
    ) -> Block:
        """
        Decode a serialized block.

        Args:
            data: Serialized block (no framing prefix)
            protocol_version: Wire protocol version (non-negative)
            envelope: BASE or PACKETCRYPT
            strict: Reject trailing bytes (defaults to settings.strict_decoding)

        Returns:
            Block: Decoded block; proof is set for augmented envelopes

        Raises:
            DecodeError: Malformed input, with offset and field
            ValueError: Negative or non-integer protocol_version, unknown envelope
        """
        if (
            not isinstance(protocol_version, int)
            or isinstance(protocol_version, bool)
            or protocol_version < 0
        ):
            raise ValueError(f"Invalid protocol version: {protocol_version}")

        proof_codec = self._proof_codec(envelope)
        strict = self.settings.strict_decoding if strict is None else strict

        if len(data) > self.settings.max_block_payload:
            raise OversizedLengthError(
                0, "block", declared=len(data), limit=self.settings.max_block_payload
            )

        reader = ByteReader(data)
        try:
            header = read_header(reader)

            proof = None
            if proof_codec is not None:
                proof = proof_codec.decode(reader, "proof")

            tx_count = reader.read_count("transactions", MIN_TX_SIZE)
            transactions = [
                read_transaction(reader, f"transactions[{i}]")
                for i in range(tx_count)
            ]

            if strict and not reader.at_end():
                raise TrailingDataError(reader.offset, reader.remaining)
        except DecodeError as e:
            e.details["protocol_version"] = protocol_version
            e.details["envelope"] = Envelope(envelope).name
            logger.debug("Block decode failed", extra_data=e.details)
            raise

        block = Block(header=header, transactions=transactions, proof=proof)

        if logger.is_enabled_for(logging.DEBUG):
            logger.debug(
                "Block decoded",
                extra_data={
                    "hash": block.block_hash().hex(),
                    "envelope": Envelope(envelope).name,
                    "protocol_version": protocol_version,
                    "tx_count": tx_count,
                    "size": reader.offset,
                }
            )

        return block

    def encode(self, block: Block, envelope: Envelope = Envelope.BASE) -> bytes:
        """
        Serialize a block.

        Raises:
            EncodeError: Augmented envelope without a proof, or a proof
                given for the base envelope
        """
        proof_codec = self._proof_codec(envelope)

        parts = [block.header.serialize()]

        if proof_codec is not None:
            if block.proof is None:
                raise EncodeError(
                    f"{Envelope(envelope).name} envelope requires a proof",
                    code="MISSING_PROOF"
                )
            parts.append(proof_codec.encode(block.proof))
        elif block.proof is not None:
            raise EncodeError(
                "Block carries a proof but envelope is BASE",
                code="UNEXPECTED_PROOF"
            )

        parts.append(compact_size(len(block.transactions)))
        parts.extend(tx.serialize() for tx in block.transactions)

        return b"".join(parts)


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "BlockCodec",
    "read_header",
    "read_transaction",
    "decode_transaction",
]
