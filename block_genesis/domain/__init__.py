"""
BlockGenesis - Domain Package
===============================
Hashing, block models and the genesis registry.
"""

from block_genesis.domain.crypto_core import (
    Hash256,
    ZERO_HASH,
    hash256,
    compute_sha256,
    compute_double_sha256,
)

from block_genesis.domain.models import (
    OutPoint,
    TxIn,
    TxOut,
    Transaction,
    BlockHeader,
    Block,
)

from block_genesis.domain.packetcrypt import (
    ProofEntity,
    Announcements,
    PacketCryptProof,
)

__all__ = [
    "Hash256",
    "ZERO_HASH",
    "hash256",
    "compute_sha256",
    "compute_double_sha256",
    "OutPoint",
    "TxIn",
    "TxOut",
    "Transaction",
    "BlockHeader",
    "Block",
    "ProofEntity",
    "Announcements",
    "PacketCryptProof",
]
