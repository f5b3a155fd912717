"""
BlockGenesis - Merkle Root Cross-Check
========================================
Pairwise double SHA-256 reduction of transaction hashes.

Only used to cross-check declared genesis merkle roots.
"""

from typing import List, Sequence

from block_genesis.domain.crypto_core import Hash256, compute_double_sha256
from block_genesis.logging_setup import get_logger

logger = get_logger("utils.merkle")


def _hash_pair(left: bytes, right: bytes) -> bytes:
    return compute_double_sha256(left + right)


def compute_merkle_root(tx_hashes: Sequence[Hash256]) -> Hash256:
    """
    Reduce transaction hashes to a merkle root.

    Odd levels duplicate their last node. A single hash is its own root.

    Args:
        tx_hashes: Transaction hashes, block order

    Returns:
        Hash256: Merkle root

    Raises:
        ValueError: If tx_hashes is empty

    Examples:
        >>> root = compute_merkle_root([coinbase.tx_hash()])
        >>> root == coinbase.tx_hash()
        True
    """
    if not tx_hashes:
        raise ValueError("Cannot compute merkle root of no transactions")

    level: List[bytes] = [h.raw for h in tx_hashes]

    while len(level) > 1:
        if len(level) % 2 == 1:
            level.append(level[-1])

        level = [
            _hash_pair(level[i], level[i + 1])
            for i in range(0, len(level), 2)
        ]

    return Hash256(level[0])


__all__ = ["compute_merkle_root"]
