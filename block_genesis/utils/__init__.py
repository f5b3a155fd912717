"""
BlockGenesis - Utilities Package
==================================
Hex/JSON helpers, compact size integers and merkle roots.
"""

from block_genesis.utils.serialization import (
    serialize_to_json,
    bytes_to_hex,
    hex_to_bytes,
    compact_size,
    compact_size_length,
    read_compact_size,
)
from block_genesis.utils.merkle import compute_merkle_root

__all__ = [
    # Serialization
    "serialize_to_json",
    "bytes_to_hex",
    "hex_to_bytes",
    "compact_size",
    "compact_size_length",
    "read_compact_size",

    # Merkle
    "compute_merkle_root",
]
