"""
BlockGenesis - Wire Package
=============================
Byte reader, block codec and envelope proof codecs.
"""

from block_genesis.wire.reader import ByteReader
from block_genesis.wire.proof import ProofCodec, PacketCryptProofCodec, PROOF_CODECS
from block_genesis.wire.codec import (
    BlockCodec,
    read_header,
    read_transaction,
    decode_transaction,
)

__all__ = [
    "ByteReader",
    "ProofCodec",
    "PacketCryptProofCodec",
    "PROOF_CODECS",
    "BlockCodec",
    "read_header",
    "read_transaction",
    "decode_transaction",
]
