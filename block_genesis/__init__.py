"""
BlockGenesis - Genesis Block Registry
=======================================
Canonical genesis blocks for a family of related networks, plus the
block/transaction wire codec used to build and verify them.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
__license__ = "MIT"

# Constants
from block_genesis.constants import Network, Envelope, PROTOCOL_VERSION

# Configuration
from block_genesis.config import GenesisSettings, get_settings

# Hashing
from block_genesis.domain.crypto_core import Hash256, ZERO_HASH, hash256

# Models
from block_genesis.domain.models import (
    OutPoint,
    TxIn,
    TxOut,
    Transaction,
    BlockHeader,
    Block,
)

# Codec
from block_genesis.wire.codec import BlockCodec

# Genesis
from block_genesis.domain.genesis import (
    NetworkGenesisRecord,
    GenesisRegistry,
    get_genesis_registry,
    get_genesis,
)

__all__ = [
    # Version
    "__version__",

    # Constants
    "Network",
    "Envelope",
    "PROTOCOL_VERSION",

    # Config
    "GenesisSettings",
    "get_settings",

    # Hashing
    "Hash256",
    "ZERO_HASH",
    "hash256",

    # Models
    "OutPoint",
    "TxIn",
    "TxOut",
    "Transaction",
    "BlockHeader",
    "Block",

    # Codec
    "BlockCodec",

    # Genesis
    "NetworkGenesisRecord",
    "GenesisRegistry",
    "get_genesis_registry",
    "get_genesis",
]
