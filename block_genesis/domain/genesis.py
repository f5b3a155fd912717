"""
BlockGenesis - Genesis Registry
=================================
Canonical genesis block, hash and merkle root for every network.

Security Level: CRITICAL
Last Updated: 2026-10-12
Version: 1.0.0

Genesis blocks:
- mainnet, regtest, testnet3, simnet: assembled from literal header
  fields around the shared coinbase transaction
- pkttest: decoded from a raw framed capture with the PacketCrypt envelope

Every record is checked before it is published: the recomputed block
hash and merkle root must equal the declared constants. Any mismatch
aborts construction; computed values never replace declared ones.

IMPORTANT: genesis blocks MUST be identical on every node.
"""

from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterator, Optional, Tuple, Union, Any
import struct

from block_genesis.constants import (
    Network,
    Envelope,
    FRAME_MAGIC_SIZE,
    FRAME_PREFIX_SIZE,
    GENESIS_COINBASE_SCRIPT,
    GENESIS_COINBASE_PK_SCRIPT,
    GENESIS_COINBASE_VALUE,
    GENESIS_MERKLE_ROOT,
    GENESIS_HEADERS,
    MAX_BLOCK_PAYLOAD,
    PKTTEST_FRAME_MAGIC,
    PKTTEST_GENESIS_HASH,
    PKTTEST_GENESIS_MERKLE_ROOT,
    PKTTEST_GENESIS_HEX,
)
from block_genesis.config import GenesisSettings, get_settings
from block_genesis.domain.crypto_core import Hash256, ZERO_HASH
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
    GenesisError,
    GenesisInvariantError,
    UnknownNetworkError,
)
from block_genesis.logging_setup import get_logger, PerformanceLogger
from block_genesis.utils.merkle import compute_merkle_root
from block_genesis.utils.serialization import hex_to_bytes
from block_genesis.wire.codec import BlockCodec


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("genesis")


# ============================================================================
# RECORD
# ============================================================================

@dataclass(frozen=True)
class NetworkGenesisRecord:
    """
    Verified genesis data for one network.

    Attributes:
        network (Network): Network profile
        block (Block): Genesis block
        hash (Hash256): Block identity hash
        merkle_root (Hash256): Transaction merkle root
    """

    network: Network
    block: Block
    hash: Hash256
    merkle_root: Hash256

    def to_dict(self) -> Dict[str, Any]:
        return {
            "network": self.network.value,
            "hash": self.hash.hex(),
            "merkle_root": self.merkle_root.hex(),
            "block": self.block.to_dict(),
        }


# ============================================================================
# GENESIS SOURCES
# ============================================================================

@dataclass(frozen=True)
class LiteralGenesis:
    """Genesis defined by header fields around the shared coinbase"""

    version: int
    timestamp: int
    bits: int
    nonce: int
    hash: str
    merkle_root: str = GENESIS_MERKLE_ROOT


@dataclass(frozen=True)
class RawGenesis:
    """Genesis defined by a framed raw block capture"""

    raw_hex: str
    frame_magic: bytes
    envelope: Envelope
    hash: str
    merkle_root: str


GenesisSource = Union[LiteralGenesis, RawGenesis]


def genesis_coinbase_tx() -> Transaction:
    """
    Coinbase shared by the mainnet, regtest, testnet3 and simnet genesis
    blocks.
    """
    return Transaction(
        version=1,
        inputs=(
            TxIn(
                previous_outpoint=OutPoint.null(),
                signature_script=GENESIS_COINBASE_SCRIPT,
                sequence=0xffffffff,
            ),
        ),
        outputs=(
            TxOut(
                value=GENESIS_COINBASE_VALUE,
                pk_script=GENESIS_COINBASE_PK_SCRIPT,
            ),
        ),
        lock_time=0,
    )


def default_sources() -> Dict[Network, GenesisSource]:
    """Genesis definitions for every supported network"""
    sources: Dict[Network, GenesisSource] = {
        network: LiteralGenesis(**fields)
        for network, fields in GENESIS_HEADERS.items()
    }
    sources[Network.PKTTEST] = RawGenesis(
        raw_hex=PKTTEST_GENESIS_HEX,
        frame_magic=PKTTEST_FRAME_MAGIC,
        envelope=Envelope.PACKETCRYPT,
        hash=PKTTEST_GENESIS_HASH,
        merkle_root=PKTTEST_GENESIS_MERKLE_ROOT,
    )
    return sources


# ============================================================================
# FRAMING
# ============================================================================

def strip_frame(data: bytes, magic: Optional[bytes] = None) -> bytes:
    """
    Remove the 8-byte framing prefix (magic + LE payload length).

    Args:
        data: Framed capture
        magic: Expected magic (None = not checked)

    Returns:
        bytes: Block payload

    Raises:
        GenesisError: Short frame, wrong magic or length mismatch
    """
    if len(data) < FRAME_PREFIX_SIZE:
        raise GenesisError(
            f"Framed capture shorter than {FRAME_PREFIX_SIZE} bytes",
            code="FRAME_TOO_SHORT",
            details={"length": len(data)}
        )

    frame_magic = data[:FRAME_MAGIC_SIZE]
    declared = struct.unpack_from("<I", data, FRAME_MAGIC_SIZE)[0]
    payload = data[FRAME_PREFIX_SIZE:]

    if magic is not None and frame_magic != magic:
        raise GenesisError(
            f"Frame magic mismatch: {frame_magic.hex()} != {magic.hex()}",
            code="FRAME_MAGIC_MISMATCH"
        )

    if declared != len(payload):
        raise GenesisError(
            f"Frame declares {declared} bytes, {len(payload)} present",
            code="FRAME_LENGTH_MISMATCH",
            details={"declared": declared, "actual": len(payload)}
        )

    return payload


# ============================================================================
# REGISTRY
# ============================================================================

class GenesisRegistry:
    """
    Write-once table of verified genesis records.

    Args:
        settings: Settings (the registry keeps its own decoding limits)
        sources: Genesis definitions (defaults to default_sources())

    Raises:
        GenesisError: Any record fails to build or verify

    Examples:
        >>> registry = GenesisRegistry()
        >>> str(registry.get("mainnet").hash)
        '000000000019d6689c085ae165831e934ff763ae46a2a6c172b3f1b60a8ce26f'
    """

    def __init__(
        self,
        settings: Optional[GenesisSettings] = None,
        sources: Optional[Dict[Network, GenesisSource]] = None,
    ):
        self.settings = settings or get_settings()
        self._codec = BlockCodec(
            self.settings.model_copy(update={"max_block_payload": MAX_BLOCK_PAYLOAD})
        )

        records: Dict[Network, NetworkGenesisRecord] = {}
        with PerformanceLogger(logger, "build_genesis_registry"):
            for network, source in (sources or default_sources()).items():
                records[network] = self._build(Network(network), source)

        self._records = records

        logger.info(
            "Genesis registry initialized",
            extra_data={"networks": [n.value for n in records]}
        )

    # ------------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------------

    def _build(self, network: Network, source: GenesisSource) -> NetworkGenesisRecord:
        if isinstance(source, RawGenesis):
            block = self._decode_raw(network, source)
        else:
            block = self._assemble(source)

        expected_hash = Hash256.from_hex(source.hash)
        expected_root = Hash256.from_hex(source.merkle_root)

        self._verify(network, block, expected_hash, expected_root)

        logger.debug(
            "Genesis block verified",
            extra_data={
                "network": network.value,
                "hash": expected_hash.hex(),
                "tx_count": len(block.transactions),
            }
        )

        return NetworkGenesisRecord(
            network=network,
            block=block,
            hash=expected_hash,
            merkle_root=expected_root,
        )

    @staticmethod
    def _assemble(source: LiteralGenesis) -> Block:
        header = BlockHeader(
            version=source.version,
            prev_block=ZERO_HASH,
            merkle_root=Hash256.from_hex(source.merkle_root),
            timestamp=source.timestamp,
            bits=source.bits,
            nonce=source.nonce,
        )
        return Block(header=header, transactions=(genesis_coinbase_tx(),))

    def _decode_raw(self, network: Network, source: RawGenesis) -> Block:
        payload = strip_frame(hex_to_bytes(source.raw_hex), source.frame_magic)

        try:
            return self._codec.decode(payload, envelope=source.envelope, strict=True)
        except DecodeError as e:
            logger.critical(
                "Genesis block decode failed",
                extra_data={"network": network.value, **e.details}
            )
            raise GenesisError(
                f"Cannot decode {network.value} genesis block: {e.message}",
                code="GENESIS_DECODE_FAILED",
                details={"network": network.value, **e.details}
            ) from e

    def _verify(
        self,
        network: Network,
        block: Block,
        expected_hash: Hash256,
        expected_root: Hash256,
    ) -> None:
        def fail(what: str, expected: str, computed: str):
            error = GenesisInvariantError(network.value, what, expected, computed)
            logger.critical(error.message, extra_data=error.details)
            raise error

        if not block.header.prev_block.is_zero():
            fail("prev_block", ZERO_HASH.hex(), block.header.prev_block.hex())

        if block.coinbase() is None:
            fail("coinbase", "coinbase first", "missing")

        computed_hash = block.block_hash()
        if computed_hash != expected_hash:
            fail("hash", expected_hash.hex(), computed_hash.hex())

        if block.header.merkle_root != expected_root:
            fail("merkle_root", expected_root.hex(), block.header.merkle_root.hex())

        computed_root = compute_merkle_root(block.tx_hashes())
        if computed_root != expected_root:
            fail("computed merkle_root", expected_root.hex(), computed_root.hex())

    # ------------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------------

    @staticmethod
    def _resolve(network: Union[Network, str]) -> Network:
        if isinstance(network, Network):
            return network
        try:
            return Network(str(network).lower())
        except ValueError:
            raise UnknownNetworkError(network) from None

    def get(self, network: Union[Network, str]) -> NetworkGenesisRecord:
        """
        Genesis record for a network.

        Raises:
            UnknownNetworkError: Identifier not supported
        """
        resolved = self._resolve(network)
        record = self._records.get(resolved)
        if record is None:
            raise UnknownNetworkError(network)
        return record

    def networks(self) -> Tuple[Network, ...]:
        return tuple(self._records)

    def records(self) -> Tuple[NetworkGenesisRecord, ...]:
        return tuple(self._records.values())

    def __contains__(self, network: object) -> bool:
        try:
            return self._resolve(network) in self._records
        except UnknownNetworkError:
            return False

    def __iter__(self) -> Iterator[NetworkGenesisRecord]:
        return iter(self.records())

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"GenesisRegistry(networks={[n.value for n in self._records]})"


# ============================================================================
# PROCESS-WIDE ACCESS
# ============================================================================

@lru_cache(maxsize=1)
def get_genesis_registry() -> GenesisRegistry:
    """Registry built once per process with get_settings()"""
    return GenesisRegistry()


def get_genesis(network: Union[Network, str]) -> NetworkGenesisRecord:
    """
    Verified genesis record for a network.

    Examples:
        >>> get_genesis(Network.REGTEST).block.header.nonce
        2
    """
    return get_genesis_registry().get(network)


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "NetworkGenesisRecord",
    "LiteralGenesis",
    "RawGenesis",
    "GenesisRegistry",
    "genesis_coinbase_tx",
    "default_sources",
    "strip_frame",
    "get_genesis_registry",
    "get_genesis",
]
