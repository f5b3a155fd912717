"""
BlockGenesis - Genesis Registry Tests
=======================================
Unit tests for genesis construction and invariant checks.
"""

import dataclasses
import struct
from concurrent.futures import ThreadPoolExecutor

import pytest

from block_genesis.config import override_settings
from block_genesis.constants import (
    Network,
    Envelope,
    GENESIS_HEADERS,
    GENESIS_MERKLE_ROOT,
    PKTTEST_FRAME_MAGIC,
    PKTTEST_GENESIS_HASH,
    PKTTEST_GENESIS_HEX,
    PKTTEST_GENESIS_MERKLE_ROOT,
)
from block_genesis.domain.genesis import (
    GenesisRegistry,
    LiteralGenesis,
    RawGenesis,
    default_sources,
    get_genesis,
    get_genesis_registry,
    strip_frame,
)
from block_genesis.errors import (
    GenesisError,
    GenesisInvariantError,
    UnknownNetworkError,
)

from tests.vectors import EXPECTED_HASHES, GENESIS_TXID


def pkt_source(raw_hex: str = PKTTEST_GENESIS_HEX, **overrides) -> RawGenesis:
    fields = dict(
        raw_hex=raw_hex,
        frame_magic=PKTTEST_FRAME_MAGIC,
        envelope=Envelope.PACKETCRYPT,
        hash=PKTTEST_GENESIS_HASH,
        merkle_root=PKTTEST_GENESIS_MERKLE_ROOT,
    )
    fields.update(overrides)
    return RawGenesis(**fields)


class TestGenesisRecords:
    """Test every network's genesis record"""

    @pytest.mark.parametrize("network", sorted(EXPECTED_HASHES))
    def test_hash(self, registry, network):
        """Test recomputed header hash equals the published hash"""
        record = registry.get(network)
        assert record.hash.hex() == EXPECTED_HASHES[network]
        assert record.block.block_hash() == record.hash

    @pytest.mark.parametrize("network", sorted(EXPECTED_HASHES))
    def test_structure(self, registry, network):
        record = registry.get(network)
        block = record.block

        assert record.network == Network(network)
        assert block.header.prev_block.is_zero()
        assert block.coinbase() is not None
        assert block.header.merkle_root == record.merkle_root

    def test_literal_networks_share_coinbase(self, registry):
        for network in GENESIS_HEADERS:
            record = registry.get(network)
            assert record.merkle_root.hex() == GENESIS_MERKLE_ROOT
            assert record.block.transactions[0].tx_hash().hex() == GENESIS_TXID

    def test_regtest_and_simnet_fields(self, registry):
        regtest = registry.get(Network.REGTEST).block.header
        assert regtest.timestamp == 1296688602
        assert regtest.bits == 0x207fffff
        assert regtest.nonce == 2

        simnet = registry.get(Network.SIMNET).block.header
        assert simnet.timestamp == 1401292357
        assert simnet.nonce == 2

    def test_pkttest_carries_proof(self, registry):
        record = registry.get(Network.PKTTEST)
        assert record.block.proof is not None
        assert record.merkle_root.hex() == PKTTEST_GENESIS_MERKLE_ROOT

    def test_record_to_dict(self, registry):
        data = registry.get("mainnet").to_dict()
        assert data["network"] == "mainnet"
        assert data["hash"] == EXPECTED_HASHES["mainnet"]
        assert data["block"]["hash"] == EXPECTED_HASHES["mainnet"]

    def test_records_immutable(self, registry):
        record = registry.get(Network.MAINNET)
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.hash = None
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.block.header.nonce = 0


class TestRegistryLookup:
    """Test registry access"""

    def test_string_and_enum_lookup(self, registry):
        assert registry.get("regtest") is registry.get(Network.REGTEST)
        assert registry.get("REGTEST") is registry.get(Network.REGTEST)

    def test_unknown_network(self, registry):
        """Test unknown identifiers raise instead of returning a default"""
        with pytest.raises(UnknownNetworkError) as exc:
            registry.get("testnet4")
        assert exc.value.code == "UNKNOWN_NETWORK"

        with pytest.raises(UnknownNetworkError):
            registry.get(None)

    def test_network_missing_from_registry(self, test_config):
        sources = {Network.MAINNET: default_sources()[Network.MAINNET]}
        registry = GenesisRegistry(test_config, sources=sources)

        assert len(registry) == 1
        with pytest.raises(UnknownNetworkError):
            registry.get(Network.REGTEST)

    def test_container_protocol(self, registry):
        assert len(registry) == 5
        assert "simnet" in registry
        assert Network.PKTTEST in registry
        assert "nope" not in registry
        assert set(registry.networks()) == set(Network)
        assert [r.network for r in registry] == list(registry.networks())
        assert registry.records() == tuple(registry)

    def test_process_wide_registry(self):
        """Test the cached registry is built once"""
        assert get_genesis_registry() is get_genesis_registry()
        assert get_genesis("mainnet").hash.hex() == EXPECTED_HASHES["mainnet"]

    def test_concurrent_access(self):
        """Test concurrent readers see the same records"""
        with ThreadPoolExecutor(max_workers=8) as pool:
            hashes = list(pool.map(lambda n: get_genesis(n).hash.hex(), list(EXPECTED_HASHES) * 4))
        assert hashes == [EXPECTED_HASHES[n] for n in list(EXPECTED_HASHES) * 4]


class TestInvariantViolations:
    """Test construction aborts on mismatched constants"""

    def test_wrong_literal_hash(self, test_config):
        fields = dict(GENESIS_HEADERS[Network.MAINNET])
        fields["hash"] = EXPECTED_HASHES["regtest"]

        with pytest.raises(GenesisInvariantError) as exc:
            GenesisRegistry(test_config, sources={Network.MAINNET: LiteralGenesis(**fields)})

        assert exc.value.code == "GENESIS_INVARIANT"
        assert exc.value.details["check"] == "hash"
        assert exc.value.details["expected"] == EXPECTED_HASHES["regtest"]
        assert exc.value.details["computed"] == EXPECTED_HASHES["mainnet"]

    def test_wrong_nonce(self, test_config):
        fields = dict(GENESIS_HEADERS[Network.TESTNET3])
        fields["nonce"] += 1

        with pytest.raises(GenesisInvariantError):
            GenesisRegistry(test_config, sources={Network.TESTNET3: LiteralGenesis(**fields)})

    def test_wrong_merkle_root(self, test_config):
        """Test a declared root that disagrees with the transactions"""
        fields = dict(GENESIS_HEADERS[Network.MAINNET])
        source = LiteralGenesis(**fields, merkle_root="11" * 32)

        with pytest.raises(GenesisInvariantError):
            GenesisRegistry(test_config, sources={Network.MAINNET: source})

    def test_pkt_wrong_declared_hash(self, test_config):
        source = pkt_source(hash=EXPECTED_HASHES["mainnet"])
        with pytest.raises(GenesisInvariantError) as exc:
            GenesisRegistry(test_config, sources={Network.PKTTEST: source})
        assert exc.value.details["network"] == "pkttest"

    def test_pkt_corrupted_header(self, test_config):
        """Test a flipped header byte changes the hash and aborts"""
        raw = bytearray.fromhex(PKTTEST_GENESIS_HEX)
        raw[8 + 76] ^= 0x01  # nonce
        source = pkt_source(raw.hex())

        with pytest.raises(GenesisInvariantError) as exc:
            GenesisRegistry(test_config, sources={Network.PKTTEST: source})
        assert exc.value.details["check"] == "hash"

    def test_pkt_corrupted_coinbase(self, test_config):
        """Test a changed transaction byte fails the merkle cross-check"""
        raw = bytearray.fromhex(PKTTEST_GENESIS_HEX)
        raw[-1] ^= 0x01  # lock_time
        source = pkt_source(raw.hex())

        with pytest.raises(GenesisInvariantError) as exc:
            GenesisRegistry(test_config, sources={Network.PKTTEST: source})
        assert exc.value.details["check"] == "computed merkle_root"

    def test_trailing_bytes_rejected_with_lenient_settings(self):
        """Test the capture must be consumed fully whatever strict_decoding says"""
        raw = bytes.fromhex(PKTTEST_GENESIS_HEX) + b"\xde\xad\xbe\xef"
        framed = raw[:4] + struct.pack("<I", len(raw) - 8) + raw[8:]
        settings = override_settings(strict_decoding=False)

        with pytest.raises(GenesisError) as exc:
            GenesisRegistry(settings, sources={Network.PKTTEST: pkt_source(framed.hex())})

        assert exc.value.code == "GENESIS_DECODE_FAILED"
        assert exc.value.details["remaining"] == 4

    def test_payload_limit_does_not_apply(self):
        """Test a small max_block_payload does not reject the capture"""
        settings = override_settings(max_block_payload=5000)

        registry = GenesisRegistry(settings, sources={Network.PKTTEST: pkt_source()})
        assert registry.get("pkttest").hash.hex() == PKTTEST_GENESIS_HASH

    def test_pkt_truncated_capture(self, test_config):
        """Test decode failures surface as GenesisError"""
        raw = bytes.fromhex(PKTTEST_GENESIS_HEX)[:4000]
        framed = raw[:4] + struct.pack("<I", len(raw) - 8) + raw[8:]

        with pytest.raises(GenesisError) as exc:
            GenesisRegistry(test_config, sources={Network.PKTTEST: pkt_source(framed.hex())})
        assert exc.value.code == "GENESIS_DECODE_FAILED"


class TestFraming:
    """Test frame prefix validation"""

    def test_strip_frame(self):
        raw = bytes.fromhex(PKTTEST_GENESIS_HEX)
        payload = strip_frame(raw, PKTTEST_FRAME_MAGIC)
        assert payload == raw[8:]
        assert len(payload) == 5877

    def test_magic_mismatch(self):
        raw = bytes.fromhex(PKTTEST_GENESIS_HEX)
        with pytest.raises(GenesisError) as exc:
            strip_frame(raw, b"\x0b\x11\x09\x07")
        assert exc.value.code == "FRAME_MAGIC_MISMATCH"

    def test_length_mismatch(self):
        raw = bytes.fromhex(PKTTEST_GENESIS_HEX) + b"\x00"
        with pytest.raises(GenesisError) as exc:
            strip_frame(raw)
        assert exc.value.code == "FRAME_LENGTH_MISMATCH"

    def test_too_short(self):
        with pytest.raises(GenesisError):
            strip_frame(b"\xf9\xbe\xb4")

    def test_registry_rejects_bad_frame(self, test_config):
        source = pkt_source(frame_magic=b"\x00\x00\x00\x00")
        with pytest.raises(GenesisError):
            GenesisRegistry(test_config, sources={Network.PKTTEST: source})
