"""
BlockGenesis - Domain Model Tests
===================================
Unit tests for headers, transactions and blocks.
"""

import dataclasses
from datetime import datetime, timezone

import pytest

from block_genesis.constants import GENESIS_MERKLE_ROOT
from block_genesis.domain.crypto_core import Hash256, ZERO_HASH
from block_genesis.domain.genesis import genesis_coinbase_tx
from block_genesis.domain.models import (
    Block,
    BlockHeader,
    OutPoint,
    Transaction,
    TxIn,
    TxOut,
)
from block_genesis.errors import ValidationError

from tests.vectors import (
    GENESIS_COINBASE_TX_HEX,
    GENESIS_TXID,
    MAINNET_HASH,
    MAINNET_HEADER_HEX,
)


def mainnet_header(**overrides) -> BlockHeader:
    fields = dict(
        version=1,
        prev_block=ZERO_HASH,
        merkle_root=Hash256.from_hex(GENESIS_MERKLE_ROOT),
        timestamp=0x495fab29,
        bits=0x1d00ffff,
        nonce=0x7c2bac1d,
    )
    fields.update(overrides)
    return BlockHeader(**fields)


class TestOutPoint:
    """Test OutPoint"""

    def test_null(self):
        outpoint = OutPoint.null()
        assert outpoint.is_null()
        assert outpoint.serialize() == b"\x00" * 32 + b"\xff\xff\xff\xff"

    def test_non_null(self):
        assert not OutPoint(ZERO_HASH, 0).is_null()
        assert not OutPoint(Hash256(b"\x01" * 32), 0xffffffff).is_null()

    def test_index_range(self):
        with pytest.raises(ValidationError):
            OutPoint(ZERO_HASH, 1 << 32)

    def test_hash_type(self):
        with pytest.raises(ValidationError):
            OutPoint(b"\x00" * 32, 0)


class TestTransaction:
    """Test Transaction serialization and hashing"""

    def test_genesis_coinbase_serialization(self):
        """Test shared coinbase serializes to the known bytes"""
        tx = genesis_coinbase_tx()
        assert tx.serialize().hex() == GENESIS_COINBASE_TX_HEX

    def test_genesis_coinbase_txid(self):
        assert genesis_coinbase_tx().tx_hash().hex() == GENESIS_TXID

    def test_is_coinbase(self):
        tx = genesis_coinbase_tx()
        assert tx.is_coinbase()
        assert tx.total_output_value() == 50 * 100_000_000

    def test_not_coinbase(self):
        spend = Transaction(
            version=1,
            inputs=[TxIn(OutPoint(Hash256(b"\x01" * 32), 0))],
            outputs=[TxOut(1)],
        )
        assert not spend.is_coinbase()

        two_inputs = Transaction(
            version=1,
            inputs=[TxIn(OutPoint.null()), TxIn(OutPoint.null())],
            outputs=[],
        )
        assert not two_inputs.is_coinbase()

    def test_lists_become_tuples(self):
        tx = Transaction(version=1, inputs=[TxIn(OutPoint.null())], outputs=[TxOut(0)])
        assert isinstance(tx.inputs, tuple)
        assert isinstance(tx.outputs, tuple)

    def test_field_ranges(self):
        with pytest.raises(ValidationError):
            Transaction(version=1 << 31, inputs=[], outputs=[])

        with pytest.raises(ValidationError):
            Transaction(version=1, inputs=[], outputs=[], lock_time=-1)

        with pytest.raises(ValidationError):
            TxOut(value=1 << 63)

        with pytest.raises(ValidationError):
            TxIn(OutPoint.null(), sequence=1 << 32)

    def test_script_must_be_bytes(self):
        with pytest.raises(ValidationError):
            TxOut(value=0, pk_script="51")

    def test_bytearray_script_frozen(self):
        txout = TxOut(value=0, pk_script=bytearray(b"\x51"))
        assert isinstance(txout.pk_script, bytes)

    def test_negative_version_serializes_signed(self):
        tx = Transaction(version=-1, inputs=[], outputs=[])
        assert tx.serialize()[:4] == b"\xff\xff\xff\xff"


class TestBlockHeader:
    """Test BlockHeader"""

    def test_serialize_is_80_bytes(self):
        header = mainnet_header()
        assert len(header.serialize()) == 80
        assert header.serialize().hex() == MAINNET_HEADER_HEX

    @pytest.mark.parametrize("fields", [
        dict(version=-(1 << 31), timestamp=0, bits=0, nonce=0),
        dict(version=(1 << 31) - 1, timestamp=(1 << 40) - 1, bits=0xffffffff, nonce=0xffffffff),
    ])
    def test_serialize_width_at_field_limits(self, fields):
        """Test extreme field values still produce an 80-byte header"""
        data = mainnet_header(**fields).serialize()
        assert len(data) == 80
        assert data[76:80] == fields["nonce"].to_bytes(4, "little")

    def test_mainnet_hash(self):
        """Test mainnet header hashes to the known genesis hash"""
        assert mainnet_header().block_hash().hex() == MAINNET_HASH

    def test_nonce_changes_hash(self):
        assert mainnet_header(nonce=0).block_hash().hex() != MAINNET_HASH

    def test_time(self):
        assert mainnet_header().time == datetime(2009, 1, 3, 18, 15, 5, tzinfo=timezone.utc)

    def test_timestamp_truncated_to_32_bits(self):
        """Test timestamps wider than 32 bits keep only the low bits"""
        wide = mainnet_header(timestamp=(1 << 32) + 0x495fab29)
        assert wide.serialize() == mainnet_header().serialize()

    def test_negative_timestamp_rejected(self):
        with pytest.raises(ValidationError):
            mainnet_header(timestamp=-1)

    def test_bits_range(self):
        with pytest.raises(ValidationError):
            mainnet_header(bits=1 << 32)

    def test_to_dict(self):
        data = mainnet_header().to_dict()
        assert data["bits"] == "1d00ffff"
        assert data["merkle_root"] == GENESIS_MERKLE_ROOT
        assert data["prev_block"] == "00" * 32

    def test_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            mainnet_header().nonce = 0


class TestBlock:
    """Test Block"""

    def test_block_hash_is_header_hash(self):
        block = Block(header=mainnet_header(), transactions=[genesis_coinbase_tx()])
        assert block.block_hash() == block.header.block_hash()
        assert block.block_hash().hex() == MAINNET_HASH

    def test_coinbase(self):
        block = Block(header=mainnet_header(), transactions=[genesis_coinbase_tx()])
        assert block.coinbase() == genesis_coinbase_tx()
        assert block.tx_hashes()[0].hex() == GENESIS_TXID

    def test_no_coinbase(self):
        assert Block(header=mainnet_header(), transactions=[]).coinbase() is None

    def test_to_dict(self):
        block = Block(header=mainnet_header(), transactions=[genesis_coinbase_tx()])
        data = block.to_dict()
        assert data["hash"] == MAINNET_HASH
        assert data["transactions"][0]["txid"] == GENESIS_TXID
        assert "proof" not in data

    def test_header_type(self):
        with pytest.raises(ValidationError):
            Block(header=None, transactions=[])
