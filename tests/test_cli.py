"""
BlockGenesis - CLI Tests
==========================
Tests for the blockgenesis command line via typer's CliRunner.
"""

import json

import pytest
from typer.testing import CliRunner

from block_genesis.cli import main as cli_main
from block_genesis.cli.main import app
from block_genesis.constants import PKTTEST_GENESIS_HEX
from block_genesis.errors import GenesisInvariantError

from tests.vectors import EXPECTED_HASHES, MAINNET_BLOCK_HEX, MAINNET_HASH


runner = CliRunner()


class TestRegistryCommands:
    """Test networks/show/verify"""

    def test_networks(self):
        result = runner.invoke(app, ["networks"])

        assert result.exit_code == 0
        for network in EXPECTED_HASHES:
            assert network in result.stdout

    @pytest.mark.parametrize("network", sorted(EXPECTED_HASHES))
    def test_show_json(self, network):
        result = runner.invoke(app, ["show", network, "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["network"] == network
        assert data["hash"] == EXPECTED_HASHES[network]

    def test_show_panel(self):
        result = runner.invoke(app, ["show", "mainnet"])
        assert result.exit_code == 0
        assert "Genesis mainnet" in result.stdout

    def test_show_default_network(self, monkeypatch):
        """Test show falls back to the configured network"""
        monkeypatch.setenv("BLOCKGENESIS_NETWORK", "simnet")

        result = runner.invoke(app, ["show", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["network"] == "simnet"

    def test_show_unknown_network(self):
        result = runner.invoke(app, ["show", "litecoin"])

        assert result.exit_code == 1
        assert "Unknown network" in result.stdout

    def test_verify(self):
        result = runner.invoke(app, ["verify"])

        assert result.exit_code == 0
        assert "All 5 genesis blocks verified" in result.stdout

    def test_verify_failure(self, monkeypatch):
        def broken_registry(settings):
            raise GenesisInvariantError("mainnet", "hash", MAINNET_HASH, "00" * 32)

        monkeypatch.setattr(cli_main, "GenesisRegistry", broken_registry)

        result = runner.invoke(app, ["verify"])

        assert result.exit_code == 1
        assert "verification failed" in result.stdout


class TestDecodeCommand:
    """Test decode"""

    def test_decode_base(self, tmp_path):
        hexfile = tmp_path / "mainnet.hex"
        hexfile.write_text(MAINNET_BLOCK_HEX, encoding="utf-8")

        result = runner.invoke(app, ["decode", str(hexfile)])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["hash"] == MAINNET_HASH
        assert len(data["transactions"]) == 1

    def test_decode_packetcrypt_framed(self, tmp_path):
        hexfile = tmp_path / "pkttest.hex"
        hexfile.write_text(PKTTEST_GENESIS_HEX, encoding="utf-8")

        result = runner.invoke(
            app, ["decode", str(hexfile), "--envelope", "packetcrypt", "--framed"]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["hash"] == EXPECTED_HASHES["pkttest"]
        assert data["proof"]["entities"][0]["type"] == "ANNOUNCEMENTS"

    def test_decode_truncated(self, tmp_path):
        hexfile = tmp_path / "short.hex"
        hexfile.write_text(MAINNET_BLOCK_HEX[:100], encoding="utf-8")

        result = runner.invoke(app, ["decode", str(hexfile)])

        assert result.exit_code == 1
        assert "Decode failed" in result.stdout

    def test_decode_unknown_envelope(self, tmp_path):
        hexfile = tmp_path / "mainnet.hex"
        hexfile.write_text(MAINNET_BLOCK_HEX, encoding="utf-8")

        result = runner.invoke(app, ["decode", str(hexfile), "--envelope", "auxpow"])

        assert result.exit_code == 1
        assert "Unknown envelope" in result.stdout

    def test_decode_missing_file(self, tmp_path):
        result = runner.invoke(app, ["decode", str(tmp_path / "nope.hex")])
        assert result.exit_code != 0
