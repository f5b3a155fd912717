"""
BlockGenesis - Configuration Tests
====================================
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from block_genesis.config import (
    GenesisSettings,
    get_settings,
    override_settings,
    reload_settings,
)
from block_genesis.constants import Network, MAX_BLOCK_PAYLOAD


class TestGenesisSettings:
    """Test settings defaults, validation and environment loading"""

    def test_defaults(self, monkeypatch):
        for var in ("NETWORK", "LOG_LEVEL", "STRICT_DECODING", "MAX_BLOCK_PAYLOAD"):
            monkeypatch.delenv(f"BLOCKGENESIS_{var}", raising=False)

        settings = GenesisSettings(_env_file=None)
        assert settings.network == "mainnet"
        assert settings.get_network() is Network.MAINNET
        assert settings.max_block_payload == MAX_BLOCK_PAYLOAD
        assert settings.strict_decoding is True
        assert settings.log_level == "WARNING"
        assert settings.log_format == "text"

    def test_network_normalized(self):
        assert override_settings(network="TestNet3").network == "testnet3"

    def test_invalid_network(self):
        with pytest.raises(PydanticValidationError):
            override_settings(network="dogecoin")

    def test_invalid_log_level(self):
        with pytest.raises(PydanticValidationError):
            override_settings(log_level="LOUD")

    def test_invalid_log_format(self):
        with pytest.raises(PydanticValidationError):
            override_settings(log_format="xml")

    def test_payload_lower_bound(self):
        """Test the payload limit must fit at least a header"""
        with pytest.raises(PydanticValidationError):
            override_settings(max_block_payload=79)

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("BLOCKGENESIS_NETWORK", "simnet")
        monkeypatch.setenv("BLOCKGENESIS_STRICT_DECODING", "false")

        settings = reload_settings()
        assert settings.get_network() is Network.SIMNET
        assert settings.strict_decoding is False

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_to_dict(self):
        data = override_settings(network="regtest").to_dict()
        assert data["network"] == "regtest"
        assert "max_block_payload" in data

    def test_repr(self):
        assert "network=regtest" in repr(override_settings(network="regtest"))
