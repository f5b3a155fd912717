"""
BlockGenesis - Pytest Configuration
=====================================
Fixtures and configuration for testing.

Last Updated: 2026-10-12
Version: 1.0.0
"""

import logging

import pytest

# Internal imports
from block_genesis.config import get_settings, override_settings
from block_genesis.constants import PKTTEST_GENESIS_HEX
from block_genesis.domain.genesis import GenesisRegistry, get_genesis_registry
from block_genesis.logging_setup import ROOT_LOGGER_NAME
from block_genesis.utils.serialization import hex_to_bytes
from block_genesis.wire.codec import BlockCodec

from tests.vectors import MAINNET_HEADER_HEX, MAINNET_BLOCK_HEX


# ============================================================================
# ISOLATION
# ============================================================================

@pytest.fixture(autouse=True)
def clean_state():
    """Reset cached settings/registry and logging handlers around each test"""
    get_settings.cache_clear()
    get_genesis_registry.cache_clear()
    yield
    get_settings.cache_clear()
    get_genesis_registry.cache_clear()

    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)
    root.setLevel(logging.NOTSET)


# ============================================================================
# CONFIGURATION FIXTURES
# ============================================================================

@pytest.fixture
def test_config():
    """Test configuration"""
    return override_settings(network="regtest", log_level="DEBUG")


# ============================================================================
# CODEC FIXTURES
# ============================================================================

@pytest.fixture
def codec(test_config):
    """Block codec with test settings"""
    return BlockCodec(test_config)


@pytest.fixture
def mainnet_header_bytes():
    """Serialized mainnet genesis header (80 bytes)"""
    return bytes.fromhex(MAINNET_HEADER_HEX)


@pytest.fixture
def mainnet_block_bytes():
    """Serialized mainnet genesis block (base envelope)"""
    return bytes.fromhex(MAINNET_BLOCK_HEX)


@pytest.fixture
def pkt_framed_bytes():
    """pkt test network genesis capture, framing prefix included"""
    return hex_to_bytes(PKTTEST_GENESIS_HEX)


@pytest.fixture
def pkt_block_bytes(pkt_framed_bytes):
    """pkt test network genesis block without the framing prefix"""
    return pkt_framed_bytes[8:]


# ============================================================================
# REGISTRY FIXTURES
# ============================================================================

@pytest.fixture
def registry(test_config):
    """Freshly built genesis registry"""
    return GenesisRegistry(test_config)
