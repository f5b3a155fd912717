"""
BlockGenesis - Configuration Management
=========================================
Centralized settings with Pydantic Settings.
Supports environment variables, .env file and runtime overrides.

Security Level: MEDIUM
Last Updated: 2026-10-12
Version: 1.0.0

Features:
- Automatic type validation
- Environment variables with BLOCKGENESIS_ prefix
- .env file support
"""

from pathlib import Path
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from block_genesis.constants import Network, MAX_BLOCK_PAYLOAD


# ============================================================================
# MAIN CONFIGURATION CLASS
# ============================================================================

class GenesisSettings(BaseSettings):
    """
    BlockGenesis configuration.

    Example:
        # From environment
        export BLOCKGENESIS_NETWORK="testnet3"
        export BLOCKGENESIS_LOG_LEVEL=DEBUG

        # From code
        settings = GenesisSettings(network="regtest")
    """

    model_config = SettingsConfigDict(
        env_prefix='BLOCKGENESIS_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    # ========================================================================
    # NETWORK
    # ========================================================================

    network: str = Field(
        default=Network.MAINNET.value,
        description="Default network profile for CLI commands"
    )

    # ========================================================================
    # DECODING
    # ========================================================================

    max_block_payload: int = Field(
        default=MAX_BLOCK_PAYLOAD,
        ge=80,
        description="Largest serialized block accepted by the decoder (bytes)"
    )

    strict_decoding: bool = Field(
        default=True,
        description="Reject trailing bytes after a decoded block"
    )

    # ========================================================================
    # LOGGING
    # ========================================================================

    log_level: str = Field(
        default="WARNING",
        description="Log level"
    )

    log_format: str = Field(
        default="text",
        description="Log format: text, json"
    )

    log_to_file: bool = Field(
        default=False,
        description="Write logs to rotating file in log_dir"
    )

    log_dir: Path = Field(
        default=Path("./logs"),
        description="Log directory"
    )

    # ========================================================================
    # VALIDATORS
    # ========================================================================

    @field_validator('network')
    @classmethod
    def validate_network(cls, v: str) -> str:
        valid_networks = [n.value for n in Network]
        v_lower = v.lower()
        if v_lower not in valid_networks:
            raise ValueError(f"Invalid network: {v}. Must be one of {valid_networks}")
        return v_lower

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log_level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in ('text', 'json'):
            raise ValueError(f"Invalid log_format: {v}. Must be text or json")
        return v_lower

    # ========================================================================
    # HELPER METHODS
    # ========================================================================

    def get_network(self) -> Network:
        return Network(self.network)

    def to_dict(self) -> dict:
        return self.model_dump()

    def __repr__(self) -> str:
        return (
            f"GenesisSettings("
            f"network={self.network}, "
            f"strict_decoding={self.strict_decoding})"
        )


# ============================================================================
# SINGLETON INSTANCE
# ============================================================================

@lru_cache(maxsize=1)
def get_settings() -> GenesisSettings:
    """
    Cached settings instance.

    Example:
        >>> get_settings().network
        'mainnet'
    """
    return GenesisSettings()


def reload_settings() -> GenesisSettings:
    """Drop the cached instance and re-read the environment"""
    get_settings.cache_clear()
    return get_settings()


def override_settings(**kwargs) -> GenesisSettings:
    """
    Build settings with explicit overrides (testing).

    Example:
        >>> override_settings(strict_decoding=False)
    """
    return GenesisSettings(**kwargs)


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "GenesisSettings",
    "get_settings",
    "reload_settings",
    "override_settings",
]
