"""
BlockGenesis - Custom Exceptions
==================================
Exception hierarchy for codec, hashing and genesis registry errors.

Security Level: HIGH
Last Updated: 2026-10-12
Version: 1.0.0
"""

from typing import Optional, Any


# ============================================================================
# BASE EXCEPTION
# ============================================================================

class BlockGenesisException(Exception):
    """
    Base exception for every BlockGenesis error.

    Attributes:
        message (str): Error message
        code (str): Error code (e.g. "VARINT_NON_CANONICAL")
        details (dict): Additional details
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict] = None
    ):
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Serialize exception for logging/CLI output"""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        if self.details:
            return f"[{self.code}] {self.message} | Details: {self.details}"
        return f"[{self.code}] {self.message}"


# ============================================================================
# CONFIGURATION ERRORS
# ============================================================================

class ConfigError(BlockGenesisException):
    """Configuration error"""
    pass


class UnknownNetworkError(ConfigError):
    """Network identifier not in the supported set"""

    def __init__(self, network: Any):
        super().__init__(
            f"Unknown network: {network!r}",
            code="UNKNOWN_NETWORK",
            details={"network": str(network)}
        )
        self.network = network


# ============================================================================
# VALIDATION ERRORS
# ============================================================================

class ValidationError(BlockGenesisException):
    """Model field validation error"""
    pass


# ============================================================================
# CRYPTOGRAPHY ERRORS
# ============================================================================

class CryptoError(BlockGenesisException):
    """Hashing error"""
    pass


# ============================================================================
# CODEC ERRORS
# ============================================================================

class DecodeError(BlockGenesisException):
    """
    Malformed binary input.

    Attributes:
        offset (int): Byte offset where the failing field starts
        field (str): Dotted path of the field being read
    """

    def __init__(
        self,
        message: str,
        offset: int,
        field: str,
        code: Optional[str] = None,
        details: Optional[dict] = None
    ):
        merged = {"offset": offset, "field": field}
        if details:
            merged.update(details)

        super().__init__(
            f"{message} (field '{field}' at offset {offset})",
            code=code or "DECODE_ERROR",
            details=merged
        )
        self.offset = offset
        self.field = field


class TruncatedDataError(DecodeError):
    """Buffer ended before the field was complete"""

    def __init__(self, offset: int, field: str, needed: int, available: int):
        super().__init__(
            f"Truncated input: need {needed} bytes, {available} available",
            offset=offset,
            field=field,
            code="TRUNCATED_DATA",
            details={"needed": needed, "available": available}
        )


class NonCanonicalVarIntError(DecodeError):
    """Varint encoded in a wider form than its value requires"""

    def __init__(self, offset: int, field: str, value: int, prefix: int):
        super().__init__(
            f"Non-canonical varint: value {value} with prefix 0x{prefix:02x}",
            offset=offset,
            field=field,
            code="VARINT_NON_CANONICAL",
            details={"value": value, "prefix": prefix}
        )


class OversizedLengthError(DecodeError):
    """Declared count/length cannot fit in the remaining bytes"""

    def __init__(self, offset: int, field: str, declared: int, limit: int):
        super().__init__(
            f"Declared length {declared} exceeds limit {limit}",
            offset=offset,
            field=field,
            code="LENGTH_OVERFLOW",
            details={"declared": declared, "limit": limit}
        )


class TrailingDataError(DecodeError):
    """Unread bytes left after a complete block"""

    def __init__(self, offset: int, remaining: int):
        super().__init__(
            f"{remaining} trailing bytes after block",
            offset=offset,
            field="block",
            code="TRAILING_DATA",
            details={"remaining": remaining}
        )


class MalformedProofError(DecodeError):
    """PacketCrypt proof segment violates its framing rules"""
    pass


class EncodeError(BlockGenesisException):
    """Value cannot be represented on the wire"""
    pass


# ============================================================================
# GENESIS ERRORS
# ============================================================================

class GenesisError(BlockGenesisException):
    """Genesis block construction failed (fatal at startup)"""
    pass


class GenesisInvariantError(GenesisError):
    """Computed value disagrees with a declared genesis constant"""

    def __init__(self, network: str, what: str, expected: str, computed: str):
        super().__init__(
            f"Genesis {what} mismatch for {network}: "
            f"expected {expected}, computed {computed}",
            code="GENESIS_INVARIANT",
            details={
                "network": network,
                "check": what,
                "expected": expected,
                "computed": computed,
            }
        )


# ============================================================================
# EXPORT ALL
# ============================================================================

__all__ = [
    # Base
    "BlockGenesisException",

    # Config
    "ConfigError",
    "UnknownNetworkError",

    # Validation
    "ValidationError",

    # Crypto
    "CryptoError",

    # Codec
    "DecodeError",
    "TruncatedDataError",
    "NonCanonicalVarIntError",
    "OversizedLengthError",
    "TrailingDataError",
    "MalformedProofError",
    "EncodeError",

    # Genesis
    "GenesisError",
    "GenesisInvariantError",
]
