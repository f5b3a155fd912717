"""
BlockGenesis - Hash Engine
============================
Double SHA-256 identity hashes for headers and transactions.

Security Level: CRITICAL
Last Updated: 2026-10-12
Version: 1.0.0

Hashes are produced in wire order (little-endian, as serialized) and
displayed/compared in reversed order. Hash256 keeps the wire bytes and
reverses only when rendering or parsing hex.

Dependencies:
- hashlib (stdlib)
"""

from __future__ import annotations
import hashlib
from dataclasses import dataclass
from typing import Union

from block_genesis.constants import HASH_SIZE
from block_genesis.errors import CryptoError, ValidationError


BytesLike = Union[bytes, bytearray, memoryview]


# ============================================================================
# HASH FUNCTIONS
# ============================================================================

def compute_sha256(data: BytesLike) -> bytes:
    """
    Compute SHA-256.

    Args:
        data: Input bytes

    Returns:
        bytes: 32-byte digest

    Raises:
        CryptoError: If data is not bytes-like

    Examples:
        >>> compute_sha256(b"").hex()
        'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise CryptoError(
            f"compute_sha256 requires bytes, got {type(data).__name__}",
            code="INVALID_INPUT_TYPE"
        )

    return hashlib.sha256(data).digest()


def compute_double_sha256(data: BytesLike) -> bytes:
    """
    Compute SHA256(SHA256(data)), wire order.

    Examples:
        >>> compute_double_sha256(b"").hex()
        '5df6e0e2761359d30a8275058e299fcc0381534545f55cf43e41983f5d4c9456'
    """
    return compute_sha256(compute_sha256(data))


def hash256(data: BytesLike) -> Hash256:
    """Double SHA-256 of data as a Hash256"""
    return Hash256(compute_double_sha256(data))


# ============================================================================
# HASH VALUE
# ============================================================================

@dataclass(frozen=True)
class Hash256:
    """
    32-byte identity hash.

    Attributes:
        raw (bytes): Hash bytes in wire order

    Examples:
        >>> h = Hash256.from_hex("00" * 31 + "01")
        >>> h.raw[0]
        1
        >>> str(h)
        '0000000000000000000000000000000000000000000000000000000000000001'
    """

    raw: bytes

    def __post_init__(self):
        if not isinstance(self.raw, bytes):
            # bytearray/memoryview from the reader
            object.__setattr__(self, "raw", bytes(self.raw))

        if len(self.raw) != HASH_SIZE:
            raise ValidationError(
                f"Hash must be {HASH_SIZE} bytes, got {len(self.raw)}",
                code="INVALID_HASH_SIZE"
            )

    @classmethod
    def from_hex(cls, display_hex: str) -> Hash256:
        """Parse a hash given in display (reversed) order"""
        try:
            data = bytes.fromhex(display_hex)
        except ValueError as e:
            raise ValidationError(
                f"Invalid hash hex: {e}",
                code="INVALID_HASH_HEX"
            )
        return cls(data[::-1])

    @classmethod
    def zero(cls) -> Hash256:
        return cls(b"\x00" * HASH_SIZE)

    def is_zero(self) -> bool:
        return self.raw == b"\x00" * HASH_SIZE

    def hex(self) -> str:
        """Display order hex"""
        return self.raw[::-1].hex()

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        return f"Hash256({self.hex()})"


ZERO_HASH = Hash256.zero()


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "Hash256",
    "ZERO_HASH",
    "compute_sha256",
    "compute_double_sha256",
    "hash256",
]
