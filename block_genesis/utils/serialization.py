"""
BlockGenesis - Serialization Utilities
========================================
JSON, hex and compact size (varint) helpers.
"""

import json
from typing import Any, Optional
from datetime import datetime

from block_genesis.constants import (
    VARINT_UINT16_MARKER,
    VARINT_UINT32_MARKER,
    VARINT_UINT64_MARKER,
    MAX_VARINT_VALUE,
)
from block_genesis.errors import (
    EncodeError,
    NonCanonicalVarIntError,
    TruncatedDataError,
)
from block_genesis.logging_setup import get_logger

logger = get_logger("utils.serialization")


# ============================================================================
# JSON SERIALIZATION
# ============================================================================

def serialize_to_json(obj: Any, indent: Optional[int] = None) -> str:
    """
    Serialize object to JSON string.

    Handles datetime, bytes, and objects exposing to_dict().

    Args:
        obj: Object to serialize
        indent: JSON indentation (None = compact)

    Returns:
        str: JSON string
    """
    def default_handler(o):
        if isinstance(o, datetime):
            return o.isoformat()
        elif isinstance(o, (bytes, bytearray)):
            return o.hex()
        elif hasattr(o, 'to_dict'):
            return o.to_dict()
        else:
            return str(o)

    return json.dumps(obj, default=default_handler, indent=indent)


# ============================================================================
# BYTES/HEX CONVERSION
# ============================================================================

def bytes_to_hex(data: bytes) -> str:
    """
    Convert bytes to hex string.

    Examples:
        >>> bytes_to_hex(b"\\x00\\x01\\x02")
        '000102'
    """
    return data.hex()


def hex_to_bytes(hex_str: str) -> bytes:
    """
    Convert hex string to bytes. Whitespace is ignored.

    Raises:
        ValueError: If invalid hex string

    Examples:
        >>> hex_to_bytes('0001 02')
        b'\\x00\\x01\\x02'
    """
    try:
        return bytes.fromhex("".join(hex_str.split()))
    except ValueError as e:
        logger.error("Invalid hex string", extra_data={"length": len(hex_str)})
        raise ValueError(f"Invalid hex string: {e}")


# ============================================================================
# COMPACT SIZE (VARINT)
# ============================================================================

def compact_size(value: int) -> bytes:
    """
    Encode integer in compact size format.

    0-252 encode as one byte; larger values get a 0xfd/0xfe/0xff prefix
    followed by a 2/4/8-byte little-endian integer.

    Raises:
        EncodeError: If value is negative or does not fit in 64 bits

    Examples:
        >>> compact_size(252).hex()
        'fc'
        >>> compact_size(253).hex()
        'fdfd00'
    """
    if value < 0 or value > MAX_VARINT_VALUE:
        raise EncodeError(
            f"Compact size out of range: {value}",
            code="VARINT_OUT_OF_RANGE",
            details={"value": value}
        )

    if value < VARINT_UINT16_MARKER:
        return bytes([value])
    elif value <= 0xffff:
        return bytes([VARINT_UINT16_MARKER]) + value.to_bytes(2, 'little')
    elif value <= 0xffffffff:
        return bytes([VARINT_UINT32_MARKER]) + value.to_bytes(4, 'little')
    else:
        return bytes([VARINT_UINT64_MARKER]) + value.to_bytes(8, 'little')


def compact_size_length(value: int) -> int:
    """Number of bytes compact_size(value) occupies"""
    if value < VARINT_UINT16_MARKER:
        return 1
    elif value <= 0xffff:
        return 3
    elif value <= 0xffffffff:
        return 5
    return 9


# prefix -> (payload width, smallest canonical value)
_VARINT_WIDTHS = {
    VARINT_UINT16_MARKER: (2, VARINT_UINT16_MARKER),
    VARINT_UINT32_MARKER: (4, 0x10000),
    VARINT_UINT64_MARKER: (8, 0x100000000),
}


def read_compact_size(
    data: bytes,
    offset: int = 0,
    field: str = "compact_size"
) -> tuple[int, int]:
    """
    Read compact size from bytes.

    Args:
        data: Bytes data
        offset: Start offset
        field: Field name reported in errors

    Returns:
        tuple: (value, bytes_read)

    Raises:
        TruncatedDataError: Prefix or payload runs past the end of data
        NonCanonicalVarIntError: Value encoded wider than needed
    """
    if offset >= len(data):
        raise TruncatedDataError(offset, field, needed=1, available=0)

    first = data[offset]

    if first < VARINT_UINT16_MARKER:
        return first, 1

    width, minimum = _VARINT_WIDTHS[first]
    available = len(data) - offset - 1
    if available < width:
        raise TruncatedDataError(offset, field, needed=width + 1, available=available + 1)

    value = int.from_bytes(data[offset + 1:offset + 1 + width], 'little')
    if value < minimum:
        raise NonCanonicalVarIntError(offset, field, value=value, prefix=first)

    return value, width + 1


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "serialize_to_json",
    "bytes_to_hex",
    "hex_to_bytes",
    "compact_size",
    "compact_size_length",
    "read_compact_size",
]
