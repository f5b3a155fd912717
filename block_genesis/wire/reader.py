"""
BlockGenesis - Byte Reader
============================
Offset-tracking cursor over an in-memory buffer.

Every read names the field it is reading so that a failure reports the
byte offset and field path instead of a silent short read.
"""

import struct

from block_genesis.domain.crypto_core import Hash256
from block_genesis.constants import HASH_SIZE
from block_genesis.errors import TruncatedDataError, OversizedLengthError
from block_genesis.utils.serialization import read_compact_size


class ByteReader:
    """
    Cursor over bytes.

    Example:
        >>> reader = ByteReader(b"\\x01\\x00\\x00\\x00")
        >>> reader.read_uint32("version")
        1
        >>> reader.at_end()
        True
    """

    __slots__ = ("_data", "_offset")

    def __init__(self, data: bytes, offset: int = 0):
        self._data = bytes(data)
        self._offset = offset

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def at_end(self) -> bool:
        return self._offset >= len(self._data)

    def read(self, size: int, field: str) -> bytes:
        if size > self.remaining:
            raise TruncatedDataError(
                self._offset, field, needed=size, available=self.remaining
            )
        start = self._offset
        self._offset += size
        return self._data[start:self._offset]

    def _unpack(self, fmt: str, size: int, field: str):
        return struct.unpack(fmt, self.read(size, field))[0]

    def read_int32(self, field: str) -> int:
        return self._unpack("<i", 4, field)

    def read_uint32(self, field: str) -> int:
        return self._unpack("<I", 4, field)

    def read_int64(self, field: str) -> int:
        return self._unpack("<q", 8, field)

    def read_hash(self, field: str) -> Hash256:
        return Hash256(self.read(HASH_SIZE, field))

    def read_varint(self, field: str) -> int:
        value, consumed = read_compact_size(self._data, self._offset, field)
        self._offset += consumed
        return value

    def read_count(self, field: str, min_item_size: int) -> int:
        """
        Read a varint element count and reject counts whose smallest
        possible encoding already exceeds the remaining bytes.
        """
        start = self._offset
        count = self.read_varint(field)
        limit = self.remaining // max(min_item_size, 1)
        if count > limit:
            raise OversizedLengthError(start, field, declared=count, limit=limit)
        return count

    def read_var_bytes(self, field: str) -> bytes:
        """Varint length followed by that many bytes"""
        start = self._offset
        length = self.read_varint(field)
        if length > self.remaining:
            raise OversizedLengthError(start, field, declared=length, limit=self.remaining)
        return self.read(length, field)


__all__ = ["ByteReader"]
