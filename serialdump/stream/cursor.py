"""Bounds-checked sequential reader over an immutable byte sequence."""

import struct

from .errors import OutOfRangeError

_UINT16 = struct.Struct(">H")
_INT16 = struct.Struct(">h")
_INT32 = struct.Struct(">i")
_INT64 = struct.Struct(">q")
_FLOAT32 = struct.Struct(">f")
_FLOAT64 = struct.Struct(">d")


class BinaryCursor:
    """Reads big-endian values from a byte buffer.

    Every read either consumes all requested bytes or raises
    OutOfRangeError and leaves the position unchanged.
    """

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)
        self._offset = 0

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def _require(self, size: int) -> None:
        if size < 0:
            raise OutOfRangeError(f"Negative read size {size} at offset {self._offset}")
        if size > self.remaining:
            raise OutOfRangeError(
                f"Read of {size} bytes at offset {self._offset} exceeds buffer "
                f"({self.remaining} bytes remaining)"
            )

    def _unpack(self, fmt: struct.Struct) -> int | float:
        self._require(fmt.size)
        (value,) = fmt.unpack_from(self._data, self._offset)
        self._offset += fmt.size
        return value

    def peek_byte(self) -> int:
        """Return the next byte without consuming it."""
        self._require(1)
        return self._data[self._offset]

    def read_byte(self) -> int:
        value = self.peek_byte()
        self._offset += 1
        return value

    def read_int8(self) -> int:
        value = self.read_byte()
        return value - 0x100 if value & 0x80 else value

    def read_uint16(self) -> int:
        return int(self._unpack(_UINT16))

    def read_int16(self) -> int:
        return int(self._unpack(_INT16))

    def read_int32(self) -> int:
        return int(self._unpack(_INT32))

    def read_int64(self) -> int:
        return int(self._unpack(_INT64))

    def read_float32(self) -> float:
        return float(self._unpack(_FLOAT32))

    def read_float64(self) -> float:
        return float(self._unpack(_FLOAT64))

    def read_bytes(self, size: int) -> bytes:
        self._require(size)
        value = self._data[self._offset : self._offset + size]
        self._offset += size
        return value

    def read_utf(self, length: int) -> str:
        """Read a modified UTF-8 string of `length` bytes.

        Each byte is widened to one character; multi-byte sequences are
        not combined.
        """
        return "".join(map(chr, self.read_bytes(length)))
