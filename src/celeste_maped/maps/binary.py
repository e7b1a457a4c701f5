"""
Little-endian binary primitives used by the map container.

The game reads maps with a .NET BinaryReader, so every multi-byte number is
little endian and strings carry a 7-bit varint byte length.
"""

import struct

from ..errors import MalformedPrimitiveError, MapWriteError, UnexpectedEofError

# Strings are decoded as UTF-8; undecodable bytes survive a round trip via surrogateescape.
STRING_ENCODING = "utf-8"
STRING_ERRORS = "surrogateescape"

# RLE strings store one byte per character.
RLE_ENCODING = "latin-1"

_U8 = struct.Struct("<B")
_I16 = struct.Struct("<h")
_U16 = struct.Struct("<H")
_I32 = struct.Struct("<i")
_F32 = struct.Struct("<f")

MAX_VARINT_BYTES = 5


class BinaryReader:
    """Sequential reader over an in-memory byte buffer.

    Every failure raises a MalformedPrimitiveError carrying the byte offset
    where the primitive started.
    """

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.offset = 0

    @property
    def remaining(self) -> int:
        """Number of unread bytes."""
        return len(self.data) - self.offset

    def at_end(self) -> bool:
        return self.offset >= len(self.data)

    def read_bytes(self, count: int, expected: str = "bytes") -> bytes:
        """Read exactly count bytes or raise UnexpectedEofError."""
        if count > self.remaining:
            raise UnexpectedEofError(
                self.offset,
                f"{count} byte(s) of {expected}",
                f"{self.remaining} byte(s) left",
            )
        start = self.offset
        self.offset += count
        return self.data[start:self.offset]

    def _unpack(self, fmt: struct.Struct, expected: str):
        return fmt.unpack(self.read_bytes(fmt.size, expected))[0]

    def read_u8(self) -> int:
        return self._unpack(_U8, "u8")

    def read_bool(self) -> bool:
        start = self.offset
        value = self._unpack(_U8, "bool")
        if value not in (0, 1):
            raise MalformedPrimitiveError(start, "bool byte 0 or 1", f"byte {value}")
        return value == 1

    def read_i16(self) -> int:
        return self._unpack(_I16, "i16")

    def read_u16(self) -> int:
        return self._unpack(_U16, "u16")

    def read_i32(self) -> int:
        return self._unpack(_I32, "i32")

    def read_f32(self) -> float:
        return self._unpack(_F32, "f32")

    def read_varint(self) -> int:
        """Read a 7-bit encoded unsigned integer (at most 5 bytes)."""
        start = self.offset
        result = 0
        for i in range(MAX_VARINT_BYTES):
            byte = self._unpack(_U8, "varint")
            result |= (byte & 0x7F) << (7 * i)
            if not byte & 0x80:
                return result
        raise MalformedPrimitiveError(
            start, f"varint of at most {MAX_VARINT_BYTES} bytes", "unterminated varint"
        )

    def read_string(self) -> str:
        """Read a varint-length-prefixed string."""
        length = self.read_varint()
        raw = self.read_bytes(length, "string data")
        return raw.decode(STRING_ENCODING, STRING_ERRORS)

    def read_rle_string(self) -> str:
        """Read a run-length encoded string.

        Layout: i16 byte count, then (repeat count u8, character u8) pairs.
        """
        start = self.offset
        byte_count = self.read_i16()
        if byte_count < 0 or byte_count % 2:
            raise MalformedPrimitiveError(
                start, "non-negative even RLE byte count", f"{byte_count}"
            )
        payload = self.read_bytes(byte_count, "RLE string data")
        parts = []
        for i in range(0, byte_count, 2):
            parts.append(chr(payload[i + 1]) * payload[i])
        return "".join(parts)


class BinaryWriter:
    """Append-only writer producing the little-endian map primitives."""

    def __init__(self):
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def getvalue(self) -> bytes:
        return bytes(self._buffer)

    def write_bytes(self, data: bytes) -> None:
        self._buffer.extend(data)

    def _pack(self, fmt: struct.Struct, value, name: str) -> None:
        try:
            self._buffer.extend(fmt.pack(value))
        except struct.error as e:
            raise MapWriteError(f"Cannot write {value!r} as {name}: {e}") from e

    def write_u8(self, value: int) -> None:
        self._pack(_U8, value, "u8")

    def write_bool(self, value: bool) -> None:
        self._pack(_U8, 1 if value else 0, "bool")

    def write_i16(self, value: int) -> None:
        self._pack(_I16, value, "i16")

    def write_u16(self, value: int) -> None:
        self._pack(_U16, value, "u16")

    def write_i32(self, value: int) -> None:
        self._pack(_I32, value, "i32")

    def write_f32(self, value: float) -> None:
        self._pack(_F32, value, "f32")

    def write_varint(self, value: int) -> None:
        if value < 0 or value >= 1 << (7 * MAX_VARINT_BYTES):
            raise MapWriteError(f"Cannot write {value} as varint")
        while True:
            byte = value & 0x7F
            value >>= 7
            if value:
                self._buffer.append(byte | 0x80)
            else:
                self._buffer.append(byte)
                return

    def write_string(self, value: str) -> None:
        raw = value.encode(STRING_ENCODING, STRING_ERRORS)
        self.write_varint(len(raw))
        self._buffer.extend(raw)

    def write_rle_string(self, value: str) -> None:
        """Write a run-length encoded string; runs are capped at 255 characters."""
        try:
            raw = value.encode(RLE_ENCODING)
        except UnicodeEncodeError as e:
            raise MapWriteError(f"RLE strings only hold single-byte characters: {e}") from e

        pairs = bytearray()
        i = 0
        while i < len(raw):
            char = raw[i]
            run = 1
            while i + run < len(raw) and raw[i + run] == char and run < 255:
                run += 1
            pairs.append(run)
            pairs.append(char)
            i += run

        self.write_i16(len(pairs))
        self._buffer.extend(pairs)
