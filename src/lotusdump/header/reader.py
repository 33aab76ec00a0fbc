"""Bounds-checked little-endian reader over an in-memory payload."""

from __future__ import annotations

import struct

from ..errors import truncated

__all__ = ["ByteReader"]


class ByteReader:
    """Sequential reader; every read past the end raises ``TruncatedError``."""

    def __init__(self, data: bytes, offset: int = 0):
        self.data = data
        self.offset = offset

    def _read_exact(self, size: int, label: str) -> bytes:
        end = self.offset + size
        if size < 0 or end > len(self.data):
            raise truncated(label, self.offset, size, len(self.data))
        raw = self.data[self.offset : end]
        self.offset = end
        return raw

    def skip(self, size: int, label: str = "padding") -> None:
        self._read_exact(size, label)

    def read_bytes(self, size: int, label: str = "bytes") -> bytes:
        return self._read_exact(size, label)

    def u8(self, label: str = "u8") -> int:
        return self._read_exact(1, label)[0]

    def u16(self, label: str = "u16") -> int:
        return struct.unpack("<H", self._read_exact(2, label))[0]

    def u32(self, label: str = "u32") -> int:
        return struct.unpack("<I", self._read_exact(4, label))[0]

    def string(self, label: str = "string") -> str:
        """``u32`` length followed by UTF-8 text (invalid bytes replaced)."""
        length = self.u32(f"{label}.length")
        return self._read_exact(length, label).decode("utf-8", "replace")
