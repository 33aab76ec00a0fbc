"""Ogg page framing.

Pages carry the Ogg CRC-32: polynomial ``0x04C11DB7``, zero initial value,
no bit reflection and no final xor. ``zlib.crc32`` is the reflected variant
and cannot be used here.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import List

from ..errors import unknown_format

__all__ = [
    "OggPage",
    "ogg_crc32",
    "segment_table",
    "HEADER_TYPE_BOS",
    "HEADER_TYPE_EOS",
]

MAGIC = b"OggS"
HEADER_TYPE_BOS = 0x02
HEADER_TYPE_EOS = 0x04

_MAX_SEGMENTS = 255
_CHECKSUM_OFFSET = 22


def _build_crc_table() -> List[int]:
    table = []
    for i in range(256):
        crc = i << 24
        for _ in range(8):
            if crc & 0x80000000:
                crc = ((crc << 1) ^ 0x04C11DB7) & 0xFFFFFFFF
            else:
                crc = (crc << 1) & 0xFFFFFFFF
        table.append(crc)
    return table


_CRC_TABLE = _build_crc_table()


def ogg_crc32(data: bytes) -> int:
    crc = 0
    for byte in data:
        crc = ((crc << 8) & 0xFFFFFFFF) ^ _CRC_TABLE[(crc >> 24) ^ byte]
    return crc


def segment_table(data: bytes, packet_size: int) -> bytes:
    """Lacing values for ``data`` split into packets of ``packet_size``.

    Each packet is cut into segments of at most 255 bytes. A packet whose
    length is a multiple of 255 ends with a zero lacing value.
    """
    out = bytearray()
    for start in range(0, len(data), packet_size):
        packet_len = min(packet_size, len(data) - start)
        full, rest = divmod(packet_len, 255)
        out.extend(b"\xff" * full)
        out.append(rest)
    return bytes(out)


@dataclass(slots=True)
class OggPage:
    header_type: int
    granule_position: int
    stream_serial: int
    page_sequence: int
    segment_table: bytes
    payload: bytes
    version: int = field(default=0)

    def _serialize(self, checksum: int) -> bytes:
        if len(self.segment_table) > _MAX_SEGMENTS:
            raise unknown_format(
                f"Ogg page needs {len(self.segment_table)} segments (max 255)",
                {"page_sequence": self.page_sequence},
            )
        return (
            MAGIC
            + struct.pack(
                "<BBQIIIB",
                self.version,
                self.header_type,
                self.granule_position,
                self.stream_serial,
                self.page_sequence,
                checksum,
                len(self.segment_table),
            )
            + self.segment_table
            + self.payload
        )

    @property
    def checksum(self) -> int:
        return ogg_crc32(self._serialize(0))

    def to_bytes(self) -> bytes:
        raw = bytearray(self._serialize(0))
        struct.pack_into("<I", raw, _CHECKSUM_OFFSET, ogg_crc32(raw))
        return bytes(raw)
