"""Resolve logical sub-offsets to compressed block boundaries.

Partition payloads are a run of independently compressed blocks, each
preceded by an 8-byte header. Recorded mip sub-offsets do not always land
on a block boundary, so the locator snaps them to the nearest one.
"""

from __future__ import annotations

import struct
from typing import Tuple

from ..errors import truncated, unknown_format
from ..logging import get_logger
from .store import Partition

__all__ = ["BLOCK_HEADER_SIZE", "parse_block_header", "locate_block_offset"]

BLOCK_HEADER_SIZE = 8


def parse_block_header(raw: bytes) -> Tuple[int, int]:
    """Return ``(compressed_length, decompressed_length)``."""
    if len(raw) != BLOCK_HEADER_SIZE:
        raise truncated("block_header", 0, BLOCK_HEADER_SIZE, len(raw))
    if raw[0] != 0x80 or (raw[7] & 0x0F) != 0x1:
        raise unknown_format(
            "Invalid compressed block header", {"header": raw.hex()}
        )
    num1, num2 = struct.unpack(">II", raw)
    return (num1 >> 2) & 0xFFFFFF, (num2 >> 5) & 0xFFFFFF


def locate_block_offset(
    partition: Partition, base_offset: int, target_sub_offset: int
) -> int:
    """Block boundary (relative to ``base_offset``) closest to the target.

    Ties resolve to the boundary at or after the target.
    """
    top = 0
    bottom = 0
    while True:
        raw = partition.raw_bytes_at(base_offset + top, BLOCK_HEADER_SIZE)
        if len(raw) < BLOCK_HEADER_SIZE:
            raise truncated(
                "block_header", base_offset + top, BLOCK_HEADER_SIZE, len(raw)
            )
        compressed_len, _ = parse_block_header(raw)
        top += compressed_len + BLOCK_HEADER_SIZE
        if top >= target_sub_offset:
            break
        bottom = top

    diff_top = top - target_sub_offset
    diff_bottom = target_sub_offset - bottom
    resolved = bottom if diff_top > diff_bottom else top
    get_logger().debug(
        "Block offset for sub-offset %d: %d (bottom=%d top=%d)",
        target_sub_offset,
        resolved,
        bottom,
        top,
    )
    return resolved
