"""Opus identification and comment header packets (RFC 7845)."""

from __future__ import annotations

import struct
from typing import Sequence

__all__ = ["pack_opus_head", "pack_opus_tags", "OPUS_PRE_SKIP"]

OPUS_PRE_SKIP = 312


def pack_opus_head(
    channels: int,
    input_sample_rate: int,
    *,
    pre_skip: int = OPUS_PRE_SKIP,
    output_gain: int = 0,
    mapping_family: int = 0,
) -> bytes:
    return b"OpusHead" + struct.pack(
        "<BBHIHB",
        1,
        channels,
        pre_skip,
        input_sample_rate,
        output_gain,
        mapping_family,
    )


def pack_opus_tags(vendor: str, comments: Sequence[str]) -> bytes:
    vendor_raw = vendor.encode("utf-8")
    out = bytearray(b"OpusTags")
    out += struct.pack("<I", len(vendor_raw)) + vendor_raw
    out += struct.pack("<I", len(comments))
    for comment in comments:
        raw = comment.encode("utf-8")
        out += struct.pack("<I", len(raw)) + raw
    return bytes(out)
