"""RIFF/WAVE header for MS-ADPCM payloads."""

from __future__ import annotations

import struct

from .subheader import AudioSubHeader

__all__ = ["pack_wav_adpcm_header", "WAVE_FORMAT_ADPCM", "ADPCM_FMT_SIZE"]

WAVE_FORMAT_ADPCM = 0x0002
ADPCM_FMT_SIZE = 50
_ADPCM_EXTENSION_SIZE = 32
# Written into the RIFF size field on top of the sample bytes.
_RIFF_SIZE_OVERHEAD = 66


def pack_wav_adpcm_header(sub: AudioSubHeader) -> bytes:
    fmt = struct.pack(
        "<HHIIHHHHH",
        WAVE_FORMAT_ADPCM,
        sub.channels,
        sub.sample_rate,
        sub.average_byte_rate,
        sub.block_align,
        sub.bits_per_sample,
        _ADPCM_EXTENSION_SIZE,
        sub.samples_per_block,
        len(sub.coefficients),
    )
    for coef1, coef2 in sub.coefficients:
        fmt += struct.pack("<hh", coef1, coef2)
    if len(fmt) != ADPCM_FMT_SIZE:
        raise ValueError(f"ADPCM fmt chunk size mismatch: {len(fmt)}")
    return (
        b"RIFF"
        + struct.pack("<I", sub.uncompressed_size + _RIFF_SIZE_OVERHEAD)
        + b"WAVE"
        + b"fmt "
        + struct.pack("<I", ADPCM_FMT_SIZE)
        + fmt
        + b"data"
        + struct.pack("<I", sub.uncompressed_size)
    )
