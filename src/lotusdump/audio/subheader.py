"""Audio sub-header that follows the common asset header."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..errors import unknown_format
from ..header.reader import ByteReader

__all__ = [
    "AudioCompression",
    "AudioSubHeader",
    "ADPCM_COEFFICIENTS",
    "AUDIO_SUBHEADER_SIZE",
    "decode_audio_subheader",
]

AUDIO_SUBHEADER_SIZE = 66

# MS-ADPCM standard predictor table.
ADPCM_COEFFICIENTS = (
    (256, 0),
    (512, -256),
    (0, 0),
    (192, 64),
    (240, 0),
    (460, -208),
    (392, -232),
)


class AudioCompression(Enum):
    PCM = 0x00
    ADPCM = 0x05
    OPUS = 0x07


@dataclass(frozen=True, slots=True)
class AudioSubHeader:
    compression: AudioCompression
    sample_rate: int
    bits_per_sample: int
    channels: int
    average_byte_rate: int
    block_align: int
    samples_per_block: int
    uncompressed_size: int
    coefficients: tuple = ADPCM_COEFFICIENTS


def decode_audio_subheader(payload: bytes, offset: int) -> AudioSubHeader:
    reader = ByteReader(payload, offset)
    raw_compression = reader.u32("audio.compression")
    try:
        compression = AudioCompression(raw_compression)
    except ValueError:
        raise unknown_format(
            f"Unknown audio compression format: 0x{raw_compression:X}",
            {"compression": raw_compression},
        ) from None
    reader.skip(4 + 24, "audio.reserved0")
    sample_rate = reader.u32("audio.sample_rate")
    bits_per_sample = reader.u8("audio.bits_per_sample")
    channels = reader.u8("audio.channels")
    reader.skip(4, "audio.reserved1")
    average_byte_rate = reader.u32("audio.average_byte_rate")
    block_align = reader.u16("audio.block_align")
    samples_per_block = reader.u16("audio.samples_per_block")
    reader.skip(12, "audio.reserved2")
    uncompressed_size = reader.u32("audio.uncompressed_size")
    return AudioSubHeader(
        compression=compression,
        sample_rate=sample_rate,
        bits_per_sample=bits_per_sample,
        channels=channels,
        average_byte_rate=average_byte_rate,
        block_align=block_align,
        samples_per_block=samples_per_block,
        uncompressed_size=uncompressed_size,
    )
