from .builder import build_audio, build_ogg_opus, build_wav_adpcm, opus_page_size
from .ogg import OggPage, ogg_crc32, segment_table
from .subheader import (
    ADPCM_COEFFICIENTS,
    AudioCompression,
    AudioSubHeader,
    decode_audio_subheader,
)

__all__ = [
    "build_audio",
    "build_ogg_opus",
    "build_wav_adpcm",
    "opus_page_size",
    "OggPage",
    "ogg_crc32",
    "segment_table",
    "ADPCM_COEFFICIENTS",
    "AudioCompression",
    "AudioSubHeader",
    "decode_audio_subheader",
]
