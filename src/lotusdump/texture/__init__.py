from .builder import build_texture, load_texture_bytes
from .dds import pack_dds_header
from .subheader import (
    TextureFormat,
    TextureSubHeader,
    decode_texture_subheader,
    texture_byte_size,
)

__all__ = [
    "build_texture",
    "load_texture_bytes",
    "pack_dds_header",
    "TextureFormat",
    "TextureSubHeader",
    "decode_texture_subheader",
    "texture_byte_size",
]
