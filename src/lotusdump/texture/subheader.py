"""Texture sub-header that follows the common asset header."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..errors import unknown_format
from ..header.reader import ByteReader

__all__ = [
    "TextureFormat",
    "TextureSubHeader",
    "decode_texture_subheader",
    "texture_byte_size",
]


class TextureFormat(Enum):
    BC1 = "BC1_UNORM"
    BC2 = "BC2_UNORM"
    BC3 = "BC3_UNORM"
    BC4 = "BC4_UNORM"
    BC5 = "BC5_UNORM"
    BC6H = "BC6H_UF16"
    BC7 = "BC7_UNORM"
    RGBA8 = "R8G8B8A8_UNORM"

    @property
    def is_block_compressed(self) -> bool:
        return self is not TextureFormat.RGBA8

    @property
    def block_size(self) -> int:
        if self in (TextureFormat.BC1, TextureFormat.BC4):
            return 8
        return 16

    @classmethod
    def from_code(cls, code: int) -> Optional["TextureFormat"]:
        return _FORMAT_CODES.get(code)


_FORMAT_CODES = {
    0x00: TextureFormat.BC1,
    0x01: TextureFormat.BC1,
    0x02: TextureFormat.BC2,
    0x03: TextureFormat.BC3,
    0x06: TextureFormat.BC4,
    0x07: TextureFormat.BC5,
    0x22: TextureFormat.BC6H,
    0x23: TextureFormat.BC7,
    0x0A: TextureFormat.RGBA8,
}


def texture_byte_size(fmt: TextureFormat, width: int, height: int) -> int:
    if not fmt.is_block_compressed:
        return width * height * 4
    return ((width + 3) // 4) * ((height + 3) // 4) * fmt.block_size


@dataclass(frozen=True, slots=True)
class TextureSubHeader:
    format: TextureFormat
    mip_fragment_count: int
    sub_offsets: Tuple[int, ...]
    width_ratio: int
    height_ratio: int
    max_side_length: int

    @property
    def width(self) -> int:
        if self.width_ratio > self.height_ratio:
            return self.max_side_length
        return self.max_side_length * self.width_ratio // self.height_ratio

    @property
    def height(self) -> int:
        if self.width_ratio > self.height_ratio:
            return self.max_side_length * self.height_ratio // self.width_ratio
        return self.max_side_length

    @property
    def byte_size(self) -> int:
        return texture_byte_size(self.format, self.width, self.height)


def decode_texture_subheader(payload: bytes, offset: int) -> TextureSubHeader:
    reader = ByteReader(payload, offset)
    reader.skip(1, "texture.reserved0")
    mip_fragment_count = reader.u8("texture.mip_fragment_count")
    reader.skip(1, "texture.reserved1")
    format_code = reader.u8("texture.format")
    mip_count = reader.u32("texture.mip_count")
    sub_offsets = tuple(
        reader.u32(f"texture.sub_offsets[{i}]") for i in range(mip_count)
    )
    width_ratio = reader.u16("texture.width_ratio")
    height_ratio = reader.u16("texture.height_ratio")
    reader.skip(4, "texture.b_max_size")
    max_side_length = reader.u32("texture.max_side_length")

    fmt = TextureFormat.from_code(format_code)
    if fmt is None:
        raise unknown_format(
            f"Unknown texture format: 0x{format_code:X}",
            {"format": format_code},
        )
    if width_ratio == 0 and height_ratio == 0:
        raise unknown_format("Texture declares a 0:0 aspect ratio")

    return TextureSubHeader(
        format=fmt,
        mip_fragment_count=mip_fragment_count,
        sub_offsets=sub_offsets,
        width_ratio=width_ratio,
        height_ratio=height_ratio,
        max_side_length=max_side_length,
    )
