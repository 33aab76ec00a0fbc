"""Decoder for the common asset header stored in the H partition.

Layout (little-endian):

- 16 opaque bytes
- ``u32`` merged file count, then per file a ``u32`` length + UTF-8 path
- ``u32`` argument text length + UTF-8 text (+ one NUL when non-empty)
- ``u32`` type tag

The format specific sub-header starts right after the type tag.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Tuple

from .arguments import MapValue, parse_arguments
from .reader import ByteReader

__all__ = [
    "AssetKind",
    "TagTables",
    "DEFAULT_TAG_TABLES",
    "AssetHeader",
    "decode_header",
]

HASH_SIZE = 16

AUDIO_TAGS = frozenset({0x8B})
TEXTURE_TAGS = frozenset(
    {
        0xA3,  # diffuse / emission / tint
        0xA4,  # billboard spritemap diffuse
        0xA5,  # billboard spritemap normal
        0xA7,  # roughness
        0xAB,  # skybox
        0xAE,
        0xB0,
        0xB1,  # cubemap
        0xB8,  # normal map
        0xBC,  # packmap
        0xC2,
        0xC3,  # detailspack
    }
)


@dataclass(frozen=True, slots=True)
class TagTables:
    """The two disjoint type tag sets used to classify assets."""

    audio: FrozenSet[int] = AUDIO_TAGS
    texture: FrozenSet[int] = TEXTURE_TAGS

    def __post_init__(self) -> None:
        overlap = self.audio & self.texture
        if overlap:
            raise ValueError(
                "Audio and texture tag sets overlap: "
                + ", ".join(f"0x{t:X}" for t in sorted(overlap))
            )


DEFAULT_TAG_TABLES = TagTables()


class AssetKind(Enum):
    AUDIO = "audio"
    TEXTURE = "texture"
    UNKNOWN = "unknown"

    @classmethod
    def from_tag(
        cls, tag: int, tables: TagTables = DEFAULT_TAG_TABLES
    ) -> "AssetKind":
        if tag in tables.audio:
            return cls.AUDIO
        if tag in tables.texture:
            return cls.TEXTURE
        return cls.UNKNOWN


@dataclass(frozen=True, slots=True)
class AssetHeader:
    file_paths: Tuple[str, ...]
    arguments: MapValue
    raw_type_tag: int
    kind: AssetKind
    # Offset of the format specific sub-header within the payload.
    consumed_length: int = field(repr=False)

    @property
    def raw_type(self) -> str:
        return f"0x{self.raw_type_tag:X}"

    @property
    def is_supported(self) -> bool:
        return self.kind is not AssetKind.UNKNOWN


def decode_header(
    payload: bytes, tag_tables: TagTables = DEFAULT_TAG_TABLES
) -> AssetHeader:
    reader = ByteReader(payload)
    reader.skip(HASH_SIZE, "hash")

    merged_file_count = reader.u32("merged_file_count")
    file_paths = []
    for i in range(merged_file_count):
        file_paths.append(reader.string(f"file_paths[{i}]"))

    arguments_length = reader.u32("arguments.length")
    raw_arguments = reader.read_bytes(arguments_length, "arguments").decode(
        "utf-8", "replace"
    )
    if arguments_length > 0:
        reader.skip(1, "arguments.nul")

    raw_type_tag = reader.u32("type_tag")

    return AssetHeader(
        file_paths=tuple(file_paths),
        arguments=parse_arguments(raw_arguments),
        raw_type_tag=raw_type_tag,
        kind=AssetKind.from_tag(raw_type_tag, tag_tables),
        consumed_length=reader.offset,
    )
