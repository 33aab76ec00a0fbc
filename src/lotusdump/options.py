"""Extraction options."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Tuple

from .header.decoder import DEFAULT_TAG_TABLES, TagTables

__all__ = ["ExtractOptions", "DEFAULT_OPUS_VENDOR", "DEFAULT_OPUS_COMMENTS"]

DEFAULT_OPUS_VENDOR = "Warframe"
DEFAULT_OPUS_COMMENTS = ("ARTIST=Warframe",)


@dataclass(slots=True)
class ExtractOptions:
    tag_tables: TagTables = DEFAULT_TAG_TABLES
    # Ogg stream serial for Opus output; None draws a random one per asset.
    stream_serial: int | None = None
    opus_vendor: str = DEFAULT_OPUS_VENDOR
    opus_comments: Tuple[str, ...] = field(
        default_factory=lambda: DEFAULT_OPUS_COMMENTS
    )

    def next_stream_serial(self) -> int:
        if self.stream_serial is not None:
            return self.stream_serial & 0xFFFFFFFF
        return random.getrandbits(32)
