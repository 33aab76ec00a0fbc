"""Contract for the partition store the extractor reads from.

The store itself (table of contents, block decompression, tree navigation)
lives outside this package. Builders receive a :class:`PartitionSet`
explicitly on every call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Protocol

from ..logging import get_logger

__all__ = ["Node", "Partition", "PartitionSet", "tail"]


def tail(data: bytes, size: int) -> bytes:
    """Trailing ``size`` bytes; partitions may hold older data up front."""
    if size == 0:
        return b""
    return data[-size:]


class Node(Protocol):
    name: str
    path: str
    cache_offset: int
    comp_len: int
    len: int
    timestamp: int
    is_directory: bool

    def children(self) -> Iterable["Node"]: ...


class Partition(Protocol):
    def get_file_node(self, path: str) -> Optional[Node]: ...

    def get_directory_node(self, path: str) -> Optional[Node]: ...

    def decompress(self, node: Node) -> bytes:
        """Full decompressed payload of ``node``."""
        ...

    def raw_bytes_at(self, offset: int, length: int) -> bytes:
        """Positioned read of the raw (compressed) partition stream."""
        ...

    def decompress_range(self, offset: int, length: int) -> bytes:
        """Decompress blocks starting at ``offset`` until ``length`` bytes."""
        ...


@dataclass(slots=True)
class PartitionSet:
    h: Partition
    f: Optional[Partition] = None
    b: Optional[Partition] = None

    def file_node(self, name: str, path: str) -> Optional[Node]:
        part = getattr(self, name)
        if part is None:
            return None
        return part.get_file_node(path)

    def payload(self, name: str, path: str) -> Optional[bytes]:
        """Decompressed payload of ``path`` in partition ``name`` if present."""
        node = self.file_node(name, path)
        if node is None:
            return None
        logger = get_logger()
        logger.debug("Partition %s node found: %s", name.upper(), path)
        logger.debug(
            "Cache offset: %d, compressed size: %d, decompressed size: %d",
            node.cache_offset,
            node.comp_len,
            node.len,
        )
        return getattr(self, name).decompress(node)
