"""Rebuild DDS files from a texture header and its partitions."""

from __future__ import annotations

from ..errors import missing_partition
from ..header.decoder import AssetHeader
from ..logging import get_logger
from ..models import BuiltAsset
from ..partition.locator import locate_block_offset
from ..partition.store import Node, PartitionSet, tail
from .dds import pack_dds_header
from .subheader import TextureSubHeader, decode_texture_subheader

__all__ = ["build_texture", "load_texture_bytes"]


def _trailing_payload(
    partitions: PartitionSet, name: str, path: str, size: int
) -> bytes:
    data = partitions.payload(name, path)
    if data is None:
        raise missing_partition(
            f"Texture data not found in the {name.upper()} partition",
            {"path": path},
        )
    if len(data) < size:
        raise missing_partition(
            f"Texture data too short: {len(data)} < {size}",
            {"path": path, "partition": name.upper()},
        )
    return tail(data, size)


def load_texture_bytes(
    sub: TextureSubHeader, partitions: PartitionSet, path: str
) -> bytes:
    logger = get_logger()
    size = sub.byte_size
    logger.debug("Real image size: %d", size)

    if sub.mip_fragment_count == 0:
        return _trailing_payload(partitions, "b", path, size)

    f_node = partitions.file_node("f", path)
    if f_node is None or partitions.f is None:
        raise missing_partition(
            "Texture mip fragments need the F partition", {"path": path}
        )
    if not sub.sub_offsets:
        return _trailing_payload(partitions, "f", path, size)

    sub_offset = sub.sub_offsets[-1]
    real_offset = locate_block_offset(
        partitions.f, f_node.cache_offset, sub_offset
    )
    logger.debug(
        "Cache image offset: %d, real cache image offset: %d",
        sub_offset,
        real_offset,
    )
    data = partitions.f.decompress_range(
        f_node.cache_offset + real_offset, size
    )
    if len(data) < size:
        raise missing_partition(
            f"Texture data too short: {len(data)} < {size}",
            {"path": path, "partition": "F"},
        )
    return tail(data, size)


def build_texture(
    header: AssetHeader,
    payload: bytes,
    partitions: PartitionSet,
    node: Node,
) -> BuiltAsset:
    sub = decode_texture_subheader(payload, header.consumed_length)
    get_logger().debug(
        "Texture sub-header: %s %dx%d (%d bytes)",
        sub.format.value,
        sub.width,
        sub.height,
        sub.byte_size,
    )
    pixels = load_texture_bytes(sub, partitions, node.path)
    return BuiltAsset(pack_dds_header(sub) + pixels, ".dds")
