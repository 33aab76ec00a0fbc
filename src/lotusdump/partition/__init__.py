from .locator import BLOCK_HEADER_SIZE, locate_block_offset, parse_block_header
from .store import Node, Partition, PartitionSet

__all__ = [
    "BLOCK_HEADER_SIZE",
    "locate_block_offset",
    "parse_block_header",
    "Node",
    "Partition",
    "PartitionSet",
]
