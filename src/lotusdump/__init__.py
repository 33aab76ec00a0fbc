"""Rebuild playable audio and viewable textures from cached game assets."""

from .errors import (
    BuildError,
    LotusError,
    MissingPartitionError,
    TruncatedError,
    UnknownFormatError,
    UnsupportedAssetError,
    WriteError,
)
from .extract import (
    LatestProgress,
    build_asset,
    describe_asset,
    dump_raw,
    extract_one,
    extract_tree,
    iter_extract_tree,
)
from .header import AssetHeader, AssetKind, TagTables, decode_header, parse_arguments
from .logging import configure_logging, get_logger
from .models import BuiltAsset, ExtractOutcome, ExtractResult, TreeSummary
from .options import ExtractOptions
from .partition import PartitionSet, locate_block_offset

__all__ = [
    "BuildError",
    "LotusError",
    "MissingPartitionError",
    "TruncatedError",
    "UnknownFormatError",
    "UnsupportedAssetError",
    "WriteError",
    "LatestProgress",
    "build_asset",
    "describe_asset",
    "dump_raw",
    "extract_one",
    "extract_tree",
    "iter_extract_tree",
    "AssetHeader",
    "AssetKind",
    "TagTables",
    "decode_header",
    "parse_arguments",
    "configure_logging",
    "get_logger",
    "BuiltAsset",
    "ExtractOutcome",
    "ExtractResult",
    "TreeSummary",
    "ExtractOptions",
    "PartitionSet",
    "locate_block_offset",
]
