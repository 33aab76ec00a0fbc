from .arguments import (
    ArgumentValue,
    ListValue,
    MapValue,
    Scalar,
    parse_arguments,
)
from .decoder import (
    DEFAULT_TAG_TABLES,
    AssetHeader,
    AssetKind,
    TagTables,
    decode_header,
)
from .reader import ByteReader

__all__ = [
    "ArgumentValue",
    "ListValue",
    "MapValue",
    "Scalar",
    "parse_arguments",
    "DEFAULT_TAG_TABLES",
    "AssetHeader",
    "AssetKind",
    "TagTables",
    "decode_header",
    "ByteReader",
]
