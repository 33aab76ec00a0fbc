"""Error definitions for lotusdump."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_TRUNCATED = "E_TRUNCATED"
E_UNKNOWN_FORMAT = "E_UNKNOWN_FORMAT"
E_MISSING_PARTITION = "E_MISSING_PARTITION"
E_UNSUPPORTED_ASSET = "E_UNSUPPORTED_ASSET"
E_WRITE_IO = "E_WRITE_IO"
E_UNSAFE_PATH = "E_UNSAFE_PATH"


@dataclass
class LotusError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class TruncatedError(LotusError):
    pass


class BuildError(LotusError):
    pass


class UnknownFormatError(BuildError):
    pass


class MissingPartitionError(BuildError):
    pass


class UnsupportedAssetError(BuildError):
    pass


class WriteError(LotusError):
    pass


def truncated(
    label: str, offset: int, size: int, available: int
) -> TruncatedError:
    return TruncatedError(
        code=E_TRUNCATED,
        message=f"Out of range read for {label}: {offset}+{size}>{available}",
        context={"label": label, "offset": offset, "size": size},
    )


def unknown_format(
    message: str, context: Optional[Dict[str, Any]] = None
) -> UnknownFormatError:
    return UnknownFormatError(
        code=E_UNKNOWN_FORMAT, message=message, context=context
    )


def missing_partition(
    message: str, context: Optional[Dict[str, Any]] = None
) -> MissingPartitionError:
    return MissingPartitionError(
        code=E_MISSING_PARTITION, message=message, context=context
    )


def unsupported_asset(
    message: str, context: Optional[Dict[str, Any]] = None
) -> UnsupportedAssetError:
    return UnsupportedAssetError(
        code=E_UNSUPPORTED_ASSET, message=message, context=context
    )


def unsafe_path(path: str) -> WriteError:
    return WriteError(
        code=E_UNSAFE_PATH,
        message=f"Refusing to write outside the output root: {path}",
        context={"path": path},
    )


__all__ = [
    "LotusError",
    "TruncatedError",
    "BuildError",
    "UnknownFormatError",
    "MissingPartitionError",
    "UnsupportedAssetError",
    "WriteError",
    "truncated",
    "unknown_format",
    "missing_partition",
    "unsupported_asset",
    "unsafe_path",
    "E_TRUNCATED",
    "E_UNKNOWN_FORMAT",
    "E_MISSING_PARTITION",
    "E_UNSUPPORTED_ASSET",
    "E_WRITE_IO",
    "E_UNSAFE_PATH",
]
