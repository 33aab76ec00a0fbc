"""Result records produced by the builders and the extraction driver."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

__all__ = ["BuiltAsset", "ExtractResult", "ExtractOutcome", "TreeSummary"]


@dataclass(frozen=True, slots=True)
class BuiltAsset:
    data: bytes
    extension: str  # including the dot, e.g. ".wav"


@dataclass(frozen=True, slots=True)
class ExtractResult:
    path: Path
    bytes_written: int
    extension: str


@dataclass(frozen=True, slots=True)
class ExtractOutcome:
    node_path: str
    result: Optional[ExtractResult] = None
    # LotusError for asset problems; store failures keep their own type.
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class TreeSummary:
    total: int = 0
    outcomes: List[ExtractOutcome] = field(default_factory=list)
    cancelled: bool = False

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.ok)
