"""High-level extraction API.

``extract_one`` turns a single H partition node into a file on disk and lets
every error propagate. ``extract_tree`` walks a directory node, logs and
records per-file failures (including store errors) and keeps going, polls an optional cancel signal
between files and reports ``(completed, total)`` progress after each one.
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path, PurePosixPath
from typing import Any, Callable, Iterator, List, Optional, Protocol, Tuple

from .audio.builder import build_audio
from .errors import (
    E_WRITE_IO,
    LotusError,
    WriteError,
    unsafe_path,
    unsupported_asset,
)
from .header.decoder import AssetHeader, AssetKind, decode_header
from .logging import get_logger, section
from .models import BuiltAsset, ExtractOutcome, ExtractResult, TreeSummary
from .options import ExtractOptions
from .partition.store import Node, Partition, PartitionSet
from .reporting import TaskStatus, get_reporter
from .texture.builder import build_texture

__all__ = [
    "CancelSignal",
    "LatestProgress",
    "build_asset",
    "output_path_for",
    "extract_one",
    "collect_files",
    "iter_extract_tree",
    "extract_tree",
    "describe_asset",
    "dump_raw",
    "filetime_to_datetime",
]

ProgressCallback = Callable[[int, int], None]

# 100ns intervals between 1601-01-01 and 1970-01-01.
_FILETIME_EPOCH_OFFSET = 116444736000000000


class CancelSignal(Protocol):
    def is_set(self) -> bool: ...


class LatestProgress:
    """Single-slot progress holder; only the newest value is kept."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: Optional[Tuple[int, int]] = None

    def __call__(self, completed: int, total: int) -> None:
        with self._lock:
            self._value = (completed, total)

    def take(self) -> Optional[Tuple[int, int]]:
        with self._lock:
            value, self._value = self._value, None
        return value

    def peek(self) -> Optional[Tuple[int, int]]:
        with self._lock:
            return self._value


def _header_for(
    node: Node, partitions: PartitionSet, options: ExtractOptions
) -> Tuple[AssetHeader, bytes]:
    payload = partitions.h.decompress(node)
    return decode_header(payload, options.tag_tables), payload


def build_asset(
    node: Node,
    partitions: PartitionSet,
    options: Optional[ExtractOptions] = None,
) -> BuiltAsset:
    options = options or ExtractOptions()
    header, payload = _header_for(node, partitions, options)
    get_logger().debug("Header for %s: %s", node.path, header)
    if header.kind is AssetKind.AUDIO:
        return build_audio(header, payload, partitions, node, options)
    if header.kind is AssetKind.TEXTURE:
        return build_texture(header, payload, partitions, node)
    raise unsupported_asset(
        f"File is not supported: {node.name} (type {header.raw_type})",
        {"path": node.path, "type": header.raw_type},
    )


def _parent_dir(node: Node, output_root: Path) -> Path:
    parts = PurePosixPath(node.path.lstrip("/")).parent.parts
    for part in parts + (node.name,):
        if part in ("", ".", "..") or "/" in part or "\\" in part:
            raise unsafe_path(node.path)
    return Path(output_root).joinpath(*parts)


def output_path_for(node: Node, output_root: Path, extension: str) -> Path:
    """Mirror the node's directory under ``output_root``."""
    parent = _parent_dir(node, output_root)
    name = node.name
    if extension == ".dds":
        if name.endswith(".png"):
            name = name[: -len(".png")]
        return parent / f"{name}{extension}"
    return parent / PurePosixPath(name).with_suffix(extension).name


def _write(path: Path, data: bytes) -> int:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise WriteError(
            code=E_WRITE_IO,
            message=f"Failed to write {path}: {e}",
            context={"path": str(path)},
        ) from e
    return len(data)


def extract_one(
    node: Node,
    partitions: PartitionSet,
    output_root: Path,
    options: Optional[ExtractOptions] = None,
) -> ExtractResult:
    built = build_asset(node, partitions, options)
    path = output_path_for(node, output_root, built.extension)
    written = _write(path, built.data)
    get_logger().debug("Wrote %s (%d bytes)", path, written)
    return ExtractResult(path=path, bytes_written=written, extension=built.extension)


def collect_files(node: Node, recursive: bool) -> List[Node]:
    """File nodes under ``node`` in breadth-first order."""
    if not node.is_directory:
        return [node]
    files: List[Node] = []
    directories = [node]
    while directories:
        directory = directories.pop(0)
        for child in directory.children():
            if child.is_directory:
                if recursive:
                    directories.append(child)
            else:
                files.append(child)
    return files


def _run_files(
    files: List[Node],
    label: str,
    partitions: PartitionSet,
    output_root: Path,
    cancel_signal: Optional[CancelSignal],
    progress: Optional[ProgressCallback],
    options: ExtractOptions,
) -> Iterator[ExtractOutcome]:
    logger = get_logger()
    rep = get_reporter()
    total = len(files)
    ok = failed = 0
    status = TaskStatus.SUCCESS

    rep.start_task("extract.tree", f"Extract {label}", total)
    try:
        for completed, file_node in enumerate(files):
            if cancel_signal is not None and cancel_signal.is_set():
                logger.warning(
                    "Extraction cancelled after %d/%d files", completed, total
                )
                status = TaskStatus.CANCELLED
                break
            try:
                result = extract_one(file_node, partitions, output_root, options)
            except LotusError as e:
                logger.error("%s: %s", file_node.path, e.message)
                failed += 1
                outcome = ExtractOutcome(file_node.path, error=e)
            except Exception as e:
                logger.error("%s: %s: %s", file_node.path, type(e).__name__, e)
                failed += 1
                outcome = ExtractOutcome(file_node.path, error=e)
            else:
                ok += 1
                outcome = ExtractOutcome(file_node.path, result=result)
            rep.advance("extract.tree", current_item=file_node.name)
            if progress is not None:
                progress(completed + 1, total)
            yield outcome
    except GeneratorExit:
        status = TaskStatus.CANCELLED
        raise
    except BaseException:
        status = TaskStatus.FAILED
        raise
    finally:
        rep.end_task("extract.tree", status, files=total, ok=ok, failed=failed)


def iter_extract_tree(
    node: Node,
    partitions: PartitionSet,
    output_root: Path,
    recursive: bool = False,
    cancel_signal: Optional[CancelSignal] = None,
    progress: Optional[ProgressCallback] = None,
    options: Optional[ExtractOptions] = None,
) -> Iterator[ExtractOutcome]:
    files = collect_files(node, recursive)
    return _run_files(
        files,
        node.path,
        partitions,
        output_root,
        cancel_signal,
        progress,
        options or ExtractOptions(),
    )


def extract_tree(
    node: Node,
    partitions: PartitionSet,
    output_root: Path,
    recursive: bool = False,
    cancel_signal: Optional[CancelSignal] = None,
    progress: Optional[ProgressCallback] = None,
    options: Optional[ExtractOptions] = None,
) -> TreeSummary:
    files = collect_files(node, recursive)
    summary = TreeSummary(total=len(files))
    with section(f"Extract {node.path}"):
        summary.outcomes.extend(
            _run_files(
                files,
                node.path,
                partitions,
                output_root,
                cancel_signal,
                progress,
                options or ExtractOptions(),
            )
        )
    summary.cancelled = len(summary.outcomes) < summary.total
    get_reporter().status(
        "Extract summary: "
        + f"files={summary.total} ok={summary.succeeded} "
        + f"failed={summary.failed} cancelled={str(summary.cancelled).lower()}"
    )
    return summary


def filetime_to_datetime(filetime: int) -> datetime:
    """Convert a Win32 FILETIME (100ns ticks since 1601) to UTC."""
    micros = (filetime - _FILETIME_EPOCH_OFFSET) // 10
    return datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(
        microseconds=micros
    )


def describe_asset(
    node: Node,
    partitions: PartitionSet,
    options: Optional[ExtractOptions] = None,
) -> dict[str, Any]:
    """JSON-serialisable view of a node and its decoded header."""
    options = options or ExtractOptions()
    header, _ = _header_for(node, partitions, options)
    return {
        "name": node.name,
        "path": node.path,
        "cache_offset": node.cache_offset,
        "comp_len": node.comp_len,
        "len": node.len,
        "timestamp": filetime_to_datetime(node.timestamp).isoformat(),
        "file_paths": list(header.file_paths),
        "arguments": header.arguments.to_python(),
        "raw_type": header.raw_type,
        "kind": header.kind.value,
        "consumed_length": header.consumed_length,
    }


def dump_raw(node: Node, partition: Partition, output_root: Path) -> ExtractResult:
    """Write the decompressed payload of ``node`` unchanged."""
    path = _parent_dir(node, output_root) / node.name
    data = partition.decompress(node)
    written = _write(path, data)
    return ExtractResult(
        path=path, bytes_written=written, extension=PurePosixPath(node.name).suffix
    )
