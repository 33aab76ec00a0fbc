from __future__ import annotations

import os
import time
from typing import Any, Dict, List

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from .base import Reporter, TaskStatus, TaskRecord, format_stats, get_verbosity

_STATUS_ICON = {
    TaskStatus.SUCCESS: "✔",
    TaskStatus.FAILED: "✖",
    TaskStatus.CANCELLED: "■",
}


class RichReporter(Reporter):
    def __init__(self, console: Console | None = None):
        self.console = console or Console(
            stderr=True, highlight=False, soft_wrap=False
        )
        self._transient = os.getenv(
            "LOTUSDUMP_PROGRESS_TRANSIENT", "0"
        ).lower() in ("1", "true", "yes")
        self.progress: Progress | None = None
        self._tasks: Dict[str, TaskRecord] = {}
        self._task_ids: Dict[str, Any] = {}
        self._completions: List[str] = []

    def _ensure_progress(self) -> Progress:
        if self.progress is None:
            self.progress = Progress(
                SpinnerColumn(spinner_name="dots"),
                TextColumn("{task.fields[name]}", justify="left", markup=False),
                BarColumn(bar_width=None),
                TextColumn("{task.completed}/{task.total}"),
                TextColumn("{task.fields[current_item]}", justify="left", markup=False),
                TimeElapsedColumn(),
                transient=self._transient,
                console=self.console,
                expand=True,
            )
            self.progress.start()
        return self.progress

    def _completion_line(self, rec: TaskRecord) -> str:
        icon = _STATUS_ICON.get(rec.status, "")
        dur = (rec.end_time or rec.start_time) - rec.start_time
        total_part = (
            f" {rec.completed}/{rec.total}" if rec.total is not None else ""
        )
        return f"{icon} {rec.name}{total_part} ({dur:.2f}s){format_stats(rec.meta)}"

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        # Tasks without a known total are rendered as section rules.
        if total is None:
            self.console.rule(name)
            return
        progress = self._ensure_progress()
        rid = progress.add_task("", total=total, name=name, current_item="")
        self._tasks[task_id] = TaskRecord(task_id, name, total, meta=meta)
        self._task_ids[task_id] = rid

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        rec = self._tasks.get(task_id)
        if not rec or self.progress is None:
            return
        rec.completed += step
        rec.meta.update(meta)
        self.progress.update(
            self._task_ids[task_id],
            completed=rec.completed,
            current_item=meta.get("current_item", ""),
        )

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> None:
        rec = self._tasks.pop(task_id, None)
        if not rec:
            return
        rec.status = status
        rec.end_time = time.time()
        rec.meta.update(final_meta)
        rid = self._task_ids.pop(task_id, None)
        if rid is not None and self.progress is not None:
            self.progress.update(rid, current_item="")
        line = self._completion_line(rec)
        if self._transient:
            self._completions.append(line)
        else:
            self.console.print(line, markup=False)
        if not self._tasks:
            self.flush()

    def status(self, message: str, **fields: Any) -> None:
        self.console.print(f"[green]INFO[/]: {escape(message)}")

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() < level:
            return
        self.console.print(f"[cyan]VERB{level}[/]: {escape(message)}")

    def error(self, message: str, **fields: Any) -> None:
        self.console.print(f"[bold red]ERROR[/]: {escape(message)}")

    def warning(self, message: str, **fields: Any) -> None:
        self.console.print(f"[yellow]WARN[/]: {escape(message)}")

    def section(self, title: str) -> None:
        self.console.rule(title)

    def flush(self) -> None:
        if self.progress is not None:
            try:
                self.progress.stop()
            finally:
                self.progress = None
                self._task_ids.clear()
        if self._completions:
            self.console.print("\n".join(self._completions), markup=False)
            self._completions.clear()
