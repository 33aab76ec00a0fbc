import sys

from .base import (
    Reporter,
    TaskStatus,
    get_reporter,
    set_reporter,
)
from .base import (
    set_verbosity,
    get_verbosity,
)
from .plain import PlainReporter
from .jsonl import JsonLinesReporter
from .silent import SilentReporter
from .rich_reporter import RichReporter

__all__ = [
    "Reporter",
    "TaskStatus",
    "get_reporter",
    "set_reporter",
    "set_verbosity",
    "get_verbosity",
    "select_reporter",
    "PlainReporter",
    "JsonLinesReporter",
    "SilentReporter",
    "RichReporter",
]


def select_reporter(name: str = "plain") -> Reporter:
    """Install and return the reporter for ``plain|rich|json|silent``."""
    rep: Reporter
    if name == "json":
        rep = JsonLinesReporter()
    elif name == "silent":
        rep = SilentReporter()
    elif name == "rich" and sys.stderr.isatty():
        rep = RichReporter()
    elif name in ("plain", "rich"):
        # rich without a TTY quietly degrades to plain
        rep = PlainReporter()
    else:
        raise ValueError(f"Unknown reporter: {name}")
    set_reporter(rep)
    return rep
