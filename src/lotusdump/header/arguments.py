"""Parser for the nested ``key=value`` argument text embedded in asset headers.

The text is an implicit map of newline separated ``key=value`` entries. A
value starting with ``{`` is either a nested map (it contains an ``=`` at its
own top level) or a comma separated list. Anything else is a scalar, tried as
an integer, then as a float, then kept as text.

Parsing never fails: unbalanced braces, truncated text and bad numbers all
degrade to strings or empty containers for the offending fragment. Values
nested more than ``MAX_DEPTH`` levels deep are kept as text.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple, Union

__all__ = [
    "ArgumentValue",
    "Scalar",
    "ListValue",
    "MapValue",
    "parse_arguments",
]

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
)
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1
# Values nested deeper than this are kept as text.
MAX_DEPTH = 64


@dataclass(frozen=True, slots=True)
class Scalar:
    value: Union[str, int, float]

    def to_python(self) -> Any:
        return self.value


@dataclass(frozen=True, slots=True)
class ListValue:
    items: Tuple["ArgumentValue", ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator["ArgumentValue"]:
        return iter(self.items)

    def to_python(self) -> Any:
        return [item.to_python() for item in self.items]


@dataclass(frozen=True, slots=True)
class MapValue:
    # Duplicate keys are kept in order; lookups resolve them last-wins.
    entries: Tuple[Tuple[str, "ArgumentValue"], ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def keys(self) -> list[str]:
        return [key for key, _ in self.entries]

    def get(
        self, key: str, default: Optional["ArgumentValue"] = None
    ) -> Optional["ArgumentValue"]:
        for k, v in reversed(self.entries):
            if k == key:
                return v
        return default

    def __getitem__(self, key: str) -> "ArgumentValue":
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self.entries)

    def to_python(self) -> Any:
        out: dict[str, Any] = {}
        for key, value in self.entries:
            out[key] = value.to_python()
        return out


ArgumentValue = Union[Scalar, ListValue, MapValue]


def parse_arguments(text: str) -> MapValue:
    return _parse_map(text, 0)


def _parse_value(text: str, level: int) -> ArgumentValue:
    text = text.strip()
    if level >= MAX_DEPTH:
        return _parse_scalar(text)
    is_map = False
    is_list = False
    depth = 0
    for ch in text:
        if ch == "{":
            if depth == 0:
                is_map = True
                is_list = True
            depth += 1
        elif ch == "}":
            depth = max(0, depth - 1)
        elif ch == "=" and depth == 1:
            is_list = False

    if is_list:
        return _parse_list(text, level + 1)
    if is_map:
        return _parse_map(text, level + 1)
    return _parse_scalar(text)


def _parse_scalar(text: str) -> Scalar:
    token = text.strip()
    if _INT_RE.fullmatch(token):
        number = int(token)
        if _I64_MIN <= number <= _I64_MAX:
            return Scalar(number)
    if _FLOAT_RE.fullmatch(token):
        value = float(token)
        if math.isfinite(value):
            return Scalar(value)
    return Scalar(token)


def _parse_map(text: str, level: int) -> MapValue:
    pairs: list[tuple[str, str]] = []
    current: list[str] = []
    key = ""
    depth = 0

    body = text[1:] if text.startswith("{") else text
    for ch in body:
        if ch == "{":
            depth += 1
        elif ch == "}":
            if depth == 0:
                break
            depth -= 1
        elif ch == "=" and depth == 0:
            key = "".join(current).strip()
            current = []
            continue
        elif ch == "\n" and depth == 0 and key:
            pairs.append((key, "".join(current)))
            key = ""
            current = []
            continue
        current.append(ch)

    if key:
        pairs.append((key, "".join(current)))

    return MapValue(tuple((k, _parse_value(v, level)) for k, v in pairs))


def _parse_list(text: str, level: int) -> ListValue:
    values: list[str] = []
    current: list[str] = []
    depth = 0
    closed = False

    body = text[1:]
    for ch in body:
        if ch == "{":
            depth += 1
        elif ch == "}":
            if depth == 0:
                item = "".join(current).strip()
                if item or values:
                    values.append(item)
                closed = True
                break
            depth -= 1
        elif ch == "," and depth == 0:
            values.append("".join(current).strip())
            current = []
            continue
        current.append(ch)

    if not closed:
        item = "".join(current).strip()
        if item:
            values.append(item)

    return ListValue(tuple(_parse_value(v, level) for v in values))
