"""Flatted codec for execution payloads with shared or cyclic structure."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any


class FlattedDecodeError(Exception):
    """Raised when a flatted document cannot be decoded."""


def parse(text: str | bytes) -> Any:
    """Decode a flatted document into Python objects.

    Entry 0 of the outer array is the root. Inside object and array entries every
    string is a reference to another entry by index; string entries at the top
    level are plain string values. Objects are materialized first and wired up in
    a second pass, so cycles become shared Python objects.
    """
    try:
        entries = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise FlattedDecodeError(f"Invalid flatted JSON: {exc}") from exc
    if not isinstance(entries, list):
        raise FlattedDecodeError("Flatted document root must be an array.")
    if not entries:
        raise FlattedDecodeError("Flatted document must contain at least one entry.")

    resolved: list[Any] = [_empty_container(entry) for entry in entries]
    for index, entry in enumerate(entries):
        target = resolved[index]
        if isinstance(entry, dict):
            for key, raw in entry.items():
                target[key] = _resolve_reference(raw, entries, resolved)
        elif isinstance(entry, list):
            target.extend(_resolve_reference(raw, entries, resolved) for raw in entry)
    return resolved[0]


def stringify(value: Any) -> str:
    """Encode a Python object graph into a flatted document."""
    table = _ReferenceTable()
    table.index_of(value)
    output: list[Any] = []
    position = 0
    while position < len(table.entries):
        output.append(_encode_entry(table.entries[position], table))
        position += 1
    return json.dumps(output, ensure_ascii=False, separators=(",", ":"))


def _empty_container(entry: Any) -> Any:
    if isinstance(entry, dict):
        return {}
    if isinstance(entry, list):
        return []
    return entry


def _resolve_reference(raw: Any, entries: list[Any], resolved: list[Any]) -> Any:
    if not isinstance(raw, str):
        if isinstance(raw, dict | list):
            raise FlattedDecodeError("Nested containers are not valid inside flatted entries.")
        return raw
    try:
        index = int(raw)
    except ValueError as exc:
        raise FlattedDecodeError(f"Invalid flatted reference: {raw!r}") from exc
    if index < 0 or index >= len(entries):
        raise FlattedDecodeError(f"Flatted reference out of range: {index}")
    return resolved[index]


class _ReferenceTable:
    """Identity-keyed table assigning entry indexes in discovery order."""

    def __init__(self) -> None:
        self.entries: list[Any] = []
        self._containers: dict[int, int] = {}
        self._strings: dict[str, int] = {}

    def index_of(self, value: Any) -> int:
        if isinstance(value, str):
            known = self._strings.get(value)
            if known is None:
                known = self._append(value)
                self._strings[value] = known
            return known
        known = self._containers.get(id(value))
        if known is None:
            known = self._append(value)
            self._containers[id(value)] = known
        return known

    def _append(self, value: Any) -> int:
        self.entries.append(value)
        return len(self.entries) - 1


def _encode_entry(entry: Any, table: _ReferenceTable) -> Any:
    if isinstance(entry, Mapping):
        return {str(key): _encode_value(item, table) for key, item in entry.items()}
    if isinstance(entry, list | tuple):
        return [_encode_value(item, table) for item in entry]
    return _encode_scalar(entry)


def _encode_value(value: Any, table: _ReferenceTable) -> Any:
    if isinstance(value, str | Mapping | list | tuple):
        return str(table.index_of(value))
    return _encode_scalar(value)


def _encode_scalar(value: Any) -> Any:
    if value is None or isinstance(value, bool | int | float | str):
        return value
    raise TypeError(f"Value of type {type(value).__name__} is not flatted serializable.")
