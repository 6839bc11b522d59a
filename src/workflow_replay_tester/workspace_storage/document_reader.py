"""Shared helpers for reading workspace documents."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

TEST_DEFINITIONS_DIR = "test-definitions"
WORKFLOWS_DIR = "workflows"
EXECUTIONS_DIR = "executions"
TEST_RUNS_DIR = "test-runs"

_DOCUMENT_SUFFIXES = (".yaml", ".yml", ".json")


class WorkspaceStorageError(Exception):
    """Raised when a workspace document is missing required data or cannot be read."""


def read_document(path: Path) -> Mapping[str, Any]:
    """Read one YAML or JSON document whose root must be a mapping."""
    try:
        parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise WorkspaceStorageError(f"Failed to read {path}: {exc}") from exc
    if not isinstance(parsed, Mapping):
        raise WorkspaceStorageError(f"Document root must be a mapping: {path}")
    return parsed


def iter_documents(directory: Path) -> Iterator[tuple[Path, Mapping[str, Any]]]:
    """Yield every document of a workspace sub-directory in file name order."""
    if not directory.is_dir():
        return
    for path in sorted(directory.iterdir()):
        if path.is_file() and path.suffix.lower() in _DOCUMENT_SUFFIXES:
            yield path, read_document(path)


def find_document(directory: Path, document_id: str) -> Mapping[str, Any] | None:
    """Return the document stored as `<document_id>.<suffix>` or None."""
    if not document_id or Path(document_id).name != document_id:
        return None
    for suffix in _DOCUMENT_SUFFIXES:
        candidate = directory / f"{document_id}{suffix}"
        if candidate.is_file():
            return read_document(candidate)
    return None


def require_string(document: Mapping[str, Any], key: str, path: Path | str) -> str:
    value = document.get(key)
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        raise WorkspaceStorageError(f"{path}: '{key}' must be a non-empty string.")
    return value.strip()


def string_tuple(value: Any, key: str, path: Path | str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, Sequence):
        raise WorkspaceStorageError(f"{path}: '{key}' must be a list of strings.")
    return tuple(str(item) for item in value)
