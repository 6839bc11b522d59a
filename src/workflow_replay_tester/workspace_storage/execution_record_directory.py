"""Directory-backed execution record query."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from workflow_replay_tester.execution_records.record_models import ExecutionRecord

from .document_reader import (
    EXECUTIONS_DIR,
    WorkspaceStorageError,
    iter_documents,
    require_string,
    string_tuple,
)


class ExecutionRecordDirectory:  # pylint: disable=too-few-public-methods
    """Reads `executions/<id>.json` documents holding flatted execution data."""

    def __init__(self, root: Path) -> None:
        self._executions_dir = root / EXECUTIONS_DIR

    def find_tagged(self, annotation_tag_id: str, workflow_id: str) -> list[ExecutionRecord]:
        """Return executions of `workflow_id` annotated with `annotation_tag_id`."""
        records = []
        for path, document in iter_documents(self._executions_dir):
            record = parse_execution_record(document, path)
            if record.workflow_id != workflow_id:
                continue
            if annotation_tag_id not in record.annotation_tag_ids:
                continue
            records.append(record)
        return records


def parse_execution_record(document: Mapping, path: Path) -> ExecutionRecord:
    payload = document.get("data")
    if not isinstance(payload, str) or not payload:
        raise WorkspaceStorageError(f"{path}: 'data' must hold the flatted execution payload.")
    metadata = document.get("metadata") or {}
    if not isinstance(metadata, Mapping):
        raise WorkspaceStorageError(f"{path}: 'metadata' must be a mapping.")
    return ExecutionRecord(
        execution_id=require_string(document, "id", path),
        workflow_id=require_string(document, "workflowId", path),
        status=str(document.get("status") or "unknown"),
        payload=payload,
        annotation_tag_ids=string_tuple(
            document.get("annotationTagIds"), "annotationTagIds", path
        ),
        metadata={str(key): str(value) for key, value in metadata.items()},
    )
