"""Execution record entities."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class ExecutionRecord:
    """Past execution of a workflow with its flatted-encoded execution data."""

    execution_id: str
    workflow_id: str
    status: str
    payload: str
    annotation_tag_ids: tuple[str, ...] = ()
    metadata: Mapping[str, str] = field(default_factory=dict)


class ExecutionRecordQuery(Protocol):  # pylint: disable=too-few-public-methods
    """Query for past executions selected as test cases."""

    def find_tagged(
        self, annotation_tag_id: str, workflow_id: str
    ) -> Sequence[ExecutionRecord]: ...
