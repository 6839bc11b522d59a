"""Execution dispatch entities and collaborator contracts."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from workflow_replay_tester.execution_records.execution_trace import ExecutionTrace, RunData
from workflow_replay_tester.workflow_catalog.catalog_models import WorkflowDefinition


class DispatchError(Exception):
    """Raised when a run request cannot be built or handed to the engine."""


class CompletionTimeoutError(Exception):
    """Raised when the engine does not report a finished execution in time."""


class CompletionCancelledError(Exception):
    """Raised when waiting for an execution was cancelled."""


class ExecutionMode(str, Enum):
    """Mode the engine runs a requested workflow in."""

    EVALUATION = "evaluation"
    INTEGRATED = "integrated"


@dataclass(frozen=True)
class WorkflowRunRequest:  # pylint: disable=too-many-instance-attributes
    """Everything the engine needs to start one workflow run."""

    workflow: WorkflowDefinition
    execution_mode: ExecutionMode
    run_data: RunData = field(default_factory=dict)
    pin_data: Mapping[str, Sequence[Any]] = field(default_factory=dict)
    user_id: str | None = None
    partial_execution_version: str = "-1"
    start_node: str | None = None
    input_items: tuple[Mapping[str, Any], ...] = ()

    def to_payload(self, execution_id: str) -> dict[str, Any]:
        """Render the request as the engine-facing message body."""
        return {
            "executionId": execution_id,
            "executionMode": self.execution_mode.value,
            "workflowData": self.workflow.to_payload(),
            "runData": dict(self.run_data),
            "pinData": {name: list(items) for name, items in self.pin_data.items()},
            "userId": self.user_id,
            "partialExecutionVersion": self.partial_execution_version,
            "startNode": self.start_node,
            "inputItems": [dict(item) for item in self.input_items],
        }


@dataclass(frozen=True)
class ExecutionResult:
    """Finished execution reported by the engine."""

    execution_id: str
    status: str
    trace: ExecutionTrace


class ExecutionDispatcher(Protocol):
    """Submits run requests and waits for their completion."""

    def dispatch(self, request: WorkflowRunRequest) -> str: ...

    def await_completion(self, execution_id: str) -> ExecutionResult | None: ...


class RunDataBuilder(Protocol):  # pylint: disable=too-few-public-methods
    """Builds a run request for a workflow fed with explicit input items."""

    def build(
        self, workflow: WorkflowDefinition, input_items: Sequence[Mapping[str, Any]]
    ) -> WorkflowRunRequest: ...
