"""Pin data extraction from past executions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from workflow_replay_tester.execution_records.execution_trace import (
    ExecutionTrace,
    first_output_items,
)
from workflow_replay_tester.execution_records.flatted_codec import FlattedDecodeError, parse
from workflow_replay_tester.execution_records.record_models import ExecutionRecord
from workflow_replay_tester.workflow_catalog.catalog_models import WorkflowDefinition

PinData = Mapping[str, list[Any]]


class PinDataExtractionError(Exception):
    """Raised when a stored execution payload cannot be turned into a test case."""


@dataclass(frozen=True)
class PinnedTestCase:
    """Trigger inputs recorded by one past execution plus its original trace."""

    source_execution_id: str
    pin_data: PinData
    execution_data: ExecutionTrace


def create_pin_data_from_execution(
    workflow: WorkflowDefinition, execution: ExecutionRecord
) -> PinnedTestCase:
    """Pin every trigger node of `workflow` to the output it produced in `execution`.

    Only trigger nodes are pinned. A trigger without recorded output is left out,
    so the returned pin set may be partial.
    """
    try:
        decoded = parse(execution.payload)
    except FlattedDecodeError as exc:
        raise PinDataExtractionError(
            f"Execution {execution.execution_id} has an unreadable payload: {exc}"
        ) from exc
    execution_data = ExecutionTrace.from_payload(decoded)

    pin_data: dict[str, list[Any]] = {}
    for trigger_node in workflow.trigger_nodes:
        items = first_output_items(execution_data.run_data, trigger_node.name)
        if items is not None:
            pin_data[trigger_node.name] = items

    return PinnedTestCase(
        source_execution_id=execution.execution_id,
        pin_data=pin_data,
        execution_data=execution_data,
    )
