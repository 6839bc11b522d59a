"""Execution trace entities and run data navigation."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

RunData = Mapping[str, Sequence[Mapping[str, Any]]]


@dataclass(frozen=True)
class ExecutionTrace:
    """Per-node trace of one workflow run plus the raw decoded execution data."""

    run_data: RunData
    last_node_executed: str | None
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @staticmethod
    def from_payload(payload: Any) -> ExecutionTrace:
        """Build a trace from decoded execution data (`{"resultData": {...}}`)."""
        result_data = payload.get("resultData") if isinstance(payload, Mapping) else None
        if not isinstance(result_data, Mapping):
            result_data = {}
        run_data = result_data.get("runData")
        last_node_executed = result_data.get("lastNodeExecuted")
        return ExecutionTrace(
            run_data=run_data if isinstance(run_data, Mapping) else {},
            last_node_executed=last_node_executed if isinstance(last_node_executed, str) else None,
            raw=payload if isinstance(payload, Mapping) else {},
        )


def first_output_items(run_data: RunData, node_name: str) -> list[Any] | None:
    """Return the item array of the first run's first main output for a node.

    Returns None when the node did not run or any step of
    `runData[node][0].data.main[0]` is missing.
    """
    node_runs = run_data.get(node_name)
    if not isinstance(node_runs, Sequence) or isinstance(node_runs, str) or not node_runs:
        return None
    first_run = node_runs[0]
    if not isinstance(first_run, Mapping):
        return None
    data = first_run.get("data")
    if not isinstance(data, Mapping):
        return None
    main = data.get("main")
    if not isinstance(main, Sequence) or isinstance(main, str) or not main:
        return None
    items = main[0]
    if not isinstance(items, list):
        return None
    return items
