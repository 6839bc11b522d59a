"""Run request builder for workflows started with explicit input items."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from workflow_replay_tester.workflow_catalog.catalog_models import WorkflowDefinition

from .dispatch_contracts import DispatchError, ExecutionMode, WorkflowRunRequest


class EvaluationRunDataBuilder:  # pylint: disable=too-few-public-methods
    """Starts a workflow at its trigger node with the given items as trigger output."""

    def build(
        self, workflow: WorkflowDefinition, input_items: Sequence[Mapping[str, Any]]
    ) -> WorkflowRunRequest:
        start_node = _select_start_node(workflow)
        return WorkflowRunRequest(
            workflow=workflow,
            execution_mode=ExecutionMode.INTEGRATED,
            start_node=start_node,
            input_items=tuple(input_items),
        )


def _select_start_node(workflow: WorkflowDefinition) -> str:
    if not workflow.nodes:
        raise DispatchError(f"Workflow {workflow.workflow_id} has no nodes to start from.")
    triggers = workflow.trigger_nodes
    if triggers:
        return triggers[0].name
    return workflow.nodes[0].name
