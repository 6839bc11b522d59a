"""Workflow catalog entities."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

_TRIGGER_TYPE_PATTERN = re.compile(r"trigger$", re.IGNORECASE)


@dataclass(frozen=True)
class TestDefinition:
    """Links a workflow under test to its evaluation workflow and test-case tag."""

    test_id: str
    name: str
    workflow_id: str
    evaluation_workflow_id: str
    annotation_tag_id: str


@dataclass(frozen=True)
class WorkflowNode:
    """One node of a workflow definition."""

    name: str
    node_type: str
    parameters: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_trigger(self) -> bool:
        """Return True when the node type name ends with "trigger" (any case)."""
        return _TRIGGER_TYPE_PATTERN.search(self.node_type) is not None


@dataclass(frozen=True)
class WorkflowDefinition:
    """Workflow definition as stored in the catalog."""

    workflow_id: str
    name: str
    nodes: tuple[WorkflowNode, ...]
    connections: Mapping[str, Any] = field(default_factory=dict)

    @property
    def trigger_nodes(self) -> tuple[WorkflowNode, ...]:
        return tuple(node for node in self.nodes if node.is_trigger)

    def to_payload(self) -> dict[str, Any]:
        """Render the workflow in the shape the execution engine expects."""
        return {
            "id": self.workflow_id,
            "name": self.name,
            "nodes": [
                {"name": node.name, "type": node.node_type, "parameters": dict(node.parameters)}
                for node in self.nodes
            ],
            "connections": dict(self.connections),
        }
