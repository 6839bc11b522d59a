"""Directory-backed test definition and workflow lookups."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from workflow_replay_tester.workflow_catalog.catalog_models import (
    TestDefinition,
    WorkflowDefinition,
    WorkflowNode,
)

from .document_reader import (
    TEST_DEFINITIONS_DIR,
    WORKFLOWS_DIR,
    WorkspaceStorageError,
    find_document,
    require_string,
)


class DirectoryCatalog:
    """Reads `test-definitions/<id>.yaml` and `workflows/<id>.json` from a workspace."""

    def __init__(self, root: Path) -> None:
        self._test_definitions_dir = root / TEST_DEFINITIONS_DIR
        self._workflows_dir = root / WORKFLOWS_DIR

    def find_one(
        self, test_id: str, accessible_workflow_ids: Sequence[str] | None
    ) -> TestDefinition | None:
        document = find_document(self._test_definitions_dir, test_id)
        if document is None:
            return None
        test_definition = parse_test_definition(document, source=f"test definition {test_id}")
        if (
            accessible_workflow_ids is not None
            and test_definition.workflow_id not in accessible_workflow_ids
        ):
            return None
        return test_definition

    def find_by_id(self, workflow_id: str) -> WorkflowDefinition | None:
        document = find_document(self._workflows_dir, workflow_id)
        if document is None:
            return None
        return parse_workflow(document, source=f"workflow {workflow_id}")


def parse_test_definition(document: Mapping[str, Any], *, source: str) -> TestDefinition:
    return TestDefinition(
        test_id=require_string(document, "id", source),
        name=str(document.get("name") or ""),
        workflow_id=require_string(document, "workflowId", source),
        evaluation_workflow_id=require_string(document, "evaluationWorkflowId", source),
        annotation_tag_id=require_string(document, "annotationTagId", source),
    )


def parse_workflow(document: Mapping[str, Any], *, source: str) -> WorkflowDefinition:
    """Build a workflow definition from its stored `{id, name, nodes, connections}` form."""
    raw_nodes = document.get("nodes") or []
    if not isinstance(raw_nodes, Sequence) or isinstance(raw_nodes, str):
        raise WorkspaceStorageError(f"{source}: 'nodes' must be a list.")
    nodes = []
    for raw_node in raw_nodes:
        if not isinstance(raw_node, Mapping):
            raise WorkspaceStorageError(f"{source}: every node must be a mapping.")
        parameters = raw_node.get("parameters") or {}
        if not isinstance(parameters, Mapping):
            raise WorkspaceStorageError(f"{source}: node parameters must be a mapping.")
        nodes.append(
            WorkflowNode(
                name=require_string(raw_node, "name", source),
                node_type=require_string(raw_node, "type", source),
                parameters=dict(parameters),
            )
        )
    connections = document.get("connections") or {}
    if not isinstance(connections, Mapping):
        raise WorkspaceStorageError(f"{source}: 'connections' must be a mapping.")
    return WorkflowDefinition(
        workflow_id=require_string(document, "id", source),
        name=str(document.get("name") or ""),
        nodes=tuple(nodes),
        connections=dict(connections),
    )
