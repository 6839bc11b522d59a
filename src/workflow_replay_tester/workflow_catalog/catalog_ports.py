"""Lookup contracts for test definitions and workflows."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .catalog_models import TestDefinition, WorkflowDefinition


class TestDefinitionLookup(Protocol):  # pylint: disable=too-few-public-methods
    """Finds test definitions visible to the caller."""

    def find_one(
        self, test_id: str, accessible_workflow_ids: Sequence[str] | None
    ) -> TestDefinition | None: ...


class WorkflowLookup(Protocol):  # pylint: disable=too-few-public-methods
    """Finds workflow definitions by id."""

    def find_by_id(self, workflow_id: str) -> WorkflowDefinition | None: ...
