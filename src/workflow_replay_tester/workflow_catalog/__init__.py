"""Workflow catalog domain exports."""

from .catalog_models import TestDefinition, WorkflowDefinition, WorkflowNode
from .catalog_ports import TestDefinitionLookup, WorkflowLookup

__all__ = [
    "TestDefinition",
    "WorkflowDefinition",
    "WorkflowNode",
    "TestDefinitionLookup",
    "WorkflowLookup",
]
