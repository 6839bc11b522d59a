"""Workspace directory storage exports."""

from .catalog_directory import DirectoryCatalog, parse_test_definition, parse_workflow
from .document_reader import WorkspaceStorageError, read_document
from .execution_record_directory import ExecutionRecordDirectory, parse_execution_record
from .test_run_directory import TestRunDirectory

__all__ = [
    "DirectoryCatalog",
    "ExecutionRecordDirectory",
    "TestRunDirectory",
    "WorkspaceStorageError",
    "parse_execution_record",
    "parse_test_definition",
    "parse_workflow",
    "read_document",
]
