"""Execution dispatch domain exports."""

from .completion_registry import CompletionRegistry
from .dispatch_contracts import (
    CompletionCancelledError,
    CompletionTimeoutError,
    DispatchError,
    ExecutionDispatcher,
    ExecutionMode,
    ExecutionResult,
    RunDataBuilder,
    WorkflowRunRequest,
)
from .evaluation_run_builder import EvaluationRunDataBuilder
from .kafka_dispatcher import CompletionListener, KafkaExecutionDispatcher

__all__ = [
    "CompletionRegistry",
    "CompletionCancelledError",
    "CompletionTimeoutError",
    "DispatchError",
    "ExecutionDispatcher",
    "ExecutionMode",
    "ExecutionResult",
    "RunDataBuilder",
    "WorkflowRunRequest",
    "EvaluationRunDataBuilder",
    "CompletionListener",
    "KafkaExecutionDispatcher",
]
