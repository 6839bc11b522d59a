"""Test run control domain exports."""

from .run_contracts import (
    InvalidTransitionError,
    TestRun,
    TestRunResult,
    TestRunStatus,
    TestRunStore,
)
from .test_run_controller import (
    RunCancelledError,
    TestCaseFailedError,
    TestDefinitionNotFoundError,
    TestRunController,
    aggregate_metrics,
)

__all__ = [
    "InvalidTransitionError",
    "TestRun",
    "TestRunResult",
    "TestRunStatus",
    "TestRunStore",
    "RunCancelledError",
    "TestCaseFailedError",
    "TestDefinitionNotFoundError",
    "TestRunController",
    "aggregate_metrics",
]
