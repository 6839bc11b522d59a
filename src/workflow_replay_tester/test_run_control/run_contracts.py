"""Test run entities and persistence contract."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Protocol

from workflow_replay_tester.test_case_running.case_outcomes import TestCaseOutcome


class InvalidTransitionError(Exception):
    """Raised when a test run is moved against its lifecycle."""


class TestRunStatus(str, Enum):
    """Lifecycle status of a test run."""

    NEW = "new"
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"


_ALLOWED_TRANSITIONS: Mapping[TestRunStatus, frozenset[TestRunStatus]] = {
    TestRunStatus.NEW: frozenset({TestRunStatus.RUNNING, TestRunStatus.ERROR}),
    TestRunStatus.RUNNING: frozenset({TestRunStatus.COMPLETED, TestRunStatus.ERROR}),
    TestRunStatus.COMPLETED: frozenset(),
    TestRunStatus.ERROR: frozenset(),
}


@dataclass
class TestRun:  # pylint: disable=too-many-instance-attributes
    """One invocation of a test definition, mutated only through its transitions."""

    test_run_id: str
    test_definition_id: str
    status: TestRunStatus = TestRunStatus.NEW
    created_at: datetime | None = None
    run_at: datetime | None = None
    completed_at: datetime | None = None
    metrics: dict[str, Any] | None = None
    error_message: str | None = None

    def mark_running(self, now: datetime) -> None:
        self._transition_to(TestRunStatus.RUNNING)
        self.run_at = now

    def mark_completed(self, now: datetime, metrics: Mapping[str, Any]) -> None:
        self._transition_to(TestRunStatus.COMPLETED)
        self.completed_at = now
        self.metrics = dict(metrics)

    def mark_error(self, message: str) -> None:
        self._transition_to(TestRunStatus.ERROR)
        self.error_message = message

    def _transition_to(self, status: TestRunStatus) -> None:
        if status not in _ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTransitionError(
                f"Test run {self.test_run_id} cannot move from {self.status.value} "
                f"to {status.value}."
            )
        self.status = status


@dataclass(frozen=True)
class TestRunResult:
    """What a caller gets back from running a test definition."""

    test_run_id: str
    test_definition_id: str
    status: TestRunStatus
    metrics: Mapping[str, Any] | None
    outcomes: tuple[TestCaseOutcome, ...] = field(default_factory=tuple)
    error_message: str | None = None

    @property
    def success(self) -> bool:
        if self.status != TestRunStatus.COMPLETED or self.metrics is None:
            return False
        return bool(self.metrics.get("success"))


class TestRunStore(Protocol):
    """Persistence for test runs."""

    def create(self, *, test_definition_id: str) -> TestRun: ...

    def save(self, test_run: TestRun) -> None: ...
