"""Test case outcome entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class TestCaseStatus(str, Enum):
    """Outcome status of one replayed test case."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class TestCaseOutcome:
    """Result of replaying one past execution and evaluating the new run."""

    source_execution_id: str
    status: TestCaseStatus
    verdict: Mapping[str, Any] | None
    under_test_execution_id: str | None
    evaluation_execution_id: str | None
    reason: str | None = None

    @property
    def counts_toward_success(self) -> bool:
        return self.verdict is not None

    @staticmethod
    def from_verdict(
        source_execution_id: str,
        verdict: Mapping[str, Any],
        *,
        under_test_execution_id: str,
        evaluation_execution_id: str,
    ) -> TestCaseOutcome:
        status = TestCaseStatus.PASSED if verdict.get("success") else TestCaseStatus.FAILED
        return TestCaseOutcome(
            source_execution_id=source_execution_id,
            status=status,
            verdict=verdict,
            under_test_execution_id=under_test_execution_id,
            evaluation_execution_id=evaluation_execution_id,
        )

    @staticmethod
    def skipped(
        source_execution_id: str, *, under_test_execution_id: str | None, reason: str
    ) -> TestCaseOutcome:
        return TestCaseOutcome(
            source_execution_id=source_execution_id,
            status=TestCaseStatus.SKIPPED,
            verdict=None,
            under_test_execution_id=under_test_execution_id,
            evaluation_execution_id=None,
            reason=reason,
        )
