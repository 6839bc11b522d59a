"""Test case running domain exports."""

from .case_outcomes import TestCaseOutcome, TestCaseStatus
from .test_case_runner import (
    EvaluationMissingError,
    InvariantViolationError,
    TestCaseRunner,
    extract_evaluation_result,
)

__all__ = [
    "TestCaseOutcome",
    "TestCaseStatus",
    "EvaluationMissingError",
    "InvariantViolationError",
    "TestCaseRunner",
    "extract_evaluation_result",
]
