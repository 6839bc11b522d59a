"""Run execution domain exports."""

from .run_contracts import RunArtifacts, RunOutcome, RunRequest
from .test_run_use_case import RunExecutionError, execute_test_run

__all__ = [
    "RunRequest",
    "RunOutcome",
    "RunArtifacts",
    "RunExecutionError",
    "execute_test_run",
]
