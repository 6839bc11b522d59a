"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from workflow_replay_tester.configuration.runtime_settings import Configuration
from workflow_replay_tester.test_run_control.run_contracts import TestRunStatus


@dataclass(frozen=True)
class RunRequest:
    """Input contract for executing one test run."""

    config_path: str
    test_id: str
    user_id: str
    output_dir: str | None = None
    accessible_workflow_ids: tuple[str, ...] | None = None


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one finished test run."""

    output_path: Path
    test_run_id: str
    status: TestRunStatus
    success: bool
    error_message: str | None = None


@dataclass(frozen=True)
class RunArtifacts:
    """Loaded collaborators required during run execution."""

    configuration: Configuration
    workspace_root: Path
