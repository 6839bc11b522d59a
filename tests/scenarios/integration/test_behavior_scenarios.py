"""Scenario-style integration tests for core run behaviors."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from workflow_replay_tester.execution_dispatch.dispatch_contracts import (
    ExecutionMode,
    ExecutionResult,
    WorkflowRunRequest,
)
from workflow_replay_tester.execution_dispatch.evaluation_run_builder import (
    EvaluationRunDataBuilder,
)
from workflow_replay_tester.execution_records.execution_trace import ExecutionTrace
from workflow_replay_tester.execution_records.flatted_codec import stringify
from workflow_replay_tester.test_case_running.test_case_runner import TestCaseRunner
from workflow_replay_tester.test_run_control.run_contracts import TestRunStatus
from workflow_replay_tester.test_run_control.test_run_controller import (
    TestDefinitionNotFoundError,
    TestRunController,
)
from workflow_replay_tester.workspace_storage import (
    DirectoryCatalog,
    ExecutionRecordDirectory,
    TestRunDirectory,
)


def _write_json(path: Path, document: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document), encoding="utf-8")


def _workspace(tmp_path: Path, execution_ids: tuple[str, ...]) -> Path:
    _write_json(
        tmp_path / "test-definitions" / "T.json",
        {
            "id": "T",
            "name": "Signup",
            "workflowId": "W",
            "evaluationWorkflowId": "E",
            "annotationTagId": "golden",
        },
    )
    _write_json(
        tmp_path / "workflows" / "W.json",
        {
            "id": "W",
            "nodes": [
                {"name": "Form", "type": "base.formTrigger"},
                {"name": "Save", "type": "base.database"},
            ],
        },
    )
    _write_json(
        tmp_path / "workflows" / "E.json",
        {"id": "E", "nodes": [{"name": "Compare", "type": "base.code"}]},
    )
    for execution_id in execution_ids:
        form_run: dict = {"data": {"main": [[{"json": {"email": f"{execution_id}@x.io"}}]]}}
        form_run["self"] = form_run
        _write_json(
            tmp_path / "executions" / f"{execution_id}.json",
            {
                "id": execution_id,
                "workflowId": "W",
                "annotationTagIds": ["golden"],
                "data": stringify({"resultData": {"runData": {"Form": [form_run]}}}),
            },
        )
    return tmp_path


class ScriptedEngine:
    """Engine whose under-test runs can be absent per pinned email."""

    def __init__(self, *, absent_emails: frozenset[str] = frozenset()) -> None:
        self.requests: list[WorkflowRunRequest] = []
        self._absent_emails = absent_emails
        self._results: dict[str, ExecutionResult | None] = {}

    def dispatch(self, request: WorkflowRunRequest) -> str:
        self.requests.append(request)
        execution_id = f"new-{len(self.requests)}"
        self._results[execution_id] = self._respond(request, execution_id)
        return execution_id

    def await_completion(self, execution_id: str) -> ExecutionResult | None:
        return self._results[execution_id]

    def _respond(self, request: WorkflowRunRequest, execution_id: str) -> ExecutionResult | None:
        if request.execution_mode is ExecutionMode.EVALUATION:
            email = request.pin_data["Form"][0]["json"]["email"]
            if email in self._absent_emails:
                return None
            run_data = {"Form": [{"data": {"main": [list(request.pin_data["Form"])]}}]}
            return ExecutionResult(execution_id, "success", ExecutionTrace(run_data, "Save"))
        run_data = {"Compare": [{"data": {"main": [[{"json": {"success": True}}]]}}]}
        return ExecutionResult(execution_id, "success", ExecutionTrace(run_data, "Compare"))


def _controller(workspace: Path, engine: ScriptedEngine) -> TestRunController:
    catalog = DirectoryCatalog(workspace)
    return TestRunController(
        test_definitions=catalog,
        workflows=catalog,
        execution_records=ExecutionRecordDirectory(workspace),
        test_case_runner=TestCaseRunner(engine, EvaluationRunDataBuilder()),
        test_runs=TestRunDirectory(workspace),
    )


def _persisted_run(workspace: Path, test_run_id: str) -> dict:
    path = workspace / "test-runs" / f"{test_run_id}.json"
    return json.loads(path.read_text(encoding="utf-8"))


def test_given_two_tagged_executions_when_both_evaluate_successfully_then_run_succeeds(
    tmp_path: Path,
) -> None:
    workspace = _workspace(tmp_path, ("e1", "e2"))
    engine = ScriptedEngine()

    result = _controller(workspace, engine).run_test("U", "T", None)

    assert result.status is TestRunStatus.COMPLETED
    assert result.success is True
    assert len(engine.requests) == 4
    assert [request.pin_data for request in engine.requests[::2]] == [
        {"Form": [{"json": {"email": "e1@x.io"}}]},
        {"Form": [{"json": {"email": "e2@x.io"}}]},
    ]
    persisted = _persisted_run(workspace, result.test_run_id)
    assert persisted["status"] == "completed"
    assert persisted["metrics"]["success"] is True
    assert persisted["runAt"] is not None
    assert persisted["completedAt"] is not None


def test_given_run_under_test_is_absent_when_running_then_case_is_skipped_silently(
    tmp_path: Path,
) -> None:
    workspace = _workspace(tmp_path, ("e1", "e2"))
    engine = ScriptedEngine(absent_emails=frozenset({"e1@x.io"}))

    result = _controller(workspace, engine).run_test("U", "T", None)

    modes = [request.execution_mode for request in engine.requests]
    assert modes.count(ExecutionMode.EVALUATION) == 2
    assert modes.count(ExecutionMode.INTEGRATED) == 1
    assert result.status is TestRunStatus.COMPLETED
    assert result.success is True
    assert result.metrics is not None
    assert result.metrics["skipped"] == 1


def test_given_unknown_test_when_running_then_not_found_without_side_effects(
    tmp_path: Path,
) -> None:
    workspace = _workspace(tmp_path, ("e1",))
    engine = ScriptedEngine()

    with pytest.raises(TestDefinitionNotFoundError):
        _controller(workspace, engine).run_test("U", "missing", None)

    assert engine.requests == []
    assert not (workspace / "test-runs").exists()


def test_given_no_tagged_executions_when_running_then_run_is_reported_as_pass(
    tmp_path: Path,
) -> None:
    workspace = _workspace(tmp_path, ())

    result = _controller(workspace, ScriptedEngine()).run_test("U", "T", ["W"])

    assert result.status is TestRunStatus.COMPLETED
    assert result.success is True
    assert _persisted_run(workspace, result.test_run_id)["metrics"]["total"] == 0
