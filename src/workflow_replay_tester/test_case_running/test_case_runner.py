"""Two-stage test case execution: replay the workflow under test, then evaluate it."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from workflow_replay_tester.execution_dispatch.dispatch_contracts import (
    ExecutionDispatcher,
    ExecutionMode,
    ExecutionResult,
    RunDataBuilder,
    WorkflowRunRequest,
)
from workflow_replay_tester.execution_records.execution_trace import RunData, first_output_items
from workflow_replay_tester.pin_data.pin_data_extractor import PinnedTestCase
from workflow_replay_tester.workflow_catalog.catalog_models import WorkflowDefinition

from .case_outcomes import TestCaseOutcome

logger = logging.getLogger(__name__)


class InvariantViolationError(Exception):
    """Raised when data the runner relies on is inconsistent."""


class EvaluationMissingError(Exception):
    """Raised when the evaluation workflow run has no retrievable execution."""


class TestCaseRunner:
    """Drives one pinned test case through the workflow under test and the evaluation."""

    def __init__(self, dispatcher: ExecutionDispatcher, run_data_builder: RunDataBuilder) -> None:
        self._dispatcher = dispatcher
        self._run_data_builder = run_data_builder

    def run_test_case(
        self,
        workflow: WorkflowDefinition,
        pin_data: Mapping[str, Sequence[Any]],
        user_id: str,
    ) -> ExecutionResult | None:
        """Run the workflow under test with pinned triggers and wait for it to finish.

        Returns None when the engine reports no retrievable execution.
        """
        _, execution = self._run_under_test(workflow, pin_data, user_id)
        return execution

    def run_evaluation(
        self,
        evaluation_workflow: WorkflowDefinition,
        expected_run_data: RunData,
        actual_run_data: RunData,
    ) -> ExecutionResult:
        """Run the evaluation workflow on the original and the new run data."""
        evaluation_input = {
            "json": {
                "originalExecution": expected_run_data,
                "newExecution": actual_run_data,
            }
        }
        request = self._run_data_builder.build(evaluation_workflow, [evaluation_input])
        execution_id, execution = self._dispatch_and_wait(request)
        if execution is None:
            raise EvaluationMissingError(
                f"Evaluation workflow {evaluation_workflow.workflow_id} execution "
                f"{execution_id} produced no retrievable result."
            )
        return execution

    def run_pinned_case(
        self,
        test_case: PinnedTestCase,
        workflow: WorkflowDefinition,
        evaluation_workflow: WorkflowDefinition,
        user_id: str,
    ) -> TestCaseOutcome:
        """Replay one test case end to end and return its outcome."""
        under_test_id, execution = self._run_under_test(workflow, test_case.pin_data, user_id)
        if execution is None:
            logger.warning(
                "Execution %s replaying %s produced no retrievable result; skipping test case",
                under_test_id,
                test_case.source_execution_id,
            )
            return TestCaseOutcome.skipped(
                test_case.source_execution_id,
                under_test_execution_id=under_test_id,
                reason="workflow under test produced no retrievable execution",
            )

        evaluation = self.run_evaluation(
            evaluation_workflow,
            test_case.execution_data.run_data,
            execution.trace.run_data,
        )
        verdict = extract_evaluation_result(evaluation)
        return TestCaseOutcome.from_verdict(
            test_case.source_execution_id,
            verdict,
            under_test_execution_id=execution.execution_id,
            evaluation_execution_id=evaluation.execution_id,
        )

    def _run_under_test(
        self,
        workflow: WorkflowDefinition,
        pin_data: Mapping[str, Sequence[Any]],
        user_id: str,
    ) -> tuple[str, ExecutionResult | None]:
        request = WorkflowRunRequest(
            workflow=workflow,
            execution_mode=ExecutionMode.EVALUATION,
            run_data={},
            pin_data=pin_data,
            user_id=user_id,
        )
        return self._dispatch_and_wait(request)

    def _dispatch_and_wait(self, request: WorkflowRunRequest) -> tuple[str, ExecutionResult | None]:
        execution_id = self._dispatcher.dispatch(request)
        if not execution_id:
            raise InvariantViolationError(
                f"Dispatching workflow {request.workflow.workflow_id} returned no execution id."
            )
        return execution_id, self._dispatcher.await_completion(execution_id)


def extract_evaluation_result(execution: ExecutionResult) -> dict[str, Any]:
    """Return the JSON of the first item the evaluation's last executed node emitted.

    An evaluation without a last executed node is an invariant violation; a
    missing output slot yields an empty verdict.
    """
    last_node_executed = execution.trace.last_node_executed
    if not last_node_executed:
        raise InvariantViolationError(
            f"Evaluation execution {execution.execution_id} produced no terminal node."
        )
    items = first_output_items(execution.trace.run_data, last_node_executed)
    if not items or not isinstance(items[0], Mapping):
        return {}
    verdict = items[0].get("json")
    return dict(verdict) if isinstance(verdict, Mapping) else {}
