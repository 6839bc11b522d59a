"""Pin data extraction tests."""

from __future__ import annotations

import pytest
from workflow_replay_tester.execution_records.flatted_codec import stringify
from workflow_replay_tester.execution_records.record_models import ExecutionRecord
from workflow_replay_tester.pin_data.pin_data_extractor import (
    PinDataExtractionError,
    create_pin_data_from_execution,
)
from workflow_replay_tester.workflow_catalog.catalog_models import (
    WorkflowDefinition,
    WorkflowNode,
)


def _workflow(*nodes: tuple[str, str]) -> WorkflowDefinition:
    return WorkflowDefinition(
        workflow_id="wf-1",
        name="Orders",
        nodes=tuple(WorkflowNode(name=name, node_type=node_type) for name, node_type in nodes),
    )


def _node_run(items: list) -> list:
    return [{"data": {"main": [items]}}]


def _execution(run_data: dict, *, execution_id: str = "exec-1") -> ExecutionRecord:
    payload = {"resultData": {"runData": run_data, "lastNodeExecuted": "Set"}}
    return ExecutionRecord(
        execution_id=execution_id,
        workflow_id="wf-1",
        status="success",
        payload=stringify(payload),
    )


def test_given_trigger_and_regular_node_when_extracting_then_only_trigger_is_pinned() -> None:
    workflow = _workflow(("Webhook", "base.webhookTrigger"), ("Set", "base.set"))
    execution = _execution(
        {
            "Webhook": _node_run([{"json": {"order": 7}}]),
            "Set": _node_run([{"json": {"order": 7, "total": 10}}]),
        }
    )

    test_case = create_pin_data_from_execution(workflow, execution)

    assert test_case.pin_data == {"Webhook": [{"json": {"order": 7}}]}
    assert test_case.source_execution_id == "exec-1"
    assert test_case.execution_data.last_node_executed == "Set"
    assert "Set" in test_case.execution_data.run_data


def test_trigger_suffix_is_matched_case_insensitively() -> None:
    workflow = _workflow(("Cron", "base.SCHEDULETRIGGER"), ("Poll", "base.Pollingtrigger"))
    execution = _execution(
        {"Cron": _node_run([{"json": {"tick": 1}}]), "Poll": _node_run([{"json": {}}])}
    )

    test_case = create_pin_data_from_execution(workflow, execution)

    assert set(test_case.pin_data) == {"Cron", "Poll"}


def test_given_trigger_without_recorded_output_then_pin_set_is_partial() -> None:
    workflow = _workflow(("Webhook", "base.webhookTrigger"), ("Manual", "base.manualTrigger"))
    execution = _execution({"Webhook": _node_run([{"json": {"a": 1}}])})

    test_case = create_pin_data_from_execution(workflow, execution)

    assert list(test_case.pin_data) == ["Webhook"]


def test_given_trigger_with_empty_item_list_then_empty_list_is_pinned() -> None:
    workflow = _workflow(("Webhook", "base.webhookTrigger"))
    execution = _execution({"Webhook": _node_run([])})

    assert create_pin_data_from_execution(workflow, execution).pin_data == {"Webhook": []}


def test_given_node_type_containing_trigger_mid_name_then_it_is_not_pinned() -> None:
    workflow = _workflow(("Router", "base.triggerRouter"))
    execution = _execution({"Router": _node_run([{"json": {}}])})

    assert create_pin_data_from_execution(workflow, execution).pin_data == {}


def test_given_cyclic_payload_when_extracting_then_pin_data_is_produced() -> None:
    workflow = _workflow(("Webhook", "base.webhookTrigger"))
    item: dict = {"json": {"id": 1}}
    run = {"data": {"main": [[item]]}}
    run["source"] = run
    execution = ExecutionRecord(
        execution_id="exec-cyclic",
        workflow_id="wf-1",
        status="success",
        payload=stringify({"resultData": {"runData": {"Webhook": [run]}}}),
    )

    test_case = create_pin_data_from_execution(workflow, execution)

    assert test_case.pin_data["Webhook"][0]["json"] == {"id": 1}


def test_extraction_is_idempotent_for_the_same_execution() -> None:
    workflow = _workflow(("Webhook", "base.webhookTrigger"))
    execution = _execution({"Webhook": _node_run([{"json": {"a": 1}}])})

    first = create_pin_data_from_execution(workflow, execution)
    second = create_pin_data_from_execution(workflow, execution)

    assert first.pin_data == second.pin_data


def test_given_unreadable_payload_then_extraction_error_names_the_execution() -> None:
    workflow = _workflow(("Webhook", "base.webhookTrigger"))
    execution = ExecutionRecord(
        execution_id="exec-broken",
        workflow_id="wf-1",
        status="success",
        payload="{not flatted",
    )

    with pytest.raises(PinDataExtractionError, match="exec-broken"):
        create_pin_data_from_execution(workflow, execution)
