"""Test run report workbook writer service."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from workflow_replay_tester.test_case_running.case_outcomes import TestCaseOutcome
from workflow_replay_tester.test_run_control.run_contracts import TestRunResult

from .report_models import RunMetadata

TEST_CASES_SHEET_NAME = "TestCases"
RUN_INFO_SHEET_NAME = "RunInfo"

TEST_CASE_COLUMNS = (
    "Source execution",
    "Status",
    "Execution under test",
    "Evaluation execution",
    "Verdict",
    "Reason",
)

_COLUMN_WIDTHS = (24, 12, 34, 34, 60, 50)


def write_run_report(
    result: TestRunResult,
    run_metadata: RunMetadata,
    output_path: Path | str,
) -> Path:
    """Write the test run report workbook and return its resolved path."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = TEST_CASES_SHEET_NAME
    _write_header(sheet)
    for row, outcome in enumerate(result.outcomes, start=2):
        _write_outcome_row(sheet, row, outcome)

    _write_run_info_sheet(workbook, result, run_metadata)

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output)
    return output.resolve()


def _write_header(sheet) -> None:
    columns = zip(TEST_CASE_COLUMNS, _COLUMN_WIDTHS, strict=True)
    for column, (label, width) in enumerate(columns, start=1):
        sheet.cell(row=1, column=column, value=label)
        sheet.cell(row=1, column=column).style = "Headline 1"
        sheet.column_dimensions[get_column_letter(column)].width = width
    sheet.freeze_panes = "A2"


def _write_outcome_row(sheet, row: int, outcome: TestCaseOutcome) -> None:
    values = (
        outcome.source_execution_id,
        outcome.status.value,
        outcome.under_test_execution_id,
        outcome.evaluation_execution_id,
        _format_verdict(outcome.verdict),
        outcome.reason,
    )
    for column, value in enumerate(values, start=1):
        sheet.cell(row=row, column=column, value=value)


def _format_verdict(verdict: Mapping[str, Any] | None) -> str | None:
    if verdict is None:
        return None
    return json.dumps(verdict, ensure_ascii=False, sort_keys=True, default=str)


def _write_run_info_sheet(workbook, result: TestRunResult, run_metadata: RunMetadata) -> None:
    sheet = workbook.create_sheet(RUN_INFO_SHEET_NAME)
    metrics = result.metrics or {}
    entries = (
        ("test_run_id", result.test_run_id),
        ("test_definition_id", result.test_definition_id),
        ("status", result.status.value),
        ("success", result.success),
        ("run_start", run_metadata.run_start.isoformat()),
        ("run_end", run_metadata.run_end.isoformat()),
        ("user_id", run_metadata.user_id),
        ("request_topic", run_metadata.request_topic),
        ("completion_timeout_seconds", run_metadata.completion_timeout_seconds),
        ("total", metrics.get("total", len(result.outcomes))),
        ("passed", metrics.get("passed")),
        ("failed", metrics.get("failed")),
        ("skipped", metrics.get("skipped")),
        ("error", result.error_message),
    )
    for row, (key, value) in enumerate(entries, start=1):
        sheet.cell(row=row, column=1, value=key)
        sheet.cell(row=row, column=2, value=value)
