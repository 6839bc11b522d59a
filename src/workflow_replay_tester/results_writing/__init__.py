"""Results writing domain exports."""

from .report_models import RunMetadata
from .run_report_writer import (
    RUN_INFO_SHEET_NAME,
    TEST_CASE_COLUMNS,
    TEST_CASES_SHEET_NAME,
    write_run_report,
)

__all__ = [
    "RunMetadata",
    "RUN_INFO_SHEET_NAME",
    "TEST_CASE_COLUMNS",
    "TEST_CASES_SHEET_NAME",
    "write_run_report",
]
