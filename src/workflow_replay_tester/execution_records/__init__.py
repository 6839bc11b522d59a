"""Execution record domain exports."""

from .execution_trace import ExecutionTrace, RunData, first_output_items
from .flatted_codec import FlattedDecodeError, parse, stringify
from .record_models import ExecutionRecord, ExecutionRecordQuery

__all__ = [
    "ExecutionRecord",
    "ExecutionRecordQuery",
    "ExecutionTrace",
    "RunData",
    "first_output_items",
    "FlattedDecodeError",
    "parse",
    "stringify",
]
