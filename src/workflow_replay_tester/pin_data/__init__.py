"""Pin data domain exports."""

from .pin_data_extractor import (
    PinData,
    PinDataExtractionError,
    PinnedTestCase,
    create_pin_data_from_execution,
)

__all__ = [
    "PinData",
    "PinDataExtractionError",
    "PinnedTestCase",
    "create_pin_data_from_execution",
]
