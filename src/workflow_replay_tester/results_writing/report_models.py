"""Results writing entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class RunMetadata:
    """Metadata rendered into the RunInfo sheet."""

    run_start: datetime
    run_end: datetime
    user_id: str
    request_topic: str
    completion_timeout_seconds: int
