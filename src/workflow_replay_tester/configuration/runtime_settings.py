"""Configuration domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class WorkspaceSettings:
    """Location of the directory holding test definitions, workflows and executions."""

    root: Path


@dataclass(frozen=True)
class RunnerSettings:
    """Limits applied while driving test cases."""

    completion_timeout_seconds: int
    parallelism: int


@dataclass(frozen=True)
class KafkaSettings:  # pylint: disable=too-many-instance-attributes
    """Kafka producer/consumer configuration for the execution engine bridge."""

    bootstrap_servers: tuple[str, ...]
    request_topic: str
    completion_topic: str
    group_id: str | None
    security: Mapping[str, object]
    poll_interval_ms: int
    auto_offset_reset: str
    flush_timeout_seconds: int


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    workspace: WorkspaceSettings
    runner: RunnerSettings
    kafka: KafkaSettings
