"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import Configuration, KafkaSettings, RunnerSettings, WorkspaceSettings


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    workspace = _parse_workspace_section(parsed.get("workspace"), path.parent)
    runner = _parse_runner_section(parsed.get("runner"))
    kafka = _parse_kafka_section(parsed.get("kafka"))

    return Configuration(path=path, workspace=workspace, runner=runner, kafka=kafka)


def _parse_workspace_section(value: Any, base_path: Path) -> WorkspaceSettings:
    section = _require_mapping(value, "workspace")
    root_value = _require_non_empty_string(section.get("root"), "workspace.root")
    root = _resolve_path(base_path, root_value)
    if not root.is_dir():
        raise ConfigurationError(f"Workspace directory not found: {root}")
    return WorkspaceSettings(root=root)


def _parse_runner_section(value: Any) -> RunnerSettings:
    section = value if value is not None else {}
    if not isinstance(section, Mapping):
        raise ConfigurationError("runner must be a mapping.")
    completion_timeout_seconds = _require_positive_int(
        section.get("completion_timeout_seconds", 300), "runner.completion_timeout_seconds"
    )
    parallelism = _require_positive_int(section.get("parallelism", 1), "runner.parallelism")
    return RunnerSettings(
        completion_timeout_seconds=completion_timeout_seconds,
        parallelism=parallelism,
    )


def _parse_kafka_section(value: Any) -> KafkaSettings:
    section = _require_mapping(value, "kafka")
    bootstrap_servers = _normalize_bootstrap_servers(section.get("bootstrap_servers"))
    request_topic = _require_non_empty_string(section.get("request_topic"), "kafka.request_topic")
    completion_topic = _require_non_empty_string(
        section.get("completion_topic"), "kafka.completion_topic"
    )
    if request_topic == completion_topic:
        raise ConfigurationError("kafka.request_topic and kafka.completion_topic must differ.")
    group_id = _optional_string(section.get("group_id"), "kafka.group_id")
    security = section.get("security") or {}
    if not isinstance(security, Mapping):
        raise ConfigurationError("kafka.security must be a mapping.")
    poll_interval_ms = _require_positive_int(
        section.get("poll_interval_ms", 500), "kafka.poll_interval_ms"
    )
    auto_offset_reset_raw = section.get("auto_offset_reset", "latest")
    auto_offset_reset = _require_non_empty_string(
        auto_offset_reset_raw, "kafka.auto_offset_reset"
    ).lower()
    flush_timeout_seconds = _require_positive_int(
        section.get("flush_timeout_seconds", 10), "kafka.flush_timeout_seconds"
    )
    return KafkaSettings(
        bootstrap_servers=bootstrap_servers,
        request_topic=request_topic,
        completion_topic=completion_topic,
        group_id=group_id,
        security=dict(security),
        poll_interval_ms=poll_interval_ms,
        auto_offset_reset=auto_offset_reset,
        flush_timeout_seconds=flush_timeout_seconds,
    )


def _normalize_bootstrap_servers(value: Any) -> tuple[str, ...]:
    if value is None:
        raise ConfigurationError("kafka.bootstrap_servers is required.")
    servers: list[str] = []
    if isinstance(value, str):
        servers = [item.strip() for item in value.split(",") if item.strip()]
    elif isinstance(value, Sequence):
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError("kafka.bootstrap_servers entries must be strings.")
            stripped = item.strip()
            if stripped:
                servers.append(stripped)
    else:
        raise ConfigurationError("kafka.bootstrap_servers must be a string or list of strings.")
    if not servers:
        raise ConfigurationError("kafka.bootstrap_servers must contain at least one server.")
    return tuple(servers)


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
