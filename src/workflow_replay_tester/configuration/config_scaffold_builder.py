"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "config.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Runner configuration template for workflow-replay-tester.
# Replace every <REQUIRED> placeholder before running run.
# Replace <OPTIONAL> placeholders only when your setup needs them.

workspace:
  # Directory with test-definitions/, workflows/, executions/ and test-runs/.
  # Relative paths are resolved against this file's directory.
  root: "<REQUIRED>"

runner:
  # Seconds to wait for the engine to report a finished execution.
  completion_timeout_seconds: "<OPTIONAL>"
  # Number of test cases replayed at the same time (1 = one after another).
  parallelism: "<OPTIONAL>"

kafka:
  bootstrap_servers:
    - "<REQUIRED>"
  # Topic the engine consumes run requests from.
  request_topic: "<REQUIRED>"
  # Topic the engine publishes finished executions to.
  completion_topic: "<REQUIRED>"
  group_id: "<OPTIONAL>"
  security:
    sasl.username: "<OPTIONAL>"
    sasl.password: "<OPTIONAL>"
    security.protocol: "<OPTIONAL>"
    sasl.mechanisms: "<OPTIONAL>"
  poll_interval_ms: "<OPTIONAL>"
  auto_offset_reset: "<OPTIONAL>"
  flush_timeout_seconds: "<OPTIONAL>"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML runner configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder runner configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Runner configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
