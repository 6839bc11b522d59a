"""Command line interface entry point."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from workflow_replay_tester.configuration import (
    DEFAULT_CONFIG_FILENAME,
    write_placeholder_configuration,
)
from workflow_replay_tester.pin_data import PinDataExtractionError, create_pin_data_from_execution
from workflow_replay_tester.run_execution import RunExecutionError, RunRequest, execute_test_run
from workflow_replay_tester.test_run_control import TestRunStatus
from workflow_replay_tester.workspace_storage import (
    WorkspaceStorageError,
    parse_execution_record,
    parse_workflow,
    read_document,
)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="workflow-replay-tester")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity written to stderr",
)
def cli(log_level: str) -> None:
    """Replay tagged workflow executions and evaluate the new runs."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML runner configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML runner configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="extract-pins")
@click.option(
    "--workflow",
    "workflow_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the workflow definition document",
)
@click.option(
    "--execution",
    "execution_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the stored execution record document",
)
def extract_pins(workflow_path: str, execution_path: str) -> None:
    """Print the trigger pin data a past execution would replay with."""
    try:
        workflow = parse_workflow(read_document(Path(workflow_path)), source=workflow_path)
        execution = parse_execution_record(
            read_document(Path(execution_path)), Path(execution_path)
        )
        test_case = create_pin_data_from_execution(workflow, execution)
    except (WorkspaceStorageError, PinDataExtractionError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(json.dumps(test_case.pin_data, indent=2, ensure_ascii=False))


@cli.command(name="run")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML runner configuration file",
)
@click.option("--test-id", "test_id", required=True, help="Test definition to run")
@click.option("--user-id", "user_id", required=True, help="User the executions run as")
@click.option(
    "--workflow-id",
    "workflow_ids",
    multiple=True,
    help="Restrict visible test definitions to these workflows (repeatable)",
)
@click.option(
    "--output-dir",
    "output_dir",
    required=False,
    type=click.Path(path_type=str),
    help="Optional directory for storing report workbooks",
)
def run_test(
    config_path: str,
    test_id: str,
    user_id: str,
    workflow_ids: tuple[str, ...],
    output_dir: str | None,
) -> None:
    """Replay every tagged execution of a test definition and report the verdicts."""
    try:
        outcome = execute_test_run(
            RunRequest(
                config_path=config_path,
                test_id=test_id,
                user_id=user_id,
                output_dir=output_dir,
                accessible_workflow_ids=workflow_ids or None,
            )
        )
    except RunExecutionError as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(outcome.output_path))
    if outcome.status == TestRunStatus.ERROR:
        raise CliError(f"Test run {outcome.test_run_id} failed: {outcome.error_message}")
    click.echo(f"success: {str(outcome.success).lower()}")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
