"""Tests for the CLI error boundary decorator."""

import click
import pytest
from click.testing import CliRunner

from dotinstall.error_boundary import cli_error_boundary


def _command_raising(exc: BaseException) -> click.Command:
    @click.command()
    @cli_error_boundary
    def cmd() -> None:
        raise exc

    return cmd


@pytest.mark.parametrize(
    "exc",
    [
        FileNotFoundError("Source root directory not found: /nope"),
        ValueError("Invalid TOML in dotinstall.toml"),
        PermissionError("Permission denied: /home/alice"),
    ],
)
def test_well_known_errors_become_clean_messages(exc: Exception) -> None:
    result = CliRunner().invoke(_command_raising(exc))

    assert result.exit_code == 1
    assert f"Error: {exc}" in result.output
    assert "Traceback" not in result.output


def test_unexpected_errors_propagate() -> None:
    result = CliRunner().invoke(_command_raising(RuntimeError("boom")))

    assert result.exit_code == 1
    assert isinstance(result.exception, RuntimeError)


def test_return_value_passes_through() -> None:
    @cli_error_boundary
    def fn() -> int:
        return 42

    assert fn() == 42
