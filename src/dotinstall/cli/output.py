"""Output utilities for the dotinstall CLI.

Progress lines and the summary panel go to stdout; failures go to stderr.
The summary panel is built here so it can be asserted on in tests.
"""

import click
from rich.panel import Panel
from rich.text import Text

from dotinstall.core.results import StepResult, StepStatus, count_by_status


def user_output(message: str) -> None:
    """Write a progress line to stdout."""
    click.echo(message)


def error_output(message: str) -> None:
    """Write a failure line to stderr."""
    click.echo(message, err=True)


def format_provision_summary(results: list[StepResult]) -> Panel:
    """Format the final summary box with per-step status and failure details.

    Args:
        results: Results of every step, in execution order

    Returns:
        Rich Panel with formatted summary
    """
    counts = count_by_status(results)
    overall_success = counts[StepStatus.FAILED] == 0

    lines: list[Text] = []
    if overall_success:
        lines.append(Text("✅ Status: Success", style="green"))
    else:
        lines.append(Text("❌ Status: Failed", style="red"))

    lines.append(
        Text(
            f"Applied: {counts[StepStatus.APPLIED]}  "
            f"Skipped: {counts[StepStatus.SKIPPED]}  "
            f"Failed: {counts[StepStatus.FAILED]}"
        )
    )

    for result in results:
        if result.failed:
            lines.append(Text(""))
            lines.append(Text(f"Error in {result.name}:", style="red bold"))
            if result.error:
                lines.append(Text(result.error, style="red"))

    content = Text("\n").join(lines)
    title = "Provisioning Complete" if overall_success else "Provisioning Incomplete"
    return Panel(
        content, title=title, border_style="green" if overall_success else "red", padding=(1, 2)
    )
