"""Outcome records for individual provisioning steps."""

from dataclasses import dataclass
from enum import Enum


class StepStatus(Enum):
    """What happened to a single provisioning step."""

    APPLIED = "applied"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class StepResult:
    """Result of one provisioning step.

    Attributes:
        name: Short step label (e.g. ".zshrc", "login shell")
        status: Whether the step applied, skipped or failed
        message: Human-readable line for progress output
        error: Raw diagnostic of the failing primitive, when status is FAILED
    """

    name: str
    status: StepStatus
    message: str
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.status is StepStatus.FAILED

    @staticmethod
    def applied(name: str, message: str) -> "StepResult":
        return StepResult(name=name, status=StepStatus.APPLIED, message=message)

    @staticmethod
    def skipped(name: str, message: str) -> "StepResult":
        return StepResult(name=name, status=StepStatus.SKIPPED, message=message)

    @staticmethod
    def failure(name: str, error: str) -> "StepResult":
        return StepResult(
            name=name,
            status=StepStatus.FAILED,
            message=f"✗ Failed {name}",
            error=error,
        )


def any_failed(results: list[StepResult]) -> bool:
    """Return True if at least one step failed."""
    return any(r.failed for r in results)


def count_by_status(results: list[StepResult]) -> dict[StepStatus, int]:
    """Count results per status, including zero counts."""
    counts = {status: 0 for status in StepStatus}
    for result in results:
        counts[result.status] += 1
    return counts
