"""Progress reporting for provisioning steps."""

from abc import ABC, abstractmethod

import click

from dotinstall.cli.output import error_output, user_output


class UserFeedback(ABC):
    """Sink for progress output, so provisioning never prints directly."""

    @abstractmethod
    def info(self, message: str) -> None: ...

    @abstractmethod
    def success(self, message: str) -> None: ...

    @abstractmethod
    def error(self, message: str) -> None: ...


class ConsoleFeedback(UserFeedback):
    """Prints progress to stdout and failures to stderr.

    With quiet=True only failures are printed; the final summary panel is
    rendered by the CLI regardless.
    """

    def __init__(self, *, quiet: bool = False) -> None:
        self.quiet = quiet

    def info(self, message: str) -> None:
        if not self.quiet:
            user_output(message)

    def success(self, message: str) -> None:
        if not self.quiet:
            user_output(click.style(message, fg="green"))

    def error(self, message: str) -> None:
        error_output(click.style(message, fg="red"))


class RecordingFeedback(UserFeedback):
    """In-memory feedback that records messages instead of printing them.

    Used by DotInstallContext.for_test() so provisioning can be asserted on
    without capturing output.
    """

    def __init__(self) -> None:
        self._messages: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self._messages.append(("info", message))

    def success(self, message: str) -> None:
        self._messages.append(("success", message))

    def error(self, message: str) -> None:
        self._messages.append(("error", message))

    @property
    def messages(self) -> list[tuple[str, str]]:
        """(level, message) pairs in call order. For test assertions only."""
        return self._messages.copy()
