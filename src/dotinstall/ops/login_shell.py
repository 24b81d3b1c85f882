"""Login shell operations interface.

This module defines the abstract interface for changing the invoking
account's login shell, following the ops pattern with ABC-based dependency
injection for testability.
"""

from abc import ABC, abstractmethod


class LoginShell(ABC):
    """Abstract interface for login shell operations.

    Real implementations call chsh through sudo. Fake implementations are
    pure in-memory for unit tests that must never prompt for a password.
    """

    @abstractmethod
    def current_user(self) -> str:
        """Return the name of the invoking account."""
        ...

    @abstractmethod
    def set_default_shell(self, user: str, shell_path: str) -> int:
        """Change the login shell of an account.

        Args:
            user: Account whose login shell changes
            shell_path: Absolute interpreter path (e.g. "/bin/zsh")

        Returns:
            Exit code of the underlying command. Nonzero means the change did
            not happen (e.g. privilege denied). No retry is attempted.
        """
        ...
