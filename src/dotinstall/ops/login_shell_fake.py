"""Fake login shell operations for testing without sudo.

In-memory implementation: no subprocess is started, all calls are recorded
for verification in tests.
"""

from dotinstall.ops.login_shell import LoginShell


class FakeLoginShell(LoginShell):
    """In-memory fake implementation of login shell operations.

    Constructor Injection:
    - All state is provided via constructor parameters
    - Only the call log changes after construction

    Examples:
        # Privilege elevation denied
        >>> shell = FakeLoginShell(exit_code=1)
        >>> shell.set_default_shell("alice", "/bin/zsh")
        1
        >>> shell.shell_changes
        [('alice', '/bin/zsh')]
    """

    def __init__(self, *, user: str = "tester", exit_code: int = 0) -> None:
        """Initialize fake with a fixed account name and chsh exit code.

        Args:
            user: Name returned from current_user()
            exit_code: Exit code returned from set_default_shell()
        """
        self._user = user
        self._exit_code = exit_code
        self._shell_changes: list[tuple[str, str]] = []

    def current_user(self) -> str:
        return self._user

    def set_default_shell(self, user: str, shell_path: str) -> int:
        self._shell_changes.append((user, shell_path))
        return self._exit_code

    @property
    def shell_changes(self) -> list[tuple[str, str]]:
        """Get the (user, shell_path) pairs passed to set_default_shell().

        This property is for test assertions only.
        """
        return self._shell_changes.copy()
