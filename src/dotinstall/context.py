"""Application context with dependency injection.

The DotInstallContext dataclass holds all dependencies (configuration,
login shell operations, user feedback) and is created once at CLI entry
point, then threaded through the provisioner.
"""

from dataclasses import dataclass
from pathlib import Path

from dotinstall.config import ProvisionConfig, resolve_config
from dotinstall.core.user_feedback import ConsoleFeedback, UserFeedback
from dotinstall.ops.login_shell import LoginShell


@dataclass(frozen=True)
class DotInstallContext:
    """Immutable context holding all dependencies for provisioning.

    Attributes:
        config: Resolved provisioning configuration (all roots explicit)
        login_shell: Login shell operations (chsh)
        feedback: Progress output sink
        debug: Debug flag (debug logging enabled)
    """

    config: ProvisionConfig
    login_shell: LoginShell
    feedback: UserFeedback
    debug: bool

    @staticmethod
    def for_test(
        config: ProvisionConfig | None = None,
        login_shell: LoginShell | None = None,
        feedback: UserFeedback | None = None,
        debug: bool = False,
        home_directory: Path | None = None,
        source_root: Path | None = None,
    ) -> "DotInstallContext":
        """Create test context with optional pre-configured implementations.

        Uses fakes by default so no subprocess is ever started.

        Args:
            config: Full configuration. If None, one is built from the roots.
            login_shell: Optional LoginShell. If None, creates FakeLoginShell.
            feedback: Optional UserFeedback. If None, creates RecordingFeedback.
            debug: Whether to enable debug mode (default False)
            home_directory: Home root when config is None (defaults to Path("/fake/home"))
            source_root: Source root when config is None (defaults to Path("/fake/dotfiles"))

        Example:
            >>> from dotinstall.ops.login_shell_fake import FakeLoginShell
            >>> ctx = DotInstallContext.for_test(
            ...     login_shell=FakeLoginShell(exit_code=1),
            ...     home_directory=tmp_path / "home",
            ...     source_root=tmp_path / "repo",
            ... )
        """
        from dotinstall.core.user_feedback import RecordingFeedback
        from dotinstall.ops.login_shell_fake import FakeLoginShell

        if config is None:
            config = ProvisionConfig.for_roots(
                home_directory=home_directory if home_directory is not None else Path("/fake/home"),
                source_root=source_root if source_root is not None else Path("/fake/dotfiles"),
            )
        resolved_login_shell: LoginShell = (
            login_shell if login_shell is not None else FakeLoginShell()
        )
        resolved_feedback: UserFeedback = feedback if feedback is not None else RecordingFeedback()

        return DotInstallContext(
            config=config,
            login_shell=resolved_login_shell,
            feedback=resolved_feedback,
            debug=debug,
        )


def create_context(
    *,
    source_root: Path | None = None,
    home_directory: Path | None = None,
    claude_target_dir: Path | None = None,
    change_shell: bool | None = None,
    skip_if_marker_present: bool | None = None,
    quiet: bool = False,
    debug: bool = False,
) -> DotInstallContext:
    """Create production context with real implementations.

    This is the only place the working directory and home directory are read
    from the environment. Everything downstream receives them through
    ProvisionConfig.

    Raises:
        ValueError: If dotinstall.toml in the source root is malformed
    """
    from dotinstall.ops.login_shell_real import RealLoginShell

    resolved_source_root = source_root if source_root is not None else Path.cwd()
    resolved_home = home_directory if home_directory is not None else Path.home()

    config = resolve_config(
        home_directory=resolved_home,
        source_root=resolved_source_root,
        claude_target_dir=claude_target_dir,
        change_shell=change_shell,
        skip_if_marker_present=skip_if_marker_present,
    )
    feedback: UserFeedback = ConsoleFeedback(quiet=quiet)

    return DotInstallContext(
        config=config,
        login_shell=RealLoginShell(),
        feedback=feedback,
        debug=debug,
    )
