"""Append-only provisioning of dotfiles into a home directory.

Every step is an independent fallible operation. A step whose source is
absent is skipped; a step whose filesystem or subprocess call fails is
recorded as failed and the next step still runs. Nothing is rolled back.
"""

import logging
import os
import shutil
from collections.abc import Callable
from pathlib import Path

from dotinstall.config import DEFAULT_MARKER
from dotinstall.context import DotInstallContext
from dotinstall.core.results import StepResult, StepStatus

logger = logging.getLogger(__name__)

LOGIN_SHELL_STEP = "login shell"


def _has_marker_line(target_path: Path, marker: str) -> bool:
    if not target_path.is_file():
        return False
    marker_bytes = marker.encode("utf-8")
    return any(line.rstrip(b"\r") == marker_bytes for line in target_path.read_bytes().split(b"\n"))


def append_config(
    source_path: Path,
    target_path: Path,
    label: str,
    *,
    include_marker: bool = True,
    marker: str = DEFAULT_MARKER,
    skip_if_marker_present: bool = False,
) -> StepResult:
    """Append a blank line, the provenance marker and the source bytes to target.

    The target is created if absent and is otherwise only ever appended to.
    Its parent directory is not created.

    Args:
        source_path: File to copy from; absence is the normal "nothing to do" case
        target_path: File appended to
        label: Name used in progress output
        include_marker: Whether the marker line precedes the content
        marker: Provenance comment line
        skip_if_marker_present: Leave targets that already contain the marker untouched

    Returns:
        APPLIED, SKIPPED when the source is absent or the marker guard hits,
        FAILED when source and target are the same file

    Raises:
        OSError: Whatever the underlying read or write reports
    """
    if not source_path.is_file():
        logger.debug("Source %s not found, skipping", source_path)
        return StepResult.skipped(label, f"Skipped {label} (not found at {source_path})")

    # Source and target must be distinct files
    if target_path.exists() and source_path.samefile(target_path):
        return StepResult.failure(label, f"{source_path}: input file is output file")

    if skip_if_marker_present and _has_marker_line(target_path, marker):
        logger.debug("Marker already present in %s, skipping", target_path)
        return StepResult.skipped(label, f"Skipped {label} (already provisioned in {target_path})")

    logger.debug("Appending %s to %s", source_path, target_path)
    with source_path.open("rb") as src, target_path.open("ab") as dst:
        dst.write(b"\n")
        if include_marker:
            dst.write(marker.encode("utf-8") + b"\n")
        shutil.copyfileobj(src, dst)

    return StepResult.applied(label, f"✓ Appended {label}")


def _unlink_conflicting_links(source_dir: Path, target_dir: Path) -> None:
    """Remove target entries that copytree cannot replace in place.

    A source symlink cannot be created over an existing file or link, and a
    regular source file must replace a target symlink rather than write
    through it.
    """
    for root, dirnames, filenames in os.walk(source_dir):
        for name in [*dirnames, *filenames]:
            src = Path(root) / name
            dst = target_dir / src.relative_to(source_dir)
            if src.is_symlink():
                if dst.is_symlink() or dst.is_file():
                    dst.unlink()
            elif dst.is_symlink():
                dst.unlink()


def copy_directory_tree(source_dir: Path, target_dir: Path, label: str) -> StepResult:
    """Recursively copy every entry of source_dir into target_dir.

    Same-named files in target_dir are overwritten; unrelated entries are left
    untouched. Hidden entries are copied and symlinks are copied as symlinks,
    replacing whatever file or link had the same name.

    Returns:
        APPLIED, or SKIPPED when source_dir does not exist

    Raises:
        OSError: Whatever the underlying copy reports (shutil.Error included)
    """
    if not source_dir.is_dir():
        logger.debug("Source directory %s not found, skipping", source_dir)
        return StepResult.skipped(label, f"Skipped {label} folder (not found at {source_dir})")

    logger.debug("Copying %s into %s", source_dir, target_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    _unlink_conflicting_links(source_dir, target_dir)
    shutil.copytree(source_dir, target_dir, symlinks=True, dirs_exist_ok=True)

    return StepResult.applied(label, f"✓ Installed {label} folder")


def change_login_shell(ctx: DotInstallContext) -> StepResult:
    """Set the invoking account's login shell to the configured interpreter.

    Raises:
        OSError: If the chsh command cannot be started
    """
    config = ctx.config
    if not config.change_shell:
        return StepResult.skipped(LOGIN_SHELL_STEP, "Skipped login shell change")

    user = ctx.login_shell.current_user()
    exit_code = ctx.login_shell.set_default_shell(user, config.login_shell)
    if exit_code != 0:
        return StepResult.failure(
            LOGIN_SHELL_STEP,
            f"chsh -s {config.login_shell} {user} exited with status {exit_code}",
        )
    return StepResult.applied(LOGIN_SHELL_STEP, f"✓ Changed login shell to {config.login_shell}")


def _run_step(name: str, step: Callable[[], StepResult]) -> StepResult:
    try:
        return step()
    except (OSError, RuntimeError) as e:
        logger.debug("Step %s failed: %r", name, e)
        return StepResult.failure(name, str(e))


def _report(ctx: DotInstallContext, result: StepResult) -> None:
    if result.status is StepStatus.APPLIED:
        ctx.feedback.success(result.message)
    elif result.status is StepStatus.FAILED:
        ctx.feedback.error(f"{result.message}: {result.error}")


def provision(ctx: DotInstallContext) -> list[StepResult]:
    """Run every provisioning step in order and collect the results.

    Order: login shell, each configured dotfile, then the .claude copy.
    A failed step never prevents the following ones from running.

    Returns:
        One StepResult per step, in execution order
    """
    config = ctx.config
    ctx.feedback.info("Installing dotfiles...")
    logger.debug(
        "Provisioning: source_root=%s, home=%s, claude_target=%s",
        config.source_root,
        config.home_directory,
        config.claude_target_dir,
    )

    steps: list[tuple[str, Callable[[], StepResult]]] = [
        (LOGIN_SHELL_STEP, lambda: change_login_shell(ctx)),
    ]
    for spec in config.dotfiles:
        steps.append(
            (
                spec.name,
                lambda spec=spec: append_config(
                    config.source_root / spec.name,
                    config.home_directory / spec.name,
                    spec.name,
                    include_marker=spec.include_marker,
                    marker=config.marker,
                    skip_if_marker_present=config.skip_if_marker_present,
                ),
            )
        )
    claude_label = config.claude_source_dir.name
    steps.append(
        (
            claude_label,
            lambda: copy_directory_tree(
                config.claude_source_dir, config.claude_target_dir, claude_label
            ),
        )
    )

    results: list[StepResult] = []
    for name, step in steps:
        result = _run_step(name, step)
        _report(ctx, result)
        results.append(result)

    ctx.feedback.info("Dotfiles installation complete!")
    return results
