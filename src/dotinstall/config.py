"""Provisioning configuration data structures and loading.

All filesystem roots are explicit values on ProvisionConfig. Nothing below
the CLI entry point resolves the home directory or the working directory on
its own.

A dotfiles checkout may carry an optional dotinstall.toml at its root to
override the defaults (login shell, marker, the list of appended files).
"""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "dotinstall.toml"
DEFAULT_MARKER = "# Custom dotfiles from repo"
DEFAULT_LOGIN_SHELL = "/bin/zsh"
CLAUDE_DIR_NAME = ".claude"


@dataclass(frozen=True)
class DotfileSpec:
    """One file appended from the source root onto the same name under home."""

    name: str
    include_marker: bool = True


DEFAULT_DOTFILES: tuple[DotfileSpec, ...] = (
    DotfileSpec(".zshrc"),
    DotfileSpec(".bashrc"),
    DotfileSpec(".gitconfig"),
)


@dataclass(frozen=True)
class ProvisionConfig:
    """Immutable provisioning configuration.

    Resolved once at CLI entry point and stored in DotInstallContext.

    Attributes:
        home_directory: Directory whose rc files are appended to
        source_root: Dotfiles checkout the sources are read from
        claude_source_dir: Directory tree copied wholesale
        claude_target_dir: Destination of the directory copy
        dotfiles: Files appended, in order
        login_shell: Interpreter path passed to chsh
        change_shell: Whether the login shell step runs at all
        skip_if_marker_present: Skip appending to targets that already carry the marker
        marker: Provenance comment line written before appended content
    """

    home_directory: Path
    source_root: Path
    claude_source_dir: Path
    claude_target_dir: Path
    dotfiles: tuple[DotfileSpec, ...] = DEFAULT_DOTFILES
    login_shell: str = DEFAULT_LOGIN_SHELL
    change_shell: bool = True
    skip_if_marker_present: bool = False
    marker: str = DEFAULT_MARKER

    @staticmethod
    def for_roots(
        *,
        home_directory: Path,
        source_root: Path,
        claude_target_dir: Path | None = None,
    ) -> "ProvisionConfig":
        """Build a config with default settings from the two roots."""
        return ProvisionConfig(
            home_directory=home_directory,
            source_root=source_root,
            claude_source_dir=source_root / CLAUDE_DIR_NAME,
            claude_target_dir=(
                claude_target_dir
                if claude_target_dir is not None
                else home_directory / CLAUDE_DIR_NAME
            ),
        )


@dataclass(frozen=True)
class RepoSettings:
    """Overrides read from dotinstall.toml. None means "not set in the file"."""

    login_shell: str | None = None
    change_shell: bool | None = None
    skip_if_marker_present: bool | None = None
    marker: str | None = None
    dotfiles: tuple[DotfileSpec, ...] | None = None


def _read_str(data: dict[str, Any], key: str, config_path: Path) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value:
        raise ValueError(f"'{key}' must be a non-empty string in {config_path}")
    return value


def _read_bool(data: dict[str, Any], key: str, config_path: Path) -> bool | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' must be true or false in {config_path}")
    return value


def _read_dotfiles(data: dict[str, Any], config_path: Path) -> tuple[DotfileSpec, ...] | None:
    entries = data.get("dotfiles")
    if entries is None:
        return None
    if not isinstance(entries, list):
        raise ValueError(f"'dotfiles' must be an array of tables in {config_path}")

    specs: list[DotfileSpec] = []
    seen: set[str] = set()
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValueError(f"Each 'dotfiles' entry must be a table in {config_path}")
        name = _read_str(entry, "name", config_path)
        if name is None:
            raise ValueError(f"Missing 'name' in 'dotfiles' entry in {config_path}")
        if Path(name).is_absolute() or ".." in Path(name).parts:
            raise ValueError(f"Dotfile name must be relative to the source root: {name}")
        # Each source is processed at most once per run
        if name in seen:
            raise ValueError(f"Duplicate dotfile '{name}' in {config_path}")
        seen.add(name)
        include_marker = _read_bool(entry, "include_marker", config_path)
        specs.append(
            DotfileSpec(name=name, include_marker=True if include_marker is None else include_marker)
        )
    return tuple(specs)


def load_repo_settings(source_root: Path) -> RepoSettings:
    """Load dotinstall.toml from the source root.

    Returns:
        RepoSettings with every field None when the file does not exist

    Raises:
        ValueError: If the file is not valid TOML or holds values of the wrong type
    """
    config_path = source_root / CONFIG_FILENAME
    if not config_path.is_file():
        return RepoSettings()

    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {config_path}: {e}") from None

    marker = _read_str(data, "marker", config_path)
    if marker is not None and "\n" in marker:
        raise ValueError(f"'marker' must be a single line in {config_path}")

    return RepoSettings(
        login_shell=_read_str(data, "login_shell", config_path),
        change_shell=_read_bool(data, "change_shell", config_path),
        skip_if_marker_present=_read_bool(data, "skip_if_marker_present", config_path),
        marker=marker,
        dotfiles=_read_dotfiles(data, config_path),
    )


def resolve_config(
    *,
    home_directory: Path,
    source_root: Path,
    claude_target_dir: Path | None,
    change_shell: bool | None,
    skip_if_marker_present: bool | None,
) -> ProvisionConfig:
    """Merge defaults, dotinstall.toml and CLI overrides into a ProvisionConfig.

    CLI overrides win over the file; the file wins over the defaults.
    """
    base = ProvisionConfig.for_roots(
        home_directory=home_directory,
        source_root=source_root,
        claude_target_dir=claude_target_dir,
    )
    settings = load_repo_settings(source_root)

    def pick(override: Any, from_file: Any, default: Any) -> Any:
        if override is not None:
            return override
        if from_file is not None:
            return from_file
        return default

    return ProvisionConfig(
        home_directory=base.home_directory,
        source_root=base.source_root,
        claude_source_dir=base.claude_source_dir,
        claude_target_dir=base.claude_target_dir,
        dotfiles=pick(None, settings.dotfiles, base.dotfiles),
        login_shell=pick(None, settings.login_shell, base.login_shell),
        change_shell=pick(change_shell, settings.change_shell, base.change_shell),
        skip_if_marker_present=pick(
            skip_if_marker_present, settings.skip_if_marker_present, base.skip_if_marker_present
        ),
        marker=pick(None, settings.marker, base.marker),
    )
