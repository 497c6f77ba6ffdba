"""Root directory resolution, module discovery and git config lookup.

The tool expects to live two directory levels below the root of the
source tree (``<root>/qtrepotools/qt5_tool.py``). Every immediate
subdirectory of the root that is a git checkout is a module.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Mapping

from .errors import WorkspaceError
from .platform_info import OsKind, is_absolute

ROOT_ENV_VAR = "QT5_TOOL_ROOT"


def resolve_script_path(script: str | os.PathLike[str], os_kind: OsKind) -> Path:
    """Resolve the invoking script to an absolute path.

    An already absolute invocation path is taken as is, so symlinked
    installations keep pointing at the tree they were invoked from.
    """
    raw = os.fspath(script)
    if is_absolute(raw, os_kind):
        return Path(raw)
    return Path(os.path.realpath(raw))


def root_from_script(script: str | os.PathLike[str], os_kind: OsKind) -> Path:
    """Get the root directory: the parent of the script's directory."""
    return resolve_script_path(script, os_kind).parent.parent


def select_root(
    script: str | os.PathLike[str],
    os_kind: OsKind,
    *,
    override: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Pick the root from ``--root``, then ``QT5_TOOL_ROOT``, then the script location."""
    if override:
        return Path(override).resolve()
    env_root = (environ if environ is not None else os.environ).get(ROOT_ENV_VAR)
    if env_root:
        return Path(env_root).resolve()
    return root_from_script(script, os_kind)


def enter_root(root: Path) -> None:
    try:
        os.chdir(root)
    except OSError as e:
        raise WorkspaceError(f'Failed to chdir to "{root}": {e}') from e


def git_config_path(directory: Path) -> Path | None:
    """Locate the git config file of a checkout.

    Handles both a ``.git`` directory and the ``gitdir:`` file that
    ``git submodule`` writes for absorbed submodules.
    """
    dot_git = directory / ".git"
    if dot_git.is_dir():
        return dot_git / "config"
    if dot_git.is_file():
        try:
            content = dot_git.read_text(encoding="utf-8")
        except OSError:
            return None
        match = re.match(r"gitdir:\s*(.+)", content.strip())
        if match:
            return (directory / match.group(1).strip()) / "config"
    return None


def is_module(directory: Path) -> bool:
    if not directory.is_dir():
        return False
    config = git_config_path(directory)
    return config is not None and config.is_file()


def discover_modules(root: Path) -> list[str]:
    """List module names in directory enumeration order (not sorted).

    Raises:
        WorkspaceError: If the root cannot be read or holds no modules.
    """
    modules: list[str] = []
    try:
        with os.scandir(root) as entries:
            for entry in entries:
                if is_module(Path(entry.path)):
                    modules.append(entry.name)
    except OSError as e:
        raise WorkspaceError(f"Cannot read {root}: {e}") from e

    if not modules:
        raise WorkspaceError(
            f"Failed to detect modules in {root}.\n"
            "Needs to be called from the root directory."
        )
    return modules


def module_dir(root: Path, module: str) -> Path:
    path = root / module
    if not path.is_dir():
        raise WorkspaceError(f'Failed to chdir from {root} to "{module}": not a directory')
    return path


def read_git_config(root: Path, module: str, key: str) -> str:
    """Read the first ``key = value`` entry from a module's git config.

    The key is used as a regular expression term. Returns an empty string
    if the config cannot be read or has no such entry.
    """
    config = git_config_path(root / module)
    if config is None:
        return ""
    pattern = re.compile(rf"^\s*{key}\s*=\s*(.*)$")
    try:
        with open(config, encoding="utf-8", errors="replace") as f:
            for line in f:
                match = pattern.match(line.rstrip("\n"))
                if match:
                    return match.group(1)
    except OSError:
        return ""
    return ""
