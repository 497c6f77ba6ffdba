"""Host platform detection and build driver selection."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping

from .errors import WorkspaceError


class OsKind(Enum):
    LINUX = "linux"
    WINDOWS = "windows"
    MACOS = "macos"


@dataclass(frozen=True)
class BuildDriver:
    """Build driver executable and the arguments passed on every call."""

    name: str
    args: list[str] = field(default_factory=list)

    def command(self, *targets: str) -> list[str]:
        return [self.name, *self.args, *targets]


def classify_os(identifier: str) -> OsKind:
    """Classify an operating system identifier.

    Accepts Perl style names (``MSWin32``) as well as Python's
    ``sys.platform`` values. Unknown identifiers fall back to Linux.

    Examples:
        >>> classify_os("MSWin32")
        <OsKind.WINDOWS: 'windows'>
        >>> classify_os("darwin")
        <OsKind.MACOS: 'macos'>
        >>> classify_os("freebsd13")
        <OsKind.LINUX: 'linux'>
    """
    if "MSWin" in identifier or identifier == "win32":
        return OsKind.WINDOWS
    if "darwin" in identifier:
        return OsKind.MACOS
    return OsKind.LINUX


def current_os() -> OsKind:
    return classify_os(sys.platform)


def build_driver_for(os_kind: OsKind) -> BuildDriver:
    """Get the build driver for a platform: jom on Windows, silent make elsewhere."""
    if os_kind is OsKind.WINDOWS:
        return BuildDriver("jom")
    return BuildDriver("make", ["-s"])


def is_absolute(path: str, os_kind: OsKind) -> bool:
    """Check for an absolute path the way the invoking shell spells it."""
    if os_kind is OsKind.WINDOWS:
        return path[1:2] == ":"
    return path.startswith("/")


def home_directory(os_kind: OsKind, environ: Mapping[str, str]) -> Path:
    """Resolve the user's home directory from the environment."""
    if os_kind is OsKind.WINDOWS:
        drive = environ.get("HOMEDRIVE")
        home_path = environ.get("HOMEPATH")
        if drive is None or home_path is None:
            raise WorkspaceError("Cannot determine home directory: HOMEDRIVE/HOMEPATH not set")
        return Path(drive + home_path)

    home = environ.get("HOME")
    if not home:
        raise WorkspaceError("Cannot determine home directory: HOME not set")
    return Path(home)
