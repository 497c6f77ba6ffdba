"""Custom exceptions for qt5_tools."""

from __future__ import annotations

from typing import Sequence


class Qt5ToolError(Exception):
    """Base exception for all fatal tool conditions."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        full_message = f"{message}" if not path else f"[{path}] {message}"
        super().__init__(full_message)


class UsageError(Qt5ToolError):
    """Raised when no action was requested or the options do not parse."""


class WorkspaceError(Qt5ToolError):
    """Raised when the root or a module directory cannot be used."""


class ConfigError(Qt5ToolError):
    """Raised when the tool configuration file is unusable."""


class CommandError(Qt5ToolError):
    """Raised when an external command fails."""

    def __init__(
        self,
        message: str,
        command: Sequence[str] | None = None,
        returncode: int | None = None,
    ) -> None:
        self.command = list(command) if command is not None else None
        self.returncode = returncode
        if returncode is not None:
            message = f"{message} (exit status {returncode})"
        super().__init__(message)


class BranchStateError(Qt5ToolError):
    """Raised when the checked out branch of a module is ambiguous."""

    def __init__(self, message: str, module: str) -> None:
        self.module = module
        super().__init__(message)


class BatchError(Qt5ToolError):
    """Raised after a keep-going run in which some modules failed."""

    def __init__(self, action: str, failures: Sequence[tuple[str, str]]) -> None:
        self.action = action
        self.failures = list(failures)
        names = ", ".join(module for module, _ in self.failures)
        super().__init__(f"{action} failed for {len(self.failures)} module(s): {names}")
