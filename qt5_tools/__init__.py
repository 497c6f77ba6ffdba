"""Helpers for working with a Qt 5 source tree and its modules."""

from .diffs import aggregate_diff, classify_line, rewrite_diff, rewrite_line
from .errors import (
    BatchError,
    BranchStateError,
    CommandError,
    ConfigError,
    Qt5ToolError,
    UsageError,
    WorkspaceError,
)
from .platform_info import OsKind, build_driver_for, classify_os
from .workspace import discover_modules, read_git_config

__version__ = "0.1.0"

__all__ = [
    # Diffs
    "aggregate_diff",
    "classify_line",
    "rewrite_diff",
    "rewrite_line",
    # Workspace
    "discover_modules",
    "read_git_config",
    # Platform
    "OsKind",
    "build_driver_for",
    "classify_os",
    # Errors
    "Qt5ToolError",
    "UsageError",
    "WorkspaceError",
    "ConfigError",
    "CommandError",
    "BranchStateError",
    "BatchError",
]
