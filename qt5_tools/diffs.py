"""Aggregate module diffs into one patch that applies at the root.

``git diff`` inside a module reports paths relative to that module::

    diff --git a/src/foo.cpp b/src/foo.cpp
    --- a/src/foo.cpp
    +++ b/src/foo.cpp

Each header line is rewritten to carry the module directory so that the
combined output can be fed to ``git apply`` from the root::

    diff --git a/qtbase/src/foo.cpp b/qtbase/src/foo.cpp
    --- a/qtbase/src/foo.cpp
    +++ b/qtbase/src/foo.cpp
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, Union

from .runner import capture_command
from .workspace import module_dir

OLD_FILE_MARKER = "--- a/"
NEW_FILE_MARKER = "+++ b/"
COMBINED_MARKER = "diff --git "

_COMBINED_RE = re.compile(r"^diff --git a/(.*) b/(.*)$")


@dataclass(frozen=True)
class OldFileHeader:
    path: str


@dataclass(frozen=True)
class NewFileHeader:
    path: str


@dataclass(frozen=True)
class CombinedDiffHeader:
    old_path: str
    new_path: str


@dataclass(frozen=True)
class Other:
    text: str


DiffLine = Union[OldFileHeader, NewFileHeader, CombinedDiffHeader, Other]


def classify_line(line: str) -> DiffLine:
    """Classify a diff line by the header it carries, if any."""
    if line.startswith(OLD_FILE_MARKER):
        return OldFileHeader(line[len(OLD_FILE_MARKER):])
    if line.startswith(NEW_FILE_MARKER):
        return NewFileHeader(line[len(NEW_FILE_MARKER):])
    if line.startswith(COMBINED_MARKER):
        match = _COMBINED_RE.match(line)
        if match:
            return CombinedDiffHeader(match.group(1), match.group(2))
    return Other(line)


def prefix_paths(parsed: DiffLine, module: str) -> str:
    """Render a classified line with ``module/`` prepended to its paths."""
    if isinstance(parsed, OldFileHeader):
        return f"{OLD_FILE_MARKER}{module}/{parsed.path}"
    if isinstance(parsed, NewFileHeader):
        return f"{NEW_FILE_MARKER}{module}/{parsed.path}"
    if isinstance(parsed, CombinedDiffHeader):
        return f"{COMBINED_MARKER}a/{module}/{parsed.old_path} b/{module}/{parsed.new_path}"
    return parsed.text


def rewrite_line(line: str, module: str) -> str:
    return prefix_paths(classify_line(line), module)


def rewrite_diff(diff_text: str, module: str) -> str:
    """Rewrite all header lines of a module diff, one newline per line."""
    # Split on "\n" only: carriage returns inside CRLF files belong to the content.
    lines = diff_text.split("\n")
    while lines and lines[-1] == "":
        lines.pop()
    return "".join(rewrite_line(line, module) + "\n" for line in lines)


def aggregate_diff(root: Path, modules: Sequence[str], *, git: str = "git") -> str:
    """Collect ``git diff`` of every module as a single root-relative patch.

    Returns an empty string when no module has uncommitted changes.
    """
    total = []
    for module in modules:
        output = capture_command([git, "diff"], module_dir(root, module))
        total.append(rewrite_diff(output, module))
    return "".join(total)
