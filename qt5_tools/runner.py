"""Thin wrappers around subprocess for git and the build driver."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Sequence

from .errors import CommandError


def format_command(command: Sequence[str]) -> str:
    return " ".join(str(c) for c in command)


def run_command(
    command: Sequence[str],
    cwd: Path,
    *,
    failure: str | None = None,
    dry_run: bool = False,
) -> None:
    """Run a command in ``cwd``, raising CommandError when it exits non-zero.

    Args:
        command: Program and arguments.
        cwd: Working directory for the child process.
        failure: Diagnostic used when the command fails, e.g. ``"Pull failed"``.
        dry_run: Only echo the command.
    """
    if dry_run:
        print(f"Would run (in {cwd}): {format_command(command)}")
        return

    print(f"$ {format_command(command)}")
    try:
        subprocess.run([str(c) for c in command], cwd=cwd, check=True)
    except subprocess.CalledProcessError as e:
        message = failure or f"Command failed: {format_command(command)}"
        raise CommandError(message, command, e.returncode) from e
    except FileNotFoundError as e:
        raise CommandError(f"Command not found: {e.filename}", command) from e
    except OSError as e:
        raise CommandError(f"Cannot run {format_command(command)} in {cwd}: {e}", command) from e


def capture_command(command: Sequence[str], cwd: Path) -> str:
    """Run a read-only command in ``cwd`` and return its standard output.

    Output is decoded without newline translation so carriage returns in
    diffs of CRLF files survive.
    """
    try:
        result = subprocess.run(
            [str(c) for c in command],
            cwd=cwd,
            check=True,
            capture_output=True,
        )
    except subprocess.CalledProcessError as e:
        if e.stderr:
            print(e.stderr.decode("utf-8", errors="replace"), file=sys.stderr)
        raise CommandError(
            f"Command failed: {format_command(command)}", command, e.returncode
        ) from e
    except FileNotFoundError as e:
        raise CommandError(f"Command not found: {e.filename}", command) from e
    except OSError as e:
        raise CommandError(f"Cannot run {format_command(command)} in {cwd}: {e}", command) from e
    return result.stdout.decode("utf-8", errors="surrogateescape")
