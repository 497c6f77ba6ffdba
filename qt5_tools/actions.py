"""Maintenance actions run across the root checkout and its modules.

Actions run in a fixed order: diff, reset, clean, pull, build, documentation.
Any failing command aborts the run unless the keep-going policy is enabled,
in which case per-module failures are collected and reported together.
"""

from __future__ import annotations

import os
import sys
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Mapping, Sequence

from .branches import choose_target_branch, parse_branch_listing
from .config import ToolConfig
from .diffs import aggregate_diff
from .errors import BatchError, BranchStateError, CommandError, Qt5ToolError, WorkspaceError
from .platform_info import BuildDriver, OsKind, home_directory
from .runner import capture_command, run_command
from .workspace import module_dir, read_git_config

PATCH_NAME_FORMAT = "qt5_d%Y%m%d%H%M.patch"


@dataclass
class ActionContext:
    """Everything an action needs; passed explicitly instead of relying on cwd."""

    root: Path
    modules: tuple[str, ...]
    config: ToolConfig
    driver: BuildDriver
    os_kind: OsKind
    dry_run: bool = False
    keep_going: bool = False
    environ: Mapping[str, str] = field(default_factory=lambda: os.environ)

    @property
    def git(self) -> str:
        return self.config.git


@dataclass
class Step:
    """A requested action with timing."""

    name: str
    action: Callable[[], None]
    enabled: bool = True
    report: bool = True


def run_steps(steps: Sequence[Step]) -> None:
    """Execute enabled steps in order, stopping at the first failure."""
    for step in steps:
        if not step.enabled:
            continue

        step_start = time.perf_counter()
        try:
            step.action()
        except Qt5ToolError:
            elapsed = time.perf_counter() - step_start
            print(f"\n[FAIL] {step.name} failed after {elapsed:.2f}s", file=sys.stderr)
            raise
        elapsed = time.perf_counter() - step_start
        if step.report:
            print(f"\n[OK] {step.name} completed in {elapsed:.2f}s")


def for_each_module(ctx: ActionContext, action: str, func: Callable[[str], None]) -> None:
    """Apply ``func`` to every module, honouring the keep-going policy."""
    failures: list[tuple[str, str]] = []
    for module in ctx.modules:
        try:
            func(module)
        except (CommandError, BranchStateError, WorkspaceError) as e:
            if not ctx.keep_going:
                raise
            print(f"[FAIL] {module}: {e}", file=sys.stderr)
            failures.append((module, str(e)))
    if failures:
        raise BatchError(action, failures)


def run_in_modules(ctx: ActionContext, args: list[str], action: str) -> None:
    """Run a git subcommand in every module.

    Fail-fast runs use ``git submodule foreach``; keep-going runs visit
    the modules one by one so a failure does not stop the others.
    """
    if not ctx.keep_going:
        run_command(
            [ctx.git, "submodule", "foreach", ctx.git, *args],
            ctx.root,
            failure=f"{action} of modules failed",
            dry_run=ctx.dry_run,
        )
        return

    def run_one(module: str) -> None:
        run_command(
            [ctx.git, *args],
            module_dir(ctx.root, module),
            failure=f"{action} {module} failed",
            dry_run=ctx.dry_run,
        )

    for_each_module(ctx, action, run_one)


def write_patch_to_stdout(text: str) -> None:
    """Write patch text byte-exact, including undecodable content."""
    buffer = getattr(sys.stdout, "buffer", None)
    if buffer is None:
        sys.stdout.write(text)
        return
    sys.stdout.flush()
    buffer.write(text.encode("utf-8", errors="surrogateescape"))
    buffer.flush()


def do_diff(ctx: ActionContext) -> None:
    write_patch_to_stdout(aggregate_diff(ctx.root, ctx.modules, git=ctx.git))


def patch_path(home: Path, moment: datetime) -> Path:
    return home / moment.strftime(PATCH_NAME_FORMAT)


def save_patch(changes: str, path: Path, *, dry_run: bool = False) -> None:
    if dry_run:
        print(f"Would save {path}")
        return
    try:
        with open(path, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
            f.write(changes)
    except OSError as e:
        raise WorkspaceError(f"Unable to open for writing {path}: {e}") from e
    print(f"Saved {path}")


def do_reset(ctx: ActionContext, *, now: datetime | None = None) -> None:
    """Hard reset root and modules, saving uncommitted changes to a patch first."""
    print(f"Resetting Qt 5 in {ctx.root}")
    changes = aggregate_diff(ctx.root, ctx.modules, git=ctx.git)
    if changes:
        home = home_directory(ctx.os_kind, ctx.environ)
        save_patch(changes, patch_path(home, now or datetime.now()), dry_run=ctx.dry_run)

    run_command([ctx.git, "reset", "--hard"], ctx.root, failure="Reset failed", dry_run=ctx.dry_run)
    run_in_modules(ctx, ["reset", "--hard"], "Reset")


def do_clean(ctx: ActionContext) -> None:
    print(f"Cleaning Qt 5 in {ctx.root}")
    run_command([ctx.git, "clean", "-dxf"], ctx.root, failure="Clean failed", dry_run=ctx.dry_run)
    run_in_modules(ctx, ["clean", "-dxf"], "Clean")


def pull_module(ctx: ActionContext, module: str) -> None:
    """Pull one module, switching a detached checkout to a branch first."""
    print(f"Examining: {module} url: {read_git_config(ctx.root, module, 'url')}")
    directory = module_dir(ctx.root, module)
    listing = parse_branch_listing(capture_command([ctx.git, "branch"], directory), module)

    if listing.detached:
        target = choose_target_branch(module, listing, ctx.config.preferred_branches)
        print(f"Switching {module} from {listing.current} to {target}")
        run_command(
            [ctx.git, "checkout", target],
            directory,
            failure=f"Checkout of {target} failed",
            dry_run=ctx.dry_run,
        )
    else:
        print(f"  branch: {listing.current}")

    print(f"Pulling {module}")
    run_command([ctx.git, "pull"], directory, failure=f"Pull {module} failed", dry_run=ctx.dry_run)


def do_pull(ctx: ActionContext) -> None:
    print(f"Pulling Qt 5 in {ctx.root}")
    run_command([ctx.git, "pull"], ctx.root, failure="Pull failed", dry_run=ctx.dry_run)
    for_each_module(ctx, "Pull", lambda module: pull_module(ctx, module))


def do_build(ctx: ActionContext) -> None:
    print(f"Building Qt 5 in {ctx.root}")
    configure = ctx.root / ctx.config.configure
    run_command(
        [str(configure), *ctx.config.configure_options],
        ctx.root,
        failure="Configure failed",
        dry_run=ctx.dry_run,
    )
    run_command(ctx.driver.command(), ctx.root, failure=f"{ctx.driver.name} failed", dry_run=ctx.dry_run)


def do_docs(ctx: ActionContext) -> None:
    print(f"Documenting Qt 5 in {ctx.root}")
    run_command(
        ctx.driver.command("docs"),
        ctx.root,
        failure=f"{ctx.driver.name} docs failed",
        dry_run=ctx.dry_run,
    )
