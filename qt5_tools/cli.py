"""
Command line interface of the Qt 5 helper.

Parses the action flags, locates the root directory and its modules and
runs the requested actions in a fixed order.
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import NoReturn, Sequence

from .actions import (
    ActionContext,
    Step,
    do_build,
    do_clean,
    do_diff,
    do_docs,
    do_pull,
    do_reset,
    run_steps,
)
from .config import ToolConfig, resolve_config
from .errors import Qt5ToolError, UsageError
from .platform_info import BuildDriver, OsKind, build_driver_for, current_os
from .workspace import discover_modules, enter_root, select_root

USAGE = """\
Usage: qt5_tool.py [OPTIONS]

Utility script for working with Qt 5 modules.

Feel free to extend!

Options:
  -d  Diff (over all modules, relative to root)
  -r  Reset hard
  -c  Clean
  -p  Pull
  -b  Build
  -o  [D]ocumentation

  --root DIR      Root directory (default: two levels above the script,
                  or $QT5_TOOL_ROOT)
  --config FILE   YAML configuration (default: $QT5_TOOL_CONFIG or
                  <root>/qt5_tool.yaml)
  --dry-run       Show the commands that would change the tree
  -k, --keep-going
                  Continue with the remaining modules after a failure

Example use cases:
  qt5_tool.py -c -p -b     Clean, pull and build for nightly builds
  qt5_tool.py -d           Generate modules diff relative to root directory
  qt5_tool.py -r           Reset --hard of repo.
"""

ACTION_FLAGS = ("diff", "reset", "clean", "pull", "build", "documentation")


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="qt5_tool.py", add_help=False)
    parser.add_argument("-h", "--help", action="store_true")
    parser.add_argument("-d", "--diff", action="store_true")
    parser.add_argument("-r", "--reset", action="store_true")
    parser.add_argument("-c", "--clean", action="store_true")
    parser.add_argument("-p", "--pull", action="store_true")
    parser.add_argument("-b", "--build", action="store_true")
    parser.add_argument(
        "-o", "--ocumentation", "--documentation",
        dest="documentation",
        action="store_true",
    )
    parser.add_argument("--root", default=None)
    parser.add_argument("--config", default=None)
    parser.add_argument("--dry-run", action="store_true")
    parser.add_argument("-k", "--keep-going", action="store_true")
    return parser


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    """Parse options, requiring at least one action flag."""
    args = build_parser().parse_args(list(argv))
    if not args.help and not any(getattr(args, flag) for flag in ACTION_FLAGS):
        raise UsageError("No action given")
    return args


def select_driver(config: ToolConfig, os_kind: OsKind) -> BuildDriver:
    default = build_driver_for(os_kind)
    name = config.make or default.name
    make_args = config.make_args if config.make_args is not None else default.args
    return BuildDriver(name, list(make_args))


def build_steps(ctx: ActionContext, args: argparse.Namespace) -> list[Step]:
    return [
        Step("Diff", lambda: do_diff(ctx), args.diff, report=False),
        Step("Reset", lambda: do_reset(ctx), args.reset),
        Step("Clean", lambda: do_clean(ctx), args.clean),
        Step("Pull", lambda: do_pull(ctx), args.pull),
        Step("Build", lambda: do_build(ctx), args.build),
        Step("Documentation", lambda: do_docs(ctx), args.documentation),
    ]


def main(argv: Sequence[str] | None = None, script: str | os.PathLike[str] | None = None) -> int:
    """Run the tool.

    Args:
        argv: Command line arguments, defaults to ``sys.argv[1:]``.
        script: Path of the invoking script; the root is two levels above it.
    """
    try:
        args = parse_args(sys.argv[1:] if argv is None else argv)
    except UsageError:
        print(USAGE)
        return 1
    if args.help:
        print(USAGE)
        return 0

    os_kind = current_os()
    try:
        root = select_root(script if script is not None else sys.argv[0], os_kind, override=args.root)
        enter_root(root)
        modules = discover_modules(root)
        config = resolve_config(root, args.config)
        ctx = ActionContext(
            root=root,
            modules=tuple(modules),
            config=config,
            driver=select_driver(config, os_kind),
            os_kind=os_kind,
            dry_run=args.dry_run,
            keep_going=args.keep_going or config.keep_going,
        )
        run_steps(build_steps(ctx, args))
    except Qt5ToolError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())
