#!/usr/bin/env python3
"""
Helper script for Qt 5.

Convenience wrapper kept in a tooling checkout directly below the Qt 5 root
(``<root>/qtrepotools/qt5_tool.py``). Run with --help to see the options.

Usage:
    python qt5_tool.py [OPTIONS]
    ./qt5_tool.py [OPTIONS]  (on Unix with execute permission)

Examples:
    python qt5_tool.py -c -p -b     Clean, pull and build for nightly builds
    python qt5_tool.py -d           Generate modules diff relative to root directory
    python qt5_tool.py -r           Reset --hard of repo.
"""

import sys
from pathlib import Path

# Ensure qt5_tools is importable without installing it
TOOLS_DIR = Path(__file__).resolve().parent
if str(TOOLS_DIR) not in sys.path:
    sys.path.insert(0, str(TOOLS_DIR))

from qt5_tools.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main(script=sys.argv[0]))
