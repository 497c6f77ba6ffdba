#!/usr/bin/env python3
"""
Qt 5 helper.

Usage:
    python -m qt5_tools [OPTIONS]

The package directory lives two levels below the root of the source tree
(``<root>/qtrepotools/qt5_tools``), so it doubles as the anchor for
locating the root.
"""

from __future__ import annotations

import sys
from pathlib import Path

from qt5_tools.cli import main

PACKAGE_DIR = Path(__file__).resolve().parent

if __name__ == "__main__":
    sys.exit(main(script=PACKAGE_DIR))
