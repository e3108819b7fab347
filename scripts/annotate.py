#!/usr/bin/env python3
"""CLI: Generate or update the docblocks of a PHP file in place."""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the package is importable when running as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from docsync.cli import main

if __name__ == "__main__":
    sys.exit(main())
