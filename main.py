#!/usr/bin/env python3
# /vine/main.py
"""
Vine Main Entry Point
=====================

Runs the editor straight from a source checkout: puts `src/` on the import
path and hands over to `vine_editor.cli`. Installed copies use the `vine`
console script instead.

Usage:
    python main.py [FILE]
"""

import os
import sys

# Ensure the 'vine_editor' package is importable from a source checkout.
project_src = os.path.join(os.path.dirname(os.path.abspath(__file__)), "src")
if project_src not in sys.path:
    sys.path.insert(0, project_src)

from vine_editor.cli import main  # noqa: E402


if __name__ == "__main__":
    main()
