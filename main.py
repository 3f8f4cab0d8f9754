#!/usr/bin/env python3
"""
GRIDNAV - incremental grid navigation
=====================================

Runs from a source checkout without installing the package.

Usage:
    python main.py --arena wall --text
    python main.py --arena double-wall --gui
"""

import sys
from pathlib import Path

# Add src to the path
sys.path.insert(0, str(Path(__file__).parent / 'src'))

from gridnav.main import main  # noqa: E402


if __name__ == '__main__':
    sys.exit(main())
