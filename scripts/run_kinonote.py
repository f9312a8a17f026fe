#!/usr/bin/env python3
"""
kinonote runner

Runs the command-line interface from a source checkout without installing.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from kinonote.cli import main

if __name__ == "__main__":
    main()
