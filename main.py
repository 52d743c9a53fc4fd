#!/usr/bin/env python3
"""
rbxlx2vmf - Main Command Line Entry Point

Runs the converter straight from a source checkout:

    python main.py -i place.rbxlx -o place.vmf -g css
"""

import sys
from pathlib import Path

# Make the src/ layout importable without installation
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from rbxlx2vmf.cli import main

if __name__ == "__main__":
    sys.exit(main())
