"""
Unified CLI entry point for LakeHub.

Usage:
    python -m lake_hub.cli <command> [options]
"""

import sys

from .main import main

if __name__ == "__main__":
    sys.exit(main())
