"""CLI entry point for settings introspection.

Usage:
    python -m prettier_edit.config [PATH]
    python -m prettier_edit.config [PATH] --json
"""

import sys

from .introspection import main

if __name__ == "__main__":
    sys.exit(main())
