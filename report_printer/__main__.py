"""
Entry point for running report_printer as a module.

Usage:
    python -m report_printer demo -o sample.pdf
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
