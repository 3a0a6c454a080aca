"""Convenience shim to print the changelog between two tags."""

from __future__ import annotations

import sys

from src.changelog.runner import main


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
