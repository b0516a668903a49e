"""Convenience shim to run the changelog report."""

from __future__ import annotations

import sys

from src.report.runner import main as report_main


if __name__ == "__main__":
    report_main(sys.argv[1:])
