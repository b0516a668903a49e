"""Convenience shim to run the milestone administration commands."""

from __future__ import annotations

import sys

from src.milestones.runner import main as milestones_main


if __name__ == "__main__":
    milestones_main(sys.argv[1:])
