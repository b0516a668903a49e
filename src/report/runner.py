"""Entry point wiring settings, aggregation and rendering for the report command."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

from src.aggregation.errors import InputValidationError
from src.aggregation.fanout import aggregate

from .config import ReportSettings, parse_args, resolve_settings
from .render import render, write_report


def generate_report(settings: ReportSettings) -> Optional[Path]:
    """Aggregate every configured repository and write the rendered report."""
    result = aggregate(settings.aggregation, settings.since)
    text = render(result, settings.output_format)
    path = write_report(text, settings.output, settings.output_format)
    if path is not None:
        print(f"    DONE WRITING REPORT → {path}")
    return path


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point for the report command."""

    args = parse_args(argv)
    try:
        settings = resolve_settings(args)
    except InputValidationError as exc:
        print(f"[error] {exc}")
        sys.exit(1)
    generate_report(settings)


__all__ = ["generate_report", "main"]
