"""Argument parsing and resolved settings for the report command."""

from __future__ import annotations

import argparse
import datetime as dt
from dataclasses import dataclass
from typing import List, Optional

from src.aggregation.config import DEFAULT_REPOS, AggregationSettings, load_settings, select_repos
from src.aggregation.models import parse_since

DEFAULT_OUTPUT = "tmp"
STDOUT_OUTPUT = "-"
FORMATS = ("asciidoc", "json")
DEFAULT_FORMAT = "asciidoc"


@dataclass(frozen=True)
class ReportSettings:
    """Resolved runtime settings for one report run."""

    aggregation: AggregationSettings
    since: dt.datetime
    output: str
    output_format: str


def build_arg_parser() -> argparse.ArgumentParser:
    """Return the CLI parser used by the report entry point."""

    parser = argparse.ArgumentParser(
        description="Report merged pull requests and issues in progress or review/QA across repositories.",
    )
    parser.add_argument(
        "-r",
        "--repositories",
        action="append",
        default=None,
        help=f"comma-separated '<owner>/<name>' list (default: {','.join(DEFAULT_REPOS)})",
    )
    parser.add_argument("-s", "--since", default=None, help="the date after which PRs were merged (YYYY-MM-DD)")
    parser.add_argument("-o", "--output", default=DEFAULT_OUTPUT, help="output directory, or '-' for stdout")
    parser.add_argument("-f", "--format", choices=FORMATS, default=DEFAULT_FORMAT, dest="output_format")
    parser.add_argument("--debug", action="store_true")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments; accepts argv overrides for testing."""

    parser = build_arg_parser()
    return parser.parse_args(argv)


def resolve_settings(args: argparse.Namespace) -> ReportSettings:
    """Validate the arguments and freeze them; raises InputValidationError on bad input."""

    since = parse_since(args.since)
    repos = select_repos(args.repositories)
    return ReportSettings(
        aggregation=load_settings(repos, debug=bool(args.debug)),
        since=since,
        output=args.output,
        output_format=args.output_format,
    )


__all__ = [
    "DEFAULT_OUTPUT",
    "STDOUT_OUTPUT",
    "FORMATS",
    "DEFAULT_FORMAT",
    "ReportSettings",
    "build_arg_parser",
    "parse_args",
    "resolve_settings",
]
