"""Milestone administration commands fanned out across the configured repositories."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional

from src.aggregation.config import DEFAULT_REPOS, AggregationSettings, load_settings, select_repos
from src.aggregation.errors import InputValidationError
from src.aggregation.fanout import fan_out
from src.aggregation.http_client import GitHubClient
from src.aggregation.models import RepoId, parse_date

from .client import (
    Milestone,
    MilestoneIssue,
    close_milestone,
    create_milestone,
    fetch_milestone,
    fetch_milestone_issues,
    move_issue,
)


@dataclass(frozen=True)
class MilestoneSettings:
    aggregation: AggregationSettings
    command: str
    name: Optional[str] = None
    end: Optional[str] = None
    from_title: Optional[str] = None
    to_title: Optional[str] = None


def build_arg_parser() -> argparse.ArgumentParser:
    """Return the CLI parser for the milestone subcommands."""

    parser = argparse.ArgumentParser(description="Create, close and move sprint milestones across repositories.")
    parser.add_argument(
        "-r",
        "--repositories",
        action="append",
        default=None,
        help=f"comma-separated '<owner>/<name>' list (default: {','.join(DEFAULT_REPOS)})",
    )
    parser.add_argument("--debug", action="store_true")
    commands = parser.add_subparsers(dest="command", required=True)

    new = commands.add_parser("new-milestone", help="create a new milestone")
    new.add_argument("-n", "--name", required=True, help="the milestone to create (e.g. 'Sprint 123')")
    new.add_argument("-e", "--end", required=True, help="the end date of the sprint (YYYY-MM-DD)")

    close = commands.add_parser("close-milestone", help="close a milestone")
    close.add_argument("--name", required=True, help="the milestone to close (e.g. 'Sprint 123')")

    move = commands.add_parser("move-issues", help="move all open issues to another milestone")
    move.add_argument("--from", dest="from_title", required=True, help="the milestone to move issues from")
    move.add_argument("--to", dest="to_title", required=True, help="the milestone to move issues to")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return build_arg_parser().parse_args(argv)


def resolve_settings(args: argparse.Namespace) -> MilestoneSettings:
    repos = select_repos(args.repositories)
    return MilestoneSettings(
        aggregation=load_settings(repos, debug=bool(args.debug)),
        command=args.command,
        name=getattr(args, "name", None),
        end=getattr(args, "end", None),
        from_title=getattr(args, "from_title", None),
        to_title=getattr(args, "to_title", None),
    )


def new_milestones(client: GitHubClient, repos: List[str], name: str, end: str) -> Dict[str, Milestone]:
    due_on = parse_date(end, "end").date()
    client.log_debug(f"creating milestone '{name}' with end date '{due_on}' on {repos}...")

    def work(repo: RepoId) -> Milestone:
        milestone = create_milestone(client, repo, name, due_on)
        print(f"[info] created milestone for repo: '{milestone.url}'")
        return milestone

    return fan_out(repos, work, label=f"failed to create milestone '{name}'")


def close_milestones(client: GitHubClient, repos: List[str], name: str) -> Dict[str, Milestone]:
    def work(repo: RepoId) -> Milestone:
        milestone = close_milestone(client, fetch_milestone(client, repo, name))
        print(f"[info] closed milestone {milestone.url}")
        return milestone

    return fan_out(repos, work, label=f"unable to close milestone '{name}'")


def move_issues(client: GitHubClient,
                repos: List[str],
                from_title: str,
                to_title: str) -> Dict[str, List[MilestoneIssue]]:
    """Move every open issue; a repository stops at its first failed move."""

    def work(repo: RepoId) -> List[MilestoneIssue]:
        source = fetch_milestone(client, repo, from_title)
        target = fetch_milestone(client, repo, to_title)
        moved: List[MilestoneIssue] = []
        for issue in fetch_milestone_issues(client, repo, source.number):
            moved.append(move_issue(client, issue, target))
            print(f"[info] moved issue {issue.url} to milestone {target.url}")
        return moved

    return fan_out(repos, work, label="unable to move issues")


def run(settings: MilestoneSettings, client: Optional[GitHubClient] = None) -> Dict[str, object]:
    agg = settings.aggregation
    client = client or GitHubClient(agg.github_token, timeout=agg.request_timeout, debug=agg.debug)
    repos = list(agg.repos)
    if settings.command == "new-milestone":
        result = new_milestones(client, repos, settings.name or "", settings.end or "")
    elif settings.command == "close-milestone":
        result = close_milestones(client, repos, settings.name or "")
    elif settings.command == "move-issues":
        result = move_issues(client, repos, settings.from_title or "", settings.to_title or "")
    else:
        raise InputValidationError(f"unknown command '{settings.command}'")
    client.log_debug("done")
    return dict(result)


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point for milestone administration."""

    args = parse_args(argv)
    try:
        run(resolve_settings(args))
    except InputValidationError as exc:
        print(f"[error] {exc}")
        sys.exit(1)


__all__ = [
    "MilestoneSettings",
    "build_arg_parser",
    "parse_args",
    "resolve_settings",
    "new_milestones",
    "close_milestones",
    "move_issues",
    "run",
    "main",
]
