"""Per-repository fan-out and the two aggregations built on top of it."""

from __future__ import annotations

import datetime as dt
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Iterable, Optional, Tuple, TypeVar

from .classifier import filter_in_progress_issues
from .config import AggregationSettings, ISSUE_PAGE_SIZE, PR_PAGE_SIZE
from .errors import InputValidationError
from .http_client import GitHubClient
from .models import AggregateResult, IssueRecord, PullRequestRecord, RepoId
from .walkers import walk_merged_pull_requests, walk_milestone_issues
from .zenhub_client import ZenHubClient

T = TypeVar("T")


def _validated_targets(repos: Iterable[str]) -> Dict[str, RepoId]:
    targets: Dict[str, RepoId] = {}
    for raw in repos:
        try:
            repo = RepoId.parse(raw)
        except InputValidationError as exc:
            print(f"[error] {exc}")
            continue
        targets.setdefault(repo.full_name, repo)
    return targets


def fan_out(repos: Iterable[str], work: Callable[[RepoId], T], *, label: str = "processing") -> Dict[str, T]:
    """Run `work` concurrently for every repository and join before returning.

    Each task writes only its own `owner/name` key, so the shared dict needs no
    lock. Failed tasks and empty results leave their key absent.
    """
    targets = _validated_targets(repos)
    result: Dict[str, T] = {}
    if not targets:
        return result

    def run(key: str, repo: RepoId) -> None:
        try:
            value = work(repo)
        except Exception as exc:
            print(f"[error] {label} for '{key}': {exc}")
            return
        if value:
            result[key] = value

    with ThreadPoolExecutor(max_workers=len(targets)) as executor:
        futures = [executor.submit(run, key, repo) for key, repo in targets.items()]
        for future in futures:
            future.result()
    return result


def list_merged_pull_requests(client: GitHubClient,
                              repos: Iterable[str],
                              since: dt.datetime,
                              *,
                              page_size: int = PR_PAGE_SIZE) -> Dict[str, Dict[int, PullRequestRecord]]:
    """Return PRs merged after `since`, keyed by repository then PR number."""

    def work(repo: RepoId) -> Dict[int, PullRequestRecord]:
        return walk_merged_pull_requests(client, repo, since, page_size=page_size)

    return fan_out(repos, work, label="failed to fetch merged pull requests")


def list_issues_in_progress(github: GitHubClient,
                            zenhub: ZenHubClient,
                            repos: Iterable[str],
                            *,
                            page_size: int = ISSUE_PAGE_SIZE) -> Dict[str, Dict[int, IssueRecord]]:
    """Return current-milestone issues whose latest pipeline is In Progress or Review/QA."""

    def work(repo: RepoId) -> Dict[int, IssueRecord]:
        milestone = walk_milestone_issues(github, repo, page_size=page_size)
        filter_in_progress_issues(zenhub, milestone.repository_id, milestone.issues)
        return milestone.issues

    return fan_out(repos, work, label="unable to list work-in-progress issues")


def build_clients(settings: AggregationSettings) -> Tuple[GitHubClient, ZenHubClient]:
    github = GitHubClient(settings.github_token, timeout=settings.request_timeout, debug=settings.debug)
    zenhub = ZenHubClient(settings.zenhub_token, timeout=settings.request_timeout, debug=settings.debug)
    return github, zenhub


def aggregate(settings: AggregationSettings,
              since: dt.datetime,
              *,
              github: Optional[GitHubClient] = None,
              zenhub: Optional[ZenHubClient] = None) -> AggregateResult:
    """Collect merged PRs, then in-progress issues, for every configured repository."""
    if github is None or zenhub is None:
        built_github, built_zenhub = build_clients(settings)
        github = github or built_github
        zenhub = zenhub or built_zenhub

    print(f"Collecting merged pull requests for {len(settings.repos)} repos...")
    merged = list_merged_pull_requests(github, settings.repos, since, page_size=settings.pr_page_size)
    print("Collecting in-progress issues...")
    in_progress = list_issues_in_progress(github, zenhub, settings.repos, page_size=settings.issue_page_size)
    return AggregateResult(merged_prs=merged, in_progress_issues=in_progress)


__all__ = [
    "fan_out",
    "list_merged_pull_requests",
    "list_issues_in_progress",
    "build_clients",
    "aggregate",
]
