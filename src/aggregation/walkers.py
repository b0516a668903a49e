"""Cursor walkers that drive the page fetchers until a stopping rule is met."""

from __future__ import annotations

import datetime as dt
from typing import Dict, Optional

from .config import ISSUE_PAGE_SIZE, PR_PAGE_SIZE
from .errors import NoOpenMilestoneError, ResponseDecodeError
from .http_client import GitHubClient
from .models import MilestoneIssues, PullRequestRecord, RepoId
from .pages import fetch_milestone_issues_page, fetch_pull_request_page
from .queries import PullRequestState


def walk_merged_pull_requests(client: GitHubClient,
                              repo: RepoId,
                              since: dt.datetime,
                              *,
                              page_size: int = PR_PAGE_SIZE,
                              state: PullRequestState = PullRequestState.MERGED) -> Dict[int, PullRequestRecord]:
    """Collect PRs merged strictly after `since`, walking pages newest first.

    A page that adds nothing ends the walk. This relies on the API returning
    monotonically ordered pages; a page made only of already-seen records is
    treated the same as having crossed the boundary.
    """
    pulls: Dict[int, PullRequestRecord] = {}
    before: Optional[str] = None
    while True:
        page = fetch_pull_request_page(client, repo, page_size=page_size, state=state, before=before)
        progressed = False
        for pr in reversed(page.records):
            merged_at = pr.merged_at_datetime
            is_new = merged_at > since
            client.log_debug(f"{repo}: #{pr.number} '{pr.title}' merged at {pr.merged_at} (new: {is_new})")
            if pr.number not in pulls and is_new:
                pulls[pr.number] = pr
                progressed = True

        if not progressed or page.exhausted:
            return pulls
        if not page.cursor:
            raise ResponseDecodeError(f"page of pull requests for {repo} has no continuation cursor")
        before = page.cursor


def walk_milestone_issues(client: GitHubClient,
                          repo: RepoId,
                          *,
                          page_size: int = ISSUE_PAGE_SIZE) -> MilestoneIssues:
    """Collect every open issue of the repository's nearest-due open milestone."""
    result: Optional[MilestoneIssues] = None
    after: Optional[str] = None
    while True:
        repo_id, title, page = fetch_milestone_issues_page(client, repo, page_size=page_size, after=after)
        if title is None:
            raise NoOpenMilestoneError(f"unable to get current milestone: '{repo}' has no open milestone")
        if result is None:
            result = MilestoneIssues(repository_id=repo_id, milestone_title=title)
        for issue in page.records:
            result.issues[issue.number] = issue

        if not page.has_more:
            client.log_debug(
                f"{repo}: milestone '{title}' has {len(result.issues)} open issue(s), repository id {repo_id}"
            )
            return result
        if not page.cursor:
            raise ResponseDecodeError(f"page of milestone issues for {repo} has no continuation cursor")
        after = page.cursor


__all__ = ["walk_merged_pull_requests", "walk_milestone_issues"]
