"""Single-page GraphQL fetchers: one call in, one typed page out."""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from .errors import ResponseDecodeError
from .http_client import GitHubClient
from .models import IssueRecord, Page, PullRequestRecord, RepoId
from .queries import (
    OrderDirection,
    PullRequestState,
    milestone_issues_request,
    pull_requests_request,
)


def _connection(parent: Any, key: str, repo: RepoId) -> Dict[str, Any]:
    value = parent.get(key) if isinstance(parent, dict) else None
    if not isinstance(value, dict):
        raise ResponseDecodeError(f"response for {repo} has no '{key}' object")
    return value


def _nodes(connection: Dict[str, Any], repo: RepoId) -> list:
    nodes = connection.get("nodes")
    if nodes is None:
        return []
    if not isinstance(nodes, list):
        raise ResponseDecodeError(f"response for {repo} has malformed 'nodes': {nodes!r}")
    return nodes


def fetch_pull_request_page(client: GitHubClient,
                            repo: RepoId,
                            *,
                            page_size: int,
                            state: PullRequestState = PullRequestState.MERGED,
                            before: Optional[str] = None) -> Page[PullRequestRecord]:
    """Fetch the `page_size` PRs updated most recently before the `before` cursor.

    Nodes come back oldest first; the page cursor and `has_more` describe the
    next (older) page.
    """
    request = pull_requests_request(
        repo, page_size=page_size, state=state, direction=OrderDirection.ASC, before=before
    )
    data = client.run_graphql_query(request)
    repository = _connection(data, "repository", repo)
    pulls = _connection(repository, "pullRequests", repo)
    page_info = pulls.get("pageInfo") or {}
    records = [PullRequestRecord.from_node(node) for node in _nodes(pulls, repo)]
    has_more = page_info.get("hasPreviousPage")
    return Page(
        records=records,
        cursor=page_info.get("startCursor"),
        has_more=bool(has_more) if has_more is not None else None,
    )


def fetch_milestone_issues_page(client: GitHubClient,
                                repo: RepoId,
                                *,
                                page_size: int,
                                after: Optional[str] = None) -> Tuple[int, Optional[str], Page[IssueRecord]]:
    """Fetch one page of open issues of the nearest-due open milestone.

    Returns `(repository database id, milestone title, page)`; the title is None
    when the repository has no open milestone.
    """
    request = milestone_issues_request(repo, page_size=page_size, after=after)
    data = client.run_graphql_query(request)
    repository = _connection(data, "repository", repo)
    database_id = repository.get("databaseId")
    if database_id is None:
        raise ResponseDecodeError(f"response for {repo} has no 'databaseId'")
    milestones = _nodes(_connection(repository, "milestones", repo), repo)
    if not milestones:
        return int(database_id), None, Page(records=[], has_more=False)

    milestone = milestones[0]
    issues = _connection(milestone, "issues", repo)
    page_info = issues.get("pageInfo") or {}
    records = [IssueRecord.from_node(node) for node in _nodes(issues, repo)]
    has_more = page_info.get("hasNextPage")
    return int(database_id), milestone.get("title") or "", Page(
        records=records,
        cursor=page_info.get("endCursor"),
        has_more=bool(has_more) if has_more is not None else None,
    )


__all__ = ["fetch_pull_request_page", "fetch_milestone_issues_page"]
