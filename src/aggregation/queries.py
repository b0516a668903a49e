"""GraphQL documents and typed request builders for the paginated queries.

Values are always sent as GraphQL variables, never spliced into the query text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .config import MAX_PAGE_SIZE
from .errors import InputValidationError
from .models import RepoId


class PullRequestState(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    MERGED = "MERGED"


class OrderDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


PULL_REQUESTS_QUERY = """
query PullRequestsPage($owner:String!, $name:String!, $last:Int!, $states:[PullRequestState!],
                       $direction:OrderDirection!, $before:String) {
  repository(owner:$owner, name:$name) {
    pullRequests(last:$last, states:$states, orderBy:{field:UPDATED_AT, direction:$direction}, before:$before) {
      pageInfo {
        startCursor
        hasPreviousPage
      }
      nodes {
        number
        title
        mergedAt
        permalink
      }
    }
  }
}
"""

MILESTONE_ISSUES_QUERY = """
query MilestoneIssuesPage($owner:String!, $name:String!, $first:Int!, $after:String) {
  repository(owner:$owner, name:$name) {
    databaseId
    milestones(states:[OPEN], first:1, orderBy:{field:DUE_DATE, direction:ASC}) {
      nodes {
        number
        title
        issues(states:[OPEN], first:$first, after:$after, orderBy:{field:UPDATED_AT, direction:DESC}) {
          pageInfo {
            endCursor
            hasNextPage
          }
          nodes {
            number
            title
            url
          }
        }
      }
    }
  }
}
"""


@dataclass(frozen=True)
class GraphQLRequest:
    query: str
    variables: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        return {"query": self.query, "variables": dict(self.variables)}


def _check_page_size(page_size: int) -> int:
    if not isinstance(page_size, int) or not 1 <= page_size <= MAX_PAGE_SIZE:
        raise InputValidationError(f"page size must be between 1 and {MAX_PAGE_SIZE}, got {page_size!r}")
    return page_size


def pull_requests_request(repo: RepoId,
                          *,
                          page_size: int,
                          state: PullRequestState = PullRequestState.MERGED,
                          direction: OrderDirection = OrderDirection.ASC,
                          before: Optional[str] = None) -> GraphQLRequest:
    """Ask for the `page_size` most recently updated PRs before `before`."""
    variables: Dict[str, Any] = {
        "owner": repo.owner,
        "name": repo.name,
        "last": _check_page_size(page_size),
        "states": [PullRequestState(state).value],
        "direction": OrderDirection(direction).value,
    }
    if before:
        variables["before"] = before
    return GraphQLRequest(PULL_REQUESTS_QUERY, variables)


def milestone_issues_request(repo: RepoId,
                             *,
                             page_size: int,
                             after: Optional[str] = None) -> GraphQLRequest:
    """Ask for the next page of open issues in the nearest-due open milestone."""
    variables: Dict[str, Any] = {
        "owner": repo.owner,
        "name": repo.name,
        "first": _check_page_size(page_size),
    }
    if after:
        variables["after"] = after
    return GraphQLRequest(MILESTONE_ISSUES_QUERY, variables)


__all__ = [
    "PullRequestState",
    "OrderDirection",
    "PULL_REQUESTS_QUERY",
    "MILESTONE_ISSUES_QUERY",
    "GraphQLRequest",
    "pull_requests_request",
    "milestone_issues_request",
]
