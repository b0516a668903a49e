"""Single-request REST v3 helpers for milestone administration."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Dict, List

from src.aggregation.errors import ChangelogError, MilestoneNotFoundError, ResponseDecodeError
from src.aggregation.http_client import GitHubClient
from src.aggregation.models import RepoId

MILESTONE_DUE_FORMAT = "%Y-%m-%dT00:00:00Z"


@dataclass
class Milestone:
    number: int
    title: str
    state: str
    url: str

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Milestone":
        if not isinstance(payload, dict) or payload.get("number") is None:
            raise ResponseDecodeError(f"unexpected milestone payload: {payload!r}")
        return cls(
            number=int(payload["number"]),
            title=payload.get("title") or "",
            state=payload.get("state") or "",
            url=payload.get("url") or "",
        )


@dataclass
class MilestoneIssue:
    number: int
    title: str
    state: str
    url: str

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "MilestoneIssue":
        if not isinstance(payload, dict) or payload.get("number") is None:
            raise ResponseDecodeError(f"unexpected issue payload: {payload!r}")
        return cls(
            number=int(payload["number"]),
            title=payload.get("title") or "",
            state=payload.get("state") or "",
            url=payload.get("url") or "",
        )


def _as_list(data: Any, what: str) -> List[Dict[str, Any]]:
    if not isinstance(data, list):
        raise ResponseDecodeError(f"expected a list of {what}, got {type(data).__name__}")
    return data


def list_milestones(client: GitHubClient, repo: RepoId) -> List[Milestone]:
    """List all milestones of the repository, newest first."""
    data = client.request_json("GET", f"/repos/{repo}/milestones?state=all&direction=desc")
    return [Milestone.from_payload(entry) for entry in _as_list(data, "milestones")]


def fetch_milestone(client: GitHubClient, repo: RepoId, title: str) -> Milestone:
    for milestone in list_milestones(client, repo):
        if milestone.title == title:
            return milestone
    raise MilestoneNotFoundError(f"unable to find milestone with title '{title}' in repository '{repo}'")


def create_milestone(client: GitHubClient, repo: RepoId, title: str, due_on: dt.date) -> Milestone:
    payload = {"title": title, "state": "open", "due_on": due_on.strftime(MILESTONE_DUE_FORMAT)}
    return Milestone.from_payload(client.request_json("POST", f"/repos/{repo}/milestones", payload))


def close_milestone(client: GitHubClient, milestone: Milestone) -> Milestone:
    if milestone.state != "open":
        raise ChangelogError(f"milestone '{milestone.title}' ({milestone.url}) is already closed")
    return Milestone.from_payload(client.request_json("PATCH", milestone.url, {"state": "closed"}))


def fetch_milestone_issues(client: GitHubClient, repo: RepoId, number: int) -> List[MilestoneIssue]:
    """Return the open issues assigned to the milestone `number`."""
    data = client.request_json("GET", f"/repos/{repo}/issues?state=open&milestone={number}")
    return [MilestoneIssue.from_payload(entry) for entry in _as_list(data, "issues")]


def move_issue(client: GitHubClient, issue: MilestoneIssue, milestone: Milestone) -> MilestoneIssue:
    return MilestoneIssue.from_payload(
        client.request_json("PATCH", issue.url, {"milestone": milestone.number})
    )


__all__ = [
    "MILESTONE_DUE_FORMAT",
    "Milestone",
    "MilestoneIssue",
    "list_milestones",
    "fetch_milestone",
    "create_milestone",
    "close_milestone",
    "fetch_milestone_issues",
    "move_issue",
]
