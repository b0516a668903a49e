"""Typed records exchanged between the page client, walkers, classifier and renderers."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, TypeVar

from .config import DATE_FORMAT, GITHUB_TIMESTAMP_FORMAT
from .errors import InputValidationError, ResponseDecodeError

T = TypeVar("T")


def parse_date(raw: Optional[str], label: str) -> dt.datetime:
    """Parse a `YYYY-MM-DD` argument into an aware UTC datetime at midnight."""
    if not raw:
        raise InputValidationError(f"missing value for the '{label}' date (format: 'YYYY-MM-DD')")
    try:
        parsed = dt.datetime.strptime(raw.strip(), DATE_FORMAT)
    except ValueError as exc:
        raise InputValidationError(f"invalid value for the '{label}' date '{raw}': {exc}") from exc
    return parsed.replace(tzinfo=dt.timezone.utc)


def parse_since(raw: Optional[str]) -> dt.datetime:
    return parse_date(raw, "since")


def parse_github_timestamp(raw: Optional[str]) -> dt.datetime:
    """Parse GitHub's `2019-01-05T10:00:00Z` timestamps into aware UTC datetimes."""
    if not raw:
        raise ResponseDecodeError("missing timestamp in response")
    try:
        parsed = dt.datetime.strptime(raw, GITHUB_TIMESTAMP_FORMAT)
    except ValueError as exc:
        raise ResponseDecodeError(f"failed to parse timestamp '{raw}'") from exc
    return parsed.replace(tzinfo=dt.timezone.utc)


@dataclass(frozen=True)
class RepoId:
    """An `owner/name` repository identifier."""

    owner: str
    name: str

    @classmethod
    def parse(cls, raw: str) -> "RepoId":
        parts = (raw or "").strip().split("/")
        if len(parts) != 2 or not all(part.strip() for part in parts):
            raise InputValidationError(
                f"'{raw}' is not a valid GitHub repository (format: '<owner>/<name>')"
            )
        return cls(owner=parts[0].strip(), name=parts[1].strip())

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


def _require(node: Dict[str, Any], key: str) -> Any:
    if not isinstance(node, dict) or node.get(key) is None:
        raise ResponseDecodeError(f"record is missing '{key}': {node!r}")
    return node[key]


@dataclass(frozen=True)
class PullRequestRecord:
    number: int
    title: str
    merged_at: str
    permalink: str

    @classmethod
    def from_node(cls, node: Dict[str, Any]) -> "PullRequestRecord":
        return cls(
            number=int(_require(node, "number")),
            title=node.get("title") or "",
            merged_at=node.get("mergedAt") or "",
            permalink=node.get("permalink") or "",
        )

    @property
    def merged_at_datetime(self) -> dt.datetime:
        return parse_github_timestamp(self.merged_at)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "title": self.title,
            "merged_at": self.merged_at,
            "permalink": self.permalink,
        }


@dataclass(frozen=True)
class IssueRecord:
    number: int
    title: str
    url: str

    @classmethod
    def from_node(cls, node: Dict[str, Any]) -> "IssueRecord":
        return cls(
            number=int(_require(node, "number")),
            title=node.get("title") or "",
            url=node.get("url") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"number": self.number, "title": self.title, "url": self.url}


@dataclass(frozen=True)
class WorkflowEvent:
    """A pipeline transition reported by the event endpoint."""

    to_stage: str

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "WorkflowEvent":
        if not isinstance(payload, dict):
            raise ResponseDecodeError(f"unexpected event payload: {payload!r}")
        pipeline = payload.get("to_pipeline") or {}
        return cls(to_stage=str(pipeline.get("name") or ""))


@dataclass
class Page(Generic[T]):
    """One page of records plus the cursor needed to request the next one.

    `has_more` is None when the API did not say whether further pages exist.
    """

    records: List[T]
    cursor: Optional[str] = None
    has_more: Optional[bool] = None

    @property
    def exhausted(self) -> bool:
        return self.has_more is False


@dataclass
class MilestoneIssues:
    """Open issues of a repository's current milestone."""

    repository_id: int
    milestone_title: str
    issues: Dict[int, IssueRecord] = field(default_factory=dict)


@dataclass
class AggregateResult:
    """Merged PRs and in-progress issues keyed by repository, then by record number."""

    merged_prs: Dict[str, Dict[int, PullRequestRecord]] = field(default_factory=dict)
    in_progress_issues: Dict[str, Dict[int, IssueRecord]] = field(default_factory=dict)

    @staticmethod
    def _sorted(section: Dict[str, Dict[int, Any]]) -> Dict[str, List[Dict[str, Any]]]:
        return {
            repo: [records[number].to_dict() for number in sorted(records)]
            for repo, records in sorted(section.items())
            if records
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "merged_prs": self._sorted(self.merged_prs),
            "in_progress_issues": self._sorted(self.in_progress_issues),
        }


__all__ = [
    "parse_date",
    "parse_since",
    "parse_github_timestamp",
    "RepoId",
    "PullRequestRecord",
    "IssueRecord",
    "WorkflowEvent",
    "Page",
    "MilestoneIssues",
    "AggregateResult",
]
