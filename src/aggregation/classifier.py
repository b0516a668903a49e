"""Keeps only the issues whose latest ZenHub transition lands in an active pipeline."""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, Sequence

from .models import IssueRecord, WorkflowEvent
from .zenhub_client import ZenHubClient

IN_PROGRESS = "In Progress"
REVIEW_QA = "Review/QA"
ACCEPTED_STAGES: FrozenSet[str] = frozenset({IN_PROGRESS, REVIEW_QA})


def is_in_progress(events: Sequence[WorkflowEvent], accepted: Iterable[str] = ACCEPTED_STAGES) -> bool:
    """Untriaged issues (no events) never qualify; otherwise only the newest event counts."""
    if not events:
        return False
    return events[0].to_stage in set(accepted)


def filter_in_progress_issues(zenhub: ZenHubClient,
                              repo_id: int,
                              issues: Dict[int, IssueRecord],
                              accepted: Iterable[str] = ACCEPTED_STAGES) -> None:
    """Drop, in place, every issue that is not currently in an accepted stage.

    Issues are checked one at a time; the first failing lookup propagates and
    leaves `issues` partially filtered.
    """
    accepted = frozenset(accepted)
    for number in sorted(issues):
        events = zenhub.get_issue_events(repo_id, number)
        if not is_in_progress(events, accepted):
            stage = events[0].to_stage if events else "untriaged"
            zenhub.log_debug(f"dropping issue #{number} ({stage})")
            del issues[number]


__all__ = [
    "IN_PROGRESS",
    "REVIEW_QA",
    "ACCEPTED_STAGES",
    "is_in_progress",
    "filter_in_progress_issues",
]
