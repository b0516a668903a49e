"""Central configuration constants and resolved settings for the aggregation workflow."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from src.secrets import load_local_secrets, resolve_token

from .errors import InputValidationError

USER_AGENT = "sprint-changelog/1.0"
BASE_URL = "https://api.github.com"
GRAPHQL_URL = "https://api.github.com/graphql"
ZENHUB_URL = "https://api.zenhub.io"
REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "90"))
PR_PAGE_SIZE = int(os.getenv("PR_PAGE_SIZE", "10"))
ISSUE_PAGE_SIZE = int(os.getenv("ISSUE_PAGE_SIZE", "10"))
MAX_PAGE_SIZE = 100

DATE_FORMAT = "%Y-%m-%d"
GITHUB_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

GITHUB_TOKEN_ENV = "GITHUB_TOKEN"
ZENHUB_TOKEN_ENV = "ZENHUB_TOKEN"

DEFAULT_REPOS = [
    "fabric8-services/fabric8-auth",
    "fabric8-services/fabric8-cluster",
    "fabric8-services/fabric8-tenant",
]


@dataclass(frozen=True)
class AggregationSettings:
    """Resolved runtime settings handed to the clients and the fan-out coordinator."""

    repos: Tuple[str, ...] = field(default_factory=lambda: tuple(DEFAULT_REPOS))
    github_token: str = ""
    zenhub_token: str = ""
    pr_page_size: int = PR_PAGE_SIZE
    issue_page_size: int = ISSUE_PAGE_SIZE
    request_timeout: int = REQUEST_TIMEOUT
    debug: bool = False


def split_repos(raw: Optional[Iterable[str]]) -> List[str]:
    """Flatten comma-separated repository arguments, dropping blanks and duplicates."""
    repos: List[str] = []
    for chunk in raw or []:
        for part in str(chunk).split(","):
            part = part.strip()
            if part and part not in repos:
                repos.append(part)
    return repos


def select_repos(raw: Optional[Iterable[str]]) -> List[str]:
    """Sorted repositories from `-r` arguments, or the defaults when none were passed."""
    if raw is None:
        return sorted(DEFAULT_REPOS)
    repos = split_repos(raw)
    if not repos:
        raise InputValidationError("no repository given (format: '<owner>/<name>[,<owner>/<name>...]')")
    return sorted(repos)


def load_settings(repos: Optional[Iterable[str]] = None,
                  *,
                  debug: bool = False,
                  secrets: Optional[Dict[str, Any]] = None) -> AggregationSettings:
    """Resolve tokens from the environment/secrets file and freeze the settings."""
    if secrets is None:
        secrets = load_local_secrets()
    selected = split_repos(repos) or list(DEFAULT_REPOS)
    return AggregationSettings(
        repos=tuple(selected),
        github_token=resolve_token(GITHUB_TOKEN_ENV, "github_token", secrets),
        zenhub_token=resolve_token(ZENHUB_TOKEN_ENV, "zenhub_token", secrets),
        pr_page_size=PR_PAGE_SIZE,
        issue_page_size=ISSUE_PAGE_SIZE,
        request_timeout=REQUEST_TIMEOUT,
        debug=bool(debug),
    )


__all__ = [
    "USER_AGENT",
    "BASE_URL",
    "GRAPHQL_URL",
    "ZENHUB_URL",
    "REQUEST_TIMEOUT",
    "PR_PAGE_SIZE",
    "ISSUE_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "DATE_FORMAT",
    "GITHUB_TIMESTAMP_FORMAT",
    "GITHUB_TOKEN_ENV",
    "ZENHUB_TOKEN_ENV",
    "DEFAULT_REPOS",
    "AggregationSettings",
    "split_repos",
    "select_repos",
    "load_settings",
]
