"""Client for the ZenHub issue event endpoint."""

from __future__ import annotations

from typing import List, Optional

import requests

from .config import REQUEST_TIMEOUT, USER_AGENT, ZENHUB_URL
from .errors import ResponseDecodeError
from .http_client import decode_json, send
from .models import WorkflowEvent


class ZenHubClient:
    """Reads pipeline transition events, most recent first."""

    def __init__(
        self,
        token: Optional[str],
        *,
        base_url: str = ZENHUB_URL,
        timeout: int = REQUEST_TIMEOUT,
        debug: bool = False,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.debug = bool(debug)
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})
        if token:
            self.session.headers["X-Authentication-Token"] = token
        else:
            print("[warn] no ZenHub token configured; issue events will be rejected")

    def log_debug(self, message: str) -> None:
        if self.debug:
            print(f"[debug] {message}")

    def get_issue_events(self, repo_id: int, number: int) -> List[WorkflowEvent]:
        url = f"{self.base_url}/p1/repositories/{repo_id}/issues/{number}/events"
        resp = send(self.session, "GET", url, timeout=self.timeout)
        body = decode_json(resp, url)
        if not isinstance(body, list):
            raise ResponseDecodeError(
                f"expected a list of events for issue {number}, got {type(body).__name__}",
                status=resp.status_code,
                url=url,
            )
        self.log_debug(f"raw events for issue {number}: {body}")
        return [WorkflowEvent.from_payload(entry) for entry in body]


__all__ = ["ZenHubClient"]
