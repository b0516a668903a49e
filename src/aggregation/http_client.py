"""HTTP and GraphQL helpers for the GitHub side of the aggregation workflow.

Every call performs exactly one request; callers decide what to do with failures.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from .config import BASE_URL, GRAPHQL_URL, REQUEST_TIMEOUT, USER_AGENT
from .errors import ResponseDecodeError, TransportError
from .queries import GraphQLRequest


def log_http_error(resp: requests.Response, url: str) -> None:
    """Print a short, human-readable message when an API returns an error."""
    try:
        body = resp.json()
    except ValueError:
        body = {"text": (resp.text or "")[:300]}
    if not isinstance(body, dict):
        body = {"text": str(body)[:300]}
    msg = body.get("message") or body.get("error") or body.get("text")
    print(f"[error] HTTP {resp.status_code} for {url}\n  -> {msg}")


def decode_json(resp: requests.Response, url: str) -> Any:
    """Return the JSON body or raise ResponseDecodeError."""
    try:
        return resp.json()
    except ValueError as exc:
        raise ResponseDecodeError(
            f"malformed JSON body from {url}: {(resp.text or '')[:200]}",
            status=resp.status_code,
            url=url,
        ) from exc


def send(session: requests.Session, method: str, url: str, *, timeout: int, **kwargs) -> requests.Response:
    """Issue one request, mapping network failures and non-2xx statuses to TransportError."""
    try:
        resp = session.request(method, url, timeout=timeout, **kwargs)
    except requests.RequestException as exc:
        raise TransportError(f"{method} {url} failed: {exc}", url=url) from exc
    if not 200 <= resp.status_code < 300:
        log_http_error(resp, url)
        raise TransportError(
            f"{method} {url} returned HTTP {resp.status_code}",
            status=resp.status_code,
            url=url,
        )
    return resp


class GitHubClient:
    """Owns the authenticated session used for GraphQL page queries and REST calls."""

    def __init__(
        self,
        token: Optional[str],
        *,
        base_url: str = BASE_URL,
        graphql_url: str = GRAPHQL_URL,
        timeout: int = REQUEST_TIMEOUT,
        debug: bool = False,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.graphql_url = graphql_url
        self.timeout = timeout
        self.debug = bool(debug)
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "User-Agent": USER_AGENT,
            }
        )
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        else:
            print("[warn] no GitHub token configured; GraphQL queries will be rejected")

    def log_debug(self, message: str) -> None:
        if self.debug:
            print(f"[debug] {message}")

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        path = path if path.startswith("/") else f"/{path}"
        return f"{self.base_url}{path}"

    def run_graphql_query(self, request: GraphQLRequest) -> Dict[str, Any]:
        """Execute a GraphQL request and return its `data` object."""
        payload = request.to_payload()
        self.log_debug(f"graphql variables: {payload['variables']}")
        resp = send(self.session, "POST", self.graphql_url, timeout=self.timeout, json=payload)
        body = decode_json(resp, self.graphql_url)
        if not isinstance(body, dict):
            raise ResponseDecodeError(
                f"unexpected GraphQL response: {body!r}", status=resp.status_code, url=self.graphql_url
            )
        if body.get("errors"):
            messages = ", ".join(
                str(err.get("message")) for err in body["errors"] if isinstance(err, dict)
            )
            raise TransportError(
                f"GraphQL error: {messages or body['errors']}",
                status=resp.status_code,
                url=self.graphql_url,
            )
        data = body.get("data")
        if not isinstance(data, dict):
            raise ResponseDecodeError(
                "GraphQL response has no 'data' object", status=resp.status_code, url=self.graphql_url
            )
        self.log_debug(f"graphql response: {data}")
        return data

    def request_json(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        """Perform one REST v3 call and return the decoded JSON body."""
        url = self._url(path)
        kwargs: Dict[str, Any] = {}
        if payload is not None:
            kwargs["json"] = payload
        resp = send(self.session, method, url, timeout=self.timeout, **kwargs)
        data = decode_json(resp, url)
        self.log_debug(f"{method} {url} -> {data}")
        return data


__all__ = [
    "log_http_error",
    "decode_json",
    "send",
    "GitHubClient",
]
