"""Tests for src.aggregation.zenhub_client covering the issue event lookup.

Run with coverage:
    pytest tests/test_zenhub_client.py --maxfail=1 -v --cov=src.aggregation.zenhub_client --cov-report=term-missing
"""

from unittest.mock import MagicMock, patch

import pytest

from src.aggregation.errors import ResponseDecodeError, TransportError
from src.aggregation.zenhub_client import ZenHubClient


def _resp(status=200, payload=None):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload
    resp.text = str(payload)
    return resp


def _client(mock_session_cls):
    session = MagicMock()
    session.headers = {}
    mock_session_cls.return_value = session
    return ZenHubClient("zh-token"), session


@patch("src.aggregation.zenhub_client.requests.Session")
def test_get_issue_events_parses_most_recent_first(mock_session_cls):
    client, session = _client(mock_session_cls)
    session.request.return_value = _resp(200, [
        {"to_pipeline": {"name": "Review/QA"}},
        {"to_pipeline": {"name": "In Progress"}},
    ])
    events = client.get_issue_events(144640567, 59)
    assert [event.to_stage for event in events] == ["Review/QA", "In Progress"]
    args, _ = session.request.call_args
    assert args == ("GET", "https://api.zenhub.io/p1/repositories/144640567/issues/59/events")
    assert session.headers["X-Authentication-Token"] == "zh-token"


@patch("src.aggregation.zenhub_client.requests.Session")
def test_get_issue_events_rejects_non_list(mock_session_cls):
    client, session = _client(mock_session_cls)
    session.request.return_value = _resp(200, {"message": "nope"})
    with pytest.raises(ResponseDecodeError):
        client.get_issue_events(1, 2)


@patch("src.aggregation.zenhub_client.requests.Session")
def test_get_issue_events_non_success(mock_session_cls):
    client, session = _client(mock_session_cls)
    session.request.return_value = _resp(401, {"message": "Invalid token"})
    with pytest.raises(TransportError) as excinfo:
        client.get_issue_events(1, 2)
    assert excinfo.value.status == 401
