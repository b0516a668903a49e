"""Tests for src.aggregation.models covering identifiers, timestamps and the aggregate.

Run with coverage:
    pytest tests/test_models.py --maxfail=1 -v --cov=src.aggregation.models --cov-report=term-missing
"""

import datetime as dt

import pytest

from src.aggregation import models
from src.aggregation.errors import InputValidationError, ResponseDecodeError


def test_repo_id_parse_valid():
    repo = models.RepoId.parse("fabric8-services/fabric8-auth")
    assert repo.owner == "fabric8-services"
    assert repo.name == "fabric8-auth"
    assert str(repo) == "fabric8-services/fabric8-auth"


@pytest.mark.parametrize("raw", ["noslash", "a/b/c", "/name", "owner/", "", "  "])
def test_repo_id_parse_rejects_malformed(raw):
    with pytest.raises(InputValidationError):
        models.RepoId.parse(raw)


def test_parse_since_is_midnight_utc():
    since = models.parse_since("2019-01-01")
    assert since == dt.datetime(2019, 1, 1, tzinfo=dt.timezone.utc)


@pytest.mark.parametrize("raw", [None, "", "01/01/2019", "2019-13-01"])
def test_parse_since_rejects_bad_dates(raw):
    with pytest.raises(InputValidationError):
        models.parse_since(raw)


def test_parse_github_timestamp():
    ts = models.parse_github_timestamp("2018-11-05T02:44:39Z")
    assert ts == dt.datetime(2018, 11, 5, 2, 44, 39, tzinfo=dt.timezone.utc)
    with pytest.raises(ResponseDecodeError):
        models.parse_github_timestamp("yesterday")
    with pytest.raises(ResponseDecodeError):
        models.parse_github_timestamp(None)


def test_pull_request_from_node_requires_number():
    pr = models.PullRequestRecord.from_node(
        {"number": 709, "title": "Upgrade", "mergedAt": "2018-11-01T07:30:04Z", "permalink": "p"}
    )
    assert pr.number == 709
    assert pr.merged_at_datetime.year == 2018
    with pytest.raises(ResponseDecodeError):
        models.PullRequestRecord.from_node({"title": "no number"})


def test_workflow_event_reads_pipeline_name():
    event = models.WorkflowEvent.from_payload({"to_pipeline": {"name": "In Progress"}})
    assert event.to_stage == "In Progress"
    assert models.WorkflowEvent.from_payload({}).to_stage == ""
    with pytest.raises(ResponseDecodeError):
        models.WorkflowEvent.from_payload(["bad"])


def test_page_exhausted_only_when_signaled():
    assert models.Page(records=[], has_more=False).exhausted is True
    assert models.Page(records=[], has_more=None).exhausted is False
    assert models.Page(records=[], cursor="", has_more=True).exhausted is False


def test_aggregate_to_dict_sorts_and_drops_empty():
    pr = models.PullRequestRecord(3, "c", "2019-01-05T00:00:00Z", "p3")
    pr_low = models.PullRequestRecord(1, "a", "2019-01-04T00:00:00Z", "p1")
    result = models.AggregateResult(
        merged_prs={"b/y": {3: pr, 1: pr_low}, "a/x": {}},
        in_progress_issues={"a/x": {5: models.IssueRecord(5, "i", "u")}},
    )
    data = result.to_dict()
    assert list(data["merged_prs"]) == ["b/y"]
    assert [entry["number"] for entry in data["merged_prs"]["b/y"]] == [1, 3]
    assert data["in_progress_issues"]["a/x"] == [{"number": 5, "title": "i", "url": "u"}]
