"""Tests for the report command: argument parsing, rendering and the output sink.

Run with coverage:
    pytest tests/test_report.py --maxfail=1 -v --cov=src.report --cov-report=term-missing
"""

import datetime as dt
import io
import json

import pytest
from unittest.mock import patch

from src.aggregation.config import DEFAULT_REPOS
from src.aggregation.errors import InputValidationError
from src.aggregation.models import AggregateResult, IssueRecord, PullRequestRecord
from src.report import config as report_config
from src.report import render, runner


@pytest.fixture(autouse=True)
def no_local_secrets(monkeypatch, tmp_path):
    monkeypatch.setenv("LOCAL_SECRETS_FILE", str(tmp_path / "missing.json"))
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("ZENHUB_TOKEN", raising=False)


def _sample_result():
    return AggregateResult(
        merged_prs={
            "a/x": {
                12: PullRequestRecord(12, "Add tenant cleanup", "2019-01-05T10:00:00Z",
                                      "https://github.com/a/x/pull/12"),
                9: PullRequestRecord(9, "Fix token refresh", "2019-01-03T08:00:00Z",
                                     "https://github.com/a/x/pull/9"),
            },
            "a/y": {},
        },
        in_progress_issues={
            "a/x": {59: IssueRecord(59, "Cluster capacity", "https://github.com/a/x/issues/59")},
        },
    )


def test_parse_args_defaults():
    args = report_config.parse_args(["-s", "2019-01-01"])
    assert args.repositories is None
    assert args.output == "tmp"
    assert args.output_format == "asciidoc"
    assert args.debug is False


def test_parse_args_rejects_unknown_format():
    with pytest.raises(SystemExit):
        report_config.parse_args(["-s", "2019-01-01", "-f", "html"])


def test_resolve_settings_merges_and_sorts_repositories():
    args = report_config.parse_args(["-s", "2019-01-01", "-r", "b/y,a/x", "-r", "c/z", "--debug"])
    settings = report_config.resolve_settings(args)
    assert settings.since == dt.datetime(2019, 1, 1, tzinfo=dt.timezone.utc)
    assert settings.aggregation.repos == ("a/x", "b/y", "c/z")
    assert settings.aggregation.debug is True


def test_resolve_settings_uses_default_repositories():
    settings = report_config.resolve_settings(report_config.parse_args(["-s", "2019-01-01"]))
    assert settings.aggregation.repos == tuple(sorted(DEFAULT_REPOS))


@pytest.mark.parametrize("argv", [[], ["-s", "01/01/2019"], ["-s", "2019-13-01"]])
def test_resolve_settings_requires_valid_since(argv):
    with pytest.raises(InputValidationError):
        report_config.resolve_settings(report_config.parse_args(argv))


def test_render_asciidoc_sections():
    text = render.render_asciidoc(_sample_result())
    lines = text.splitlines()
    assert lines[0] == "Done since last week:"
    assert "* a/x:" in lines
    assert "* a/y:" not in lines
    merged = [line for line in lines if line.startswith("** https://github.com/a/x/pull/")]
    assert merged == [
        "** https://github.com/a/x/pull/9[9] Fix token refresh",
        "** https://github.com/a/x/pull/12[12] Add tenant cleanup",
    ]
    assert "Currently working on:" in lines
    assert "** https://github.com/a/x/issues/59[59] Cluster capacity" in lines


def test_render_json_is_sorted_and_drops_empty_repos():
    payload = json.loads(render.render(_sample_result(), "json"))
    assert list(payload) == ["merged_prs", "in_progress_issues"]
    assert list(payload["merged_prs"]) == ["a/x"]
    assert [pr["number"] for pr in payload["merged_prs"]["a/x"]] == [9, 12]
    assert payload["in_progress_issues"]["a/x"][0]["url"] == "https://github.com/a/x/issues/59"


def test_render_rejects_unknown_format():
    with pytest.raises(ValueError):
        render.render(_sample_result(), "html")


def test_write_report_to_dated_file(tmp_path):
    out_dir = tmp_path / "reports"
    path = render.write_report("hello\n", str(out_dir), "asciidoc", today=dt.date(2019, 1, 8))
    assert path == out_dir / "changelog-2019-01-08.adoc"
    assert path.read_text(encoding="utf-8") == "hello\n"


def test_write_report_to_stdout_stream():
    stream = io.StringIO()
    assert render.write_report("{}\n", "-", "json", stream=stream) is None
    assert stream.getvalue() == "{}\n"


def test_generate_report_writes_file(tmp_path, capsys):
    settings = report_config.resolve_settings(
        report_config.parse_args(["-s", "2019-01-01", "-r", "a/x", "-o", str(tmp_path), "-f", "json"])
    )
    with patch("src.report.runner.aggregate", return_value=_sample_result()) as agg:
        path = runner.generate_report(settings)

    agg.assert_called_once_with(settings.aggregation, settings.since)
    assert path.suffix == ".json"
    assert json.loads(path.read_text(encoding="utf-8"))["merged_prs"]["a/x"][0]["number"] == 9
    assert "DONE WRITING REPORT" in capsys.readouterr().out


def test_main_writes_to_stdout(capsys):
    with patch("src.report.runner.aggregate", return_value=AggregateResult()):
        runner.main(["-s", "2019-01-01", "-o", "-", "-f", "json"])
    out = capsys.readouterr().out
    assert '"merged_prs": {}' in out
    assert "DONE WRITING REPORT" not in out


def test_main_exits_on_invalid_since(capsys):
    with patch("src.report.runner.aggregate") as agg:
        with pytest.raises(SystemExit) as excinfo:
            runner.main(["-s", "yesterday"])
    assert excinfo.value.code == 1
    agg.assert_not_called()
    assert "[error] invalid value for the 'since' date 'yesterday'" in capsys.readouterr().out


def test_main_exits_on_empty_repository_list(capsys):
    with pytest.raises(SystemExit) as excinfo:
        runner.main(["-s", "2019-01-01", "-r", ","])
    assert excinfo.value.code == 1
    assert "[error] no repository given" in capsys.readouterr().out
