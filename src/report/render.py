"""Rendering of the aggregate into AsciiDoc or JSON, and the output sink."""

from __future__ import annotations

import datetime as dt
import json
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional, TextIO

from src.aggregation.models import AggregateResult

from .config import STDOUT_OUTPUT

FILE_EXTENSIONS = {"asciidoc": "adoc", "json": "json"}


def _section(title: str, entries: Dict[str, List[dict]], link_key: str) -> List[str]:
    lines = [title, ""]
    for repo, records in entries.items():
        lines.append(f"* {repo}:")
        for record in records:
            lines.append(f"** {record[link_key]}[{record['number']}] {record['title']}")
        lines.append("")
    lines.append("")
    return lines


def render_asciidoc(result: AggregateResult) -> str:
    data = result.to_dict()
    lines = _section("Done since last week:", data["merged_prs"], "permalink")
    lines += _section("Currently working on:", data["in_progress_issues"], "url")
    return "\n".join(lines)


def render_json(result: AggregateResult) -> str:
    return json.dumps(result.to_dict(), indent=2, ensure_ascii=False) + "\n"


def render(result: AggregateResult, output_format: str) -> str:
    if output_format == "json":
        return render_json(result)
    if output_format == "asciidoc":
        return render_asciidoc(result)
    raise ValueError(f"unsupported output format '{output_format}'")


def report_path(output_dir: str, output_format: str, today: Optional[dt.date] = None) -> Path:
    today = today or dt.date.today()
    return Path(output_dir) / f"changelog-{today.isoformat()}.{FILE_EXTENSIONS[output_format]}"


def write_report(text: str,
                 output: str,
                 output_format: str,
                 *,
                 today: Optional[dt.date] = None,
                 stream: Optional[TextIO] = None) -> Optional[Path]:
    """Write to stdout for '-', otherwise into a dated file under `output`."""
    if output == STDOUT_OUTPUT:
        (stream or sys.stdout).write(text)
        return None
    os.makedirs(output, exist_ok=True)
    path = report_path(output, output_format, today)
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(text)
    return path


__all__ = [
    "FILE_EXTENSIONS",
    "render_asciidoc",
    "render_json",
    "render",
    "report_path",
    "write_report",
]
