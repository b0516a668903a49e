"""Aggregates merged pull requests and in-progress issues across repositories."""

from .fanout import aggregate, fan_out, list_issues_in_progress, list_merged_pull_requests

__all__ = ["aggregate", "fan_out", "list_issues_in_progress", "list_merged_pull_requests"]
