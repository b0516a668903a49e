"""Report command rendering the aggregated changelog."""

from .runner import generate_report, main

__all__ = ["generate_report", "main"]
