"""Milestone administration commands."""

from .runner import main, run

__all__ = ["main", "run"]
