"""Error taxonomy shared by the aggregation clients, walkers and commands."""

from __future__ import annotations

from typing import Optional


class ChangelogError(RuntimeError):
    """Base class for every failure raised by the aggregation code."""


class InputValidationError(ChangelogError):
    """A repository identifier, date or size was rejected before any network call."""


class TransportError(ChangelogError):
    """The remote API could not be reached or answered with a non-success status."""

    def __init__(self, message: str, *, status: Optional[int] = None, url: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.url = url


class ResponseDecodeError(TransportError):
    """The response body was not JSON or did not have the expected shape."""


class NoOpenMilestoneError(ChangelogError):
    """The repository has no open milestone to collect issues from."""


class MilestoneNotFoundError(ChangelogError):
    """No milestone with the requested title exists in the repository."""


__all__ = [
    "ChangelogError",
    "InputValidationError",
    "TransportError",
    "ResponseDecodeError",
    "NoOpenMilestoneError",
    "MilestoneNotFoundError",
]
