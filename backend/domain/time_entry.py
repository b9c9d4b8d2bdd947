"""Time entries and issue summaries as read from the tracker."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class TimeEntryUser:
    user_id: int
    name: str


@dataclass(frozen=True)
class TimeEntry:
    """A single logged unit of work: hours + note for one user, one issue, one day."""

    entry_id: int
    hours: float
    comments: str
    user: TimeEntryUser
    issue_id: int
    spent_on: date


@dataclass(frozen=True)
class IssueSummary:
    issue_id: int
    subject: str
