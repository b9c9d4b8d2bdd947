"""Per-user rollups produced by the report pipeline."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AggregatedIssue:
    """Hours and notes of one user on one issue.

    ``comments`` already holds the rendered note lines, oldest first, each
    formatted as a markdown hard line break (``"  note  \\n"``).
    """

    issue_id: int
    hours: float
    comments: str

    def rank_key(self) -> tuple[float, int]:
        """Most hours first; equal hours fall back to the lower issue id."""
        return (-self.hours, self.issue_id)


@dataclass(frozen=True)
class UserReport:
    user_id: int
    report: str
