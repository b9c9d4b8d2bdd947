"""Pydantic schemas mirroring the Redmine JSON payloads.

Every field the pipeline needs is required; a response missing one fails
validation and is reported as a fetch error by the client.
"""
from __future__ import annotations

from datetime import date
from typing import List

from pydantic import BaseModel, Field

from domain.time_entry import IssueSummary, TimeEntry, TimeEntryUser


class UserRef(BaseModel):
    id: int
    name: str


class IssueRef(BaseModel):
    id: int


class TimeEntryModel(BaseModel):
    id: int
    hours: float = Field(..., ge=0.0, allow_inf_nan=False)
    comments: str
    user: UserRef
    issue: IssueRef
    spent_on: date

    def to_domain(self) -> TimeEntry:
        return TimeEntry(
            entry_id=self.id,
            hours=self.hours,
            comments=self.comments,
            user=TimeEntryUser(user_id=self.user.id, name=self.user.name),
            issue_id=self.issue.id,
            spent_on=self.spent_on,
        )


class TimeEntriesPage(BaseModel):
    total_count: int = Field(..., ge=0)
    time_entries: List[TimeEntryModel]


class IssueModel(BaseModel):
    id: int
    subject: str

    def to_domain(self) -> IssueSummary:
        return IssueSummary(issue_id=self.id, subject=self.subject)


class IssuesPage(BaseModel):
    issues: List[IssueModel]
