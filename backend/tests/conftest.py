"""Shared fixtures. The memory backend is selected before any app module loads settings."""
from __future__ import annotations

import os

os.environ["REPORT_BACKEND"] = "memory"

from datetime import date  # noqa: E402
from typing import Dict, Iterable, List  # noqa: E402

import pytest  # noqa: E402

from domain.time_entry import IssueSummary, TimeEntry, TimeEntryUser  # noqa: E402
from infrastructure.memory_store import InMemoryActivityBackend  # noqa: E402

YESTERDAY = date(2021, 1, 1)
TODAY = date(2021, 1, 2)


def make_entry(
    entry_id: int,
    hours: float,
    comments: str,
    issue_id: int,
    spent_on: date,
    user_id: int = 1,
) -> TimeEntry:
    return TimeEntry(
        entry_id=entry_id,
        hours=hours,
        comments=comments,
        user=TimeEntryUser(user_id=user_id, name=f"User {user_id}"),
        issue_id=issue_id,
        spent_on=spent_on,
    )


@pytest.fixture
def raw_time_entries() -> List[TimeEntry]:
    """One user, six issues; issue 4 has two entries whose id order differs from date order."""
    return [
        make_entry(5, 1.0, "Note 5", 1, TODAY),
        make_entry(4, 2.0, "Note 4", 1, TODAY),
        make_entry(3, 5.0, "Note 3", 2, YESTERDAY),
        make_entry(2, 8.0, "Note 2", 4, YESTERDAY),
        make_entry(1, 8.0, "Note 1", 4, TODAY),
        make_entry(8, 8.0, "Note 8", 3, TODAY),
        make_entry(9, 8.0, "Note 9", 5, TODAY),
        make_entry(10, 8.0, "Note 10", 6, TODAY),
    ]


@pytest.fixture
def issue_titles() -> dict:
    return {issue_id: IssueSummary(issue_id=issue_id, subject=f"Issue {issue_id}") for issue_id in range(1, 7)}


EXPECTED_REPORT = (
    "* **#4: Issue 4**\n\n  Note 2  \n  Note 1  \n\n"
    "* **#3: Issue 3**\n\n  Note 8  \n\n"
    "* **#5: Issue 5**\n\n  Note 9  \n\n"
    "* **#6: Issue 6**\n\n  Note 10  \n\n"
    "* **#2: Issue 2**\n\n  Note 3  \n\n"
    "* **#1: Issue 1**\n\n  Note 4  \n  Note 5  \n\n"
)


@pytest.fixture
def expected_report() -> str:
    return EXPECTED_REPORT


class RecordingBackend(InMemoryActivityBackend):
    """Memory backend that remembers which users and issue batches were asked for."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.entry_requests: List[int] = []
        self.issue_requests: List[List[int]] = []

    async def fetch_entries(self, user_id: int, start: date, end: date) -> List[TimeEntry]:
        self.entry_requests.append(user_id)
        return await super().fetch_entries(user_id, start, end)

    async def fetch_issues(self, issue_ids: Iterable[int]) -> Dict[int, IssueSummary]:
        wanted = sorted(set(issue_ids))
        if wanted:
            self.issue_requests.append(wanted)
        return await super().fetch_issues(wanted)
