"""Abstract gateway to the activity-tracking backend."""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, Iterable, List

from domain.time_entry import IssueSummary, TimeEntry


class BackendFetchError(RuntimeError):
    """Raised when a read against the tracker fails (transport, status or payload)."""


class ActivityBackend(ABC):
    """Unified gateway so the Redmine client and the memory store share the same API."""

    @abstractmethod
    async def fetch_entries(self, user_id: int, start: date, end: date) -> List[TimeEntry]:
        """All time entries of ``user_id`` spent between ``start`` and ``end`` (inclusive)."""
        raise NotImplementedError

    @abstractmethod
    async def fetch_issues(self, issue_ids: Iterable[int]) -> Dict[int, IssueSummary]:
        """Issue summaries keyed by issue id, looked up regardless of status."""
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release transport resources held by the backend, if any."""
        return None
