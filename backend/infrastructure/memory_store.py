"""In-memory backend intended for local development and tests."""
from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import yaml

from domain.time_entry import IssueSummary, TimeEntry
from .models import IssuesPage, TimeEntryModel
from .repository import ActivityBackend


class InMemoryActivityBackend(ActivityBackend):
    def __init__(
        self,
        entries: Optional[Iterable[TimeEntry]] = None,
        issues: Optional[Iterable[IssueSummary]] = None,
    ):
        self._entries: List[TimeEntry] = list(entries or [])
        self._issues: Dict[int, IssueSummary] = {issue.issue_id: issue for issue in issues or []}

    @classmethod
    def from_seed_file(cls, path: Path) -> "InMemoryActivityBackend":
        """Load entries and issues from a YAML file shaped like the Redmine payloads.

        Expected keys: ``time_entries`` (list of time entry objects) and
        ``issues`` (list of ``{id, subject}``); both optional.
        """
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Seed file {path} must define a mapping at the top level.")
        entries = [TimeEntryModel.model_validate(item).to_domain() for item in data.get("time_entries") or []]
        issues = IssuesPage.model_validate({"issues": data.get("issues") or []}).issues
        return cls(entries=entries, issues=[item.to_domain() for item in issues])

    async def fetch_entries(self, user_id: int, start: date, end: date) -> List[TimeEntry]:
        return [
            entry
            for entry in self._entries
            if entry.user.user_id == user_id and start <= entry.spent_on <= end
        ]

    async def fetch_issues(self, issue_ids: Iterable[int]) -> Dict[int, IssueSummary]:
        # like Redmine, unknown ids are simply absent from the result
        return {issue_id: self._issues[issue_id] for issue_id in set(issue_ids) if issue_id in self._issues}
