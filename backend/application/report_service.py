"""Report service: per-user time entry reports over a date range.

Flow for one request:

1. fetch + aggregate + rank every user's time entries concurrently;
2. collect the issue ids referenced by any user;
3. fetch all those issue titles (batched, concurrent);
4. render one markdown report per user with the shared title map.

Any backend failure aborts the whole request; no partial reports are built.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Iterable, List, Tuple

from domain.report import AggregatedIssue, UserReport
from infrastructure.repository import ActivityBackend
from .aggregator import collect_issue_ids, process_time_entries
from .renderer import render_report

logger = logging.getLogger(__name__)


class ReportService:
    def __init__(self, backend: ActivityBackend):
        self.backend = backend

    async def _collect_user(self, user_id: int, start: date, end: date) -> Tuple[int, List[AggregatedIssue]]:
        entries = await self.backend.fetch_entries(user_id, start, end)
        return user_id, process_time_entries(entries)

    async def aggregate_report(self, user_ids: Iterable[int], start: date, end: date) -> List[UserReport]:
        distinct_users = list(dict.fromkeys(user_ids))
        collected = await asyncio.gather(
            *(self._collect_user(user_id, start, end) for user_id in distinct_users)
        )

        issue_ids = collect_issue_ids(issues for _, issues in collected)
        titles = await self.backend.fetch_issues(issue_ids)

        reports = [
            UserReport(user_id=user_id, report=render_report(issues, titles))
            for user_id, issues in collected
        ]
        logger.info(
            "[report] %d report(s) for %s..%s covering %d issue(s)",
            len(reports),
            start.isoformat(),
            end.isoformat(),
            len(issue_ids),
        )
        return reports
