"""Redmine REST client: paginated time entries and batched issue lookups."""
from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel

from app.config import RedmineSettings
from domain.time_entry import IssueSummary, TimeEntry
from .models import IssuesPage, TimeEntriesPage
from .repository import ActivityBackend, BackendFetchError

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER = "X-Redmine-API-Key"
# Redmine caps `limit` at 100 by default; also the issue_id batch size.
PAGE_SIZE = 100

PageT = TypeVar("PageT", bound=BaseModel)


def chunked(items: List[int], size: int = PAGE_SIZE) -> List[List[int]]:
    return [items[start:start + size] for start in range(0, len(items), size)]


class RedmineClient(ActivityBackend):
    """Async Redmine reader. One instance per request; close it with ``aclose``."""

    def __init__(
        self,
        settings: RedmineSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.url,
            headers={AUTHORIZATION_HEADER: settings.api_key},
            timeout=settings.timeout_seconds,
            transport=transport,
        )

    def __repr__(self) -> str:
        return f"RedmineClient(site={self.settings.url!r}, api_key='PRIVATE')"

    async def __aenter__(self) -> "RedmineClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_api(
        self,
        endpoint: str,
        options: Dict[str, str],
        offset: int,
        schema: Type[PageT],
    ) -> PageT:
        params: Dict[str, Any] = {"offset": offset, "limit": PAGE_SIZE, **options}
        logger.debug("[redmine] try to call %s/%s.json %s", self.settings.url, endpoint, params)
        try:
            response = await self._client.get(f"/{endpoint}.json", params=params)
            response.raise_for_status()
            return schema.model_validate(response.json())
        except httpx.HTTPError as exc:
            raise BackendFetchError(f"get {endpoint} {options} failed: {exc}") from exc
        except ValueError as exc:
            # json decode errors and pydantic ValidationError both land here
            raise BackendFetchError(f"decode {endpoint} {options} failed: {exc}") from exc

    async def fetch_entries(self, user_id: int, start: date, end: date) -> List[TimeEntry]:
        options = {
            "user_id": str(user_id),
            "from": start.isoformat(),
            "to": end.isoformat(),
        }
        entries: List[TimeEntry] = []
        total_count: Optional[int] = None
        offset = 0

        while total_count is None or len(entries) < total_count:
            page = await self._get_api("time_entries", options, offset, TimeEntriesPage)
            if total_count is None:
                total_count = page.total_count
            offset += PAGE_SIZE

            entries.extend(item.to_domain() for item in page.time_entries)
            logger.info(
                "[redmine] Fetch time entries for user %s: %d/%d",
                user_id,
                len(entries),
                total_count,
            )
            if not page.time_entries and len(entries) < total_count:
                raise BackendFetchError(
                    f"get time_entries {options} failed: empty page at offset {offset - PAGE_SIZE}, "
                    f"got {len(entries)} of {total_count}"
                )

        return entries

    async def _fetch_issue_chunk(self, chunk: List[int]) -> List[IssueSummary]:
        options = {"issue_id": ",".join(str(issue_id) for issue_id in chunk), "status_id": "*"}
        page = await self._get_api("issues", options, 0, IssuesPage)
        return [item.to_domain() for item in page.issues]

    async def fetch_issues(self, issue_ids: Iterable[int]) -> Dict[int, IssueSummary]:
        ordered = sorted(set(issue_ids))
        if not ordered:
            return {}
        chunks = chunked(ordered)
        logger.info("[redmine] Fetch %d issues in %d batch(es)", len(ordered), len(chunks))
        batches = await asyncio.gather(*(self._fetch_issue_chunk(chunk) for chunk in chunks))
        return {issue.issue_id: issue for batch in batches for issue in batch}
