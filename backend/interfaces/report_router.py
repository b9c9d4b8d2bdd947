"""Report endpoints: per-user time entry reports over a date range."""
from __future__ import annotations

import logging
import re
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field

from application.report_service import ReportService
from infrastructure.repository import ActivityBackend, BackendFetchError
from interfaces import deps

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["report"])

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ReportRequest(BaseModel):
    userIds: List[int] = Field(..., description="Redmine user ids to report on")
    from_: str = Field(..., alias="from", description="first day, YYYY-MM-DD (inclusive)")
    to: str = Field(..., description="last day, YYYY-MM-DD (inclusive)")


class PerUserReport(BaseModel):
    userId: int
    report: str


class ReportResponse(BaseModel):
    reports: List[PerUserReport]


def parse_report_date(value: str, field_name: str) -> date:
    """Strict YYYY-MM-DD; anything else is a client error."""
    if not DATE_PATTERN.match(value or ""):
        raise HTTPException(status_code=400, detail=f"Invalid {field_name}: expected YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid {field_name}: {exc}") from exc


async def _generate(
    request: Request,
    user_ids: List[int],
    from_: str,
    to: str,
    backend: ActivityBackend,
) -> ReportResponse:
    client: Optional[str] = request.client.host if request.client else None
    logger.info("[report] Got a request from %s for users %s", client, user_ids)

    start = parse_report_date(from_, "from")
    end = parse_report_date(to, "to")

    try:
        reports = await ReportService(backend).aggregate_report(user_ids, start, end)
    except BackendFetchError as exc:
        logger.error("[report] Upstream fetch failed: %s", exc)
        raise HTTPException(status_code=500, detail=f"Upstream fetch failed: {exc}") from exc

    return ReportResponse(
        reports=[PerUserReport(userId=item.user_id, report=item.report) for item in reports]
    )


@router.post("", response_model=ReportResponse)
async def generate_report(
    payload: ReportRequest,
    request: Request,
    backend: ActivityBackend = Depends(deps.get_backend),
) -> ReportResponse:
    return await _generate(request, payload.userIds, payload.from_, payload.to, backend)


@router.get("", response_model=ReportResponse)
async def get_report(
    request: Request,
    userId: List[int] = Query(..., description="repeat for several users"),
    from_: str = Query(..., alias="from"),
    to: str = Query(...),
    backend: ActivityBackend = Depends(deps.get_backend),
) -> ReportResponse:
    return await _generate(request, userId, from_, to, backend)
