from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response

from godown.application import get_productivity_service
from godown.application.productivity import PERIODS
from godown.exporters.production_csv import export_production_report

router = APIRouter(prefix="/analytics", tags=["analytics"])


def _check_period(period: str) -> str:
    if period not in PERIODS:
        raise HTTPException(status_code=400, detail=f"period must be one of {', '.join(PERIODS)}")
    return period


@router.get("/productivity")
async def productivity_summary() -> dict:
    return get_productivity_service().summary()


@router.get("/daily-report")
async def daily_report(period: str = Query(default="day")) -> dict:
    return get_productivity_service().daily_report(_check_period(period))


@router.get("/daily-report/export")
async def export_daily_report(period: str = Query(default="day")) -> Response:
    """Download the entries of a production report as CSV."""
    report = get_productivity_service().daily_report(_check_period(period))
    content = export_production_report(report["entries"])
    filename = f"production-report-{period}-{report['startDate'][:10]}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
