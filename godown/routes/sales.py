from __future__ import annotations

from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response
from pydantic import ValidationError as PydanticValidationError

from godown.application import SourceImportError, get_sales_service
from godown.core.sales_filters import SalesFilters
from godown.core.schema import DataSourceCreate
from godown.core.validation import ValidationError, parse_payload
from godown.exporters.sales_csv import export_sales_kpis

router = APIRouter(tags=["sales"])


@router.get("/data-sources")
async def list_sources() -> list[dict]:
    return [asdict(source) for source in get_sales_service().list_sources()]


@router.post("/data-sources", status_code=201)
async def create_source(payload: dict) -> dict:
    try:
        source = get_sales_service().create_source(parse_payload(DataSourceCreate, payload))
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return asdict(source)


@router.delete("/data-sources/{source_id}")
async def delete_source(source_id: int) -> dict:
    try:
        get_sales_service().delete_source(source_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"data source {source_id} not found") from exc
    return {"id": source_id, "deleted": True}


@router.post("/data-sources/{source_id}/import")
async def import_source(source_id: int) -> dict:
    """Fetch one source now and record its row count and date range."""
    try:
        source = await get_sales_service().import_source(source_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"data source {source_id} not found") from exc
    except SourceImportError as exc:
        raise HTTPException(status_code=502, detail=f"import failed: {exc}") from exc
    return asdict(source)


def _filters(
    start_date: str | None,
    end_date: str | None,
    marketplace: str | None,
    status: str | None,
    payment_mode: str | None,
) -> SalesFilters:
    try:
        return SalesFilters(
            startDate=start_date,
            endDate=end_date,
            marketplace=marketplace,
            status=status,
            paymentMode=payment_mode,
        )
    except PydanticValidationError as exc:
        raise HTTPException(status_code=400, detail="startDate and endDate must be YYYY-MM-DD") from exc


@router.get("/sales-analysis")
async def sales_analysis(
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    marketplace: str | None = Query(default=None),
    status: str | None = Query(default=None),
    payment_mode: str | None = Query(default=None, alias="paymentMode"),
) -> dict:
    filters = _filters(start_date, end_date, marketplace, status, payment_mode)
    report = await get_sales_service().analyse(filters)
    return report.model_dump()


@router.get("/sales-analysis/export")
async def export_sales_analysis(
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    marketplace: str | None = Query(default=None),
    status: str | None = Query(default=None),
    payment_mode: str | None = Query(default=None, alias="paymentMode"),
) -> Response:
    filters = _filters(start_date, end_date, marketplace, status, payment_mode)
    report = await get_sales_service().analyse(filters)
    filename = f"sales-kpis-{date.today().isoformat()}.csv"
    return Response(
        content=export_sales_kpis(report.kpis),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
