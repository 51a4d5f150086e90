from __future__ import annotations

from fastapi import APIRouter, HTTPException

from godown.application import get_catalog_service
from godown.core.schema import WorkEntryComplete, WorkEntryCreate, WorkEntryUpdate
from godown.core.validation import ConflictError, ValidationError, parse_payload

router = APIRouter(prefix="/work-entries", tags=["work-entries"])


@router.get("")
async def list_work_entries() -> list[dict]:
    return get_catalog_service().list_work_entries()


@router.post("", status_code=201)
async def start_work(payload: dict) -> dict:
    """Open an in-progress entry for an employee, stage and optional product."""
    service = get_catalog_service()
    try:
        entry = service.start_work(parse_payload(WorkEntryCreate, payload))
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return service.describe_entry(entry)


@router.put("/{entry_id}/complete")
async def complete_work(entry_id: int, payload: dict) -> dict:
    service = get_catalog_service()
    try:
        entry = service.complete_work(entry_id, parse_payload(WorkEntryComplete, payload))
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"work entry {entry_id} not found") from exc
    return service.describe_entry(entry)


@router.put("/{entry_id}")
async def update_work(entry_id: int, payload: dict) -> dict:
    service = get_catalog_service()
    try:
        entry = service.update_work(entry_id, parse_payload(WorkEntryUpdate, payload))
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"work entry {entry_id} not found") from exc
    return service.describe_entry(entry)


@router.delete("/{entry_id}")
async def delete_work(entry_id: int) -> dict:
    try:
        get_catalog_service().delete_work(entry_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"work entry {entry_id} not found") from exc
    return {"id": entry_id, "deleted": True}
