from __future__ import annotations

from fastapi import APIRouter, HTTPException

from godown.application import get_expense_service
from godown.core.schema import ExpenseCreate, ExpenseStatusUpdate, ExpenseUpdate
from godown.core.validation import ConflictError, ValidationError, parse_payload

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("")
async def list_expenses() -> list[dict]:
    return get_expense_service().list_expenses()


@router.post("", status_code=201)
async def record_expense(payload: dict) -> dict:
    """Record a purchase; replacements retire the expense they replace."""
    service = get_expense_service()
    try:
        expense = service.record_expense(parse_payload(ExpenseCreate, payload))
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return service.describe([expense])[0]


@router.put("/{expense_id}")
async def update_expense(expense_id: int, payload: dict) -> dict:
    service = get_expense_service()
    try:
        expense = service.update_expense(expense_id, parse_payload(ExpenseUpdate, payload))
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"expense {expense_id} not found") from exc
    return service.describe([expense])[0]


@router.patch("/{expense_id}/status")
async def set_expense_status(expense_id: int, payload: dict) -> dict:
    service = get_expense_service()
    try:
        change = parse_payload(ExpenseStatusUpdate, payload)
        expense = service.set_status(expense_id, change.status)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"expense {expense_id} not found") from exc
    return service.describe([expense])[0]


@router.delete("/{expense_id}")
async def delete_expense(expense_id: int) -> dict:
    try:
        get_expense_service().delete_expense(expense_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"expense {expense_id} not found") from exc
    return {"id": expense_id, "deleted": True}
