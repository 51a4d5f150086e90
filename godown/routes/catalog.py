from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from godown.application import get_catalog_service
from godown.core.schema import EmployeeUpdate, NamedItem
from godown.core.validation import ValidationError, parse_payload
from godown.infrastructure.repository import CatalogKind

router = APIRouter(tags=["catalog"])


def _not_found(exc: KeyError) -> HTTPException:
    return HTTPException(status_code=404, detail=exc.args[0] if exc.args else "not found")


@router.get("/employees")
async def list_employees() -> list[dict]:
    return [asdict(employee) for employee in get_catalog_service().list_employees()]


@router.get("/employees/active")
async def list_active_employees() -> list[dict]:
    return [asdict(employee) for employee in get_catalog_service().list_employees(active_only=True)]


@router.post("/employees", status_code=201)
async def create_employee(payload: dict) -> dict:
    try:
        item = parse_payload(NamedItem, payload)
        employee = get_catalog_service().create_employee(item.name)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return asdict(employee)


@router.put("/employees/{employee_id}")
async def update_employee(employee_id: int, payload: dict) -> dict:
    try:
        changes = parse_payload(EmployeeUpdate, payload)
        employee = get_catalog_service().update_employee(employee_id, name=changes.name, active=changes.active)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except KeyError as exc:
        raise _not_found(exc) from exc
    return asdict(employee)


@router.patch("/employees/{employee_id}/toggle")
async def toggle_employee(employee_id: int) -> dict:
    try:
        employee = get_catalog_service().toggle_employee(employee_id)
    except KeyError as exc:
        raise _not_found(exc) from exc
    return asdict(employee)


def _register_catalog(path: str, kind: CatalogKind) -> None:
    """Wire list/create/rename/delete endpoints for one named catalog."""

    async def list_items() -> list[dict]:
        return [asdict(item) for item in get_catalog_service().list_items(kind)]

    async def create_item(payload: dict) -> dict:
        try:
            item = parse_payload(NamedItem, payload)
            created = get_catalog_service().create_item(kind, item.name)
        except ValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return asdict(created)

    async def rename_item(item_id: int, payload: dict) -> dict:
        try:
            item = parse_payload(NamedItem, payload)
            renamed = get_catalog_service().rename_item(kind, item_id, item.name)
        except ValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except KeyError as exc:
            raise _not_found(exc) from exc
        return asdict(renamed)

    async def delete_item(item_id: int) -> dict:
        try:
            get_catalog_service().delete_item(kind, item_id)
        except KeyError as exc:
            raise _not_found(exc) from exc
        return {"id": item_id, "deleted": True}

    router.add_api_route(path, list_items, methods=["GET"], name=f"list_{kind}")
    router.add_api_route(path, create_item, methods=["POST"], status_code=201, name=f"create_{kind}")
    router.add_api_route(f"{path}/{{item_id}}", rename_item, methods=["PUT"], name=f"rename_{kind}")
    router.add_api_route(f"{path}/{{item_id}}", delete_item, methods=["DELETE"], name=f"delete_{kind}")


_register_catalog("/work-types", "work_types")
_register_catalog("/products", "products")
_register_catalog("/units", "units")
_register_catalog("/expense-categories", "expense_categories")


@router.get("/settings")
async def get_settings() -> dict:
    return get_catalog_service().get_settings()


@router.put("/settings")
async def update_settings(payload: dict) -> dict:
    try:
        return get_catalog_service().update_settings(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
