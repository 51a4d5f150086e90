"""Application service for the entity catalog and the work-entry lifecycle."""
from __future__ import annotations

from dataclasses import asdict, replace
from datetime import datetime, timezone
from typing import Any, Iterable

from godown.core.schema import WorkEntryComplete, WorkEntryCreate, WorkEntryUpdate
from godown.core.validation import ValidationError, ensure_editable, validate_name, validate_work_entry
from godown.domain import Employee, WorkEntry
from godown.domain.entities import STATUS_COMPLETE, STATUS_IN_PROGRESS
from godown.infrastructure import EntityStore
from godown.infrastructure.repository import CatalogItem, CatalogKind


def _ref(item: Any | None) -> dict[str, Any] | None:
    if item is None:
        return None
    return {"id": item.id, "name": item.name}


def describe_entries(store: EntityStore, entries: Iterable[WorkEntry]) -> list[dict[str, Any]]:
    """Serialise entries with the names of the employee, stage, product and unit."""

    employees = {emp.id: emp for emp in store.list_employees()}
    work_types = {item.id: item for item in store.list_catalog("work_types")}
    products = {item.id: item for item in store.list_catalog("products")}
    units = {item.id: item for item in store.list_catalog("units")}

    described: list[dict[str, Any]] = []
    for entry in entries:
        row = asdict(entry)
        row["employee"] = _ref(employees.get(entry.employee_id))
        row["work_type"] = _ref(work_types.get(entry.work_type_id))
        row["product"] = _ref(products.get(entry.product_id)) if entry.product_id is not None else None
        row["unit"] = _ref(units.get(entry.unit_id)) if entry.unit_id is not None else None
        described.append(row)
    return described


class CatalogService:
    """Coordinates employee, stage, product, unit, settings and work-entry use cases."""

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    # ------------------------------------------------------------------
    # employees
    # ------------------------------------------------------------------
    def list_employees(self, *, active_only: bool = False) -> list[Employee]:
        return self._store.list_employees(active_only=active_only)

    def create_employee(self, name: str | None) -> Employee:
        return self._store.add_employee(validate_name(name, "employee name"))

    def update_employee(self, employee_id: int, *, name: str | None = None, active: bool | None = None) -> Employee:
        if name is not None:
            name = validate_name(name, "employee name")
        return self._store.update_employee(employee_id, name=name, active=active)

    def toggle_employee(self, employee_id: int) -> Employee:
        current = self._store.get_employee(employee_id)
        return self._store.update_employee(employee_id, active=not current.active)

    # ------------------------------------------------------------------
    # work types, products, units
    # ------------------------------------------------------------------
    def list_items(self, kind: CatalogKind) -> list[CatalogItem]:
        return self._store.list_catalog(kind)

    def create_item(self, kind: CatalogKind, name: str | None) -> CatalogItem:
        return self._store.add_catalog_item(kind, validate_name(name))

    def rename_item(self, kind: CatalogKind, item_id: int, name: str | None) -> CatalogItem:
        return self._store.rename_catalog_item(kind, item_id, validate_name(name))

    def delete_item(self, kind: CatalogKind, item_id: int) -> None:
        self._store.delete_catalog_item(kind, item_id)

    # ------------------------------------------------------------------
    # settings
    # ------------------------------------------------------------------
    def get_settings(self) -> dict[str, str]:
        return self._store.get_settings()

    def update_settings(self, values: dict[str, Any]) -> dict[str, str]:
        cleaned: dict[str, str] = {}
        for key, value in values.items():
            cleaned[validate_name(str(key), "setting key")] = "" if value is None else str(value)
        self._store.upsert_settings(cleaned)
        return self._store.get_settings()

    # ------------------------------------------------------------------
    # work entries
    # ------------------------------------------------------------------
    def list_work_entries(self) -> list[dict[str, Any]]:
        entries = sorted(self._store.list_work_entries(), key=lambda entry: entry.start_time, reverse=True)
        return describe_entries(self._store, entries)

    def describe_entry(self, entry: WorkEntry) -> dict[str, Any]:
        return describe_entries(self._store, [entry])[0]

    def _check_references(self, payload: WorkEntryCreate) -> None:
        checks = [
            ("employee", payload.employee_id, {emp.id for emp in self._store.list_employees()}),
            ("work type", payload.work_type_id, {item.id for item in self._store.list_catalog("work_types")}),
        ]
        if payload.product_id is not None:
            checks.append(("product", payload.product_id, {item.id for item in self._store.list_catalog("products")}))
        if payload.unit_id is not None:
            checks.append(("unit", payload.unit_id, {item.id for item in self._store.list_catalog("units")}))
        for label, value, known in checks:
            if value not in known:
                raise ValidationError(f"unknown {label} {value}")

    def start_work(self, payload: WorkEntryCreate, *, now: datetime | None = None) -> WorkEntry:
        self._check_references(payload)
        entry = WorkEntry(
            id=0,
            employee_id=payload.employee_id,
            work_type_id=payload.work_type_id,
            product_id=payload.product_id,
            unit_id=payload.unit_id,
            target_quantity=payload.target_quantity,
            status=STATUS_IN_PROGRESS,
            start_time=now or datetime.now(timezone.utc),
        )
        validate_work_entry(entry)
        return self._store.add_work_entry(entry)

    def complete_work(self, entry_id: int, payload: WorkEntryComplete, *, now: datetime | None = None) -> WorkEntry:
        entry = self._store.get_work_entry(entry_id)
        ensure_editable(entry)
        updated = replace(
            entry,
            actual_quantity=payload.actual_quantity,
            notes=payload.notes if payload.notes is not None else entry.notes,
            status=STATUS_COMPLETE,
            end_time=now or datetime.now(timezone.utc),
        )
        validate_work_entry(updated)
        return self._store.save_work_entry(updated)

    def update_work(self, entry_id: int, payload: WorkEntryUpdate, *, now: datetime | None = None) -> WorkEntry:
        """Edit an in-progress entry; switching it to complete completes it."""

        entry = self._store.get_work_entry(entry_id)
        ensure_editable(entry)
        changes = payload.model_dump(exclude_unset=True)
        if changes.get("status") is None:
            changes.pop("status", None)
        updated = replace(entry, **changes)
        if updated.status == STATUS_COMPLETE:
            updated.end_time = now or datetime.now(timezone.utc)
        validate_work_entry(updated)
        return self._store.save_work_entry(updated)

    def delete_work(self, entry_id: int) -> None:
        self._store.delete_work_entry(entry_id)


__all__ = ["CatalogService", "describe_entries"]
