"""Infrastructure layer for dashboard entity persistence."""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Literal, Protocol

from godown.domain import DataSource, Employee, Expense, ExpenseCategory, Product, Unit, WorkEntry, WorkType
from godown.domain.entities import SOURCE_ACTIVE, SOURCE_ERROR, SOURCE_PENDING

CatalogKind = Literal["work_types", "products", "units", "expense_categories"]
CatalogItem = WorkType | Product | Unit | ExpenseCategory

_CATALOG_TYPES: dict[str, type] = {
    "work_types": WorkType,
    "products": Product,
    "units": Unit,
    "expense_categories": ExpenseCategory,
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


class EntityStore(Protocol):
    """Persistence contract for the dashboard entities."""

    def list_employees(self, *, active_only: bool = False) -> list[Employee]: ...

    def get_employee(self, employee_id: int) -> Employee: ...

    def add_employee(self, name: str) -> Employee: ...

    def update_employee(self, employee_id: int, *, name: str | None = None, active: bool | None = None) -> Employee: ...

    def list_catalog(self, kind: CatalogKind) -> list[CatalogItem]: ...

    def add_catalog_item(self, kind: CatalogKind, name: str) -> CatalogItem: ...

    def rename_catalog_item(self, kind: CatalogKind, item_id: int, name: str) -> CatalogItem: ...

    def delete_catalog_item(self, kind: CatalogKind, item_id: int) -> None: ...

    def list_products(self) -> list[Product]: ...

    def list_work_types(self) -> list[WorkType]: ...

    def get_settings(self) -> dict[str, str]: ...

    def upsert_settings(self, values: dict[str, str]) -> None: ...

    def list_work_entries(self) -> list[WorkEntry]: ...

    def get_work_entry(self, entry_id: int) -> WorkEntry: ...

    def add_work_entry(self, entry: WorkEntry) -> WorkEntry: ...

    def save_work_entry(self, entry: WorkEntry) -> WorkEntry: ...

    def delete_work_entry(self, entry_id: int) -> None: ...

    def list_expenses(self) -> list[Expense]: ...

    def get_expense(self, expense_id: int) -> Expense: ...

    def add_expense(self, expense: Expense) -> Expense: ...

    def save_expense(self, expense: Expense) -> Expense: ...

    def delete_expense(self, expense_id: int) -> None: ...

    def list_data_sources(self, *, active_only: bool = False) -> list[DataSource]: ...

    def get_data_source(self, source_id: int) -> DataSource: ...

    def add_data_source(self, name: str, sheet_url: str) -> DataSource: ...

    def delete_data_source(self, source_id: int) -> None: ...

    def mark_source_imported(
        self,
        source_id: int,
        *,
        record_count: int,
        date_range_start: datetime | None,
        date_range_end: datetime | None,
    ) -> DataSource: ...

    def mark_source_error(self, source_id: int, reason: str) -> DataSource: ...

    def reset(self) -> None: ...


class InMemoryEntityStore:
    """Simple in-memory repository for fast iteration and tests.

    Reads hand out copies so callers never mutate stored state directly.
    Missing ids raise ``KeyError``.
    """

    def __init__(self) -> None:
        self.reset()

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------
    def _next_id(self, table: str) -> int:
        self._counters[table] = self._counters.get(table, 0) + 1
        return self._counters[table]

    @staticmethod
    def _lookup(table: dict, key: int, label: str):
        try:
            return table[key]
        except KeyError:
            raise KeyError(f"{label} {key} not found") from None

    def _catalog(self, kind: str) -> dict[int, CatalogItem]:
        if kind not in _CATALOG_TYPES:
            raise ValueError(f"unknown catalog {kind!r}")
        return self._catalogs[kind]

    # ------------------------------------------------------------------
    # employees
    # ------------------------------------------------------------------
    def list_employees(self, *, active_only: bool = False) -> list[Employee]:
        employees = [replace(emp) for emp in self._employees.values() if emp.active or not active_only]
        employees.sort(key=lambda emp: emp.name.lower())
        return employees

    def get_employee(self, employee_id: int) -> Employee:
        return replace(self._lookup(self._employees, employee_id, "employee"))

    def add_employee(self, name: str) -> Employee:
        now = _now()
        employee = Employee(id=self._next_id("employees"), name=name, active=True, created_at=now, updated_at=now)
        self._employees[employee.id] = employee
        return replace(employee)

    def update_employee(self, employee_id: int, *, name: str | None = None, active: bool | None = None) -> Employee:
        employee = self._lookup(self._employees, employee_id, "employee")
        if name is not None:
            employee.name = name
        if active is not None:
            employee.active = active
        employee.updated_at = _now()
        return replace(employee)

    # ------------------------------------------------------------------
    # work types, products, units
    # ------------------------------------------------------------------
    def list_catalog(self, kind: CatalogKind) -> list[CatalogItem]:
        items = [replace(item) for item in self._catalog(kind).values()]
        items.sort(key=lambda item: item.name.lower())
        return items

    def add_catalog_item(self, kind: CatalogKind, name: str) -> CatalogItem:
        table = self._catalog(kind)
        item = _CATALOG_TYPES[kind](id=self._next_id(kind), name=name)
        table[item.id] = item
        return replace(item)

    def rename_catalog_item(self, kind: CatalogKind, item_id: int, name: str) -> CatalogItem:
        item = self._lookup(self._catalog(kind), item_id, kind)
        item.name = name
        return replace(item)

    def delete_catalog_item(self, kind: CatalogKind, item_id: int) -> None:
        table = self._catalog(kind)
        self._lookup(table, item_id, kind)
        del table[item_id]

    def list_products(self) -> list[Product]:
        return self.list_catalog("products")

    def list_work_types(self) -> list[WorkType]:
        return self.list_catalog("work_types")

    # ------------------------------------------------------------------
    # settings
    # ------------------------------------------------------------------
    def get_settings(self) -> dict[str, str]:
        return dict(self._settings)

    def upsert_settings(self, values: dict[str, str]) -> None:
        for key, value in values.items():
            self._settings[str(key)] = str(value)

    # ------------------------------------------------------------------
    # work entries
    # ------------------------------------------------------------------
    def list_work_entries(self) -> list[WorkEntry]:
        return [replace(entry) for entry in self._entries.values()]

    def get_work_entry(self, entry_id: int) -> WorkEntry:
        return replace(self._lookup(self._entries, entry_id, "work entry"))

    def add_work_entry(self, entry: WorkEntry) -> WorkEntry:
        stored = replace(entry, id=self._next_id("work_entries"))
        self._entries[stored.id] = stored
        return replace(stored)

    def save_work_entry(self, entry: WorkEntry) -> WorkEntry:
        self._lookup(self._entries, entry.id, "work entry")
        self._entries[entry.id] = replace(entry)
        return replace(entry)

    def delete_work_entry(self, entry_id: int) -> None:
        self._lookup(self._entries, entry_id, "work entry")
        del self._entries[entry_id]

    # ------------------------------------------------------------------
    # expenses
    # ------------------------------------------------------------------
    def list_expenses(self) -> list[Expense]:
        return [replace(expense) for expense in self._expenses.values()]

    def get_expense(self, expense_id: int) -> Expense:
        return replace(self._lookup(self._expenses, expense_id, "expense"))

    def add_expense(self, expense: Expense) -> Expense:
        now = _now()
        stored = replace(expense, id=self._next_id("expenses"), created_at=now, updated_at=now)
        self._expenses[stored.id] = stored
        return replace(stored)

    def save_expense(self, expense: Expense) -> Expense:
        self._lookup(self._expenses, expense.id, "expense")
        stored = replace(expense, updated_at=_now())
        self._expenses[stored.id] = stored
        return replace(stored)

    def delete_expense(self, expense_id: int) -> None:
        self._lookup(self._expenses, expense_id, "expense")
        del self._expenses[expense_id]

    # ------------------------------------------------------------------
    # data sources
    # ------------------------------------------------------------------
    def list_data_sources(self, *, active_only: bool = False) -> list[DataSource]:
        sources = [
            replace(source)
            for source in self._sources.values()
            if source.status == SOURCE_ACTIVE or not active_only
        ]
        sources.sort(key=lambda source: source.created_at or _now(), reverse=True)
        return sources

    def get_data_source(self, source_id: int) -> DataSource:
        return replace(self._lookup(self._sources, source_id, "data source"))

    def add_data_source(self, name: str, sheet_url: str) -> DataSource:
        source = DataSource(
            id=self._next_id("data_sources"),
            name=name,
            sheet_url=sheet_url,
            status=SOURCE_PENDING,
            created_at=_now(),
        )
        self._sources[source.id] = source
        return replace(source)

    def delete_data_source(self, source_id: int) -> None:
        self._lookup(self._sources, source_id, "data source")
        del self._sources[source_id]

    def mark_source_imported(
        self,
        source_id: int,
        *,
        record_count: int,
        date_range_start: datetime | None,
        date_range_end: datetime | None,
    ) -> DataSource:
        source = self._lookup(self._sources, source_id, "data source")
        source.status = SOURCE_ACTIVE
        source.record_count = record_count
        source.date_range_start = date_range_start
        source.date_range_end = date_range_end
        source.last_imported_at = _now()
        source.last_error = None
        return replace(source)

    def mark_source_error(self, source_id: int, reason: str) -> DataSource:
        source = self._lookup(self._sources, source_id, "data source")
        source.status = SOURCE_ERROR
        source.last_error = reason
        return replace(source)

    def reset(self) -> None:
        self._counters: dict[str, int] = {}
        self._employees: dict[int, Employee] = {}
        self._catalogs: dict[str, dict[int, CatalogItem]] = {kind: {} for kind in _CATALOG_TYPES}
        self._settings: dict[str, str] = {}
        self._entries: dict[int, WorkEntry] = {}
        self._expenses: dict[int, Expense] = {}
        self._sources: dict[int, DataSource] = {}
