"""Domain entities for the production floor, expenses and the sales data sources."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

STATUS_IN_PROGRESS = "in-progress"
STATUS_COMPLETE = "complete"

SOURCE_PENDING = "pending"
SOURCE_ACTIVE = "active"
SOURCE_ERROR = "error"

EXPENSE_ACTIVE = "active"
EXPENSE_REPLACED = "replaced"


@dataclass(slots=True)
class Employee:
    id: int
    name: str
    active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(slots=True)
class WorkType:
    """A production stage, e.g. cutting or packing."""

    id: int
    name: str


@dataclass(slots=True)
class Product:
    id: int
    name: str


@dataclass(slots=True)
class Unit:
    id: int
    name: str


@dataclass(slots=True)
class WorkEntry:
    """One worker's attempt at one stage of one product.

    ``actual_quantity`` stays ``None`` while the entry is in progress.
    """

    id: int
    employee_id: int
    work_type_id: int
    target_quantity: int
    start_time: datetime
    product_id: int | None = None
    unit_id: int | None = None
    actual_quantity: int | None = None
    status: str = STATUS_IN_PROGRESS
    end_time: datetime | None = None
    notes: str | None = None

    @property
    def is_complete(self) -> bool:
        return self.status == STATUS_COMPLETE


@dataclass(slots=True)
class DataSource:
    """An externally hosted spreadsheet exported as CSV."""

    id: int
    name: str
    sheet_url: str
    status: str = SOURCE_PENDING
    record_count: int = 0
    date_range_start: datetime | None = None
    date_range_end: datetime | None = None
    last_imported_at: datetime | None = None
    last_error: str | None = None
    created_at: datetime | None = None


@dataclass(slots=True)
class ExpenseCategory:
    id: int
    name: str


@dataclass(slots=True)
class Expense:
    """A purchase; a replacement points at the expense it supersedes."""

    id: int
    item_name: str
    amount: float
    category_id: int
    expense_date: date
    receipt_url: str | None = None
    is_replacement: bool = False
    replacement_reason: str | None = None
    original_expense_id: int | None = None
    notes: str | None = None
    status: str = EXPENSE_ACTIVE
    created_at: datetime | None = None
    updated_at: datetime | None = None
