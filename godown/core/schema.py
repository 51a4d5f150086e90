from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, confloat, conint, constr


class WorkEntryCreate(BaseModel):
    employee_id: int
    work_type_id: int
    product_id: int | None = None
    unit_id: int | None = None
    target_quantity: conint(gt=0)


class WorkEntryComplete(BaseModel):
    actual_quantity: conint(ge=0)
    notes: str | None = None


class WorkEntryUpdate(BaseModel):
    actual_quantity: conint(ge=0) | None = None
    notes: str | None = None
    status: Literal["in-progress", "complete"] | None = None


class DataSourceCreate(BaseModel):
    name: constr(strip_whitespace=True, min_length=1)
    sheet_url: constr(strip_whitespace=True, pattern=r"^https?://")


class NamedItem(BaseModel):
    name: constr(strip_whitespace=True, min_length=1)


class EmployeeUpdate(BaseModel):
    name: constr(strip_whitespace=True, min_length=1) | None = None
    active: bool | None = None


class ExpenseCreate(BaseModel):
    item_name: constr(strip_whitespace=True, min_length=1)
    amount: confloat(gt=0)
    category_id: int
    expense_date: date = Field(default_factory=date.today)
    receipt_url: str | None = None
    is_replacement: bool = False
    replacement_reason: str | None = None
    original_expense_id: int | None = None
    notes: str | None = None


class ExpenseUpdate(BaseModel):
    item_name: constr(strip_whitespace=True, min_length=1) | None = None
    amount: confloat(gt=0) | None = None
    category_id: int | None = None
    expense_date: date | None = None
    receipt_url: str | None = None
    notes: str | None = None


class ExpenseStatusUpdate(BaseModel):
    status: Literal["active", "replaced"]


class SalesKpis(BaseModel):
    ordersReceived: int = 0
    ordersShipped: int = 0
    pendingOrders: int = 0
    returnedOrders: int = 0
    cancelledOrders: int = 0
    onTimeDispatch: float = 0.0
    orderAccuracy: float = 0.0
    totalRevenue: float = 0.0
    avgOrderValue: float = 0.0


class SalesCharts(BaseModel):
    salesTrend: list[dict] = Field(default_factory=list)
    marketplaceRevenue: list[dict] = Field(default_factory=list)
    statusDistribution: list[dict] = Field(default_factory=list)
    paymentDistribution: list[dict] = Field(default_factory=list)
    topProducts: list[dict] = Field(default_factory=list)
    topStates: list[dict] = Field(default_factory=list)
    categoryBreakdown: list[dict] = Field(default_factory=list)


class FilterOptions(BaseModel):
    marketplaces: list[str] = Field(default_factory=list)
    statuses: list[str] = Field(default_factory=list)
    paymentModes: list[str] = Field(default_factory=list)


class SalesReport(BaseModel):
    kpis: SalesKpis = Field(default_factory=SalesKpis)
    charts: SalesCharts = Field(default_factory=SalesCharts)
    filters: FilterOptions = Field(default_factory=FilterOptions)
    meta: dict = Field(default_factory=dict)
    message: str | None = None
