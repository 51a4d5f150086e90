"""Ad-hoc filters applied to merged sales records before aggregation."""
from __future__ import annotations

from datetime import date
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from godown.core.dates import end_of_day, start_of_day
from godown.domain.sales import SalesRecord

ALL = "All"


class SalesFilters(BaseModel):
    """Criteria for one sales report; ``None`` or ``"All"`` disables a criterion."""

    model_config = ConfigDict(populate_by_name=True)

    start_date: date | None = Field(default=None, alias="startDate")
    end_date: date | None = Field(default=None, alias="endDate")
    marketplace: str | None = None
    status: str | None = None
    payment_mode: str | None = Field(default=None, alias="paymentMode")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _blank_date(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("marketplace", "status", "payment_mode", mode="before")
    @classmethod
    def _all_means_unset(cls, value):
        if value is None:
            return None
        text = str(value).strip()
        if not text or text == ALL:
            return None
        return text

    @property
    def has_date_filter(self) -> bool:
        return self.start_date is not None or self.end_date is not None


def _matches(record: SalesRecord, filters: SalesFilters) -> bool:
    if filters.has_date_filter:
        order_date = record.parsed_order_date
        if order_date is None:
            return False
        if filters.start_date is not None and order_date < start_of_day(filters.start_date):
            return False
        if filters.end_date is not None and order_date > end_of_day(filters.end_date):
            return False
    if filters.marketplace is not None and record.marketplace != filters.marketplace:
        return False
    if filters.status is not None and record.order_status != filters.status:
        return False
    if filters.payment_mode is not None and record.payment_mode != filters.payment_mode:
        return False
    return True


def apply_filters(records: Iterable[SalesRecord], filters: SalesFilters | None = None) -> list[SalesRecord]:
    if filters is None:
        return list(records)
    return [record for record in records if _matches(record, filters)]


__all__ = ["ALL", "SalesFilters", "apply_filters"]
