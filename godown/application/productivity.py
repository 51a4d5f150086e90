"""Production reports built on the bottleneck reducer."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from godown.application.catalog import describe_entries
from godown.core.bottleneck import (
    StageAbsencePolicy,
    completed_entries,
    compute_final_output,
    mean_efficiency,
    round_half_up,
    stages_per_product,
    summarize_work,
)
from godown.core.dates import day_key
from godown.domain import WorkEntry
from godown.infrastructure import EntityStore

logger = logging.getLogger(__name__)

PERIODS = ("day", "week", "month")


def _aware(value: datetime | None) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def period_start(period: str, now: datetime | None = None) -> datetime:
    """Start of the report window: local midnight, or 7 / 30 days back."""

    now = _aware(now)
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return now - timedelta(days=30)
    return now.astimezone().replace(hour=0, minute=0, second=0, microsecond=0)


class ProductivityService:
    def __init__(self, store: EntityStore, *, policy: StageAbsencePolicy = StageAbsencePolicy.OBSERVED_ONLY) -> None:
        self._store = store
        self._policy = policy

    def _final_output(self, entries: list[WorkEntry], history: list[WorkEntry]):
        required = stages_per_product(history) if self._policy is StageAbsencePolicy.ABSENT_IS_ZERO else None
        return compute_final_output(entries, policy=self._policy, required_stages=required)

    def daily_report(self, period: str = "day", *, now: datetime | None = None) -> dict[str, Any]:
        if period not in PERIODS:
            period = "day"
        start = period_start(period, now)

        history = self._store.list_work_entries()
        entries = completed_entries(history, since=start)

        by_day: dict[str, list[WorkEntry]] = {}
        for entry in entries:
            by_day.setdefault(day_key(entry.start_time), []).append(entry)

        daily_data = []
        for date in sorted(by_day, reverse=True):
            day_entries = by_day[date]
            daily_data.append(
                {
                    "date": date,
                    "totalWork": summarize_work(day_entries).total_quantity,
                    "finalProducts": self._final_output(day_entries, history).total_final,
                    "tasks": len(day_entries),
                }
            )

        summary = summarize_work(entries)
        bottleneck = self._final_output(entries, history)

        employee_breakdown = []
        for employee in self._store.list_employees(active_only=True):
            tally = summary.by_employee.get(employee.id)
            if tally is None or tally.tasks == 0:
                continue
            employee_breakdown.append(
                {"id": employee.id, "name": employee.name, "totalWork": tally.quantity, "tasks": tally.tasks}
            )
        employee_breakdown.sort(key=lambda row: row["totalWork"], reverse=True)

        work_type_breakdown = []
        for work_type in self._store.list_work_types():
            tally = summary.by_stage.get(work_type.id)
            if tally is None or tally.tasks == 0:
                continue
            work_type_breakdown.append(
                {"id": work_type.id, "name": work_type.name, "totalDone": tally.quantity, "tasks": tally.tasks}
            )
        work_type_breakdown.sort(key=lambda row: row["totalDone"], reverse=True)

        product_names = {product.id: product.name for product in self._store.list_products()}
        product_breakdown = [
            {
                "id": output.product_id,
                "name": product_names.get(output.product_id),
                "finalCount": output.final_count,
                "workStages": output.work_stages,
            }
            for output in bottleneck.products
        ]
        product_breakdown.sort(key=lambda row: row["finalCount"], reverse=True)

        logger.debug(
            "daily report %s: %d entries, %d products, %d final",
            period,
            len(entries),
            len(product_breakdown),
            bottleneck.total_final,
        )

        return {
            "period": period,
            "startDate": start.isoformat(),
            "totalWork": summary.total_quantity,
            "totalFinalProducts": bottleneck.total_final,
            "totalTasks": len(entries),
            "dailyData": daily_data,
            "employeeBreakdown": employee_breakdown,
            "workTypeBreakdown": work_type_breakdown,
            "productBreakdown": product_breakdown,
            "entries": describe_entries(
                self._store, sorted(entries, key=lambda entry: entry.start_time, reverse=True)
            ),
        }

    def summary(self, *, now: datetime | None = None) -> dict[str, Any]:
        """All-time productivity overview for the active workforce."""

        now = _aware(now)
        entries = self._store.list_work_entries()
        completed = completed_entries(entries)
        in_progress = [entry for entry in entries if not entry.is_complete]
        this_week = completed_entries(entries, since=now - timedelta(days=7))
        employees = self._store.list_employees(active_only=True)

        employee_stats = []
        for employee in employees:
            own = [entry for entry in completed if entry.employee_id == employee.id]
            employee_stats.append(
                {
                    "id": employee.id,
                    "name": employee.name,
                    "active": employee.active,
                    "totalTasks": len(own),
                    "totalProduced": sum(entry.actual_quantity or 0 for entry in own),
                    "avgEfficiency": mean_efficiency(own),
                }
            )
        employee_stats.sort(key=lambda row: row["avgEfficiency"], reverse=True)

        return {
            "totalEmployees": len(employees),
            "totalCompleted": len(completed),
            "inProgress": len(in_progress),
            "thisWeekCompleted": len(this_week),
            "totalUnits": summarize_work(completed).total_quantity,
            "totalFinalProducts": self._final_output(completed, entries).total_final,
            "avgEfficiency": mean_efficiency(completed),
            "completionRate": round_half_up(len(completed) / len(entries) * 100) if entries else 0,
            "employeeStats": employee_stats,
        }


__all__ = ["PERIODS", "ProductivityService", "period_start"]
