from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from godown.application import CatalogService, ProductivityService
from godown.application.productivity import period_start
from godown.core.bottleneck import StageAbsencePolicy
from godown.core.schema import WorkEntryComplete, WorkEntryCreate
from godown.core.validation import ConflictError, ValidationError
from godown.infrastructure import InMemoryEntityStore

NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def store() -> InMemoryEntityStore:
    return InMemoryEntityStore()


@pytest.fixture()
def catalog(store) -> CatalogService:
    service = CatalogService(store)
    service.create_employee("Ravi")
    service.create_employee("Meena")
    service.create_item("work_types", "Cutting")
    service.create_item("work_types", "Stitching")
    service.create_item("products", "Kurta")
    return service


def _record(catalog, *, employee, stage, quantity, at, product=1, target=10):
    entry = catalog.start_work(
        WorkEntryCreate(employee_id=employee, work_type_id=stage, product_id=product, target_quantity=target),
        now=at,
    )
    return catalog.complete_work(entry.id, WorkEntryComplete(actual_quantity=quantity), now=at)


def test_week_report_groups_days_newest_first(store, catalog):
    _record(catalog, employee=1, stage=1, quantity=10, at=NOW - timedelta(days=2))
    _record(catalog, employee=2, stage=2, quantity=4, at=NOW - timedelta(days=2))
    _record(catalog, employee=1, stage=1, quantity=6, at=NOW - timedelta(hours=1))
    _record(catalog, employee=2, stage=1, quantity=99, at=NOW - timedelta(days=20))

    report = ProductivityService(store).daily_report("week", now=NOW)

    assert report["totalWork"] == 20
    assert report["totalTasks"] == 3
    assert report["totalFinalProducts"] == 4
    assert [day["date"] for day in report["dailyData"]] == ["2024-03-10", "2024-03-08"]
    assert report["dailyData"][0] == {"date": "2024-03-10", "totalWork": 6, "finalProducts": 6, "tasks": 1}
    assert report["employeeBreakdown"][0] == {"id": 1, "name": "Ravi", "totalWork": 16, "tasks": 2}
    assert [row["name"] for row in report["workTypeBreakdown"]] == ["Cutting", "Stitching"]


def test_absent_stage_policy_changes_single_day_output(store, catalog):
    _record(catalog, employee=1, stage=1, quantity=10, at=NOW - timedelta(days=2))
    _record(catalog, employee=2, stage=2, quantity=4, at=NOW - timedelta(days=2))
    _record(catalog, employee=1, stage=1, quantity=6, at=NOW - timedelta(hours=1))

    lenient = ProductivityService(store).daily_report("week", now=NOW)
    strict = ProductivityService(store, policy=StageAbsencePolicy.ABSENT_IS_ZERO).daily_report("week", now=NOW)

    assert lenient["dailyData"][0]["finalProducts"] == 6
    assert strict["dailyData"][0]["finalProducts"] == 0
    assert strict["totalFinalProducts"] == 4


def test_period_start_bounds():
    start = period_start("day", NOW)
    assert start.hour == 0 and start.minute == 0
    assert period_start("month", NOW) == NOW - timedelta(days=30)


def test_summary_counts_and_efficiency(store, catalog):
    _record(catalog, employee=1, stage=1, quantity=5, at=NOW - timedelta(days=1))
    _record(catalog, employee=2, stage=1, quantity=10, at=NOW - timedelta(days=10))
    catalog.start_work(WorkEntryCreate(employee_id=1, work_type_id=2, target_quantity=8), now=NOW)

    summary = ProductivityService(store).summary(now=NOW)

    assert summary["totalEmployees"] == 2
    assert summary["totalCompleted"] == 2
    assert summary["inProgress"] == 1
    assert summary["thisWeekCompleted"] == 1
    assert summary["totalUnits"] == 15
    assert summary["avgEfficiency"] == 75
    assert summary["completionRate"] == 67
    assert [row["name"] for row in summary["employeeStats"]] == ["Meena", "Ravi"]


def test_work_entry_lifecycle_rules(store, catalog):
    with pytest.raises(ValidationError):
        catalog.start_work(WorkEntryCreate(employee_id=1, work_type_id=9, target_quantity=5), now=NOW)

    entry = catalog.start_work(WorkEntryCreate(employee_id=1, work_type_id=1, target_quantity=5), now=NOW)
    assert entry.actual_quantity is None

    done = catalog.complete_work(entry.id, WorkEntryComplete(actual_quantity=0), now=NOW)
    assert done.status == "complete"
    assert done.actual_quantity == 0

    with pytest.raises(ConflictError):
        catalog.complete_work(entry.id, WorkEntryComplete(actual_quantity=5), now=NOW)
