"""Final-product throughput for multi-stage production.

A product is only finished once every stage has been worked, so the number
of finished units is capped by the stage with the lowest completed quantity.
Raw work totals (``summarize_work``) are kept separate and are never capped.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, Mapping

from godown.domain.entities import WorkEntry

logger = logging.getLogger(__name__)


class StageAbsencePolicy(str, Enum):
    # Stages without entries in the window do not constrain the product.
    OBSERVED_ONLY = "observed_only"
    # Required stages without entries in the window count as zero output.
    ABSENT_IS_ZERO = "absent_is_zero"


@dataclass(slots=True)
class ProductOutput:
    product_id: int
    stage_totals: dict[int, int] = field(default_factory=dict)
    final_count: int = 0

    @property
    def work_stages(self) -> int:
        return len(self.stage_totals)


@dataclass(slots=True)
class BottleneckResult:
    products: list[ProductOutput] = field(default_factory=list)

    @property
    def total_final(self) -> int:
        return sum(product.final_count for product in self.products)

    def for_product(self, product_id: int) -> ProductOutput | None:
        for product in self.products:
            if product.product_id == product_id:
                return product
        return None


def _in_window(entry: WorkEntry, since: datetime | None, until: datetime | None) -> bool:
    if since is not None and entry.start_time < since:
        return False
    if until is not None and entry.start_time >= until:
        return False
    return True


def completed_entries(
    entries: Iterable[WorkEntry],
    since: datetime | None = None,
    until: datetime | None = None,
) -> list[WorkEntry]:
    return [entry for entry in entries if entry.is_complete and _in_window(entry, since, until)]


def compute_final_output(
    entries: Iterable[WorkEntry],
    *,
    since: datetime | None = None,
    until: datetime | None = None,
    policy: StageAbsencePolicy = StageAbsencePolicy.OBSERVED_ONLY,
    required_stages: Mapping[int, Iterable[int]] | None = None,
) -> BottleneckResult:
    """Group completed work by product and stage and take the minimum stage sum.

    Entries without a product are ignored here.  With ``ABSENT_IS_ZERO``,
    any stage listed in ``required_stages`` for a product that has no
    entries in the window pins that product's output to zero.
    """

    by_product: dict[int, dict[int, int]] = {}
    for entry in completed_entries(entries, since, until):
        if entry.product_id is None:
            continue
        stages = by_product.setdefault(entry.product_id, {})
        stages[entry.work_type_id] = stages.get(entry.work_type_id, 0) + (entry.actual_quantity or 0)

    result = BottleneckResult()
    for product_id, stage_totals in by_product.items():
        quantities = list(stage_totals.values())
        if policy is StageAbsencePolicy.ABSENT_IS_ZERO and required_stages:
            missing = set(required_stages.get(product_id, ())) - set(stage_totals)
            if missing:
                logger.debug("product %s has no output for stages %s in window", product_id, sorted(missing))
                quantities.append(0)
        final_count = min(quantities) if quantities else 0
        result.products.append(ProductOutput(product_id=product_id, stage_totals=dict(stage_totals), final_count=final_count))
    return result


@dataclass(slots=True)
class WorkTally:
    quantity: int = 0
    tasks: int = 0


@dataclass(slots=True)
class WorkSummary:
    total_quantity: int = 0
    tasks: int = 0
    by_employee: dict[int, WorkTally] = field(default_factory=dict)
    by_stage: dict[int, WorkTally] = field(default_factory=dict)


def summarize_work(entries: Iterable[WorkEntry]) -> WorkSummary:
    """Plain sums over the given entries, with or without a product."""

    summary = WorkSummary()
    for entry in entries:
        quantity = entry.actual_quantity or 0
        summary.total_quantity += quantity
        summary.tasks += 1
        for bucket, key in ((summary.by_employee, entry.employee_id), (summary.by_stage, entry.work_type_id)):
            tally = bucket.setdefault(key, WorkTally())
            tally.quantity += quantity
            tally.tasks += 1
    return summary


def efficiency(entry: WorkEntry) -> float:
    if not entry.target_quantity or entry.target_quantity <= 0:
        return 0.0
    return (entry.actual_quantity or 0) / entry.target_quantity * 100


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def mean_efficiency(entries: Iterable[WorkEntry]) -> int:
    """Average of actual/target percentages over completed entries, rounded half up."""

    values = [efficiency(entry) for entry in entries if entry.is_complete]
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def stages_per_product(entries: Iterable[WorkEntry]) -> dict[int, set[int]]:
    """Every stage ever completed for each product."""

    stages: dict[int, set[int]] = {}
    for entry in entries:
        if entry.is_complete and entry.product_id is not None:
            stages.setdefault(entry.product_id, set()).add(entry.work_type_id)
    return stages


__all__ = [
    "BottleneckResult",
    "ProductOutput",
    "StageAbsencePolicy",
    "WorkSummary",
    "WorkTally",
    "completed_entries",
    "compute_final_output",
    "efficiency",
    "mean_efficiency",
    "round_half_up",
    "stages_per_product",
    "summarize_work",
]
