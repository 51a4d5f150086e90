"""Pure reducers over sales records: KPIs, daily trend and grouped totals."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Literal, Sequence

from godown.core.dates import day_key
from godown.core.schema import SalesKpis
from godown.domain.sales import SalesRecord

logger = logging.getLogger(__name__)


def _lower(value: str | None) -> str:
    return (value or "").strip().lower()


def is_delivered(record: SalesRecord) -> bool:
    return _lower(record.shipping_status) == "delivered" or _lower(record.order_status) == "delivered"


def is_shipped(record: SalesRecord) -> bool:
    return is_delivered(record) or _lower(record.order_status) == "shipped"


def is_cancelled(record: SalesRecord) -> bool:
    return "cancel" in _lower(record.order_status)


def is_returned(record: SalesRecord) -> bool:
    status = _lower(record.order_status)
    return "return" in status or status == "rto"


def is_pending(record: SalesRecord) -> bool:
    # Returned orders still count as pending; shipped already covers delivered.
    return not (is_shipped(record) or is_cancelled(record))


def _percentage(part: float, whole: float) -> float:
    if not whole:
        return 0.0
    return round(part / whole * 100, 1)


def compute_kpis(records: Iterable[SalesRecord]) -> SalesKpis:
    total = shipped = pending = returned = cancelled = 0
    revenue = 0.0
    for record in records:
        total += 1
        revenue += record.revenue
        if is_shipped(record):
            shipped += 1
        if is_cancelled(record):
            cancelled += 1
        if is_returned(record):
            returned += 1
        if is_pending(record):
            pending += 1

    return SalesKpis(
        ordersReceived=total,
        ordersShipped=shipped,
        pendingOrders=pending,
        returnedOrders=returned,
        cancelledOrders=cancelled,
        onTimeDispatch=_percentage(shipped, total),
        orderAccuracy=_percentage(total - returned - cancelled, total),
        totalRevenue=round(revenue, 2),
        avgOrderValue=round(revenue / total, 2) if total else 0.0,
    )


@dataclass(slots=True)
class TrendPoint:
    date: str
    sum: float = 0.0
    count: int = 0


def daily_trend(
    records: Iterable[SalesRecord],
    value: Callable[[SalesRecord], float] = lambda record: record.revenue,
) -> list[TrendPoint]:
    """Sum ``value`` per calendar day of the order date, oldest day first.

    Days without records are not emitted, nor are records whose date does
    not parse.
    """

    buckets: dict[str, TrendPoint] = {}
    skipped = 0
    for record in records:
        order_date = record.parsed_order_date
        if order_date is None:
            skipped += 1
            continue
        key = day_key(order_date)
        point = buckets.get(key)
        if point is None:
            point = buckets[key] = TrendPoint(date=key)
        point.sum += value(record)
        point.count += 1
    if skipped:
        logger.debug("daily_trend skipped %d records without a usable order date", skipped)
    return [buckets[key] for key in sorted(buckets)]


@dataclass(slots=True)
class GroupTotal:
    name: str
    count: int = 0
    total: float = 0.0


def group_totals(
    records: Iterable[SalesRecord],
    key: str,
    value: Callable[[SalesRecord], float] | None = None,
) -> list[GroupTotal]:
    """Count records (and optionally sum ``value``) per label of attribute ``key``.

    Groups come back in the order their label was first seen.
    """

    groups: dict[str, GroupTotal] = {}
    for record in records:
        label = record.label(key)
        group = groups.get(label)
        if group is None:
            group = groups[label] = GroupTotal(name=label)
        group.count += 1
        if value is not None:
            group.total += value(record)
    return list(groups.values())


def rank_groups(
    groups: Sequence[GroupTotal],
    by: Literal["count", "total"] = "count",
    limit: int | None = None,
) -> list[GroupTotal]:
    ranked = sorted(groups, key=lambda group: getattr(group, by), reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return ranked


def distinct_values(records: Iterable[SalesRecord], key: str) -> list[str]:
    values = {str(getattr(record, key)).strip() for record in records if getattr(record, key)}
    return sorted(value for value in values if value)


__all__ = [
    "GroupTotal",
    "TrendPoint",
    "compute_kpis",
    "daily_trend",
    "distinct_values",
    "group_totals",
    "is_cancelled",
    "is_pending",
    "is_returned",
    "is_shipped",
    "rank_groups",
]
