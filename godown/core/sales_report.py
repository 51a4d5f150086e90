"""Compose the sales analysis response from the reducers."""
from __future__ import annotations

from typing import Sequence

from godown.core.reducers import (
    GroupTotal,
    compute_kpis,
    daily_trend,
    distinct_values,
    group_totals,
    rank_groups,
)
from godown.core.schema import FilterOptions, SalesCharts, SalesReport
from godown.domain.sales import SalesRecord

DEFAULT_TOP_N = 10


def _revenue(record: SalesRecord) -> float:
    return record.revenue


def _quantity(record: SalesRecord) -> float:
    return record.quantity


def _number(value: float) -> float | int:
    rounded = round(value, 2)
    return int(rounded) if rounded == int(rounded) else rounded


def _rows(groups: Sequence[GroupTotal], count_as: str, total_as: str | None = None) -> list[dict]:
    rows = []
    for group in groups:
        row: dict = {"name": group.name}
        if total_as:
            row[total_as] = _number(group.total)
        row[count_as] = group.count
        rows.append(row)
    return rows


def filter_options(records: Sequence[SalesRecord]) -> FilterOptions:
    return FilterOptions(
        marketplaces=distinct_values(records, "marketplace"),
        statuses=distinct_values(records, "order_status"),
        paymentModes=distinct_values(records, "payment_mode"),
    )


def build_charts(records: Sequence[SalesRecord], top_n: int = DEFAULT_TOP_N) -> SalesCharts:
    trend = daily_trend(records, _revenue)

    products = rank_groups(group_totals(records, "product_name", _quantity), by="total", limit=top_n)
    product_revenue = {group.name: group.total for group in group_totals(records, "product_name", _revenue)}

    return SalesCharts(
        salesTrend=[
            {"date": point.date, "revenue": _number(point.sum), "orders": point.count}
            for point in trend
        ],
        marketplaceRevenue=_rows(
            rank_groups(group_totals(records, "marketplace", _revenue), by="total"), "orders", "revenue"
        ),
        statusDistribution=_rows(rank_groups(group_totals(records, "order_status")), "count"),
        paymentDistribution=_rows(rank_groups(group_totals(records, "payment_mode")), "count"),
        topProducts=[
            {
                "name": group.name,
                "quantity": _number(group.total),
                "revenue": _number(product_revenue.get(group.name, 0.0)),
            }
            for group in products
        ],
        topStates=_rows(
            rank_groups(group_totals(records, "shipping_state", _revenue), by="count", limit=top_n),
            "orders",
            "revenue",
        ),
        categoryBreakdown=_rows(
            rank_groups(group_totals(records, "category", _revenue), by="total"), "orders", "revenue"
        ),
    )


def assemble_sales_report(
    all_records: Sequence[SalesRecord],
    filtered: Sequence[SalesRecord],
    *,
    top_n: int = DEFAULT_TOP_N,
    meta: dict | None = None,
) -> SalesReport:
    """Build the report for ``filtered`` with filter vocabularies from ``all_records``."""

    report_meta = {"totalRecords": len(all_records), "filteredRecords": len(filtered)}
    report_meta.update(meta or {})
    return SalesReport(
        kpis=compute_kpis(filtered),
        charts=build_charts(filtered, top_n=top_n),
        filters=filter_options(all_records),
        meta=report_meta,
    )


def empty_sales_report(message: str, meta: dict | None = None) -> SalesReport:
    return SalesReport(message=message, meta=dict(meta or {}))


__all__ = ["DEFAULT_TOP_N", "assemble_sales_report", "build_charts", "empty_sales_report", "filter_options"]
