from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from godown.core.reducers import compute_kpis, daily_trend, group_totals, rank_groups
from godown.core.sales_filters import SalesFilters, apply_filters
from godown.core.sales_report import assemble_sales_report, build_charts
from godown.domain.sales import SalesRecord


def _record(**fields) -> SalesRecord:
    return SalesRecord(**fields)


def test_kpis_for_mixed_statuses():
    records = [
        _record(order_status="Shipped", selling_price="100"),
        _record(order_status="Cancelled", selling_price="50"),
        _record(order_status="Delivered", selling_price="75"),
    ]

    kpis = compute_kpis(records)

    assert kpis.ordersReceived == 3
    assert kpis.ordersShipped == 2
    assert kpis.cancelledOrders == 1
    assert kpis.pendingOrders == 0
    assert kpis.totalRevenue == 225
    assert kpis.avgOrderValue == 75
    assert kpis.orderAccuracy == 66.7
    assert kpis.onTimeDispatch == 66.7


def test_kpis_of_nothing_are_zero():
    kpis = compute_kpis([])

    assert kpis.ordersReceived == 0
    assert kpis.onTimeDispatch == 0
    assert kpis.orderAccuracy == 0
    assert kpis.avgOrderValue == 0


def test_returns_pending_and_junk_prices():
    records = [
        _record(order_status="Return Requested", selling_price="₹1,200"),
        _record(order_status="RTO", selling_price="n/a"),
        _record(order_status="Processing", selling_price=""),
        _record(order_status="Pending", shipping_status="Delivered", selling_price="10"),
    ]

    kpis = compute_kpis(records)

    assert kpis.returnedOrders == 2
    assert kpis.pendingOrders == 3
    assert kpis.ordersShipped == 1
    assert kpis.totalRevenue == 1210
    assert kpis.orderAccuracy == 50.0


def test_returned_order_is_also_pending():
    kpis = compute_kpis([_record(order_status="Returned", selling_price="10")])

    assert kpis.returnedOrders == 1
    assert kpis.pendingOrders == 1
    assert kpis.ordersShipped == 0
    assert kpis.orderAccuracy == 0.0


def test_daily_trend_is_ascending_and_skips_bad_dates():
    records = [
        _record(order_date="1/7/24", selling_price="5"),
        _record(order_date="1/5/24 09:00", selling_price="10"),
        _record(order_date="garbage", selling_price="99"),
        _record(order_date="01/05/2024", selling_price="2.5"),
    ]

    trend = daily_trend(records)

    assert [(point.date, point.sum, point.count) for point in trend] == [
        ("2024-01-05", 12.5, 2),
        ("2024-01-07", 5.0, 1),
    ]


def test_top_n_keeps_highest_quantities():
    records = [_record(product_name=f"P{index}", item_quantity=str(index)) for index in range(1, 12)]

    charts = build_charts(records, top_n=10)

    names = [row["name"] for row in charts.topProducts]
    assert len(names) == 10
    assert names[0] == "P11"
    assert "P1" not in names


def test_rank_groups_is_stable_for_ties_and_labels_blanks_unknown():
    records = [
        _record(marketplace="Amazon"),
        _record(marketplace=""),
        _record(marketplace="Flipkart"),
        _record(marketplace="Amazon"),
        _record(marketplace="Flipkart"),
    ]

    ranked = rank_groups(group_totals(records, "marketplace"))

    assert [(group.name, group.count) for group in ranked] == [
        ("Amazon", 2),
        ("Flipkart", 2),
        ("Unknown", 1),
    ]


def test_filters_exclude_undated_records_only_when_dates_are_filtered():
    records = [
        _record(order_date="1/5/24", marketplace="Amazon", payment_mode="COD"),
        _record(order_date="", marketplace="Amazon", payment_mode="Prepaid"),
        _record(order_date="2/1/24", marketplace="Meesho", payment_mode="COD"),
    ]

    assert len(apply_filters(records, SalesFilters(marketplace="All"))) == 3
    assert len(apply_filters(records, SalesFilters(marketplace="Amazon"))) == 2

    dated = apply_filters(records, SalesFilters(startDate="2024-01-01", endDate="2024-01-31"))
    assert [record.order_date for record in dated] == ["1/5/24"]

    combined = apply_filters(records, SalesFilters(endDate="2024-12-31", paymentMode="COD"))
    assert len(combined) == 2


def test_report_vocabularies_come_from_unfiltered_records():
    records = [
        _record(marketplace="Amazon", order_status="Shipped", payment_mode="COD", selling_price="100"),
        _record(marketplace="Meesho", order_status="Cancelled", payment_mode="Prepaid", selling_price="40"),
    ]
    filtered = apply_filters(records, SalesFilters(marketplace="Amazon"))

    report = assemble_sales_report(records, filtered, meta={"sources": 1})

    assert report.filters.marketplaces == ["Amazon", "Meesho"]
    assert report.filters.paymentModes == ["COD", "Prepaid"]
    assert report.kpis.ordersReceived == 1
    assert report.meta == {"totalRecords": 2, "filteredRecords": 1, "sources": 1}
    assert report.charts.marketplaceRevenue == [{"name": "Amazon", "revenue": 100, "orders": 1}]
