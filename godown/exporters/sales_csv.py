from __future__ import annotations

import pandas as pd

from godown.core.schema import SalesKpis

LABELS = {
    "ordersReceived": "Orders Received",
    "ordersShipped": "Orders Shipped",
    "pendingOrders": "Pending Orders",
    "returnedOrders": "Returned Orders",
    "cancelledOrders": "Cancelled Orders",
    "onTimeDispatch": "On-Time Dispatch %",
    "orderAccuracy": "Order Accuracy %",
    "totalRevenue": "Total Revenue",
    "avgOrderValue": "Avg Order Value",
}


def export_sales_kpis(kpis: SalesKpis) -> str:
    data = kpis.model_dump()
    df = pd.DataFrame(
        [{"Metric": label, "Value": data[key]} for key, label in LABELS.items()],
        columns=["Metric", "Value"],
        dtype=object,
    )
    return df.to_csv(index=False)
