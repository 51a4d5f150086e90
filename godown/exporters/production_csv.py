from __future__ import annotations

from typing import Any, Iterable

import pandas as pd

from godown.core.bottleneck import round_half_up

COLUMNS = ["Date", "Employee", "Product", "Work Type", "Target", "Actual", "Efficiency"]


def _name(ref: dict[str, Any] | None) -> str:
    return ref["name"] if ref else ""


def export_production_report(entries: Iterable[dict[str, Any]]) -> str:
    """Render described work entries from a production report as CSV text."""

    records = []
    for entry in entries:
        target = entry.get("target_quantity") or 0
        actual = entry.get("actual_quantity") or 0
        efficiency = round_half_up(actual / target * 100) if target > 0 else 0
        start = entry.get("start_time")
        records.append({
            "Date": start.date().isoformat() if start is not None else "",
            "Employee": _name(entry.get("employee")),
            "Product": _name(entry.get("product")),
            "Work Type": _name(entry.get("work_type")),
            "Target": target,
            "Actual": actual,
            "Efficiency": f"{efficiency}%",
        })
    df = pd.DataFrame(records, columns=COLUMNS)
    return df.to_csv(index=False)
