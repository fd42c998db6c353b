from __future__ import annotations
from typing import List, Dict, Any, Iterable
import csv
import io

SCHEMAS = {
    "monthly": [
        "scenario","month","monthName","newCustomers","churnedCustomers","totalCustomers","monthlyRevenue",
        "cumulativeRevenue","costs","profit","cumulativeProfit","cashFlow"
    ],
    "summary": [
        "name","totalRevenue","netProfit","breakEvenMonth","customerLifetimeValue","returnOnInvestment"
    ],
}


def write_csv(rows: Iterable[Dict[str, Any]], columns: List[str]) -> str:
    buf = io.StringIO()
    w = csv.DictWriter(buf, fieldnames=columns, extrasaction="ignore")
    w.writeheader()
    for r in rows:
        w.writerow({k: r.get(k) for k in columns})
    return buf.getvalue()


def write_monthly_csv(scenarios: Iterable[Dict[str, Any]]) -> str:
    """One row per (scenario, month), scenarios in payload order."""
    rows = (
        {"scenario": s["name"], **m}
        for s in scenarios
        for m in s["monthlyData"]
    )
    return write_csv(rows, SCHEMAS["monthly"])


def write_summary_csv(scenarios: Iterable[Dict[str, Any]]) -> str:
    return write_csv(scenarios, SCHEMAS["summary"])
