from __future__ import annotations
from typing import Dict, Any, List

KNOWN_LIMITATIONS = [
    "Annual plans bill the whole base upfront in month 1 and only new customers afterwards; "
    "renewals of existing annual subscribers are not modeled.",
    "Scenario multipliers are applied without clamping, so scaled churn or conversion can exceed 100%.",
]


def _money(v: Any) -> str:
    return f"${v:,}" if isinstance(v, int) else str(v)


def projection_report_md(inputs: Dict[str, Any], projection: Dict[str, Any]) -> str:
    lines: List[str] = ["# Financial Projections", ""]
    if projection.get("generatedAt"):
        lines += [f"Generated at {projection['generatedAt']}", ""]

    lines += ["## Inputs", ""]
    for k, v in inputs.items():
        lines.append(f"- {k}: {v}")

    lines += ["", "## Scenarios", "",
              "| Scenario | Revenue | Net profit | Break-even month | LTV | ROI % |",
              "|---|---|---|---|---|---|"]
    timeframe = inputs.get("timeframe")
    for s in projection.get("scenarios", []):
        be = s["breakEvenMonth"]
        be_txt = "not reached" if timeframe is not None and be > timeframe else str(be)
        lines.append(
            f"| {s['name']} | {_money(s['totalRevenue'])} | {_money(s['netProfit'])} | "
            f"{be_txt} | {_money(s['customerLifetimeValue'])} | {s['returnOnInvestment']} |"
        )

    insights = projection.get("insights") or {}
    prof = insights.get("profitabilityAnalysis", {})
    cust = insights.get("customerMetrics", {})
    if prof or cust:
        lines += ["", "## Insights (Realistic)", ""]
        for k, v in {**prof, **cust}.items():
            lines.append(f"- {k}: {v}")

    recs = insights.get("recommendations") or []
    if recs:
        lines += ["", "## Recommendations", ""]
        lines += [f"- {r}" for r in recs]

    lines += ["", "## Known limitations", ""]
    lines += [f"- {t}" for t in KNOWN_LIMITATIONS]
    return "\n".join(lines) + "\n"
