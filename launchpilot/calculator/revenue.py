from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple
import math

from launchpilot.projections.errors import ValidationError
from launchpilot.projections.inputs import FieldRule, check_field
from launchpilot.projections.mathutils import round_half_up, round_to

CALCULATOR_PRODUCT_TYPES: Tuple[str, ...] = (
    "course", "saas", "consulting", "physical-product", "digital-product",
)

DEFAULT_CONVERSION = {"course": 3.0, "saas": 2.5, "consulting": 15.0, "physical-product": 2.0, "digital-product": 4.0}
DEFAULT_CHURN = {"course": 0.0, "saas": 8.0, "consulting": 5.0, "physical-product": 0.0, "digital-product": 0.0}
DEFAULT_UPSELL = {"course": 25.0, "saas": 15.0, "consulting": 40.0, "physical-product": 20.0, "digital-product": 30.0}
# Upsell price as a multiple of the base price
UPSELL_MULTIPLIER = {"course": 1.5, "saas": 2.0, "consulting": 1.8, "physical-product": 0.7, "digital-product": 1.2}
# (fixed setup cost, variable cost ratio)
COST_STRUCTURES = {
    "course": (2000.0, 0.10),
    "saas": (5000.0, 0.25),
    "consulting": (1000.0, 0.30),
    "physical-product": (3000.0, 0.40),
    "digital-product": (1500.0, 0.15),
}

_RULES: Tuple[FieldRule, ...] = (
    FieldRule("productType", "product_type", choices=CALCULATOR_PRODUCT_TYPES),
    FieldRule("pricePoint", "price_point", minimum=1),
    FieldRule("targetCustomers", "target_customers", minimum=1),
    FieldRule("timeframe", "timeframe", minimum=1, maximum=12, integral=True),
    FieldRule("conversionRate", "conversion_rate", minimum=0.1, maximum=50),
    FieldRule("churnRate", "churn_rate", minimum=0, maximum=100),
    FieldRule("upsellRate", "upsell_rate", minimum=0, maximum=100),
)
_OPTIONAL = {"conversionRate", "churnRate", "upsellRate"}


@dataclass(frozen=True)
class RevenueInputs:
    product_type: str
    price_point: float
    target_customers: float
    timeframe: int
    conversion_rate: Optional[float] = None
    churn_rate: Optional[float] = None
    upsell_rate: Optional[float] = None

    # Unset or zero rates fall back to the product's typical value.
    @property
    def effective_conversion(self) -> float:
        return self.conversion_rate or DEFAULT_CONVERSION[self.product_type]

    @property
    def effective_churn(self) -> float:
        return self.churn_rate or DEFAULT_CHURN[self.product_type]

    @property
    def effective_upsell(self) -> float:
        return self.upsell_rate or DEFAULT_UPSELL[self.product_type]


def parse_revenue_inputs(payload: Any) -> RevenueInputs:
    if not isinstance(payload, Mapping):
        raise ValidationError([{"field": "body", "message": "Expected a JSON object"}])
    details: List[Dict[str, Any]] = []
    values: Dict[str, Any] = {}
    for rule in _RULES:
        raw = payload.get(rule.key)
        if raw is None:
            if rule.key not in _OPTIONAL:
                details.append({"field": rule.key, "message": "Required"})
            continue
        msg = check_field(rule, raw)
        if msg:
            details.append({"field": rule.key, "message": msg})
        elif rule.integral:
            values[rule.attr] = int(raw)
        else:
            values[rule.attr] = raw if rule.choices else float(raw)
    if details:
        raise ValidationError(details)
    return RevenueInputs(**values)


def adjusted_revenue(base: float, inp: RevenueInputs) -> float:
    churn = inp.effective_churn
    if inp.product_type == "saas" and churn > 0:
        retention = 1.0 - churn / 100.0
        # Geometric sum of retained revenue over the timeframe
        return base * (1.0 - retention ** inp.timeframe) / (1.0 - retention)
    return base


def summarize(inp: RevenueInputs) -> Dict[str, Any]:
    conversion = inp.effective_conversion
    base = inp.price_point * inp.target_customers
    adjusted = adjusted_revenue(base, inp)
    upsell = adjusted * (inp.effective_upsell / 100.0) * UPSELL_MULTIPLIER[inp.product_type]
    total = adjusted + upsell
    return {
        "baseRevenue": round_half_up(base),
        "adjustedRevenue": round_half_up(adjusted),
        "upsellRevenue": round_half_up(upsell),
        "totalRevenue": round_half_up(total),
        "monthlyAverage": round_half_up(total / inp.timeframe),
        "conversionRate": conversion,
        "churnRate": inp.effective_churn,
        "requiredLeads": int(math.ceil(inp.target_customers / (conversion / 100.0))),
    }


def monthly_breakdown(inp: RevenueInputs) -> List[Dict[str, Any]]:
    churn = inp.effective_churn
    new_customers = int(math.ceil(inp.target_customers / inp.timeframe))
    rows: List[Dict[str, Any]] = []
    customers = 0
    cumulative = 0.0
    for month in range(1, inp.timeframe + 1):
        churned = int(math.ceil(customers * churn / 100.0)) if inp.product_type == "saas" else 0
        customers += new_customers - churned
        if inp.product_type == "saas":
            revenue = customers * inp.price_point
        else:
            revenue = new_customers * inp.price_point
        cumulative += revenue
        rows.append({
            "month": month,
            "newCustomers": new_customers,
            "churnedCustomers": churned,
            "totalCustomers": customers,
            "monthlyRevenue": round_half_up(revenue),
            "cumulativeRevenue": round_half_up(cumulative),
        })
    return rows


def break_even(inp: RevenueInputs) -> Dict[str, Any]:
    fixed, variable = COST_STRUCTURES[inp.product_type]
    per_unit = inp.price_point * variable
    units = int(math.ceil(fixed / inp.price_point))
    margin = (inp.price_point - per_unit) / inp.price_point * 100.0
    per_month = inp.target_customers / inp.timeframe
    return {
        "breakEvenUnits": units,
        "estimatedCosts": {"fixed": fixed, "perUnit": per_unit, "total": fixed},
        "profitMargin": round_to(margin, 2),
        "timeToBreakEven": int(math.ceil(units / per_month)),
    }


def scenario_analysis(inp: RevenueInputs) -> Dict[str, Any]:
    conversion = inp.effective_conversion
    conservative = RevenueInputs(
        inp.product_type, inp.price_point, math.ceil(inp.target_customers * 0.5), inp.timeframe,
        conversion_rate=conversion * 0.7, churn_rate=inp.churn_rate, upsell_rate=inp.upsell_rate,
    )
    optimistic = RevenueInputs(
        inp.product_type, inp.price_point, math.ceil(inp.target_customers * 1.5), inp.timeframe,
        conversion_rate=conversion * 1.3, churn_rate=inp.churn_rate, upsell_rate=inp.upsell_rate,
    )
    return {
        "conservative": {"revenue": summarize(conservative)["totalRevenue"], "probability": "70%"},
        "realistic": {"revenue": summarize(inp)["totalRevenue"], "probability": "50%"},
        "optimistic": {"revenue": summarize(optimistic)["totalRevenue"], "probability": "20%"},
    }


def _rec(category: str, text: str, impact: str) -> Dict[str, str]:
    return {"category": category, "recommendation": text, "impact": impact}


def product_recommendations(product_type: str, price_point: float) -> List[Dict[str, str]]:
    if product_type == "course":
        out = []
        if price_point < 100:
            out.append(_rec("Pricing", "Course pricing seems low - consider premium positioning", "Medium"))
        out.append(_rec("Strategy", "Plan for course completion rates and student success metrics", "Medium"))
        return out
    if product_type == "saas":
        out = [_rec("Strategy", "Focus on reducing churn rate and increasing customer lifetime value", "High")]
        if price_point < 20:
            out.append(_rec("Pricing", "SaaS pricing may be too low for sustainable unit economics", "High"))
        return out
    if product_type == "consulting":
        return [_rec("Strategy", "Develop scalable processes and consider productized consulting", "Medium")]
    return [_rec("General", "Focus on customer feedback and product-market fit validation", "Medium")]


def recommendations(inp: RevenueInputs, summary: Dict[str, Any], breakeven: Dict[str, Any]) -> List[Dict[str, str]]:
    out: List[Dict[str, str]] = []
    if breakeven["profitMargin"] < 50:
        out.append(_rec("Pricing", "Consider increasing price point - current margin may be too low", "High"))
    if summary["conversionRate"] < 2:
        out.append(_rec("Marketing", "Focus on conversion rate optimization - current rate is below average", "High"))
    if summary["requiredLeads"] > inp.target_customers * 50:
        out.append(_rec("Lead Generation", "Need strong lead generation strategy - high lead volume required", "Critical"))
    out.extend(product_recommendations(inp.product_type, inp.price_point))
    return out


def calculate_revenue_projections(inp: RevenueInputs) -> Dict[str, Any]:
    """Single-pass revenue estimate with break-even, scenarios and advice."""
    summary = summarize(inp)
    breakeven = break_even(inp)
    return {
        "summary": summary,
        "monthlyBreakdown": monthly_breakdown(inp),
        "breakEvenAnalysis": breakeven,
        "scenarioAnalysis": scenario_analysis(inp),
        "recommendations": recommendations(inp, summary, breakeven),
    }
