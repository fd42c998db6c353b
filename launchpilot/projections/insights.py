from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import math

from launchpilot.projections.engine import ScenarioResult, project_scenarios
from launchpilot.projections.errors import InternalError
from launchpilot.projections.inputs import ProjectionInputs
from launchpilot.projections.mathutils import safe_div

REC_LTV_CAC = "Consider reducing customer acquisition costs or increasing customer lifetime value"
REC_BREAK_EVEN = "Extend projection timeframe or optimize cost structure to achieve break-even"
REC_CHURN = "High churn rate detected - focus on customer retention strategies"
REC_GROWTH = "Consider strategies to increase monthly growth rate for better scaling"
REC_MARGIN = "Improve profit margins by optimizing costs or increasing pricing"


@dataclass(frozen=True)
class ProfitabilityAnalysis:
    margin_health: float
    break_even_analysis: str  # Achievable | Challenging
    risk_level: str           # Low | Medium | High


@dataclass(frozen=True)
class CustomerMetrics:
    ltvcac_ratio: Optional[float]  # None when CAC is zero
    payback_period: int
    customer_concentration_risk: str


@dataclass(frozen=True)
class Insights:
    profitability: ProfitabilityAnalysis
    customers: CustomerMetrics
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profitabilityAnalysis": {
                "marginHealth": self.profitability.margin_health,
                "breakEvenAnalysis": self.profitability.break_even_analysis,
                "riskLevel": self.profitability.risk_level,
            },
            "customerMetrics": {
                "ltvcacRatio": self.customers.ltvcac_ratio,
                "paybackPeriod": self.customers.payback_period,
                "customerConcentrationRisk": self.customers.customer_concentration_risk,
            },
            "recommendations": list(self.recommendations),
        }


def margin_health(scenario: ScenarioResult) -> float:
    return safe_div(scenario.net_profit, scenario.total_revenue) * 100.0


def ltv_cac_ratio(inputs: ProjectionInputs, scenario: ScenarioResult) -> Optional[float]:
    if inputs.acquisition_cost <= 0:
        return None
    return scenario.customer_lifetime_value / inputs.acquisition_cost


def risk_level(roi: float) -> str:
    if roi > 100:
        return "Low"
    if roi > 50:
        return "Medium"
    return "High"


def concentration_risk(target_customers: float) -> str:
    if target_customers < 100:
        return "High"
    if target_customers < 1000:
        return "Medium"
    return "Low"


def payback_period(inputs: ProjectionInputs) -> int:
    """Months to recover CAC, assuming a year of revenue per recurring customer."""
    periods = 1 if inputs.subscription_type == "one-time" else 12
    return int(math.ceil(inputs.acquisition_cost / (inputs.price_point * periods)))


def generate_recommendations(inputs: ProjectionInputs, scenario: ScenarioResult) -> List[str]:
    recs: List[str] = []
    ratio = ltv_cac_ratio(inputs, scenario)
    if ratio is not None and ratio < 3:
        recs.append(REC_LTV_CAC)
    if scenario.break_even_month > inputs.timeframe:
        recs.append(REC_BREAK_EVEN)
    if inputs.churn_rate > 10:
        recs.append(REC_CHURN)
    if inputs.monthly_growth_rate < 5:
        recs.append(REC_GROWTH)
    if margin_health(scenario) < 20:
        recs.append(REC_MARGIN)
    return recs


def generate_insights(inputs: ProjectionInputs, scenario: ScenarioResult) -> Insights:
    """Threshold-based insights for one scenario (normally Realistic) against the caller's inputs."""
    return Insights(
        profitability=ProfitabilityAnalysis(
            margin_health=margin_health(scenario),
            break_even_analysis="Achievable" if scenario.break_even_month <= inputs.timeframe else "Challenging",
            risk_level=risk_level(scenario.return_on_investment),
        ),
        customers=CustomerMetrics(
            ltvcac_ratio=ltv_cac_ratio(inputs, scenario),
            payback_period=payback_period(inputs),
            customer_concentration_risk=concentration_risk(inputs.target_customers),
        ),
        recommendations=generate_recommendations(inputs, scenario),
    )


def aggregate(inputs: ProjectionInputs, scenarios: List[ScenarioResult]) -> Dict[str, Any]:
    realistic = next(s for s in scenarios if s.name == "Realistic")
    return {
        "scenarios": [s.to_dict() for s in scenarios],
        "insights": generate_insights(inputs, realistic).to_dict(),
    }


def build_projection(inputs: ProjectionInputs, generated_at: datetime | None = None) -> Dict[str, Any]:
    """Full response payload: scenarios, insights and an ISO-8601 UTC timestamp."""
    ts = generated_at or datetime.now(timezone.utc)
    try:
        scenarios = project_scenarios(inputs)
    except ArithmeticError as e:
        raise InternalError(f"projection failed: {e}") from e
    body = aggregate(inputs, scenarios)
    return {
        "success": True,
        **body,
        "generatedAt": ts.isoformat().replace("+00:00", "Z"),
    }
