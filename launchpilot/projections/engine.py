from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List
import logging
import math

from launchpilot.projections.inputs import ProjectionInputs
from launchpilot.projections.mathutils import round_half_up, round_to
from launchpilot.projections.scenarios import derive_scenarios

logger = logging.getLogger(__name__)

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


@dataclass(frozen=True)
class MonthRecord:
    month: int
    month_name: str
    new_customers: int
    churned_customers: int
    total_customers: int
    monthly_revenue: int
    cumulative_revenue: int
    costs: int
    profit: int
    cumulative_profit: int
    cash_flow: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "monthName": self.month_name,
            "newCustomers": self.new_customers,
            "churnedCustomers": self.churned_customers,
            "totalCustomers": self.total_customers,
            "monthlyRevenue": self.monthly_revenue,
            "cumulativeRevenue": self.cumulative_revenue,
            "costs": self.costs,
            "profit": self.profit,
            "cumulativeProfit": self.cumulative_profit,
            "cashFlow": self.cash_flow,
        }


@dataclass(frozen=True)
class ScenarioResult:
    name: str
    total_revenue: int
    net_profit: int
    break_even_month: int  # timeframe + 1 when never reached
    customer_lifetime_value: int
    return_on_investment: float  # %, 2 decimals
    monthly_data: List[MonthRecord]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "totalRevenue": self.total_revenue,
            "netProfit": self.net_profit,
            "breakEvenMonth": self.break_even_month,
            "customerLifetimeValue": self.customer_lifetime_value,
            "returnOnInvestment": self.return_on_investment,
            "monthlyData": [m.to_dict() for m in self.monthly_data],
        }


def month_name(month: int) -> str:
    """Short month label; month 1 is January and labels wrap every 12 months."""
    return MONTH_ABBR[(month - 1) % 12]


def simulate_scenario(params: ProjectionInputs, name: str) -> ScenarioResult:
    """Simulate `params.timeframe` months and summarize the scenario.

    Per month m (1-based):
    - growth = (1 + g)^(m-1), seasonal = 1 + sin((m-1)*pi/6) * (seasonality - 1)
    - leads = marketing / CAC * growth * seasonal; new = leads * conversion
    - churned = base * churn (never for one-time products); base floored at 0
    - revenue = base * price (annual: whole base x12 in month 1, then new x12)
      plus upsell on the month's new customers
    - costs = fixed + marketing + revenue * variable%

    Only the MonthRecord fields are rounded; the carried base and cumulative
    totals keep full precision.
    """
    records: List[MonthRecord] = []
    total_customers = 0.0
    cumulative_revenue = 0.0
    cumulative_profit = 0.0

    for month in range(1, params.timeframe + 1):
        growth_factor = (1.0 + params.monthly_growth_rate / 100.0) ** (month - 1)
        seasonal_multiplier = 1.0 + math.sin((month - 1) * math.pi / 6.0) * (params.seasonality_factor - 1.0)

        if params.acquisition_cost > 0:
            leads = (params.marketing_budget / params.acquisition_cost) * growth_factor * seasonal_multiplier
        else:
            leads = 0.0
        new_customers = leads * (params.conversion_rate / 100.0)

        if params.subscription_type == "one-time":
            churned_customers = 0.0
        else:
            churned_customers = total_customers * (params.churn_rate / 100.0)

        total_customers = max(0.0, total_customers - churned_customers + new_customers)

        if params.subscription_type == "annual":
            # Existing annual subscribers are not re-billed on renewal.
            billed = total_customers if month == 1 else new_customers
            base_revenue = billed * params.price_point * 12
        else:
            base_revenue = total_customers * params.price_point

        upsell_revenue = new_customers * (params.upsell_rate / 100.0) * params.upsell_amount
        monthly_revenue = base_revenue + upsell_revenue
        cumulative_revenue += monthly_revenue

        variable_costs = monthly_revenue * (params.variable_cost_percentage / 100.0)
        total_costs = params.fixed_costs + variable_costs + params.marketing_budget

        profit = monthly_revenue - total_costs
        cumulative_profit += profit

        records.append(MonthRecord(
            month=month,
            month_name=month_name(month),
            new_customers=round_half_up(new_customers),
            churned_customers=round_half_up(churned_customers),
            total_customers=round_half_up(total_customers),
            monthly_revenue=round_half_up(monthly_revenue),
            cumulative_revenue=round_half_up(cumulative_revenue),
            costs=round_half_up(total_costs),
            profit=round_half_up(profit),
            cumulative_profit=round_half_up(cumulative_profit),
            cash_flow=round_half_up(monthly_revenue - total_costs),
        ))

    break_even_month = next(
        (r.month for r in records if r.cumulative_profit > 0),
        params.timeframe + 1,
    )
    total_investment = (params.fixed_costs + params.marketing_budget) * params.timeframe
    if total_investment > 0:
        roi = ((cumulative_profit - total_investment) / total_investment) * 100.0
    else:
        roi = 0.0

    logger.debug("scenario %s: revenue=%.2f profit=%.2f break_even=%d",
                 name, cumulative_revenue, cumulative_profit, break_even_month)

    return ScenarioResult(
        name=name,
        total_revenue=round_half_up(cumulative_revenue),
        net_profit=round_half_up(cumulative_profit),
        break_even_month=break_even_month,
        customer_lifetime_value=round_half_up(params.price_point * params.lifetime_value_multiplier),
        return_on_investment=round_to(roi, 2),
        monthly_data=records,
    )


def project_scenarios(inputs: ProjectionInputs) -> List[ScenarioResult]:
    """Run the simulator once per scenario: [Conservative, Realistic, Optimistic]."""
    return [simulate_scenario(adjusted, name) for name, adjusted in derive_scenarios(inputs)]
