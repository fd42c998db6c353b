from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from launchpilot.projections.errors import ValidationError

PRODUCT_TYPES: Tuple[str, ...] = ("saas", "course", "consulting", "physical", "digital")
SUBSCRIPTION_TYPES: Tuple[str, ...] = ("monthly", "annual", "one-time")


@dataclass(frozen=True)
class ProjectionInputs:
    product_type: str
    price_point: float          # currency per customer per billing event
    subscription_type: str      # monthly | annual | one-time
    target_customers: float
    conversion_rate: float      # % of leads that convert
    churn_rate: float           # % of base lost per month
    acquisition_cost: float     # CAC, currency per lead
    lifetime_value_multiplier: float
    upsell_rate: float          # % of new customers buying the upsell
    upsell_amount: float
    fixed_costs: float          # per month
    variable_cost_percentage: float
    marketing_budget: float     # per month
    timeframe: int              # months, 1..36
    monthly_growth_rate: float  # % per month
    seasonality_factor: float   # 1.0 = no seasonality

    def to_dict(self) -> Dict[str, Any]:
        return {rule.key: getattr(self, rule.attr) for rule in FIELD_RULES}


@dataclass(frozen=True)
class FieldRule:
    key: str      # camelCase wire name
    attr: str     # ProjectionInputs attribute
    choices: Optional[Tuple[str, ...]] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    integral: bool = False


# Wire order; validation details are reported in this order.
FIELD_RULES: Tuple[FieldRule, ...] = (
    FieldRule("productType", "product_type", choices=PRODUCT_TYPES),
    FieldRule("pricePoint", "price_point", minimum=1),
    FieldRule("subscriptionType", "subscription_type", choices=SUBSCRIPTION_TYPES),
    FieldRule("targetCustomers", "target_customers", minimum=1),
    FieldRule("conversionRate", "conversion_rate", minimum=0.1, maximum=100),
    FieldRule("churnRate", "churn_rate", minimum=0, maximum=100),
    FieldRule("acquisitionCost", "acquisition_cost", minimum=0),
    FieldRule("lifetimeValueMultiplier", "lifetime_value_multiplier", minimum=1),
    FieldRule("upsellRate", "upsell_rate", minimum=0, maximum=100),
    FieldRule("upsellAmount", "upsell_amount", minimum=0),
    FieldRule("fixedCosts", "fixed_costs", minimum=0),
    FieldRule("variableCostPercentage", "variable_cost_percentage", minimum=0, maximum=100),
    FieldRule("marketingBudget", "marketing_budget", minimum=0),
    FieldRule("timeframe", "timeframe", minimum=1, maximum=36, integral=True),
    FieldRule("monthlyGrowthRate", "monthly_growth_rate", minimum=0, maximum=100),
    FieldRule("seasonalityFactor", "seasonality_factor", minimum=0.5, maximum=2),
)


def is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints beyond float range
        return False


def check_field(rule: FieldRule, value: Any) -> Optional[str]:
    """Return an error message for `value` under `rule`, or None when it is valid."""
    if rule.choices is not None:
        if value not in rule.choices:
            return "Expected one of: " + ", ".join(rule.choices)
        return None
    if not is_number(value):
        return "Expected number"
    if rule.minimum is not None and value < rule.minimum:
        return f"Must be greater than or equal to {rule.minimum:g}"
    if rule.maximum is not None and value > rule.maximum:
        return f"Must be less than or equal to {rule.maximum:g}"
    if rule.integral and float(value) != int(value):
        return "Expected a whole number of months"
    return None


def _raise_if(details: List[Dict[str, Any]]) -> None:
    if details:
        raise ValidationError(details)


def parse_inputs(payload: Any) -> ProjectionInputs:
    """Build ProjectionInputs from a camelCase JSON object.

    Unknown keys are ignored. Every offending field is reported at once.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError([{"field": "body", "message": "Expected a JSON object"}])

    details: List[Dict[str, Any]] = []
    values: Dict[str, Any] = {}
    for rule in FIELD_RULES:
        if rule.key not in payload or payload[rule.key] is None:
            details.append({"field": rule.key, "message": "Required"})
            continue
        raw = payload[rule.key]
        msg = check_field(rule, raw)
        if msg:
            details.append({"field": rule.key, "message": msg})
            continue
        if rule.integral:
            values[rule.attr] = int(raw)
        elif rule.choices is None:
            values[rule.attr] = float(raw)
        else:
            values[rule.attr] = raw
    _raise_if(details)
    return ProjectionInputs(**values)


def validate_inputs(inputs: ProjectionInputs) -> None:
    """Range-check an already constructed ProjectionInputs."""
    details = []
    for rule in FIELD_RULES:
        msg = check_field(rule, getattr(inputs, rule.attr))
        if msg:
            details.append({"field": rule.key, "message": msg})
    _raise_if(details)
