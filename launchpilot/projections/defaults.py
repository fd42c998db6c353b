from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Dict

from launchpilot.projections.inputs import ProjectionInputs


@dataclass(frozen=True)
class ProductDefaults:
    price_point: float
    conversion_rate: float
    churn_rate: float
    acquisition_cost: float
    lifetime_value_multiplier: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pricePoint": self.price_point,
            "conversionRate": self.conversion_rate,
            "churnRate": self.churn_rate,
            "acquisitionCost": self.acquisition_cost,
            "lifetimeValueMultiplier": self.lifetime_value_multiplier,
        }


PRODUCT_DEFAULTS: Dict[str, ProductDefaults] = {
    "saas": ProductDefaults(97, 2.5, 5, 150, 3),
    "course": ProductDefaults(497, 3.5, 0, 80, 1),
    "consulting": ProductDefaults(5000, 10, 15, 500, 2),
    "physical": ProductDefaults(49, 1.8, 0, 25, 1),
    "digital": ProductDefaults(29, 4.2, 0, 15, 1),
}

# Monthly SaaS baseline the calculator form starts from.
BASE_INPUTS = ProjectionInputs(
    product_type="saas",
    price_point=97,
    subscription_type="monthly",
    target_customers=1000,
    conversion_rate=2.5,
    churn_rate=5,
    acquisition_cost=150,
    lifetime_value_multiplier=3,
    upsell_rate=20,
    upsell_amount=200,
    fixed_costs=5000,
    variable_cost_percentage=20,
    marketing_budget=10000,
    timeframe=12,
    monthly_growth_rate=15,
    seasonality_factor=1,
)


def defaults_for(product_type: str) -> ProductDefaults:
    try:
        return PRODUCT_DEFAULTS[product_type]
    except KeyError:
        raise KeyError(f"unknown product type: {product_type}") from None


def sample_inputs(product_type: str = "saas") -> ProjectionInputs:
    """BASE_INPUTS with the product's starter values applied."""
    d = defaults_for(product_type)
    return replace(
        BASE_INPUTS,
        product_type=product_type,
        price_point=d.price_point,
        conversion_rate=d.conversion_rate,
        churn_rate=d.churn_rate,
        acquisition_cost=d.acquisition_cost,
        lifetime_value_multiplier=d.lifetime_value_multiplier,
    )
