from __future__ import annotations
from dataclasses import dataclass, replace
from typing import List, Tuple

from launchpilot.projections.inputs import ProjectionInputs


@dataclass(frozen=True)
class ScenarioAdjustment:
    name: str
    conversion_rate: float
    monthly_growth_rate: float
    churn_rate: float


CONSERVATIVE = ScenarioAdjustment("Conservative", conversion_rate=0.7, monthly_growth_rate=0.6, churn_rate=1.3)
REALISTIC = ScenarioAdjustment("Realistic", conversion_rate=1.0, monthly_growth_rate=1.0, churn_rate=1.0)
OPTIMISTIC = ScenarioAdjustment("Optimistic", conversion_rate=1.4, monthly_growth_rate=1.5, churn_rate=0.7)

SCENARIOS: Tuple[ScenarioAdjustment, ...] = (CONSERVATIVE, REALISTIC, OPTIMISTIC)


def adjust(inputs: ProjectionInputs, adj: ScenarioAdjustment) -> ProjectionInputs:
    """Scale conversion, growth and churn by the scenario multipliers.

    Scaled rates are not clamped: Conservative churn of 80% becomes 104%.
    """
    return replace(
        inputs,
        conversion_rate=inputs.conversion_rate * adj.conversion_rate,
        monthly_growth_rate=inputs.monthly_growth_rate * adj.monthly_growth_rate,
        churn_rate=inputs.churn_rate * adj.churn_rate,
    )


def derive_scenarios(inputs: ProjectionInputs) -> List[Tuple[str, ProjectionInputs]]:
    """Return [(name, adjusted_inputs)] for Conservative, Realistic, Optimistic, in that order."""
    return [(adj.name, adjust(inputs, adj)) for adj in SCENARIOS]
