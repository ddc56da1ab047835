"""Shared scale-and-resimulate helper for optimistic/neutral/pessimistic runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, TypeVar

from tender_roi.engine.benefit import estimate_benefit
from tender_roi.engine.config import EngineConfig, ScenarioSet, ScenarioSpec
from tender_roi.engine.cost import estimate_cost
from tender_roi.engine.result import BenefitAnalysis, CostAnalysis, ProjectParameters
from tender_roi.models.enums import Scenario

T = TypeVar("T")


@dataclass(frozen=True)
class ScenarioScaling:
    benefit_multiplier: float
    cost_multiplier: float

    @classmethod
    def from_spec(cls, spec: ScenarioSpec) -> ScenarioScaling:
        return cls(
            benefit_multiplier=spec.benefit_multiplier,
            cost_multiplier=spec.cost_multiplier,
        )


def resimulate(
    params: ProjectParameters,
    config: EngineConfig,
    scaling: ScenarioScaling,
) -> tuple[CostAnalysis, BenefitAnalysis]:
    """Re-estimate cost and benefit from scratch under a scaling pair."""
    cost = estimate_cost(params, config.cost, scaling.cost_multiplier)
    benefit = estimate_benefit(params, config.benefit, scaling.benefit_multiplier)
    return cost, benefit


def run_scenarios(
    scenario_set: ScenarioSet,
    run: Callable[[ScenarioSpec, ScenarioScaling], T],
) -> dict[Scenario, T]:
    """Call ``run`` once per scenario, in optimistic/neutral/pessimistic order."""
    results: dict[Scenario, T] = {}
    for scenario in Scenario:
        spec = scenario_set.get(scenario)
        results[scenario] = run(spec, ScenarioScaling.from_spec(spec))
    return results
