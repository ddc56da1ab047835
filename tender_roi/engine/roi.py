"""ROI scenarios, break-even point and the sensitivity table."""

from __future__ import annotations

from tender_roi.engine.config import EngineConfig, ScenarioSpec
from tender_roi.engine.financial import calculate_roi
from tender_roi.engine.result import (
    BenefitAnalysis,
    CostAnalysis,
    ProjectParameters,
    ROIAnalysis,
    ScenarioOutcome,
    SensitivityFactor,
)
from tender_roi.engine.scenarios import ScenarioScaling, resimulate, run_scenarios


def break_even_months(total_cost: float, direct_revenue: float, duration: int) -> float:
    """Months of contribution needed to recover the total cost.

    The result is not bounded by the project duration: a thin margin yields
    a break-even far beyond delivery. Without a positive monthly margin the
    project duration is reported.
    """
    monthly_revenue = direct_revenue / duration
    monthly_cost = total_cost / duration
    if monthly_revenue > monthly_cost:
        return total_cost / (monthly_revenue - monthly_cost)
    return float(duration)


class ROICalculator:
    """Stateless calculator for the optimistic/neutral/pessimistic ROI view."""

    def __init__(self, config: EngineConfig):
        self._config = config

    def analyze(
        self,
        params: ProjectParameters,
        cost: CostAnalysis,
        benefit: BenefitAnalysis,
    ) -> ROIAnalysis:
        roi_config = self._config.roi
        base = calculate_roi(benefit.total_benefit, cost.total_cost)

        def run(spec: ScenarioSpec, scaling: ScenarioScaling) -> ScenarioOutcome:
            scaled_cost, scaled_benefit = resimulate(params, self._config, scaling)
            return ScenarioOutcome(
                revenue=scaled_benefit.total_benefit,
                costs=scaled_cost.total_cost,
                probability=spec.probability,
                assumptions=list(spec.assumptions),
            )

        sensitivity = sorted(
            (
                SensitivityFactor(factor=s.factor, impact=s.impact, description=s.description)
                for s in roi_config.sensitivity
            ),
            key=lambda s: s.impact,
            reverse=True,
        )

        return ROIAnalysis(
            optimistic=base * roi_config.optimistic_multiplier,
            neutral=base,
            pessimistic=base * roi_config.pessimistic_multiplier,
            break_even_point=break_even_months(
                cost.total_cost, benefit.direct_revenue, params.duration_months
            ),
            scenarios=run_scenarios(roi_config.scenarios, run),
            sensitivity_analysis=sensitivity,
        )
