"""Cost estimation: labor, technology, overhead and risk buffer."""

from __future__ import annotations

from tender_roi.engine.config import CostConfig
from tender_roi.engine.result import (
    CostAnalysis,
    CostBreakdown,
    PhaseCost,
    ProjectParameters,
)


def estimate_cost(
    params: ProjectParameters,
    config: CostConfig,
    cost_multiplier: float = 1.0,
) -> CostAnalysis:
    """Estimate project cost from staffing, complexity and risk.

    labor      = duration x workdays x team x day rate
    technology = labor x complexity multiplier x technology share
    management = (labor + technology) x overhead rate
    risk       = (labor + technology + management) x risk multiplier

    ``cost_multiplier`` scales every component uniformly for scenario runs.
    The phase split is the fixed template from the config and does not
    follow the cash-flow cost distribution policy.
    """
    if cost_multiplier < 0:
        raise ValueError("cost_multiplier cannot be negative")

    labor = (
        params.duration_months
        * config.workdays_per_month
        * params.team_size
        * params.labor_rate_per_day
        * cost_multiplier
    )
    technology = (
        labor * config.complexity_multipliers[params.complexity] * config.technology_share
    )
    management = (labor + technology) * config.overhead_rate
    risk = (labor + technology + management) * config.risk_multipliers[params.risk_level]
    total = labor + technology + management + risk

    breakdown = CostBreakdown(
        direct=labor + technology,
        indirect=management + risk,
        fixed=management,
        variable=labor + technology + risk,
    )
    cost_by_phase = [
        PhaseCost(phase=p.name, cost=total * p.share, percentage=p.share)
        for p in config.phase_template
    ]

    return CostAnalysis(
        labor_cost=labor,
        technology_cost=technology,
        management_cost=management,
        risk_cost=risk,
        total_cost=total,
        breakdown=breakdown,
        cost_by_phase=cost_by_phase,
    )
