"""Benefit estimation: contract revenue plus follow-on, technology and brand value."""

from __future__ import annotations

from tender_roi.engine.config import BenefitConfig
from tender_roi.engine.result import (
    BenefitAnalysis,
    BenefitBreakdown,
    BenefitPeriod,
    ProjectParameters,
)
from tender_roi.models.enums import CustomerSegment

_PRESTIGE_SEGMENTS = {CustomerSegment.FINANCE, CustomerSegment.INSURANCE}


def _future_multiplier(params: ProjectParameters, config: BenefitConfig) -> float:
    if params.customer_segment == CustomerSegment.GOVERNMENT:
        return config.government_multiplier
    if params.budget > config.large_future_budget:
        return config.large_future_multiplier
    return 1.0


def _brand_multiplier(params: ProjectParameters, config: BenefitConfig) -> float:
    if params.customer_segment in _PRESTIGE_SEGMENTS:
        return config.prestige_multiplier
    if params.budget > config.large_brand_budget:
        return config.large_brand_multiplier
    return 1.0


def estimate_benefit(
    params: ProjectParameters,
    config: BenefitConfig,
    benefit_multiplier: float = 1.0,
) -> BenefitAnalysis:
    """Estimate the value of winning the tender.

    Only one multiplier applies to each of future opportunities and brand
    value: the highest-priority matching rule wins.
    """
    if benefit_multiplier < 0:
        raise ValueError("benefit_multiplier cannot be negative")

    budget = params.budget * benefit_multiplier
    direct = budget
    future = budget * config.future_opportunity_rate * _future_multiplier(params, config)
    technology = (
        budget
        * config.technology_value_rate
        * config.technology_multipliers[params.complexity]
    )
    brand = budget * config.brand_value_rate * _brand_multiplier(params, config)
    total = direct + future + technology + brand

    breakdown = BenefitBreakdown(
        immediate_revenue=direct,
        recurring_revenue=future * config.recurring_share,
        strategic_value=technology + brand,
        market_expansion=future * (1 - config.recurring_share),
    )

    return BenefitAnalysis(
        direct_revenue=direct,
        future_opportunities=future,
        technology_value=technology,
        brand_value=brand,
        total_benefit=total,
        breakdown=breakdown,
        benefit_timeline=_benefit_timeline(
            direct,
            future + technology + brand,
            params.duration_months,
            config.post_completion_months,
        ),
    )


def _benefit_timeline(
    direct: float,
    deferred: float,
    duration: int,
    post_months: int,
) -> list[BenefitPeriod]:
    timeline: list[BenefitPeriod] = []
    cumulative = 0.0

    monthly_direct = direct / duration
    for month in range(1, duration + 1):
        cumulative += monthly_direct
        timeline.append(
            BenefitPeriod(
                period=month,
                label=f"Month {month} (project revenue)",
                benefit=monthly_direct,
                cumulative=cumulative,
            )
        )

    monthly_deferred = deferred / post_months
    for offset in range(1, post_months + 1):
        cumulative += monthly_deferred
        timeline.append(
            BenefitPeriod(
                period=duration + offset,
                label=f"Month {duration + offset} (post-delivery value)",
                benefit=monthly_deferred,
                cumulative=cumulative,
            )
        )

    return timeline
