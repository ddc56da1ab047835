"""Confidence-weighted ROI adjustment from qualitative factors.

Each key factor carries an impact in [-1, 1] and an independent confidence
in [0, 1]. The ROI forecast is scaled by 1 + sum(impact x confidence), the
scenario probabilities are re-skewed, and a confidence level is derived
from how much supporting data the caller supplied.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from tender_roi.engine.config import EngineConfig, PredictionConfig
from tender_roi.engine.result import (
    CostAnalysis,
    KeyFactor,
    PredictedOutcome,
    ProjectParameters,
    RiskMitigation,
    ROIAnalysis,
    ROIPredictionResult,
)
from tender_roi.models.enums import (
    CompetitionLevel,
    CustomerSegment,
    MarketMaturity,
    PredictedScenario,
    RiskLevel,
    Scenario,
)
from tender_roi.models.tender import ProjectAnalysis

logger = logging.getLogger(__name__)

LARGE_PROJECT_BUDGET = 5_000_000
SMALL_PROJECT_BUDGET = 500_000
HIGH_COMPETITION_FACTOR = "High competition"

# (factor, impact, confidence, description)
_SEGMENT_FACTORS: dict[CustomerSegment, tuple[str, float, float, str]] = {
    CustomerSegment.FINANCE: (
        "Financial-sector client",
        0.3,
        0.85,
        "Financial clients pay well and buy follow-on work",
    ),
    CustomerSegment.GOVERNMENT: (
        "Government client",
        0.15,
        0.75,
        "Government work is stable and builds public-sector references",
    ),
}

_BEST_CASE_CONDITIONS = [
    "Every key success factor materializes",
    "Market conditions keep improving",
    "Technical delivery beats expectations",
    "The client relationship deepens",
]

_WORST_CASE_CONDITIONS = [
    "Several risks occur at once",
    "Market conditions deteriorate",
    "Technical delivery hits major obstacles",
    "Client satisfaction falls short",
]

_MOST_LIKELY_CONDITIONS = [
    "Project proceeds to plan",
    "Market conditions stay stable",
    "Technical delivery meets expectations",
    "Client satisfaction meets the standard",
    "Most key factors perform as expected",
]


def collect_key_factors(params: ProjectParameters) -> list[KeyFactor]:
    """Qualitative factors that move the ROI forecast up or down."""
    factors: list[KeyFactor] = []

    if params.budget > LARGE_PROJECT_BUDGET:
        factors.append(KeyFactor(
            factor="Large project scale",
            impact=0.2,
            confidence=0.9,
            description="Scale brings economies and a stronger reference",
        ))
    elif params.budget < SMALL_PROJECT_BUDGET:
        factors.append(KeyFactor(
            factor="Small project scale",
            impact=-0.1,
            confidence=0.8,
            description="Fixed overheads weigh more on a small contract",
        ))

    segment = _SEGMENT_FACTORS.get(params.customer_segment)
    if segment is not None:
        name, impact, confidence, description = segment
        factors.append(KeyFactor(name, impact, confidence, description))

    if params.is_ai_related:
        factors.append(KeyFactor(
            factor="AI technology",
            impact=0.4,
            confidence=0.7,
            description="AI work commands premium rates but carries delivery risk",
        ))
    if params.is_cloud_related:
        factors.append(KeyFactor(
            factor="Cloud technology",
            impact=0.25,
            confidence=0.8,
            description="Cloud platforms lead to recurring service revenue",
        ))

    market = params.market_conditions
    if market is not None:
        if market.economic_growth > 0.06:
            factors.append(KeyFactor(
                factor="Strong economic growth",
                impact=0.15,
                confidence=0.6,
                description="A growing economy supports IT spending",
            ))
        if market.industry_growth > 0.10:
            factors.append(KeyFactor(
                factor="Fast industry growth",
                impact=0.2,
                confidence=0.7,
                description="A fast-growing industry creates follow-on demand",
            ))
        if market.competition_level == CompetitionLevel.HIGH:
            factors.append(KeyFactor(
                factor=HIGH_COMPETITION_FACTOR,
                impact=-0.2,
                confidence=0.8,
                description="Fierce competition squeezes margins",
            ))
        if market.market_maturity == MarketMaturity.EMERGING:
            factors.append(KeyFactor(
                factor="Emerging market",
                impact=0.3,
                confidence=0.6,
                description="Emerging markets offer upside with more uncertainty",
            ))

    history = params.historical_data
    if history is not None:
        mean_roi = history.mean_roi()
        if mean_roi is not None and mean_roi > 30:
            factors.append(KeyFactor(
                factor="Strong track record",
                impact=0.25,
                confidence=0.9,
                description="Comparable projects delivered strong returns",
            ))
        if history.client_satisfaction is not None and history.client_satisfaction > 0.85:
            factors.append(KeyFactor(
                factor="High client satisfaction",
                impact=0.2,
                confidence=0.85,
                description="Satisfied clients come back for more work",
            ))
        if history.project_success_rate is not None and history.project_success_rate < 0.7:
            factors.append(KeyFactor(
                factor="Low project success rate",
                impact=-0.3,
                confidence=0.8,
                description="A weak delivery record raises execution risk",
            ))

    return factors


def reskew_probabilities(
    baseline: ROIAnalysis,
    adjustment: float,
    config: PredictionConfig,
) -> dict[Scenario, float]:
    """Shift scenario probability toward the optimistic tail when adjustment > 1."""
    prior_optimistic = baseline.scenarios[Scenario.OPTIMISTIC].probability
    prior_pessimistic = baseline.scenarios[Scenario.PESSIMISTIC].probability

    optimistic = max(
        config.optimistic_min, min(config.optimistic_max, prior_optimistic * adjustment)
    )
    if adjustment > 0:
        pessimistic = max(config.pessimistic_floor, prior_pessimistic / adjustment)
    else:
        pessimistic = 1 - optimistic
    pessimistic = min(pessimistic, 1 - optimistic)

    return {
        Scenario.OPTIMISTIC: optimistic,
        Scenario.NEUTRAL: 1 - optimistic - pessimistic,
        Scenario.PESSIMISTIC: pessimistic,
    }


def adjust_roi(
    baseline: ROIAnalysis,
    adjustment: float,
    config: PredictionConfig,
) -> ROIAnalysis:
    probabilities = reskew_probabilities(baseline, adjustment, config)
    scenarios = {
        scenario: replace(
            outcome,
            revenue=outcome.revenue * adjustment,
            probability=probabilities[scenario],
        )
        for scenario, outcome in baseline.scenarios.items()
    }
    return replace(
        baseline,
        optimistic=baseline.optimistic * adjustment,
        neutral=baseline.neutral * adjustment,
        pessimistic=baseline.pessimistic * adjustment,
        scenarios=scenarios,
    )


def confidence_level(
    params: ProjectParameters,
    factors: list[KeyFactor],
    has_project_analysis: bool,
    config: PredictionConfig,
) -> float:
    """Confidence in the forecast, clamped to [min_confidence, max_confidence].

    Starts at base_confidence, rises with each kind of supporting input and
    with the mean factor confidence, falls for very large budgets and rises
    slightly for very small ones.
    """
    score = config.base_confidence
    if has_project_analysis:
        score += config.project_analysis_bonus
    if params.market_conditions is not None:
        score += config.market_conditions_bonus
    if params.historical_data is not None:
        score += config.historical_data_bonus

    if factors:
        mean_confidence = sum(f.confidence for f in factors) / len(factors)
        score += (mean_confidence - 0.5) * config.factor_confidence_weight

    if params.budget > config.large_budget:
        score -= config.large_budget_penalty
    if params.budget < config.small_budget:
        score += config.small_budget_bonus

    return max(config.min_confidence, min(config.max_confidence, score))


class ROIPredictor:
    """Stateless adjuster applied on top of the baseline ROI analysis."""

    def __init__(self, config: EngineConfig):
        self._config = config

    def predict(
        self,
        params: ProjectParameters,
        cost: CostAnalysis,
        baseline: ROIAnalysis,
        project_analysis: Optional[ProjectAnalysis] = None,
    ) -> ROIPredictionResult:
        pred_config = self._config.prediction
        factors = collect_key_factors(params)
        total_impact = sum(f.impact * f.confidence for f in factors)
        adjustment = 1 + total_impact
        adjusted = adjust_roi(baseline, adjustment, pred_config)
        confidence = confidence_level(
            params, factors, project_analysis is not None, pred_config
        )

        logger.debug(
            f"{len(factors)} key factors, adjustment={adjustment:.3f}, "
            f"confidence={confidence:.2f}"
        )

        return ROIPredictionResult(
            baseline_roi=baseline,
            adjusted_roi=adjusted,
            adjustment_factor=adjustment,
            confidence_level=confidence,
            key_factors=factors,
            scenarios=self._scenarios(adjusted, factors),
            recommendations=self._recommendations(adjusted, factors, confidence),
            risk_mitigation=self._risk_mitigation(params, cost, factors),
        )

    def _scenarios(
        self, adjusted: ROIAnalysis, factors: list[KeyFactor]
    ) -> dict[PredictedScenario, PredictedOutcome]:
        positive = [f.description for f in factors if f.impact > 0.2]
        negative = [f.description for f in factors if f.impact < -0.1]
        return {
            PredictedScenario.BEST_CASE: PredictedOutcome(
                roi=adjusted.optimistic,
                probability=adjusted.scenarios[Scenario.OPTIMISTIC].probability,
                conditions=_BEST_CASE_CONDITIONS + positive,
            ),
            PredictedScenario.MOST_LIKELY: PredictedOutcome(
                roi=adjusted.neutral,
                probability=adjusted.scenarios[Scenario.NEUTRAL].probability,
                conditions=list(_MOST_LIKELY_CONDITIONS),
            ),
            PredictedScenario.WORST_CASE: PredictedOutcome(
                roi=adjusted.pessimistic,
                probability=adjusted.scenarios[Scenario.PESSIMISTIC].probability,
                conditions=_WORST_CASE_CONDITIONS + negative,
            ),
        }

    def _recommendations(
        self,
        adjusted: ROIAnalysis,
        factors: list[KeyFactor],
        confidence: float,
    ) -> list[str]:
        recs: list[str] = []

        if adjusted.neutral > 50:
            recs.append("Excellent predicted ROI; bid on this tender")
        elif adjusted.neutral > 25:
            recs.append("Good predicted ROI; pursue the bid actively")
        elif adjusted.neutral > 10:
            recs.append("Modest predicted ROI; evaluate carefully before bidding")
        else:
            recs.append("Low predicted ROI; bidding is not recommended")

        if confidence < 0.5:
            recs.append("Forecast confidence is low; gather more information and re-run")
        elif confidence > 0.8:
            recs.append("Forecast confidence is high; use this analysis to set the bid strategy")

        strengths = [f.factor for f in factors if f.impact > 0.2]
        if strengths:
            recs.append(f"Play to strengths: {', '.join(strengths)}")
        weaknesses = [f.factor for f in factors if f.impact < -0.1]
        if weaknesses:
            recs.append(f"Mitigate risk factors: {', '.join(weaknesses)}")

        if adjusted.scenarios[Scenario.PESSIMISTIC].probability > 0.3:
            recs.append("The pessimistic case is likely enough to need a contingency plan")
        if adjusted.scenarios[Scenario.OPTIMISTIC].probability > 0.25:
            recs.append("The optimistic case is plausible; consider a higher bid price")

        return recs

    def _risk_mitigation(
        self,
        params: ProjectParameters,
        cost: CostAnalysis,
        factors: list[KeyFactor],
    ) -> list[RiskMitigation]:
        budget = params.budget
        entries: list[RiskMitigation] = []

        if params.is_ai_related:
            entries.append(RiskMitigation(
                risk="AI delivery risk",
                impact=RiskLevel.HIGH,
                mitigation="Staff senior AI engineers and run a technical spike early",
                cost=budget * 0.05,
            ))
        if any(f.factor == HIGH_COMPETITION_FACTOR for f in factors):
            entries.append(RiskMitigation(
                risk="Competitive pressure",
                impact=RiskLevel.MEDIUM,
                mitigation="Differentiate on technical strengths and client lock-in",
                cost=budget * 0.03,
            ))
        if budget > LARGE_PROJECT_BUDGET:
            entries.append(RiskMitigation(
                risk="Large-project management",
                impact=RiskLevel.HIGH,
                mitigation="Dedicated project office, iterative delivery in stages",
                cost=budget * 0.02,
            ))
        entries.append(RiskMitigation(
            risk="Client satisfaction",
            impact=RiskLevel.MEDIUM,
            mitigation="Regular check-ins and fast response to client requests",
            cost=budget * 0.01,
        ))
        if cost.total_cost > budget * 0.9:
            entries.append(RiskMitigation(
                risk="Cost overrun",
                impact=RiskLevel.HIGH,
                mitigation="Strict cost control with early-warning thresholds",
                cost=budget * 0.015,
            ))

        return entries
