"""Side-by-side ranking of already analyzed tenders."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from tender_roi.engine.result import CostBenefitResult
from tender_roi.models.enums import RISK_RANK, RiskLevel


@dataclass(frozen=True)
class ComparedTender:
    tender_id: str
    title: str
    roi: float
    total_cost: float
    total_benefit: float
    risk_level: RiskLevel
    break_even_point: float
    profit_margin: float


@dataclass(frozen=True)
class ComparisonReport:
    ranking: list[ComparedTender]
    by_roi: list[str]
    by_cost: list[str]
    by_risk: list[str]
    summary: dict[str, object]
    recommendations: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)


def compare_results(
    results: list[CostBenefitResult],
    titles: dict[str, str],
    missing: Optional[list[str]] = None,
) -> ComparisonReport:
    """Rank results by ROI (desc), then cost (asc), then risk (asc).

    ``titles`` maps tender id to display title; unknown ids fall back to
    the id itself.
    """
    if not results:
        raise ValueError("No analysis results to compare")

    tenders = [
        ComparedTender(
            tender_id=r.tender_id,
            title=titles.get(r.tender_id, r.tender_id),
            roi=r.roi_analysis.neutral,
            total_cost=r.cost_analysis.total_cost,
            total_benefit=r.benefit_analysis.total_benefit,
            risk_level=r.risk_assessment.level,
            break_even_point=r.roi_analysis.break_even_point,
            profit_margin=r.financial_metrics.profit_margin,
        )
        for r in results
    ]

    ranking = sorted(tenders, key=lambda t: (-t.roi, t.total_cost, RISK_RANK[t.risk_level]))
    by_roi = sorted(tenders, key=lambda t: -t.roi)
    by_cost = sorted(tenders, key=lambda t: t.total_cost)
    by_risk = sorted(tenders, key=lambda t: RISK_RANK[t.risk_level])

    recommendations: list[str] = []
    best = by_roi[0]
    recommendations.append(f'Recommend "{best.title}": highest ROI ({best.roi:.1f}%)')
    safest = by_risk[0]
    if safest.risk_level == RiskLevel.LOW:
        recommendations.append(f'"{safest.title}" carries the lowest risk; suited to a cautious bid')
    balanced = next(
        (t for t in tenders if t.roi > 15 and t.risk_level != RiskLevel.HIGH), None
    )
    if balanced is not None:
        recommendations.append(f'"{balanced.title}" balances return and risk well')

    summary = {
        "total_tenders": len(tenders),
        "average_roi": sum(t.roi for t in tenders) / len(tenders),
        "average_cost": sum(t.total_cost for t in tenders) / len(tenders),
        "risk_distribution": {
            level.value: sum(1 for t in tenders if t.risk_level == level)
            for level in RiskLevel
        },
    }

    return ComparisonReport(
        ranking=ranking,
        by_roi=[t.tender_id for t in by_roi],
        by_cost=[t.tender_id for t in by_cost],
        by_risk=[t.tender_id for t in by_risk],
        summary=summary,
        recommendations=recommendations,
        missing=list(missing or []),
    )
