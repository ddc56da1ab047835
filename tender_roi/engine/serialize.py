"""Convert engine results into JSON-ready dicts."""

from __future__ import annotations

from fastapi.encoders import jsonable_encoder

from tender_roi.engine.result import CostBenefitResult


def result_to_dict(result: CostBenefitResult) -> dict:
    return jsonable_encoder(result)


def result_summary(result: CostBenefitResult) -> dict:
    """Headline figures used in batch and comparison reports."""
    return {
        "tender_id": result.tender_id,
        "total_cost": result.cost_analysis.total_cost,
        "total_benefit": result.benefit_analysis.total_benefit,
        "roi": result.roi_analysis.neutral,
        "break_even_point": result.roi_analysis.break_even_point,
        "net_present_value": result.cash_flow_analysis.financial_metrics.net_present_value,
        "risk_level": result.risk_assessment.level.value,
        "confidence_level": (
            result.roi_prediction.confidence_level if result.roi_prediction else None
        ),
    }
