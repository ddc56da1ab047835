"""Integration tests for the cost-benefit engine."""

import math

import pytest

from tender_roi.engine.calculator import CostBenefitEngine
from tender_roi.engine.config import EngineConfig, PredictionConfig
from tender_roi.engine.errors import AnalysisError
from tender_roi.models.enums import PaymentScheduleType, RiskLevel, Scenario
from tender_roi.models.parameters import CustomParameters, Milestone, PaymentSchedule

from tests.conftest import make_tender


class TestCostBenefitEngine:
    def test_reference_tender(self, engine, mid_tender):
        result = engine.analyze(mid_tender)
        assert result.tender_id == "T-001"
        assert result.parameters.duration_months == 6
        assert result.parameters.team_size == 5
        assert result.cost_analysis.total_cost > 0
        assert result.benefit_analysis.total_benefit > 0
        phase_total = sum(p.percentage for p in result.cost_analysis.cost_by_phase)
        assert phase_total == pytest.approx(1.0, abs=1e-3)

    def test_deterministic(self, engine, large_ai_tender):
        custom = CustomParameters(discount_rate=0.1)
        assert engine.analyze(large_ai_tender, custom) == engine.analyze(large_ai_tender, custom)

    def test_no_nan_in_results(self, engine, large_ai_tender):
        result = engine.analyze(large_ai_tender)
        metrics = result.cash_flow_analysis.financial_metrics
        for value in (
            metrics.net_present_value,
            metrics.internal_rate_of_return,
            metrics.profitability_index,
            result.roi_analysis.neutral,
            result.roi_analysis.break_even_point,
        ):
            assert math.isfinite(value)

    def test_roi_analysis_is_adjusted(self, engine, large_ai_tender):
        result = engine.analyze(large_ai_tender)
        assert result.roi_prediction is not None
        assert result.roi_analysis == result.roi_prediction.adjusted_roi
        assert result.roi_analysis.neutral > result.roi_prediction.baseline_roi.neutral

    def test_prediction_disabled(self, large_ai_tender):
        engine = CostBenefitEngine(EngineConfig(prediction=PredictionConfig(enabled=False)))
        result = engine.analyze(large_ai_tender)
        assert result.roi_prediction is None
        assert result.roi_analysis.scenarios[Scenario.OPTIMISTIC].probability == 0.2
        assert result.roi_analysis.neutral == pytest.approx(
            (13_280_000 - result.cost_analysis.total_cost) / result.cost_analysis.total_cost * 100
        )

    def test_financial_metrics(self, engine, mid_tender):
        metrics = engine.analyze(mid_tender).financial_metrics
        assert metrics.profit_margin == pytest.approx((1_000_000 - 951_350.4) / 1_000_000 * 100)
        assert metrics.return_on_investment == pytest.approx(
            (1_000_000 - 951_350.4) / 951_350.4 * 100
        )
        assert metrics.cost_efficiency_ratio == pytest.approx(0.9513504)
        assert metrics.revenue_growth_rate == pytest.approx(30.0)
        assert metrics.cost_variance_percentage == 0.0
        assert metrics.budget_utilization_rate == pytest.approx(95.13504)

    def test_recommendations(self, engine, mid_tender):
        recs = engine.analyze(mid_tender).recommendations
        # ~117-month break-even on a 6-month contract
        assert recs == [
            "High ROI; bid actively",
            "Slow break-even; negotiate staged or advance payments",
        ]

    def test_fast_break_even_has_no_payment_warning(self, engine):
        custom = CustomParameters(team_size=1)
        result = engine.analyze(make_tender(), custom)
        assert result.roi_analysis.break_even_point <= 12
        assert not any("break-even" in r for r in result.recommendations)


class TestMissingInput:
    def test_missing_budget(self, engine):
        with pytest.raises(AnalysisError, match="failed to analyze tender T-001: tender has no budget"):
            engine.analyze(make_tender(budget=None))

    def test_zero_budget(self, engine):
        with pytest.raises(AnalysisError, match="budget must be positive") as exc_info:
            engine.analyze(make_tender(tender_id="T-ZERO", budget=0))
        assert exc_info.value.tender_id == "T-ZERO"
        assert not exc_info.value.not_found

    def test_negative_budget(self, engine):
        tender = make_tender(budget=-250_000)
        assert not tender.has_budget()
        with pytest.raises(AnalysisError, match="budget must be positive, got -250000"):
            engine.analyze(tender)

    def test_no_custom_parameters_is_not_an_error(self, engine, small_tender):
        result = engine.analyze(small_tender, None)
        assert set(result.parameters.inferred_fields) >= {"team_size", "discount_rate"}


class TestRiskAssessment:
    def test_single_factor_is_low(self, engine, mid_tender):
        risk = engine.analyze(mid_tender).risk_assessment
        assert risk.level == RiskLevel.LOW
        assert risk.factors == ["Estimated cost is close to the budget ceiling"]
        assert len(risk.mitigation) == len(risk.factors)

    def test_two_factors_is_medium(self, engine, large_ai_tender):
        risk = engine.analyze(large_ai_tender).risk_assessment
        assert risk.level == RiskLevel.MEDIUM
        assert len(risk.factors) == 2

    def test_three_factors_is_high(self, engine):
        tender = make_tender(tender_id="T-RISK", title="AI document assistant")
        custom = CustomParameters(
            team_size=12,
            project_duration_months=6,
            payment_schedule=PaymentSchedule(
                type=PaymentScheduleType.MILESTONE,
                milestones=[Milestone(name="Acceptance", percentage=100, month=6)],
            ),
        )
        result = engine.analyze(tender, custom)
        assert result.cash_flow_analysis.risk_analysis.liquidity_risk == RiskLevel.HIGH
        assert result.risk_assessment.level == RiskLevel.HIGH
        assert "Large up-front funding requirement strains liquidity" in result.risk_assessment.factors
