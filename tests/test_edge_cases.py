"""Edge case tests -- tiny projects, odd schedules, zero margins, serialization."""

import json
import math

import pytest

from tender_roi.engine.serialize import result_summary, result_to_dict
from tender_roi.models.enums import (
    Complexity,
    CostDistributionType,
    PaymentScheduleType,
)
from tender_roi.models.parameters import (
    CostDistribution,
    CustomParameters,
    CustomPayment,
    PaymentSchedule,
)

from tests.conftest import make_tender


class TestEdgeCases:
    def test_one_month_project(self, engine):
        custom = CustomParameters(project_duration_months=1, team_size=1)
        result = engine.analyze(make_tender(budget=50_000), custom)
        flows = result.cash_flow_analysis.monthly_flow
        assert len(flows) == 1
        assert flows[0].cumulative_flow == pytest.approx(flows[0].net_flow)
        total = result.cost_analysis.total_cost
        assert result.roi_analysis.break_even_point == pytest.approx(total / (50_000 - total))

    def test_cost_exceeding_revenue(self, engine):
        custom = CustomParameters(team_size=40, technology_complexity=Complexity.HIGH)
        result = engine.analyze(make_tender(budget=200_000), custom)
        assert result.roi_analysis.break_even_point == result.parameters.duration_months
        assert result.cash_flow_analysis.summary.net_cash_flow < 0
        assert result.cash_flow_analysis.summary.payback_period == result.parameters.duration_months
        assert result.recommendations[0].startswith("Low ROI")

    def test_irr_without_sign_change_is_zero(self, engine):
        # Income always exceeds cost, so every monthly net flow is positive
        custom = CustomParameters(
            cost_distribution=CostDistribution(type=CostDistributionType.UNIFORM),
        )
        result = engine.analyze(make_tender(budget=1_000_000), custom)
        assert all(f.net_flow > 0 for f in result.cash_flow_analysis.monthly_flow)
        assert result.cash_flow_analysis.financial_metrics.internal_rate_of_return == 0.0

    def test_custom_payment_after_project_end(self, engine):
        custom = CustomParameters(
            project_duration_months=3,
            payment_schedule=PaymentSchedule(
                type=PaymentScheduleType.CUSTOM,
                custom_schedule=[
                    CustomPayment(month=2, amount=400_000),
                    CustomPayment(month=12, amount=600_000),
                ],
            ),
        )
        result = engine.analyze(make_tender(), custom)
        assert result.cash_flow_analysis.summary.total_inflow == pytest.approx(400_000)

    def test_zero_discount_rate(self, engine):
        custom = CustomParameters(discount_rate=0.0)
        result = engine.analyze(make_tender(), custom)
        metrics = result.cash_flow_analysis.financial_metrics
        summary = result.cash_flow_analysis.summary
        assert metrics.net_present_value == pytest.approx(
            summary.net_cash_flow - summary.peak_funding
        )

    def test_tender_without_description_uses_content(self, engine):
        tender = make_tender(title="Platform", content="Machine learning scoring service")
        result = engine.analyze(tender)
        assert result.parameters.complexity == Complexity.HIGH
        assert result.parameters.is_ai_related

    def test_chinese_tender(self, engine):
        tender = make_tender(
            title="智慧政务人工智能平台建设项目",
            budget=6_000_000,
            purchaser="市发展和改革委员会",
        )
        result = engine.analyze(tender)
        assert result.parameters.complexity == Complexity.HIGH
        assert result.parameters.cost_distribution.type == CostDistributionType.FRONT_LOADED
        factors = [f.factor for f in result.roi_prediction.key_factors]
        assert "Government client" in factors
        assert "AI technology" in factors


class TestSerialization:
    def test_result_is_json_serializable(self, engine, large_ai_tender):
        data = result_to_dict(engine.analyze(large_ai_tender))
        text = json.dumps(data)
        assert "FRONT_LOADED" in text
        assert data["roi_prediction"]["scenarios"]["best_case"]["probability"] == pytest.approx(0.3)
        assert data["parameters"]["payment_schedule"]["type"] == "MILESTONE"

    def test_enum_keys_and_values_become_strings(self, engine, mid_tender):
        data = result_to_dict(engine.analyze(mid_tender))
        assert set(data["roi_analysis"]["scenarios"]) == {"optimistic", "neutral", "pessimistic"}
        assert data["parameters"]["complexity"] == "MEDIUM"
        assert data["risk_assessment"]["level"] == "LOW"
        assert isinstance(data["cost_analysis"]["cost_by_phase"], list)
        assert json.loads(json.dumps(data)) == data

    def test_summary(self, engine, mid_tender):
        result = engine.analyze(mid_tender)
        summary = result_summary(result)
        assert summary["tender_id"] == "T-001"
        assert summary["risk_level"] == "LOW"
        assert summary["total_cost"] == pytest.approx(951_350.4)
        assert math.isfinite(summary["net_present_value"])
        assert summary["confidence_level"] == pytest.approx(0.5)
