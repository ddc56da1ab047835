"""Tests for parameter inference and the default policies."""

import pytest

from tender_roi.engine.config import InferenceConfig
from tender_roi.engine.inference import (
    classify_customer,
    contains_keyword,
    default_cost_distribution,
    default_payment_schedule,
    infer_complexity,
    infer_parameters,
    infer_risk_level,
    month_at,
)
from tender_roi.models.enums import (
    Complexity,
    CostDistributionType,
    CustomerSegment,
    PaymentScheduleType,
    RiskLevel,
)
from tender_roi.models.parameters import CustomParameters

from tests.conftest import make_tender


@pytest.fixture
def inference_config():
    return InferenceConfig()


class TestBudgetTiers:
    @pytest.mark.parametrize(
        "budget, duration, team",
        [
            (100_000, 3, 3),
            (499_999, 3, 3),
            (500_000, 6, 5),
            (1_000_000, 6, 5),
            (1_999_999, 6, 5),
            (2_000_000, 12, 8),
            (4_999_999, 12, 8),
            (5_000_000, 18, 12),
            (50_000_000, 18, 12),
        ],
    )
    def test_duration_and_team(self, inference_config, budget, duration, team):
        params = infer_parameters(make_tender(budget=budget), None, inference_config)
        assert params.duration_months == duration
        assert params.team_size == team

    def test_defaults_for_rates(self, inference_config):
        params = infer_parameters(make_tender(), None, inference_config)
        assert params.labor_rate_per_day == 800.0
        assert params.discount_rate == 0.08


class TestComplexity:
    def test_high_from_ai(self):
        assert infer_complexity("Smart city AI platform") == Complexity.HIGH

    def test_high_from_chinese_keyword(self):
        assert infer_complexity("智慧城市大数据平台建设") == Complexity.HIGH

    def test_medium_from_database(self):
        assert infer_complexity("Office database upgrade") == Complexity.MEDIUM

    def test_low_otherwise(self):
        assert infer_complexity("Website content refresh") == Complexity.LOW

    def test_ai_needs_whole_word(self):
        assert not contains_keyword("Maintain the email server", ["ai"])
        assert infer_complexity("Maintain the email server") == Complexity.LOW

    def test_case_insensitive(self):
        assert contains_keyword("BLOCKCHAIN ledger", ["blockchain"])


class TestRiskLevel:
    def test_high_budget(self, inference_config):
        assert infer_risk_level(6_000_000, Complexity.LOW, inference_config) == RiskLevel.HIGH

    def test_high_complexity(self, inference_config):
        assert infer_risk_level(100_000, Complexity.HIGH, inference_config) == RiskLevel.HIGH

    def test_medium_budget(self, inference_config):
        assert infer_risk_level(1_500_000, Complexity.LOW, inference_config) == RiskLevel.MEDIUM

    def test_medium_complexity(self, inference_config):
        assert infer_risk_level(100_000, Complexity.MEDIUM, inference_config) == RiskLevel.MEDIUM

    def test_low(self, inference_config):
        assert infer_risk_level(1_000_000, Complexity.LOW, inference_config) == RiskLevel.LOW

    def test_override_complexity_drives_risk(self, inference_config):
        custom = CustomParameters(technology_complexity=Complexity.HIGH)
        params = infer_parameters(make_tender(budget=300_000), custom, inference_config)
        assert params.risk_level == RiskLevel.HIGH


class TestCustomerSegment:
    @pytest.mark.parametrize(
        "purchaser, segment",
        [
            ("National Bank of Commerce", CustomerSegment.FINANCE),
            ("中国工商银行", CustomerSegment.FINANCE),
            ("Pacific Insurance Group", CustomerSegment.INSURANCE),
            ("Riverside Municipal Government", CustomerSegment.GOVERNMENT),
            ("市发展和改革委员会", CustomerSegment.GOVERNMENT),
            ("Acme Manufacturing Ltd", CustomerSegment.ENTERPRISE),
            ("", CustomerSegment.ENTERPRISE),
        ],
    )
    def test_segments(self, purchaser, segment):
        assert classify_customer(purchaser) == segment

    def test_finance_wins_over_insurance(self):
        assert classify_customer("Bank and Insurance Holdings") == CustomerSegment.FINANCE


class TestOverrides:
    def test_overrides_are_kept(self, inference_config):
        custom = CustomParameters(
            project_duration_months=9,
            team_size=4,
            technology_complexity=Complexity.LOW,
            risk_level=RiskLevel.MEDIUM,
            labor_rate_per_day=1_000,
            discount_rate=0.05,
        )
        params = infer_parameters(make_tender(), custom, inference_config)
        assert params.duration_months == 9
        assert params.team_size == 4
        assert params.complexity == Complexity.LOW
        assert params.risk_level == RiskLevel.MEDIUM
        assert params.labor_rate_per_day == 1_000
        assert params.discount_rate == 0.05
        assert "team_size" not in params.inferred_fields

    def test_inferred_fields_listed(self, inference_config):
        params = infer_parameters(make_tender(), None, inference_config)
        assert "project_duration_months" in params.inferred_fields
        assert "payment_schedule" in params.inferred_fields

    def test_deterministic(self, inference_config):
        tender = make_tender(title="Cloud data platform")
        assert infer_parameters(tender, None, inference_config) == infer_parameters(
            tender, None, inference_config
        )


class TestMonthAt:
    def test_reference_duration(self):
        assert [month_at(f, 10) for f in (0.0, 0.2, 0.4, 0.7, 0.9, 1.0)] == [1, 2, 4, 7, 9, 10]

    def test_float_noise_does_not_push_month(self):
        # 0.7 * 10 is 7.000000000000001 in floating point
        assert month_at(0.7, 10) == 7

    def test_never_outside_project(self):
        assert month_at(0.0, 1) == 1
        assert month_at(1.0, 3) == 3


class TestDefaultPaymentSchedule:
    def test_large_budget_six_milestones(self, inference_config):
        schedule = default_payment_schedule(8_000_000, 10, inference_config)
        assert schedule.type == PaymentScheduleType.MILESTONE
        assert [m.month for m in schedule.milestones] == [1, 2, 4, 7, 9, 10]
        assert [m.percentage for m in schedule.milestones] == [20, 15, 20, 25, 15, 5]

    def test_medium_budget_three_milestones(self, inference_config):
        schedule = default_payment_schedule(1_500_000, 6, inference_config)
        assert [m.month for m in schedule.milestones] == [1, 4, 6]
        assert [m.percentage for m in schedule.milestones] == [30, 40, 30]

    def test_small_budget_monthly(self, inference_config):
        schedule = default_payment_schedule(1_000_000, 6, inference_config)
        assert schedule.type == PaymentScheduleType.MONTHLY

    @pytest.mark.parametrize("duration", [1, 3, 6, 12, 18, 24])
    def test_invariants_hold_for_any_duration(self, inference_config, duration):
        schedule = default_payment_schedule(8_000_000, duration, inference_config)
        assert sum(m.percentage for m in schedule.milestones) == pytest.approx(100)
        assert all(1 <= m.month <= duration for m in schedule.milestones)


class TestDefaultCostDistribution:
    def test_ai_front_loaded(self):
        dist = default_cost_distribution(6, is_ai_related=True, is_integration_related=True)
        assert dist.type == CostDistributionType.FRONT_LOADED

    def test_integration_back_loaded(self):
        dist = default_cost_distribution(6, is_ai_related=False, is_integration_related=True)
        assert dist.type == CostDistributionType.BACK_LOADED

    def test_phased_windows_for_ten_months(self):
        dist = default_cost_distribution(10, False, False)
        assert dist.type == CostDistributionType.CUSTOM
        windows = [(p.start_month, p.end_month) for p in dist.phases]
        assert windows == [(1, 2), (2, 3), (3, 7), (7, 9), (9, 10)]

    @pytest.mark.parametrize("duration", [1, 2, 3, 6, 12, 18])
    def test_phases_valid_for_any_duration(self, duration):
        dist = default_cost_distribution(duration, False, False)
        assert sum(p.cost_percentage for p in dist.phases) == pytest.approx(100)
        for p in dist.phases:
            assert 1 <= p.start_month <= p.end_month <= duration

    def test_tender_text_selects_policy(self, inference_config):
        tender = make_tender(title="ERP system integration and deployment")
        params = infer_parameters(tender, None, inference_config)
        assert params.is_integration_related
        assert params.cost_distribution.type == CostDistributionType.BACK_LOADED
