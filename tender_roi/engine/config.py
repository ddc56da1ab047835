"""Validated engine configuration.

Every rate, multiplier and threshold the engine uses lives here so that an
analysis is a pure function of (tender, parameters, config).
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from tender_roi.models.enums import Complexity, RiskLevel, Scenario

_SUM_TOLERANCE = 1e-6


class BudgetTier(BaseModel):
    """Duration and staffing for budgets below ``below`` (None = unbounded)."""

    below: Optional[float] = Field(default=None, gt=0)
    duration_months: int = Field(ge=1)
    team_size: int = Field(ge=1)


def _default_tiers() -> list[BudgetTier]:
    return [
        BudgetTier(below=500_000, duration_months=3, team_size=3),
        BudgetTier(below=2_000_000, duration_months=6, team_size=5),
        BudgetTier(below=5_000_000, duration_months=12, team_size=8),
        BudgetTier(below=None, duration_months=18, team_size=12),
    ]


class InferenceConfig(BaseModel):
    default_labor_rate_per_day: float = Field(default=800.0, gt=0)
    default_discount_rate: float = Field(default=0.08, ge=0, lt=1.0)
    budget_tiers: list[BudgetTier] = Field(default_factory=_default_tiers, min_length=1)
    high_risk_budget: float = Field(default=5_000_000, gt=0)
    medium_risk_budget: float = Field(default=1_000_000, gt=0)
    large_payment_budget: float = Field(default=5_000_000, gt=0)
    medium_payment_budget: float = Field(default=1_000_000, gt=0)

    @field_validator("budget_tiers")
    @classmethod
    def tiers_ascending(cls, v: list[BudgetTier]) -> list[BudgetTier]:
        if v[-1].below is not None:
            raise ValueError("The last budget tier must be unbounded (below=None)")
        bounds = [t.below for t in v[:-1]]
        if any(b is None for b in bounds):
            raise ValueError("Only the last budget tier may be unbounded")
        for i in range(1, len(bounds)):
            if bounds[i] <= bounds[i - 1]:
                raise ValueError(
                    f"budget_tiers must be ascending: tier {i} ({bounds[i - 1]}) "
                    f">= tier {i + 1} ({bounds[i]})"
                )
        return v

    def tier_for(self, budget: float) -> BudgetTier:
        for tier in self.budget_tiers:
            if tier.below is None or budget < tier.below:
                return tier
        return self.budget_tiers[-1]


class PhaseShare(BaseModel):
    name: str
    share: float = Field(ge=0, le=1.0)


def _default_phase_template() -> list[PhaseShare]:
    return [
        PhaseShare(name="Requirements analysis", share=0.15),
        PhaseShare(name="System design", share=0.20),
        PhaseShare(name="Development", share=0.45),
        PhaseShare(name="Testing", share=0.15),
        PhaseShare(name="Deployment", share=0.05),
    ]


class CostConfig(BaseModel):
    workdays_per_month: int = Field(default=22, ge=1)
    technology_share: float = Field(default=0.2, ge=0)
    overhead_rate: float = Field(default=0.30, ge=0)
    complexity_multipliers: dict[Complexity, float] = Field(
        default_factory=lambda: {
            Complexity.LOW: 1.0,
            Complexity.MEDIUM: 1.3,
            Complexity.HIGH: 1.6,
        }
    )
    risk_multipliers: dict[RiskLevel, float] = Field(
        default_factory=lambda: {
            RiskLevel.LOW: 0.05,
            RiskLevel.MEDIUM: 0.10,
            RiskLevel.HIGH: 0.20,
        }
    )
    phase_template: list[PhaseShare] = Field(
        default_factory=_default_phase_template, min_length=1
    )

    @model_validator(mode="after")
    def complete_tables(self) -> CostConfig:
        if set(self.complexity_multipliers) != set(Complexity):
            raise ValueError("complexity_multipliers must cover LOW, MEDIUM and HIGH")
        if set(self.risk_multipliers) != set(RiskLevel):
            raise ValueError("risk_multipliers must cover LOW, MEDIUM and HIGH")
        total = sum(p.share for p in self.phase_template)
        if abs(total - 1.0) > _SUM_TOLERANCE:
            raise ValueError(f"phase_template shares must sum to 1.0, got {total:.4f}")
        return self


class BenefitConfig(BaseModel):
    future_opportunity_rate: float = Field(default=0.30, ge=0)
    government_multiplier: float = Field(default=1.5, ge=0)
    large_future_budget: float = Field(default=2_000_000, gt=0)
    large_future_multiplier: float = Field(default=1.2, ge=0)
    technology_value_rate: float = Field(default=0.10, ge=0)
    technology_multipliers: dict[Complexity, float] = Field(
        default_factory=lambda: {
            Complexity.LOW: 1.0,
            Complexity.MEDIUM: 1.5,
            Complexity.HIGH: 2.0,
        }
    )
    brand_value_rate: float = Field(default=0.05, ge=0)
    prestige_multiplier: float = Field(default=2.0, ge=0)
    large_brand_budget: float = Field(default=5_000_000, gt=0)
    large_brand_multiplier: float = Field(default=1.5, ge=0)
    recurring_share: float = Field(default=0.6, ge=0, le=1.0)
    post_completion_months: int = Field(default=12, ge=1)


class ScenarioSpec(BaseModel):
    benefit_multiplier: float = Field(gt=0)
    cost_multiplier: float = Field(gt=0)
    probability: float = Field(ge=0, le=1.0)
    assumptions: list[str] = Field(default_factory=list)


class ScenarioSet(BaseModel):
    """Scale factors and prior probability for each scenario."""

    optimistic: ScenarioSpec
    neutral: ScenarioSpec
    pessimistic: ScenarioSpec

    @model_validator(mode="after")
    def probabilities_sum_to_one(self) -> ScenarioSet:
        total = (
            self.optimistic.probability
            + self.neutral.probability
            + self.pessimistic.probability
        )
        if abs(total - 1.0) > _SUM_TOLERANCE:
            raise ValueError(f"Scenario probabilities must sum to 1.0, got {total:.4f}")
        return self

    def get(self, scenario: Scenario) -> ScenarioSpec:
        return getattr(self, scenario.value)


def _cash_flow_scenarios() -> ScenarioSet:
    return ScenarioSet(
        optimistic=ScenarioSpec(
            benefit_multiplier=1.1,
            cost_multiplier=0.95,
            probability=0.2,
            assumptions=[
                "Payments arrive on schedule",
                "Costs come in under plan",
                "No scope changes",
            ],
        ),
        neutral=ScenarioSpec(
            benefit_multiplier=1.0,
            cost_multiplier=1.0,
            probability=0.6,
            assumptions=[
                "Project runs to plan",
                "Payment timing follows the contract",
                "Costs match estimate",
            ],
        ),
        pessimistic=ScenarioSpec(
            benefit_multiplier=0.9,
            cost_multiplier=1.1,
            probability=0.2,
            assumptions=[
                "Payments are delayed",
                "Cost overrun",
                "Scope changes add work",
            ],
        ),
    )


class CashFlowConfig(BaseModel):
    front_loaded_share: float = Field(
        default=0.7, ge=0, le=1.0, description="Share of cost in the first half for FRONT_LOADED"
    )
    back_loaded_share: float = Field(
        default=0.7, ge=0, le=1.0, description="Share of cost in the second half for BACK_LOADED"
    )
    requirements_milestone_fraction: float = Field(default=0.2, gt=0, le=1.0)
    design_milestone_fraction: float = Field(default=0.4, gt=0, le=1.0)
    build_milestone_fraction: float = Field(default=0.7, gt=0, le=1.0)
    test_milestone_fraction: float = Field(default=0.9, gt=0, le=1.0)
    liquidity_high_ratio: float = Field(default=0.5, ge=0)
    liquidity_medium_ratio: float = Field(default=0.3, ge=0)
    concentration_months: int = Field(default=3, ge=1)
    concentration_threshold: float = Field(default=0.5, ge=0, le=1.0)
    volatility_ratio: float = Field(default=0.5, ge=0)
    funding_gap_ratio: float = Field(default=0.3, ge=0)
    scenarios: ScenarioSet = Field(default_factory=_cash_flow_scenarios)

    @field_validator("build_milestone_fraction")
    @classmethod
    def build_fraction_known(cls, v: float) -> float:
        if v not in (0.7, 0.8):
            raise ValueError(f"build_milestone_fraction must be 0.7 or 0.8, got {v}")
        return v


class SensitivityEntry(BaseModel):
    factor: str
    impact: float = Field(ge=0, le=1.0)
    description: str


def _default_sensitivity() -> list[SensitivityEntry]:
    return [
        SensitivityEntry(
            factor="budget",
            impact=0.8,
            description="Contract value drives revenue directly",
        ),
        SensitivityEntry(
            factor="labor_cost",
            impact=0.6,
            description="Labor is the largest cost component",
        ),
        SensitivityEntry(
            factor="complexity",
            impact=0.5,
            description="Technical complexity moves technology cost and risk buffer",
        ),
        SensitivityEntry(
            factor="duration",
            impact=0.4,
            description="Schedule overrun raises labor and management cost",
        ),
        SensitivityEntry(
            factor="competition",
            impact=0.3,
            description="Competitive pressure squeezes the achievable price",
        ),
    ]


def _roi_scenarios() -> ScenarioSet:
    return ScenarioSet(
        optimistic=ScenarioSpec(
            benefit_multiplier=1.3,
            cost_multiplier=0.9,
            probability=0.2,
            assumptions=[
                "Delivery is efficient",
                "Client is satisfied",
                "Follow-on work materializes",
            ],
        ),
        neutral=ScenarioSpec(
            benefit_multiplier=1.0,
            cost_multiplier=1.0,
            probability=0.6,
            assumptions=[
                "Delivery follows plan",
                "Costs within budget",
                "Revenue as expected",
            ],
        ),
        pessimistic=ScenarioSpec(
            benefit_multiplier=0.7,
            cost_multiplier=1.2,
            probability=0.2,
            assumptions=[
                "Technical difficulty exceeds estimate",
                "Cost overrun",
                "Client requirements change",
            ],
        ),
    )


class ROIConfig(BaseModel):
    optimistic_multiplier: float = Field(default=1.3, gt=0)
    pessimistic_multiplier: float = Field(default=0.7, gt=0)
    scenarios: ScenarioSet = Field(default_factory=_roi_scenarios)
    sensitivity: list[SensitivityEntry] = Field(default_factory=_default_sensitivity)

    @model_validator(mode="after")
    def multipliers_ordered(self) -> ROIConfig:
        if not (self.pessimistic_multiplier <= 1.0 <= self.optimistic_multiplier):
            raise ValueError(
                f"ROI multipliers must satisfy pessimistic ({self.pessimistic_multiplier}) "
                f"<= 1.0 <= optimistic ({self.optimistic_multiplier})"
            )
        return self


class PredictionConfig(BaseModel):
    """Knobs for the confidence-weighted ROI adjustment.

    The probability clamps are policy, not domain law: the optimistic tail
    is its prior x adjustment clamped to [optimistic_min, optimistic_max]
    and the pessimistic tail is its prior / adjustment floored at
    pessimistic_floor.
    """

    enabled: bool = True
    optimistic_min: float = Field(default=0.1, ge=0, le=1.0)
    optimistic_max: float = Field(default=0.3, ge=0, le=1.0)
    pessimistic_floor: float = Field(default=0.1, ge=0, le=1.0)
    base_confidence: float = Field(default=0.5, ge=0, le=1.0)
    project_analysis_bonus: float = Field(default=0.1, ge=0)
    market_conditions_bonus: float = Field(default=0.1, ge=0)
    historical_data_bonus: float = Field(default=0.15, ge=0)
    factor_confidence_weight: float = Field(default=0.3, ge=0)
    large_budget: float = Field(default=10_000_000, gt=0)
    large_budget_penalty: float = Field(default=0.1, ge=0)
    small_budget: float = Field(default=500_000, gt=0)
    small_budget_bonus: float = Field(default=0.05, ge=0)
    min_confidence: float = Field(default=0.1, ge=0, le=1.0)
    max_confidence: float = Field(default=0.95, ge=0, le=1.0)

    @model_validator(mode="after")
    def bounds_ordered(self) -> PredictionConfig:
        if self.optimistic_min > self.optimistic_max:
            raise ValueError(
                f"optimistic_min ({self.optimistic_min}) must not exceed "
                f"optimistic_max ({self.optimistic_max})"
            )
        if self.optimistic_max + self.pessimistic_floor > 1.0:
            raise ValueError("optimistic_max + pessimistic_floor must not exceed 1.0")
        if self.min_confidence > self.max_confidence:
            raise ValueError("min_confidence must not exceed max_confidence")
        return self


class EngineConfig(BaseModel):
    """Top-level engine configuration with documented defaults."""

    inference: InferenceConfig = Field(default_factory=InferenceConfig)
    cost: CostConfig = Field(default_factory=CostConfig)
    benefit: BenefitConfig = Field(default_factory=BenefitConfig)
    cash_flow: CashFlowConfig = Field(default_factory=CashFlowConfig)
    roi: ROIConfig = Field(default_factory=ROIConfig)
    prediction: PredictionConfig = Field(default_factory=PredictionConfig)
