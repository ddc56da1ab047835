"""Immutable result data structures for a tender analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from tender_roi.models.enums import (
    Complexity,
    CustomerSegment,
    PredictedScenario,
    RiskLevel,
    Scenario,
)
from tender_roi.models.parameters import (
    CostDistribution,
    HistoricalData,
    MarketConditions,
    PaymentSchedule,
)


@dataclass(frozen=True)
class ProjectParameters:
    """Complete parameter set after inference and overrides."""

    budget: float
    duration_months: int
    team_size: int
    complexity: Complexity
    risk_level: RiskLevel
    labor_rate_per_day: float
    discount_rate: float
    customer_segment: CustomerSegment
    payment_schedule: PaymentSchedule
    cost_distribution: CostDistribution
    is_ai_related: bool = False
    is_cloud_related: bool = False
    is_integration_related: bool = False
    market_conditions: Optional[MarketConditions] = None
    historical_data: Optional[HistoricalData] = None
    inferred_fields: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CostBreakdown:
    direct: float
    indirect: float
    fixed: float
    variable: float


@dataclass(frozen=True)
class PhaseCost:
    phase: str
    cost: float
    percentage: float  # fraction of total cost


@dataclass(frozen=True)
class CostAnalysis:
    labor_cost: float
    technology_cost: float
    management_cost: float
    risk_cost: float
    total_cost: float
    breakdown: CostBreakdown
    cost_by_phase: list[PhaseCost]


@dataclass(frozen=True)
class BenefitBreakdown:
    immediate_revenue: float
    recurring_revenue: float
    strategic_value: float
    market_expansion: float


@dataclass(frozen=True)
class BenefitPeriod:
    period: int
    label: str
    benefit: float
    cumulative: float


@dataclass(frozen=True)
class BenefitAnalysis:
    direct_revenue: float
    future_opportunities: float
    technology_value: float
    brand_value: float
    total_benefit: float
    breakdown: BenefitBreakdown
    benefit_timeline: list[BenefitPeriod]


@dataclass(frozen=True)
class ScenarioOutcome:
    """Revenue and cost of one ROI scenario."""

    revenue: float
    costs: float
    probability: float
    assumptions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SensitivityFactor:
    factor: str
    impact: float
    description: str


@dataclass(frozen=True)
class ROIAnalysis:
    optimistic: float
    neutral: float
    pessimistic: float
    break_even_point: float
    scenarios: dict[Scenario, ScenarioOutcome]
    sensitivity_analysis: list[SensitivityFactor]


@dataclass(frozen=True)
class MonthlyFlow:
    month: int
    income: float
    expense: float
    net_flow: float
    cumulative_flow: float
    milestones: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CashFlowSummary:
    total_inflow: float
    total_outflow: float
    net_cash_flow: float
    peak_funding: float
    payback_period: int
    average_monthly_flow: float


@dataclass(frozen=True)
class CashFlowMetrics:
    net_present_value: float
    internal_rate_of_return: float  # monthly, percent
    profitability_index: float
    discounted_payback_period: int


@dataclass(frozen=True)
class CashFlowRisk:
    cash_flow_volatility: float
    liquidity_risk: RiskLevel
    funding_gap: float
    income_concentration: float
    risk_factors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CashFlowScenario:
    """Headline figures of one fully re-simulated cash-flow scenario."""

    benefit_multiplier: float
    cost_multiplier: float
    probability: float
    net_cash_flow: float
    net_present_value: float
    payback_period: int
    peak_funding: float
    assumptions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CashFlowResult:
    monthly_flow: list[MonthlyFlow]
    summary: CashFlowSummary
    financial_metrics: CashFlowMetrics
    risk_analysis: CashFlowRisk
    scenarios: dict[Scenario, CashFlowScenario]
    recommendations: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class KeyFactor:
    factor: str
    impact: float
    confidence: float
    description: str


@dataclass(frozen=True)
class PredictedOutcome:
    roi: float
    probability: float
    conditions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RiskMitigation:
    risk: str
    impact: RiskLevel
    mitigation: str
    cost: float


@dataclass(frozen=True)
class ROIPredictionResult:
    baseline_roi: ROIAnalysis
    adjusted_roi: ROIAnalysis
    adjustment_factor: float
    confidence_level: float
    key_factors: list[KeyFactor]
    scenarios: dict[PredictedScenario, PredictedOutcome]
    recommendations: list[str] = field(default_factory=list)
    risk_mitigation: list[RiskMitigation] = field(default_factory=list)


@dataclass(frozen=True)
class FinancialMetrics:
    profit_margin: float
    return_on_investment: float
    cost_efficiency_ratio: float
    revenue_growth_rate: float
    cost_variance_percentage: float
    budget_utilization_rate: float


@dataclass(frozen=True)
class RiskAssessment:
    level: RiskLevel
    factors: list[str] = field(default_factory=list)
    mitigation: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CostBenefitResult:
    """Top-level result of analyzing one tender."""

    tender_id: str
    parameters: ProjectParameters
    cost_analysis: CostAnalysis
    benefit_analysis: BenefitAnalysis
    roi_analysis: ROIAnalysis
    cash_flow_analysis: CashFlowResult
    financial_metrics: FinancialMetrics
    recommendations: list[str]
    risk_assessment: RiskAssessment
    roi_prediction: Optional[ROIPredictionResult] = None
