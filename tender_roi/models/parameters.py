"""Caller-supplied analysis parameters and cash-flow policies."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from .enums import (
    CompetitionLevel,
    Complexity,
    CostDistributionType,
    MarketMaturity,
    PaymentScheduleType,
    RiskLevel,
)

_PERCENT_TOLERANCE = 0.01


class MarketConditions(BaseModel):
    """Macro signals for the tender's market. Growth rates are fractions."""

    economic_growth: float = Field(default=0.0, ge=-1.0, le=1.0)
    industry_growth: float = Field(default=0.0, ge=-1.0, le=1.0)
    competition_level: CompetitionLevel = CompetitionLevel.MEDIUM
    market_maturity: MarketMaturity = MarketMaturity.GROWING


class HistoricalData(BaseModel):
    """Track record on comparable past projects."""

    similar_projects_roi: list[float] = Field(
        default_factory=list, description="ROI of comparable projects, in percent"
    )
    client_satisfaction: Optional[float] = Field(default=None, ge=0, le=1.0)
    project_success_rate: Optional[float] = Field(default=None, ge=0, le=1.0)

    def mean_roi(self) -> Optional[float]:
        if not self.similar_projects_roi:
            return None
        return sum(self.similar_projects_roi) / len(self.similar_projects_roi)


class Milestone(BaseModel):
    name: str
    percentage: float = Field(ge=0, le=100)
    month: int = Field(ge=1)
    conditions: list[str] = Field(default_factory=list)


class CustomPayment(BaseModel):
    month: int = Field(ge=1)
    amount: float = Field(ge=0)
    description: str = ""


class PaymentSchedule(BaseModel):
    """How the contract revenue is collected over the project months."""

    type: PaymentScheduleType
    milestones: list[Milestone] = Field(default_factory=list)
    monthly_percentage: Optional[float] = Field(default=None, gt=0, le=100)
    custom_schedule: list[CustomPayment] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_schedule(self) -> PaymentSchedule:
        total = sum(m.percentage for m in self.milestones)
        if total > 100 + _PERCENT_TOLERANCE:
            raise ValueError(
                f"Milestone percentages must sum to at most 100, got {total:.2f}"
            )
        if self.type == PaymentScheduleType.MILESTONE and not self.milestones:
            raise ValueError("MILESTONE payment schedule requires at least one milestone")
        if self.type == PaymentScheduleType.CUSTOM and not self.custom_schedule:
            raise ValueError("CUSTOM payment schedule requires custom_schedule entries")
        return self


class Phase(BaseModel):
    name: str
    start_month: int = Field(ge=1)
    end_month: int = Field(ge=1)
    cost_percentage: float = Field(ge=0, le=100)

    @model_validator(mode="after")
    def start_before_end(self) -> Phase:
        if self.end_month < self.start_month:
            raise ValueError(
                f"Phase '{self.name}' ends (month {self.end_month}) "
                f"before it starts (month {self.start_month})"
            )
        return self


class MonthShare(BaseModel):
    month: int = Field(ge=1)
    percentage: float = Field(ge=0, le=100)


class CostDistribution(BaseModel):
    """How the total project cost is spent over the project months."""

    type: CostDistributionType
    phases: list[Phase] = Field(default_factory=list)
    custom_distribution: list[MonthShare] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_distribution(self) -> CostDistribution:
        if self.phases:
            total = sum(p.cost_percentage for p in self.phases)
            if abs(total - 100) > _PERCENT_TOLERANCE:
                raise ValueError(
                    f"Phase cost percentages must sum to 100, got {total:.2f}"
                )
        if (
            self.type == CostDistributionType.CUSTOM
            and not self.phases
            and not self.custom_distribution
        ):
            raise ValueError(
                "CUSTOM cost distribution requires phases or custom_distribution"
            )
        return self


class CustomParameters(BaseModel):
    """Explicit overrides. Anything left unset is inferred from the tender."""

    labor_rate_per_day: Optional[float] = Field(default=None, gt=0)
    project_duration_months: Optional[int] = Field(default=None, ge=1, le=120)
    team_size: Optional[int] = Field(default=None, ge=1)
    technology_complexity: Optional[Complexity] = None
    risk_level: Optional[RiskLevel] = None
    discount_rate: Optional[float] = Field(default=None, ge=0, lt=1.0)
    market_conditions: Optional[MarketConditions] = None
    historical_data: Optional[HistoricalData] = None
    payment_schedule: Optional[PaymentSchedule] = None
    cost_distribution: Optional[CostDistribution] = None
