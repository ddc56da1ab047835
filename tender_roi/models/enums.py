from enum import Enum


class Complexity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class CustomerSegment(str, Enum):
    FINANCE = "FINANCE"
    INSURANCE = "INSURANCE"
    GOVERNMENT = "GOVERNMENT"
    ENTERPRISE = "ENTERPRISE"


class PaymentScheduleType(str, Enum):
    MILESTONE = "MILESTONE"
    MONTHLY = "MONTHLY"
    CUSTOM = "CUSTOM"


class CostDistributionType(str, Enum):
    UNIFORM = "UNIFORM"
    FRONT_LOADED = "FRONT_LOADED"
    BACK_LOADED = "BACK_LOADED"
    CUSTOM = "CUSTOM"


class CompetitionLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class MarketMaturity(str, Enum):
    EMERGING = "EMERGING"
    GROWING = "GROWING"
    MATURE = "MATURE"
    DECLINING = "DECLINING"


class TenderStatus(str, Enum):
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"
    AWARDED = "AWARDED"


class Scenario(str, Enum):
    OPTIMISTIC = "optimistic"
    NEUTRAL = "neutral"
    PESSIMISTIC = "pessimistic"


class PredictedScenario(str, Enum):
    BEST_CASE = "best_case"
    MOST_LIKELY = "most_likely"
    WORST_CASE = "worst_case"


# Ordering used when ranking analyses by risk.
RISK_RANK: dict[RiskLevel, int] = {
    RiskLevel.LOW: 0,
    RiskLevel.MEDIUM: 1,
    RiskLevel.HIGH: 2,
}
