"""Parameter inference: fill in whatever the caller did not specify.

All string matching on the tender happens here. Downstream stages only see
enum tags and flags on ProjectParameters.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Iterable, Optional

from tender_roi.engine.config import InferenceConfig
from tender_roi.engine.result import ProjectParameters
from tender_roi.models.enums import (
    Complexity,
    CostDistributionType,
    CustomerSegment,
    PaymentScheduleType,
    RiskLevel,
)
from tender_roi.models.parameters import (
    CostDistribution,
    CustomParameters,
    Milestone,
    PaymentSchedule,
    Phase,
)
from tender_roi.models.tender import TenderInfo

logger = logging.getLogger(__name__)

_HIGH_COMPLEXITY_KEYWORDS = (
    "ai", "artificial intelligence", "machine learning", "deep learning",
    "blockchain", "big data", "cloud computing", "cloud",
    "人工智能", "机器学习", "深度学习", "区块链", "大数据", "云计算",
)

_MEDIUM_COMPLEXITY_KEYWORDS = (
    "integration", "database", "network", "security", "mobile",
    "系统集成", "数据库", "网络", "安全", "移动应用",
)

_AI_KEYWORDS = (
    "ai", "artificial intelligence", "machine learning", "deep learning",
    "neural network", "natural language", "nlp", "computer vision",
    "人工智能", "机器学习", "深度学习", "神经网络", "自然语言", "计算机视觉", "智能",
)

_CLOUD_KEYWORDS = (
    "cloud computing", "cloud platform", "cloud service", "saas", "paas", "iaas",
    "microservice", "microservices", "container", "docker", "kubernetes",
    "云计算", "云平台", "云服务", "微服务", "容器",
)

_INTEGRATION_KEYWORDS = (
    "system integration", "integration", "deployment", "implementation",
    "系统集成", "部署", "实施",
)

# Checked in order; the first segment with a matching purchaser keyword wins.
_SEGMENT_KEYWORDS: tuple[tuple[CustomerSegment, tuple[str, ...]], ...] = (
    (CustomerSegment.FINANCE, ("bank", "financial", "finance", "银行", "金融")),
    (CustomerSegment.INSURANCE, ("insurance", "assurance", "保险")),
    (
        CustomerSegment.GOVERNMENT,
        (
            "government", "ministry", "municipal", "commission", "bureau",
            "council", "agency", "政府", "委员会",
        ),
    ),
)

# (name, percent of revenue, fraction of duration at which it falls due)
_LARGE_PAYMENT_MILESTONES = (
    ("Contract signing", 20, 0.0),
    ("Requirements confirmed", 15, 0.2),
    ("Design complete", 20, 0.4),
    ("Build complete", 25, 0.7),
    ("Test complete", 15, 0.9),
    ("Final acceptance", 5, 1.0),
)

_MEDIUM_PAYMENT_MILESTONES = (
    ("Advance payment", 30, 0.0),
    ("Delivery", 40, 0.6),
    ("Final acceptance", 30, 1.0),
)

# (name, percent of cost, window start fraction, window end fraction)
_DEFAULT_COST_PHASES = (
    ("Requirements analysis", 15, 0.0, 0.2),
    ("System design", 20, 0.1, 0.3),
    ("Development", 45, 0.2, 0.7),
    ("Testing", 15, 0.6, 0.9),
    ("Deployment", 5, 0.8, 1.0),
)


def contains_keyword(text: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive keyword test.

    ASCII keywords must match whole words so that "ai" does not hit
    "maintain"; CJK keywords match as substrings.
    """
    lower = text.lower()
    for keyword in keywords:
        if keyword.isascii():
            if re.search(rf"\b{re.escape(keyword)}\b", lower):
                return True
        elif keyword in lower:
            return True
    return False


def month_at(fraction: float, duration: int) -> int:
    """Project month (1..duration) reached after ``fraction`` of the schedule."""
    # round() absorbs float noise such as 0.7 * 10 = 7.000000000000001
    return min(duration, max(1, math.ceil(round(fraction * duration, 9))))


def infer_complexity(text: str) -> Complexity:
    if contains_keyword(text, _HIGH_COMPLEXITY_KEYWORDS):
        return Complexity.HIGH
    if contains_keyword(text, _MEDIUM_COMPLEXITY_KEYWORDS):
        return Complexity.MEDIUM
    return Complexity.LOW


def infer_risk_level(
    budget: float, complexity: Complexity, config: InferenceConfig
) -> RiskLevel:
    if budget > config.high_risk_budget or complexity == Complexity.HIGH:
        return RiskLevel.HIGH
    if budget > config.medium_risk_budget or complexity == Complexity.MEDIUM:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def classify_customer(purchaser: str) -> CustomerSegment:
    for segment, keywords in _SEGMENT_KEYWORDS:
        if contains_keyword(purchaser, keywords):
            return segment
    return CustomerSegment.ENTERPRISE


def default_payment_schedule(
    budget: float, duration: int, config: InferenceConfig
) -> PaymentSchedule:
    """Milestone billing for larger contracts, monthly billing otherwise."""
    if budget > config.large_payment_budget:
        template = _LARGE_PAYMENT_MILESTONES
    elif budget > config.medium_payment_budget:
        template = _MEDIUM_PAYMENT_MILESTONES
    else:
        return PaymentSchedule(type=PaymentScheduleType.MONTHLY)

    milestones = [
        Milestone(name=name, percentage=pct, month=month_at(fraction, duration))
        for name, pct, fraction in template
    ]
    return PaymentSchedule(type=PaymentScheduleType.MILESTONE, milestones=milestones)


def default_cost_distribution(
    duration: int, is_ai_related: bool, is_integration_related: bool
) -> CostDistribution:
    """AI work is front-loaded, integration work back-loaded, the rest phased."""
    if is_ai_related:
        return CostDistribution(type=CostDistributionType.FRONT_LOADED)
    if is_integration_related:
        return CostDistribution(type=CostDistributionType.BACK_LOADED)

    phases = []
    for name, pct, start_fraction, end_fraction in _DEFAULT_COST_PHASES:
        start = min(duration, math.floor(round(start_fraction * duration, 9)) + 1)
        end = max(start, month_at(end_fraction, duration))
        phases.append(
            Phase(name=name, start_month=start, end_month=end, cost_percentage=pct)
        )
    return CostDistribution(type=CostDistributionType.CUSTOM, phases=phases)


def infer_parameters(
    tender: TenderInfo,
    custom: Optional[CustomParameters],
    config: InferenceConfig,
) -> ProjectParameters:
    """Resolve the full parameter set for a tender with a positive budget."""
    custom = custom or CustomParameters()
    budget = float(tender.budget or 0.0)
    text = tender.text()
    tier = config.tier_for(budget)
    inferred: list[str] = []

    duration = custom.project_duration_months
    if duration is None:
        duration = tier.duration_months
        inferred.append("project_duration_months")

    team_size = custom.team_size
    if team_size is None:
        team_size = tier.team_size
        inferred.append("team_size")

    complexity = custom.technology_complexity
    if complexity is None:
        complexity = infer_complexity(text)
        inferred.append("technology_complexity")

    risk_level = custom.risk_level
    if risk_level is None:
        risk_level = infer_risk_level(budget, complexity, config)
        inferred.append("risk_level")

    labor_rate = custom.labor_rate_per_day
    if labor_rate is None:
        labor_rate = config.default_labor_rate_per_day
        inferred.append("labor_rate_per_day")

    discount_rate = custom.discount_rate
    if discount_rate is None:
        discount_rate = config.default_discount_rate
        inferred.append("discount_rate")

    is_ai = contains_keyword(text, _AI_KEYWORDS)
    is_cloud = contains_keyword(text, _CLOUD_KEYWORDS)
    is_integration = contains_keyword(text, _INTEGRATION_KEYWORDS)

    payment_schedule = custom.payment_schedule
    if payment_schedule is None:
        payment_schedule = default_payment_schedule(budget, duration, config)
        inferred.append("payment_schedule")

    cost_distribution = custom.cost_distribution
    if cost_distribution is None:
        cost_distribution = default_cost_distribution(duration, is_ai, is_integration)
        inferred.append("cost_distribution")

    logger.debug(
        f"Tender {tender.id}: inferred {inferred} "
        f"(duration={duration}, team={team_size}, complexity={complexity.value})"
    )

    return ProjectParameters(
        budget=budget,
        duration_months=duration,
        team_size=team_size,
        complexity=complexity,
        risk_level=risk_level,
        labor_rate_per_day=labor_rate,
        discount_rate=discount_rate,
        customer_segment=classify_customer(tender.purchaser),
        payment_schedule=payment_schedule,
        cost_distribution=cost_distribution,
        is_ai_related=is_ai,
        is_cloud_related=is_cloud,
        is_integration_related=is_integration,
        market_conditions=custom.market_conditions,
        historical_data=custom.historical_data,
        inferred_fields=inferred,
    )
