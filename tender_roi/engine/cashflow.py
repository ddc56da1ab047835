"""Monthly cash-flow simulation.

Builds an income/expense schedule from the payment schedule and cost
distribution policies, then derives payback, peak funding, NPV, IRR,
liquidity risk and fully re-simulated scenarios.
"""

from __future__ import annotations

import logging
import math

from tender_roi.engine.config import CashFlowConfig, EngineConfig, ScenarioSpec
from tender_roi.engine.financial import (
    calculate_npv,
    discounted_payback_period,
    irr_from_signed_flows,
    population_std,
    present_value,
)
from tender_roi.engine.inference import month_at
from tender_roi.engine.result import (
    BenefitAnalysis,
    CashFlowMetrics,
    CashFlowResult,
    CashFlowRisk,
    CashFlowScenario,
    CashFlowSummary,
    CostAnalysis,
    MonthlyFlow,
    ProjectParameters,
)
from tender_roi.engine.scenarios import ScenarioScaling, resimulate, run_scenarios
from tender_roi.models.enums import (
    CostDistributionType,
    PaymentScheduleType,
    RiskLevel,
)
from tender_roi.models.parameters import CostDistribution, PaymentSchedule

logger = logging.getLogger(__name__)


def generate_income(
    schedule: PaymentSchedule,
    direct_revenue: float,
    duration: int,
    contract_value: float,
) -> tuple[list[float], dict[int, list[str]]]:
    """Per-month income and the payment labels attached to each month.

    CUSTOM amounts are literal for the contract value and are scaled by
    direct_revenue / contract_value when a scenario changes revenue.
    Entries outside months 1..duration are ignored.
    """
    income = [0.0] * duration
    labels: dict[int, list[str]] = {}

    if schedule.type == PaymentScheduleType.MONTHLY:
        if schedule.monthly_percentage is None:
            income = [direct_revenue / duration] * duration
        else:
            remaining = direct_revenue
            installment = direct_revenue * schedule.monthly_percentage / 100
            for i in range(duration):
                amount = min(installment, remaining)
                if i == duration - 1:
                    amount = remaining
                income[i] = amount
                remaining -= amount

    elif schedule.type == PaymentScheduleType.MILESTONE:
        for milestone in schedule.milestones:
            if milestone.month > duration:
                logger.warning(
                    f"Payment milestone '{milestone.name}' at month {milestone.month} "
                    f"is outside the {duration}-month project and was ignored"
                )
                continue
            income[milestone.month - 1] += direct_revenue * milestone.percentage / 100
            labels.setdefault(milestone.month, []).append(
                f"Payment milestone: {milestone.name} ({milestone.percentage:g}%)"
            )

    elif schedule.type == PaymentScheduleType.CUSTOM:
        scale = direct_revenue / contract_value if contract_value > 0 else 1.0
        for payment in schedule.custom_schedule:
            if payment.month > duration:
                logger.warning(
                    f"Custom payment at month {payment.month} is outside the "
                    f"{duration}-month project and was ignored"
                )
                continue
            income[payment.month - 1] += payment.amount * scale
            if payment.description:
                labels.setdefault(payment.month, []).append(
                    f"Payment: {payment.description}"
                )

    return income, labels


def generate_expense(
    distribution: CostDistribution,
    total_cost: float,
    duration: int,
    config: CashFlowConfig,
) -> list[float]:
    """Per-month expense under a cost distribution policy."""
    if distribution.type == CostDistributionType.UNIFORM:
        return [total_cost / duration] * duration

    if distribution.type in (
        CostDistributionType.FRONT_LOADED,
        CostDistributionType.BACK_LOADED,
    ):
        first = math.ceil(duration / 2)
        second = duration - first
        if distribution.type == CostDistributionType.FRONT_LOADED:
            first_share = config.front_loaded_share
        else:
            first_share = 1 - config.back_loaded_share
        if second == 0:
            return [total_cost] * duration
        return [total_cost * first_share / first] * first + [
            total_cost * (1 - first_share) / second
        ] * second

    expense = [0.0] * duration
    if distribution.phases:
        for phase in distribution.phases:
            start = min(phase.start_month, duration)
            end = min(phase.end_month, duration)
            if phase.end_month > duration:
                logger.warning(
                    f"Cost phase '{phase.name}' (months {phase.start_month}-"
                    f"{phase.end_month}) was clipped to the {duration}-month project"
                )
            months = end - start + 1
            monthly = total_cost * phase.cost_percentage / 100 / months
            for month in range(start, end + 1):
                expense[month - 1] += monthly
    else:
        for share in distribution.custom_distribution:
            if share.month > duration:
                logger.warning(
                    f"Cost share at month {share.month} is outside the "
                    f"{duration}-month project and was ignored"
                )
                continue
            expense[share.month - 1] += total_cost * share.percentage / 100
    return expense


def project_milestones(duration: int, config: CashFlowConfig) -> dict[int, list[str]]:
    """Default delivery milestones keyed by month."""
    schedule = [
        (1, "Project kickoff"),
        (month_at(config.requirements_milestone_fraction, duration), "Requirements confirmed"),
        (month_at(config.design_milestone_fraction, duration), "Design complete"),
        (month_at(config.build_milestone_fraction, duration), "Build complete"),
        (month_at(config.test_milestone_fraction, duration), "Testing complete"),
        (duration, "Final delivery"),
    ]
    labels: dict[int, list[str]] = {}
    for month, label in schedule:
        labels.setdefault(month, []).append(label)
    return labels


class CashFlowSimulator:
    """Stateless simulator; one instance can serve any number of tenders."""

    def __init__(self, config: EngineConfig):
        self._config = config

    def simulate(
        self,
        params: ProjectParameters,
        cost: CostAnalysis,
        benefit: BenefitAnalysis,
    ) -> CashFlowResult:
        """Run the base simulation plus the three scenario re-simulations."""
        monthly_flow = self.monthly_flow(params, cost.total_cost, benefit.direct_revenue)
        summary = self._summary(monthly_flow)
        metrics = self._metrics(monthly_flow, summary, params.discount_rate)
        risk = self._risk(monthly_flow, summary, benefit.direct_revenue)

        def run(spec: ScenarioSpec, scaling: ScenarioScaling) -> CashFlowScenario:
            return self._scenario(params, spec, scaling)

        scenarios = run_scenarios(self._config.cash_flow.scenarios, run)

        return CashFlowResult(
            monthly_flow=monthly_flow,
            summary=summary,
            financial_metrics=metrics,
            risk_analysis=risk,
            scenarios=scenarios,
            recommendations=self._recommendations(summary, metrics, risk),
        )

    def monthly_flow(
        self,
        params: ProjectParameters,
        total_cost: float,
        direct_revenue: float,
    ) -> list[MonthlyFlow]:
        duration = params.duration_months
        cf_config = self._config.cash_flow

        income, payment_labels = generate_income(
            params.payment_schedule, direct_revenue, duration, params.budget
        )
        expense = generate_expense(params.cost_distribution, total_cost, duration, cf_config)
        milestones = project_milestones(duration, cf_config)

        flows: list[MonthlyFlow] = []
        cumulative = 0.0
        for i in range(duration):
            month = i + 1
            net = income[i] - expense[i]
            cumulative += net
            flows.append(
                MonthlyFlow(
                    month=month,
                    income=income[i],
                    expense=expense[i],
                    net_flow=net,
                    cumulative_flow=cumulative,
                    milestones=milestones.get(month, []) + payment_labels.get(month, []),
                )
            )
        return flows

    def _summary(self, flows: list[MonthlyFlow]) -> CashFlowSummary:
        total_in = sum(f.income for f in flows)
        total_out = sum(f.expense for f in flows)
        lowest = min((f.cumulative_flow for f in flows), default=0.0)

        payback = len(flows)
        for f in flows:
            if f.cumulative_flow >= 0:
                payback = f.month
                break

        return CashFlowSummary(
            total_inflow=total_in,
            total_outflow=total_out,
            net_cash_flow=total_in - total_out,
            peak_funding=-lowest if lowest < 0 else 0.0,
            payback_period=payback,
            average_monthly_flow=(total_in - total_out) / len(flows) if flows else 0.0,
        )

    def _metrics(
        self,
        flows: list[MonthlyFlow],
        summary: CashFlowSummary,
        discount_rate: float,
    ) -> CashFlowMetrics:
        monthly_rate = discount_rate / 12
        net_flows = [f.net_flow for f in flows]
        initial_investment = summary.peak_funding

        pv = present_value(net_flows, monthly_rate)
        return CashFlowMetrics(
            net_present_value=calculate_npv(net_flows, monthly_rate, initial_investment),
            internal_rate_of_return=irr_from_signed_flows(net_flows) * 100,
            profitability_index=pv / initial_investment if initial_investment > 0 else 0.0,
            discounted_payback_period=discounted_payback_period(
                net_flows, monthly_rate, initial_investment
            ),
        )

    def _risk(
        self,
        flows: list[MonthlyFlow],
        summary: CashFlowSummary,
        direct_revenue: float,
    ) -> CashFlowRisk:
        cf_config = self._config.cash_flow
        net_flows = [f.net_flow for f in flows]
        volatility = population_std(net_flows)
        mean_net = sum(net_flows) / len(net_flows) if net_flows else 0.0

        funding_ratio = summary.peak_funding / direct_revenue if direct_revenue > 0 else 0.0
        if funding_ratio > cf_config.liquidity_high_ratio:
            liquidity = RiskLevel.HIGH
        elif funding_ratio > cf_config.liquidity_medium_ratio:
            liquidity = RiskLevel.MEDIUM
        else:
            liquidity = RiskLevel.LOW

        concentration = 0.0
        if summary.total_inflow > 0:
            top = sorted((f.income for f in flows), reverse=True)
            concentration = sum(top[: cf_config.concentration_months]) / summary.total_inflow

        factors: list[str] = []
        if liquidity == RiskLevel.HIGH:
            factors.append(
                f"High liquidity risk: peak funding is {funding_ratio:.0%} of contract revenue"
            )
        if volatility > abs(mean_net) * cf_config.volatility_ratio:
            factors.append("Volatile monthly cash flow complicates working-capital planning")
        if concentration > cf_config.concentration_threshold:
            factors.append(
                f"Income concentrated in {cf_config.concentration_months} months "
                f"({concentration:.0%} of total)"
            )

        return CashFlowRisk(
            cash_flow_volatility=volatility,
            liquidity_risk=liquidity,
            funding_gap=summary.peak_funding,
            income_concentration=concentration,
            risk_factors=factors,
        )

    def _scenario(
        self,
        params: ProjectParameters,
        spec: ScenarioSpec,
        scaling: ScenarioScaling,
    ) -> CashFlowScenario:
        cost, benefit = resimulate(params, self._config, scaling)
        flows = self.monthly_flow(params, cost.total_cost, benefit.direct_revenue)
        summary = self._summary(flows)
        metrics = self._metrics(flows, summary, params.discount_rate)
        return CashFlowScenario(
            benefit_multiplier=scaling.benefit_multiplier,
            cost_multiplier=scaling.cost_multiplier,
            probability=spec.probability,
            net_cash_flow=summary.net_cash_flow,
            net_present_value=metrics.net_present_value,
            payback_period=summary.payback_period,
            peak_funding=summary.peak_funding,
            assumptions=list(spec.assumptions),
        )

    def _recommendations(
        self,
        summary: CashFlowSummary,
        metrics: CashFlowMetrics,
        risk: CashFlowRisk,
    ) -> list[str]:
        recs: list[str] = []

        if metrics.net_present_value > 0:
            recs.append("Net present value is positive; the project is financially worth pursuing")
        else:
            recs.append("Net present value is not positive; reassess the project's viability")

        if summary.payback_period <= 12:
            recs.append("Short payback period; the investment is recovered quickly")
        elif summary.payback_period <= 24:
            recs.append("Moderate payback period; account for the cost of capital")
        else:
            recs.append("Long payback period; weigh the long-term strategic value")

        if risk.funding_gap > summary.total_inflow * self._config.cash_flow.funding_gap_ratio:
            recs.append("Large up-front funding need; arrange sufficient working capital")

        if risk.liquidity_risk == RiskLevel.HIGH:
            recs.append(
                "High liquidity risk: negotiate an advance payment, stage the billing "
                "and reserve funding"
            )
        elif risk.liquidity_risk == RiskLevel.MEDIUM:
            recs.append("Moderate liquidity risk; set up cash-flow monitoring")

        if summary.peak_funding > 0:
            if metrics.profitability_index > 1.2:
                recs.append("High profitability index; good investment value")
            elif metrics.profitability_index < 1:
                recs.append("Profitability index below 1; limited investment value")

        irr = metrics.internal_rate_of_return
        if irr > 15:
            recs.append("Internal rate of return is high, above typical hurdle rates")
        elif irr != 0 and irr < 8:
            recs.append("Internal rate of return is low; other opportunities may pay better")

        return recs
