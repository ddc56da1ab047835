"""Core cost-benefit engine.

Takes a tender + optional custom parameters -> produces a CostBenefitResult
with cost, benefit, ROI, cash flow, prediction, recommendations and risk.
"""

from __future__ import annotations

import logging
from typing import Optional

from tender_roi.engine.benefit import estimate_benefit
from tender_roi.engine.cashflow import CashFlowSimulator
from tender_roi.engine.config import EngineConfig
from tender_roi.engine.cost import estimate_cost
from tender_roi.engine.errors import AnalysisError
from tender_roi.engine.financial import calculate_roi
from tender_roi.engine.inference import infer_parameters
from tender_roi.engine.prediction import ROIPredictor
from tender_roi.engine.result import (
    BenefitAnalysis,
    CashFlowResult,
    CostAnalysis,
    CostBenefitResult,
    FinancialMetrics,
    ProjectParameters,
    RiskAssessment,
    ROIAnalysis,
)
from tender_roi.engine.roi import ROICalculator
from tender_roi.models.enums import Complexity, RiskLevel
from tender_roi.models.parameters import CustomParameters
from tender_roi.models.tender import ProjectAnalysis, TenderInfo

logger = logging.getLogger(__name__)


class CostBenefitEngine:
    """Stateless engine that runs the full viability analysis."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self._cash_flow = CashFlowSimulator(self.config)
        self._roi = ROICalculator(self.config)
        self._predictor = ROIPredictor(self.config)

    def analyze(
        self,
        tender: TenderInfo,
        custom_parameters: Optional[CustomParameters] = None,
        project_analysis: Optional[ProjectAnalysis] = None,
    ) -> CostBenefitResult:
        """Run every stage for one tender.

        Raises AnalysisError when the tender has no usable budget.
        """
        if not tender.has_budget():
            if tender.budget is None:
                raise AnalysisError(tender.id, "tender has no budget")
            raise AnalysisError(tender.id, f"budget must be positive, got {tender.budget}")

        params = infer_parameters(tender, custom_parameters, self.config.inference)
        cost = estimate_cost(params, self.config.cost)
        benefit = estimate_benefit(params, self.config.benefit)
        cash_flow = self._cash_flow.simulate(params, cost, benefit)
        baseline = self._roi.analyze(params, cost, benefit)

        prediction = None
        roi_analysis = baseline
        if self.config.prediction.enabled:
            prediction = self._predictor.predict(params, cost, baseline, project_analysis)
            roi_analysis = prediction.adjusted_roi

        risk = self._assess_risk(params, cost, benefit, cash_flow)
        logger.info(
            f"Analyzed tender {tender.id}: cost={cost.total_cost:,.0f} "
            f"benefit={benefit.total_benefit:,.0f} roi={roi_analysis.neutral:.1f}% "
            f"risk={risk.level.value}"
        )

        return CostBenefitResult(
            tender_id=tender.id,
            parameters=params,
            cost_analysis=cost,
            benefit_analysis=benefit,
            roi_analysis=roi_analysis,
            cash_flow_analysis=cash_flow,
            financial_metrics=self._financial_metrics(params, cost, benefit),
            recommendations=self._recommendations(cost, roi_analysis),
            risk_assessment=risk,
            roi_prediction=prediction,
        )

    def _financial_metrics(
        self,
        params: ProjectParameters,
        cost: CostAnalysis,
        benefit: BenefitAnalysis,
    ) -> FinancialMetrics:
        revenue = benefit.direct_revenue
        total_cost = cost.total_cost
        return FinancialMetrics(
            profit_margin=(revenue - total_cost) / revenue * 100 if revenue > 0 else 0.0,
            return_on_investment=calculate_roi(revenue, total_cost),
            cost_efficiency_ratio=total_cost / revenue if revenue > 0 else 0.0,
            revenue_growth_rate=(
                benefit.future_opportunities / revenue * 100 if revenue > 0 else 0.0
            ),
            # No actuals to compare against yet.
            cost_variance_percentage=0.0,
            budget_utilization_rate=(
                total_cost / params.budget * 100 if params.budget > 0 else 0.0
            ),
        )

    def _recommendations(self, cost: CostAnalysis, roi: ROIAnalysis) -> list[str]:
        recs: list[str] = []

        if roi.neutral > 30:
            recs.append("High ROI; bid actively")
        elif roi.neutral > 15:
            recs.append("Moderate ROI; weigh the competition before deciding")
        else:
            recs.append("Low ROI; reconsider or optimize the cost structure")

        if cost.total_cost > 0:
            if cost.labor_cost / cost.total_cost > 0.7:
                recs.append(
                    "Labor dominates the cost; optimize the technical approach "
                    "or outsource part of the work"
                )
            if cost.risk_cost / cost.total_cost > 0.15:
                recs.append("High risk buffer; prepare detailed risk controls")

        if roi.break_even_point > 12:
            recs.append("Slow break-even; negotiate staged or advance payments")

        return recs

    def _assess_risk(
        self,
        params: ProjectParameters,
        cost: CostAnalysis,
        benefit: BenefitAnalysis,
        cash_flow: CashFlowResult,
    ) -> RiskAssessment:
        factors: list[str] = []
        mitigation: list[str] = []

        if params.complexity == Complexity.HIGH:
            factors.append("High technical complexity puts delivery at risk")
            mitigation.append("Assign an experienced team and run technical spikes early")

        if cost.total_cost > params.budget * 0.9:
            factors.append("Estimated cost is close to the budget ceiling")
            mitigation.append("Enforce strict cost control with budget monitoring")

        if benefit.future_opportunities > benefit.direct_revenue * 0.5:
            factors.append("Value depends heavily on uncertain future opportunities")
            mitigation.append("Discount future value and focus on the contract itself")

        if cash_flow.risk_analysis.liquidity_risk == RiskLevel.HIGH:
            factors.append("Large up-front funding requirement strains liquidity")
            mitigation.append("Negotiate an advance payment or arrange project financing")

        if len(factors) >= 3:
            level = RiskLevel.HIGH
        elif len(factors) >= 2:
            level = RiskLevel.MEDIUM
        else:
            level = RiskLevel.LOW

        return RiskAssessment(level=level, factors=factors, mitigation=mitigation)
