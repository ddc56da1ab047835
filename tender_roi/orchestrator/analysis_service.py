"""Analysis service -- coordinates repositories, classification and the engine."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from tender_roi.config.settings import Settings
from tender_roi.engine.calculator import CostBenefitEngine
from tender_roi.engine.errors import AnalysisError
from tender_roi.engine.result import CostBenefitResult
from tender_roi.models.enums import RiskLevel
from tender_roi.models.parameters import CustomParameters
from tender_roi.models.tender import ProjectAnalysis, TenderInfo
from tender_roi.providers.base import ClassificationProviderBase
from tender_roi.providers.classification_provider import HttpClassificationProvider
from tender_roi.storage.cache import ResultCache
from tender_roi.storage.repository import (
    InMemoryResultRepository,
    InMemoryTenderRepository,
    ResultRepository,
    TenderRepository,
)

from .comparison import ComparisonReport, compare_results

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchItem:
    tender_id: str
    success: bool
    result: Optional[CostBenefitResult] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class BatchReport:
    items: list[BatchItem]
    total: int
    succeeded: int
    failed: int


@dataclass(frozen=True)
class AnalysisStatistics:
    total_reports: int
    average_roi: float
    average_cost: float
    average_benefit: float
    risk_distribution: dict[str, int]
    top_recommendations: list[tuple[str, int]] = field(default_factory=list)


class AnalysisService:
    """Entry point for analyzing, storing, comparing and summarizing tenders.

    The engine itself is synchronous and pure; this class owns the
    asynchronous boundary (tender lookup, classification, persistence).
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        tenders: Optional[TenderRepository] = None,
        results: Optional[ResultRepository] = None,
        classifier: Optional[ClassificationProviderBase] = None,
        engine: Optional[CostBenefitEngine] = None,
        cache: Optional[ResultCache] = None,
    ):
        self._settings = settings or Settings()
        self._tenders = tenders or InMemoryTenderRepository()
        self._results = results or InMemoryResultRepository()
        self._classifier = classifier or HttpClassificationProvider(settings=self._settings)
        self._engine = engine or CostBenefitEngine(self._settings.engine_config())
        if cache is None:
            cache = ResultCache(self._settings.result_cache_ttl_seconds)
        self._cache = cache

    async def register_tender(self, tender: TenderInfo) -> None:
        await self._tenders.save(tender)

    async def analyze(
        self,
        tender_id: str,
        custom_parameters: Optional[CustomParameters] = None,
    ) -> CostBenefitResult:
        """Analyze one tender and store the result, replacing any earlier one."""
        tender = await self._tenders.get(tender_id)
        if tender is None:
            raise AnalysisError(tender_id, "tender not found", not_found=True)

        project_analysis = await self._classify(tender)
        result = self._engine.analyze(tender, custom_parameters, project_analysis)

        await self._results.save(result)
        self._cache.set(result)
        return result

    async def _classify(self, tender: TenderInfo) -> Optional[ProjectAnalysis]:
        try:
            return await self._classifier.classify(tender)
        except Exception as e:
            logger.warning(
                f"Classification failed for tender {tender.id}, continuing without it: {e}"
            )
            return None

    async def classification_available(self) -> bool:
        try:
            return await self._classifier.health_check()
        except Exception as e:
            logger.warning(f"Classification health check raised: {e}")
            return False

    async def analyze_batch(
        self,
        tender_ids: list[str],
        custom_parameters: Optional[CustomParameters] = None,
    ) -> BatchReport:
        """Analyze tenders concurrently; one failure never aborts the others."""
        if not tender_ids:
            raise ValueError("tender_ids must not be empty")
        if len(tender_ids) > self._settings.batch_max_tenders:
            raise ValueError(
                f"Batch analysis supports at most {self._settings.batch_max_tenders} "
                f"tenders, got {len(tender_ids)}"
            )

        outcomes = await asyncio.gather(
            *(self.analyze(tid, custom_parameters) for tid in tender_ids),
            return_exceptions=True,
        )

        items: list[BatchItem] = []
        for tender_id, outcome in zip(tender_ids, outcomes):
            if isinstance(outcome, AnalysisError):
                logger.warning(str(outcome))
                items.append(BatchItem(tender_id=tender_id, success=False, error=str(outcome)))
            elif isinstance(outcome, Exception):
                logger.error(f"Unexpected failure analyzing tender {tender_id}: {outcome}")
                items.append(BatchItem(
                    tender_id=tender_id,
                    success=False,
                    error=str(AnalysisError(tender_id, str(outcome))),
                ))
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                items.append(BatchItem(tender_id=tender_id, success=True, result=outcome))

        succeeded = sum(1 for item in items if item.success)
        logger.info(f"Batch analysis: {succeeded}/{len(items)} tenders succeeded")
        return BatchReport(
            items=items,
            total=len(items),
            succeeded=succeeded,
            failed=len(items) - succeeded,
        )

    async def get_result(self, tender_id: str) -> Optional[CostBenefitResult]:
        cached = self._cache.get(tender_id)
        if cached is not None:
            return cached
        result = await self._results.get(tender_id)
        if result is not None:
            self._cache.set(result)
        return result

    async def delete_result(self, tender_id: str) -> bool:
        self._cache.invalidate(tender_id)
        return await self._results.delete(tender_id)

    async def compare(self, tender_ids: list[str]) -> ComparisonReport:
        """Rank stored results. Tenders without a result are listed as missing."""
        low = self._settings.compare_min_tenders
        high = self._settings.compare_max_tenders
        if not (low <= len(tender_ids) <= high):
            raise ValueError(
                f"Comparison needs between {low} and {high} tenders, got {len(tender_ids)}"
            )

        results: list[CostBenefitResult] = []
        titles: dict[str, str] = {}
        missing: list[str] = []
        for tender_id in tender_ids:
            result = await self.get_result(tender_id)
            if result is None:
                missing.append(tender_id)
                continue
            results.append(result)
            tender = await self._tenders.get(tender_id)
            if tender is not None:
                titles[tender_id] = tender.title

        if not results:
            raise AnalysisError(
                ", ".join(tender_ids), "no analysis results to compare", not_found=True
            )
        return compare_results(results, titles, missing)

    async def statistics(self) -> AnalysisStatistics:
        """Averages and distributions over every stored result."""
        results = await self._results.list_all()
        distribution = {level.value: 0 for level in RiskLevel}
        if not results:
            return AnalysisStatistics(
                total_reports=0,
                average_roi=0.0,
                average_cost=0.0,
                average_benefit=0.0,
                risk_distribution=distribution,
            )

        counts: Counter[str] = Counter()
        for r in results:
            distribution[r.risk_assessment.level.value] += 1
            counts.update(r.recommendations)

        n = len(results)
        return AnalysisStatistics(
            total_reports=n,
            average_roi=sum(r.roi_analysis.neutral for r in results) / n,
            average_cost=sum(r.cost_analysis.total_cost for r in results) / n,
            average_benefit=sum(r.benefit_analysis.total_benefit for r in results) / n,
            risk_distribution=distribution,
            top_recommendations=counts.most_common(5),
        )
