"""Record-store interfaces for tenders and analysis results."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from tender_roi.engine.result import CostBenefitResult
from tender_roi.models.tender import TenderInfo


class TenderRepository(ABC):
    """Read access to tender records."""

    @abstractmethod
    async def get(self, tender_id: str) -> Optional[TenderInfo]:
        """Return the tender, or None if it does not exist."""
        ...

    @abstractmethod
    async def save(self, tender: TenderInfo) -> None:
        ...


class ResultRepository(ABC):
    """Persistence for completed analyses, one per tender id."""

    @abstractmethod
    async def get(self, tender_id: str) -> Optional[CostBenefitResult]:
        ...

    @abstractmethod
    async def save(self, result: CostBenefitResult) -> None:
        """Store a result, overwriting any earlier analysis of the tender."""
        ...

    @abstractmethod
    async def delete(self, tender_id: str) -> bool:
        """Remove a result. Returns False if there was nothing to remove."""
        ...

    @abstractmethod
    async def list_all(self) -> list[CostBenefitResult]:
        ...


class InMemoryTenderRepository(TenderRepository):
    def __init__(self):
        self._tenders: dict[str, TenderInfo] = {}

    async def get(self, tender_id: str) -> Optional[TenderInfo]:
        return self._tenders.get(tender_id)

    async def save(self, tender: TenderInfo) -> None:
        self._tenders[tender.id] = tender


class InMemoryResultRepository(ResultRepository):
    def __init__(self):
        self._results: dict[str, CostBenefitResult] = {}

    async def get(self, tender_id: str) -> Optional[CostBenefitResult]:
        return self._results.get(tender_id)

    async def save(self, result: CostBenefitResult) -> None:
        self._results[result.tender_id] = result

    async def delete(self, tender_id: str) -> bool:
        return self._results.pop(tender_id, None) is not None

    async def list_all(self) -> list[CostBenefitResult]:
        return list(self._results.values())
