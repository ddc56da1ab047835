from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from tender_roi.models.tender import ProjectAnalysis, TenderInfo


class ClassificationProviderBase(ABC):
    """Abstract base for tender classification services."""

    @abstractmethod
    async def classify(self, tender: TenderInfo) -> Optional[ProjectAnalysis]:
        """Return category/keyword tags, or None when unavailable."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Verify the service is reachable and authenticated."""
        ...
