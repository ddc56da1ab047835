"""Short-lived cache in front of the result repository."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from tender_roi.engine.result import CostBenefitResult

logger = logging.getLogger(__name__)


class ResultCache:
    """Results keyed by tender id, expiring ``ttl_seconds`` after insertion."""

    def __init__(
        self,
        ttl_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, CostBenefitResult]] = {}

    def get(self, tender_id: str) -> Optional[CostBenefitResult]:
        entry = self._entries.get(tender_id)
        if entry is None:
            return None
        expires_at, result = entry
        if self._clock() >= expires_at:
            del self._entries[tender_id]
            logger.debug(f"Cache entry for tender {tender_id} expired")
            return None
        return result

    def set(self, result: CostBenefitResult) -> None:
        self._entries[result.tender_id] = (self._clock() + self._ttl, result)

    def invalidate(self, tender_id: str) -> None:
        self._entries.pop(tender_id, None)

    def clear(self) -> None:
        self._entries.clear()
        logger.info("Result cache cleared")

    def __len__(self) -> int:
        return len(self._entries)
