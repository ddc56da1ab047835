from __future__ import annotations


class AnalysisError(ValueError):
    """An analysis of a single tender could not be completed."""

    def __init__(self, tender_id: str, reason: str, not_found: bool = False):
        self.tender_id = tender_id
        self.reason = reason
        self.not_found = not_found
        super().__init__(f"failed to analyze tender {tender_id}: {reason}")
