"""Tender records and the classification signal attached to them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .enums import TenderStatus


@dataclass
class TenderInfo:
    """A procurement tender as handed over by the record store."""

    id: str
    title: str
    budget: Optional[float] = None
    description: str = ""
    content: str = ""
    purchaser: str = ""
    area: str = ""
    project_type: str = ""
    status: TenderStatus = TenderStatus.ACTIVE
    publish_time: Optional[datetime] = None
    deadline: Optional[datetime] = None

    def text(self) -> str:
        """Title plus description (or body, when there is no description)."""
        parts = [self.title, self.description or self.content]
        return " ".join(p for p in parts if p)

    def has_budget(self) -> bool:
        return self.budget is not None and self.budget > 0


@dataclass(frozen=True)
class ProjectAnalysis:
    """Category and keyword tags produced by the classification service."""

    tender_id: str
    project_type: str
    confidence: float
    keywords: list[str] = field(default_factory=list)
    is_ai_related: bool = False
    is_software_project: bool = False
