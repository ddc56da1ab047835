"""HTTP client for the tender classification service."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from tender_roi.config.settings import Settings
from tender_roi.models.tender import ProjectAnalysis, TenderInfo

from .base import ClassificationProviderBase

logger = logging.getLogger(__name__)


class HttpClassificationProvider(ClassificationProviderBase):
    """Posts the tender text to the classification endpoint.

    Classification is optional input to an analysis, so every failure is
    logged and reported as None instead of raised.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._settings = settings or Settings()
        self._client = client or httpx.AsyncClient(
            timeout=self._settings.classification_timeout
        )

    @property
    def configured(self) -> bool:
        return bool(self._settings.classification_url)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._settings.classification_api_key:
            headers["Authorization"] = f"Bearer {self._settings.classification_api_key}"
        return headers

    async def health_check(self) -> bool:
        if not self.configured:
            return False
        try:
            resp = await self._client.get(
                self._settings.classification_url.rstrip("/") + "/health",
                headers=self._headers(),
            )
            return resp.status_code == 200
        except httpx.HTTPError as e:
            logger.error(f"Classification health check failed: {e}")
            return False

    async def classify(self, tender: TenderInfo) -> Optional[ProjectAnalysis]:
        if not self.configured:
            return None

        payload = {
            "tender_id": tender.id,
            "title": tender.title,
            "content": tender.description or tender.content,
            "purchaser": tender.purchaser,
        }
        try:
            resp = await self._client.post(
                self._settings.classification_url,
                json=payload,
                headers=self._headers(),
            )
            resp.raise_for_status()
            return self._parse(tender.id, resp.json())
        except httpx.HTTPError as e:
            logger.warning(f"Classification unavailable for tender {tender.id}: {e}")
            return None
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Unreadable classification for tender {tender.id}: {e}")
            return None

    @staticmethod
    def _parse(tender_id: str, data: dict[str, Any]) -> ProjectAnalysis:
        confidence = float(data["confidence"])
        if not (0 <= confidence <= 1.0):
            raise ValueError(f"confidence must be 0-1.0, got {confidence}")
        return ProjectAnalysis(
            tender_id=tender_id,
            project_type=str(data["project_type"]),
            confidence=confidence,
            keywords=[str(k) for k in data.get("keywords", [])],
            is_ai_related=bool(data.get("is_ai_related", False)),
            is_software_project=bool(data.get("is_software_project", False)),
        )
