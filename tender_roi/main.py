"""FastAPI application for tender viability analysis."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional
from uuid import uuid4

from fastapi import FastAPI, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from tender_roi.engine.errors import AnalysisError
from tender_roi.engine.serialize import result_summary, result_to_dict
from tender_roi.models.enums import TenderStatus
from tender_roi.models.parameters import CustomParameters
from tender_roi.models.tender import TenderInfo
from tender_roi.orchestrator import AnalysisService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="Tender ROI API", version="0.1.0")

# CORS: allow the dashboard dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Singleton service (in-memory repositories until a record store is wired in)
service = AnalysisService()


class CreateTenderRequest(BaseModel):
    id: Optional[str] = None
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


class CreateTenderResponse(BaseModel):
    tender_id: str
    status: str


class AnalyzeRequest(BaseModel):
    custom_parameters: Optional[CustomParameters] = None


class BatchRequest(BaseModel):
    tender_ids: list[str] = Field(min_length=1)
    custom_parameters: Optional[CustomParameters] = None


class CompareRequest(BaseModel):
    tender_ids: list[str]


def _analysis_http_error(e: AnalysisError) -> HTTPException:
    status = 404 if e.not_found else 422
    return HTTPException(status_code=status, detail=str(e))


@app.post("/api/tenders", response_model=CreateTenderResponse)
async def create_tender(body: CreateTenderRequest):
    """Register a tender so it can be analyzed."""
    tender_id = body.id or str(uuid4())
    tender = TenderInfo(
        id=tender_id,
        title=body.title,
        budget=body.budget,
        description=body.description,
        content=body.content,
        purchaser=body.purchaser,
        area=body.area,
        project_type=body.project_type,
        status=body.status,
        publish_time=body.publish_time,
        deadline=body.deadline,
    )
    await service.register_tender(tender)
    return CreateTenderResponse(tender_id=tender_id, status="registered")


@app.post("/api/tenders/{tender_id}/analysis")
async def analyze_tender(tender_id: str, body: Optional[AnalyzeRequest] = None):
    """Run (or re-run) the viability analysis for one tender."""
    custom = body.custom_parameters if body else None
    try:
        result = await service.analyze(tender_id, custom)
    except AnalysisError as e:
        logger.warning(str(e))
        raise _analysis_http_error(e)
    return result_to_dict(result)


@app.get("/api/tenders/{tender_id}/analysis")
async def get_analysis(tender_id: str):
    """Return the stored analysis for a tender."""
    result = await service.get_result(tender_id)
    if result is None:
        raise HTTPException(status_code=404, detail=f"No analysis for tender {tender_id}")
    return result_to_dict(result)


@app.delete("/api/tenders/{tender_id}/analysis")
async def delete_analysis(tender_id: str):
    deleted = await service.delete_result(tender_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"No analysis for tender {tender_id}")
    return {"tender_id": tender_id, "deleted": True}


@app.post("/api/analyses/batch")
async def analyze_batch(body: BatchRequest):
    """Analyze several tenders; failures are reported per tender."""
    try:
        report = await service.analyze_batch(body.tender_ids, body.custom_parameters)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "total": report.total,
        "succeeded": report.succeeded,
        "failed": report.failed,
        "items": [
            {
                "tender_id": item.tender_id,
                "success": item.success,
                "summary": result_summary(item.result) if item.result else None,
                "error": item.error,
            }
            for item in report.items
        ],
    }


@app.post("/api/analyses/compare")
async def compare_analyses(body: CompareRequest):
    """Rank stored analyses by ROI, cost and risk."""
    try:
        report = await service.compare(body.tender_ids)
    except AnalysisError as e:
        raise _analysis_http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return jsonable_encoder(report)


@app.get("/api/analyses/statistics")
async def analysis_statistics():
    stats = await service.statistics()
    data = jsonable_encoder(stats)
    data["top_recommendations"] = [
        {"recommendation": rec, "count": count} for rec, count in stats.top_recommendations
    ]
    return data


@app.get("/health")
async def health():
    """Health check endpoint; analysis still works when classification is down."""
    return {
        "status": "ok",
        "classification_available": await service.classification_available(),
    }
