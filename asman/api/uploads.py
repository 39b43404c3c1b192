"""Upload analysis endpoint: POST /uploads/analyze."""

from __future__ import annotations

from fastapi import APIRouter

from asman.api.dependencies import PipelineDep
from asman.schemas.upload import UploadAnalysisRequest, UploadAnalysisResponse

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post(
    "/analyze",
    response_model=UploadAnalysisResponse,
    summary="Describe how an uploaded file can be used in a lesson",
)
async def analyze_upload(
    payload: UploadAnalysisRequest,
    pipeline: PipelineDep,
) -> UploadAnalysisResponse:
    """Return a short summary; the file bytes themselves are never sent here."""
    summary = await pipeline.analyze_upload(payload.file, payload.class_level, payload.subject)
    return UploadAnalysisResponse(summary=summary)
