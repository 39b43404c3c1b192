"""Pydantic v2 schemas for upload analysis."""

from __future__ import annotations

from pydantic import Field

from asman.constants import MAX_CLASS_LEVEL, MIN_CLASS_LEVEL
from asman.schemas.common import CamelModel, Subject


class UploadDescriptor(CamelModel):
    """Description of an uploaded artifact; the raw bytes never reach the pipeline.

    Attributes:
        name: Original filename.
        mime_type: Reported MIME type.
        size: Size in bytes.
        extracted_text: Text content, when the uploader could extract it.
    """

    name: str = Field(..., min_length=1)
    mime_type: str = Field(..., min_length=1)
    size: int = Field(default=0, ge=0)
    extracted_text: str | None = None

    @property
    def kind(self) -> str:
        """Coarse artifact kind: ``image``, ``audio`` or ``document``."""
        if self.mime_type.startswith("image/"):
            return "image"
        if self.mime_type.startswith("audio/"):
            return "audio"
        return "document"


class UploadAnalysisRequest(CamelModel):
    """Request payload for POST /uploads/analyze."""

    file: UploadDescriptor
    class_level: int = Field(..., ge=MIN_CLASS_LEVEL, le=MAX_CLASS_LEVEL)
    subject: Subject


class UploadAnalysisResponse(CamelModel):
    """Response payload for POST /uploads/analyze."""

    summary: str
