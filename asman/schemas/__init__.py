"""Pydantic v2 request/response schemas for the ASman Lesson Studio."""

from asman.schemas.common import Language, Subject, TeachingStyle, Variant
from asman.schemas.lesson import (
    GenerationRequest,
    GenerationResponse,
    LessonContent,
    LessonGenerateRequest,
    LocalizeRequest,
    Question,
    RichMetadata,
)
from asman.schemas.payloads import FlatLessonPayload, LessonPayload, StructuredLessonPayload
from asman.schemas.session import (
    ChatSession,
    SessionListResponse,
    SessionPatch,
    SessionSelectResponse,
    WizardEventRequest,
    WizardSnapshot,
)
from asman.schemas.upload import (
    UploadAnalysisRequest,
    UploadAnalysisResponse,
    UploadDescriptor,
)

__all__ = [
    "Language",
    "Subject",
    "TeachingStyle",
    "Variant",
    "Question",
    "RichMetadata",
    "LessonContent",
    "GenerationRequest",
    "LessonGenerateRequest",
    "GenerationResponse",
    "LocalizeRequest",
    "FlatLessonPayload",
    "StructuredLessonPayload",
    "LessonPayload",
    "ChatSession",
    "SessionPatch",
    "SessionListResponse",
    "SessionSelectResponse",
    "WizardEventRequest",
    "WizardSnapshot",
    "UploadDescriptor",
    "UploadAnalysisRequest",
    "UploadAnalysisResponse",
]
