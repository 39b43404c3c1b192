"""
Lesson API endpoints: POST /lessons/generate and POST /lessons/localize.

Generation never fails from the caller's point of view: when Claude is not
configured or misbehaves, the response carries a fallback lesson and
``source: "fallback"``.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from asman.api.dependencies import PipelineDep
from asman.schemas.lesson import (
    GenerationResponse,
    LessonContent,
    LessonGenerateRequest,
    LocalizeRequest,
)
from asman.services.localization import localize_lesson

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/lessons", tags=["lessons"])


@router.post(
    "/generate",
    response_model=GenerationResponse,
    status_code=200,
    summary="Generate a lesson",
    responses={422: {"description": "Invalid class, subject, topic or style"}},
)
async def generate_lesson(
    payload: LessonGenerateRequest,
    pipeline: PipelineDep,
) -> GenerationResponse:
    """
    Generate a canonical lesson.

    1. Build the instruction for the requested variant
    2. Call Claude (skipped when no API key is configured)
    3. Normalize the response, or fall back to the built-in generator
    4. Return the lesson with its source and timing
    """
    result = await pipeline.run(payload)
    return GenerationResponse(
        lesson=result.lesson,
        source=result.source,
        generation_time_seconds=result.elapsed_seconds,
    )


@router.post(
    "/localize",
    response_model=LessonContent,
    summary="Render a lesson in another language using its own glossary",
)
async def localize(payload: LocalizeRequest) -> LessonContent:
    """Apply the lesson's English → Hindi glossary to every prose field."""
    return localize_lesson(payload.lesson, payload.language)
