"""Lesson content pipeline.

Request builder → provider → normalizer, with the fallback generator taking
over whenever the provider is unavailable, fails, or returns text the
normalizer rejects. :meth:`LessonPipeline.generate_lesson` therefore always
returns a valid canonical lesson.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from asman.constants import ALLOWED_UPLOAD_TYPES, MAX_UPLOAD_BYTES, subject_name
from asman.enums import Subject, TeachingStyle, Variant
from asman.schemas.lesson import GenerationRequest, LessonContent
from asman.schemas.upload import UploadDescriptor
from asman.services.fallback import build_fallback_lesson
from asman.services.normalizer import NormalizeFailure, normalize
from asman.services.prompt_builder import build_instruction, build_upload_instruction, with_article
from asman.services.provider import Failure, LessonProvider, ProviderResult, RawText, Unavailable

logger = logging.getLogger(__name__)

_MAX_SUMMARY_CHARS = 600


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one pipeline run.

    Attributes:
        lesson: The canonical lesson.
        source: ``"provider"`` if Claude's answer was used, else ``"fallback"``.
        elapsed_seconds: Wall-clock duration of the run.
        fallback_reason: Why the fallback was used, when it was.
    """

    lesson: LessonContent
    source: str
    elapsed_seconds: float
    fallback_reason: str | None = None


class LessonPipeline:
    """Generate lessons and upload summaries through an injected provider.

    Args:
        provider: Any :class:`LessonProvider`.
        strict_schema_family: Passed through to the normalizer.
    """

    def __init__(self, provider: LessonProvider, strict_schema_family: bool = False) -> None:
        self.provider = provider
        self.strict_schema_family = strict_schema_family

    # ------------------------------------------------------------------
    # Lessons
    # ------------------------------------------------------------------

    async def generate_lesson(
        self,
        class_level: int,
        subject: Subject,
        topic: str,
        teaching_style: TeachingStyle,
        variant: Variant = Variant.STANDARD,
    ) -> LessonContent:
        """Generate a canonical lesson. Never raises for valid inputs."""
        request = GenerationRequest(
            class_level=class_level,
            subject=subject,
            topic=topic,
            teaching_style=teaching_style,
            variant=variant,
        )
        result = await self.run(request)
        return result.lesson

    async def run(self, request: GenerationRequest) -> GenerationResult:
        """Run the pipeline for a validated request and report where the lesson came from."""
        start_time = time.monotonic()
        logger.info(
            "Starting lesson generation for topic=%r class=%d subject=%s style=%s variant=%s",
            request.topic,
            request.class_level,
            request.subject.value,
            request.teaching_style.value,
            request.variant.value,
        )

        instruction = build_instruction(
            request.class_level,
            request.subject,
            request.topic,
            request.teaching_style,
            request.variant,
        )
        outcome = await self._call_provider(instruction, request.variant)

        lesson: LessonContent | None = None
        reason: str | None = None
        if isinstance(outcome, RawText):
            normalized = normalize(
                outcome.text,
                request.variant,
                strict_schema_family=self.strict_schema_family,
            )
            if isinstance(normalized, NormalizeFailure):
                reason = f"normalize failure: {normalized.reason}"
            else:
                lesson = normalized
        elif isinstance(outcome, Unavailable):
            reason = f"provider unavailable: {outcome.reason}"
        else:
            reason = f"provider failure: {outcome.reason}"

        source = "provider"
        if lesson is None:
            source = "fallback"
            lesson = build_fallback_lesson(
                request.class_level,
                request.subject,
                request.topic,
                request.teaching_style,
                request.variant,
            )
            if isinstance(outcome, Unavailable):
                logger.info("Using fallback lesson for topic=%r (%s)", request.topic, reason)
            else:
                logger.warning("Using fallback lesson for topic=%r (%s)", request.topic, reason)

        elapsed = time.monotonic() - start_time
        logger.info(
            "Lesson generation completed in %.2f seconds for topic=%r (source=%s)",
            elapsed,
            request.topic,
            source,
        )
        return GenerationResult(
            lesson=lesson,
            source=source,
            elapsed_seconds=round(elapsed, 3),
            fallback_reason=reason,
        )

    # ------------------------------------------------------------------
    # Uploads
    # ------------------------------------------------------------------

    async def analyze_upload(
        self,
        descriptor: UploadDescriptor,
        class_level: int,
        subject: Subject,
    ) -> str:
        """Return a short, human-readable note on how an upload can be used.

        Falls back to a fixed encouraging message when Claude is unavailable,
        fails, or answers with nothing usable.
        """
        logger.info(
            "Analyzing upload name=%r type=%s size=%d for class=%d subject=%s",
            descriptor.name,
            descriptor.mime_type,
            descriptor.size,
            class_level,
            subject.value,
        )
        if self.provider.is_configured:
            outcome = await self._call_provider(
                build_upload_instruction(descriptor, class_level, subject), None
            )
            if isinstance(outcome, RawText) and outcome.text.strip():
                return outcome.text.strip()[:_MAX_SUMMARY_CHARS]
            if isinstance(outcome, Failure):
                logger.warning("Upload analysis fell back: %s", outcome.reason)
            return (
                f"This {descriptor.kind} contains excellent material for "
                f"{subject_name(subject)} lessons. I can help you create interactive "
                f"activities and questions based on this content!"
            )

        note = ""
        if descriptor.mime_type not in ALLOWED_UPLOAD_TYPES:
            note = " This file type may not be supported for lesson creation."
        elif descriptor.size > MAX_UPLOAD_BYTES:
            note = " Large files may take longer to work with."
        return (
            f"I can see you've uploaded {with_article(descriptor.kind)} "
            f"related to {subject_name(subject)}. This looks perfect for creating "
            f"engaging lessons for Class {class_level} students!{note}"
        )

    # ------------------------------------------------------------------
    # Provider call
    # ------------------------------------------------------------------

    async def _call_provider(self, instruction: str, variant: Variant | None) -> ProviderResult:
        """Call the provider and turn an unexpected exception into :class:`Failure`."""
        try:
            if variant is None:
                return await self.provider.summarize(instruction)
            return await self.provider.generate(instruction, variant)
        except Exception as exc:
            logger.exception("Provider raised instead of reporting a result")
            return Failure(reason=f"{type(exc).__name__}: {exc}")
