"""Unit tests for the lesson pipeline.

Tests cover:
1. Provider success: normalized lesson, source "provider"
2. Unavailable / Failure / malformed text: fallback lesson, source "fallback"
3. A provider that raises: treated as a failure, never propagates
4. Instruction routing: variant reaches the provider
5. generate_lesson: returns only the lesson; rejects invalid inputs
6. Strict schema mode: family mismatch falls back
7. analyze_upload: provider text, Failure and unavailable fallbacks
"""

from __future__ import annotations

import logging

import pydantic
import pytest

from asman.enums import Subject, TeachingStyle, Variant
from asman.schemas.lesson import GenerationRequest, LessonContent
from asman.schemas.upload import UploadDescriptor
from asman.services.fallback import build_fallback_lesson
from asman.services.pipeline import LessonPipeline
from asman.services.provider import Failure, RawText, Unavailable
from tests.fixtures.fake_provider import FakeProvider
from tests.fixtures.sample_lessons import FLAT_LESSON, STRUCTURED_LESSON, as_json


def _request(variant: Variant = Variant.STANDARD) -> GenerationRequest:
    return GenerationRequest(
        class_level=2,
        subject=Subject.MATHEMATICS,
        topic="  Addition ",
        teaching_style=TeachingStyle.CHINESE,
        variant=variant,
    )


# ---------------------------------------------------------------------------
# Test group 1: provider success
# ---------------------------------------------------------------------------


async def test_run_uses_provider_lesson_when_valid():
    provider = FakeProvider(RawText(as_json(FLAT_LESSON, fence="json")))
    pipeline = LessonPipeline(provider)

    result = await pipeline.run(_request())

    assert result.source == "provider"
    assert result.fallback_reason is None
    assert result.lesson.activity == FLAT_LESSON["activity"]
    assert result.elapsed_seconds >= 0


async def test_run_passes_variant_and_trimmed_topic_to_provider():
    provider = FakeProvider(RawText(as_json(STRUCTURED_LESSON)))
    pipeline = LessonPipeline(provider)

    result = await pipeline.run(_request(Variant.GLOBAL_ENHANCED))

    method, instruction, variant = provider.calls[0]
    assert method == "generate"
    assert variant is Variant.GLOBAL_ENHANCED
    assert '"Addition"' in instruction
    assert result.lesson.is_global_version is True


# ---------------------------------------------------------------------------
# Test group 2: fallback paths
# ---------------------------------------------------------------------------


async def test_unavailable_provider_yields_fallback_lesson():
    """Without a key the pipeline still succeeds with the fallback lesson."""
    pipeline = LessonPipeline(FakeProvider(Unavailable(), configured=False))

    result = await pipeline.run(_request())

    expected = build_fallback_lesson(2, Subject.MATHEMATICS, "Addition", TeachingStyle.CHINESE)
    assert result.source == "fallback"
    assert result.lesson == expected
    assert "unavailable" in result.fallback_reason


async def test_provider_failure_yields_fallback_and_logs_warning(caplog):
    pipeline = LessonPipeline(FakeProvider(Failure(reason="quota exceeded", attempts=2)))

    with caplog.at_level(logging.WARNING, logger="asman.services.pipeline"):
        result = await pipeline.run(_request())

    assert result.source == "fallback"
    assert "quota exceeded" in result.fallback_reason
    assert any("Using fallback lesson" in r.getMessage() for r in caplog.records)


@pytest.mark.parametrize(
    "raw",
    [
        "I'm sorry, I can't help with that.",
        "[]",
        '{"explanation": "only this"}',
        as_json({**FLAT_LESSON, "questions": [{"question": "Q", "options": ["a", "b"], "correct": 7}]}),
    ],
)
async def test_malformed_provider_text_yields_fallback(raw):
    pipeline = LessonPipeline(FakeProvider(RawText(raw)))

    result = await pipeline.run(_request())

    assert result.source == "fallback"
    assert result.fallback_reason.startswith("normalize failure")
    assert len(result.lesson.questions) == 3


async def test_provider_exception_is_contained():
    """A provider that raises instead of returning a result still yields a lesson."""
    pipeline = LessonPipeline(FakeProvider(RuntimeError("socket closed")))

    result = await pipeline.run(_request())

    assert result.source == "fallback"
    assert "RuntimeError" in result.fallback_reason


async def test_strict_schema_family_falls_back_on_mismatch():
    provider = FakeProvider(RawText(as_json(FLAT_LESSON)))
    pipeline = LessonPipeline(provider, strict_schema_family=True)

    result = await pipeline.run(_request(Variant.GLOBAL_ENHANCED))

    assert result.source == "fallback"
    assert result.lesson.is_global_version is True


# ---------------------------------------------------------------------------
# Test group 3: generate_lesson
# ---------------------------------------------------------------------------


async def test_generate_lesson_returns_lesson_only(pipeline):
    lesson = await pipeline.generate_lesson(
        5, Subject.SCIENCE, "Plant Growth", TeachingStyle.EUROPEAN, Variant.GLOBAL_ENHANCED
    )

    assert isinstance(lesson, LessonContent)
    assert lesson.is_global_version is True


async def test_generate_lesson_accepts_long_topic(pipeline, fake_provider):
    """Topic length is only capped at the HTTP boundary."""
    topic = "Addition " * 30

    lesson = await pipeline.generate_lesson(2, Subject.MATHEMATICS, topic, TeachingStyle.CHINESE)

    assert isinstance(lesson, LessonContent)
    assert topic.strip() in lesson.hindi_translation
    assert len(fake_provider.calls) == 1


@pytest.mark.parametrize("class_level, topic", [(0, "Addition"), (11, "Addition"), (3, "   ")])
async def test_generate_lesson_rejects_invalid_inputs(pipeline, fake_provider, class_level, topic):
    with pytest.raises(pydantic.ValidationError):
        await pipeline.generate_lesson(
            class_level, Subject.MATHEMATICS, topic, TeachingStyle.CHINESE
        )

    assert fake_provider.calls == [], "Invalid inputs must never reach the provider"


# ---------------------------------------------------------------------------
# Test group 4: analyze_upload
# ---------------------------------------------------------------------------


_PDF = UploadDescriptor(name="fractions.pdf", mime_type="application/pdf", size=4096)


async def test_analyze_upload_returns_provider_text():
    provider = FakeProvider(RawText("  Use the pizza diagrams for a fractions game.  "))
    pipeline = LessonPipeline(provider)

    summary = await pipeline.analyze_upload(_PDF, 4, Subject.MATHEMATICS)

    assert summary == "Use the pizza diagrams for a fractions game."
    assert provider.calls[0][0] == "summarize"


async def test_analyze_upload_failure_uses_canned_summary():
    pipeline = LessonPipeline(FakeProvider(Failure(reason="timeout")))

    summary = await pipeline.analyze_upload(_PDF, 4, Subject.MATHEMATICS)

    assert "document contains excellent material for Mathematics lessons" in summary


async def test_analyze_upload_without_provider_describes_file():
    provider = FakeProvider(configured=False)
    pipeline = LessonPipeline(provider)
    image = UploadDescriptor(name="leaf.png", mime_type="image/png", size=100)

    summary = await pipeline.analyze_upload(image, 3, Subject.SCIENCE)

    assert summary == (
        "I can see you've uploaded an image related to Science. This looks perfect "
        "for creating engaging lessons for Class 3 students!"
    )
    assert provider.calls == []


async def test_analyze_upload_notes_unsupported_type():
    pipeline = LessonPipeline(FakeProvider(configured=False))
    video = UploadDescriptor(name="clip.mp4", mime_type="video/mp4", size=100)

    summary = await pipeline.analyze_upload(video, 3, Subject.ART)

    assert "may not be supported" in summary
