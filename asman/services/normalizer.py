"""Response normalization.

Turns Claude's raw text into a canonical :class:`LessonContent`:

1. strip markdown code fences (bare or language-tagged),
2. parse JSON,
3. classify into the flat or structured schema family,
4. convert with the family's own conversion function,
5. validate.

:func:`normalize` is all-or-nothing and never raises: every rejection is
returned as a :class:`NormalizeFailure` so the pipeline can fall back.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

import pydantic

from asman.enums import Variant
from asman.exceptions import LessonNormalizationError
from asman.schemas.lesson import LessonContent, RichMetadata
from asman.schemas.payloads import FlatLessonPayload, LessonPayload, StructuredLessonPayload
from asman.services.validator import LessonValidator

logger = logging.getLogger(__name__)

_FLAT_KEYS = frozenset({"explanation", "questions", "activity", "globalMethod", "hindiTranslation"})
_STRUCTURED_MARKERS = frozenset(
    {"lessonTitle", "introduction", "interactiveSection", "handsonActivity", "languageSupport"}
)

_validator = LessonValidator()


@dataclass(frozen=True)
class NormalizeFailure:
    """Raw text could not be turned into a valid lesson."""

    reason: str
    validation_report: dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def strip_code_fences(raw_text: str) -> str:
    """Remove a leading ```` ```lang ```` fence and a trailing ```` ``` ```` fence."""
    text = raw_text.strip()
    text = re.sub(r"^```[\w-]*[ \t]*\n?", "", text)
    text = re.sub(r"\n?```\s*$", "", text)
    return text.strip()


def parse_json_object(raw_text: str) -> dict[str, Any]:
    """Parse fenced or bare JSON text into a dict.

    Raises:
        LessonNormalizationError: If the text is not valid JSON or not an object.
    """
    text = strip_code_fences(raw_text)
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse Claude JSON response (first 500 chars): %s", text[:500])
        raise LessonNormalizationError(f"Claude response is not valid JSON: {exc}") from exc

    if not isinstance(parsed, dict):
        raise LessonNormalizationError(
            f"Expected a JSON object from Claude, got {type(parsed).__name__}"
        )
    return parsed


def classify_payload(data: dict[str, Any]) -> LessonPayload:
    """Validate *data* as one of the two schema families.

    The family is read from the shape of the data: a nested ``explanation``
    or ``interactiveSection`` object means structured, a string
    ``explanation`` means flat (extra keys are ignored). Only when
    ``explanation`` is absent do the section markers decide.

    Raises:
        LessonNormalizationError: If *data* fits neither family.
    """
    explanation = data.get("explanation")
    if isinstance(explanation, dict) or isinstance(data.get("interactiveSection"), dict):
        structured = True
    elif isinstance(explanation, str):
        structured = False
    else:
        structured = bool(_STRUCTURED_MARKERS.intersection(data))
    try:
        if structured:
            return StructuredLessonPayload.model_validate(data)
        missing = sorted(_FLAT_KEYS.difference(data, {"hindiTranslation"}))
        if missing:
            raise LessonNormalizationError(
                f"Response matches neither schema family; missing {', '.join(missing)}"
            )
        return FlatLessonPayload.model_validate(data)
    except pydantic.ValidationError as exc:
        family = "structured" if structured else "flat"
        raise LessonNormalizationError(
            f"Invalid {family} lesson payload: {exc.error_count()} error(s); "
            f"first: {exc.errors()[0]['msg']}"
        ) from exc


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------


def flat_to_lesson(payload: FlatLessonPayload, variant: Variant) -> LessonContent:
    """Copy the flat fields straight into a canonical lesson."""
    is_global = payload.is_global_version
    if is_global is None:
        is_global = variant == Variant.GLOBAL_ENHANCED
    return LessonContent(
        explanation=payload.explanation,
        questions=payload.questions,
        activity=payload.activity,
        global_method=payload.global_method,
        hindi_translation=payload.hindi_translation,
        is_global_version=is_global,
    )


def _bullets(items: list[str], numbered: bool = False) -> str:
    if numbered:
        return "\n".join(f"{i}. {item}" for i, item in enumerate(items, start=1))
    return "\n".join(f"• {item}" for item in items)


def _section(heading: str, body: str) -> str | None:
    body = body.strip()
    return f"## {heading}\n{body}" if body else None


def render_structured_explanation(payload: StructuredLessonPayload) -> str:
    """Concatenate the structured sections in their fixed order under fixed headings."""
    activity = payload.handson_activity
    method = payload.global_method
    notes = payload.teacher_notes

    activity_lines = []
    if activity.title:
        activity_lines.append(f"**{activity.title}**")
    if activity.materials:
        activity_lines.append(f"**Materials:** {', '.join(activity.materials)}")
    if activity.time_needed:
        activity_lines.append(f"**Time:** {activity.time_needed}")
    if activity.steps:
        activity_lines.append("**Steps:**\n" + _bullets(activity.steps, numbered=True))

    method_lines = []
    if method.style:
        method_lines.append(f"**Style:** {method.style}")
    if method.application:
        method_lines.append(method.application)
    if method.cultural_bridge:
        method_lines.append(f"**Cultural Bridge:** {method.cultural_bridge}")

    notes_lines = []
    if notes.tips:
        notes_lines.append("**Tips:**\n" + _bullets(notes.tips))
    if notes.common_mistakes:
        notes_lines.append("**Common Mistakes:**\n" + _bullets(notes.common_mistakes))
    if notes.extensions:
        notes_lines.append("**Extensions:**\n" + _bullets(notes.extensions))

    sections = [
        _section("Learning Objective", payload.introduction.objective),
        _section("Introduction", payload.introduction.hook),
        _section("Main Content", payload.explanation.main_content),
        _section("Key Points", _bullets(payload.explanation.key_points, numbered=True)),
        _section("Examples", _bullets(payload.explanation.examples)),
        _section("Hands-on Activity", "\n".join(activity_lines)),
        _section("Global Teaching Method", "\n".join(method_lines)),
        _section("Summary", payload.conclusion.summary),
        _section("Homework", payload.conclusion.homework),
        _section("Next Lesson", payload.conclusion.next_lesson),
        _section("Teacher Notes", "\n\n".join(notes_lines)),
    ]
    return "\n\n".join(s for s in sections if s)


def render_activity_summary(payload: StructuredLessonPayload) -> str:
    """Short one-paragraph rendering of the hands-on activity block."""
    activity = payload.handson_activity
    parts = [activity.title.strip() or "Hands-on activity"]
    if activity.time_needed:
        parts[0] += f" ({activity.time_needed})"
    if activity.materials:
        parts.append(f"Materials: {', '.join(activity.materials)}.")
    if activity.steps:
        parts.append(
            "Steps: " + " ".join(f"{i}. {step}" for i, step in enumerate(activity.steps, start=1))
        )
    if len(parts) == 1:
        parts[0] += "."
    else:
        parts[0] += ":"
    return " ".join(parts)


def structured_to_lesson(payload: StructuredLessonPayload, variant: Variant) -> LessonContent:
    """Flatten a structured lesson plan into a canonical lesson."""
    return LessonContent(
        explanation=render_structured_explanation(payload),
        questions=payload.interactive_section.questions,
        activity=render_activity_summary(payload),
        global_method=payload.global_method.application,
        hindi_translation=payload.language_support.hindi_key_terms,
        is_global_version=variant == Variant.GLOBAL_ENHANCED,
        rich_metadata=RichMetadata(
            lesson_title=payload.lesson_title,
            age_group=payload.age_group,
            duration=payload.duration,
        ),
    )


def expected_family(variant: Variant) -> str:
    """Schema family the instruction for *variant* asks for."""
    return "structured" if variant == Variant.GLOBAL_ENHANCED else "flat"


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def normalize(
    raw_text: str,
    variant: Variant,
    *,
    strict_schema_family: bool = False,
) -> LessonContent | NormalizeFailure:
    """Turn raw provider text into a canonical lesson, or report why not.

    Args:
        raw_text: Text from a successful provider call.
        variant: Variant the instruction was built for.
        strict_schema_family: Reject a payload whose family differs from the
            one requested for *variant*.

    Returns:
        A validated :class:`LessonContent`, or :class:`NormalizeFailure`.
    """
    try:
        payload = classify_payload(parse_json_object(raw_text))

        wanted = expected_family(variant)
        if payload.kind != wanted:
            if strict_schema_family:
                raise LessonNormalizationError(
                    f"Expected {wanted} schema for {variant.value} lesson, got {payload.kind}"
                )
            logger.info(
                "Accepting %s schema for %s lesson (requested %s)",
                payload.kind,
                variant.value,
                wanted,
            )

        if isinstance(payload, StructuredLessonPayload):
            lesson = structured_to_lesson(payload, variant)
        else:
            lesson = flat_to_lesson(payload, variant)

        report = _validator.validate(lesson)
        if not report.passed:
            raise LessonNormalizationError(
                f"Lesson failed validation: {report.failure_summary()}",
                validation_report=report.to_dict(),
            )
        return lesson

    except LessonNormalizationError as exc:
        logger.warning("Normalization failed: %s", exc)
        return NormalizeFailure(reason=str(exc), validation_report=exc.validation_report)
    except pydantic.ValidationError as exc:
        logger.warning("Normalized lesson violates invariants: %s", exc)
        return NormalizeFailure(reason=f"Lesson violates invariants: {exc.error_count()} error(s)")
