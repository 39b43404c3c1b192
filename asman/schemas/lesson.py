"""Pydantic v2 schemas for the canonical lesson and generation requests."""

from __future__ import annotations

from pydantic import ConfigDict, Field, field_validator, model_validator

from asman.constants import MAX_CLASS_LEVEL, MIN_CLASS_LEVEL
from asman.schemas.common import CamelModel, Language, Subject, TeachingStyle, Variant


class Question(CamelModel):
    """A single multiple-choice quiz question.

    Attributes:
        question: Question text shown to students.
        options: Ordered answer options (at least two).
        correct: Index of the correct option.
        explanation: Optional reasoning shown after answering.
    """

    model_config = ConfigDict(frozen=True)

    question: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=2)
    correct: int = Field(..., ge=0)
    explanation: str | None = None

    @model_validator(mode="after")
    def _correct_within_options(self) -> "Question":
        if self.correct >= len(self.options):
            raise ValueError(
                f"correct index {self.correct} out of range for "
                f"{len(self.options)} options"
            )
        return self


class RichMetadata(CamelModel):
    """Presentation-only lesson header data."""

    model_config = ConfigDict(frozen=True)

    lesson_title: str = ""
    age_group: str = ""
    duration: str = ""


class LessonContent(CamelModel):
    """The canonical lesson every pipeline path must produce.

    Instances are frozen: a lesson is replaced, never edited in place.

    Attributes:
        explanation: Lesson prose; may contain ``## `` heading markers.
        questions: Non-empty ordered quiz.
        activity: Hands-on activity description.
        global_method: How the chosen teaching style is applied.
        hindi_translation: English term → Hindi term glossary. Insertion order
            is the order the localization overlay applies the rules in.
        is_global_version: Whether this is the global-enhanced variant.
        rich_metadata: Optional title/age-group/duration header.
    """

    model_config = ConfigDict(frozen=True)

    explanation: str
    questions: list[Question] = Field(..., min_length=1)
    activity: str
    global_method: str
    hindi_translation: dict[str, str] = Field(default_factory=dict)
    is_global_version: bool = False
    rich_metadata: RichMetadata | None = None


class GenerationRequest(CamelModel):
    """Inputs for one lesson generation.

    Attributes:
        class_level: Class ordinal from 1 to 10.
        subject: One of the six catalog subjects.
        topic: Lesson topic; surrounding whitespace is removed.
        teaching_style: One of the four teaching styles.
        variant: Standard or global-enhanced depth.
    """

    class_level: int = Field(..., ge=MIN_CLASS_LEVEL, le=MAX_CLASS_LEVEL)
    subject: Subject
    topic: str = Field(..., min_length=1)
    teaching_style: TeachingStyle
    variant: Variant = Variant.STANDARD

    @field_validator("topic")
    @classmethod
    def _strip_topic(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("topic must not be blank")
        return value


class LessonGenerateRequest(GenerationRequest):
    """Request body for POST /lessons/generate; caps the topic length."""

    topic: str = Field(..., min_length=1, max_length=200)


class GenerationResponse(CamelModel):
    """Response payload for POST /lessons/generate.

    Attributes:
        lesson: The canonical lesson.
        source: ``"provider"`` or ``"fallback"``.
        generation_time_seconds: Wall-clock time for the pipeline run.
    """

    lesson: LessonContent
    source: str = Field(..., pattern=r"^(provider|fallback)$")
    generation_time_seconds: float = Field(default=0.0, ge=0.0)


class LocalizeRequest(CamelModel):
    """Request payload for POST /lessons/localize."""

    lesson: LessonContent
    language: Language = Language.HINDI
