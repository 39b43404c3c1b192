"""Provider response shapes.

Claude may answer in one of two JSON schema families. Each family is a
separate model so that the two conversions into :class:`LessonContent` are
independent and total over validated input.
"""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import ConfigDict, Field, field_validator

from asman.schemas.common import CamelModel
from asman.schemas.lesson import Question


def _as_list(value: Any) -> Any:
    """Accept a lone string where a list of strings is expected."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    return value


class _Section(CamelModel):
    model_config = ConfigDict(extra="ignore")


class FlatLessonPayload(_Section):
    """Flat family: the canonical fields at the top level."""

    kind: Literal["flat"] = "flat"
    explanation: str
    questions: list[Question] = Field(..., min_length=1)
    activity: str
    global_method: str
    hindi_translation: dict[str, str] = Field(default_factory=dict)
    is_global_version: bool | None = None


class Introduction(_Section):
    hook: str = ""
    objective: str = ""


class ExplanationSection(_Section):
    main_content: str = ""
    key_points: list[str] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list)

    coerce_lists = field_validator("key_points", "examples", mode="before")(_as_list)


class InteractiveSection(_Section):
    questions: list[Question] = Field(..., min_length=1)
    participation: str = ""


class HandsonActivity(_Section):
    title: str = ""
    materials: list[str] = Field(default_factory=list)
    steps: list[str] = Field(default_factory=list)
    time_needed: str = ""

    coerce_lists = field_validator("materials", "steps", mode="before")(_as_list)


class GlobalMethodSection(_Section):
    style: str = ""
    application: str = ""
    cultural_bridge: str = ""


class Conclusion(_Section):
    summary: str = ""
    homework: str = ""
    next_lesson: str = ""


class LanguageSupport(_Section):
    hindi_key_terms: dict[str, str] = Field(default_factory=dict)


class TeacherNotes(_Section):
    tips: list[str] = Field(default_factory=list)
    common_mistakes: list[str] = Field(default_factory=list)
    extensions: list[str] = Field(default_factory=list)

    coerce_lists = field_validator(
        "tips", "common_mistakes", "extensions", mode="before"
    )(_as_list)


class StructuredLessonPayload(_Section):
    """Structured family: a full lesson plan with nested sections."""

    kind: Literal["structured"] = "structured"
    lesson_title: str = ""
    age_group: str = ""
    duration: str = ""
    introduction: Introduction = Field(default_factory=Introduction)
    explanation: ExplanationSection = Field(default_factory=ExplanationSection)
    interactive_section: InteractiveSection
    handson_activity: HandsonActivity = Field(default_factory=HandsonActivity)
    global_method: GlobalMethodSection = Field(default_factory=GlobalMethodSection)
    conclusion: Conclusion = Field(default_factory=Conclusion)
    language_support: LanguageSupport = Field(default_factory=LanguageSupport)
    teacher_notes: TeacherNotes = Field(default_factory=TeacherNotes)


LessonPayload = Union[FlatLessonPayload, StructuredLessonPayload]
