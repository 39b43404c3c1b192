"""Glossary overlay that renders lesson text in Hindi.

This is not machine translation. Each lesson carries its own English → Hindi
glossary; rendering in Hindi folds over that glossary in stored order and
replaces case-insensitive whole-word occurrences of each English term.

Each rule runs on the output of the previous one, so a later term can match
text introduced by an earlier replacement. Output therefore depends on the
glossary order, and that order is kept as-is.
"""

from __future__ import annotations

import re
from functools import reduce
from typing import Mapping

from asman.enums import Language
from asman.schemas.lesson import LessonContent, Question


def _replace_term(text: str, rule: tuple[str, str]) -> str:
    english, hindi = rule
    term = english.strip()
    if not term:
        return text
    pattern = re.compile(rf"\b{re.escape(term)}\b", flags=re.IGNORECASE)
    return pattern.sub(lambda _match: hindi, text)


def localize_text(text: str, language: Language, glossary: Mapping[str, str]) -> str:
    """Render *text* in *language* using *glossary*.

    English is the identity. Glossary misses leave the English token in place.
    """
    if language != Language.HINDI or not glossary:
        return text
    return reduce(_replace_term, glossary.items(), text)


def localize_lesson(lesson: LessonContent, language: Language) -> LessonContent:
    """Return a copy of *lesson* with every prose field rendered in *language*."""
    if language != Language.HINDI:
        return lesson

    glossary = lesson.hindi_translation

    def tr(text: str) -> str:
        return localize_text(text, language, glossary)

    questions = [
        Question(
            question=tr(q.question),
            options=[tr(opt) for opt in q.options],
            correct=q.correct,
            explanation=tr(q.explanation) if q.explanation else q.explanation,
        )
        for q in lesson.questions
    ]
    return lesson.model_copy(
        update={
            "explanation": tr(lesson.explanation),
            "questions": questions,
            "activity": tr(lesson.activity),
            "global_method": tr(lesson.global_method),
        }
    )
