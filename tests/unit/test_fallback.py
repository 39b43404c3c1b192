"""Unit tests for the deterministic fallback lesson generator.

Tests cover:
1. Totality: every class/subject/style/variant combination validates
2. Standard content: topic, class and style name, three questions
3. Global content: six regions, best practices, different third question
4. Glossary: topic always present, extra terms for global lessons
5. Metadata: title, age group, duration per variant
6. Purity: identical inputs give identical lessons
"""

from __future__ import annotations

import itertools

import pytest

from asman.enums import Subject, TeachingStyle, Variant
from asman.services.fallback import build_fallback_lesson
from asman.services.validator import LessonValidator, regions_mentioned

_validator = LessonValidator()


@pytest.mark.parametrize(
    "subject, style, variant",
    list(itertools.product(Subject, TeachingStyle, Variant)),
)
def test_fallback_lesson_always_passes_validation(subject, style, variant):
    """The fallback is total: every input combination yields a valid lesson."""
    lesson = build_fallback_lesson(6, subject, "Fractions", style, variant)

    report = _validator.validate(lesson)

    assert report.passed, f"Fallback lesson failed validation: {report.failure_summary()}"
    assert len(lesson.questions) == 3


def test_standard_fallback_mentions_topic_class_and_style():
    lesson = build_fallback_lesson(2, Subject.MATHEMATICS, "Addition", TeachingStyle.CHINESE)

    assert "Addition" in lesson.explanation
    assert "Class 2" in lesson.explanation
    assert "Chinese Style" in lesson.explanation
    assert lesson.is_global_version is False
    assert "International Perspectives" not in lesson.explanation


def test_standard_fallback_global_method_uses_style_tables():
    lesson = build_fallback_lesson(2, Subject.MATHEMATICS, "Addition", TeachingStyle.CHINESE)

    assert lesson.global_method == (
        "Using Chinese Style methodology: Step-by-step practice with repetition for mastery. "
        "This approach builds accuracy and confidence through regular practice."
    )


def test_global_fallback_names_all_six_regions():
    """The International Perspectives block names every reference region."""
    lesson = build_fallback_lesson(
        5, Subject.SCIENCE, "Plant Growth", TeachingStyle.EUROPEAN, Variant.GLOBAL_ENHANCED
    )

    assert lesson.is_global_version is True
    assert "## International Perspectives" in lesson.explanation
    assert "## Global Best Practices" in lesson.explanation
    assert regions_mentioned(lesson.explanation) == [
        "China", "Japan", "USA", "Europe", "Singapore", "Finland",
    ]
    assert "worldwide" in lesson.global_method


def test_third_question_differs_by_variant():
    standard = build_fallback_lesson(4, Subject.ART, "Rangoli", TeachingStyle.JAPANESE)
    global_ = build_fallback_lesson(
        4, Subject.ART, "Rangoli", TeachingStyle.JAPANESE, Variant.GLOBAL_ENHANCED
    )

    assert standard.questions[:2] == global_.questions[:2]
    assert standard.questions[2] != global_.questions[2]
    assert "other countries" in global_.questions[2].question


def test_fallback_glossary_contents():
    """The topic is always a key; global lessons add four more terms."""
    standard = build_fallback_lesson(3, Subject.ENGLISH, "Animals", TeachingStyle.AMERICAN)
    global_ = build_fallback_lesson(
        3, Subject.ENGLISH, "Animals", TeachingStyle.AMERICAN, Variant.GLOBAL_ENHANCED
    )

    assert list(standard.hindi_translation) == [
        "Animals", "learning", "students", "activity", "example",
    ]
    assert list(global_.hindi_translation)[5:] == ["global", "international", "culture", "world"]
    assert standard.hindi_translation["Animals"] == "Animals (विषय)"


def test_topic_colliding_with_base_term_keeps_topic_entry():
    lesson = build_fallback_lesson(1, Subject.HINDI, "learning", TeachingStyle.AMERICAN)

    assert lesson.hindi_translation["learning"] == "learning (विषय)"
    assert list(lesson.hindi_translation).count("learning") == 1


@pytest.mark.parametrize(
    "variant, duration",
    [(Variant.STANDARD, "40 minutes"), (Variant.GLOBAL_ENHANCED, "60 minutes")],
)
def test_fallback_rich_metadata(variant, duration):
    lesson = build_fallback_lesson(
        5, Subject.SOCIAL_STUDIES, "Rivers", TeachingStyle.EUROPEAN, variant
    )

    assert lesson.rich_metadata is not None
    assert lesson.rich_metadata.lesson_title == "Rivers - Class 5 Social Studies"
    assert lesson.rich_metadata.age_group == "10-11 years"
    assert lesson.rich_metadata.duration == duration


def test_fallback_is_pure():
    args = (8, Subject.SCIENCE, "Magnets", TeachingStyle.JAPANESE, Variant.GLOBAL_ENHANCED)

    assert build_fallback_lesson(*args) == build_fallback_lesson(*args)
