"""Deterministic fallback lessons.

Used whenever Claude is not configured, fails, or returns something the
normalizer rejects. :func:`build_fallback_lesson` is pure and total: for any
inputs it returns a lesson that satisfies every canonical invariant without
touching the network.
"""

from __future__ import annotations

from asman.constants import (
    STYLE_BENEFITS,
    STYLE_DESCRIPTIONS,
    STYLE_REGIONS,
    style_name,
    subject_name,
)
from asman.enums import Subject, TeachingStyle, Variant
from asman.schemas.lesson import LessonContent, Question, RichMetadata
from asman.services.prompt_builder import age_range_for

# ---------------------------------------------------------------------------
# Fixed text
# ---------------------------------------------------------------------------

_SINGAPORE_PROSE = "Uses concrete models and visual bar diagrams before abstract ideas"
_FINLAND_PROSE = "Values play, short lessons and learning through real-life projects"

_GLOBAL_BEST_PRACTICES = (
    "Multi-sensory learning approaches",
    "Cultural context integration",
    "Real-world applications",
    "Student-centered discovery",
)

_BASE_GLOSSARY: tuple[tuple[str, str], ...] = (
    ("learning", "सीखना"),
    ("students", "छात्र"),
    ("activity", "गतिविधि"),
    ("example", "उदाहरण"),
)

_GLOBAL_GLOSSARY: tuple[tuple[str, str], ...] = (
    ("global", "वैश्विक"),
    ("international", "अंतर्राष्ट्रीय"),
    ("culture", "संस्कृति"),
    ("world", "विश्व"),
)


def _style(teaching_style: TeachingStyle | str) -> TeachingStyle:
    try:
        return TeachingStyle(teaching_style)
    except ValueError:
        return TeachingStyle.AMERICAN


def _global_perspectives_block(topic: str) -> str:
    lines = [
        "## International Perspectives",
        "",
        f"Around the world, students learn about {topic} in fascinating ways:",
        "",
    ]
    for style in TeachingStyle:
        lines.append(f"• **{STYLE_REGIONS[style]}**: {STYLE_DESCRIPTIONS[style]}")
    lines.append(f"• **Singapore**: {_SINGAPORE_PROSE}")
    lines.append(f"• **Finland**: {_FINLAND_PROSE}")
    lines.extend(
        [
            "",
            "## Global Best Practices",
            "",
            f"International research shows that effective {topic} education includes:",
        ]
    )
    lines.extend(f"• {practice}" for practice in _GLOBAL_BEST_PRACTICES)
    return "\n".join(lines)


def _questions(topic: str, is_global: bool) -> list[Question]:
    third = (
        Question(
            question=f"How do students in other countries learn about {topic}?",
            options=[
                "Same as India",
                "Different methods worldwide",
                "Only in English",
                "Not taught elsewhere",
            ],
            correct=1,
            explanation="Every country teaches in its own way, and we can learn from all of them.",
        )
        if is_global
        else Question(
            question=f"What makes {topic} interesting to learn?",
            options=[
                "It's boring",
                "It's challenging but fun",
                "Too difficult",
                "Not useful",
            ],
            correct=1,
            explanation="A good challenge makes learning fun.",
        )
    )
    return [
        Question(
            question=f"What is the main concept we're learning about {topic}?",
            options=["Basic understanding", "Advanced concepts", "Historical facts", "Fun activities"],
            correct=0,
            explanation=f"We start by building a basic understanding of {topic}.",
        ),
        Question(
            question=f"How can we apply {topic} in daily life?",
            options=["Only in school", "At home and school", "Never needed", "Only for exams"],
            correct=1,
            explanation=f"{topic} is useful both at home and at school.",
        ),
        third,
    ]


def build_fallback_lesson(
    class_level: int,
    subject: Subject,
    topic: str,
    teaching_style: TeachingStyle,
    variant: Variant = Variant.STANDARD,
) -> LessonContent:
    """Build a complete lesson without any external capability.

    Args:
        class_level: Class number shown as ``"Class N"``.
        subject: Lesson subject.
        topic: Lesson topic; always becomes a glossary key, verbatim.
        teaching_style: Style whose description frames the method section.
        variant: Global-enhanced adds international perspectives, a different
            third question and extra glossary terms.

    Returns:
        A lesson with exactly three questions that passes validation.
    """
    style = _style(teaching_style)
    is_global = variant == Variant.GLOBAL_ENHANCED
    name = style_name(style)

    prefix = "Enhanced Global Version: " if is_global else ""
    explanation = (
        f"{prefix}Welcome to our {topic} lesson for Class {class_level}! "
        f"Let's explore this exciting topic together using {name} teaching methods. "
        f"This lesson is specially designed for Indian students with examples they can relate to."
    )
    if is_global:
        explanation += "\n\n" + _global_perspectives_block(topic)

    activity = (
        f"{'Global Activity: ' if is_global else ''}"
        f"Let's create a hands-on activity about {topic} using common materials available "
        f"in Indian classrooms. Students can work in groups to explore and discover!"
    )
    if is_global:
        activity += (
            " This activity is inspired by international teaching methods and can be "
            "adapted using techniques from different countries."
        )

    global_method = (
        f"Using {name} methodology: {STYLE_DESCRIPTIONS[style]}. "
        f"This approach {STYLE_BENEFITS[style]}."
    )
    if is_global:
        global_method += (
            "\n\nThis approach has been successfully implemented in schools worldwide "
            "and adapted for Indian classroom contexts."
        )

    glossary: dict[str, str] = {topic: f"{topic} (विषय)"}
    for english, hindi in _BASE_GLOSSARY + (_GLOBAL_GLOSSARY if is_global else ()):
        glossary.setdefault(english, hindi)

    return LessonContent(
        explanation=explanation,
        questions=_questions(topic, is_global),
        activity=activity,
        global_method=global_method,
        hindi_translation=glossary,
        is_global_version=is_global,
        rich_metadata=RichMetadata(
            lesson_title=f"{topic} - Class {class_level} {subject_name(subject)}",
            age_group=f"{age_range_for(class_level)} years",
            duration="60 minutes" if is_global else "40 minutes",
        ),
    )
