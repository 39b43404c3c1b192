"""Unit tests for the DOCX lesson exporter.

Generated bytes are read back with python-docx so assertions run against the
document structure rather than the zip container.
"""

from __future__ import annotations

import io

import pytest
from docx import Document

from asman.enums import Language, Subject, TeachingStyle, Variant
from asman.exceptions import LessonExportError
from asman.schemas.lesson import LessonContent
from asman.services.docx_generator import DocxGenerator
from asman.services.fallback import build_fallback_lesson

_generator = DocxGenerator()


def _lesson(variant: Variant = Variant.STANDARD) -> LessonContent:
    return build_fallback_lesson(2, Subject.MATHEMATICS, "Addition", TeachingStyle.CHINESE, variant)


def _render(lesson: LessonContent, language: Language = Language.ENGLISH):
    data = _generator.generate(
        lesson,
        class_level=2,
        subject=Subject.MATHEMATICS,
        topic="Addition",
        teaching_style=TeachingStyle.CHINESE,
        language=language,
    )
    return data, Document(io.BytesIO(data))


def _text(doc) -> str:
    return "\n".join(p.text for p in doc.paragraphs)


def test_generate_returns_docx_bytes():
    data, _ = _render(_lesson())

    assert isinstance(data, bytes)
    assert data[:2] == b"PK", "A DOCX file is a zip archive"


def test_document_contains_every_lesson_section():
    _, doc = _render(_lesson())
    text = _text(doc)

    assert "Addition - Class 2 Mathematics" in text
    assert "Class 2 | Subject: Mathematics" in text
    for heading in ("Explanation", "Quiz (3 Questions)", "Activity", "Global Teaching Method"):
        assert heading in text, f"Missing section heading {heading!r}"
    assert "Teaching Style: Chinese Style" in text


def test_quiz_lists_lettered_options_and_answer():
    lesson = _lesson()
    _, doc = _render(lesson)
    text = _text(doc)

    first = lesson.questions[0]
    answer_letter = chr(ord("A") + first.correct)
    assert f"Question 1: {first.question}" in text
    assert f"Answer: {answer_letter}. {first.options[first.correct]}" in text


def test_glossary_table_follows_glossary_order():
    lesson = _lesson()
    _, doc = _render(lesson)

    table = doc.tables[0]
    rows = [[cell.text for cell in row.cells] for row in table.rows]
    assert rows[0] == ["English", "Hindi"]
    assert rows[1:] == [[k, v] for k, v in lesson.hindi_translation.items()]


def test_global_lesson_is_marked_as_global_edition():
    _, doc = _render(_lesson(Variant.GLOBAL_ENHANCED))

    assert "Global Edition" in _text(doc)


def test_hindi_export_applies_glossary_overlay():
    english_data, english_doc = _render(_lesson())
    hindi_data, hindi_doc = _render(_lesson(), Language.HINDI)

    assert english_data != hindi_data
    assert "Addition (विषय)" in _text(hindi_doc)
    assert "Addition (विषय)" not in _text(english_doc)


def test_lesson_without_glossary_has_no_table():
    lesson = _lesson().model_copy(update={"hindi_translation": {}})

    _, doc = _render(lesson)

    assert doc.tables == []


def test_render_failure_raises_export_error():
    broken = LessonContent.model_construct(
        explanation="x",
        questions=None,
        activity="x",
        global_method="x",
        hindi_translation={},
        is_global_version=False,
        rich_metadata=None,
    )

    with pytest.raises(LessonExportError) as exc_info:
        _generator.generate(broken)

    assert "DOCX generation failed" in str(exc_info.value)
