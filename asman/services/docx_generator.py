"""
DOCX Generator: renders a canonical lesson as a styled Word document.

Uses python-docx. Every piece of lesson prose passes through the glossary
overlay for the requested language, so a Hindi export reads the same as the
Hindi view in the player.
"""

import io
import logging
import re

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt, RGBColor

from asman.constants import style_name, subject_name
from asman.enums import Language, Subject, TeachingStyle
from asman.exceptions import LessonExportError
from asman.schemas.lesson import LessonContent
from asman.services.localization import localize_text

logger = logging.getLogger(__name__)

TITLE_COLOR = RGBColor(0x1F, 0x4E, 0x79)  # #1F4E79
SECTION_COLOR = RGBColor(0x2E, 0x75, 0xB6)  # Section heading accent
LABEL_COLOR = RGBColor(0x59, 0x56, 0x59)  # Gray for labels
CORRECT_COLOR = RGBColor(0x00, 0x80, 0x00)

_BULLET_RE = re.compile(r"^\s*[•\-*]\s+")
_NUMBERED_RE = re.compile(r"^\s*\d+\.\s+")


def _plain(text: str) -> str:
    """Drop markdown emphasis markers."""
    return text.replace("**", "")


def _add_styled_heading(doc: Document, text: str, level: int = 1) -> None:
    """Add a heading with styling."""
    heading = doc.add_heading(text, level=level)
    for run in heading.runs:
        if level == 1:
            run.font.color.rgb = TITLE_COLOR
            run.font.size = Pt(22)
        elif level == 2:
            run.font.color.rgb = SECTION_COLOR
            run.font.size = Pt(16)
        elif level == 3:
            run.font.color.rgb = SECTION_COLOR
            run.font.size = Pt(13)


def _add_label_value(doc: Document, label: str, value: str) -> None:
    """Add a bold label followed by a value."""
    para = doc.add_paragraph()
    run_label = para.add_run(f"{label}: ")
    run_label.bold = True
    run_label.font.color.rgb = LABEL_COLOR
    run_label.font.size = Pt(10)
    run_value = para.add_run(value)
    run_value.font.size = Pt(10)


def _add_markdown_block(doc: Document, text: str) -> None:
    """Write ``## `` headings, bullet and numbered lines, and paragraphs."""
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.startswith("## "):
            _add_styled_heading(doc, _plain(stripped[3:].strip()), level=3)
        elif _BULLET_RE.match(stripped):
            para = doc.add_paragraph(style="List Bullet")
            para.add_run(_plain(_BULLET_RE.sub("", stripped))).font.size = Pt(10)
        elif _NUMBERED_RE.match(stripped):
            para = doc.add_paragraph(style="List Number")
            para.add_run(_plain(_NUMBERED_RE.sub("", stripped))).font.size = Pt(10)
        else:
            doc.add_paragraph(_plain(stripped))


class DocxGenerator:
    """Generates a styled DOCX from a canonical lesson."""

    def generate(
        self,
        lesson: LessonContent,
        *,
        class_level: int | None = None,
        subject: Subject | None = None,
        topic: str = "",
        teaching_style: TeachingStyle | None = None,
        language: Language = Language.ENGLISH,
    ) -> bytes:
        """
        Render *lesson* in *language* and return the DOCX file bytes.

        Raises:
            LessonExportError: If python-docx fails to build the document.
        """
        try:
            def tr(text: str) -> str:
                return localize_text(text, language, lesson.hindi_translation)

            doc = Document()
            self._set_document_defaults(doc)
            self._add_title_section(doc, lesson, class_level, subject, topic, teaching_style)
            self._add_explanation(doc, lesson, tr)
            self._add_quiz(doc, lesson, tr)
            self._add_activity(doc, lesson, tr)
            self._add_global_method(doc, lesson, tr)
            self._add_glossary(doc, lesson)

            buffer = io.BytesIO()
            doc.save(buffer)
            buffer.seek(0)
            return buffer.read()

        except Exception as exc:
            logger.error("DOCX generation failed: %s", exc)
            raise LessonExportError(f"DOCX generation failed: {exc}") from exc

    def _set_document_defaults(self, doc: Document) -> None:
        style = doc.styles["Normal"]
        style.font.name = "Calibri"
        style.font.size = Pt(11)

    def _add_title_section(
        self,
        doc: Document,
        lesson: LessonContent,
        class_level: int | None,
        subject: Subject | None,
        topic: str,
        teaching_style: TeachingStyle | None,
    ) -> None:
        meta = lesson.rich_metadata
        title = (meta.lesson_title if meta and meta.lesson_title else "") or topic
        title_para = doc.add_heading(title or "Untitled Lesson", level=1)
        title_para.alignment = WD_ALIGN_PARAGRAPH.CENTER
        for run in title_para.runs:
            run.font.color.rgb = TITLE_COLOR
            run.font.size = Pt(24)

        subtitle_parts = []
        if class_level:
            subtitle_parts.append(f"Class {class_level}")
        if subject:
            subtitle_parts.append(f"Subject: {subject_name(subject)}")
        if lesson.is_global_version:
            subtitle_parts.append("Global Edition")
        if subtitle_parts:
            subtitle = doc.add_heading(" | ".join(subtitle_parts), level=2)
            subtitle.alignment = WD_ALIGN_PARAGRAPH.CENTER
            for run in subtitle.runs:
                run.font.color.rgb = SECTION_COLOR
                run.font.size = Pt(14)

        if teaching_style:
            _add_label_value(doc, "Teaching Style", style_name(teaching_style))
        if meta:
            if meta.age_group:
                _add_label_value(doc, "Age Group", meta.age_group)
            if meta.duration:
                _add_label_value(doc, "Duration", meta.duration)

        doc.add_paragraph("")  # spacing

    def _add_explanation(self, doc: Document, lesson: LessonContent, tr) -> None:
        _add_styled_heading(doc, "Explanation", level=2)
        _add_markdown_block(doc, tr(lesson.explanation))

    def _add_quiz(self, doc: Document, lesson: LessonContent, tr) -> None:
        _add_styled_heading(doc, f"Quiz ({len(lesson.questions)} Questions)", level=2)

        for number, q in enumerate(lesson.questions, start=1):
            para = doc.add_paragraph()
            run = para.add_run(f"Question {number}: {tr(q.question)}")
            run.bold = True
            run.font.size = Pt(11)

            for index, option in enumerate(q.options):
                opt_para = doc.add_paragraph(style="List Bullet")
                opt_run = opt_para.add_run(f"{chr(ord('A') + index)}. {tr(option)}")
                opt_run.font.size = Pt(10)
                if index == q.correct:
                    opt_run.font.color.rgb = CORRECT_COLOR

            _add_label_value(
                doc, "Answer", f"{chr(ord('A') + q.correct)}. {tr(q.options[q.correct])}"
            )
            if q.explanation:
                _add_label_value(doc, "Why", tr(q.explanation))

            doc.add_paragraph("")  # spacing

    def _add_activity(self, doc: Document, lesson: LessonContent, tr) -> None:
        _add_styled_heading(doc, "Activity", level=2)
        _add_markdown_block(doc, tr(lesson.activity))

    def _add_global_method(self, doc: Document, lesson: LessonContent, tr) -> None:
        _add_styled_heading(doc, "Global Teaching Method", level=2)
        _add_markdown_block(doc, tr(lesson.global_method))

    def _add_glossary(self, doc: Document, lesson: LessonContent) -> None:
        """English → Hindi key terms, in glossary order."""
        if not lesson.hindi_translation:
            return

        _add_styled_heading(doc, "Key Terms (English → Hindi)", level=2)
        table = doc.add_table(rows=1, cols=2)
        table.style = "Table Grid"
        header = table.rows[0].cells
        header[0].text = "English"
        header[1].text = "Hindi"
        for cell in header:
            for run in cell.paragraphs[0].runs:
                run.bold = True

        for english, hindi in lesson.hindi_translation.items():
            row = table.add_row().cells
            row[0].text = english
            row[1].text = hindi
