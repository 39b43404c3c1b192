"""Generation instruction assembly.

Turns (class, subject, topic, style, variant) into the natural-language
instruction sent to Claude. Two fixed templates exist: the standard template
asks for the flat JSON schema, the global-enhanced template asks for the
structured lesson-plan schema with international perspectives.

Everything here is deterministic: identical inputs give identical text.
"""

from __future__ import annotations

from asman.constants import AGE_RANGES, DEFAULT_AGE_RANGE, subject_name, style_name
from asman.enums import Subject, TeachingStyle, Variant
from asman.schemas.upload import UploadDescriptor

# ---------------------------------------------------------------------------
# Persona instructions (sent as the system prompt)
# ---------------------------------------------------------------------------

STANDARD_SYSTEM_INSTRUCTION = """\
You are ASman, a content creation expert for Indian classrooms.

PERSONALITY: enthusiastic but calm, culturally aware, uses age-appropriate
language, encourages curiosity, expert in the Indian educational context.

Focus on Indian context: Indian examples (cricket, festivals, local heroes,
Indian scientists), materials commonly available in Indian schools, and NCERT
curriculum expectations.

TEACHING STYLES:
- Chinese: repetitive practice, mastery through drills, structured worksheets
- Japanese: structured step-by-step, disciplined approach, respect for process
- American: question-based, exploration-focused, encourage questioning
- European: creative expression, collaborative activities, artistic integration

Always answer with a single JSON object and nothing else."""

GLOBAL_SYSTEM_INSTRUCTION = """\
You are ASman, a content creation expert creating ENHANCED global lesson
content for Indian classrooms.

Build on an Indian foundation with international perspectives: cross-cultural
examples (USA, UK, China, Japan, Singapore, Finland and others), global best
practices, comparative analysis between Indian and global approaches, and
practical ways to bring those practices into Indian classrooms.

Maintain cultural sensitivity and keep the lesson relevant to Indian students
and teachers.

Always answer with a single JSON object and nothing else."""

UPLOAD_SYSTEM_INSTRUCTION = """\
You are ASman, a friendly teaching assistant for Indian teachers. Reply in
plain text (no JSON, no markdown headings) with at most three short,
encouraging and practical sentences."""

# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

_FLAT_SCHEMA = """\
{
  "explanation": "Lesson text with clear headings (## Heading) and bullet points",
  "questions": [
    {"question": "...", "options": ["...", "...", "...", "..."], "correct": 0, "explanation": "..."}
  ],
  "activity": "Hands-on activity using common classroom materials",
  "globalMethod": "How the teaching style is applied in an Indian classroom",
  "hindiTranslation": {"english term": "हिंदी शब्द"}
}"""

_STRUCTURED_SCHEMA = """\
{
  "lessonTitle": "...",
  "ageGroup": "...",
  "duration": "...",
  "introduction": {"hook": "...", "objective": "..."},
  "explanation": {"mainContent": "...", "keyPoints": ["..."], "examples": ["..."]},
  "interactiveSection": {
    "questions": [
      {"question": "...", "options": ["...", "...", "...", "..."], "correct": 0, "explanation": "..."}
    ],
    "participation": "..."
  },
  "handsonActivity": {"title": "...", "materials": ["..."], "steps": ["..."], "timeNeeded": "..."},
  "globalMethod": {"style": "...", "application": "...", "culturalBridge": "..."},
  "conclusion": {"summary": "...", "homework": "...", "nextLesson": "..."},
  "languageSupport": {"hindiKeyTerms": {"english term": "हिंदी शब्द"}},
  "teacherNotes": {"tips": ["..."], "commonMistakes": ["..."], "extensions": ["..."]}
}"""

STANDARD_TEMPLATE = """\
Create a STANDARD METHOD lesson for Class {class_number} {subject} on the topic "{topic}" using the {style} teaching approach.

Requirements:
- Content length: 300-500 words
- Age-appropriate for {age_range} year olds
- Include Indian cultural context and examples
- Follow the {style} teaching methodology throughout
- Use clear headings and bullet points for readability
- Exactly 3 multiple-choice questions, each with 4 options and a zero-based "correct" index
- Key terms with Hindi (Devanagari) translations in "hindiTranslation"

Respond only with valid JSON matching this format:
{schema}"""

GLOBAL_TEMPLATE = """\
Create a GLOBAL VERSION lesson with international perspectives for Class {class_number} {subject} on the topic "{topic}" using the {style} teaching approach.

Requirements:
- Content length: 500-1000 words
- Age-appropriate for {age_range} year olds
- Start from Indian cultural context, then expand worldwide
- Include specific examples from at least 4 different countries or regions
- Compare how other countries teach this concept with the Indian approach
- Real-world case studies and international applications
- Follow the {style} teaching methodology throughout
- Exactly 3 multiple-choice questions, each with 4 options and a zero-based "correct" index
- Key terms with Hindi (Devanagari) translations in "languageSupport.hindiKeyTerms"

Respond only with valid JSON matching this format:
{schema}"""


def with_article(word: str) -> str:
    """Prefix *word* with "a" or "an"."""
    return f"{'an' if word[:1].lower() in 'aeiou' else 'a'} {word}"


def age_range_for(class_level: int) -> str:
    """Return the age range for a class number, or the default range."""
    return AGE_RANGES.get(class_level, DEFAULT_AGE_RANGE)


def system_instruction_for(variant: Variant) -> str:
    """Return the persona instruction matching *variant*."""
    if variant == Variant.GLOBAL_ENHANCED:
        return GLOBAL_SYSTEM_INSTRUCTION
    return STANDARD_SYSTEM_INSTRUCTION


def build_instruction(
    class_level: int,
    subject: Subject,
    topic: str,
    teaching_style: TeachingStyle,
    variant: Variant = Variant.STANDARD,
) -> str:
    """Assemble the lesson generation instruction.

    The caller is responsible for rejecting blank topics beforehand.

    Args:
        class_level: Class number; out-of-table numbers use the default age range.
        subject: Lesson subject.
        topic: Lesson topic.
        teaching_style: Teaching style to frame the lesson in.
        variant: Selects the standard or global-enhanced template.

    Returns:
        The complete instruction text.
    """
    if variant == Variant.GLOBAL_ENHANCED:
        template, schema = GLOBAL_TEMPLATE, _STRUCTURED_SCHEMA
    else:
        template, schema = STANDARD_TEMPLATE, _FLAT_SCHEMA

    return template.format(
        class_number=class_level,
        subject=subject_name(subject),
        topic=topic,
        style=style_name(teaching_style),
        age_range=age_range_for(class_level),
        schema=schema,
    )


def build_upload_instruction(
    descriptor: UploadDescriptor,
    class_level: int,
    subject: Subject,
) -> str:
    """Assemble the instruction used to summarise an uploaded artifact."""
    parts = [
        f"A teacher uploaded {with_article(descriptor.kind)} named \"{descriptor.name}\" "
        f"({descriptor.mime_type}, {descriptor.size} bytes) for Class {class_level} "
        f"{subject_name(subject)}.",
        "Explain briefly how this material could be used to build an engaging lesson.",
    ]
    if descriptor.extracted_text:
        excerpt = descriptor.extracted_text.strip()[:2000]
        parts.extend(["", "Extracted content:", excerpt])
    return "\n".join(parts)
