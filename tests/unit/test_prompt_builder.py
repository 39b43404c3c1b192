"""Unit tests for the request builder.

Tests cover:
1. Placeholders: class number, age range, subject, topic and style appear
2. Variant templates: word targets and schema family per variant
3. Age range table: in-table and default ranges
4. Determinism: identical inputs give identical text
5. Upload instruction: descriptor details and extracted text excerpt
"""

from __future__ import annotations

import pytest

from asman.constants import DEFAULT_AGE_RANGE
from asman.enums import Subject, TeachingStyle, Variant
from asman.schemas.upload import UploadDescriptor
from asman.services.prompt_builder import (
    GLOBAL_SYSTEM_INSTRUCTION,
    STANDARD_SYSTEM_INSTRUCTION,
    age_range_for,
    build_instruction,
    build_upload_instruction,
    system_instruction_for,
)


def test_standard_instruction_fills_every_placeholder():
    """The standard template names class, age range, subject, topic and style."""
    text = build_instruction(3, Subject.SCIENCE, "Photosynthesis", TeachingStyle.JAPANESE)

    assert "Class 3 Science" in text
    assert '"Photosynthesis"' in text
    assert "Japanese Style" in text
    assert "8-9 year olds" in text
    assert "{class_number}" not in text, "No unformatted placeholders may remain"


def test_standard_instruction_asks_for_flat_schema():
    """Standard lessons target 300-500 words and the flat JSON keys."""
    text = build_instruction(2, Subject.MATHEMATICS, "Addition", TeachingStyle.CHINESE)

    assert "300-500 words" in text
    assert '"hindiTranslation"' in text
    assert '"interactiveSection"' not in text, "Standard template must not ask for the structured schema"


def test_global_instruction_asks_for_structured_schema_and_regions():
    """Global-enhanced lessons target 500-1000 words and at least 4 regions."""
    text = build_instruction(
        5, Subject.SCIENCE, "Plant Growth", TeachingStyle.EUROPEAN, Variant.GLOBAL_ENHANCED
    )

    assert "500-1000 words" in text
    assert "at least 4 different countries or regions" in text
    assert '"interactiveSection"' in text
    assert '"hindiKeyTerms"' in text


@pytest.mark.parametrize(
    "class_level, expected",
    [(1, "6-7"), (5, "10-11"), (10, "15-16"), (0, DEFAULT_AGE_RANGE), (12, DEFAULT_AGE_RANGE)],
)
def test_age_range_for(class_level, expected):
    """Class numbers outside the 10-entry table use the default range."""
    assert age_range_for(class_level) == expected


def test_build_instruction_is_deterministic():
    """Two calls with identical inputs return identical text."""
    args = (7, Subject.SOCIAL_STUDIES, "Mughal Empire", TeachingStyle.AMERICAN, Variant.STANDARD)

    assert build_instruction(*args) == build_instruction(*args)


def test_system_instruction_per_variant():
    assert system_instruction_for(Variant.STANDARD) == STANDARD_SYSTEM_INSTRUCTION
    assert system_instruction_for(Variant.GLOBAL_ENHANCED) == GLOBAL_SYSTEM_INSTRUCTION


def test_upload_instruction_includes_descriptor_and_excerpt():
    """The upload instruction names the file and embeds the extracted text."""
    descriptor = UploadDescriptor(
        name="fractions.pdf",
        mime_type="application/pdf",
        size=2048,
        extracted_text="  Half of a roti is one by two.  ",
    )

    text = build_upload_instruction(descriptor, 4, Subject.MATHEMATICS)

    assert '"fractions.pdf"' in text
    assert "Class 4 Mathematics" in text
    assert "a document" in text
    assert "Half of a roti is one by two." in text


def test_upload_instruction_without_text_has_no_excerpt():
    descriptor = UploadDescriptor(name="tree.png", mime_type="image/png", size=10)

    text = build_upload_instruction(descriptor, 1, Subject.ART)

    assert "Extracted content" not in text
    assert "uploaded an image" in text
