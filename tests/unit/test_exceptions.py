"""Unit tests for custom exception classes (asman/exceptions.py).

Tests verify that each exception class:
1. Stores its constructor arguments as instance attributes.
2. Inherits from the standard Exception hierarchy.
3. Has a useful string representation that includes the message.
"""

from __future__ import annotations

import pytest

from asman.exceptions import (
    InvalidTransitionError,
    LessonExportError,
    LessonGenerationError,
    LessonNormalizationError,
    SessionNotFoundError,
    WizardPreconditionError,
)


# ---------------------------------------------------------------------------
# LessonGenerationError
# ---------------------------------------------------------------------------


def test_lesson_generation_error_stores_attempt():
    """The provider records which attempt failed so the last one can be reported."""
    exc = LessonGenerationError("Claude API timeout after 60s", attempt=3)

    assert isinstance(exc, Exception)
    assert str(exc) == "Claude API timeout after 60s"
    assert exc.attempt == 3, f"attempt must be 3, got {exc.attempt}"


def test_lesson_generation_error_defaults_attempt_to_one():
    exc = LessonGenerationError("Network error")

    assert exc.attempt == 1


# ---------------------------------------------------------------------------
# LessonNormalizationError
# ---------------------------------------------------------------------------


def test_normalization_error_stores_validation_report():
    report = {"passed": False, "errors": ["Lesson has no quiz questions."]}
    exc = LessonNormalizationError("Validation failed", validation_report=report)

    assert str(exc) == "Validation failed"
    assert exc.validation_report == report


def test_normalization_error_defaults_report_to_empty_dict():
    """Handlers can read .validation_report without a None check."""
    exc = LessonNormalizationError("Reply is not JSON")

    assert exc.validation_report == {}


# ---------------------------------------------------------------------------
# SessionNotFoundError
# ---------------------------------------------------------------------------


def test_session_not_found_error_mentions_id():
    exc = SessionNotFoundError("session-abc123")

    assert exc.session_id == "session-abc123"
    assert "session-abc123" in str(exc)


# ---------------------------------------------------------------------------
# Wizard errors
# ---------------------------------------------------------------------------


def test_invalid_transition_error_names_state_and_event():
    exc = InvalidTransitionError("loading", "SELECT_STYLE")

    assert exc.state == "loading"
    assert exc.event == "SELECT_STYLE"
    assert "'SELECT_STYLE'" in str(exc) and "'loading'" in str(exc)


def test_wizard_precondition_error_stores_missing_fields():
    exc = WizardPreconditionError("Cannot generate", missing=["topic"])

    assert str(exc) == "Cannot generate"
    assert exc.missing == ["topic"]


def test_wizard_precondition_error_defaults_missing_to_empty_list():
    assert WizardPreconditionError("Blank").missing == []


# ---------------------------------------------------------------------------
# LessonExportError
# ---------------------------------------------------------------------------


def test_lesson_export_error_message():
    exc = LessonExportError("DOCX generation failed: bad style")

    assert str(exc) == "DOCX generation failed: bad style"


# ---------------------------------------------------------------------------
# Hierarchy
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "exc",
    [
        LessonGenerationError("x"),
        LessonNormalizationError("x"),
        SessionNotFoundError("x"),
        InvalidTransitionError("dashboard", "BACK"),
        WizardPreconditionError("x"),
        LessonExportError("x"),
    ],
)
def test_all_custom_exceptions_are_catchable_as_exception(exc):
    with pytest.raises(Exception):
        raise exc
