"""Pydantic v2 schemas for chat sessions and the wizard API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field

from asman.constants import MAX_CLASS_LEVEL, MIN_CLASS_LEVEL
from asman.schemas.common import CamelModel, Subject, TeachingStyle, Variant
from asman.schemas.lesson import LessonContent
from asman.schemas.upload import UploadDescriptor


class ChatSession(CamelModel):
    """One entry in the lesson history.

    Sessions are frozen; the store replaces them whole when a patch arrives.

    Attributes:
        id: Session identifier.
        title: Display title (``"New Lesson"`` until a topic is chosen).
        timestamp: Creation time.
        class_level: Selected class, once chosen.
        subject: Selected subject, once chosen.
        topic: Entered topic, once submitted.
        teaching_style: Style used for the attached lesson.
        lesson_content: The generated lesson, if any.
        has_global_version: Whether the attached lesson is global-enhanced.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    timestamp: datetime
    class_level: int | None = Field(default=None, ge=MIN_CLASS_LEVEL, le=MAX_CLASS_LEVEL)
    subject: Subject | None = None
    topic: str | None = None
    teaching_style: TeachingStyle | None = None
    lesson_content: LessonContent | None = None
    has_global_version: bool = False


class SessionPatch(CamelModel):
    """Partial update for a session. Only fields that are set are applied."""

    title: str | None = None
    class_level: int | None = Field(default=None, ge=MIN_CLASS_LEVEL, le=MAX_CLASS_LEVEL)
    subject: Subject | None = None
    topic: str | None = None
    teaching_style: TeachingStyle | None = None
    lesson_content: LessonContent | None = None
    has_global_version: bool | None = None

    def changes(self) -> dict[str, Any]:
        """Return the explicitly provided fields as a plain update mapping."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class SessionListResponse(CamelModel):
    """Response for GET /sessions."""

    sessions: list[ChatSession]
    current_session_id: str | None = None
    is_history_open: bool = False
    count: int


class SessionSelectResponse(CamelModel):
    """Response for POST /sessions/{id}/select.

    Attributes:
        session: The selected session.
        resume: ``"player"`` when the session already has a lesson, otherwise
            ``"wizard"``.
    """

    session: ChatSession
    resume: str = Field(..., pattern=r"^(player|wizard)$")


class WizardEventRequest(CamelModel):
    """Request payload for POST /wizard/events.

    Only the fields relevant to the event need to be supplied.
    """

    event: str
    class_level: int | None = Field(default=None, ge=MIN_CLASS_LEVEL, le=MAX_CLASS_LEVEL)
    subject: Subject | None = None
    topic: str | None = None
    teaching_style: TeachingStyle | None = None
    variant: Variant | None = None
    session_id: str | None = None
    file: UploadDescriptor | None = None


class WizardSnapshot(CamelModel):
    """Current wizard state returned by the wizard endpoints."""

    state: str
    class_level: int | None = None
    subject: Subject | None = None
    topic: str | None = None
    teaching_style: TeachingStyle | None = None
    variant: Variant = Variant.STANDARD
    current_session_id: str | None = None
    lesson: LessonContent | None = None
    error: str | None = None
    upload_summary: str | None = None
