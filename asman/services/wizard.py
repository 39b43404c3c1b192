"""Lesson wizard: the explicit state machine that drives the pipeline.

The legal moves live in one table, :data:`TRANSITIONS`, keyed by
``(state, event)``. :func:`next_state` is the only way the wizard changes
state, so an event the current state does not accept raises
:class:`InvalidTransitionError` instead of silently landing somewhere.

:class:`LessonWizard` binds class, subject, topic and style step by step,
keeps the current chat session patched as it goes, and runs one pipeline
invocation at a time (the ``loading`` state accepts no new generation).
"""

from __future__ import annotations

import logging
from enum import Enum

from asman.enums import Subject, TeachingStyle, Variant
from asman.exceptions import (
    InvalidTransitionError,
    SessionNotFoundError,
    WizardPreconditionError,
)
from asman.schemas.lesson import LessonContent
from asman.schemas.session import ChatSession, SessionPatch, WizardEventRequest, WizardSnapshot
from asman.schemas.upload import UploadDescriptor
from asman.services.pipeline import LessonPipeline
from asman.services.session_store import SessionStore, generate_session_title

logger = logging.getLogger(__name__)


class WizardState(str, Enum):
    DASHBOARD = "dashboard"
    CLASS_SELECTION = "class-selection"
    SUBJECT_SELECTION = "subject-selection"
    TOPIC_INPUT = "topic-input"
    STYLE_SELECTION = "style-selection"
    UPLOAD = "upload"
    LOADING = "loading"
    ERROR = "error"
    LESSON_PLAYER = "lesson-player"


class WizardEvent(str, Enum):
    NEW_CHAT = "NEW_CHAT"
    START_SELECTION = "START_SELECTION"
    OPEN_UPLOAD = "OPEN_UPLOAD"
    SELECT_CLASS = "SELECT_CLASS"
    SELECT_SUBJECT = "SELECT_SUBJECT"
    SUBMIT_TOPIC = "SUBMIT_TOPIC"
    SELECT_STYLE = "SELECT_STYLE"
    GENERATION_SUCCEEDED = "GENERATION_SUCCEEDED"
    GENERATION_FAILED = "GENERATION_FAILED"
    CHANGE_STYLE = "CHANGE_STYLE"
    RETRY = "RETRY"
    BACK = "BACK"
    UPLOAD_ANALYZED = "UPLOAD_ANALYZED"
    RESUME_WIZARD = "RESUME_WIZARD"
    OPEN_PLAYER = "OPEN_PLAYER"


S = WizardState
E = WizardEvent

# States the user can leave by starting a new chat or picking a session
_IDLE_STATES = tuple(state for state in WizardState if state is not S.LOADING)

TRANSITIONS: dict[tuple[WizardState, WizardEvent], WizardState] = {
    # Forward path
    (S.DASHBOARD, E.START_SELECTION): S.CLASS_SELECTION,
    (S.DASHBOARD, E.OPEN_UPLOAD): S.UPLOAD,
    (S.CLASS_SELECTION, E.SELECT_CLASS): S.SUBJECT_SELECTION,
    (S.SUBJECT_SELECTION, E.SELECT_SUBJECT): S.TOPIC_INPUT,
    (S.TOPIC_INPUT, E.SUBMIT_TOPIC): S.STYLE_SELECTION,
    (S.STYLE_SELECTION, E.SELECT_STYLE): S.LOADING,
    (S.LOADING, E.GENERATION_SUCCEEDED): S.LESSON_PLAYER,
    (S.LOADING, E.GENERATION_FAILED): S.ERROR,
    (S.LESSON_PLAYER, E.CHANGE_STYLE): S.LOADING,
    (S.ERROR, E.RETRY): S.LOADING,
    (S.UPLOAD, E.UPLOAD_ANALYZED): S.DASHBOARD,
    # Back edges
    (S.CLASS_SELECTION, E.BACK): S.DASHBOARD,
    (S.SUBJECT_SELECTION, E.BACK): S.CLASS_SELECTION,
    (S.TOPIC_INPUT, E.BACK): S.SUBJECT_SELECTION,
    (S.STYLE_SELECTION, E.BACK): S.TOPIC_INPUT,
    (S.LESSON_PLAYER, E.BACK): S.DASHBOARD,
    (S.UPLOAD, E.BACK): S.DASHBOARD,
    (S.ERROR, E.BACK): S.DASHBOARD,
}
for _state in _IDLE_STATES:
    TRANSITIONS[(_state, E.NEW_CHAT)] = S.CLASS_SELECTION
    TRANSITIONS[(_state, E.RESUME_WIZARD)] = S.DASHBOARD
    TRANSITIONS[(_state, E.OPEN_PLAYER)] = S.LESSON_PLAYER
del _state


def next_state(state: WizardState, event: WizardEvent) -> WizardState:
    """Look up the target of *event* in *state*.

    Raises:
        InvalidTransitionError: If the table has no such move.
    """
    try:
        return TRANSITIONS[(state, event)]
    except KeyError:
        raise InvalidTransitionError(state.value, event.value) from None


class LessonWizard:
    """Step-by-step lesson creation bound to a pipeline and a session store.

    Each public step returns the resulting :class:`WizardSnapshot`.
    """

    def __init__(self, pipeline: LessonPipeline, store: SessionStore) -> None:
        self.pipeline = pipeline
        self.store = store
        self.state = WizardState.DASHBOARD
        self.class_level: int | None = None
        self.subject: Subject | None = None
        self.topic: str | None = None
        self.teaching_style: TeachingStyle | None = None
        self.variant = Variant.STANDARD
        self.lesson: LessonContent | None = None
        self.error: str | None = None
        self.upload_summary: str | None = None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _fire(self, event: WizardEvent) -> WizardState:
        target = next_state(self.state, event)
        logger.debug("Wizard %s --%s--> %s", self.state.value, event.value, target.value)
        self.state = target
        return target

    def _require(self, event: WizardEvent) -> None:
        """Fail early if *event* is illegal before any binding changes."""
        next_state(self.state, event)

    def _patch_current(self, **changes) -> ChatSession | None:
        current = self.store.current
        if current is None:
            return None
        return self.store.update(current.id, SessionPatch(**changes))

    def _clear_bindings(self) -> None:
        self.class_level = None
        self.subject = None
        self.topic = None
        self.teaching_style = None
        self.variant = Variant.STANDARD
        self.lesson = None
        self.error = None

    def missing_bindings(self) -> list[str]:
        """Names of the generation parameters not yet bound."""
        bound = {
            "class_level": self.class_level,
            "subject": self.subject,
            "topic": self.topic,
            "teaching_style": self.teaching_style,
        }
        return [name for name, value in bound.items() if value is None]

    def snapshot(self) -> WizardSnapshot:
        return WizardSnapshot(
            state=self.state.value,
            class_level=self.class_level,
            subject=self.subject,
            topic=self.topic,
            teaching_style=self.teaching_style,
            variant=self.variant,
            current_session_id=self.store.current_id,
            lesson=self.lesson,
            error=self.error,
            upload_summary=self.upload_summary,
        )

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def new_chat(self) -> WizardSnapshot:
        """Open a fresh session and start at class selection."""
        self._require(E.NEW_CHAT)
        self.store.create()
        self._clear_bindings()
        self._fire(E.NEW_CHAT)
        return self.snapshot()

    def start_selection(self) -> WizardSnapshot:
        self._fire(E.START_SELECTION)
        return self.snapshot()

    def open_upload(self) -> WizardSnapshot:
        self._fire(E.OPEN_UPLOAD)
        self.upload_summary = None
        return self.snapshot()

    def back(self) -> WizardSnapshot:
        self._fire(E.BACK)
        if self.state is S.DASHBOARD:
            self.error = None
        return self.snapshot()

    def select_session(self, session_id: str) -> WizardSnapshot:
        """Resume a session: the player if it has a lesson, otherwise the dashboard.

        Raises:
            SessionNotFoundError: If *session_id* is unknown.
        """
        session = self.store.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)

        if session.lesson_content is not None:
            self._require(E.OPEN_PLAYER)
            self.store.select(session_id)
            self.class_level = session.class_level
            self.subject = session.subject
            self.topic = session.topic
            self.teaching_style = session.teaching_style or TeachingStyle.AMERICAN
            self.variant = (
                Variant.GLOBAL_ENHANCED if session.has_global_version else Variant.STANDARD
            )
            self.lesson = session.lesson_content
            self.error = None
            self._fire(E.OPEN_PLAYER)
        else:
            self._require(E.RESUME_WIZARD)
            self.store.select(session_id)
            self._fire(E.RESUME_WIZARD)
        return self.snapshot()

    # ------------------------------------------------------------------
    # Selection steps
    # ------------------------------------------------------------------

    def select_class(self, class_level: int) -> WizardSnapshot:
        self._require(E.SELECT_CLASS)
        self.class_level = class_level
        self._patch_current(class_level=class_level)
        self._fire(E.SELECT_CLASS)
        return self.snapshot()

    def select_subject(self, subject: Subject) -> WizardSnapshot:
        self._require(E.SELECT_SUBJECT)
        self.subject = Subject(subject)
        self._patch_current(subject=self.subject)
        self._fire(E.SELECT_SUBJECT)
        return self.snapshot()

    def submit_topic(self, topic: str) -> WizardSnapshot:
        """Bind the topic and give the current session its real title.

        Raises:
            WizardPreconditionError: If *topic* is blank.
        """
        self._require(E.SUBMIT_TOPIC)
        topic = (topic or "").strip()
        if not topic:
            raise WizardPreconditionError("Topic must not be blank", missing=["topic"])
        self.topic = topic
        self._patch_current(
            topic=topic,
            title=generate_session_title(self.class_level, self.subject, topic),
        )
        self._fire(E.SUBMIT_TOPIC)
        return self.snapshot()

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def select_style(
        self,
        teaching_style: TeachingStyle,
        variant: Variant = Variant.STANDARD,
    ) -> WizardSnapshot:
        """Bind the style and generate the lesson."""
        return await self._generate(E.SELECT_STYLE, TeachingStyle(teaching_style), Variant(variant))

    async def change_style(
        self,
        teaching_style: TeachingStyle,
        variant: Variant | None = None,
    ) -> WizardSnapshot:
        """Regenerate the lesson shown in the player with another style."""
        return await self._generate(
            E.CHANGE_STYLE,
            TeachingStyle(teaching_style),
            Variant(variant) if variant is not None else self.variant,
        )

    async def retry(self) -> WizardSnapshot:
        """Regenerate with the last parameters, or go home if they are gone."""
        self._require(E.RETRY)
        if self.missing_bindings():
            self._fire(E.BACK)
            self.error = None
            return self.snapshot()
        return await self._generate(E.RETRY, self.teaching_style, self.variant)

    async def _generate(
        self,
        event: WizardEvent,
        teaching_style: TeachingStyle,
        variant: Variant,
    ) -> WizardSnapshot:
        self._require(event)
        previous_style = self.teaching_style
        self.teaching_style = teaching_style
        missing = self.missing_bindings()
        if missing:
            self.teaching_style = previous_style
            raise WizardPreconditionError(
                f"Cannot generate a lesson before {', '.join(missing)} is chosen",
                missing=missing,
            )
        self.variant = variant
        self.error = None
        self._fire(event)
        # the current session may change while the provider call is pending
        session_id = self.store.current_id

        try:
            lesson = await self.pipeline.generate_lesson(
                self.class_level,
                self.subject,
                self.topic,
                teaching_style,
                variant,
            )
            if session_id is not None:
                self.store.update(
                    session_id,
                    SessionPatch(
                        lesson_content=lesson,
                        teaching_style=teaching_style,
                        has_global_version=lesson.is_global_version,
                    ),
                )
        except Exception as exc:
            logger.exception("Lesson generation failed in the wizard")
            self.error = str(exc) or type(exc).__name__
            self._fire(E.GENERATION_FAILED)
            return self.snapshot()

        self.lesson = lesson
        self._fire(E.GENERATION_SUCCEEDED)
        return self.snapshot()

    # ------------------------------------------------------------------
    # Upload
    # ------------------------------------------------------------------

    async def analyze_upload(
        self,
        descriptor: UploadDescriptor,
        class_level: int | None = None,
        subject: Subject | None = None,
    ) -> WizardSnapshot:
        """Summarize an upload and return to the dashboard.

        Falls back to the bound class and subject when none are given.

        Raises:
            WizardPreconditionError: If no class or subject is available.
        """
        self._require(E.UPLOAD_ANALYZED)
        class_level = class_level or self.class_level
        subject = subject or self.subject
        missing = [
            name
            for name, value in (("class_level", class_level), ("subject", subject))
            if value is None
        ]
        if missing:
            raise WizardPreconditionError(
                f"Upload analysis needs {', '.join(missing)}", missing=missing
            )
        self.upload_summary = await self.pipeline.analyze_upload(
            descriptor, class_level, Subject(subject)
        )
        self._fire(E.UPLOAD_ANALYZED)
        return self.snapshot()

    # ------------------------------------------------------------------
    # Event dispatch
    # ------------------------------------------------------------------

    async def dispatch(self, request: WizardEventRequest) -> WizardSnapshot:
        """Route an API event to the matching step.

        Raises:
            InvalidTransitionError: For unknown events, events the current
                state rejects, and events only the wizard itself may fire.
            WizardPreconditionError: If the event's payload is incomplete.
        """
        try:
            event = WizardEvent(request.event.strip().upper())
        except ValueError:
            raise InvalidTransitionError(self.state.value, request.event) from None

        if event is E.NEW_CHAT:
            return self.new_chat()
        if event is E.START_SELECTION:
            return self.start_selection()
        if event is E.OPEN_UPLOAD:
            return self.open_upload()
        if event is E.BACK:
            return self.back()
        if event is E.SELECT_CLASS:
            return self.select_class(_required(request.class_level, "class_level"))
        if event is E.SELECT_SUBJECT:
            return self.select_subject(_required(request.subject, "subject"))
        if event is E.SUBMIT_TOPIC:
            return self.submit_topic(_required(request.topic, "topic"))
        if event is E.SELECT_STYLE:
            return await self.select_style(
                _required(request.teaching_style, "teaching_style"),
                request.variant or Variant.STANDARD,
            )
        if event is E.CHANGE_STYLE:
            return await self.change_style(
                _required(request.teaching_style, "teaching_style"), request.variant
            )
        if event is E.RETRY:
            return await self.retry()
        if event in (E.OPEN_PLAYER, E.RESUME_WIZARD):
            return self.select_session(_required(request.session_id, "session_id"))
        if event is E.UPLOAD_ANALYZED:
            return await self.analyze_upload(
                _required(request.file, "file"), request.class_level, request.subject
            )
        # GENERATION_SUCCEEDED / GENERATION_FAILED
        raise InvalidTransitionError(self.state.value, event.value)


def _required(value, name: str):
    if value is None:
        raise WizardPreconditionError(f"Event requires {name}", missing=[name])
    return value
