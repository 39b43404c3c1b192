"""In-memory chat session history.

Sessions are kept most-recent-first. Every mutation replaces the stored
:class:`ChatSession` whole, and the current-session reference always points
at the stored value, never at a stale copy.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Mapping

from asman.constants import DEMO_LESSONS, subject_name
from asman.enums import Subject
from asman.schemas.session import ChatSession, SessionPatch

logger = logging.getLogger(__name__)

NEW_SESSION_TITLE = "New Lesson"


def generate_session_title(
    class_level: int | None,
    subject: Subject | str | None,
    topic: str | None,
) -> str:
    """Build a history title such as ``"Addition - Class 2 Mathematics"``.

    Returns ``"New Lesson"`` while any of the three parts is missing.
    """
    if not class_level or not subject or not topic or not topic.strip():
        return NEW_SESSION_TITLE
    return f"{topic.strip()} - Class {class_level} {subject_name(subject)}"


class SessionStore:
    """Ordered, in-memory session history with a current-session pointer.

    Args:
        seed_demo: Pre-populate the history with the demo sessions.
    """

    def __init__(self, seed_demo: bool = True) -> None:
        self._sessions: list[ChatSession] = []
        self._current_id: str | None = None
        self._history_open = False
        if seed_demo:
            now = datetime.now(timezone.utc)
            for demo in DEMO_LESSONS:
                fields = {k: v for k, v in demo.items() if k != "age"}
                self._sessions.append(ChatSession(timestamp=now - demo["age"], **fields))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list(self) -> list[ChatSession]:
        """All sessions, most recent first."""
        return list(self._sessions)

    def get(self, session_id: str) -> ChatSession | None:
        for session in self._sessions:
            if session.id == session_id:
                return session
        return None

    @property
    def current(self) -> ChatSession | None:
        if self._current_id is None:
            return None
        return self.get(self._current_id)

    @property
    def current_id(self) -> str | None:
        return self._current_id

    @property
    def is_history_open(self) -> bool:
        return self._history_open

    def __len__(self) -> int:
        return len(self._sessions)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self) -> ChatSession:
        """Start a new session, make it current and close the history view."""
        session = ChatSession(
            id=f"session-{uuid.uuid4().hex[:12]}",
            title=NEW_SESSION_TITLE,
            timestamp=datetime.now(timezone.utc),
        )
        self._sessions.insert(0, session)
        self._current_id = session.id
        self._history_open = False
        logger.info("Created session %s", session.id)
        return session

    def update(
        self,
        session_id: str,
        patch: SessionPatch | Mapping[str, Any],
    ) -> ChatSession | None:
        """Merge the provided fields into a session.

        Returns the updated session, or ``None`` if *session_id* is unknown
        (in which case nothing changes).
        """
        index = next(
            (i for i, session in enumerate(self._sessions) if session.id == session_id),
            None,
        )
        if index is None:
            logger.debug("Ignoring update for unknown session %s", session_id)
            return None

        if isinstance(patch, SessionPatch):
            changes = patch.changes()
        else:
            changes = SessionPatch.model_validate(dict(patch)).changes()

        # model_copy skips validation; re-validate the merged value
        merged = self._sessions[index].model_dump()
        merged.update(changes)
        updated = ChatSession.model_validate(merged)
        self._sessions[index] = updated
        logger.debug("Updated session %s fields=%s", session_id, sorted(changes))
        return updated

    def select(self, session_id: str) -> ChatSession | None:
        """Make *session_id* current and close the history view."""
        session = self.get(session_id)
        if session is None:
            return None
        self._current_id = session.id
        self._history_open = False
        return session

    def toggle_history(self) -> bool:
        """Flip the history view flag and return its new value."""
        self._history_open = not self._history_open
        return self._history_open
