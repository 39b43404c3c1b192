"""
Chat session API endpoints.

- GET   /sessions                    : history, most recent first
- POST  /sessions                    : start a new session
- POST  /sessions/history/toggle     : open or close the history view
- GET   /sessions/{id}               : one session
- PATCH /sessions/{id}               : partial update
- POST  /sessions/{id}/select        : make current; tells the caller where to resume
- GET   /sessions/{id}/download      : DOCX export of the attached lesson
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response

from asman.api.dependencies import SessionStoreDep
from asman.enums import Language
from asman.exceptions import SessionNotFoundError
from asman.schemas.session import (
    ChatSession,
    SessionListResponse,
    SessionPatch,
    SessionSelectResponse,
)
from asman.services.docx_generator import DocxGenerator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])

_docx_generator = DocxGenerator()

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _list_response(store) -> SessionListResponse:
    sessions = store.list()
    return SessionListResponse(
        sessions=sessions,
        current_session_id=store.current_id,
        is_history_open=store.is_history_open,
        count=len(sessions),
    )


def _get_or_404(store, session_id: str) -> ChatSession:
    session = store.get(session_id)
    if session is None:
        raise SessionNotFoundError(session_id)
    return session


@router.get("", response_model=SessionListResponse, summary="List chat sessions")
async def list_sessions(store: SessionStoreDep) -> SessionListResponse:
    return _list_response(store)


@router.post(
    "",
    response_model=ChatSession,
    status_code=201,
    summary="Start a new chat session",
)
async def create_session(store: SessionStoreDep) -> ChatSession:
    """Create a session titled "New Lesson" and make it current."""
    return store.create()


@router.post(
    "/history/toggle",
    response_model=SessionListResponse,
    summary="Open or close the session history view",
)
async def toggle_history(store: SessionStoreDep) -> SessionListResponse:
    store.toggle_history()
    return _list_response(store)


@router.get(
    "/{session_id}",
    response_model=ChatSession,
    summary="Get one chat session",
    responses={404: {"description": "Session not found"}},
)
async def get_session(session_id: str, store: SessionStoreDep) -> ChatSession:
    return _get_or_404(store, session_id)


@router.patch(
    "/{session_id}",
    response_model=ChatSession,
    summary="Update fields of a chat session",
    responses={404: {"description": "Session not found"}},
)
async def patch_session(
    session_id: str,
    patch: SessionPatch,
    store: SessionStoreDep,
) -> ChatSession:
    """Merge only the fields present in the request body."""
    updated = store.update(session_id, patch)
    if updated is None:
        raise SessionNotFoundError(session_id)
    return updated


@router.post(
    "/{session_id}/select",
    response_model=SessionSelectResponse,
    summary="Make a session current",
    responses={404: {"description": "Session not found"}},
)
async def select_session(session_id: str, store: SessionStoreDep) -> SessionSelectResponse:
    """
    Select a session.

    ``resume`` is ``"player"`` when the session already has a lesson and
    ``"wizard"`` when the caller should continue the selection steps.
    """
    session = store.select(session_id)
    if session is None:
        raise SessionNotFoundError(session_id)
    resume = "player" if session.lesson_content is not None else "wizard"
    return SessionSelectResponse(session=session, resume=resume)


@router.get(
    "/{session_id}/download",
    summary="Download the session's lesson as DOCX",
    responses={
        200: {
            "content": {DOCX_MEDIA_TYPE: {}},
            "description": "DOCX file download",
        },
        404: {"description": "Session not found or has no lesson yet"},
    },
)
async def download_lesson(
    session_id: str,
    store: SessionStoreDep,
    language: Language = Query(default=Language.ENGLISH),
) -> Response:
    """Render the attached lesson in *language* and return it as a DOCX file."""
    session = _get_or_404(store, session_id)
    if session.lesson_content is None:
        raise HTTPException(
            status_code=404,
            detail=f"Session {session_id} has no generated lesson yet",
        )

    content = _docx_generator.generate(
        session.lesson_content,
        class_level=session.class_level,
        subject=session.subject,
        topic=session.topic or "",
        teaching_style=session.teaching_style,
        language=language,
    )

    safe_name = "".join(c if c.isalnum() or c in " -_" else "_" for c in session.title)
    filename = f"{safe_name or 'lesson'}-{language.value}.docx"
    logger.info("Exported session %s as %s (%d bytes)", session_id, filename, len(content))

    return Response(
        content=content,
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
