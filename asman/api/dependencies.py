"""FastAPI dependency injection helpers.

Provides reusable ``Depends``-compatible callables for:
- ``get_pipeline()``      → the lesson pipeline (stored on app.state)
- ``get_session_store()`` → the in-memory session history
- ``get_wizard()``        → the lesson wizard
"""

import logging
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, status

from asman.services.pipeline import LessonPipeline
from asman.services.session_store import SessionStore
from asman.services.wizard import LessonWizard

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Services (stored on app.state during lifespan startup)
# ---------------------------------------------------------------------------


def _from_state(request: Request, name: str) -> Any:
    service = getattr(request.app.state, name, None)
    if service is None:
        logger.error("Service not initialised: app.state.%s is None", name)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Service {name!r} is not ready. Check server logs for startup errors.",
        )
    return service


def get_pipeline(request: Request) -> LessonPipeline:
    """Return the application-wide :class:`LessonPipeline`.

    Raises:
        HTTPException: 503 if startup did not complete.
    """
    return _from_state(request, "pipeline")


def get_session_store(request: Request) -> SessionStore:
    return _from_state(request, "session_store")


def get_wizard(request: Request) -> LessonWizard:
    return _from_state(request, "wizard")


PipelineDep = Annotated[LessonPipeline, Depends(get_pipeline)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
WizardDep = Annotated[LessonWizard, Depends(get_wizard)]
