"""ASman Lesson Studio API: FastAPI application entry point.

Features:
- Lifespan context manager: builds the Claude provider, lesson pipeline,
  session store and wizard on startup
- Structured exception handlers for all domain exceptions
- Request/response logging middleware with request-ID tracing
- /health reports the provider mode and session count
"""

from __future__ import annotations

import datetime
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from asman.config import get_settings
from asman.exceptions import (
    InvalidTransitionError,
    LessonExportError,
    SessionNotFoundError,
    WizardPreconditionError,
)

# ---------------------------------------------------------------------------
# Logging setup  (must happen before routers are imported)
# ---------------------------------------------------------------------------

_settings = get_settings()
logging.basicConfig(
    level=getattr(logging, _settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Router and service imports
# ---------------------------------------------------------------------------

from asman.api import catalog as _catalog_module  # noqa: E402
from asman.api import lessons as _lessons_module  # noqa: E402
from asman.api import sessions as _sessions_module  # noqa: E402
from asman.api import uploads as _uploads_module  # noqa: E402
from asman.api import wizard as _wizard_module  # noqa: E402
from asman.services.pipeline import LessonPipeline  # noqa: E402
from asman.services.provider import AnthropicLessonProvider  # noqa: E402
from asman.services.session_store import SessionStore  # noqa: E402
from asman.services.wizard import LessonWizard  # noqa: E402

# ---------------------------------------------------------------------------
# Lifespan context manager
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the application services and store them on ``app.state``.

    The Anthropic credential is read here once. Without it the provider
    reports itself unavailable and every lesson comes from the fallback
    generator.
    """
    settings = get_settings()
    logger.info("ASman Lesson Studio API starting up (v%s)", settings.app_version)

    provider = AnthropicLessonProvider.from_settings(settings)
    if provider.is_configured:
        logger.info("Provider: Claude model=%s", settings.anthropic_model)
    else:
        logger.warning("ANTHROPIC_API_KEY not set; serving fallback lessons only")

    pipeline = LessonPipeline(provider, strict_schema_family=settings.strict_schema_family)
    store = SessionStore(seed_demo=settings.seed_demo_sessions)

    app.state.provider = provider
    app.state.pipeline = pipeline
    app.state.session_store = store
    app.state.wizard = LessonWizard(pipeline, store)

    logger.info("Startup complete: %d session(s) in history", len(store))
    yield

    logger.info("ASman Lesson Studio API shutting down")
    await provider.aclose()


# ---------------------------------------------------------------------------
# FastAPI application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="ASman Lesson Studio API",
    description=(
        "Age-appropriate lesson generation for Indian classrooms (Classes 1-10). "
        "Accepts a class, subject, topic and teaching style and returns an "
        "explanation, quiz, activity, teaching-method framing and an "
        "English-Hindi glossary."
    ),
    version=_settings.app_version,
    debug=_settings.debug,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "health", "description": "Service info and health."},
        {"name": "catalog", "description": "Classes, subjects and teaching styles."},
        {
            "name": "lessons",
            "description": "Lesson generation and Hindi glossary rendering.",
        },
        {"name": "uploads", "description": "Summaries of uploaded teaching material."},
        {
            "name": "sessions",
            "description": "In-memory lesson history and DOCX export.",
        },
        {"name": "wizard", "description": "Step-by-step lesson creation."},
    ],
)

# ---------------------------------------------------------------------------
# CORS middleware
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # restrict in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Request / response logging middleware
# ---------------------------------------------------------------------------


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next: Any) -> Response:
    """Log every HTTP request with method, path, status, and duration.

    A short UUID-derived ``request_id`` is attached to each log line and
    returned as the ``X-Request-ID`` response header.
    """
    request_id = str(uuid.uuid4())[:8]
    t0 = time.monotonic()
    logger.info("[%s] → %s %s", request_id, request.method, request.url.path)

    try:
        response: Response = await call_next(request)
    except Exception as exc:
        elapsed = (time.monotonic() - t0) * 1000
        logger.error(
            "[%s] ✗ %s %s unhandled after %.1f ms: %s",
            request_id,
            request.method,
            request.url.path,
            elapsed,
            exc,
        )
        raise

    elapsed = (time.monotonic() - t0) * 1000
    logger.info(
        "[%s] ← %s %s %d (%.1f ms)",
        request_id,
        request.method,
        request.url.path,
        response.status_code,
        elapsed,
    )
    response.headers["X-Request-ID"] = request_id
    return response


# ---------------------------------------------------------------------------
# Structured exception handlers
# ---------------------------------------------------------------------------


@app.exception_handler(SessionNotFoundError)
async def session_not_found_handler(
    request: Request, exc: SessionNotFoundError
) -> JSONResponse:
    """404 for unknown session ids."""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "session_not_found",
            "message": str(exc),
            "session_id": exc.session_id,
        },
    )


@app.exception_handler(InvalidTransitionError)
async def invalid_transition_handler(
    request: Request, exc: InvalidTransitionError
) -> JSONResponse:
    """409 for wizard events the current state does not accept."""
    logger.info("Rejected wizard event %s in state %s", exc.event, exc.state)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "error": "invalid_transition",
            "message": str(exc),
            "state": exc.state,
            "event": exc.event,
        },
    )


@app.exception_handler(WizardPreconditionError)
async def wizard_precondition_handler(
    request: Request, exc: WizardPreconditionError
) -> JSONResponse:
    """409 for wizard steps attempted before their inputs are bound."""
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "error": "wizard_precondition_failed",
            "message": str(exc),
            "missing": exc.missing,
        },
    )


@app.exception_handler(LessonExportError)
async def lesson_export_error_handler(
    request: Request, exc: LessonExportError
) -> JSONResponse:
    """500 for DOCX rendering failures."""
    logger.error("LessonExportError: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "lesson_export_failed", "message": str(exc)},
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render FastAPI HTTPExceptions as structured JSON."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": "http_error",
            "status_code": exc.status_code,
            "detail": exc.detail,
        },
    )


# ---------------------------------------------------------------------------
# Core routes
# ---------------------------------------------------------------------------


@app.get("/", tags=["health"], summary="API root / service info")
async def root() -> dict[str, str]:
    """Return basic service metadata and navigation links."""
    return {
        "service": "ASman Lesson Studio API",
        "version": _settings.app_version,
        "documentation": "/docs",
        "health": "/health",
        "openapi": "/openapi.json",
    }


@app.get(
    "/health",
    tags=["health"],
    summary="System health check",
    description=(
        "Reports whether lessons come from Claude (``provider: anthropic``) or "
        "only from the built-in generator (``provider: fallback-only``). "
        "Both are healthy; ``status: degraded`` means startup did not complete."
    ),
)
async def health_check(request: Request) -> dict[str, Any]:
    """Return current system health including provider mode and session count."""
    provider = getattr(request.app.state, "provider", None)
    store: SessionStore | None = getattr(request.app.state, "session_store", None)

    if provider is None:
        provider_mode = "not_initialised"
    elif provider.is_configured:
        provider_mode = "anthropic"
    else:
        provider_mode = "fallback-only"

    overall = "ok" if provider is not None and store is not None else "degraded"

    return {
        "status": overall,
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "version": _settings.app_version,
        "provider": provider_mode,
        "sessions": len(store) if store is not None else 0,
    }


# ---------------------------------------------------------------------------
# Include routers
# ---------------------------------------------------------------------------

app.include_router(_catalog_module.router)
app.include_router(_lessons_module.router)
app.include_router(_uploads_module.router)
app.include_router(_sessions_module.router)
app.include_router(_wizard_module.router)


# ---------------------------------------------------------------------------
# Development entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "asman.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=_settings.log_level.lower(),
    )
