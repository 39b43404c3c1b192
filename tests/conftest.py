"""Top-level pytest configuration and shared fixtures for the ASman test suite.

The Anthropic key is cleared at the top of this module *before* any asman
imports so that the application under test always runs in fallback-only mode
unless a test injects its own provider.

Fixture hierarchy
-----------------
fake_provider    → FakeProvider (configured, reports Unavailable by default)
pipeline         → LessonPipeline wired to fake_provider
session_store    → SessionStore without demo sessions
wizard           → LessonWizard over pipeline + session_store
test_client      → FastAPI TestClient with a fresh app.state per test
"""

from __future__ import annotations

import os

# ---------------------------------------------------------------------------
# Clear the credential BEFORE any asman imports so get_settings() caches
# fallback-only mode.
# ---------------------------------------------------------------------------
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Iterator

import pytest

from asman.services.pipeline import LessonPipeline
from asman.services.session_store import SessionStore
from asman.services.wizard import LessonWizard
from tests.fixtures.fake_provider import FakeProvider


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_provider() -> FakeProvider:
    """Provide a scripted provider; tests replace ``results`` as needed."""
    return FakeProvider()


@pytest.fixture
def pipeline(fake_provider: FakeProvider) -> LessonPipeline:
    return LessonPipeline(fake_provider)


@pytest.fixture
def session_store() -> SessionStore:
    """Empty store; tests that need the demo history build their own."""
    return SessionStore(seed_demo=False)


@pytest.fixture
def wizard(pipeline: LessonPipeline, session_store: SessionStore) -> LessonWizard:
    return LessonWizard(pipeline, session_store)


# ---------------------------------------------------------------------------
# FastAPI TestClient
# ---------------------------------------------------------------------------


@pytest.fixture
def test_client() -> Iterator:
    """Provide a FastAPI TestClient running the real lifespan.

    With ``ANTHROPIC_API_KEY`` cleared the lifespan builds a provider that
    reports ``Unavailable``, so every lesson comes from the fallback
    generator. Entering the client runs startup, which rebuilds
    ``app.state`` and therefore gives each test a fresh session history.

    Yields:
        A ``starlette.testclient.TestClient`` bound to the FastAPI app.
    """
    from fastapi.testclient import TestClient

    from asman.main import app

    with TestClient(app) as client:
        yield client
