"""Integration tests for the chat session endpoints.

Endpoints tested
----------------
GET   /sessions                 : seeded history, most recent first
POST  /sessions                 : new session becomes current
POST  /sessions/history/toggle  : history view flag
GET   /sessions/{id}            : one session, 404 for unknown ids
PATCH /sessions/{id}            : partial update
POST  /sessions/{id}/select     : resume target
GET   /sessions/{id}/download   : DOCX export
"""

from __future__ import annotations

import io

from docx import Document

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _session_with_lesson(client) -> str:
    """Run the wizard to the player and return the resulting session id."""
    client.post("/wizard/events", json={"event": "NEW_CHAT"})
    client.post("/wizard/events", json={"event": "SELECT_CLASS", "classLevel": 4})
    client.post("/wizard/events", json={"event": "SELECT_SUBJECT", "subject": "science"})
    client.post("/wizard/events", json={"event": "SUBMIT_TOPIC", "topic": "Water Cycle"})
    snapshot = client.post(
        "/wizard/events", json={"event": "SELECT_STYLE", "teachingStyle": "japanese"}
    ).json()
    assert snapshot["state"] == "lesson-player", snapshot
    return snapshot["currentSessionId"]


# ---------------------------------------------------------------------------
# Test group 1: listing and creation
# ---------------------------------------------------------------------------


def test_list_returns_seeded_history(test_client):
    response = test_client.get("/sessions")

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 3
    assert [s["id"] for s in data["sessions"]] == ["demo-1", "demo-2", "demo-3"]
    assert data["currentSessionId"] is None
    assert data["isHistoryOpen"] is False


def test_create_session_prepends_and_becomes_current(test_client):
    response = test_client.post("/sessions")

    assert response.status_code == 201
    created = response.json()
    assert created["title"] == "New Lesson"
    assert created["lessonContent"] is None

    listing = test_client.get("/sessions").json()
    assert listing["sessions"][0]["id"] == created["id"]
    assert listing["currentSessionId"] == created["id"]


def test_toggle_history(test_client):
    opened = test_client.post("/sessions/history/toggle").json()
    closed = test_client.post("/sessions/history/toggle").json()

    assert opened["isHistoryOpen"] is True
    assert closed["isHistoryOpen"] is False


# ---------------------------------------------------------------------------
# Test group 2: get / patch
# ---------------------------------------------------------------------------


def test_get_unknown_session_returns_structured_404(test_client):
    response = test_client.get("/sessions/session-missing")

    assert response.status_code == 404
    data = response.json()
    assert data["error"] == "session_not_found"
    assert data["session_id"] == "session-missing"


def test_patch_merges_only_given_fields(test_client):
    session_id = test_client.post("/sessions").json()["id"]
    test_client.patch(f"/sessions/{session_id}", json={"classLevel": 3})

    response = test_client.patch(f"/sessions/{session_id}", json={"topic": "Shapes"})

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["classLevel"] == 3
    assert data["topic"] == "Shapes"
    assert data["title"] == "New Lesson"


def test_patch_unknown_session_returns_404(test_client):
    response = test_client.patch("/sessions/nope", json={"topic": "Shapes"})

    assert response.status_code == 404


def test_patch_rejects_invalid_class(test_client):
    session_id = test_client.post("/sessions").json()["id"]

    response = test_client.patch(f"/sessions/{session_id}", json={"classLevel": 12})

    assert response.status_code == 422


# ---------------------------------------------------------------------------
# Test group 3: select
# ---------------------------------------------------------------------------


def test_select_session_without_lesson_resumes_wizard(test_client):
    response = test_client.post("/sessions/demo-2/select")

    assert response.status_code == 200
    data = response.json()
    assert data["resume"] == "wizard"
    assert test_client.get("/sessions").json()["currentSessionId"] == "demo-2"


def test_select_session_with_lesson_resumes_player(test_client):
    session_id = _session_with_lesson(test_client)
    test_client.post("/sessions")

    response = test_client.post(f"/sessions/{session_id}/select")

    assert response.json()["resume"] == "player"
    assert response.json()["session"]["title"] == "Water Cycle - Class 4 Science"


def test_select_unknown_session_returns_404(test_client):
    assert test_client.post("/sessions/nope/select").status_code == 404


# ---------------------------------------------------------------------------
# Test group 4: DOCX download
# ---------------------------------------------------------------------------


def test_download_returns_docx(test_client):
    session_id = _session_with_lesson(test_client)

    response = test_client.get(f"/sessions/{session_id}/download")

    assert response.status_code == 200, response.text
    assert response.headers["content-type"] == DOCX_MEDIA_TYPE
    assert 'filename="Water Cycle - Class 4 Science-en.docx"' in (
        response.headers["content-disposition"]
    )
    doc = Document(io.BytesIO(response.content))
    assert any("Quiz (3 Questions)" in p.text for p in doc.paragraphs)


def test_download_in_hindi(test_client):
    session_id = _session_with_lesson(test_client)

    response = test_client.get(f"/sessions/{session_id}/download", params={"language": "hi"})

    assert response.status_code == 200
    assert "-hi.docx" in response.headers["content-disposition"]
    doc = Document(io.BytesIO(response.content))
    assert any("Water Cycle (विषय)" in p.text for p in doc.paragraphs)


def test_download_without_lesson_returns_404(test_client):
    response = test_client.get("/sessions/demo-1/download")

    assert response.status_code == 404
    data = response.json()
    assert data["error"] == "http_error"
    assert "no generated lesson" in data["detail"]


def test_download_rejects_unknown_language(test_client):
    session_id = _session_with_lesson(test_client)

    response = test_client.get(f"/sessions/{session_id}/download", params={"language": "fr"})

    assert response.status_code == 422
