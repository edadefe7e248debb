from __future__ import annotations

import asyncio
import re
import time
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from quiz_taker.constants.ui_constants import LOGIN_URL, SUBMISSION_FAILED_MESSAGE, USER_ID_COOKIE
from quiz_taker.core.commands import Submit
from quiz_taker.core.services.session_registry import SessionRegistry
from quiz_taker.server.api_server import create_api_app
from tests.session_fixtures import FlakyDocumentStore

_SESSION_ID = re.compile(r'"sessionId": "([0-9a-f]+)"')


@pytest.fixture
def client(store: FlakyDocumentStore) -> Iterator[TestClient]:
    with TestClient(create_api_app(store, run_timers=False)) as test_client:
        test_client.cookies.set(USER_ID_COOKIE, "student-1")
        yield test_client


def _open_session(client: TestClient, quiz_id: str) -> str:
    response = client.get("/quiz", params={"quizId": quiz_id})
    assert response.status_code == 200
    match = _SESSION_ID.search(response.text)
    assert match is not None
    return match.group(1)


def _stored_results(store: FlakyDocumentStore) -> list[dict]:
    return asyncio.run(store.results())


def test_root_redirects_to_listing(client: TestClient) -> None:
    response = client.get("/", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/quizzes"


def test_listing_shows_available_quizzes(client: TestClient) -> None:
    response = client.get("/quizzes", params={"message": "Quiz not found"})

    assert response.status_code == 200
    assert "Mixed Bag" in response.text
    assert "One Minute" in response.text
    assert "Quiz not found" in response.text


def test_anonymous_requests_go_to_login(store: FlakyDocumentStore) -> None:
    with TestClient(create_api_app(store, run_timers=False)) as anonymous:
        for path in ("/quizzes", "/quiz?quizId=mixed"):
            response = anonymous.get(path, follow_redirects=False)
            assert response.status_code == 303
            assert response.headers["location"] == LOGIN_URL


@pytest.mark.parametrize(
    ("quiz_id", "location"),
    [
        ("does-not-exist", "/quizzes?message=Quiz+not+found"),
        ("", "/quizzes?message=No+quiz+selected%21"),
    ],
)
def test_unknown_quiz_redirects_to_listing(client: TestClient, store: FlakyDocumentStore, quiz_id: str, location: str) -> None:
    response = client.get("/quiz", params={"quizId": quiz_id}, follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == location
    assert _stored_results(store) == []


def test_backend_failure_redirects_with_message(client: TestClient, store: FlakyDocumentStore) -> None:
    store.fetch_failures = 1

    response = client.get("/quiz", params={"quizId": "mixed"}, follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"].startswith("/quizzes?message=")


def test_answer_and_submit_flow(client: TestClient, store: FlakyDocumentStore) -> None:
    session_id = _open_session(client, "mixed")

    snapshot = client.get(f"/sessions/{session_id}").json()
    assert snapshot["state"] == "rendering"
    assert snapshot["submit_enabled"] is True
    assert snapshot["remaining_seconds"] is None

    assert client.post(f"/sessions/{session_id}/answers", json={"question_index": 0, "value": 2}).status_code == 204
    assert client.post(f"/sessions/{session_id}/answers", json={"question_index": 1, "value": " Paris"}).status_code == 204
    assert client.get(f"/sessions/{session_id}").json()["answered_count"] == 2

    response = client.post(f"/sessions/{session_id}/submit")

    assert response.status_code == 200
    body = response.json()
    assert body["state"] == "results"
    assert body["score"] == 2
    assert body["total"] == 2
    assert body["percentage"] == 100
    assert body["tier"] == "top"
    assert "Excellent work!" in body["results_html"]

    # Delivered results end the session.
    assert client.post(f"/sessions/{session_id}/submit").status_code == 404
    assert client.get(f"/sessions/{session_id}").status_code == 404
    assert len(_stored_results(store)) == 1
    assert _stored_results(store)[0]["userId"] == "student-1"


def test_invalid_answers_are_rejected(client: TestClient) -> None:
    session_id = _open_session(client, "mixed")

    out_of_range = client.post(f"/sessions/{session_id}/answers", json={"question_index": 0, "value": 9})
    text_for_choice = client.post(f"/sessions/{session_id}/answers", json={"question_index": 0, "value": "c"})

    assert out_of_range.status_code == 422
    assert text_for_choice.status_code == 422

    client.post(f"/sessions/{session_id}/submit")
    late = client.post(f"/sessions/{session_id}/answers", json={"question_index": 0, "value": 1})
    assert late.status_code == 404


def test_failed_submission_can_be_retried(client: TestClient, store: FlakyDocumentStore) -> None:
    session_id = _open_session(client, "mixed")
    store.append_failures = 1

    failed = client.post(f"/sessions/{session_id}/submit")

    assert failed.status_code == 503
    assert failed.json()["detail"] == SUBMISSION_FAILED_MESSAGE
    assert client.get(f"/sessions/{session_id}").json()["submit_enabled"] is True

    retried = client.post(f"/sessions/{session_id}/submit")

    assert retried.status_code == 200
    assert len(_stored_results(store)) == 1


def test_timed_session_reports_timer(client: TestClient) -> None:
    session_id = _open_session(client, "timed")

    snapshot = client.get(f"/sessions/{session_id}").json()

    assert snapshot["remaining_seconds"] == 60
    assert snapshot["timer_label"] == "Time Left: 1:00"
    assert snapshot["timer_classes"] == "timer pulse"


def test_sessions_belong_to_their_taker(client: TestClient, store: FlakyDocumentStore) -> None:
    session_id = _open_session(client, "mixed")

    with TestClient(create_api_app(store, run_timers=False)) as other_app:
        other_app.cookies.set(USER_ID_COOKIE, "student-1")
        assert other_app.get(f"/sessions/{session_id}").status_code == 404

    client.cookies.set(USER_ID_COOKIE, "student-2")
    assert client.get(f"/sessions/{session_id}").status_code == 404
    assert client.post(f"/sessions/{session_id}/submit").status_code == 404
    assert client.post(f"/sessions/{session_id}/close").status_code == 404
    assert _stored_results(store) == []


def test_close_tears_down_session(client: TestClient) -> None:
    session_id = _open_session(client, "timed")

    assert client.post(f"/sessions/{session_id}/close").status_code == 204
    assert client.get(f"/sessions/{session_id}").status_code == 404
    assert client.post(f"/sessions/{session_id}/close").status_code == 404


def test_results_fetched_by_polling_end_the_session(client: TestClient, store: FlakyDocumentStore) -> None:
    session_id = _open_session(client, "mixed")
    registry: SessionRegistry = client.app.state.registry
    controller = registry.get(session_id)
    assert controller is not None
    client.portal.call(controller.dispatch, Submit())

    polled = client.get(f"/sessions/{session_id}")

    assert polled.status_code == 200
    assert polled.json()["state"] == "results"
    assert len(registry) == 0
    assert len(_stored_results(store)) == 1


def test_abandoned_sessions_are_swept(store: FlakyDocumentStore) -> None:
    registry = SessionRegistry()
    app = create_api_app(
        store,
        run_timers=False,
        session_idle_timeout_seconds=0,
        session_sweep_interval_seconds=0.01,
        registry=registry,
    )
    with TestClient(app) as sweeping_client:
        sweeping_client.cookies.set(USER_ID_COOKIE, "student-1")
        session_id = _open_session(sweeping_client, "mixed")

        deadline = time.monotonic() + 5
        while len(registry) and time.monotonic() < deadline:
            time.sleep(0.02)

        assert len(registry) == 0
        assert sweeping_client.get(f"/sessions/{session_id}").status_code == 404
