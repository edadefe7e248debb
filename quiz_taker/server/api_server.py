"""FastAPI server that serves quiz pages and the session endpoints they call."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import BaseModel
import uvicorn

from quiz_taker.constants.about import APP_NAME, APP_VERSION
from quiz_taker.constants.network_constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    SESSION_IDLE_TIMEOUT_SECONDS,
    SESSION_SWEEP_INTERVAL_SECONDS,
)
from quiz_taker.constants.quiz_constants import TIMER_TICK_SECONDS
from quiz_taker.constants.ui_constants import LOGIN_URL, QUIZ_LISTING_URL
from quiz_taker.core.commands import SelectAnswer, Submit
from quiz_taker.core.errors import TransientFetchError
from quiz_taker.core.navigation import NavigationContext
from quiz_taker.core.quiz_session import QuizSessionController, SessionState
from quiz_taker.core.services.document_store import DocumentStore
from quiz_taker.core.services.quiz_repository import QuizRepository
from quiz_taker.core.services.session_registry import SessionRegistry
from quiz_taker.server.identity import CookieIdentityProvider, IdentityProvider
from quiz_taker.ui import (
    format_remaining,
    render_listing_page,
    render_quiz_page,
    render_results,
    timer_css_classes,
)

logger = logging.getLogger(__name__)


class AnswerPayload(BaseModel):
    """Payload schema for selecting an option or typing a fill-blank answer."""

    question_index: int
    value: int | str


def _snapshot_payload(controller: QuizSessionController) -> dict[str, object]:
    snapshot = controller.snapshot()
    payload: dict[str, object] = {
        "state": snapshot.state.value,
        "remaining_seconds": snapshot.remaining_seconds,
        "timer_label": None,
        "timer_classes": None,
        "submit_enabled": snapshot.submit_enabled,
        "answered_count": snapshot.answered_count,
        "error_message": snapshot.error_message,
        "redirect_url": snapshot.redirect_url,
        "results_html": None,
    }
    if snapshot.remaining_seconds is not None and snapshot.total_seconds:
        payload["timer_label"] = format_remaining(snapshot.remaining_seconds)
        payload["timer_classes"] = timer_css_classes(snapshot.remaining_seconds, snapshot.total_seconds)

    outcome = controller.outcome
    if snapshot.state is SessionState.RESULTS and outcome is not None:
        payload.update(
            {
                "result_id": outcome.result_id,
                "score": outcome.result.score,
                "total": outcome.result.total_questions,
                "percentage": outcome.percentage,
                "tier": outcome.tier.value,
                "results_html": render_results(outcome, controller.navigation.dashboard_url),
            }
        )
    return payload


def create_api_app(
    store: DocumentStore,
    identity: IdentityProvider | None = None,
    *,
    run_timers: bool = True,
    tick_interval_seconds: float = TIMER_TICK_SECONDS,
    session_idle_timeout_seconds: float = SESSION_IDLE_TIMEOUT_SECONDS,
    session_sweep_interval_seconds: float = SESSION_SWEEP_INTERVAL_SECONDS,
    registry: SessionRegistry | None = None,
) -> FastAPI:
    """Create a FastAPI application wired to the provided document store."""
    repository = QuizRepository(store)
    registry = registry if registry is not None else SessionRegistry()
    identity_provider = identity or CookieIdentityProvider()

    async def sweep_idle_sessions() -> None:
        while True:
            await asyncio.sleep(session_sweep_interval_seconds)
            registry.evict_idle(session_idle_timeout_seconds)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        sweeper = asyncio.create_task(sweep_idle_sessions(), name="quiz-session-sweeper")
        yield
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper
        logger.info("Closing %d open quiz session(s).", len(registry))
        registry.close_all()

    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION, lifespan=lifespan)
    app.state.registry = registry

    def current_user(request: Request) -> str | None:
        return identity_provider.current_user_id(request)

    async def session_dependency(session_id: str, user_id: str | None = Depends(current_user)) -> QuizSessionController:
        controller = registry.get(session_id, user_id) if user_id else None
        if controller is None:
            raise HTTPException(status_code=404, detail="Quiz session not found.")
        return controller

    @app.get("/")
    def serve_root() -> RedirectResponse:
        return RedirectResponse(QUIZ_LISTING_URL, status_code=303)

    @app.get("/quizzes", response_class=HTMLResponse)
    async def list_quizzes(
        message: str | None = Query(None),
        user_id: str | None = Depends(current_user),
    ) -> Response:
        if user_id is None:
            return RedirectResponse(LOGIN_URL, status_code=303)
        try:
            quizzes = await repository.list_quizzes()
        except TransientFetchError as exc:
            logger.warning("Listing quizzes failed: %s", exc)
            return HTMLResponse(render_listing_page([], message=str(exc)), status_code=503)
        return HTMLResponse(render_listing_page(quizzes, message=message))

    @app.get("/quiz", response_class=HTMLResponse)
    async def open_quiz(
        quiz_id: str = Query("", alias="quizId"),
        user_id: str | None = Depends(current_user),
    ) -> Response:
        if user_id is None:
            return RedirectResponse(LOGIN_URL, status_code=303)

        navigation = NavigationContext(quiz_id=quiz_id.strip())
        controller = QuizSessionController(
            repository,
            navigation,
            user_id,
            run_timer=run_timers,
            tick_interval_seconds=tick_interval_seconds,
        )
        await controller.load()
        if controller.state is not SessionState.RENDERING or controller.quiz is None:
            controller.teardown()
            return RedirectResponse(navigation.redirect_target() or QUIZ_LISTING_URL, status_code=303)

        session_id = registry.register(controller)
        logger.info("Opened session %s on quiz %r for %s.", session_id, navigation.quiz_id, user_id)
        return HTMLResponse(render_quiz_page(controller.quiz, session_id))

    def deliver_snapshot(session_id: str, controller: QuizSessionController) -> dict[str, object]:
        payload = _snapshot_payload(controller)
        if controller.state is SessionState.RESULTS:
            # The payload carries the rendered results; the page polls no further.
            registry.close(session_id)
        return payload

    @app.get("/sessions/{session_id}")
    async def get_session(
        session_id: str,
        controller: QuizSessionController = Depends(session_dependency),
    ) -> dict[str, object]:
        return deliver_snapshot(session_id, controller)

    @app.post("/sessions/{session_id}/answers", status_code=204)
    async def select_answer(
        payload: AnswerPayload,
        controller: QuizSessionController = Depends(session_dependency),
    ) -> Response:
        try:
            await controller.dispatch(SelectAnswer(payload.question_index, payload.value))
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return Response(status_code=204)

    @app.post("/sessions/{session_id}/submit")
    async def submit_quiz(
        session_id: str,
        controller: QuizSessionController = Depends(session_dependency),
    ) -> dict[str, object]:
        await controller.dispatch(Submit())
        payload = deliver_snapshot(session_id, controller)
        if controller.state is SessionState.RENDERING and payload["error_message"]:
            raise HTTPException(status_code=503, detail=payload["error_message"])
        return payload

    @app.post("/sessions/{session_id}/close", status_code=204)
    async def close_session(session_id: str, user_id: str | None = Depends(current_user)) -> Response:
        if user_id is None or registry.get(session_id, user_id) is None:
            raise HTTPException(status_code=404, detail="Quiz session not found.")
        registry.close(session_id)
        return Response(status_code=204)

    return app


def run_api_server(
    store: DocumentStore,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Run the FastAPI server in the foreground until interrupted."""
    app = create_api_app(store)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)
    server.run()
