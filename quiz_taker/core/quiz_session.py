"""Controller for one quiz attempt: load, answer, count down, submit, review.

State machine::

    INITIAL -> LOADING -> RENDERING -> SUBMITTING -> RESULTS
                  |                        |
                  |                        +-> RENDERING (write failed, retry allowed)
                  +-> NOT_FOUND_REDIRECT
                  +-> TRANSIENT_ERROR_REDIRECT

All work runs on one event loop. The countdown task and the submit handler
both reach ``_submit``; a one-shot guard lets only the first of them write.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from quiz_taker.constants.quiz_constants import TIMER_TICK_SECONDS
from quiz_taker.constants.ui_constants import (
    NO_QUIZ_SELECTED_MESSAGE,
    QUIZ_LOAD_FAILED_MESSAGE,
    QUIZ_NOT_FOUND_MESSAGE,
    SUBMISSION_FAILED_MESSAGE,
)
from quiz_taker.core.commands import SelectAnswer, SessionCommand, Submit, TimerTick
from quiz_taker.core.errors import QuizNotFoundError, SubmissionWriteError, TransientFetchError
from quiz_taker.core.models import FeedbackTier, QuestionReview, Quiz, Result
from quiz_taker.core.navigation import NavigationContext
from quiz_taker.core.scoring import feedback_tier, percentage, review_answers
from quiz_taker.core.services.answer_sheet import AnswerSheet
from quiz_taker.core.services.countdown import Countdown
from quiz_taker.core.services.quiz_repository import QuizRepository

logger = logging.getLogger(__name__)


class SessionState(Enum):
    INITIAL = "initial"
    LOADING = "loading"
    RENDERING = "rendering"
    SUBMITTING = "submitting"
    RESULTS = "results"
    NOT_FOUND_REDIRECT = "not_found_redirect"
    TRANSIENT_ERROR_REDIRECT = "transient_error_redirect"


TERMINAL_STATES = frozenset(
    {
        SessionState.RESULTS,
        SessionState.NOT_FOUND_REDIRECT,
        SessionState.TRANSIENT_ERROR_REDIRECT,
    }
)


@dataclass(frozen=True, slots=True)
class QuizOutcome:
    """Everything the results view needs after a successful submission."""

    result: Result
    result_id: str
    reviews: tuple[QuestionReview, ...]
    percentage: int
    tier: FeedbackTier


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Read-only view of the session for the page to poll."""

    state: SessionState
    remaining_seconds: int | None
    total_seconds: int | None
    submit_enabled: bool
    answered_count: int
    error_message: str | None
    redirect_url: str | None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class QuizSessionController:
    """Owns the quiz, the answer sheet, the countdown and the submit guard."""

    def __init__(
        self,
        repository: QuizRepository,
        navigation: NavigationContext,
        taker_id: str,
        *,
        clock: Callable[[], datetime] = _utc_now,
        run_timer: bool = True,
        tick_interval_seconds: float = TIMER_TICK_SECONDS,
    ) -> None:
        self._repository = repository
        self._navigation = navigation
        self._taker_id = taker_id
        self._clock = clock
        self._run_timer = run_timer
        self._tick_interval_seconds = tick_interval_seconds

        self._state = SessionState.INITIAL
        self._quiz: Quiz | None = None
        self._answer_sheet: AnswerSheet | None = None
        self._countdown: Countdown | None = None
        self._started_at: datetime | None = None
        self._submit_guard = False
        self._submit_enabled = False
        self._error_message: str | None = None
        self._outcome: QuizOutcome | None = None
        self._closed = False

    # --- Accessors ---

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def quiz(self) -> Quiz | None:
        return self._quiz

    @property
    def taker_id(self) -> str:
        return self._taker_id

    @property
    def navigation(self) -> NavigationContext:
        return self._navigation

    @property
    def countdown(self) -> Countdown | None:
        return self._countdown

    @property
    def outcome(self) -> QuizOutcome | None:
        return self._outcome

    @property
    def answer_sheet(self) -> AnswerSheet | None:
        return self._answer_sheet

    def is_closed(self) -> bool:
        return self._closed

    def snapshot(self) -> SessionSnapshot:
        countdown = self._countdown
        return SessionSnapshot(
            state=self._state,
            remaining_seconds=countdown.remaining_seconds if countdown else None,
            total_seconds=countdown.total_seconds if countdown else None,
            submit_enabled=self._submit_enabled,
            answered_count=self._answer_sheet.answered_count() if self._answer_sheet else 0,
            error_message=self._error_message,
            redirect_url=self._navigation.redirect_target(),
        )

    # --- Lifecycle ---

    async def load(self) -> None:
        """Fetch the quiz and enter RENDERING, or redirect on failure."""
        if self._state is not SessionState.INITIAL:
            raise RuntimeError("Quiz session has already been loaded.")
        self._transition(SessionState.LOADING)

        quiz_id = self._navigation.quiz_id
        try:
            quiz = await self._repository.fetch_quiz(quiz_id)
        except QuizNotFoundError:
            logger.warning("Quiz %r not found; redirecting to listing.", quiz_id)
            message = QUIZ_NOT_FOUND_MESSAGE if quiz_id else NO_QUIZ_SELECTED_MESSAGE
            self._navigation.redirect_to_listing(message)
            self._transition(SessionState.NOT_FOUND_REDIRECT)
            return
        except TransientFetchError as exc:
            logger.warning("Loading quiz %r failed: %s", quiz_id, exc)
            self._navigation.redirect_to_listing(QUIZ_LOAD_FAILED_MESSAGE)
            self._transition(SessionState.TRANSIENT_ERROR_REDIRECT)
            return

        if self._closed:
            return

        self._quiz = quiz
        self._answer_sheet = AnswerSheet(quiz)
        self._started_at = self._clock()
        if quiz.is_timed:
            self._countdown = Countdown(
                quiz.time_limit_minutes * 60,
                on_tick=self._on_countdown_tick,
                interval_seconds=self._tick_interval_seconds,
            )
            if self._run_timer:
                self._countdown.start()
        self._submit_enabled = True
        self._transition(SessionState.RENDERING)

    def teardown(self) -> None:
        """Release the countdown; later commands are ignored."""
        if self._closed:
            return
        self._closed = True
        self._submit_enabled = False
        self._release_timer()
        logger.debug("Quiz session for %r torn down in state %s.", self._navigation.quiz_id, self._state.value)

    async def dispatch(self, command: SessionCommand) -> None:
        if self._closed:
            logger.debug("Ignoring %s on a closed session.", type(command).__name__)
            return
        if isinstance(command, SelectAnswer):
            self._select_answer(command)
        elif isinstance(command, Submit):
            await self._submit(trigger="manual")
        elif isinstance(command, TimerTick):
            await self._tick()
        else:
            raise TypeError(f"Unsupported session command: {command!r}")

    # --- Command handlers ---

    def _select_answer(self, command: SelectAnswer) -> None:
        if self._state is not SessionState.RENDERING or self._answer_sheet is None:
            raise RuntimeError("Quiz is not accepting answers.")
        self._answer_sheet.select(command.question_index, command.value)

    async def _on_countdown_tick(self) -> None:
        await self.dispatch(TimerTick())

    async def _tick(self) -> None:
        countdown = self._countdown
        if countdown is None or countdown.is_cancelled():
            return
        if self._state not in (SessionState.RENDERING, SessionState.SUBMITTING):
            return
        remaining = countdown.advance()
        if remaining > 0:
            return
        logger.info("Time is up for quiz %r; submitting.", self._navigation.quiz_id)
        countdown.cancel()
        await self._submit(trigger="timer")

    async def _submit(self, trigger: str) -> None:
        if self._submit_guard or self._state is not SessionState.RENDERING:
            logger.info(
                "Ignoring %s submit for quiz %r; state is %s.",
                trigger,
                self._navigation.quiz_id,
                self._state.value,
            )
            return
        if self._quiz is None or self._answer_sheet is None:
            raise RuntimeError("Quiz session has no loaded quiz.")

        self._submit_guard = True
        self._submit_enabled = False
        self._error_message = None
        self._transition(SessionState.SUBMITTING)

        quiz = self._quiz
        answers = self._answer_sheet.collect()
        reviews = review_answers(quiz, answers)
        score = sum(1 for review in reviews if review.is_correct)
        completed_at = self._clock()
        started_at = self._started_at or completed_at
        result = Result(
            quiz_id=quiz.quiz_id,
            taker_id=self._taker_id,
            answers=tuple(answers),
            score=score,
            total_questions=quiz.question_count,
            elapsed_seconds=max(0, int((completed_at - started_at).total_seconds())),
            completed_at=completed_at,
        )

        try:
            result_id = await self._repository.save_result(result)
        except SubmissionWriteError as exc:
            logger.warning("Submitting quiz %r failed: %s", quiz.quiz_id, exc)
            self._submit_guard = False
            self._error_message = SUBMISSION_FAILED_MESSAGE
            if not self._closed:
                self._submit_enabled = True
            self._transition(SessionState.RENDERING)
            return

        self._outcome = QuizOutcome(
            result=result,
            result_id=result_id,
            reviews=tuple(reviews),
            percentage=percentage(score, quiz.question_count),
            tier=feedback_tier(score, quiz.question_count),
        )
        logger.info(
            "Stored result %s for quiz %r (%d/%d, %s submit).",
            result_id,
            quiz.quiz_id,
            score,
            quiz.question_count,
            trigger,
        )
        self._transition(SessionState.RESULTS)

    # --- Helpers ---

    def _transition(self, state: SessionState) -> None:
        logger.debug("Quiz session %r: %s -> %s", self._navigation.quiz_id, self._state.value, state.value)
        self._state = state
        if state in TERMINAL_STATES:
            self._submit_enabled = False
            self._release_timer()

    def _release_timer(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()
