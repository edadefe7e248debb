"""Reads quizzes from and writes results to the document store."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from quiz_taker.constants.quiz_constants import QUIZZES_COLLECTION, RESULTS_COLLECTION
from quiz_taker.constants.ui_constants import UNTITLED_QUIZ
from quiz_taker.core.errors import QuizNotFoundError, SubmissionWriteError, TransientFetchError
from quiz_taker.core.models import Question, QuestionType, Quiz, Result
from quiz_taker.core.services.document_store import (
    DocumentNotFoundError,
    DocumentStore,
    DocumentStoreError,
)

logger = logging.getLogger(__name__)


class QuizDecodeError(ValueError):
    """Raised when a stored quiz document does not have a usable shape."""


class QuizRepository:
    """Maps store documents to domain models and store failures to session errors."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def fetch_quiz(self, quiz_id: str) -> Quiz:
        if not quiz_id:
            raise QuizNotFoundError(quiz_id)
        try:
            document = await self._store.fetch(QUIZZES_COLLECTION, quiz_id)
        except DocumentNotFoundError as exc:
            raise QuizNotFoundError(quiz_id) from exc
        except DocumentStoreError as exc:
            raise TransientFetchError(f"Quiz {quiz_id!r} could not be fetched: {exc}") from exc
        try:
            return decode_quiz(quiz_id, document)
        except QuizDecodeError as exc:
            logger.warning("Quiz %s has a malformed document: %s", quiz_id, exc)
            raise TransientFetchError(f"Quiz {quiz_id!r} is malformed: {exc}") from exc

    async def save_result(self, result: Result) -> str:
        try:
            return await self._store.append(RESULTS_COLLECTION, result.to_document())
        except DocumentStoreError as exc:
            raise SubmissionWriteError(f"Result for quiz {result.quiz_id!r} was not saved: {exc}") from exc

    async def list_quizzes(self) -> list[Quiz]:
        """Return every decodable quiz; malformed documents are skipped."""
        try:
            documents = await self._store.list(QUIZZES_COLLECTION)
        except DocumentStoreError as exc:
            raise TransientFetchError(f"Quizzes could not be listed: {exc}") from exc
        quizzes: list[Quiz] = []
        for quiz_id, document in documents:
            try:
                quizzes.append(decode_quiz(quiz_id, document))
            except QuizDecodeError as exc:
                logger.warning("Skipping malformed quiz %s: %s", quiz_id, exc)
        return sorted(quizzes, key=lambda quiz: quiz.title.lower())


def decode_quiz(quiz_id: str, document: Mapping[str, Any]) -> Quiz:
    if not isinstance(document, Mapping):
        raise QuizDecodeError("Quiz document must be an object.")
    raw_questions = document.get("questions") or []
    if not isinstance(raw_questions, list):
        raise QuizDecodeError("'questions' must be a list.")

    return Quiz(
        quiz_id=quiz_id,
        title=_optional_text(document, "title") or UNTITLED_QUIZ,
        description=_optional_text(document, "description"),
        subject=_optional_text(document, "subject"),
        time_limit_minutes=_decode_time_limit(document.get("timeLimit")),
        questions=tuple(
            _decode_question(position, raw) for position, raw in enumerate(raw_questions, start=1)
        ),
    )


def _decode_question(position: int, raw: Any) -> Question:
    if not isinstance(raw, Mapping):
        raise QuizDecodeError(f"Question {position} must be an object.")

    # Older documents were written with "questionType" instead of "type".
    raw_type = raw.get("type") or raw.get("questionType")
    try:
        question_type = QuestionType(raw_type)
    except ValueError:
        question_type = QuestionType.MULTIPLE_CHOICE

    question_text = _optional_text(raw, "questionText")
    correct = raw.get("correctAnswer")

    if question_type is QuestionType.FILL_BLANK:
        return Question(
            question_text=question_text,
            question_type=question_type,
            correct_text="" if correct is None else str(correct),
        )

    options = raw.get("options") or []
    if not isinstance(options, list) or any(not isinstance(option, str) for option in options):
        raise QuizDecodeError(f"Question {position} options must be a list of strings.")
    if correct is not None and (isinstance(correct, bool) or not isinstance(correct, int)):
        raise QuizDecodeError(f"Question {position} correctAnswer must be an option index.")
    return Question(
        question_text=question_text,
        question_type=question_type,
        options=tuple(options),
        correct_option_index=correct,
    )


def _decode_time_limit(value: Any) -> int:
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise QuizDecodeError("'timeLimit' must be a whole number of minutes.")
    try:
        minutes = int(value)
    except (TypeError, ValueError) as exc:
        raise QuizDecodeError("'timeLimit' must be a whole number of minutes.") from exc
    return max(minutes, 0)


def _optional_text(document: Mapping[str, Any], key: str) -> str:
    value = document.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise QuizDecodeError(f"'{key}' must be a string.")
    return value.strip()
