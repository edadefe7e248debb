"""Failures a quiz session can run into, grouped by how the session reacts."""

from __future__ import annotations


class QuizSessionError(Exception):
    """Base class for errors surfaced to the quiz taker."""


class QuizNotFoundError(QuizSessionError):
    """No quiz document exists for the requested id. Fatal to the session."""

    def __init__(self, quiz_id: str) -> None:
        super().__init__(f"Quiz {quiz_id!r} was not found.")
        self.quiz_id = quiz_id


class TransientFetchError(QuizSessionError):
    """The quiz could not be loaded because the backend failed."""


class SubmissionWriteError(QuizSessionError):
    """The result write failed. Answers are kept and the taker may retry."""
