from __future__ import annotations

import pytest

from quiz_taker.constants.quiz_constants import QUIZZES_COLLECTION
from quiz_taker.core.models import Question, QuestionType, Quiz
from tests.session_fixtures import (
    MIXED_QUIZ_DOCUMENT,
    TIMED_QUIZ_DOCUMENT,
    FakeClock,
    FlakyDocumentStore,
)


@pytest.fixture
def store() -> FlakyDocumentStore:
    store = FlakyDocumentStore()
    store.put(QUIZZES_COLLECTION, "mixed", MIXED_QUIZ_DOCUMENT)
    store.put(QUIZZES_COLLECTION, "timed", TIMED_QUIZ_DOCUMENT)
    return store


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mixed_quiz() -> Quiz:
    return Quiz(
        quiz_id="mixed",
        title="Mixed Bag",
        questions=(
            Question("Pick the third letter.", QuestionType.MULTIPLE_CHOICE, ("a", "b", "c", "d"), 2),
            Question("What is the capital of France?", QuestionType.FILL_BLANK, correct_text="Paris"),
        ),
    )
