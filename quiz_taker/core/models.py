"""Domain models for the quiz-taking flow."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Union


class QuestionType(str, Enum):
    """Supported question types, keyed by their stored names."""

    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"
    FILL_BLANK = "fill-blank"


class FeedbackTier(Enum):
    """Qualitative bucket derived from the percentage score."""

    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


@dataclass(frozen=True, slots=True)
class Question:
    """A single question; choice types carry options, fill-blank a text answer."""

    question_text: str
    question_type: QuestionType = QuestionType.MULTIPLE_CHOICE
    options: tuple[str, ...] = ()
    correct_option_index: int | None = None
    correct_text: str = ""

    @property
    def is_choice(self) -> bool:
        return self.question_type is not QuestionType.FILL_BLANK


@dataclass(frozen=True, slots=True)
class Quiz:
    """An ordered, named set of questions with an optional time limit."""

    quiz_id: str
    title: str
    questions: tuple[Question, ...] = ()
    description: str = ""
    subject: str = ""
    time_limit_minutes: int = 0  # 0 means untimed

    @property
    def is_timed(self) -> bool:
        return self.time_limit_minutes > 0

    @property
    def question_count(self) -> int:
        return len(self.questions)


@dataclass(frozen=True, slots=True)
class ChoiceAnswer:
    """Option picked for a multiple-choice or true-false question."""

    question_index: int
    option_index: int

    @property
    def selected_value(self) -> int:
        return self.option_index


@dataclass(frozen=True, slots=True)
class TextAnswer:
    """Fill-blank answer, already trimmed and lower-cased."""

    question_index: int
    text: str

    @property
    def selected_value(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class NoAnswer:
    """Unattempted question. Valid, and always scored as incorrect."""

    question_index: int

    @property
    def selected_value(self) -> None:
        return None


Answer = Union[ChoiceAnswer, TextAnswer, NoAnswer]


@dataclass(frozen=True, slots=True)
class QuestionReview:
    """Per-question outcome shown on the results view."""

    question_index: int
    question: Question
    answer: Answer
    is_correct: bool


@dataclass(frozen=True, slots=True)
class Result:
    """The persisted record of one completed attempt."""

    quiz_id: str
    taker_id: str
    answers: tuple[Answer, ...]
    score: int
    total_questions: int
    elapsed_seconds: int
    completed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not 0 <= self.score <= self.total_questions:
            raise ValueError("Score must be between zero and the number of questions.")

    def to_document(self) -> dict[str, object]:
        """Return the stored shape of this result."""
        completed_at = self.completed_at
        if completed_at.tzinfo is None:
            completed_at = completed_at.replace(tzinfo=timezone.utc)
        return {
            "quizId": self.quiz_id,
            "userId": self.taker_id,
            "answers": [
                {"questionIndex": answer.question_index, "selectedAnswer": answer.selected_value}
                for answer in self.answers
            ],
            "score": self.score,
            "totalQuestions": self.total_questions,
            "timeTaken": self.elapsed_seconds,
            "completedAt": completed_at.astimezone(timezone.utc).isoformat(),
        }
