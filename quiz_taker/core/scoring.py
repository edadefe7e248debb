"""Pure scoring helpers: correctness, score, percentage and feedback tier."""

from __future__ import annotations

from collections.abc import Sequence

from quiz_taker.constants.quiz_constants import (
    BOTTOM_TIER_MESSAGE,
    MIDDLE_TIER_MESSAGE,
    MIDDLE_TIER_THRESHOLD_PERCENT,
    TOP_TIER_MESSAGE,
    TOP_TIER_THRESHOLD_PERCENT,
)
from quiz_taker.core.models import (
    Answer,
    ChoiceAnswer,
    FeedbackTier,
    NoAnswer,
    Question,
    QuestionReview,
    Quiz,
    TextAnswer,
)

_TIER_MESSAGES = {
    FeedbackTier.TOP: TOP_TIER_MESSAGE,
    FeedbackTier.MIDDLE: MIDDLE_TIER_MESSAGE,
    FeedbackTier.BOTTOM: BOTTOM_TIER_MESSAGE,
}


def normalize_text(text: str) -> str:
    return text.strip().lower()


def is_answer_correct(question: Question, answer: Answer) -> bool:
    """Compare an answer with the question's correct value using its type's rule."""
    if question.is_choice:
        return (
            isinstance(answer, ChoiceAnswer)
            and question.correct_option_index is not None
            and answer.option_index == question.correct_option_index
        )
    return isinstance(answer, TextAnswer) and normalize_text(answer.text) == normalize_text(
        question.correct_text
    )


def review_answers(quiz: Quiz, answers: Sequence[Answer]) -> list[QuestionReview]:
    """Pair every question with the answer at the same index.

    Answers are matched by position only; a missing trailing answer counts as
    incorrect.
    """
    reviews: list[QuestionReview] = []
    for index, question in enumerate(quiz.questions):
        answer = answers[index] if index < len(answers) else NoAnswer(index)
        is_correct = is_answer_correct(question, answer)
        reviews.append(
            QuestionReview(question_index=index, question=question, answer=answer, is_correct=is_correct)
        )
    return reviews


def score_answers(quiz: Quiz, answers: Sequence[Answer]) -> int:
    return sum(1 for review in review_answers(quiz, answers) if review.is_correct)


def percentage(score: int, total: int) -> int:
    """Whole-number percentage, rounded half up; zero for an empty quiz."""
    if total <= 0:
        return 0
    return (score * 200 + total) // (total * 2)


def feedback_tier(score: int, total: int) -> FeedbackTier:
    """Bucket the displayed percentage; each tier's lower bound is inclusive."""
    shown = percentage(score, total)
    if shown >= TOP_TIER_THRESHOLD_PERCENT:
        return FeedbackTier.TOP
    if shown >= MIDDLE_TIER_THRESHOLD_PERCENT:
        return FeedbackTier.MIDDLE
    return FeedbackTier.BOTTOM


def feedback_message(tier: FeedbackTier) -> str:
    return _TIER_MESSAGES[tier]
