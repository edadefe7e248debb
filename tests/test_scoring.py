from __future__ import annotations

import pytest

from quiz_taker.core.models import (
    ChoiceAnswer,
    FeedbackTier,
    NoAnswer,
    Question,
    QuestionType,
    Quiz,
    TextAnswer,
)
from quiz_taker.core.scoring import (
    feedback_message,
    feedback_tier,
    is_answer_correct,
    percentage,
    review_answers,
    score_answers,
)


def test_mixed_quiz_all_correct_scores_full_marks(mixed_quiz: Quiz) -> None:
    answers = [ChoiceAnswer(0, 2), TextAnswer(1, "paris")]

    score = score_answers(mixed_quiz, answers)

    assert score == 2
    assert percentage(score, mixed_quiz.question_count) == 100
    assert feedback_tier(score, mixed_quiz.question_count) is FeedbackTier.TOP


@pytest.mark.parametrize("typed", [" Paris ", "paris", "PARIS", "pArIs\t"])
def test_fill_blank_ignores_case_and_surrounding_whitespace(typed: str) -> None:
    question = Question("Capital of France?", QuestionType.FILL_BLANK, correct_text="Paris")

    assert is_answer_correct(question, TextAnswer(0, typed)) is True


def test_fill_blank_rejects_other_text() -> None:
    question = Question("Capital of France?", QuestionType.FILL_BLANK, correct_text="Paris")

    assert is_answer_correct(question, TextAnswer(0, "paris france")) is False
    assert is_answer_correct(question, ChoiceAnswer(0, 0)) is False


def test_no_answer_is_never_correct(mixed_quiz: Quiz) -> None:
    answers = [NoAnswer(0), NoAnswer(1)]

    assert score_answers(mixed_quiz, answers) == 0


def test_answers_are_scored_against_the_question_at_the_same_index(mixed_quiz: Quiz) -> None:
    swapped = [TextAnswer(0, "paris"), ChoiceAnswer(1, 2)]

    assert score_answers(mixed_quiz, swapped) == 0


def test_choice_without_correct_index_cannot_be_scored_correct() -> None:
    question = Question("Ungraded", QuestionType.MULTIPLE_CHOICE, ("x", "y"), None)

    assert is_answer_correct(question, ChoiceAnswer(0, 0)) is False


def test_true_false_uses_index_equality() -> None:
    question = Question("Sky is blue", QuestionType.TRUE_FALSE, ("True", "False"), 0)

    assert is_answer_correct(question, ChoiceAnswer(0, 0)) is True
    assert is_answer_correct(question, ChoiceAnswer(0, 1)) is False


def test_missing_trailing_answers_count_as_no_answer(mixed_quiz: Quiz) -> None:
    reviews = review_answers(mixed_quiz, [ChoiceAnswer(0, 2)])

    assert [review.is_correct for review in reviews] == [True, False]
    assert isinstance(reviews[1].answer, NoAnswer)


@pytest.mark.parametrize("picks", [[0, 0, 0], [1, 2, 3], [1, 1, 1], [2, 0, 1]])
def test_score_stays_within_bounds(picks: list[int]) -> None:
    quiz = Quiz(
        quiz_id="q",
        title="Bounds",
        questions=tuple(
            Question(f"Q{i}", QuestionType.MULTIPLE_CHOICE, ("a", "b", "c", "d"), i + 1) for i in range(3)
        ),
    )
    answers = [ChoiceAnswer(index, pick) for index, pick in enumerate(picks)]

    assert 0 <= score_answers(quiz, answers) <= quiz.question_count


@pytest.mark.parametrize(
    ("score", "total", "expected"),
    [
        (4, 5, FeedbackTier.TOP),
        (5, 5, FeedbackTier.TOP),
        (3, 5, FeedbackTier.MIDDLE),
        (79, 100, FeedbackTier.MIDDLE),
        (60, 100, FeedbackTier.MIDDLE),
        (59, 100, FeedbackTier.BOTTOM),
        (0, 3, FeedbackTier.BOTTOM),
        (0, 0, FeedbackTier.BOTTOM),
        (35, 44, FeedbackTier.TOP),
        (119, 200, FeedbackTier.MIDDLE),
        (117, 200, FeedbackTier.BOTTOM),
    ],
)
def test_feedback_tier_lower_bounds_are_inclusive(score: int, total: int, expected: FeedbackTier) -> None:
    assert feedback_tier(score, total) is expected


@pytest.mark.parametrize(
    ("score", "total", "expected"),
    [(1, 2, 50), (2, 3, 67), (1, 3, 33), (1, 8, 13), (0, 0, 0), (7, 7, 100)],
)
def test_percentage_rounds_half_up(score: int, total: int, expected: int) -> None:
    assert percentage(score, total) == expected


def test_feedback_message_per_tier() -> None:
    assert feedback_message(FeedbackTier.TOP).startswith("Excellent work")
    assert feedback_message(FeedbackTier.MIDDLE).startswith("Good job")
    assert feedback_message(FeedbackTier.BOTTOM).startswith("Keep studying")


@pytest.mark.parametrize(("score", "total"), [(35, 44), (79, 100), (119, 200), (3, 5), (1, 8), (7, 9)])
def test_feedback_tier_agrees_with_displayed_percentage(score: int, total: int) -> None:
    shown = percentage(score, total)
    expected = FeedbackTier.TOP if shown >= 80 else FeedbackTier.MIDDLE if shown >= 60 else FeedbackTier.BOTTOM

    assert feedback_tier(score, total) is expected
