"""Renders the results view shown after a successful submission."""

from __future__ import annotations

from html import escape

from quiz_taker.constants.ui_constants import NO_ANSWER_LABEL, RETURN_TO_DASHBOARD_TEXT
from quiz_taker.core.markdown_math_renderer import renderer
from quiz_taker.core.models import Answer, ChoiceAnswer, Question, QuestionReview, TextAnswer
from quiz_taker.core.quiz_session import QuizOutcome
from quiz_taker.core.scoring import feedback_message


def render_results(outcome: QuizOutcome, dashboard_url: str) -> str:
    """Render score, feedback tier and a per-question review as an HTML fragment."""
    result = outcome.result
    minutes, seconds = divmod(result.elapsed_seconds, 60)
    details = "\n".join(_render_review(review) for review in outcome.reviews)
    return f"""<div class="card result-header">
  <h2>Quiz Results</h2>
  <div class="score-value">{result.score}/{result.total_questions} ({outcome.percentage}%)</div>
  <p class="score-message tier-{outcome.tier.value}">
    {escape(feedback_message(outcome.tier))}<br>
    Time taken: {minutes}m {seconds}s
  </p>
</div>
<div class="result-details">
{details}
</div>
<div class="actions">
  <a href="{escape(dashboard_url)}" class="btn-submit">{RETURN_TO_DASHBOARD_TEXT}</a>
</div>"""


def _render_review(review: QuestionReview) -> str:
    status = "correct" if review.is_correct else "incorrect"
    correct_line = ""
    if not review.is_correct:
        correct_line = f"<p>Correct answer: {describe_correct_answer(review.question)}</p>"
    return f"""<div class="card question-result {status}">
  <h4>Question {review.question_index + 1}</h4>
  {renderer.render_fragment(review.question.question_text)}
  <p>Your answer: {describe_answer(review.question, review.answer)}</p>
  {correct_line}
</div>"""


def describe_answer(question: Question, answer: Answer) -> str:
    if isinstance(answer, ChoiceAnswer):
        return _describe_option(question, answer.option_index)
    if isinstance(answer, TextAnswer):
        return escape(answer.text)
    return NO_ANSWER_LABEL


def describe_correct_answer(question: Question) -> str:
    if question.is_choice:
        return _describe_option(question, question.correct_option_index)
    return escape(question.correct_text)


def _describe_option(question: Question, option_index: int | None) -> str:
    if option_index is None or not 0 <= option_index < len(question.options):
        return NO_ANSWER_LABEL
    return renderer.render_inline(question.options[option_index])
