"""Renders the quiz listing page that load failures redirect to."""

from __future__ import annotations

from html import escape
from urllib.parse import urlencode

from quiz_taker.constants.about import APP_ABOUT_TEXT
from quiz_taker.constants.ui_constants import NO_QUIZZES_MESSAGE, PAGE_TITLE
from quiz_taker.core.markdown_math_renderer import renderer
from quiz_taker.core.models import Quiz


def render_listing_page(quizzes: list[Quiz], message: str | None = None) -> str:
    banner = f'<p class="message error">{escape(message)}</p>' if message else ""
    if quizzes:
        items = "\n".join(_render_quiz_card(quiz) for quiz in quizzes)
    else:
        items = f'<p class="muted">{NO_QUIZZES_MESSAGE}</p>'
    body = f"""    <h1>Available Quizzes</h1>
    {banner}
    {items}
    <p class="muted">{escape(APP_ABOUT_TEXT)}</p>"""
    return renderer.wrap_page(body, title=PAGE_TITLE)


def _render_quiz_card(quiz: Quiz) -> str:
    time_limit = f"{quiz.time_limit_minutes} min" if quiz.is_timed else "No time limit"
    subject = f'<span class="muted">{escape(quiz.subject)}</span> · ' if quiz.subject else ""
    href = "/quiz?" + urlencode({"quizId": quiz.quiz_id})
    return f"""<div class="card quiz-card">
      <h3>{escape(quiz.title)}</h3>
      <p class="muted">{escape(quiz.description)}</p>
      <p>{subject}{quiz.question_count} question(s) · {time_limit}</p>
      <a class="btn-submit" href="{escape(href)}">Start Quiz</a>
    </div>"""
