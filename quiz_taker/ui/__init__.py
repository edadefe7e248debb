"""HTML views for the quiz-taking service."""

from .listing_renderer import render_listing_page
from .question_renderer import render_quiz_page
from .results_renderer import render_results
from .timer_display import format_remaining, timer_css_classes, timer_level

__all__ = [
    "format_remaining",
    "render_listing_page",
    "render_quiz_page",
    "render_results",
    "timer_css_classes",
    "timer_level",
]
