"""Formatting of the remaining-time indicator."""

from __future__ import annotations

from quiz_taker.constants.quiz_constants import (
    TIMER_DANGER_FRACTION,
    TIMER_PULSE_WINDOW_SECONDS,
    TIMER_WARNING_FRACTION,
)


def format_remaining(seconds: int) -> str:
    seconds = max(0, seconds)
    return f"Time Left: {seconds // 60}:{seconds % 60:02d}"


def timer_level(remaining_seconds: int, total_seconds: int) -> str:
    """Return the CSS level for the timer: ``normal``, ``warning`` or ``danger``."""
    if total_seconds <= 0:
        return "normal"
    fraction = remaining_seconds / total_seconds
    if fraction <= TIMER_DANGER_FRACTION:
        return "danger"
    if fraction <= TIMER_WARNING_FRACTION:
        return "warning"
    return "normal"


def timer_css_classes(remaining_seconds: int, total_seconds: int) -> str:
    classes = ["timer"]
    level = timer_level(remaining_seconds, total_seconds)
    if level != "normal":
        classes.append(level)
    if remaining_seconds <= TIMER_PULSE_WINDOW_SECONDS:
        classes.append("pulse")
    return " ".join(classes)
