"""Typed commands dispatched into a quiz session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class SelectAnswer:
    """Set the answer for one question: an option index or fill-blank text."""

    question_index: int
    value: int | str


@dataclass(frozen=True, slots=True)
class Submit:
    """Manual submission by the quiz taker."""


@dataclass(frozen=True, slots=True)
class TimerTick:
    """One second of the countdown has elapsed."""


SessionCommand = Union[SelectAnswer, Submit, TimerTick]
