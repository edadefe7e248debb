"""In-memory answer state for one quiz attempt."""

from __future__ import annotations

from quiz_taker.core.models import Answer, ChoiceAnswer, NoAnswer, Quiz, TextAnswer
from quiz_taker.core.scoring import normalize_text


class AnswerSheet:
    """One input slot per question, read into typed answers at submission.

    Choice questions hold the selected option index, fill-blank questions the
    raw text as typed. Selecting again replaces the previous value.
    """

    def __init__(self, quiz: Quiz) -> None:
        self._quiz = quiz
        self._inputs: dict[int, int | str] = {}

    def select(self, question_index: int, value: int | str) -> None:
        if not 0 <= question_index < self._quiz.question_count:
            raise ValueError(f"Question index {question_index} out of range")

        question = self._quiz.questions[question_index]
        if question.is_choice:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError("Choice questions take an option index.")
            if not 0 <= value < len(question.options):
                raise ValueError(f"Option index {value} out of range")
        elif not isinstance(value, str):
            raise ValueError("Fill-blank questions take a text answer.")
        self._inputs[question_index] = value

    def clear(self, question_index: int) -> None:
        self._inputs.pop(question_index, None)

    def raw_value(self, question_index: int) -> int | str | None:
        return self._inputs.get(question_index)

    def answered_count(self) -> int:
        return sum(1 for answer in self.collect() if not isinstance(answer, NoAnswer))

    def collect(self) -> list[Answer]:
        """Read every question's input in order. Never raises for missing input."""
        answers: list[Answer] = []
        for index, question in enumerate(self._quiz.questions):
            raw = self._inputs.get(index)
            if raw is None:
                answers.append(NoAnswer(index))
            elif question.is_choice:
                answers.append(ChoiceAnswer(index, raw))
            else:
                text = normalize_text(raw)
                answers.append(TextAnswer(index, text) if text else NoAnswer(index))
        return answers
