"""Utilities for importing quizzes from a human-friendly text file.

File format (blocks separated by blank lines or '---'). An optional header
block describes the quiz, every other block is one question:

    TITLE: Quiz title (required)
    SUBJECT: Subject name (optional)
    DESCRIPTION: One line shown under the title (optional)
    TIMELIMIT: minutes, 0-180 (optional, 0 or omitted means untimed)

    Q: Question text (supports markdown + LaTeX). Additional lines until the
       next marker are treated as part of the question.
    TYPE: multiple-choice | true-false | fill-blank   (default multiple-choice)
    A: First option text        (multiple-choice, two to six options A-F)
    B: Second option text
    CORRECT: A|B|...            (multiple-choice; TRUE or FALSE for true-false)
    ANSWER: expected text       (fill-blank, compared case-insensitively)

Example:

    TITLE: Capitals
    TIMELIMIT: 5

    Q: What is the capital of France?
    TYPE: fill-blank
    ANSWER: Paris

    Q: Which city is the capital of Italy?
    A: Milan
    B: Rome
    CORRECT: B

The importer produces the same document shape the store holds, so seeding
the store and reading it back go through one decoder.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from quiz_taker.constants.quiz_constants import (
    MAX_TIME_LIMIT_MINUTES,
    MIN_CHOICE_OPTIONS,
    MIN_TIME_LIMIT_MINUTES,
    QUIZZES_COLLECTION,
    TRUE_FALSE_OPTIONS,
)
from quiz_taker.core.models import QuestionType
from quiz_taker.core.services.document_store import InMemoryDocumentStore, JsonDirectoryDocumentStore


class QuizImportError(Exception):
    """Raised when a quiz definition cannot be parsed."""


@dataclass(slots=True)
class ImportedQuiz:
    """Container for an imported quiz document and where it came from."""

    source_path: Path
    quiz_id: str
    document: dict[str, Any]


_OPTION_ORDER = ["A", "B", "C", "D", "E", "F"]
_HEADER_KEYS = ("TITLE", "SUBJECT", "DESCRIPTION", "TIMELIMIT")


def load_quiz_from_file(file_path: Path) -> ImportedQuiz:
    text = file_path.read_text(encoding="utf-8")
    document = parse_quiz_text(text)
    return ImportedQuiz(source_path=file_path, quiz_id=file_path.stem, document=document)


def seed_store_from_directory(
    store: InMemoryDocumentStore | JsonDirectoryDocumentStore, directory: Path
) -> list[ImportedQuiz]:
    """Load every ``*.txt`` quiz in ``directory`` into the store, keyed by file stem."""
    if not directory.is_dir():
        return []
    imported = [load_quiz_from_file(path) for path in sorted(directory.glob("*.txt"))]
    for quiz in imported:
        store.put(QUIZZES_COLLECTION, quiz.quiz_id, quiz.document)
    return imported


def parse_quiz_text(text: str) -> dict[str, Any]:
    blocks = _split_blocks(text)
    if not blocks:
        raise QuizImportError("Quiz file is empty.")

    header: dict[str, Any] = {}
    if _is_header_block(blocks[0]):
        header = _parse_header(blocks.pop(0))
    if not header.get("title"):
        raise QuizImportError("Quiz must have a TITLE.")

    questions = [_parse_block(block) for block in blocks]
    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")
    return {**header, "questions": questions}


def _split_blocks(text: str) -> list[str]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            # Blank line encountered after content - finalize current block
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())
    return [block for block in blocks if block]


def _is_header_block(block: str) -> bool:
    first_line = block.splitlines()[0].strip().upper()
    return any(first_line.startswith(f"{key}:") for key in _HEADER_KEYS)


def _parse_header(block: str) -> dict[str, Any]:
    header: dict[str, Any] = {"timeLimit": 0}
    for raw_line in block.splitlines():
        line = raw_line.strip()
        key, _, value = line.partition(":")
        key = key.strip().upper()
        value = value.strip()
        if key == "TITLE":
            header["title"] = value
        elif key == "SUBJECT":
            header["subject"] = value
        elif key == "DESCRIPTION":
            header["description"] = value
        elif key == "TIMELIMIT":
            header["timeLimit"] = _parse_time_limit(value)
        else:
            raise QuizImportError(f"Unknown quiz header line: '{line}'.")
    return header


def _parse_time_limit(raw_value: str) -> int:
    if not raw_value:
        raise QuizImportError("TIMELIMIT must include an integer value.")
    try:
        minutes = int(raw_value)
    except ValueError as exc:
        raise QuizImportError("TIMELIMIT must be an integer number of minutes.") from exc
    if not MIN_TIME_LIMIT_MINUTES <= minutes <= MAX_TIME_LIMIT_MINUTES:
        raise QuizImportError(
            f"TIMELIMIT must be between {MIN_TIME_LIMIT_MINUTES} and {MAX_TIME_LIMIT_MINUTES} minutes."
        )
    return minutes


def _parse_block(block: str) -> dict[str, Any]:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    question_type = QuestionType.MULTIPLE_CHOICE
    correct_value: str | None = None
    answer_text: str | None = None
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("TYPE:"):
            raw_type = line.split(":", 1)[1].strip().lower()
            try:
                question_type = QuestionType(raw_type)
            except ValueError as exc:
                raise QuizImportError(f"Unknown question TYPE '{raw_type}'.") from exc
            current_section = None
            continue

        if upper.startswith("CORRECT:"):
            correct_value = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        if upper.startswith("ANSWER:"):
            answer_text = line.split(":", 1)[1].strip()
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in _OPTION_ORDER and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in _OPTION_ORDER:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuizImportError(
                f"Encountered text outside of a known section: '{line}'."
            )

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuizImportError("Question text missing (Q: ...)")

    if question_type is QuestionType.FILL_BLANK:
        if options:
            raise QuizImportError("Fill-blank questions cannot define options.")
        if not answer_text:
            raise QuizImportError("Fill-blank questions need an ANSWER.")
        return {"questionText": question_text, "type": question_type.value, "correctAnswer": answer_text}

    if question_type is QuestionType.TRUE_FALSE:
        if options:
            raise QuizImportError("True-false questions use fixed options; remove the option lines.")
        if correct_value not in ("TRUE", "FALSE"):
            raise QuizImportError("True-false questions need CORRECT: TRUE or FALSE.")
        return {
            "questionText": question_text,
            "type": question_type.value,
            "options": list(TRUE_FALSE_OPTIONS),
            "correctAnswer": 0 if correct_value == "TRUE" else 1,
        }

    letters = [letter for letter in _OPTION_ORDER if letter in options]
    if letters != _OPTION_ORDER[: len(letters)]:
        raise QuizImportError("Options must be lettered consecutively starting at A.")
    if len(letters) < MIN_CHOICE_OPTIONS:
        raise QuizImportError(f"Each question must define at least {MIN_CHOICE_OPTIONS} options.")

    option_list = [options[letter].strip() for letter in letters]
    if any(not opt for opt in option_list):
        raise QuizImportError("Option text cannot be empty.")
    if correct_value is None or correct_value not in letters:
        raise QuizImportError(f"CORRECT must be one of {', '.join(letters)}.")

    return {
        "questionText": question_text,
        "type": question_type.value,
        "options": option_list,
        "correctAnswer": letters.index(correct_value),
    }
