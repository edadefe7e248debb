from __future__ import annotations

from pathlib import Path

import pytest

from quiz_taker.constants.quiz_constants import QUIZZES_COLLECTION
from quiz_taker.core.models import QuestionType
from quiz_taker.core.quiz_importer import (
    QuizImportError,
    load_quiz_from_file,
    parse_quiz_text,
    seed_store_from_directory,
)
from quiz_taker.core.services.document_store import InMemoryDocumentStore
from quiz_taker.core.services.quiz_repository import decode_quiz

SAMPLE_QUIZ = """TITLE: Capitals
SUBJECT: Geography
TIMELIMIT: 5

Q: What is the capital of France?
TYPE: fill-blank
ANSWER: Paris

---

Q: Which city is the capital of Italy?
It is also the largest city.
A: Milan
B: Rome
CORRECT: b

Q: Rome is in Italy.
TYPE: true-false
CORRECT: FALSE
"""


def test_parse_sample_quiz_produces_store_document() -> None:
    document = parse_quiz_text(SAMPLE_QUIZ)

    assert document["title"] == "Capitals"
    assert document["subject"] == "Geography"
    assert document["timeLimit"] == 5
    assert document["questions"] == [
        {"questionText": "What is the capital of France?", "type": "fill-blank", "correctAnswer": "Paris"},
        {
            "questionText": "Which city is the capital of Italy?\nIt is also the largest city.",
            "type": "multiple-choice",
            "options": ["Milan", "Rome"],
            "correctAnswer": 1,
        },
        {
            "questionText": "Rome is in Italy.",
            "type": "true-false",
            "options": ["True", "False"],
            "correctAnswer": 1,
        },
    ]


def test_imported_document_decodes_to_quiz() -> None:
    quiz = decode_quiz("capitals", parse_quiz_text(SAMPLE_QUIZ))

    assert quiz.time_limit_minutes == 5
    assert [question.question_type for question in quiz.questions] == [
        QuestionType.FILL_BLANK,
        QuestionType.MULTIPLE_CHOICE,
        QuestionType.TRUE_FALSE,
    ]


def test_time_limit_defaults_to_untimed() -> None:
    document = parse_quiz_text("TITLE: Quick\n\nQ: Pick\nA: x\nB: y\nCORRECT: A\n")

    assert document["timeLimit"] == 0


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("", "empty"),
        ("Q: Pick\nA: x\nB: y\nCORRECT: A\n", "TITLE"),
        ("TITLE: T\n", "any questions"),
        ("TITLE: T\nTIMELIMIT: 500\n\nQ: Pick\nA: x\nB: y\nCORRECT: A\n", "TIMELIMIT"),
        ("TITLE: T\nCOLOUR: red\n", "Unknown quiz header"),
        ("TITLE: T\n\nQ: Pick\nA: x\nCORRECT: A\n", "at least 2"),
        ("TITLE: T\n\nQ: Pick\nA: x\nC: y\nCORRECT: A\n", "consecutively"),
        ("TITLE: T\n\nQ: Pick\nA: x\nB: y\nCORRECT: C\n", "CORRECT must be one of"),
        ("TITLE: T\n\nQ: Pick\nTYPE: essay\n", "Unknown question TYPE"),
        ("TITLE: T\n\nQ: Name it\nTYPE: fill-blank\n", "ANSWER"),
        ("TITLE: T\n\nQ: True?\nTYPE: true-false\nCORRECT: YES\n", "TRUE or FALSE"),
        ("TITLE: T\n\nA: x\nB: y\nCORRECT: A\n", "Question text missing"),
    ],
)
def test_invalid_quiz_text_is_rejected(text: str, message: str) -> None:
    with pytest.raises(QuizImportError, match=message):
        parse_quiz_text(text)


def test_load_quiz_from_file_uses_file_stem_as_id(tmp_path: Path) -> None:
    path = tmp_path / "capitals.txt"
    path.write_text(SAMPLE_QUIZ, encoding="utf-8")

    imported = load_quiz_from_file(path)

    assert imported.quiz_id == "capitals"
    assert imported.source_path == path
    assert imported.document["title"] == "Capitals"


@pytest.mark.asyncio
async def test_seed_store_from_directory(tmp_path: Path) -> None:
    (tmp_path / "capitals.txt").write_text(SAMPLE_QUIZ, encoding="utf-8")
    (tmp_path / "notes.md").write_text("ignored", encoding="utf-8")
    store = InMemoryDocumentStore()

    imported = seed_store_from_directory(store, tmp_path)

    assert [quiz.quiz_id for quiz in imported] == ["capitals"]
    assert (await store.fetch(QUIZZES_COLLECTION, "capitals"))["title"] == "Capitals"
    assert seed_store_from_directory(store, tmp_path / "missing") == []
