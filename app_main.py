"""Application entry point for the QuizTaker service."""

from __future__ import annotations

import socket

from quiz_taker.constants.network_constants import (
    DATA_DIRECTORY,
    DEFAULT_HOST,
    DEFAULT_PORT,
    QUIZ_IMPORT_DIRECTORY,
)
from quiz_taker.core.quiz_importer import seed_store_from_directory
from quiz_taker.core.services.document_store import JsonDirectoryDocumentStore
from quiz_taker.server.api_server import run_api_server
from quiz_taker.utils.logging_config import configure_logging


def _determine_student_url(port: int) -> str:
    """Best-effort determination of the local IP for student-facing URL."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}/quizzes"


def main() -> None:
    """Initialize logging, seed the quiz store, and run the API server."""
    logger = configure_logging()
    logger.info("Starting QuizTaker...")

    store = JsonDirectoryDocumentStore(DATA_DIRECTORY)
    imported = seed_store_from_directory(store, QUIZ_IMPORT_DIRECTORY)
    logger.info("Imported %d quiz file(s) from %s", len(imported), QUIZ_IMPORT_DIRECTORY)
    logger.info("Student page available at %s", _determine_student_url(DEFAULT_PORT))

    run_api_server(store, host=DEFAULT_HOST, port=DEFAULT_PORT)


if __name__ == "__main__":
    main()
