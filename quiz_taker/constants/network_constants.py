"""Network and storage configuration constants for the quiz service."""

from pathlib import Path

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000

DATA_DIRECTORY: Path = Path("data")
QUIZ_IMPORT_DIRECTORY: Path = Path("quizzes")

# Open pages poll every second; a session unseen for this long is abandoned.
SESSION_IDLE_TIMEOUT_SECONDS: float = 120.0
SESSION_SWEEP_INTERVAL_SECONDS: float = 30.0
