"""Static metadata describing QuizTaker."""

APP_NAME = "QuizTaker"
APP_VERSION = "0.1"
APP_ABOUT_TEXT = (
    "QuizTaker serves timed classroom quizzes to students in the browser. "
    "Questions support Markdown with LaTeX, and every attempt is scored and stored once."
)
