"""Page texts, URLs and presentation constants used by the web views."""

from quiz_taker.styling.color_palette import Theme

PAGE_TITLE: str = "QuizTaker"
PAGE_THEME: Theme = Theme.LIGHT

QUIZ_LISTING_URL: str = "/quizzes"
STUDENT_DASHBOARD_URL: str = "/quizzes"
LOGIN_URL: str = "/login"

USER_ID_COOKIE: str = "quiztaker_user_id"
SNAPSHOT_POLL_INTERVAL_MS: int = 1000

UNTITLED_QUIZ: str = "Untitled Quiz"
NO_QUESTIONS_MESSAGE: str = "No questions available in this quiz."
NO_QUIZZES_MESSAGE: str = "No quizzes are available right now."
NO_ANSWER_LABEL: str = "No answer"
FILL_BLANK_PLACEHOLDER: str = "Type your answer here"

SUBMIT_BUTTON_TEXT: str = "Submit Quiz"
SUBMITTING_BUTTON_TEXT: str = "Submitting..."
SUBMIT_CONFIRMATION: str = "Are you sure you want to submit the quiz?"
RETURN_TO_DASHBOARD_TEXT: str = "Return to Dashboard"

NO_QUIZ_SELECTED_MESSAGE: str = "No quiz selected!"
QUIZ_NOT_FOUND_MESSAGE: str = "Quiz not found"
QUIZ_LOAD_FAILED_MESSAGE: str = "The quiz could not be loaded. Please try again later."
SUBMISSION_FAILED_MESSAGE: str = "There was an error submitting your quiz. Please try again."
