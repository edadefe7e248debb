"""Quiz-related constants shared across UI, server and core layers."""

QUIZZES_COLLECTION: str = "quizzes"
RESULTS_COLLECTION: str = "quiz_results"

TIMER_TICK_SECONDS: float = 1.0
TIMER_WARNING_FRACTION: float = 0.5
TIMER_DANGER_FRACTION: float = 0.25
TIMER_PULSE_WINDOW_SECONDS: int = 60

MIN_TIME_LIMIT_MINUTES: int = 0
MAX_TIME_LIMIT_MINUTES: int = 180
MIN_CHOICE_OPTIONS: int = 2

TOP_TIER_THRESHOLD_PERCENT: int = 80
MIDDLE_TIER_THRESHOLD_PERCENT: int = 60

TOP_TIER_MESSAGE: str = "Excellent work! You've mastered this topic!"
MIDDLE_TIER_MESSAGE: str = "Good job! Keep practicing to improve further."
BOTTOM_TIER_MESSAGE: str = "Keep studying! You'll do better next time."

TRUE_FALSE_OPTIONS: tuple[str, str] = ("True", "False")
