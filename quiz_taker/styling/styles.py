"""Stylesheet shared by the listing, quiz and results pages."""

from .color_palette import ColorPalette, Theme

_PAGE_RULES = """
body {
    margin: 0;
    padding: 1.5rem;
    font-family: 'Segoe UI', 'Roboto', system-ui, sans-serif;
    background: var(--qt-page-background);
    color: var(--qt-page-text);
}
.card {
    background: var(--qt-card-background);
    border: 1px solid var(--qt-card-border);
    border-radius: 0.75rem;
    padding: 1.5rem;
    margin-bottom: 1rem;
}
.hidden { display: none; }
.muted { color: var(--qt-muted-text); }
.btn-submit {
    display: inline-block;
    border: none;
    border-radius: 0.5rem;
    padding: 0.75rem 1.5rem;
    font-size: 1rem;
    text-decoration: none;
    background: var(--qt-action);
    color: #FFFFFF;
    cursor: pointer;
}
.btn-submit:hover { background: var(--qt-action-hover); }
.btn-submit:disabled { opacity: 0.6; cursor: not-allowed; }
.option { display: flex; gap: 0.5rem; align-items: baseline; padding: 0.35rem 0; }
.option-letter { font-weight: 600; color: var(--qt-action); }
.answer-input {
    width: 100%;
    padding: 0.6rem;
    border: 1px solid var(--qt-card-border);
    border-radius: 0.4rem;
}
.timer { font-size: 1.1rem; margin-top: 0.5rem; }
.timer.warning { color: var(--qt-timer-warning); }
.timer.danger { color: var(--qt-timer-danger); }
.timer.pulse { animation: pulse 1s infinite; }
@keyframes pulse { 50% { opacity: 0.4; } }
.message { padding: 0.75rem 1rem; border-radius: 0.5rem; }
.message.error { border: 1px solid var(--qt-answer-incorrect); color: var(--qt-answer-incorrect); }
.question-result.correct { border-left: 4px solid var(--qt-answer-correct); }
.question-result.incorrect { border-left: 4px solid var(--qt-answer-incorrect); }
.score-value { font-size: 2rem; font-weight: 600; }
.tier-top { color: var(--qt-tier-top); }
.tier-middle { color: var(--qt-tier-middle); }
.tier-bottom { color: var(--qt-tier-bottom); }
"""


class Styles:
    """Builds the page stylesheet for a theme."""

    @staticmethod
    def get_page_style(theme: Theme = Theme.LIGHT) -> str:
        return f"{ColorPalette.css_variables(theme)}\n{_PAGE_RULES}"
