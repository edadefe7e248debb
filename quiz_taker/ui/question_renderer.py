"""Renders the quiz-taking page: header, timer, questions and the page script."""

from __future__ import annotations

import json
from html import escape

from quiz_taker.constants.ui_constants import (
    FILL_BLANK_PLACEHOLDER,
    NO_QUESTIONS_MESSAGE,
    SNAPSHOT_POLL_INTERVAL_MS,
    SUBMISSION_FAILED_MESSAGE,
    SUBMIT_BUTTON_TEXT,
    SUBMIT_CONFIRMATION,
    SUBMITTING_BUTTON_TEXT,
)
from quiz_taker.core.markdown_math_renderer import renderer
from quiz_taker.core.models import Question, Quiz
from quiz_taker.ui.timer_display import format_remaining, timer_css_classes

_QUIZ_PAGE_SCRIPT = """
const quizContent = document.getElementById('quizContent');
const quizResult = document.getElementById('quizResult');
const submitButton = document.getElementById('submitQuizBtn');
const statusEl = document.getElementById('status');
const timerEl = document.getElementById('timer');
const sessionPath = `/sessions/${QUIZ_CONFIG.sessionId}`;

let finished = false;
let answerQueue = Promise.resolve();

function postJson(path, payload) {
  return fetch(path, {
    method: 'POST',
    headers: { 'Content-Type': 'application/json' },
    body: JSON.stringify(payload || {}),
  });
}

function showStatus(message) {
  statusEl.textContent = message || '';
  statusEl.classList.toggle('hidden', !message);
}

function resetSubmitButton(enabled) {
  submitButton.disabled = !enabled;
  submitButton.textContent = QUIZ_CONFIG.submitText;
}

function sendAnswer(questionIndex, value) {
  answerQueue = answerQueue.then(async () => {
    const response = await postJson(`${sessionPath}/answers`, { question_index: questionIndex, value: value });
    if (!response.ok) {
      const body = await response.json().catch(() => ({}));
      showStatus(body.detail || 'Your answer could not be saved.');
    }
  }).catch(() => showStatus('Your answer could not be saved.'));
}

function applySnapshot(snapshot) {
  if (timerEl && snapshot.timer_label) {
    timerEl.querySelector('span').textContent = snapshot.timer_label;
    timerEl.className = snapshot.timer_classes;
  }
  if (snapshot.results_html) {
    finished = true;
    clearInterval(pollHandle);
    quizContent.style.display = 'none';
    quizResult.innerHTML = snapshot.results_html;
    quizResult.style.display = 'block';
    if (window.MathJax && window.MathJax.typesetPromise) {
      window.MathJax.typesetPromise([quizResult]);
    }
    return;
  }
  if (snapshot.error_message) {
    showStatus(snapshot.error_message);
  }
  if (snapshot.state === 'rendering') {
    resetSubmitButton(snapshot.submit_enabled);
  }
  if (snapshot.redirect_url) {
    finished = true;
    window.location.href = snapshot.redirect_url;
  }
}

async function poll() {
  if (finished) {
    return;
  }
  const response = await fetch(sessionPath).catch(() => null);
  if (response && response.ok) {
    applySnapshot(await response.json());
  }
}

document.querySelectorAll('input[type=radio][data-question]').forEach((input) => {
  input.addEventListener('change', () => sendAnswer(Number(input.dataset.question), Number(input.value)));
});
document.querySelectorAll('input.answer-input[data-question]').forEach((input) => {
  input.addEventListener('input', () => sendAnswer(Number(input.dataset.question), input.value));
});

submitButton.addEventListener('click', async () => {
  if (!confirm(QUIZ_CONFIG.confirmText)) {
    return;
  }
  submitButton.disabled = true;
  submitButton.textContent = QUIZ_CONFIG.submittingText;
  showStatus('');
  await answerQueue;
  const response = await postJson(`${sessionPath}/submit`).catch(() => null);
  const body = response ? await response.json().catch(() => ({})) : {};
  if (response && response.ok) {
    applySnapshot(body);
  } else {
    showStatus(body.detail || QUIZ_CONFIG.failedText);
    resetSubmitButton(true);
  }
});

window.addEventListener('pagehide', () => navigator.sendBeacon(`${sessionPath}/close`));
const pollHandle = setInterval(poll, QUIZ_CONFIG.pollIntervalMs);
"""


def render_quiz_page(quiz: Quiz, session_id: str) -> str:
    """Render the full quiz page for an open session."""
    timer_html = ""
    if quiz.is_timed:
        total_seconds = quiz.time_limit_minutes * 60
        timer_html = (
            f'<div class="{timer_css_classes(total_seconds, total_seconds)}" id="timer">'
            f"<span>{format_remaining(total_seconds)}</span></div>"
        )

    body = f"""    <div id="quizContent">
      <div class="card quiz-header">
        <h1 class="quiz-title">{escape(quiz.title)}</h1>
        <p class="quiz-description muted">{escape(quiz.description)}</p>
        {timer_html}
      </div>
      <form id="quizForm" class="quiz-form" onsubmit="return false;">
        {render_questions(quiz)}
      </form>
      <p id="status" class="message error hidden"></p>
      <button type="button" id="submitQuizBtn" class="btn-submit">{SUBMIT_BUTTON_TEXT}</button>
    </div>
    <div id="quizResult" style="display: none;"></div>"""

    config = {
        "sessionId": session_id,
        "pollIntervalMs": SNAPSHOT_POLL_INTERVAL_MS,
        "submitText": SUBMIT_BUTTON_TEXT,
        "submittingText": SUBMITTING_BUTTON_TEXT,
        "confirmText": SUBMIT_CONFIRMATION,
        "failedText": SUBMISSION_FAILED_MESSAGE,
    }
    script = f"const QUIZ_CONFIG = {_script_json(config)};\n{_QUIZ_PAGE_SCRIPT}"
    return renderer.wrap_page(body, title=quiz.title, script=script)


def render_questions(quiz: Quiz) -> str:
    if not quiz.questions:
        return f'<p class="no-questions">{NO_QUESTIONS_MESSAGE}</p>'
    return "\n".join(render_question(index, question) for index, question in enumerate(quiz.questions))


def render_question(index: int, question: Question) -> str:
    """Render one question with inputs matching its type.

    Choice questions get one radio button per option, lettered A, B, C, ...
    and sharing a name so only one can be selected. Fill-blank questions get
    a single text input.
    """
    return f"""<div class="card question" data-index="{index}">
          <div class="question-text"><span class="question-number">{index + 1}.</span>
          {renderer.render_fragment(question.question_text)}</div>
          {_render_inputs(index, question)}
        </div>"""


def option_letter(option_index: int) -> str:
    return chr(ord("A") + option_index)


def _render_inputs(index: int, question: Question) -> str:
    if not question.is_choice:
        return (
            '<div class="fill-blank-answer">'
            f'<input type="text" name="answer-{index}" class="answer-input" data-question="{index}" '
            f'placeholder="{FILL_BLANK_PLACEHOLDER}" autocomplete="off"></div>'
        )

    rows = []
    for option_index, option in enumerate(question.options):
        letter = option_letter(option_index)
        input_id = f"q{index}o{option_index}"
        rows.append(
            f'<div class="option" data-option="{letter}">'
            f'<input type="radio" name="answer-{index}" value="{option_index}" id="{input_id}" '
            f'data-question="{index}">'
            f'<label for="{input_id}"><span class="option-letter">{letter}.</span> '
            f"{renderer.render_inline(option)}</label></div>"
        )
    return "\n".join(rows)


def _script_json(value: object) -> str:
    return json.dumps(value).replace("</", "<\\/")
