"""Markdown + LaTeX rendering helpers for the quiz pages.

Question and option text is authored in Markdown with ``$...$`` math. The
renderer turns it into HTML and every page loads MathJax, so the math is
typeset in the browser. Raw HTML in quiz text is not passed through.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from html import escape

from markdown_it import MarkdownIt

from quiz_taker.constants.ui_constants import PAGE_THEME, PAGE_TITLE
from quiz_taker.styling import Styles, Theme

_MATHJAX_SCRIPT = (
    "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"
)

# Display math first so $$...$$ is not read as two inline spans.
_MATH_SPAN = re.compile(r"\$\$.+?\$\$|\$[^\$\n]+?\$", re.DOTALL)
_MATH_TOKEN = "QTMATH{}QTMATH"
_MATH_TOKEN_PATTERN = re.compile(r"QTMATH(\d+)QTMATH")


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Converts markdown-with-math into HTML fragments or full documents."""

    enable_html: bool = False
    theme: Theme = PAGE_THEME
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a markdown string into a block-level HTML fragment."""

        sanitized = markdown_text.strip() or ""
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        protected, spans = _protect_math(sanitized)
        return _restore_math(self._markdown.render(protected), spans)

    def render_inline(self, markdown_text: str) -> str:
        """Render a single line (an option or an answer) without wrapping paragraphs."""

        protected, spans = _protect_math(markdown_text.strip())
        return _restore_math(self._markdown.renderInline(protected), spans)

    def wrap_page(self, body_html: str, title: str = PAGE_TITLE, script: str = "") -> str:
        """Wrap body HTML in a page that carries the theme CSS and loads MathJax."""

        script_block = f"<script>{script}</script>" if script else ""
        return f"""<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>{escape(title)}</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>{Styles.get_page_style(self.theme)}</style>
    <script>
      window.MathJax = {{ tex: {{ inlineMath: [['$','$']], displayMath: [['$$','$$']] }}, svg: {{ fontCache: 'global' }} }};
    </script>
    <script defer src=\"{_MATHJAX_SCRIPT}\"></script>
  </head>
  <body>
{body_html}
    {script_block}
  </body>
</html>"""


def _protect_math(text: str) -> tuple[str, list[str]]:
    """Swap math spans for placeholders so markdown emphasis cannot touch them."""
    spans: list[str] = []

    def stash(match: re.Match[str]) -> str:
        spans.append(match.group(0))
        return _MATH_TOKEN.format(len(spans) - 1)

    return _MATH_SPAN.sub(stash, text), spans


def _restore_math(html: str, spans: list[str]) -> str:
    if not spans:
        return html
    return _MATH_TOKEN_PATTERN.sub(lambda match: escape(spans[int(match.group(1))], quote=False), html)


# Shared instance; MarkdownIt is safe to reuse for read-only renders on the
# server's event loop.
renderer = MarkdownMathRenderer()
