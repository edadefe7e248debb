"""Light and dark colours for the quiz pages, exposed as CSS custom properties."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Theme(Enum):
    """Page theme options."""
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True, slots=True)
class ThemeColors:
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Named colour roles used by the page stylesheet.

    Each role becomes a ``--qt-<role>`` custom property so the stylesheet
    refers to roles rather than hex values.
    """

    PAGE_TEXT = ThemeColors(light="#1E293B", dark="#F5F7FF")
    MUTED_TEXT = ThemeColors(light="#64748B", dark="#94A3B8")
    PAGE_BACKGROUND = ThemeColors(light="#F8FAFC", dark="#0B1120")
    CARD_BACKGROUND = ThemeColors(light="#FFFFFF", dark="#111A30")
    CARD_BORDER = ThemeColors(light="#D1D5DB", dark="#334155")

    # Submit button and option letters
    ACTION = ThemeColors(light="#0078D4", dark="#1F9AA5")
    ACTION_HOVER = ThemeColors(light="#005A9E", dark="#16808A")

    # Timer levels
    TIMER_WARNING = ThemeColors(light="#B7791F", dark="#FACC15")
    TIMER_DANGER = ThemeColors(light="#D13438", dark="#FF6B6B")

    # Result review and feedback tiers
    ANSWER_CORRECT = ThemeColors(light="#107C10", dark="#6FCF6F")
    ANSWER_INCORRECT = ThemeColors(light="#D13438", dark="#FF6B6B")
    TIER_TOP = ThemeColors(light="#107C10", dark="#6FCF6F")
    TIER_MIDDLE = ThemeColors(light="#B7791F", dark="#FACC15")
    TIER_BOTTOM = ThemeColors(light="#D13438", dark="#FF6B6B")

    @classmethod
    def roles(cls) -> dict[str, ThemeColors]:
        return {name: value for name, value in vars(cls).items() if isinstance(value, ThemeColors)}

    @classmethod
    def css_variables(cls, theme: Theme) -> str:
        """Return a ``:root`` block declaring every role for ``theme``."""
        declarations = "\n".join(
            f"  --qt-{name.lower().replace('_', '-')}: {colors.get(theme)};"
            for name, colors in cls.roles().items()
        )
        return f":root {{\n{declarations}\n}}"
