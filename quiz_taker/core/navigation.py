"""Navigation context handed to a quiz session by the page that opened it."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlencode

from quiz_taker.constants.ui_constants import QUIZ_LISTING_URL, STUDENT_DASHBOARD_URL


@dataclass(slots=True)
class NavigationContext:
    """Quiz id from the query string plus the redirect primitive."""

    quiz_id: str
    listing_url: str = QUIZ_LISTING_URL
    dashboard_url: str = STUDENT_DASHBOARD_URL
    redirect_url: str | None = None
    message: str | None = None

    def redirect(self, url: str, message: str | None = None) -> None:
        self.redirect_url = url
        self.message = message

    def redirect_to_listing(self, message: str | None = None) -> None:
        self.redirect(self.listing_url, message)

    def redirect_target(self) -> str | None:
        """Return the redirect URL with the message appended as a query parameter."""
        if self.redirect_url is None:
            return None
        if not self.message:
            return self.redirect_url
        separator = "&" if "?" in self.redirect_url else "?"
        return f"{self.redirect_url}{separator}{urlencode({'message': self.message})}"
