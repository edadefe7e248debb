"""Identity lookup for incoming requests.

Sign-in happens elsewhere; by the time a quiz page is requested the auth
service has set a cookie carrying the user id. This module only reads it.
"""

from __future__ import annotations

from typing import Protocol

from fastapi import Request

from quiz_taker.constants.ui_constants import USER_ID_COOKIE


class IdentityProvider(Protocol):
    def current_user_id(self, request: Request) -> str | None: ...


class CookieIdentityProvider:
    """Reads the signed-in user id from a cookie."""

    def __init__(self, cookie_name: str = USER_ID_COOKIE) -> None:
        self._cookie_name = cookie_name

    def current_user_id(self, request: Request) -> str | None:
        value = request.cookies.get(self._cookie_name)
        if not value:
            return None
        value = value.strip()
        return value or None
