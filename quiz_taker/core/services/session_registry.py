"""Service for tracking the open quiz sessions of the running server."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from uuid import uuid4

from quiz_taker.core.quiz_session import QuizSessionController

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Maps session ids to controllers. Each browser tab owns one session.

    Every successful lookup counts as activity. Sessions whose page stopped
    polling (a closed tab that never sent its close beacon) are torn down by
    ``evict_idle``, which also stops their countdown.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._sessions: dict[str, QuizSessionController] = {}
        self._last_seen: dict[str, float] = {}

    def register(self, controller: QuizSessionController) -> str:
        session_id = uuid4().hex
        self._sessions[session_id] = controller
        self._last_seen[session_id] = self._clock()
        return session_id

    def get(self, session_id: str, taker_id: str | None = None) -> QuizSessionController | None:
        """Return the session, but only to the taker that opened it."""
        controller = self._sessions.get(session_id)
        if controller is None:
            return None
        if taker_id is not None and controller.taker_id != taker_id:
            return None
        self._last_seen[session_id] = self._clock()
        return controller

    def close(self, session_id: str) -> bool:
        controller = self._sessions.pop(session_id, None)
        self._last_seen.pop(session_id, None)
        if controller is None:
            return False
        controller.teardown()
        return True

    def evict_idle(self, max_idle_seconds: float) -> list[str]:
        """Close every session not looked up within ``max_idle_seconds``."""
        now = self._clock()
        stale = [
            session_id
            for session_id, last_seen in self._last_seen.items()
            if now - last_seen >= max_idle_seconds
        ]
        for session_id in stale:
            logger.info("Evicting idle quiz session %s.", session_id)
            self.close(session_id)
        return stale

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.close(session_id)

    def __len__(self) -> int:
        return len(self._sessions)
