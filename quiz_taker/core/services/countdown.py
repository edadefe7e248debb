"""Owned, cancellable one-second countdown for a timed quiz."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from quiz_taker.constants.quiz_constants import TIMER_TICK_SECONDS


class Countdown:
    """Counts down whole seconds and calls ``on_tick`` after each one.

    The countdown owns at most one asyncio task. ``advance`` does the actual
    decrement so the session decides what a tick means; the task only paces
    the ticks. ``cancel`` never interrupts a tick that is already running,
    whichever task calls it: work started by ``on_tick`` (a result write)
    finishes and the loop stops afterwards. Between ticks the task is
    cancelled outright.
    """

    def __init__(
        self,
        total_seconds: int,
        on_tick: Callable[[], Awaitable[None]],
        interval_seconds: float = TIMER_TICK_SECONDS,
    ) -> None:
        if total_seconds <= 0:
            raise ValueError("Countdown length must be a positive number of seconds.")
        self._total_seconds = total_seconds
        self._remaining_seconds = total_seconds
        self._on_tick = on_tick
        self._interval_seconds = interval_seconds
        self._task: asyncio.Task[None] | None = None
        self._cancelled = False
        self._in_tick = False

    @property
    def total_seconds(self) -> int:
        return self._total_seconds

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    def is_expired(self) -> bool:
        return self._remaining_seconds == 0

    def is_cancelled(self) -> bool:
        return self._cancelled

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done() and not self._cancelled

    def start(self) -> None:
        if self._task is not None:
            raise RuntimeError("Countdown has already been started.")
        if self._cancelled:
            raise RuntimeError("Countdown has been cancelled.")
        self._task = asyncio.get_running_loop().create_task(self._run(), name="quiz-countdown")

    def advance(self) -> int:
        """Remove one second and return what is left (never below zero)."""
        if self._remaining_seconds > 0:
            self._remaining_seconds -= 1
        return self._remaining_seconds

    def cancel(self) -> None:
        self._cancelled = True
        task = self._task
        if task is None or task.done() or self._in_tick:
            return
        task.cancel()

    async def wait(self) -> None:
        """Wait for the ticking task to finish, however it ends."""
        if self._task is not None:
            await asyncio.wait({self._task})

    async def _run(self) -> None:
        while not self._cancelled and self._remaining_seconds > 0:
            await asyncio.sleep(self._interval_seconds)
            if self._cancelled:
                break
            self._in_tick = True
            try:
                await self._on_tick()
            finally:
                self._in_tick = False
