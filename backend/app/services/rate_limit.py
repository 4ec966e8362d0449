from __future__ import annotations

import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Mapping

from app.exceptions import RateLimitExceeded
from app.utils.logging import get_logger

logger = get_logger("rentals.rate_limit")


@dataclass
class _Window:
    count: int
    started_at: float


class RateLimiter:
    """
    Fixed-window request budget per (identity, route class), per process.

    Production note: state is not shared between instances, so each replica
    enforces its own budget.
    """

    def __init__(
        self,
        budgets: Mapping[str, int],
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._budgets = dict(budgets)
        self._window_seconds = float(window_seconds)
        self._clock = clock
        self._lock = Lock()
        self._windows: dict[tuple[str, str], _Window] = {}

    def check(self, identity: str, route_class: str) -> None:
        limit = self._budgets[route_class]
        now = self._clock()
        key = (identity, route_class)
        with self._lock:
            window = self._windows.get(key)
            if window is None or now - window.started_at >= self._window_seconds:
                self._prune(now)
                window = _Window(count=0, started_at=now)
                self._windows[key] = window
            window.count += 1
            exceeded = window.count > limit

        if exceeded:
            logger.warning("rate_limit_exceeded", identity=identity, route_class=route_class, limit=limit)
            raise RateLimitExceeded()

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def _prune(self, now: float) -> None:
        # Called with the lock held, only when a new window opens.
        elapsed = [key for key, w in self._windows.items() if now - w.started_at >= self._window_seconds]
        for key in elapsed:
            del self._windows[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)
