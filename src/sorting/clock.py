"""Clock abstraction used to timestamp events and configurations."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from threading import RLock
from typing import Protocol

__all__ = ["Clock", "SystemClock", "ManualClock", "system_clock"]


class Clock(Protocol):
    def now(self) -> datetime: ...  # pragma: no cover - structural


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class ManualClock:
    """Deterministic clock advanced explicitly (tests, replays)."""

    def __init__(self, start: datetime | None = None) -> None:
        self._lock = RLock()
        self._now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def advance(self, seconds: float = 1.0) -> datetime:
        with self._lock:
            self._now = self._now + timedelta(seconds=seconds)
            return self._now

    def set(self, instant: datetime) -> None:
        with self._lock:
            self._now = instant


system_clock = SystemClock()
