"""Diagnostics log for degraded conditions in the sorting core.

``load`` never raises for a missing or corrupt stored configuration, failed
background writes surface only on their futures, and failing observers are
isolated by the notifier. Each of these is reported through ``logging``
under the ``sorting`` logger hierarchy; ``DiagnosticsLog`` captures those
records into a bounded buffer so the host application can show them.

``create_sorting_service`` attaches one before the stored configuration is
first read and exposes it as ``SortingService.diagnostics``.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from threading import RLock
from typing import Deque, List, Optional

from config.settings import DEFAULT_DIAGNOSTICS_CAPACITY

__all__ = ["Diagnostic", "DiagnosticsLog"]


@dataclass(frozen=True)
class Diagnostic:
    level: str
    source: str
    message: str
    timestamp: datetime

    @property
    def is_error(self) -> bool:
        return self.level in ("ERROR", "CRITICAL")


class _CaptureHandler(logging.Handler):
    def __init__(self, sink: "DiagnosticsLog", level: int) -> None:
        super().__init__(level)
        self._sink = sink

    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401
        self._sink._capture(
            Diagnostic(
                level=record.levelname,
                source=record.name,
                message=record.getMessage(),
                timestamp=datetime.fromtimestamp(record.created, timezone.utc),
            )
        )


class DiagnosticsLog:
    """Bounded capture of ``sorting.*`` log records at or above ``level``."""

    def __init__(
        self,
        capacity: int = DEFAULT_DIAGNOSTICS_CAPACITY,
        *,
        level: int = logging.WARNING,
        logger_name: str = "sorting",
    ) -> None:
        self.level = level
        self._logger = logging.getLogger(logger_name)
        self._lock = RLock()
        self._buffer: Deque[Diagnostic] = deque(maxlen=capacity)
        self._handler = _CaptureHandler(self, level)
        self._saved_level: Optional[int] = None

    @property
    def attached(self) -> bool:
        return self._saved_level is not None

    def attach(self) -> "DiagnosticsLog":
        if self.attached:
            return self
        self._saved_level = self._logger.level
        self._logger.addHandler(self._handler)
        if self._logger.getEffectiveLevel() > self.level:
            self._logger.setLevel(self.level)
        return self

    def detach(self) -> None:
        if not self.attached:
            return
        self._logger.removeHandler(self._handler)
        self._logger.setLevel(self._saved_level)  # type: ignore[arg-type]
        self._saved_level = None

    def __enter__(self) -> "DiagnosticsLog":
        return self.attach()

    def __exit__(self, *exc_info) -> None:
        self.detach()

    def _capture(self, diagnostic: Diagnostic) -> None:
        with self._lock:
            self._buffer.append(diagnostic)

    def entries(self, *, source: str | None = None, errors_only: bool = False) -> List[Diagnostic]:
        """Captured diagnostics, oldest first.

        ``source`` matches a logger name prefix such as ``"sorting.config_store"``.
        """
        with self._lock:
            snapshot = list(self._buffer)
        return [
            d
            for d in snapshot
            if (source is None or d.source.startswith(source)) and (not errors_only or d.is_error)
        ]

    def latest(self) -> Optional[Diagnostic]:
        with self._lock:
            return self._buffer[-1] if self._buffer else None

    def drain(self) -> List[Diagnostic]:
        """Return everything captured so far and empty the buffer."""
        with self._lock:
            drained = list(self._buffer)
            self._buffer.clear()
        return drained

    def write_jsonl(self, path: str) -> int:
        entries = self.entries()
        with open(path, "w", encoding="utf-8") as f:
            for d in entries:
                row = asdict(d)
                row["timestamp"] = d.timestamp.isoformat()
                f.write(json.dumps(row, sort_keys=True) + "\n")
        return len(entries)
