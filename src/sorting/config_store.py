"""Configuration store for the last-used sorting configuration.

Holds one slot (the most recently saved ``SortingConfiguration``) backed by a
durable key/value backend under a single well-known key.

Design principles:
- Overwrite semantics: saving replaces the previous value, no history.
- ``load`` never raises for a missing or corrupt value; it logs a diagnostic,
  quarantines the bad blob and returns the default configuration.
- ``save`` updates the in-memory slot first, so same-process readers see the
  new value even when the durable write fails; the failure is raised as
  ``SaveFailure``.
- ``save_async`` dispatches the durable write to a single worker thread.
  Writes are applied in submission order; a write overtaken by a newer save
  is skipped so the backend always ends on the latest slot value.
- The store never publishes change events; callers emit them.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from threading import RLock
from typing import List, Optional

from config.settings import CONFIG_KEY, DEFAULT_WRITE_WORKERS

from .backends import KeyValueBackend
from .clock import Clock, system_clock
from .criteria import SortingConfiguration
from .errors import PersistenceError, SaveFailure
from .registry import StrategyRegistry, registry as default_registry
from .serialization import dumps, loads

__all__ = ["SortingConfigStore"]

_log = logging.getLogger(__name__)


class SortingConfigStore:
    def __init__(
        self,
        backend: KeyValueBackend,
        *,
        key: str = CONFIG_KEY,
        registry: StrategyRegistry | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.backend = backend
        self.key = key
        self.registry = registry or default_registry
        self._clock = clock or system_clock
        self._lock = RLock()
        self._write_lock = RLock()
        self._staged_seq = 0
        self._written_seq = 0
        self._slot: Optional[SortingConfiguration] = None
        self._executor: Optional[ThreadPoolExecutor] = None
        self._pending: List[Future] = []

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def default(self) -> SortingConfiguration:
        return SortingConfiguration.default(self._clock)

    def load(self) -> SortingConfiguration:
        """Return the last saved configuration or the default one."""
        with self._lock:
            if self._slot is not None:
                return self._slot
            try:
                blob = self.backend.read(self.key)
                if blob is None:
                    _log.debug("no persisted sorting configuration under '%s'", self.key)
                    return self.default()
                config = loads(blob, self.registry)
            except PersistenceError as exc:
                _log.warning(
                    "sorting configuration under '%s' is unreadable, using defaults: %s",
                    self.key,
                    exc,
                )
                self._quarantine()
                return self.default()
            self._slot = config
            return config

    def _quarantine(self) -> None:
        try:
            self.backend.quarantine(self.key)
        except Exception:  # noqa: BLE001 - diagnostics only
            _log.debug("could not quarantine '%s'", self.key, exc_info=True)

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------
    def _stage(self, config: SortingConfiguration) -> int:
        # slot and sequence advance together; writes older than the last
        # durable one are dropped in _write
        with self._lock:
            self._slot = config
            self._staged_seq += 1
            return self._staged_seq

    def _write(self, blob: str, seq: int) -> None:
        with self._write_lock:
            if seq < self._written_seq:
                _log.debug("skipping stale write #%d of '%s'", seq, self.key)
                return
            self.backend.write(self.key, blob)
            self._written_seq = seq

    def save(self, config: SortingConfiguration) -> None:
        """Replace the stored configuration and write it durably.

        The slot update and the durable write happen under one lock, so
        concurrent saves leave slot and backend holding the same value.

        Raises
        ------
        SaveFailure
            When the backend write fails. The in-memory slot already holds
            ``config`` at that point.
        """
        blob = dumps(config, self.registry)
        with self._write_lock:
            seq = self._stage(config)
            try:
                self._write(blob, seq)
            except SaveFailure:
                _log.error("failed to persist sorting configuration under '%s'", self.key)
                raise
        _log.debug("sorting configuration saved under '%s'", self.key)

    def save_async(self, config: SortingConfiguration) -> Future:
        """Update the slot now and persist on the background writer.

        The returned future raises ``SaveFailure`` from ``result()`` when the
        durable write fails. A write overtaken by a newer ``save`` is skipped.
        """
        blob = dumps(config, self.registry)
        with self._lock:
            seq = self._stage(config)
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=DEFAULT_WRITE_WORKERS, thread_name_prefix="sorting-config"
                )
            future = self._executor.submit(self._write_logged, blob, seq)
            self._pending = [f for f in self._pending if not f.done()]
            self._pending.append(future)
        return future

    def _write_logged(self, blob: str, seq: int) -> None:
        try:
            self._write(blob, seq)
        except SaveFailure:
            _log.error("background write of '%s' failed", self.key, exc_info=True)
            raise

    def flush(self, timeout: float | None = None) -> None:
        """Wait for pending background writes.

        Raises the first ``SaveFailure`` among them, if any.
        """
        with self._lock:
            pending = list(self._pending)
            self._pending.clear()
        first_error: Optional[BaseException] = None
        for future in pending:
            exc = future.exception(timeout=timeout)
            if exc is not None and first_error is None:
                first_error = exc
        if first_error is not None:
            raise first_error

    def close(self) -> None:
        try:
            self.flush()
        finally:
            with self._lock:
                executor, self._executor = self._executor, None
            if executor is not None:
                executor.shutdown(wait=True)

    def __enter__(self) -> "SortingConfigStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def cached(self) -> Optional[SortingConfiguration]:
        with self._lock:
            return self._slot
