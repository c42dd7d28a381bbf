"""Sorting service facade.

Keeps the current sort/filter criteria pair for a record view, restores it
from the configuration store at construction and persists it after every
change when ``remember_last_sort`` is enabled. On every change the
in-memory pair is replaced first, so observers already see the new criteria,
then the event is published, then the configuration is saved. The store
itself never publishes.
"""

from __future__ import annotations

import logging
import os
from threading import RLock
from typing import List, Optional, Sequence, TypeVar

from config.settings import CONFIG_KEY, SQLITE_FILENAME, SortingSettings

from .backends import JsonFileBackend, KeyValueBackend, MemoryBackend, SqliteBackend
from .clock import Clock, system_clock
from .config_store import SortingConfigStore
from .criteria import FilterCriteria, SortCriteria, SortingConfiguration
from .diagnostics import DiagnosticsLog
from .errors import SaveFailure
from .notifier import ChangeNotifier
from .pipeline import apply
from .registry import StrategyRegistry

__all__ = ["SortingService", "create_backend", "create_sorting_service"]

_log = logging.getLogger(__name__)

T = TypeVar("T")


class SortingService:
    """Current criteria pair for a record view.

    When the stored configuration was saved with ``remember_last_sort`` off,
    the service starts from the default criteria and only keeps the flag.
    """

    def __init__(
        self,
        store: SortingConfigStore,
        notifier: ChangeNotifier | None = None,
        *,
        clock: Clock | None = None,
        background_writes: bool = False,
        diagnostics: DiagnosticsLog | None = None,
    ) -> None:
        self.store = store
        self.clock = clock or system_clock
        self.notifier = notifier or ChangeNotifier(self.clock)
        self.background_writes = background_writes
        self.diagnostics = diagnostics
        self._lock = RLock()
        loaded = store.load()
        if not loaded.remember_last_sort and not loaded.is_default():
            loaded = SortingConfiguration.default(self.clock)
        self._config = loaded

    # Accessors ---------------------------------------------------------
    @property
    def current_configuration(self) -> SortingConfiguration:
        with self._lock:
            return self._config

    @property
    def current_sort_criteria(self) -> SortCriteria:
        return self.current_configuration.sort

    @property
    def current_filter_criteria(self) -> FilterCriteria:
        return self.current_configuration.filter

    def apply(self, records: Optional[Sequence[T]]) -> List[T]:
        """Filter then sort ``records`` with the current criteria."""
        if records is None:
            return []
        config = self.current_configuration
        return apply(config.sort, config.filter)(records)

    # Mutations ---------------------------------------------------------
    def update_sort_criteria(self, criteria: Optional[SortCriteria]) -> None:
        """Switch to ``criteria``; absent criteria leave the view unchanged."""
        if criteria is None:
            return
        with self._lock:
            old = self._config.sort
            self._swap(sort=criteria)
            self.notifier.sorting_changed(old, criteria)
            self._persist_current()

    def update_filter_criteria(self, criteria: Optional[FilterCriteria]) -> None:
        criteria = criteria or FilterCriteria.empty()
        with self._lock:
            old = self._config.filter
            self._swap(filter=criteria)
            self.notifier.filter_changed(old, criteria)
            self._persist_current()

    def toggle_sort_direction(self) -> SortCriteria:
        with self._lock:
            toggled = self._config.sort.toggled()
            self.update_sort_criteria(toggled)
            return toggled

    def set_remember_last_sort(self, remember: bool) -> None:
        with self._lock:
            self._swap(remember_last_sort=remember)
            self._persist(self._config)

    def _swap(
        self,
        *,
        sort: SortCriteria | None = None,
        filter: FilterCriteria | None = None,  # noqa: A002
        remember_last_sort: bool | None = None,
    ) -> None:
        current = self._config
        self._config = SortingConfiguration(
            sort=sort if sort is not None else current.sort,
            filter=filter if filter is not None else current.filter,
            remember_last_sort=(
                remember_last_sort if remember_last_sort is not None else current.remember_last_sort
            ),
            created_at=self.clock.now(),
        )

    def _persist_current(self) -> None:
        if self._config.remember_last_sort:
            self._persist(self._config)

    def _persist(self, config: SortingConfiguration) -> None:
        if self.background_writes:
            self.store.save_async(config)
            return
        try:
            self.store.save(config)
        except SaveFailure:
            _log.warning("sorting preferences were not persisted; continuing with in-memory state")
            raise

    def close(self) -> None:
        try:
            self.store.close()
        finally:
            if self.diagnostics is not None:
                self.diagnostics.detach()


def create_backend(settings: SortingSettings) -> KeyValueBackend:
    if settings.backend == "memory":
        return MemoryBackend()
    if settings.backend == "sqlite":
        os.makedirs(settings.data_dir, exist_ok=True)
        return SqliteBackend(os.path.join(settings.data_dir, SQLITE_FILENAME))
    if settings.backend == "json":
        return JsonFileBackend(settings.data_dir)
    raise ValueError(f"unknown backend '{settings.backend}'")


def create_sorting_service(
    settings: SortingSettings | None = None,
    *,
    registry: StrategyRegistry | None = None,
    clock: Clock | None = None,
) -> SortingService:
    """Wire backend, store, notifier and service from ``settings``."""
    settings = settings or SortingSettings.instance
    # attached first so a degraded initial load is captured
    diagnostics = DiagnosticsLog(settings.diagnostics_capacity).attach()
    store = SortingConfigStore(
        create_backend(settings), key=CONFIG_KEY, registry=registry, clock=clock
    )
    return SortingService(
        store,
        ChangeNotifier(clock),
        clock=clock,
        background_writes=settings.background_writes,
        diagnostics=diagnostics,
    )
