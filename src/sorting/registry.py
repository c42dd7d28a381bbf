"""Registry of named comparators and record predicates.

Callables cannot be written to the durable store directly, so persisted
configurations refer to custom comparators and extra filters by name. The
registry maps names to callables in both directions.
"""

from __future__ import annotations

from threading import RLock
from typing import Dict, Optional

from .criteria import Comparator, RecordPredicate
from .errors import UnknownStrategyError

__all__ = ["StrategyRegistry", "registry"]


class StrategyRegistry:
    def __init__(self) -> None:
        self._lock = RLock()
        self._comparators: Dict[str, Comparator] = {}
        self._predicates: Dict[str, RecordPredicate] = {}

    def register_comparator(self, name: str, comparator: Comparator) -> Comparator:
        """Register ``comparator`` under ``name``. Overwrites an existing entry.

        Returns the comparator so the call can be used inline.
        """
        with self._lock:
            self._comparators[name] = comparator
        return comparator

    def register_predicate(self, name: str, predicate: RecordPredicate) -> RecordPredicate:
        with self._lock:
            self._predicates[name] = predicate
        return predicate

    def unregister(self, name: str) -> None:
        """Remove ``name`` from both tables; noop if missing."""
        with self._lock:
            self._comparators.pop(name, None)
            self._predicates.pop(name, None)

    def comparator(self, name: str) -> Comparator:
        with self._lock:
            try:
                return self._comparators[name]
            except KeyError:
                raise UnknownStrategyError(
                    f"comparator '{name}' is not registered", context={"name": name}
                ) from None

    def predicate(self, name: str) -> RecordPredicate:
        with self._lock:
            try:
                return self._predicates[name]
            except KeyError:
                raise UnknownStrategyError(
                    f"predicate '{name}' is not registered", context={"name": name}
                ) from None

    def comparator_name(self, comparator: Comparator) -> Optional[str]:
        with self._lock:
            for name, fn in self._comparators.items():
                if fn is comparator:
                    return name
        return None

    def predicate_name(self, predicate: RecordPredicate) -> Optional[str]:
        with self._lock:
            for name, fn in self._predicates.items():
                if fn is predicate:
                    return name
        return None

    def clear(self) -> None:
        with self._lock:
            self._comparators.clear()
            self._predicates.clear()


# Convenience singleton for application use
registry = StrategyRegistry()
