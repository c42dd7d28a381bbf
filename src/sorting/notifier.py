"""Criteria change notifier.

Synchronous publish/subscribe keyed by event kind (sorting changed, filter
changed). Events are frozen snapshots carrying the old and new criteria and
a timestamp taken from an injected clock.

Delivery guarantees:
 - observers run in registration order, before ``publish`` returns
 - each publish is delivered as a whole: a publish lock is held for the
   duration of one delivery, so concurrent publishers never interleave
 - a failing observer is recorded in ``errors`` and logged; later observers
   still receive the event
 - double subscription yields double delivery
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from threading import RLock
from typing import Dict, List, Optional, Protocol, Union

from .clock import Clock, system_clock
from .criteria import FilterCriteria, SortCriteria

__all__ = [
    "CriteriaEvent",
    "SortingChangeEvent",
    "FilterChangeEvent",
    "ChangeEvent",
    "Observer",
    "Subscription",
    "ChangeNotifier",
]

_log = logging.getLogger(__name__)


class CriteriaEvent(str, Enum):
    SORTING_CHANGED = "sorting_changed"
    FILTER_CHANGED = "filter_changed"


@dataclass(frozen=True)
class SortingChangeEvent:
    old_criteria: Optional[SortCriteria]
    new_criteria: SortCriteria
    timestamp: datetime

    kind = CriteriaEvent.SORTING_CHANGED

    @classmethod
    def create(
        cls, old: Optional[SortCriteria], new: SortCriteria, clock: Clock | None = None
    ) -> "SortingChangeEvent":
        return cls(old, new, (clock or system_clock).now())


@dataclass(frozen=True)
class FilterChangeEvent:
    old_criteria: Optional[FilterCriteria]
    new_criteria: FilterCriteria
    timestamp: datetime

    kind = CriteriaEvent.FILTER_CHANGED

    @classmethod
    def create(
        cls, old: Optional[FilterCriteria], new: FilterCriteria, clock: Clock | None = None
    ) -> "FilterChangeEvent":
        return cls(old, new, (clock or system_clock).now())


ChangeEvent = Union[SortingChangeEvent, FilterChangeEvent]


class Observer(Protocol):  # noqa: D401 - protocol signature docs implicit
    def __call__(self, event: ChangeEvent) -> None: ...  # pragma: no cover - structural


@dataclass
class Subscription:
    kind: CriteriaEvent
    handler: Observer
    once: bool = False
    active: bool = True

    def cancel(self) -> None:
        self.active = False


class ChangeNotifier:
    def __init__(self, clock: Clock | None = None) -> None:
        self.clock = clock or system_clock
        self._lock = RLock()
        # re-entrant so an observer may publish follow-up events
        self._publish_lock = RLock()
        self._subs: Dict[CriteriaEvent, List[Subscription]] = {}
        self._errors: List[tuple[ChangeEvent, BaseException]] = []

    # ------------------------------------------------------------------
    # Subscription management
    # ------------------------------------------------------------------
    def subscribe(
        self, kind: CriteriaEvent, handler: Observer, *, once: bool = False
    ) -> Subscription:
        sub = Subscription(kind=CriteriaEvent(kind), handler=handler, once=once)
        with self._lock:
            self._subs.setdefault(sub.kind, []).append(sub)
        return sub

    def unsubscribe(
        self, target: Union[Subscription, Observer], kind: CriteriaEvent | None = None
    ) -> None:
        """Remove a subscription, or every subscription of a handler.

        No-op when nothing matches.
        """
        with self._lock:
            if isinstance(target, Subscription):
                kinds = [target.kind]
            else:
                kinds = [CriteriaEvent(kind)] if kind is not None else list(self._subs)
            for key in kinds:
                bucket = self._subs.get(key)
                if not bucket:
                    continue
                keep = []
                for sub in bucket:
                    if sub is target or (not isinstance(target, Subscription) and sub.handler == target):
                        sub.active = False
                    else:
                        keep.append(sub)
                if keep:
                    self._subs[key] = keep
                else:
                    self._subs.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._subs.clear()
            self._errors.clear()

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------
    def publish(self, event: ChangeEvent) -> ChangeEvent:
        kind = event.kind
        with self._publish_lock:
            with self._lock:
                subs = list(self._subs.get(kind, ()))
            done_once: List[Subscription] = []
            for sub in subs:
                if not sub.active:
                    continue
                try:
                    sub.handler(event)
                except Exception as exc:  # noqa: BLE001 - isolate observer failures
                    _log.warning("observer %r failed on %s", sub.handler, kind.value, exc_info=True)
                    with self._lock:
                        self._errors.append((event, exc))
                if sub.once:
                    sub.active = False
                    done_once.append(sub)
            if done_once:
                with self._lock:
                    bucket = self._subs.get(kind)
                    if bucket:
                        remaining = [s for s in bucket if s not in done_once]
                        if remaining:
                            self._subs[kind] = remaining
                        else:
                            self._subs.pop(kind, None)
        return event

    def sorting_changed(
        self, old: Optional[SortCriteria], new: SortCriteria
    ) -> SortingChangeEvent:
        event = SortingChangeEvent.create(old, new, self.clock)
        self.publish(event)
        return event

    def filter_changed(
        self, old: Optional[FilterCriteria], new: FilterCriteria
    ) -> FilterChangeEvent:
        event = FilterChangeEvent.create(old, new, self.clock)
        self.publish(event)
        return event

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def subscriber_count(self, kind: CriteriaEvent) -> int:
        with self._lock:
            return len(self._subs.get(CriteriaEvent(kind), ()))

    @property
    def errors(self) -> list[tuple[ChangeEvent, BaseException]]:
        with self._lock:
            return list(self._errors)
