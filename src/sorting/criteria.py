"""Immutable value types describing how a record view is ordered and filtered.

``SortCriteria`` says *how to order* (field + direction), ``FilterCriteria``
says *what to include* (text fragment, date window, extra predicates), and
``SortingConfiguration`` bundles the pair into the unit of persistence.
All types are frozen dataclasses and may be shared freely between threads.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Iterable, Optional, Tuple

from .clock import Clock, system_clock
from .errors import InvalidRangeError

__all__ = [
    "Comparator",
    "RecordPredicate",
    "SortDirection",
    "SortType",
    "SortCriteria",
    "DateRange",
    "FilterCriteria",
    "SortingConfiguration",
]

Comparator = Callable[[Any, Any], int]
RecordPredicate = Callable[[Any], bool]


class SortDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"

    def toggle(self) -> "SortDirection":
        return SortDirection.DESCENDING if self is SortDirection.ASCENDING else SortDirection.ASCENDING

    @property
    def alphabetical_label(self) -> str:
        return "A→Z" if self is SortDirection.ASCENDING else "Z→A"

    @property
    def date_label(self) -> str:
        return "Earliest→Latest" if self is SortDirection.ASCENDING else "Latest→Earliest"


class SortType(str, Enum):
    TITLE = "title"
    DATE = "date"
    CUSTOM = "custom"


@dataclass(frozen=True)
class SortCriteria:
    type: SortType = SortType.TITLE
    direction: SortDirection = SortDirection.ASCENDING
    comparator: Optional[Comparator] = None

    def __post_init__(self) -> None:
        if self.type is SortType.CUSTOM and self.comparator is None:
            raise ValueError("custom sort criteria require a comparator")

    @classmethod
    def by_title(cls, direction: SortDirection = SortDirection.ASCENDING) -> "SortCriteria":
        return cls(SortType.TITLE, direction)

    @classmethod
    def by_date(cls, direction: SortDirection = SortDirection.ASCENDING) -> "SortCriteria":
        return cls(SortType.DATE, direction)

    @classmethod
    def custom(
        cls, comparator: Comparator, direction: SortDirection = SortDirection.ASCENDING
    ) -> "SortCriteria":
        return cls(SortType.CUSTOM, direction, comparator)

    def with_direction(self, direction: SortDirection) -> "SortCriteria":
        return replace(self, direction=direction)

    def toggled(self) -> "SortCriteria":
        return self.with_direction(self.direction.toggle())

    @property
    def label(self) -> str:
        if self.type is SortType.DATE:
            return self.direction.date_label
        if self.type is SortType.TITLE:
            return self.direction.alphabetical_label
        return self.direction.value


@dataclass(frozen=True)
class DateRange:
    """Inclusive ``[start, end]`` window over creation instants.

    Naive bounds are read as UTC, matching ``QuizRecord``.
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        for name in ("start", "end"):
            value = getattr(self, name)
            if value.tzinfo is None:
                object.__setattr__(self, name, value.replace(tzinfo=timezone.utc))
        if self.start > self.end:
            raise InvalidRangeError(
                "date range start is after end",
                context={"start": self.start.isoformat(), "end": self.end.isoformat()},
            )

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end


@dataclass(frozen=True)
class FilterCriteria:
    """Conjunction of an optional text fragment, date window and extra predicates.

    ``extra_filters`` is always a tuple; passing ``None`` or a list is
    normalised so callers never observe a missing collection.
    ``search_answers`` extends the text match to a record's answer strings.
    """

    text: Optional[str] = None
    date_range: Optional[DateRange] = None
    extra_filters: Tuple[RecordPredicate, ...] = ()
    search_answers: bool = False

    def __post_init__(self) -> None:
        extras: Iterable[RecordPredicate] = self.extra_filters or ()
        object.__setattr__(self, "extra_filters", tuple(extras))

    @classmethod
    def empty(cls) -> "FilterCriteria":
        return cls()

    @property
    def has_text(self) -> bool:
        return bool(self.text and self.text.strip())

    @property
    def is_empty(self) -> bool:
        return not self.has_text and self.date_range is None and not self.extra_filters

    def with_text(self, text: Optional[str]) -> "FilterCriteria":
        return replace(self, text=text)

    def with_date_range(self, date_range: Optional[DateRange]) -> "FilterCriteria":
        return replace(self, date_range=date_range)

    def with_extra(self, *predicates: RecordPredicate) -> "FilterCriteria":
        return replace(self, extra_filters=self.extra_filters + tuple(predicates))


@dataclass(frozen=True)
class SortingConfiguration:
    sort: SortCriteria = field(default_factory=SortCriteria.by_title)
    filter: FilterCriteria = field(default_factory=FilterCriteria.empty)
    remember_last_sort: bool = False
    created_at: datetime = field(default_factory=system_clock.now)

    @classmethod
    def default(cls, clock: Clock | None = None) -> "SortingConfiguration":
        """Title/ascending order, no filtering, ``remember_last_sort`` off."""
        return cls(
            sort=SortCriteria.by_title(),
            filter=FilterCriteria.empty(),
            remember_last_sort=False,
            created_at=(clock or system_clock).now(),
        )

    def is_default(self) -> bool:
        return (
            self.sort == SortCriteria.by_title()
            and self.filter == FilterCriteria.empty()
            and not self.remember_last_sort
        )
