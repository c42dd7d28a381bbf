"""Ordering engine.

Turns a ``SortCriteria`` into a function over a sequence of records. The
returned function never mutates its input and hands back a new list holding
the same record objects. Sorting is stable for every criteria type:

- title / date orderings use ``sorted(..., reverse=...)``, which keeps equal
  elements in input order in both directions;
- custom orderings negate the comparator result for descending order rather
  than reversing the output, which would flip ties.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Callable, List, Optional, Sequence, TypeVar

from .criteria import Comparator, SortCriteria, SortDirection, SortType

__all__ = ["Ordering", "order", "title_key", "date_key", "sort_by_title", "sort_by_date", "sort_custom"]

T = TypeVar("T")
Ordering = Callable[[Sequence[T]], List[T]]


def title_key(record: Any) -> str:
    return (record.title or "").casefold()


def date_key(record: Any) -> Any:
    return record.created_at


def sort_by_title(direction: SortDirection) -> Ordering:
    descending = direction is SortDirection.DESCENDING
    return lambda records: sorted(records, key=title_key, reverse=descending)


def sort_by_date(direction: SortDirection) -> Ordering:
    descending = direction is SortDirection.DESCENDING
    return lambda records: sorted(records, key=date_key, reverse=descending)


def sort_custom(comparator: Comparator, direction: SortDirection) -> Ordering:
    if direction is SortDirection.DESCENDING:
        cmp: Comparator = lambda a, b: -comparator(a, b)
    else:
        cmp = comparator
    key = cmp_to_key(cmp)
    return lambda records: sorted(records, key=key)


def order(criteria: Optional[SortCriteria]) -> Ordering:
    """Return the ordering function described by ``criteria``.

    ``None`` yields an identity reorder (a shallow copy of the input).
    """
    if criteria is None:
        return lambda records: list(records)
    if criteria.type is SortType.TITLE:
        return sort_by_title(criteria.direction)
    if criteria.type is SortType.DATE:
        return sort_by_date(criteria.direction)
    return sort_custom(criteria.comparator, criteria.direction)  # type: ignore[arg-type]
