"""Combinator composing filtering and ordering into one pipeline.

The pipeline order is fixed: filter first, then sort, so ordering only
touches surviving records and stability is computed on exactly that set.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, TypeVar

from .criteria import FilterCriteria, SortCriteria
from .filtering import filter_sequence
from .ordering import order

__all__ = ["apply", "apply_to"]

T = TypeVar("T")


def apply(
    sort: Optional[SortCriteria], filter: Optional[FilterCriteria]  # noqa: A002
) -> Callable[[Sequence[T]], List[T]]:
    keep = filter_sequence(filter)
    arrange = order(sort)
    return lambda records: arrange(keep(records))


def apply_to(
    records: Optional[Sequence[T]],
    sort: Optional[SortCriteria],
    filter: Optional[FilterCriteria],  # noqa: A002
) -> List[T]:
    """One-shot form of :func:`apply`; absent input yields an empty list."""
    if records is None:
        return []
    return apply(sort, filter)(records)
