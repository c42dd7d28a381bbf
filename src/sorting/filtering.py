"""Filtering engine: ``FilterCriteria`` -> record predicate.

A record passes when the text predicate, the date predicate and every extra
predicate hold. Absent parts are identity elements of the conjunction.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, List, Optional, Sequence, TypeVar

from .criteria import DateRange, FilterCriteria, RecordPredicate

__all__ = [
    "accept_all",
    "text_predicate",
    "date_predicate",
    "build_predicate",
    "filter_sequence",
]

T = TypeVar("T")


def accept_all(_record: Any) -> bool:
    return True


def text_predicate(fragment: Optional[str], *, search_answers: bool = False) -> RecordPredicate:
    """Case-insensitive substring match on title or body.

    Empty, absent or whitespace-only fragments accept every record.
    """
    if fragment is None or not fragment.strip():
        return accept_all
    needle = fragment.casefold()

    def _matches(record: Any) -> bool:
        if needle in (record.title or "").casefold():
            return True
        if needle in (record.text or "").casefold():
            return True
        if search_answers:
            return any(needle in (a or "").casefold() for a in getattr(record, "answers", ()))
        return False

    return _matches


def date_predicate(date_range: Optional[DateRange]) -> RecordPredicate:
    if date_range is None:
        return accept_all
    return lambda record: date_range.contains(record.created_at)


def _conjunction(predicates: Iterable[RecordPredicate]) -> RecordPredicate:
    active = tuple(p for p in predicates if p is not accept_all)
    if not active:
        return accept_all
    return lambda record: all(p(record) for p in active)


def build_predicate(criteria: Optional[FilterCriteria]) -> RecordPredicate:
    if criteria is None:
        return accept_all
    return _conjunction(
        (
            text_predicate(criteria.text, search_answers=criteria.search_answers),
            date_predicate(criteria.date_range),
            *criteria.extra_filters,
        )
    )


def filter_sequence(criteria: Optional[FilterCriteria]) -> Callable[[Sequence[T]], List[T]]:
    predicate = build_predicate(criteria)
    return lambda records: [r for r in records if predicate(r)]
