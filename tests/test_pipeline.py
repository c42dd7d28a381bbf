from datetime import timedelta

import pytest

from factories import T0, make_record, titles
from sorting.criteria import DateRange, FilterCriteria, SortCriteria, SortDirection
from sorting.filtering import filter_sequence
from sorting.ordering import order
from sorting.pipeline import apply, apply_to


@pytest.mark.parametrize(
    "sort,flt",
    [
        (SortCriteria.by_title(), FilterCriteria(text="b")),
        (SortCriteria.by_date(SortDirection.DESCENDING), FilterCriteria()),
        (
            SortCriteria.by_title(SortDirection.DESCENDING),
            FilterCriteria(date_range=DateRange(T0, T0 + timedelta(days=2))),
        ),
        (SortCriteria.custom(lambda a, b: 0), FilterCriteria(extra_filters=(lambda r: r.topic == "",))),
    ],
)
def test_apply_equals_filter_then_order(sort, flt, records):
    assert apply(sort, flt)(records) == order(sort)(filter_sequence(flt)(records))


def test_end_to_end_scenario():
    rows = [make_record("Bravo", days=1), make_record("alpha", days=2)]
    assert titles(apply(SortCriteria.by_title(), None)(rows)) == ["alpha", "Bravo"]
    assert titles(apply(SortCriteria.by_title(SortDirection.DESCENDING), None)(rows)) == [
        "Bravo",
        "alpha",
    ]
    assert titles(apply(SortCriteria.by_title(), FilterCriteria(text="bra"))(rows)) == ["Bravo"]


def test_sort_runs_only_on_surviving_records():
    seen = []

    def spy(a, b):
        seen.extend([a.title, b.title])
        return (a.title > b.title) - (a.title < b.title)

    rows = [make_record("keep-b"), make_record("drop"), make_record("keep-a")]
    out = apply(SortCriteria.custom(spy), FilterCriteria(text="keep"))(rows)
    assert titles(out) == ["keep-a", "keep-b"]
    assert "drop" not in seen


def test_absent_inputs_are_noops(records):
    assert apply(None, None)(records) == records
    assert apply_to(None, SortCriteria.by_title(), FilterCriteria()) == []
    assert titles(apply_to(records, SortCriteria.by_date(), None)) == [
        "Charlie",
        "Bravo",
        "alpha",
        "bravo",
    ]
