from datetime import timedelta

import pytest

from factories import T0, make_record, titles
from sorting.criteria import DateRange, FilterCriteria
from sorting.filtering import accept_all, build_predicate, date_predicate, filter_sequence, text_predicate


def test_empty_criteria_accepts_everything(records):
    pred = build_predicate(FilterCriteria(text=None, date_range=None, extra_filters=()))
    assert all(pred(r) for r in records)
    assert filter_sequence(FilterCriteria())(records) == records


@pytest.mark.parametrize("fragment", [None, "", "   "])
def test_blank_text_is_noop(fragment):
    assert text_predicate(fragment) is accept_all


def test_text_matches_title_case_insensitive(records):
    assert titles(filter_sequence(FilterCriteria(text="BRA"))(records)) == ["Bravo", "bravo"]


def test_text_matches_body(records):
    assert titles(filter_sequence(FilterCriteria(text="first letter"))(records)) == ["alpha"]


def test_text_answers_only_when_requested(records):
    assert filter_sequence(FilterCriteria(text="gamma"))(records) == []
    hits = filter_sequence(FilterCriteria(text="gamma", search_answers=True))(records)
    assert titles(hits) == ["Charlie"]


def test_date_range_is_inclusive(records):
    rng = DateRange(T0 + timedelta(days=1), T0 + timedelta(days=2))
    assert titles(filter_sequence(FilterCriteria(date_range=rng))(records)) == ["Bravo", "alpha"]


def test_single_instant_range_matches_exactly_that_instant(records):
    rng = DateRange(T0, T0)
    assert titles(filter_sequence(FilterCriteria(date_range=rng))(records)) == ["Charlie"]


def test_absent_range_accepts_all(records):
    assert date_predicate(None) is accept_all


def test_all_parts_are_conjoined(records):
    long_title = lambda r: len(r.title) > 5  # noqa: E731
    crit = FilterCriteria(
        text="a",
        date_range=DateRange(T0, T0 + timedelta(days=2)),
        extra_filters=(long_title,),
    )
    assert titles(filter_sequence(crit)(records)) == ["Charlie"]


def test_every_extra_predicate_must_hold():
    rows = [make_record("one", topic="x"), make_record("two", topic="y"), make_record("three", topic="x")]
    crit = FilterCriteria(
        extra_filters=(lambda r: r.topic == "x", lambda r: r.title.startswith("t"))
    )
    assert titles(filter_sequence(crit)(rows)) == ["three"]


def test_filter_preserves_input_order_and_does_not_mutate(records):
    snapshot = list(records)
    out = filter_sequence(FilterCriteria(text="b"))(records)
    assert records == snapshot
    assert titles(out) == ["Bravo", "bravo"]


def test_none_criteria_accepts_all(records):
    assert build_predicate(None) is accept_all
    assert filter_sequence(None)(records) == records
