import dataclasses
from datetime import timedelta

import pytest

from factories import T0
from sorting.clock import ManualClock
from sorting.criteria import (
    DateRange,
    FilterCriteria,
    SortCriteria,
    SortDirection,
    SortingConfiguration,
    SortType,
)
from sorting.errors import InvalidRangeError


@pytest.mark.parametrize("direction", list(SortDirection))
def test_toggle_is_involution(direction):
    assert direction.toggle() != direction
    assert direction.toggle().toggle() == direction


def test_direction_labels():
    assert SortDirection.ASCENDING.alphabetical_label == "A→Z"
    assert SortDirection.DESCENDING.date_label == "Latest→Earliest"
    assert SortCriteria.by_date(SortDirection.ASCENDING).label == "Earliest→Latest"
    assert SortCriteria.by_title(SortDirection.DESCENDING).label == "Z→A"


def test_custom_criteria_requires_comparator():
    with pytest.raises(ValueError):
        SortCriteria(SortType.CUSTOM, SortDirection.ASCENDING)


def test_sort_criteria_is_immutable():
    crit = SortCriteria.by_title()
    with pytest.raises(dataclasses.FrozenInstanceError):
        crit.direction = SortDirection.DESCENDING  # type: ignore[misc]
    toggled = crit.toggled()
    assert crit.direction is SortDirection.ASCENDING
    assert toggled.direction is SortDirection.DESCENDING
    assert toggled.type is SortType.TITLE


def test_toggled_keeps_custom_comparator():
    def cmp(a, b):
        return 0

    crit = SortCriteria.custom(cmp)
    assert crit.toggled().comparator is cmp


def test_date_range_rejects_inverted_bounds():
    with pytest.raises(InvalidRangeError) as info:
        DateRange(T0 + timedelta(seconds=1), T0)
    assert isinstance(info.value, ValueError)
    assert "start" in info.value.context


def test_date_range_single_instant_is_valid():
    rng = DateRange(T0, T0)
    assert rng.contains(T0)
    assert not rng.contains(T0 + timedelta(microseconds=1))
    assert not rng.contains(T0 - timedelta(microseconds=1))


def test_filter_criteria_extra_filters_never_absent():
    assert FilterCriteria(extra_filters=None).extra_filters == ()  # type: ignore[arg-type]
    pred = lambda r: True  # noqa: E731
    crit = FilterCriteria(extra_filters=[pred])  # type: ignore[arg-type]
    assert crit.extra_filters == (pred,)
    assert isinstance(crit.extra_filters, tuple)


def test_filter_criteria_is_empty():
    assert FilterCriteria().is_empty
    assert FilterCriteria(text="   ").is_empty
    assert not FilterCriteria(text="x").is_empty
    assert not FilterCriteria(date_range=DateRange(T0, T0)).is_empty
    assert not FilterCriteria().with_extra(lambda r: True).is_empty


def test_filter_criteria_builders_return_new_instances():
    base = FilterCriteria.empty()
    with_text = base.with_text("bra")
    assert base.text is None
    assert with_text.text == "bra"
    assert with_text.with_date_range(DateRange(T0, T0)).date_range == DateRange(T0, T0)


def test_default_configuration():
    clock = ManualClock(T0)
    cfg = SortingConfiguration.default(clock)
    assert cfg.sort == SortCriteria(SortType.TITLE, SortDirection.ASCENDING)
    assert cfg.filter == FilterCriteria()
    assert cfg.remember_last_sort is False
    assert cfg.created_at == T0
    assert cfg.is_default()


def test_naive_range_bounds_are_read_as_utc():
    naive = DateRange(T0.replace(tzinfo=None), (T0 + timedelta(days=1)).replace(tzinfo=None))
    assert naive.start == T0
    assert naive.contains(T0 + timedelta(hours=1))
