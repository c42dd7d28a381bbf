import dataclasses

import pytest

from domain.models import QuizRecord, Record
from factories import T0


def test_answers_and_flags_are_aligned():
    rec = QuizRecord("t", "x", answers=("a", "b", "c"), correct=(True, False), created_at=T0)
    assert rec.answers == ("a", "b")
    assert rec.correct == (True, False)
    assert len(rec.answers) == len(rec.correct)


def test_none_fields_are_normalised():
    rec = QuizRecord(None, None, answers=None, correct=None, topic=None, created_at=T0)  # type: ignore[arg-type]
    assert rec.title == "" and rec.text == "" and rec.topic == ""
    assert rec.answers == () and rec.correct == ()


def test_record_is_frozen_and_satisfies_protocol():
    rec = QuizRecord("t", "x", created_at=T0)
    assert isinstance(rec, Record)
    with pytest.raises(dataclasses.FrozenInstanceError):
        rec.title = "other"  # type: ignore[misc]


def test_correct_answers():
    rec = QuizRecord("t", "x", answers=("a", "b", "c"), correct=(False, True, True), created_at=T0)
    assert rec.correct_answers == ["b", "c"]


def test_created_at_is_timezone_aware():
    assert QuizRecord("t", "x").created_at.tzinfo is not None
    assert QuizRecord("t", "x", created_at=T0.replace(tzinfo=None)).created_at == T0
