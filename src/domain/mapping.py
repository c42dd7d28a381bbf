"""Null-safe conversions between plain dicts and ``QuizRecord``.

Absent input maps to absent (or empty) output instead of raising, so
callers feeding partially loaded data never have to guard every call.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from domain.models import QuizRecord

__all__ = ["record_from_dict", "record_to_dict", "records_from_dicts", "records_to_dicts"]


def _parse_instant(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return datetime.now(timezone.utc)


def record_from_dict(data: Optional[Dict[str, Any]]) -> Optional[QuizRecord]:
    if data is None:
        return None
    return QuizRecord(
        title=data.get("title") or "",
        text=data.get("text") or "",
        answers=tuple(data.get("answers") or ()),
        correct=tuple(data.get("correct") or ()),
        topic=data.get("topic") or "",
        created_at=_parse_instant(data.get("created_at")),
        explanation=data.get("explanation") or "",
    )


def record_to_dict(record: Optional[QuizRecord]) -> Optional[Dict[str, Any]]:
    if record is None:
        return None
    return {
        "title": record.title,
        "text": record.text,
        "answers": list(record.answers),
        "correct": list(record.correct),
        "topic": record.topic,
        "created_at": record.created_at.isoformat(),
        "explanation": record.explanation,
    }


def records_from_dicts(items: Optional[Iterable[Optional[Dict[str, Any]]]]) -> List[QuizRecord]:
    if items is None:
        return []
    out: List[QuizRecord] = []
    for item in items:
        rec = record_from_dict(item)
        if rec is not None:
            out.append(rec)
    return out


def records_to_dicts(records: Optional[Iterable[Optional[QuizRecord]]]) -> List[Dict[str, Any]]:
    if records is None:
        return []
    return [d for d in (record_to_dict(r) for r in records) if d is not None]
