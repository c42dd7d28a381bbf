"""Domain models for quiz records consumed by the sorting core."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol, Sequence, Tuple, runtime_checkable

__all__ = ["Record", "QuizRecord"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@runtime_checkable
class Record(Protocol):
    """Minimal shape the ordering and filtering engines read."""

    title: str
    text: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class QuizRecord:
    title: str
    text: str
    answers: Tuple[str, ...] = ()
    correct: Tuple[bool, ...] = ()
    topic: str = ""
    created_at: datetime = field(default_factory=_utcnow)
    explanation: str = ""

    def __post_init__(self) -> None:
        answers = tuple(self.answers or ())
        correct = tuple(bool(c) for c in (self.correct or ()))
        # answers and flags are kept parallel by trimming the longer list
        size = min(len(answers), len(correct))
        object.__setattr__(self, "answers", answers[:size])
        object.__setattr__(self, "correct", correct[:size])
        object.__setattr__(self, "title", self.title or "")
        object.__setattr__(self, "text", self.text or "")
        object.__setattr__(self, "topic", self.topic or "")
        object.__setattr__(self, "explanation", self.explanation or "")
        if self.created_at.tzinfo is None:
            # naive instants are read as UTC so they compare with clock output
            object.__setattr__(self, "created_at", self.created_at.replace(tzinfo=timezone.utc))

    @property
    def correct_answers(self) -> Sequence[str]:
        return [a for a, ok in zip(self.answers, self.correct) if ok]
