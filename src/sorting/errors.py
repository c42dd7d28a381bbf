"""Structured errors for the sorting and filtering core."""

from __future__ import annotations

from typing import Any


class SortingError(Exception):
    """Base class for sorting/filtering related issues."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class InvalidRangeError(SortingError, ValueError):
    """Raised when a ``DateRange`` is built with ``start`` after ``end``."""


class PersistenceError(SortingError):
    """Raised when the durable store holds an unreadable or corrupt value.

    Caught at the configuration store boundary and converted to the default
    configuration; callers of ``load`` never see it.
    """


class SaveFailure(SortingError):
    """Raised when a configuration could not be written durably."""


class UnknownStrategyError(SortingError, KeyError):
    """Raised when a named comparator or predicate is not registered."""
