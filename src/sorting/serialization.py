"""Versioned JSON object form of ``SortingConfiguration``.

Layout (version 1)::

    {
      "version": 1,
      "sort": {"type": "title", "direction": "ascending", "comparator": null},
      "filter": {
        "text": "bra",
        "date_range": {"start": "...", "end": "..."},
        "extra_filters": ["has_answers"],
        "search_answers": false
      },
      "remember_last_sort": true,
      "created_at": "2024-01-01T00:00:00+00:00"
    }

Custom comparators and extra predicates are stored by their registry name.
Callables missing from the registry cannot be written faithfully: extra
predicates are dropped and a custom sort falls back to title order in the
same direction, both with a warning. ``from_json_obj`` raises
``PersistenceError`` for anything it cannot rebuild exactly.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from config.settings import CONFIG_VERSION

from .criteria import (
    DateRange,
    FilterCriteria,
    SortCriteria,
    SortDirection,
    SortingConfiguration,
    SortType,
)
from .errors import PersistenceError, SortingError
from .registry import StrategyRegistry

__all__ = ["to_json_obj", "from_json_obj", "dumps", "loads"]

_log = logging.getLogger(__name__)


def _sort_to_obj(sort: SortCriteria, registry: StrategyRegistry) -> Dict[str, Any]:
    comparator_name: Optional[str] = None
    sort_type = sort.type
    if sort.type is SortType.CUSTOM:
        comparator_name = registry.comparator_name(sort.comparator)  # type: ignore[arg-type]
        if comparator_name is None:
            _log.warning("custom comparator is not registered; persisting title order instead")
            sort_type = SortType.TITLE
    return {
        "type": sort_type.value,
        "direction": sort.direction.value,
        "comparator": comparator_name,
    }


def _filter_to_obj(criteria: FilterCriteria, registry: StrategyRegistry) -> Dict[str, Any]:
    names: List[str] = []
    for predicate in criteria.extra_filters:
        name = registry.predicate_name(predicate)
        if name is None:
            _log.warning("extra filter %r is not registered; dropped from persisted state", predicate)
            continue
        names.append(name)
    date_range = None
    if criteria.date_range is not None:
        date_range = {
            "start": criteria.date_range.start.isoformat(),
            "end": criteria.date_range.end.isoformat(),
        }
    return {
        "text": criteria.text,
        "date_range": date_range,
        "extra_filters": names,
        "search_answers": criteria.search_answers,
    }


def to_json_obj(config: SortingConfiguration, registry: StrategyRegistry) -> Dict[str, Any]:
    return {
        "version": CONFIG_VERSION,
        "sort": _sort_to_obj(config.sort, registry),
        "filter": _filter_to_obj(config.filter, registry),
        "remember_last_sort": config.remember_last_sort,
        "created_at": config.created_at.isoformat(),
    }


def _sort_from_obj(obj: Dict[str, Any], registry: StrategyRegistry) -> SortCriteria:
    sort_type = SortType(obj["type"])
    direction = SortDirection(obj["direction"])
    if sort_type is SortType.CUSTOM:
        return SortCriteria.custom(registry.comparator(obj["comparator"]), direction)
    return SortCriteria(sort_type, direction)


def _filter_from_obj(obj: Dict[str, Any], registry: StrategyRegistry) -> FilterCriteria:
    raw_range = obj.get("date_range")
    date_range = None
    if raw_range is not None:
        date_range = DateRange(
            datetime.fromisoformat(raw_range["start"]),
            datetime.fromisoformat(raw_range["end"]),
        )
    extras = tuple(registry.predicate(name) for name in obj.get("extra_filters", []))
    return FilterCriteria(
        text=obj.get("text"),
        date_range=date_range,
        extra_filters=extras,
        search_answers=bool(obj.get("search_answers", False)),
    )


def from_json_obj(obj: Any, registry: StrategyRegistry) -> SortingConfiguration:
    if not isinstance(obj, dict):
        raise PersistenceError("persisted configuration is not an object")
    if obj.get("version") != CONFIG_VERSION:
        raise PersistenceError(
            "version mismatch", context={"found": obj.get("version"), "expected": CONFIG_VERSION}
        )
    try:
        return SortingConfiguration(
            sort=_sort_from_obj(obj["sort"], registry),
            filter=_filter_from_obj(obj["filter"], registry),
            remember_last_sort=bool(obj["remember_last_sort"]),
            created_at=datetime.fromisoformat(obj["created_at"]),
        )
    except SortingError as exc:
        raise PersistenceError(str(exc), context=exc.context) from exc
    except (KeyError, TypeError, ValueError) as exc:
        raise PersistenceError(f"malformed configuration: {exc}") from exc


def dumps(config: SortingConfiguration, registry: StrategyRegistry) -> str:
    return json.dumps(to_json_obj(config, registry), indent=2, ensure_ascii=False)


def loads(blob: str, registry: StrategyRegistry) -> SortingConfiguration:
    try:
        obj = json.loads(blob)
    except ValueError as exc:
        raise PersistenceError(f"invalid JSON: {exc}") from exc
    return from_json_obj(obj, registry)
