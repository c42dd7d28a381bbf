"""Sorting and filtering core for record views.

Responsibilities:
 - Criteria value types (`SortCriteria`, `FilterCriteria`, `DateRange`)
 - Pure ordering / filtering engines and the filter-then-sort combinator
 - Versioned persistence of the last used configuration
 - Change notification for criteria updates
"""

from .criteria import (  # noqa: F401
    DateRange,
    FilterCriteria,
    SortCriteria,
    SortDirection,
    SortingConfiguration,
    SortType,
)
from .errors import (  # noqa: F401
    InvalidRangeError,
    PersistenceError,
    SaveFailure,
    SortingError,
    UnknownStrategyError,
)
from .filtering import build_predicate, filter_sequence  # noqa: F401
from .ordering import order  # noqa: F401
from .pipeline import apply  # noqa: F401
from .config_store import SortingConfigStore  # noqa: F401
from .diagnostics import Diagnostic, DiagnosticsLog  # noqa: F401
from .notifier import ChangeNotifier, CriteriaEvent, FilterChangeEvent, SortingChangeEvent  # noqa: F401
from .service import SortingService, create_sorting_service  # noqa: F401

__all__ = [
    "DateRange",
    "FilterCriteria",
    "SortCriteria",
    "SortDirection",
    "SortingConfiguration",
    "SortType",
    "InvalidRangeError",
    "PersistenceError",
    "SaveFailure",
    "SortingError",
    "UnknownStrategyError",
    "build_predicate",
    "filter_sequence",
    "order",
    "apply",
    "SortingConfigStore",
    "Diagnostic",
    "DiagnosticsLog",
    "ChangeNotifier",
    "CriteriaEvent",
    "FilterChangeEvent",
    "SortingChangeEvent",
    "SortingService",
    "create_sorting_service",
]
