"""Global configuration and constants for the sorting/filtering core."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import ClassVar, Final

CONFIG_KEY: Final = "last-sort-config"
CONFIG_VERSION: Final = 1  # bump when the persisted layout changes
SQLITE_FILENAME: Final = "sorting_config.sqlite"
DATA_DIR: Final = os.environ.get("QUIZVIEW_DATA_DIR", "data")

DEFAULT_DIAGNOSTICS_CAPACITY: Final = 200
DEFAULT_WRITE_WORKERS: Final = 1


@dataclass
class SortingSettings:
    """Runtime settings for the configuration store.

    Attributes:
        data_dir: Directory holding the durable backing store.
        backend: ``"json"``, ``"sqlite"`` or ``"memory"``.
        background_writes: When True the service persists through
            ``save_async`` so recomputing a view never waits on disk I/O.
        diagnostics_capacity: Ring buffer size of the diagnostics log.
    """

    instance: ClassVar["SortingSettings"]

    data_dir: str = DATA_DIR
    backend: str = "json"
    background_writes: bool = False
    diagnostics_capacity: int = DEFAULT_DIAGNOSTICS_CAPACITY


SortingSettings.instance = SortingSettings()
