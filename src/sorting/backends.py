"""Durable key/value backends for the configuration store.

Each backend stores opaque text blobs addressed by a key. Read failures are
reported as ``PersistenceError`` and write failures as ``SaveFailure``; the
configuration store decides what the caller sees.
"""

from __future__ import annotations

import os
import sqlite3
from datetime import datetime, timezone
from threading import RLock
from typing import Dict, Optional, Protocol, runtime_checkable

from .errors import PersistenceError, SaveFailure

__all__ = ["KeyValueBackend", "JsonFileBackend", "SqliteBackend", "MemoryBackend"]


@runtime_checkable
class KeyValueBackend(Protocol):
    def read(self, key: str) -> Optional[str]: ...  # pragma: no cover - structural

    def write(self, key: str, blob: str) -> None: ...  # pragma: no cover - structural

    def quarantine(self, key: str) -> None: ...  # pragma: no cover - structural


class JsonFileBackend:
    """One JSON file per key inside ``base_dir``.

    Writes go to a temporary sibling first and are moved into place, so a
    crash mid-write never leaves a truncated file behind. Corrupt files are
    renamed with a ``.corrupt.<timestamp>`` suffix instead of deleted.
    """

    def __init__(self, base_dir: str):
        self.base_dir = base_dir
        os.makedirs(self.base_dir, exist_ok=True)

    def path_for(self, key: str) -> str:
        return os.path.join(self.base_dir, f"{key}.json")

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"cannot read {path}: {exc}", context={"path": path}) from exc

    def write(self, key: str, blob: str) -> None:
        path = self.path_for(key)
        tmp = path + ".tmp"
        try:
            os.makedirs(self.base_dir, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(blob)
            os.replace(tmp, path)
        except OSError as exc:
            raise SaveFailure(f"cannot write {path}: {exc}", context={"path": path}) from exc

    def quarantine(self, key: str) -> None:
        path = self.path_for(key)
        backup = path + f".corrupt.{datetime.now(timezone.utc).strftime('%Y%m%d%H%M%S%f')}"
        try:
            os.replace(path, backup)
        except OSError:  # pragma: no cover - file vanished or read-only dir
            pass


class SqliteBackend:
    """Single ``kv_store`` table in a SQLite database (``:memory:`` allowed)."""

    SCHEMA = (
        "CREATE TABLE IF NOT EXISTS kv_store ("
        " key TEXT PRIMARY KEY,"
        " value TEXT NOT NULL,"
        " updated_at TEXT NOT NULL)"
    )

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._lock = RLock()
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        with self._conn:
            self._conn.execute(self.SCHEMA)

    def read(self, key: str) -> Optional[str]:
        with self._lock:
            try:
                row = self._conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,)
                ).fetchone()
            except sqlite3.Error as exc:
                raise PersistenceError(f"cannot read key '{key}': {exc}", context={"key": key}) from exc
        return row[0] if row else None

    def write(self, key: str, blob: str) -> None:
        stamp = datetime.now(timezone.utc).isoformat()
        with self._lock:
            try:
                with self._conn:
                    self._conn.execute(
                        "INSERT OR REPLACE INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)",
                        (key, blob, stamp),
                    )
            except sqlite3.Error as exc:
                raise SaveFailure(f"cannot write key '{key}': {exc}", context={"key": key}) from exc

    def quarantine(self, key: str) -> None:
        with self._lock, self._conn:
            self._conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))

    def close(self) -> None:
        with self._lock:
            self._conn.close()


class MemoryBackend:
    """Process-local backend for tests and ephemeral sessions."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._data: Dict[str, str] = {}

    def read(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def write(self, key: str, blob: str) -> None:
        with self._lock:
            self._data[key] = blob

    def quarantine(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)
