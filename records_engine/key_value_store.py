"""
String key-value persistence backends.

RecordStore persists its whole collection as one JSON string under one key,
the way a browser app uses localStorage. This module provides the small
storage surface it needs and the concrete backends.

Design constraints
------------------
- Values are opaque strings; backends never interpret them.
- Reads are tolerant: a missing or unreadable backing file reads as empty.
- Writes are atomic (JSON backend: temp file + replace; SQLite: transaction).
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from .errors import StorageError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal localStorage-like persistence surface."""

    def get_item(self, key: str) -> str | None:
        """
        Return the value stored under ``key``.

        Returns
        -------
        str | None
            The stored string, or None if the key is absent.
        """
        ...

    def set_item(self, key: str, value: str) -> None:
        """
        Store ``value`` under ``key``, replacing any previous value.

        Raises
        ------
        StorageError
            If the backend cannot be written.
        """
        ...

    def remove_item(self, key: str) -> None:
        """Remove ``key`` if present."""
        ...


@dataclass(slots=True)
class InMemoryKeyValueStore:
    """Dict-backed store. Nothing survives the process."""

    items: dict[str, str] = field(default_factory=dict)

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


@dataclass(frozen=True, slots=True)
class JsonFileKeyValueStore:
    """
    Store backed by a single JSON object file mapping keys to strings.

    Parameters
    ----------
    path:
        Location of the JSON file. Parent directories are created on write.
    """

    path: Path

    def _read_all(self) -> dict[str, str]:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError, RecursionError) as exc:
            logger.warning("Ignoring unreadable storage file %s: %s", self.path, exc)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Ignoring storage file %s: top-level value is not an object", self.path)
            return {}
        return {str(k): v for k, v in payload.items() if isinstance(v, str)}

    def _write_all(self, items: dict[str, str]) -> None:
        path = self.path.expanduser()
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with temp_path.open("w", encoding="utf-8", newline="\n") as handle:
                json.dump(items, handle, indent=2, sort_keys=True, ensure_ascii=False)
                handle.write("\n")
            os.replace(temp_path, path)
        except OSError as exc:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass
            raise StorageError(f"Failed to write storage file: {path} ({exc!s})") from exc

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if key in items:
            del items[key]
            self._write_all(items)


_SCHEMA = "CREATE TABLE IF NOT EXISTS kv (key TEXT PRIMARY KEY, value TEXT NOT NULL)"


@dataclass(frozen=True, slots=True)
class SqliteKeyValueStore:
    """
    Store backed by a one-table SQLite database.

    Notes
    -----
    A fresh connection is opened per call, so the store may be created on one
    thread and used on another (the GUI worker thread).
    """

    db_path: Path

    def __post_init__(self) -> None:
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with self._connect() as conn:
                conn.execute(_SCHEMA)
        except (OSError, sqlite3.Error) as exc:
            raise StorageError(f"Failed to open storage database: {self.db_path} ({exc!s})") from exc

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def get_item(self, key: str) -> str | None:
        try:
            with self._connect() as conn:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            logger.warning("Ignoring unreadable storage database %s: %s", self.db_path, exc)
            return None
        return None if row is None else str(row["value"])

    def set_item(self, key: str, value: str) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO kv(key, value) VALUES(?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    (key, value),
                )
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to write storage database: {self.db_path} ({exc!s})") from exc

    def remove_item(self, key: str) -> None:
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to write storage database: {self.db_path} ({exc!s})") from exc
