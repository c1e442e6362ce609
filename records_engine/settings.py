from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path

from .errors import StorageError
from .key_value_store import JsonFileKeyValueStore, KeyValueStore, SqliteKeyValueStore
from .paths import DataPaths, resolve_data_paths

STORAGE_BACKENDS = frozenset({"json", "sqlite"})
LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR"})
LOG_FORMATS = frozenset({"text", "json"})
DEFAULT_STORAGE_KEY = "employees"


@dataclass(frozen=True, slots=True)
class AppSettings:
    """
    Persisted application settings.

    Notes
    -----
    Settings only choose defaults (backend, storage key, logging, export
    folder). They never hold employee data.
    """

    storage_backend: str  # "json" | "sqlite"
    storage_key: str
    log_level: str  # "DEBUG" | "INFO" | "WARNING" | "ERROR"
    log_format: str  # "text" | "json"
    export_dir: Path | None

    @staticmethod
    def defaults() -> "AppSettings":
        return AppSettings(
            storage_backend="json",
            storage_key=DEFAULT_STORAGE_KEY,
            log_level="WARNING",
            log_format="text",
            export_dir=None,
        )

    def with_overrides(self, *, log_level: str | None = None) -> "AppSettings":
        """Return a copy with command-line overrides applied."""
        if log_level is None:
            return self
        level = log_level.upper()
        return replace(self, log_level=level if level in LOG_LEVELS else self.log_level)


def load_settings(*, data_root: Path | None) -> AppSettings:
    """
    Load settings from disk.

    Parameters
    ----------
    data_root:
        Data root override. If None, the default data root is used.

    Returns
    -------
    AppSettings
        Loaded settings, or defaults if missing/unreadable. Individual invalid
        values fall back to their defaults.
    """
    path = resolve_data_paths(data_root).settings_path
    defaults = AppSettings.defaults()
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return defaults
    except (OSError, ValueError, RecursionError):
        return defaults
    if not isinstance(payload, dict):
        return defaults

    backend = payload.get("storage_backend", defaults.storage_backend)
    if backend not in STORAGE_BACKENDS:
        backend = defaults.storage_backend

    key = payload.get("storage_key", defaults.storage_key)
    if not isinstance(key, str) or not key.strip():
        key = defaults.storage_key

    level = str(payload.get("log_level", defaults.log_level)).upper()
    if level not in LOG_LEVELS:
        level = defaults.log_level

    fmt = payload.get("log_format", defaults.log_format)
    if fmt not in LOG_FORMATS:
        fmt = defaults.log_format

    export_dir = payload.get("export_dir")
    return AppSettings(
        storage_backend=str(backend),
        storage_key=key.strip(),
        log_level=level,
        log_format=str(fmt),
        export_dir=Path(export_dir) if isinstance(export_dir, str) and export_dir.strip() else None,
    )


def save_settings(*, data_root: Path | None, settings: AppSettings) -> None:
    """
    Save settings to disk as sorted, indented JSON.

    Raises
    ------
    StorageError
        If the settings file cannot be written.
    """
    path = resolve_data_paths(data_root).settings_path
    payload = {
        "storage_backend": settings.storage_backend,
        "storage_key": settings.storage_key,
        "log_level": settings.log_level,
        "log_format": settings.log_format,
        "export_dir": str(settings.export_dir) if settings.export_dir is not None else None,
    }
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
    except OSError as exc:
        raise StorageError(f"Failed to save settings: {path} ({exc!s})") from exc


def open_key_value_store(paths: DataPaths, settings: AppSettings) -> KeyValueStore:
    """Open the key-value backend selected by ``settings``."""
    if settings.storage_backend == "sqlite":
        return SqliteKeyValueStore(db_path=paths.sqlite_storage_path)
    return JsonFileKeyValueStore(path=paths.json_storage_path)
