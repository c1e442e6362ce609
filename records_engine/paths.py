"""
Filesystem locations for records data.

All runtime files live under one "data root":

- ``settings.json``   application settings
- ``storage.json``    key-value storage (JSON backend)
- ``storage.sqlite``  key-value storage (SQLite backend)

Nothing else in the engine decides where files go.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

APP_DIR_NAME = "ems"
DATA_ROOT_ENV_VAR = "EMS_DATA_ROOT"


@dataclass(frozen=True, slots=True)
class DataPaths:
    """
    Concrete resolved paths under a data root.

    Attributes
    ----------
    data_root:
        Root directory for all runtime data.
    settings_path:
        Persisted application settings.
    json_storage_path:
        Backing file for the JSON key-value backend.
    sqlite_storage_path:
        Backing database for the SQLite key-value backend.
    """

    data_root: Path
    settings_path: Path
    json_storage_path: Path
    sqlite_storage_path: Path


def default_data_root() -> Path:
    """
    Resolve the default data root.

    Preference order:
    1) ``$EMS_DATA_ROOT`` if set
    2) ``%LOCALAPPDATA%\\ems``
    3) ``%APPDATA%\\ems``
    4) ``$XDG_DATA_HOME/ems``, else ``~/.local/share/ems``
    """
    override = os.environ.get(DATA_ROOT_ENV_VAR)
    if override:
        return Path(override)

    local = os.environ.get("LOCALAPPDATA")
    if local:
        return Path(local) / APP_DIR_NAME

    roaming = os.environ.get("APPDATA")
    if roaming:
        return Path(roaming) / APP_DIR_NAME

    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / APP_DIR_NAME
    return Path.home() / ".local" / "share" / APP_DIR_NAME


def resolve_data_paths(data_root: Path | None = None) -> DataPaths:
    """
    Resolve all runtime paths.

    Parameters
    ----------
    data_root:
        Optional override for the data root.

    Returns
    -------
    DataPaths
        Resolved paths. No directories are created.
    """
    root = (data_root or default_data_root()).expanduser().resolve()
    return DataPaths(
        data_root=root,
        settings_path=root / "settings.json",
        json_storage_path=root / "storage.json",
        sqlite_storage_path=root / "storage.sqlite",
    )


def data_paths_as_text(paths: DataPaths) -> str:
    """Render DataPaths as ``name: value`` lines."""
    return "\n".join(
        [
            f"data_root: {paths.data_root}",
            f"settings_path: {paths.settings_path}",
            f"json_storage_path: {paths.json_storage_path}",
            f"sqlite_storage_path: {paths.sqlite_storage_path}",
        ]
    )
