# src/todo_keeper/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; every key has a local default.
- All local data lives under one gitignored data dir.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TODO"

STORE_BACKENDS = ("sqlite", "file", "memory")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Durable slot ----
    store_backend: str
    storage_key: str
    storage_quota_bytes: int

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    store_path: Path
    export_dir: Path

    @property
    def quota(self) -> int | None:
        """Quota in bytes, or None when unlimited."""
        return self.storage_quota_bytes if self.storage_quota_bytes > 0 else None

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todo-keeper").strip() or "todo-keeper"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        store_backend = _env(_k("STORE_BACKEND"), "sqlite").strip().lower()
        if store_backend not in STORE_BACKENDS:
            store_backend = "sqlite"
        storage_key = _env(_k("STORAGE_KEY"), "todoApp_todos").strip() or "todoApp_todos"
        storage_quota_bytes = max(0, _env_int(_k("STORAGE_QUOTA_BYTES"), 0))

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo_keeper"))
        default_store = data_dir / ("todos.sqlite3" if store_backend == "sqlite" else "slots")
        store_path = _env_path(_k("STORE_PATH"), default_store)
        export_dir = _env_path(_k("EXPORT_DIR"), Path("."))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            store_backend=store_backend,
            storage_key=storage_key,
            storage_quota_bytes=storage_quota_bytes,
            data_dir=data_dir,
            store_path=store_path,
            export_dir=export_dir,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
