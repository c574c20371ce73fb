# src/tally_lists/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing required at import time; every value has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TALLY"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


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

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    lists_db_path: Path

    # ---- Lists / tree editing ----
    preview_limit: int
    subtask_text: str
    default_priority: str
    default_color: str
    check_ids: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "tally") or "tally"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tally"))
        lists_db_path = _env_path(_k("LISTS_DB_PATH"), data_dir / "lists.sqlite3")

        preview_limit = max(0, _env_int(_k("PREVIEW_LIMIT"), 4))
        subtask_text = _env(_k("SUBTASK_TEXT"), "New sub-task").strip() or "New sub-task"
        default_priority = _env(_k("DEFAULT_PRIORITY"), "low").strip().lower()
        default_color = _env(_k("DEFAULT_COLOR"), "#6366f1")
        check_ids = _env_bool(_k("CHECK_IDS"), False)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            lists_db_path=lists_db_path,
            preview_limit=preview_limit,
            subtask_text=subtask_text,
            default_priority=default_priority,
            default_color=default_color,
            check_ids=check_ids,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
