# review_browser/config.py

"""Shared configuration and environment setup."""

from __future__ import annotations

from dataclasses import dataclass, field
from os import getenv
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(override=True)

DEFAULT_PAGE_SIZE = 20


def get_project_root() -> Path:
    """Return the project root directory.

    Prefers REVIEW_BROWSER_PROJECT_ROOT env var. Falls back to current working directory.
    """
    if root := getenv("REVIEW_BROWSER_PROJECT_ROOT"):
        return Path(root).resolve()
    return Path.cwd()


def _resolve(value: str) -> Path:
    path = Path(value)
    return path if path.is_absolute() else get_project_root() / path


def _int_env(name: str, default: int) -> int:
    raw = getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        msg = f"{name} must be an integer, got {raw!r}."
        raise ValueError(msg) from exc


@dataclass(frozen=True)
class Settings:
    """Start-up settings, read from the environment (and a .env file)."""

    datastore: str = field(
        default_factory=lambda: getenv("REVIEW_BROWSER_DATASTORE", "sqlite").lower()
    )
    db_path: Path = field(
        default_factory=lambda: _resolve(getenv("REVIEW_BROWSER_DB_PATH", "reviews.db"))
    )
    json_path: Path = field(
        default_factory=lambda: _resolve(getenv("REVIEW_BROWSER_JSON_PATH", "reviews.json"))
    )
    page_size: int = field(
        default_factory=lambda: _int_env("REVIEW_BROWSER_PAGE_SIZE", DEFAULT_PAGE_SIZE)
    )
    log_level: str = field(
        default_factory=lambda: getenv("REVIEW_BROWSER_LOG_LEVEL", "INFO").upper()
    )


def get_settings() -> Settings:
    return Settings()
