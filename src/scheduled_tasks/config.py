# src/scheduled_tasks/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole process.
- No secrets required at import time: settings are built on first get_settings().
- Required values (Sentry DSN, database and cache addresses) fail loudly at startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_PREFIX = "SCHEDULED_TASKS"


class ConfigError(RuntimeError):
    """Settings could not be built; the process must not start scheduling."""


class MissingSettingError(ConfigError):
    def __init__(self, *names: str) -> None:
        self.names = names
        super().__init__(f"missing `{names[0]}` in environment")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _require_env(*names: str) -> str:
    v = _first_env(*names)
    if v is None:
        raise MissingSettingError(*names)
    return v.strip()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path | None) -> Path | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_dir: Optional[Path]

    # ---- Error tracking ----
    sentry_dsn: str
    sentry_environment: str
    sentry_release: Optional[str]

    # ---- Databases / cache ----
    data_db_uri: str
    stats_db_uri: str
    redis_url: str
    shard_status_key: str

    # ---- Connection tuning ----
    db_pool_max_size: int
    connect_timeout_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "scheduled-tasks")
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        log_dir = _env_path(_k("LOG_DIR"), None)

        sentry_dsn = _require_env(_k("SENTRY_DSN"), "SENTRY_DSN")
        sentry_environment = _first_env(
            _k("SENTRY_ENVIRONMENT"), "SENTRY_ENVIRONMENT", default="production"
        ) or "production"
        sentry_release = _first_env(_k("SENTRY_RELEASE"), "SENTRY_RELEASE", default=None)

        data_db_uri = _require_env(_k("DATA_DB_URI"), "DATA_DB_URI")
        stats_db_uri = _require_env(_k("STATS_DB_URI"), "STATS_DB_URI")

        # REDIS_ADDR may be a bare host:port; redis-py wants a URL.
        redis_url = _require_env(_k("REDIS_URL"), "REDIS_URL", "REDIS_ADDR")
        if "://" not in redis_url:
            redis_url = f"redis://{redis_url}"
        shard_status_key = _env(_k("SHARD_STATUS_KEY"), "pluralkit:shardstatus")

        db_pool_max_size = max(1, _env_int(_k("DB_POOL_MAX_SIZE"), 4))
        connect_timeout_seconds = max(1.0, _env_float(_k("CONNECT_TIMEOUT_SECONDS"), 30.0))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_dir=log_dir,
            sentry_dsn=sentry_dsn,
            sentry_environment=sentry_environment,
            sentry_release=sentry_release,
            data_db_uri=data_db_uri,
            stats_db_uri=stats_db_uri,
            redis_url=redis_url,
            shard_status_key=shard_status_key,
            db_pool_max_size=db_pool_max_size,
            connect_timeout_seconds=connect_timeout_seconds,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Build settings once; raises ConfigError when a required value is missing."""
    global _SETTINGS
    if _SETTINGS is None:
        _load_dotenv_if_available()
        _SETTINGS = Settings.from_env()
    return _SETTINGS
