"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from sqlalchemy.pool import StaticPool

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Interpret environment variable values as integers."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Streakmaster"
    DB_FILENAME = "streakmaster.db"
    TESTING = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("STREAKMASTER_SECRET_KEY", "replace-me")
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("STREAKMASTER_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("STREAKMASTER_DATABASE_URL", self._build_sqlite_url())
        self.RECOMPUTE_HOUR = _env_int("STREAKMASTER_RECOMPUTE_HOUR", 0)
        self.RECOMPUTE_MINUTE = _env_int("STREAKMASTER_RECOMPUTE_MINUTE", 5)
        self.SCHEDULER_ENABLED = _env_bool("STREAKMASTER_SCHEDULER_ENABLED", default=False)
        if not 0 <= self.RECOMPUTE_HOUR <= 23:
            raise ValueError("STREAKMASTER_RECOMPUTE_HOUR must be between 0 and 23.")
        if not 0 <= self.RECOMPUTE_MINUTE <= 59:
            raise ValueError("STREAKMASTER_RECOMPUTE_MINUTE must be between 0 and 59.")
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("STREAKMASTER_SECRET_KEY must be set in non-dev mode.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("STREAKMASTER_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if not self.DATABASE_URL.startswith("sqlite"):
            return {}
        engine_options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        # In-memory SQLite is per-connection; share one connection across sessions.
        if self.DATABASE_URL in {"sqlite://", "sqlite:///:memory:"}:
            engine_options["poolclass"] = StaticPool
        return engine_options


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Test configuration; defaults to an in-memory database."""

    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DATABASE_URL = os.getenv("STREAKMASTER_DATABASE_URL", "sqlite://")
        self.SCHEDULER_ENABLED = False


_CONFIG_MAP: dict[str, type[BaseConfig]] = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}


def resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


__all__ = ["BaseConfig", "DevConfig", "TestConfig", "resolve_config"]
