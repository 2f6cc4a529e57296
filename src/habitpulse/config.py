"""Application configuration objects and helpers."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "HabitPulse"
    DB_FILENAME = "habitpulse.db"
    LOG_FILENAME = "habitpulse.log"
    SQLITE_PRAGMAS = {"foreign_keys": "on"}

    def __init__(self, data_dir: Path | None = None) -> None:
        self.DATA_DIR = self._resolve_data_dir(data_dir)
        self.DEV_MODE = _env_bool("HABITPULSE_DEV_MODE", default=True)
        self.LOG_LEVEL = self._resolve_log_level(os.getenv("HABITPULSE_LOG_LEVEL", "INFO"))
        self.DATABASE_URL = os.getenv("HABITPULSE_DATABASE_URL", self._build_sqlite_url())
        self.DEFAULT_USER_EMAIL = os.getenv("HABITPULSE_USER_EMAIL") or None

    def _resolve_data_dir(self, override: Path | None) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = override or os.getenv("HABITPULSE_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def _resolve_log_level(raw: str) -> int:
        level = logging.getLevelName(raw.strip().upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown HABITPULSE_LOG_LEVEL: {raw!r}")
        return level

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if not self.is_sqlite:
            return {}
        return {"connect_args": {"check_same_thread": False}}


class TestingConfig(BaseConfig):
    """Configuration used by the test-suite; never touches the real data dir."""

    __test__ = False  # not a pytest test class

    def __init__(self, data_dir: Path) -> None:
        super().__init__(data_dir)
        self.DEV_MODE = True
        self.DATABASE_URL = f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"
