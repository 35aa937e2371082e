from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

TRUTHY = {"1", "true", "yes", "on"}


def _project_root() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


PROJECT_ROOT = _project_root()
DATA_DIR = PROJECT_ROOT / "data"


def default_database_url() -> str:
    return f"sqlite:///{(DATA_DIR / 'tasks.db').as_posix()}"


def load_env() -> None:
    """Apply `.env`, then `.env.<APP_ENV>` on top, from the first directory that has each."""
    search_dirs = (Path.cwd(), PROJECT_ROOT)
    overlays = (".env", f".env.{os.getenv('APP_ENV', 'development')}")
    for index, name in enumerate(overlays):
        path = next((base / name for base in search_dirs if (base / name).exists()), None)
        if path is not None:
            load_dotenv(path, override=index > 0)


@dataclass(frozen=True)
class Settings:
    database_url: str = default_database_url()
    log_level: str = "INFO"
    log_dir: str = "logs"
    notifications_enabled: bool = True

    @property
    def log_path(self) -> Path:
        log_dir = Path(self.log_dir)
        return log_dir if log_dir.is_absolute() else PROJECT_ROOT / log_dir


def load_settings() -> Settings:
    load_env()
    notifications = os.getenv("NOTIFICATIONS_ENABLED", "").strip().lower()
    return Settings(
        database_url=os.getenv("DATABASE_URL", "").strip() or default_database_url(),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_dir=os.getenv("LOG_DIR", "logs"),
        notifications_enabled=notifications in TRUTHY if notifications else True,
    )
