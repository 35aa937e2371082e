from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from app.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_FILE = "task_manager.log"


def setup_logging(settings: Settings) -> None:
    settings.log_path.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handlers: list[logging.Handler] = [
        RotatingFileHandler(settings.log_path / LOG_FILE, maxBytes=2_000_000, backupCount=3),
        logging.StreamHandler(),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
    logging.basicConfig(level=settings.log_level, handlers=handlers)

    # Delivered reminders stay visible even when LOG_LEVEL is raised.
    logging.getLogger("app.services.notifications").setLevel(
        logging.INFO if settings.notifications_enabled else logging.WARNING
    )
    logging.getLogger("alembic").setLevel(logging.WARNING)
