from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass
from typing import Callable

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from app.config import Settings, load_settings
from app.infra.db import create_db_engine, create_session_factory, init_db
from app.infra.logging import setup_logging
from app.infra.preferences_repository import PreferenceRepository
from app.infra.repository import TaskRepository
from app.services.notifications import LocalNotificationScheduler, Notification, log_notification
from app.services.preferences import PreferenceAdapter
from app.services.task_store import TaskStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    engine: Engine
    tasks: TaskStore
    preferences: PreferenceAdapter
    notifier: LocalNotificationScheduler

    async def start(self) -> None:
        preferences = await asyncio.to_thread(self.preferences.load)
        result = await self.tasks.load()
        if not result.ok:
            logger.warning("Starting with an empty task list: %s", result.error)
        self.tasks.sort(preferences.sort_order)

    def close(self) -> None:
        self.notifier.cancel_all()
        self.engine.dispose()


def bootstrap(
    settings: Settings | None = None,
    *,
    deliver: Callable[[Notification], None] = log_notification,
) -> AppContext:
    """Build the one store of each kind for this process."""
    settings = settings or load_settings()
    engine = create_db_engine(settings.database_url)
    init_db(engine)
    session_factory = create_session_factory(engine)

    notifier = LocalNotificationScheduler(deliver, enabled=settings.notifications_enabled)
    return AppContext(
        settings=settings,
        engine=engine,
        tasks=TaskStore(TaskRepository(session_factory), notifier),
        preferences=PreferenceAdapter(PreferenceRepository(session_factory)),
        notifier=notifier,
    )


async def _run(settings: Settings) -> None:
    context = bootstrap(settings)
    try:
        await context.start()
        logger.info(
            "Loaded %d tasks (sort=%s, dark_mode=%s)",
            len(context.tasks.tasks),
            context.preferences.preferences.sort_order,
            context.preferences.preferences.is_dark_mode,
        )
    finally:
        context.close()


def main() -> None:
    settings = load_settings()
    setup_logging(settings)
    try:
        asyncio.run(_run(settings))
    except SQLAlchemyError:
        logger.exception("Database error")
        sys.exit(1)


if __name__ == "__main__":
    main()
