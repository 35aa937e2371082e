from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.infra.db import create_db_engine, create_session_factory, init_db
from app.infra.repository import TaskRepository
from app.services.task_store import TaskStore

NOW = datetime(2026, 1, 10, 9, 0)


class RecordingNotifier:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def schedule_or_fire_now(self, notification_id, title, body, when, fire_immediately) -> None:
        self.calls.append(("schedule", notification_id, title, body, when, fire_immediately))

    def cancel(self, notification_id) -> None:
        self.calls.append(("cancel", notification_id))

    def scheduled(self) -> list[tuple]:
        return [call for call in self.calls if call[0] == "schedule"]


@pytest.fixture()
def engine(tmp_path: Path) -> Engine:
    engine = create_db_engine(f"sqlite:///{(tmp_path / 'tasks.db').as_posix()}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker:
    return create_session_factory(engine)


@pytest.fixture()
def repo(session_factory: sessionmaker) -> TaskRepository:
    return TaskRepository(session_factory)


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def store(repo: TaskRepository, notifier: RecordingNotifier) -> TaskStore:
    return TaskStore(repo, notifier, now=lambda: NOW)


@pytest.fixture()
def now() -> datetime:
    return NOW
