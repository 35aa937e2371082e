from __future__ import annotations

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import Integer, create_engine, inspect, text
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker

from app.config import PROJECT_ROOT

logger = logging.getLogger(__name__)

Base = declarative_base()

MIGRATIONS_DIR = PROJECT_ROOT / "migrations"


def create_db_engine(database_url: str) -> Engine:
    url = make_url(database_url)
    connect_args = {}
    if url.get_backend_name() == "sqlite":
        # Storage calls run in worker threads.
        connect_args["check_same_thread"] = False
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


def alembic_config(connection: Connection | None = None) -> Config:
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    if connection is not None:
        config.attributes["connection"] = connection
    return config


def detect_unversioned_revision(connection: Connection) -> str | None:
    """Revision matching the shape of a schema that has no alembic stamp.

    Such files come from installs that predate versioned migrations. Returns
    None for an empty database.
    """
    inspector = inspect(connection)
    tables = set(inspector.get_table_names())
    if "tasks" not in tables:
        return None

    columns = {column["name"]: column for column in inspector.get_columns("tasks")}
    if "dueDate" not in columns:
        return "0001_create_tasks"
    if "priority" not in columns:
        return "0002_add_due_date"
    if isinstance(columns["id"]["type"], Integer):
        return "0003_add_priority"
    if "preferences" not in tables:
        return "0004_text_task_ids"
    return "0005_create_preferences"


def init_db(engine: Engine) -> None:
    with engine.begin() as connection:
        connection.execute(text("SELECT 1"))
        config = alembic_config(connection)

        if "alembic_version" not in inspect(connection).get_table_names():
            revision = detect_unversioned_revision(connection)
            if revision is not None:
                logger.info("Stamping unversioned database at %s", revision)
                command.stamp(config, revision)

        command.upgrade(config, "head")
