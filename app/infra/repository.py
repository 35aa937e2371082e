from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.domain.entities import TaskEntity
from app.domain.enums import PriorityLevel

from .models import TaskModel


class StorageError(Exception):
    def __init__(self, operation: str, cause: Exception) -> None:
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


def _parse_due_date(value: str | None) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _to_entity(model: TaskModel) -> TaskEntity:
    return TaskEntity(
        id=model.id,
        title=model.title,
        description=model.description or "",
        due_date=_parse_due_date(model.due_date),
        priority=PriorityLevel.MEDIUM if model.priority is None else model.priority,
        is_completed=bool(model.is_completed),
    )


def _to_row(task: TaskEntity) -> dict:
    return {
        "title": task.title,
        "description": task.description,
        "is_completed": 1 if task.is_completed else 0,
        "due_date": task.due_date.isoformat() if task.due_date else None,
        "priority": int(task.priority),
    }


def title_contains(text: str, dialect_name: str):
    """Case-sensitive, wildcard-free substring match on the title.

    LIKE would ignore case on SQLite and treat % and _ as patterns.
    """
    if dialect_name == "postgresql":
        return func.strpos(TaskModel.title, text) > 0
    return func.instr(TaskModel.title, text) > 0


class TaskRepository:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def list_tasks(self) -> list[TaskEntity]:
        try:
            with self._session_factory() as session:
                return [_to_entity(task) for task in session.scalars(select(TaskModel))]
        except SQLAlchemyError as exc:
            raise StorageError("list_tasks", exc) from exc

    def search_by_title(self, text: str) -> list[TaskEntity]:
        try:
            with self._session_factory() as session:
                stmt = select(TaskModel).where(title_contains(text, session.get_bind().dialect.name))
                return [_to_entity(task) for task in session.scalars(stmt)]
        except SQLAlchemyError as exc:
            raise StorageError("search_by_title", exc) from exc

    def get_task(self, task_id: str) -> Optional[TaskEntity]:
        try:
            with self._session_factory() as session:
                task = session.get(TaskModel, task_id)
                return _to_entity(task) if task else None
        except SQLAlchemyError as exc:
            raise StorageError("get_task", exc) from exc

    def insert_task(self, task: TaskEntity) -> None:
        try:
            with self._session_factory() as session:
                session.add(TaskModel(id=task.id, **_to_row(task)))
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageError("insert_task", exc) from exc

    def update_task(self, task: TaskEntity) -> int:
        values = {getattr(TaskModel, key): value for key, value in _to_row(task).items()}
        stmt = update(TaskModel).where(TaskModel.id == task.id).values(values)
        try:
            with self._session_factory() as session:
                result = session.execute(stmt)
                session.commit()
                return result.rowcount
        except SQLAlchemyError as exc:
            raise StorageError("update_task", exc) from exc

    def delete_task(self, task_id: str) -> int:
        try:
            with self._session_factory() as session:
                result = session.execute(delete(TaskModel).where(TaskModel.id == task_id))
                session.commit()
                return result.rowcount
        except SQLAlchemyError as exc:
            raise StorageError("delete_task", exc) from exc

    def count_tasks(self) -> int:
        try:
            with self._session_factory() as session:
                return session.scalar(select(func.count()).select_from(TaskModel)) or 0
        except SQLAlchemyError as exc:
            raise StorageError("count_tasks", exc) from exc
