from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Optional

from app.domain.entities import TaskEntity
from app.domain.enums import SortOrder
from app.domain.results import OperationResult
from app.infra.repository import StorageError, TaskRepository

from .notifications import NotificationScheduler, notification_id_for
from .observable import Observable

logger = logging.getLogger(__name__)

Tasks = tuple[TaskEntity, ...]


class TaskStore(Observable[Tasks]):
    """In-memory mirror of the task table.

    Mutations are applied to memory and published first, then written to
    storage. Storage calls go through a single queue so they land in the
    order they were issued; a failed write reverts its memory change.
    """

    def __init__(
        self,
        repo: TaskRepository,
        notifier: NotificationScheduler,
        *,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(())
        self._repo = repo
        self._notifier = notifier
        self._now = now
        self._io_lock = asyncio.Lock()

    @property
    def tasks(self) -> Tasks:
        return self.state

    def get(self, task_id: str) -> Optional[TaskEntity]:
        return next((t for t in self.state if t.id == task_id), None)

    async def load(self) -> OperationResult:
        return await self._refresh("load", self._repo.list_tasks)

    async def search_by_title(self, text: str | None) -> OperationResult:
        if not text:
            return await self.load()
        return await self._refresh("search_by_title", self._repo.search_by_title, text)

    async def add(self, task: TaskEntity) -> OperationResult:
        self._set_state(self.state + (task,))
        try:
            await self._run_io(self._repo.insert_task, task)
        except StorageError as exc:
            logger.exception("Error adding task %s", task.id)
            self._set_state(_drop_instance(self.state, task))
            return OperationResult.failure("add", exc)
        return OperationResult.success("add")

    async def update(self, task: TaskEntity) -> OperationResult:
        return await self._apply_update("update", task)

    async def delete(self, task_id: str) -> OperationResult:
        removed = [(index, t) for index, t in enumerate(self.state) if t.id == task_id]
        self._set_state(tuple(t for t in self.state if t.id != task_id))
        try:
            await self._run_io(self._repo.delete_task, task_id)
        except StorageError as exc:
            logger.exception("Error deleting task %s", task_id)
            if removed:
                restored = list(self.state)
                for index, task in removed:
                    restored.insert(min(index, len(restored)), task)
                self._set_state(tuple(restored))
            return OperationResult.failure("delete", exc)
        return OperationResult.success("delete")

    async def toggle_completion(self, task: TaskEntity) -> OperationResult:
        updated = replace(task, is_completed=not task.is_completed)
        result = await self._apply_update("toggle_completion", updated)
        if result.ok:
            self._notify_completion_change(updated)
        return result

    def sort(self, criterion: SortOrder | str) -> None:
        key = _SORT_KEYS.get(criterion)
        if key is None:
            logger.debug("Ignoring unknown sort criterion %r", criterion)
            return
        self._set_state(tuple(sorted(self.state, key=key)))

    async def _refresh(self, operation: str, fetch: Callable[..., list[TaskEntity]], *args) -> OperationResult:
        try:
            tasks = await self._run_io(fetch, *args)
        except StorageError as exc:
            logger.exception("Error loading tasks (%s)", operation)
            return OperationResult.failure(operation, exc)
        self._set_state(tuple(tasks))
        return OperationResult.success(operation)

    async def _apply_update(self, operation: str, task: TaskEntity) -> OperationResult:
        previous = self.get(task.id)
        self._set_state(tuple(task if t.id == task.id else t for t in self.state))
        try:
            await self._run_io(self._repo.update_task, task)
        except StorageError as exc:
            logger.exception("Error updating task %s (%s)", task.id, operation)
            if previous is not None:
                self._set_state(tuple(previous if t is task else t for t in self.state))
            return OperationResult.failure(operation, exc)
        return OperationResult.success(operation)

    async def _run_io(self, fn: Callable[..., Any], *args) -> Any:
        async with self._io_lock:
            return await asyncio.to_thread(fn, *args)

    def _notify_completion_change(self, task: TaskEntity) -> None:
        notification_id = notification_id_for(task.id)
        now = self._now()
        try:
            if task.is_completed:
                self._notifier.cancel(notification_id)
                self._notifier.schedule_or_fire_now(
                    notification_id,
                    "Task Completed",
                    f'Your task "{task.title}" is completed.',
                    now,
                    True,
                )
            elif task.due_date is not None and task.due_date > now:
                self._notifier.schedule_or_fire_now(
                    notification_id,
                    "Task Due",
                    f'Your task "{task.title}" is due today.',
                    task.due_date,
                    False,
                )
        except Exception:  # noqa: BLE001
            logger.exception("Error handling notification for task %s", task.id)


def _by_due_date(task: TaskEntity) -> tuple[bool, datetime]:
    return task.due_date is None, task.due_date or datetime.min


def _by_priority(task: TaskEntity) -> int:
    return task.priority


_SORT_KEYS: dict[str, Callable[[TaskEntity], Any]] = {
    SortOrder.DATE: _by_due_date,
    SortOrder.PRIORITY: _by_priority,
}


def _drop_instance(tasks: Tasks, task: TaskEntity) -> Tasks:
    for index in range(len(tasks) - 1, -1, -1):
        if tasks[index] is task:
            return tasks[:index] + tasks[index + 1:]
    return tasks
