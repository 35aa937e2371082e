from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Optional

from .enums import PriorityLevel, SortOrder

PRIORITY_LABELS = {
    PriorityLevel.LOW: "Low",
    PriorityLevel.MEDIUM: "Medium",
    PriorityLevel.HIGH: "High",
}


@dataclass(frozen=True)
class TaskEntity:
    id: str
    title: str
    description: str
    due_date: Optional[datetime]
    priority: int
    is_completed: bool = False

    @property
    def priority_label(self) -> str:
        return priority_label(self.priority)


def priority_label(priority: int | None) -> str:
    """Display label for a priority ordinal; anything out of range is "Unknown"."""
    try:
        return PRIORITY_LABELS[PriorityLevel(priority)]
    except ValueError:
        return "Unknown"


def new_task(
    title: str,
    description: str = "",
    due_date: datetime | None = None,
    priority: int = PriorityLevel.MEDIUM,
) -> TaskEntity:
    """Create a task with a freshly generated id.

    A missing due date defaults to now, the same as submitting the add dialog
    without picking a date.
    """
    title = (title or "").strip()
    if not title:
        raise ValueError("Task title must not be empty")
    return TaskEntity(
        id=str(uuid.uuid4()),
        title=title,
        description=description or "",
        due_date=due_date or datetime.now(),
        priority=int(priority),
        is_completed=False,
    )


@dataclass(frozen=True)
class UserPreferences:
    is_dark_mode: bool = False
    sort_order: SortOrder = SortOrder.DATE

    def with_dark_mode(self, is_dark_mode: bool) -> UserPreferences:
        return replace(self, is_dark_mode=is_dark_mode)

    def with_sort_order(self, sort_order: SortOrder | str) -> UserPreferences:
        return replace(self, sort_order=SortOrder(sort_order))

    def to_dict(self) -> dict[str, Any]:
        return {"isDarkMode": self.is_dark_mode, "sortOrder": self.sort_order.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserPreferences:
        try:
            sort_order = SortOrder(data.get("sortOrder", SortOrder.DATE.value))
        except ValueError:
            sort_order = SortOrder.DATE
        return cls(is_dark_mode=bool(data.get("isDarkMode", False)), sort_order=sort_order)
