from __future__ import annotations

from enum import IntEnum, StrEnum


class PriorityLevel(IntEnum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2


class SortOrder(StrEnum):
    DATE = "date"
    PRIORITY = "priority"
