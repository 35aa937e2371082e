from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a store operation.

    Storage failures are reported here instead of being raised, so callers
    decide whether to surface them.
    """

    operation: str
    ok: bool = True
    error: Exception | None = None

    @classmethod
    def success(cls, operation: str) -> OperationResult:
        return cls(operation=operation)

    @classmethod
    def failure(cls, operation: str, error: Exception) -> OperationResult:
        return cls(operation=operation, ok=False, error=error)

    def __bool__(self) -> bool:
        return self.ok
