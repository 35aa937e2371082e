from __future__ import annotations

import logging
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Observable(Generic[T]):
    """Holds a state value and notifies subscribers synchronously on change."""

    def __init__(self, initial: T) -> None:
        self._state = initial
        self._subscribers: list[Callable[[T], None]] = []

    @property
    def state(self) -> T:
        return self._state

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _set_state(self, state: T) -> None:
        self._state = state
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception:  # noqa: BLE001
                logger.exception("Subscriber %r failed", callback)
