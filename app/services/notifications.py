from __future__ import annotations

import asyncio
import logging
import zlib
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    id: int
    title: str
    body: str
    when: datetime


def notification_id_for(task_id: str) -> int:
    """Stable notification slot for a task id.

    Distinct ids can collide on the same slot; a later schedule then replaces
    the earlier one.
    """
    return zlib.crc32(task_id.encode("utf-8")) & 0x7FFFFFFF


class NotificationScheduler(Protocol):
    def schedule_or_fire_now(
        self,
        notification_id: int,
        title: str,
        body: str,
        when: datetime,
        fire_immediately: bool,
    ) -> None: ...

    def cancel(self, notification_id: int) -> None: ...


def log_notification(notification: Notification) -> None:
    logger.info("Notification %s: %s - %s", notification.id, notification.title, notification.body)


class LocalNotificationScheduler:
    """One-shot local alerts driven by the running asyncio loop."""

    def __init__(
        self,
        deliver: Callable[[Notification], None] = log_notification,
        *,
        enabled: bool = True,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._deliver = deliver
        self._enabled = enabled
        self._now = now
        self._pending: dict[int, asyncio.TimerHandle] = {}

    def schedule_or_fire_now(
        self,
        notification_id: int,
        title: str,
        body: str,
        when: datetime,
        fire_immediately: bool,
    ) -> None:
        if not self._enabled:
            logger.debug("Notifications disabled; dropping %s", notification_id)
            return

        notification = Notification(notification_id, title, body, when)
        try:
            if fire_immediately:
                self._fire(notification)
                return

            self.cancel(notification_id)
            loop = asyncio.get_running_loop()
            delay = max((when - self._now()).total_seconds(), 0.0)
            self._pending[notification_id] = loop.call_later(delay, self._fire_scheduled, notification)
            logger.debug("Scheduled notification %s in %.0fs", notification_id, delay)
        except Exception:  # noqa: BLE001
            logger.exception("Error scheduling notification %s", notification_id)

    def cancel(self, notification_id: int) -> None:
        handle = self._pending.pop(notification_id, None)
        if handle is not None:
            handle.cancel()
            logger.debug("Cancelled notification %s", notification_id)

    def cancel_all(self) -> None:
        for notification_id in list(self._pending):
            self.cancel(notification_id)

    def pending_ids(self) -> list[int]:
        return list(self._pending)

    def _fire_scheduled(self, notification: Notification) -> None:
        self._pending.pop(notification.id, None)
        self._fire(notification)

    def _fire(self, notification: Notification) -> None:
        try:
            self._deliver(notification)
        except Exception:  # noqa: BLE001
            logger.exception("Error delivering notification %s", notification.id)
