"""Notifiers: observers told about save/run outcomes for user feedback."""

import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """Outcome of a lifecycle operation."""

    operation: str  # "save", "run" or "approve"
    flow_id: str
    success: bool
    message: str


class Notifier(Protocol):
    """Protocol for receiving notifications. Must not raise."""

    def notify(self, notification: Notification) -> None:
        ...


class ListNotifier:
    """Stores notifications in a list."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def clear(self) -> None:
        self.notifications.clear()


class LoggingNotifier:
    """Writes notifications to the crewflow log."""

    def notify(self, notification: Notification) -> None:
        level = logging.INFO if notification.success else logging.WARNING
        logger.log(
            level,
            "%s %s for flow %s: %s",
            notification.operation,
            "succeeded" if notification.success else "failed",
            notification.flow_id,
            notification.message,
        )
