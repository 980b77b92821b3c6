"""Transient user-facing notifications.

Services report outcomes here instead of raising into the caller; the CLI and
web layers drain the queue and render the messages.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class NotificationKind(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Notification:
    """A message for the user."""
    kind: NotificationKind
    message: str
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }


class Notifier:
    """Collects notifications until they are drained."""

    def __init__(self, max_pending: int = 50):
        self._pending: list[Notification] = []
        self._max_pending = max_pending

    def push(self, message: str, kind: NotificationKind = NotificationKind.INFO) -> None:
        self._pending.append(Notification(kind, message))
        # Oldest messages are dropped once nobody has drained for a while
        if len(self._pending) > self._max_pending:
            del self._pending[: -self._max_pending]

    def info(self, message: str) -> None:
        self.push(message, NotificationKind.INFO)

    def success(self, message: str) -> None:
        self.push(message, NotificationKind.SUCCESS)

    def error(self, message: str) -> None:
        self.push(message, NotificationKind.ERROR)

    @property
    def pending(self) -> list[Notification]:
        return list(self._pending)

    def drain(self) -> list[Notification]:
        """Return and clear all pending notifications."""
        drained, self._pending = self._pending, []
        return drained
