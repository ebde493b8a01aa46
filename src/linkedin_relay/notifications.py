# ABOUTME: Notification sink the delivery queue and service report progress through.
# ABOUTME: The host decides how to render them: callback, log lines, memory, or the terminal.

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    """What a notification reports."""

    QUEUED = "queued"
    SUCCESS = "success"
    FAILURE = "failure"
    INFO = "info"


class Notification(BaseModel):
    """One user-visible event.

    ``channel`` is the endpoint display name (or "session" for collection
    summaries); a later notification on the same channel replaces an earlier
    one, and ``dismiss`` clears it.
    """

    kind: NotificationKind
    channel: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


@runtime_checkable
class NotificationSink(Protocol):
    def notify(self, notification: Notification) -> None: ...

    def dismiss(self, channel: str) -> None: ...


class CallbackSink:
    """Adapts a plain callable to the sink protocol; dismissals are dropped."""

    def __init__(
        self,
        callback: Callable[[Notification], None],
        on_dismiss: Callable[[str], None] | None = None,
    ) -> None:
        self._callback = callback
        self._on_dismiss = on_dismiss

    def notify(self, notification: Notification) -> None:
        self._callback(notification)

    def dismiss(self, channel: str) -> None:
        if self._on_dismiss is not None:
            self._on_dismiss(channel)


class LoggingSink:
    """Writes notifications to the standard logging tree."""

    _LEVELS = {
        NotificationKind.QUEUED: logging.INFO,
        NotificationKind.SUCCESS: logging.INFO,
        NotificationKind.INFO: logging.INFO,
        NotificationKind.FAILURE: logging.ERROR,
    }

    def __init__(self, name: str = "linkedin_relay.notifications") -> None:
        self._logger = logging.getLogger(name)

    def notify(self, notification: Notification) -> None:
        self._logger.log(
            self._LEVELS[notification.kind],
            "[%s] %s: %s",
            notification.kind.value,
            notification.channel,
            notification.message,
        )

    def dismiss(self, channel: str) -> None:
        self._logger.debug("Dismissed notice for %s", channel)


class RecordingSink:
    """Keeps every notification in memory, in order."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []
        self.dismissed: list[str] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def dismiss(self, channel: str) -> None:
        self.dismissed.append(channel)

    def of_kind(self, kind: NotificationKind) -> list[Notification]:
        """Return the recorded notifications of one kind."""
        return [n for n in self.notifications if n.kind is kind]


class NullSink:
    """Discards everything."""

    def notify(self, notification: Notification) -> None:
        pass

    def dismiss(self, channel: str) -> None:
        pass
