# ABOUTME: Notification sink that prints delivery and session notices to a Rich console.
# ABOUTME: Queued notices are only printed when their depth or ETA changes to keep output short.

from rich.console import Console

from linkedin_relay.notifications import Notification, NotificationKind

_KIND_STYLES: dict[NotificationKind, tuple[str, str]] = {
    NotificationKind.QUEUED: ("queued", "yellow"),
    NotificationKind.SUCCESS: ("success", "green"),
    NotificationKind.FAILURE: ("failed", "red"),
    NotificationKind.INFO: ("info", "blue"),
}


class RichNoticeSink:
    """Renders notifications as single console lines."""

    def __init__(self, console: Console) -> None:
        self.console = console
        self._last_queued: dict[str, str] = {}

    def notify(self, notification: Notification) -> None:
        if notification.kind is NotificationKind.QUEUED:
            if self._last_queued.get(notification.channel) == notification.message:
                return
            self._last_queued[notification.channel] = notification.message

        label, style = _KIND_STYLES[notification.kind]
        self.console.print(
            f"[{style}]{label:>8}[/{style}] [bold]{notification.channel}[/bold]: {notification.message}",
            highlight=False,
        )

    def dismiss(self, channel: str) -> None:
        self._last_queued.pop(channel, None)
