# ABOUTME: Per-endpoint FIFO delivery queues with a minimum interval between sends.
# ABOUTME: Sends run as independent tasks; queued notices carry the depth and an ETA.

import asyncio
import logging
import math
import time
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from linkedin_relay.delivery.sender import DeliveryResult
from linkedin_relay.models import RelayConfig
from linkedin_relay.notifications import Notification, NotificationKind, NotificationSink, NullSink

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class Sender(Protocol):
    async def send(self, url: str, payload: dict[str, Any], display_name: str) -> DeliveryResult: ...

    async def aclose(self) -> None: ...


@dataclass
class QueueEntry:
    """One payload waiting for its endpoint."""

    endpoint_url: str
    payload: dict[str, Any]
    display_name: str
    enqueued_at: float


@dataclass
class EndpointQueueState:
    """Queue and timing state for one destination URL."""

    url: str
    min_interval: float = 0.0
    queue: deque[QueueEntry] = field(default_factory=deque)
    last_sent: float | None = None
    timer: asyncio.Task | None = None
    notice_task: asyncio.Task | None = None
    notice_channel: str | None = None

    def wait_remaining(self, now: float) -> float:
        """Seconds until the interval allows the next send (0 when it already does)."""
        if self.min_interval <= 0 or self.last_sent is None:
            return 0.0
        return max(0.0, self.min_interval - (now - self.last_sent))

    def eta_seconds(self, now: float) -> int:
        """Estimated seconds until the newest entry is sent."""
        depth = len(self.queue)
        return math.ceil(self.wait_remaining(now) + max(0, depth - 1) * self.min_interval)


class DeliveryQueueManager:
    """Owns one EndpointQueueState per destination URL.

    Must be used from inside a running event loop: enqueue schedules timers
    and send tasks on it. Endpoints share no state, so a slow or rate-limited
    endpoint never delays another.
    """

    def __init__(
        self,
        sender: Sender,
        sink: NotificationSink | None = None,
        config: RelayConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize the manager.

        Args:
            sender: Performs the POST with retries.
            sink: Receives queued notices (and is usually shared with the sender).
            config: Notice refresh cadence and ceiling.
            clock: Monotonic clock, injectable for tests.
            sleep: Awaitable sleep used by timers, injectable for tests.
        """
        self.sender = sender
        self.sink = sink or NullSink()
        self.config = config or RelayConfig()
        self._clock = clock
        self._sleep = sleep
        self._endpoints: dict[str, EndpointQueueState] = {}
        self._send_tasks: set[asyncio.Task] = set()
        self.results: list[DeliveryResult] = []

    def depth(self, endpoint_url: str) -> int:
        """Number of entries still waiting for ``endpoint_url``."""
        state = self._endpoints.get(endpoint_url)
        return len(state.queue) if state else 0

    def endpoint_state(self, endpoint_url: str) -> EndpointQueueState | None:
        return self._endpoints.get(endpoint_url)

    def enqueue(
        self,
        endpoint_url: str,
        payload: dict[str, Any],
        display_name: str = "Webhook",
        min_interval_seconds: float = 0,
    ) -> QueueEntry:
        """Add a payload to an endpoint's queue and process the queue.

        A "queued" notification is raised when the entry will not go out
        right away, i.e. the endpoint is rate limited and either other
        entries are waiting or the interval since the last send has not
        elapsed yet.

        Args:
            endpoint_url: Destination URL; one queue exists per URL.
            payload: JSON-serializable body.
            display_name: Endpoint name used in notifications.
            min_interval_seconds: Minimum gap between sends; 0 is unlimited.
                The latest value wins for the endpoint.

        Returns:
            The queued entry.
        """
        state = self._endpoints.get(endpoint_url)
        if state is None:
            state = EndpointQueueState(url=endpoint_url)
            self._endpoints[endpoint_url] = state
        state.min_interval = float(min_interval_seconds)

        now = self._clock()
        entry = QueueEntry(
            endpoint_url=endpoint_url,
            payload=payload,
            display_name=display_name,
            enqueued_at=now,
        )
        state.queue.append(entry)

        will_be_queued = state.min_interval > 0 and (
            len(state.queue) > 1 or state.wait_remaining(now) > 0
        )
        if will_be_queued:
            self._show_notice(state, display_name)

        self._process(state)
        return entry

    def _process(self, state: EndpointQueueState) -> None:
        while state.queue:
            now = self._clock()
            wait = state.wait_remaining(now)
            if wait > 0:
                self._schedule(state, wait)
                return

            entry = state.queue.popleft()
            state.last_sent = now
            self._clear_notice(state)
            self._dispatch(entry)

            if state.queue and state.min_interval > 0:
                self._schedule(state, state.min_interval)
                return

    def _schedule(self, state: EndpointQueueState, delay: float) -> None:
        if state.timer is not None and not state.timer.done():
            state.timer.cancel()
        state.timer = asyncio.create_task(self._fire_after(state, delay))

    async def _fire_after(self, state: EndpointQueueState, delay: float) -> None:
        await self._sleep(delay)
        state.timer = None
        self._process(state)

    def _dispatch(self, entry: QueueEntry) -> None:
        logger.info("Sending queued payload to %s", entry.display_name)
        task = asyncio.create_task(
            self.sender.send(entry.endpoint_url, entry.payload, entry.display_name)
        )
        self._send_tasks.add(task)
        task.add_done_callback(self._on_send_done)

    def _on_send_done(self, task: asyncio.Task) -> None:
        self._send_tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Delivery task crashed: %s", error, exc_info=error)
            return
        self.results.append(task.result())

    def _queued_notification(self, state: EndpointQueueState, display_name: str, refresh: bool) -> Notification:
        depth = len(state.queue)
        eta = state.eta_seconds(self._clock())
        return Notification(
            kind=NotificationKind.QUEUED,
            channel=display_name,
            message=f"{depth} in queue, ~{eta}s remaining",
            detail={"url": state.url, "depth": depth, "eta_seconds": eta, "refresh": refresh},
        )

    def _show_notice(self, state: EndpointQueueState, display_name: str) -> None:
        self._clear_notice(state)
        self.sink.notify(self._queued_notification(state, display_name, refresh=False))
        state.notice_channel = display_name
        state.notice_task = asyncio.create_task(self._refresh_notice(state, display_name))

    async def _refresh_notice(self, state: EndpointQueueState, display_name: str) -> None:
        started = self._clock()
        interval = self.config.notification_interval_seconds
        ceiling = self.config.notification_ceiling_seconds
        while True:
            await self._sleep(interval)
            if not state.queue or self._clock() - started >= ceiling:
                break
            self.sink.notify(self._queued_notification(state, display_name, refresh=True))
        state.notice_task = None
        state.notice_channel = None
        self.sink.dismiss(display_name)

    def _clear_notice(self, state: EndpointQueueState) -> None:
        if state.notice_task is None:
            return
        state.notice_task.cancel()
        state.notice_task = None
        if state.notice_channel is not None:
            self.sink.dismiss(state.notice_channel)
            state.notice_channel = None

    def _pending_tasks(self) -> list[asyncio.Task]:
        timers = [s.timer for s in self._endpoints.values() if s.timer is not None and not s.timer.done()]
        return timers + [t for t in self._send_tasks if not t.done()]

    async def wait_idle(self) -> list[DeliveryResult]:
        """Wait until every queue is empty and every send has finished.

        Returns:
            Delivery results finished since the previous call; they are
            handed over and no longer kept by the manager.
        """
        while True:
            pending = self._pending_tasks()
            if not pending:
                break
            await asyncio.gather(*pending, return_exceptions=True)
        results, self.results = self.results, []
        return results

    async def aclose(self, drain: bool = True) -> None:
        """Tear down timers, notices and the sender.

        Args:
            drain: Deliver everything still queued before closing.
        """
        if drain:
            await self.wait_idle()
        for state in self._endpoints.values():
            if state.timer is not None:
                state.timer.cancel()
                state.timer = None
            self._clear_notice(state)
        for task in list(self._send_tasks):
            task.cancel()
        await self.sender.aclose()
