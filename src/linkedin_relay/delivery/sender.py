# ABOUTME: Posts one JSON payload to a webhook with a bounded number of attempts.
# ABOUTME: Non-2xx responses and transport errors are retried, then reported through the sink.

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from pydantic import BaseModel

from linkedin_relay.models import RelayConfig
from linkedin_relay.notifications import Notification, NotificationKind, NotificationSink, NullSink

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class DeliveryResult(BaseModel):
    """Outcome of one delivery, after all retries."""

    url: str
    display_name: str
    ok: bool
    attempts: int
    status_code: int | None = None
    error: str | None = None


class WebhookSender:
    """Sends payloads with httpx, retrying on failure.

    After a non-2xx response the next attempt waits ``http_retry_delay_seconds``;
    after a transport error it waits ``network_retry_delay_seconds``.
    """

    def __init__(
        self,
        config: RelayConfig | None = None,
        sink: NotificationSink | None = None,
        client: httpx.AsyncClient | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize the sender.

        Args:
            config: Attempt count, retry delays and request timeout.
            sink: Where success and failure notifications go.
            client: HTTP client to use; one is created (and owned) if omitted.
            sleep: Awaitable sleep used between attempts.
        """
        self.config = config or RelayConfig()
        self.sink = sink or NullSink()
        self._client = client
        self._owns_client = client is None
        self._sleep = sleep

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.request_timeout_seconds)
        return self._client

    async def send(
        self,
        url: str,
        payload: dict[str, Any],
        display_name: str = "Webhook",
    ) -> DeliveryResult:
        """POST ``payload`` as JSON until it succeeds or attempts run out.

        Args:
            url: Destination URL.
            payload: JSON-serializable body.
            display_name: Endpoint name used in notifications.

        Returns:
            DeliveryResult describing the final outcome. Never raises for
            HTTP or network failures.
        """
        max_attempts = self.config.max_attempts
        status_code: int | None = None
        error: str | None = None

        for attempt in range(1, max_attempts + 1):
            try:
                response = await self.client.post(
                    url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                status_code = None
                error = f"Network error: {e}"
                logger.warning(
                    "POST to %s failed (attempt %d/%d): %s", display_name, attempt, max_attempts, e
                )
                if attempt < max_attempts:
                    await self._sleep(self.config.network_retry_delay_seconds)
                continue

            if response.is_success:
                logger.info("Delivered to %s with status %d", display_name, response.status_code)
                result = DeliveryResult(
                    url=url,
                    display_name=display_name,
                    ok=True,
                    attempts=attempt,
                    status_code=response.status_code,
                )
                self.sink.notify(
                    Notification(
                        kind=NotificationKind.SUCCESS,
                        channel=display_name,
                        message=f"Data sent successfully to {display_name}",
                        detail={"url": url, "attempts": attempt, "status_code": response.status_code},
                    )
                )
                return result

            status_code = response.status_code
            error = f"HTTP {response.status_code}"
            logger.warning(
                "%s answered %d (attempt %d/%d)", display_name, status_code, attempt, max_attempts
            )
            if attempt < max_attempts:
                await self._sleep(self.config.http_retry_delay_seconds)

        logger.error("Giving up on %s after %d attempts: %s", display_name, max_attempts, error)
        self.sink.notify(
            Notification(
                kind=NotificationKind.FAILURE,
                channel=display_name,
                message=f"Failed to send data after {max_attempts} attempts ({error})",
                detail={"url": url, "attempts": max_attempts, "status_code": status_code, "error": error},
            )
        )
        return DeliveryResult(
            url=url,
            display_name=display_name,
            ok=False,
            attempts=max_attempts,
            status_code=status_code,
            error=error,
        )

    async def aclose(self) -> None:
        """Close the HTTP client if this sender created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
