# ABOUTME: Relay configuration models supplied by the host (endpoints, delivery, limits).
# ABOUTME: The core only consumes these objects; loading them from disk lives in config.py.

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, Field


class DeliveryMode(str, Enum):
    """Which configured endpoints receive collected LinkedIn data."""

    NONE = "none"
    ALL = "all"
    SELECTED = "selected"


class EndpointConfig(BaseModel):
    """A webhook destination."""

    url: Annotated[str, Field(min_length=1, description="Destination URL")]
    name: Annotated[str, Field(description="Display name used in notifications")] = "Webhook"
    min_interval_seconds: Annotated[
        float, Field(ge=0, description="Minimum seconds between sends, 0 for unlimited")
    ] = 0


class RelayConfig(BaseModel):
    """Everything the extraction-and-delivery core needs from its host."""

    endpoints: Annotated[
        list[EndpointConfig], Field(default_factory=list, description="Webhook destinations")
    ]

    send_to: Annotated[
        DeliveryMode, Field(description="Deliver to none, all, or selected endpoints")
    ] = DeliveryMode.ALL

    selected_endpoints: Annotated[
        list[int],
        Field(
            default_factory=list,
            description="Indices into endpoints used when send_to is 'selected'",
        ),
    ]

    bidirectional: Annotated[
        bool, Field(description="Also emit one payload per connection")
    ] = False

    auto_collect_connections: Annotated[
        bool, Field(description="Collect mutual connections after relaying a profile")
    ] = False

    pacing_delay_seconds: Annotated[
        float | None, Field(ge=0, description="Fixed delay between pages, overrides the random range")
    ] = None

    min_page_delay_ms: Annotated[int, Field(ge=0)] = 2000
    max_page_delay_ms: Annotated[int, Field(ge=0)] = 7000
    min_item_delay_ms: Annotated[int, Field(ge=0)] = 200
    max_item_delay_ms: Annotated[int, Field(ge=0)] = 500

    max_pages: Annotated[int, Field(ge=1, description="Page cap per session")] = 50

    session_timeout_seconds: Annotated[
        float, Field(gt=0, description="Wall-clock limit for one collection session")
    ] = 300

    page_load_timeout_seconds: Annotated[
        float, Field(gt=0, description="Bounded wait for the next results page")
    ] = 10

    notification_interval_seconds: Annotated[
        float, Field(gt=0, description="Refresh cadence for queued notices")
    ] = 5

    notification_ceiling_seconds: Annotated[
        float, Field(gt=0, description="Queued notices stop refreshing after this long")
    ] = 60

    max_attempts: Annotated[int, Field(ge=1, description="Total POST attempts per delivery")] = 3
    http_retry_delay_seconds: Annotated[float, Field(ge=0)] = 1.0
    network_retry_delay_seconds: Annotated[float, Field(ge=0)] = 2.0
    request_timeout_seconds: Annotated[float, Field(gt=0)] = 30.0

    def target_endpoints(self) -> list[EndpointConfig]:
        """Resolve the endpoints that should receive LinkedIn data.

        Returns:
            Endpoints chosen by ``send_to``; out-of-range selections are ignored.
        """
        if self.send_to is DeliveryMode.NONE:
            return []
        if self.send_to is DeliveryMode.ALL:
            return list(self.endpoints)
        return [
            endpoint
            for index, endpoint in enumerate(self.endpoints)
            if index in self.selected_endpoints
        ]
