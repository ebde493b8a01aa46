# ABOUTME: Delivery package: payload builders, the webhook sender and per-endpoint queues.
# ABOUTME: Exports DeliveryQueueManager, WebhookSender and the payload helpers.

from linkedin_relay.delivery.exceptions import DeliveryError, EndpointSelectionError
from linkedin_relay.delivery.payloads import (
    build_bidirectional,
    build_profile_payload,
    build_single,
    enhance_for_delivery,
    generate_session_id,
)
from linkedin_relay.delivery.queue import DeliveryQueueManager, EndpointQueueState, QueueEntry
from linkedin_relay.delivery.sender import DeliveryResult, WebhookSender

__all__ = [
    "DeliveryError",
    "DeliveryQueueManager",
    "DeliveryResult",
    "EndpointQueueState",
    "EndpointSelectionError",
    "QueueEntry",
    "WebhookSender",
    "build_bidirectional",
    "build_profile_payload",
    "build_single",
    "enhance_for_delivery",
    "generate_session_id",
]
