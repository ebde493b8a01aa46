# ABOUTME: Exceptions for webhook delivery.
# ABOUTME: Transport failures are retried and reported, so these cover configuration problems.

from linkedin_relay.errors import LinkedInRelayError


class DeliveryError(LinkedInRelayError):
    """Base exception for delivery errors."""

    pass


class EndpointSelectionError(DeliveryError):
    """Raised when no endpoint is configured or selected for LinkedIn data."""

    pass
