# ABOUTME: Builds the JSON payloads posted to webhooks from profiles and session results.
# ABOUTME: Bidirectional mode adds one payload per connection describing the reverse relationship.

import random
import string
from datetime import UTC, datetime
from typing import Any

from linkedin_relay.models import ConnectionRecord, ProfileRecord, SessionResult
from linkedin_relay.parsing.page import extract_linkedin_id

SCHEMA_VERSION = "2.0"
CONNECTIONS_SOURCE = "linkedin-mutual-connections"
BIDIRECTIONAL_SOURCE = "linkedin-bidirectional-connection"
RELATION_TYPE = "mutual_connection"
RELAY_SOURCE = "linkedin-relay"
PROFILE_TYPE = "linkedin_profile"
CONNECTIONS_TYPE = "linkedin_mutual_connections"

_BASE36 = string.digits + string.ascii_lowercase


def _timestamp(now: datetime | None = None) -> str:
    return (now or datetime.now(UTC)).isoformat()


def generate_session_id(now: datetime | None = None, rng: random.Random | None = None) -> str:
    """Return an id of the form "<epoch-ms>-<9 base36 chars>"."""
    moment = now or datetime.now(UTC)
    chooser = rng or random
    suffix = "".join(chooser.choice(_BASE36) for _ in range(9))
    return f"{int(moment.timestamp() * 1000)}-{suffix}"


def _metadata(source: str, now: datetime | None, **extra: str) -> dict[str, Any]:
    return {
        "timestamp": _timestamp(now),
        "sessionId": generate_session_id(now),
        "version": SCHEMA_VERSION,
        "source": source,
        **extra,
    }


def build_single(result: SessionResult, now: datetime | None = None) -> dict[str, Any]:
    """Wrap a session's connections into one aggregate payload.

    Args:
        result: Completed or partial session result.
        now: Timestamp override for tests.

    Returns:
        Payload with profileViewed, mutualConnections, counts and metadata.
    """
    source = result.source
    return {
        "profileViewed": {
            "name": source.name or "",
            "profileUrl": source.profile_url or "",
            "encodedId": source.encoded_id or "",
        },
        "mutualConnections": [connection.to_wire() for connection in result.connections],
        "totalCount": len(result.connections),
        "pagesScraped": result.pages_processed,
        "extractionDuration": result.duration_ms,
        "metadata": _metadata(CONNECTIONS_SOURCE, now),
    }


def build_connection_payload(
    result: SessionResult,
    connection: ConnectionRecord,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Describe the relationship from one connection's point of view."""
    source = result.source
    details = connection.to_wire()
    return {
        "profileViewed": {
            "name": connection.name,
            "profileUrl": connection.profile_url,
            "linkedinId": extract_linkedin_id(connection.profile_url),
        },
        "mutualConnectionsWith": {
            "name": source.name or "",
            "profileUrl": source.profile_url or "",
            "linkedinId": extract_linkedin_id(source.profile_url),
            "encodedId": source.encoded_id or "",
        },
        "connectionDetails": {
            key: details[key]
            for key in (
                "headline",
                "location",
                "profileImageUrl",
                "connectionDegree",
                "isPremium",
                "extractedAt",
            )
        },
        "metadata": _metadata(BIDIRECTIONAL_SOURCE, now, relationType=RELATION_TYPE),
    }


def build_bidirectional(result: SessionResult, now: datetime | None = None) -> list[dict[str, Any]]:
    """Return the aggregate payload followed by one payload per connection."""
    payloads = [build_single(result, now)]
    payloads.extend(build_connection_payload(result, c, now) for c in result.connections)
    return payloads


def build_profile_payload(
    profile: ProfileRecord,
    url: str | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Wrap a parsed profile for delivery.

    Args:
        profile: Parsed profile record.
        url: Page URL; defaults to the profile's own URL.
        now: Timestamp override for tests.
    """
    return {
        "url": url or profile.profile_url,
        "timestamp": _timestamp(now),
        "type": PROFILE_TYPE,
        "profile": profile.to_wire(),
        "source": RELAY_SOURCE,
    }


def enhance_for_delivery(payload: dict[str, Any], now: datetime | None = None) -> dict[str, Any]:
    """Stamp a connections payload with delivery metadata before queueing.

    Returns:
        A new dict; the input is not modified.
    """
    return {
        **payload,
        "timestamp": _timestamp(now),
        "type": CONNECTIONS_TYPE,
        "source": RELAY_SOURCE,
    }
