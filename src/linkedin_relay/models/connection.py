# ABOUTME: Pydantic models for search-result connections and the profile they belong to.
# ABOUTME: ConnectionRecord always carries a name and a profile URL.

from datetime import UTC, datetime
from typing import Annotated

from pydantic import Field

from linkedin_relay.models.base import WireModel


class ConnectionRecord(WireModel):
    """A single row from a connections search-results page."""

    name: Annotated[str, Field(min_length=1)]
    profile_url: Annotated[str, Field(min_length=1)]
    headline: str | None = None
    location: str | None = None
    profile_image_url: str | None = None
    connection_degree: str | None = None
    is_premium: bool = False
    extracted_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ConnectionsAffordance(WireModel):
    """The "shared connections" link found on a profile page."""

    search_url: str
    encoded_id: str
    approx_count: int | None = None
    raw_text: str = ""


class SourceProfile(WireModel):
    """The profile whose mutual connections are being collected."""

    name: str = ""
    profile_url: str = ""
    encoded_id: str = ""
    expected_count: int | None = None
