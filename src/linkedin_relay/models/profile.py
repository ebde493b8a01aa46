# ABOUTME: Pydantic models for a parsed LinkedIn profile page.
# ABOUTME: Partial records are valid; only list entries have a required field.

from datetime import UTC, datetime
from typing import Annotated

from pydantic import Field

from linkedin_relay.models.base import WireModel


class ExperienceEntry(WireModel):
    """One position from the experience section."""

    title: Annotated[str, Field(min_length=1)]
    company: str | None = None
    duration: str | None = None
    location: str | None = None
    description: str | None = None


class EducationEntry(WireModel):
    """One school from the education section."""

    school: Annotated[str, Field(min_length=1)]
    degree: str | None = None
    field_of_study: str | None = None
    duration: str | None = None
    description: str | None = None


class SkillEntry(WireModel):
    """One skill with its endorsement text (e.g. "99+ endorsements")."""

    name: Annotated[str, Field(min_length=1)]
    endorsements: str | None = None


class ProfileRecord(WireModel):
    """Best-effort snapshot of a profile page.

    Every scalar field is nullable: a missing DOM node yields None rather
    than an error. ``linkedin_id`` is derived from ``profile_url``.
    """

    name: str | None = None
    title: str | None = None
    location: str | None = None
    profile_image_url: str | None = None
    profile_url: str | None = None
    about: str | None = None
    connections_count: int | None = None
    followers_count: int | None = None
    mutual_connections_count: int | None = None
    mutual_connections_url: str | None = None
    is_premium: bool = False
    linkedin_id: str | None = None
    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    skills: list[SkillEntry] = Field(default_factory=list)
    extracted_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
