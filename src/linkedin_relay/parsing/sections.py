# ABOUTME: Section parser that builds one record from one DOM container.
# ABOUTME: Records missing their required field are dropped (None) instead of raising.

import logging
from urllib.parse import urljoin

from bs4 import Tag
from pydantic import ValidationError

from linkedin_relay.models import (
    ConnectionRecord,
    EducationEntry,
    ExperienceEntry,
    SkillEntry,
)
from linkedin_relay.parsing.fields import (
    extract_attribute,
    extract_text,
    find_count,
    has_match,
)
from linkedin_relay.parsing.selectors import SelectorConfig

logger = logging.getLogger(__name__)

_BULLETS = "•·"


def parse_experience_item(item: Tag, selectors: SelectorConfig) -> ExperienceEntry | None:
    """Build an ExperienceEntry from one experience list item.

    Args:
        item: The list-item container.
        selectors: Selector tables to read fields with.

    Returns:
        The entry, or None if the title could not be found.
    """
    title = extract_text(item, selectors.candidates("experience", "title"))
    if not title:
        logger.debug("Dropping experience item without a title")
        return None
    return ExperienceEntry(
        title=title,
        company=extract_text(item, selectors.candidates("experience", "company")),
        duration=extract_text(item, selectors.candidates("experience", "duration")),
        location=extract_text(item, selectors.candidates("experience", "location")),
        description=extract_text(item, selectors.candidates("experience", "description")),
    )


def parse_education_item(item: Tag, selectors: SelectorConfig) -> EducationEntry | None:
    """Build an EducationEntry from one education list item.

    Current markup renders "Degree, Field of study" in one span; when no
    dedicated field-of-study node exists the combined text is split on the
    first comma.

    Args:
        item: The list-item container.
        selectors: Selector tables to read fields with.

    Returns:
        The entry, or None if the school could not be found.
    """
    school = extract_text(item, selectors.candidates("education", "school"))
    if not school:
        logger.debug("Dropping education item without a school")
        return None

    degree = extract_text(item, selectors.candidates("education", "degree"))
    field_of_study = extract_text(item, selectors.candidates("education", "field_of_study"))
    if degree and not field_of_study and ", " in degree:
        degree, field_of_study = (part.strip() for part in degree.split(", ", 1))

    return EducationEntry(
        school=school,
        degree=degree,
        field_of_study=field_of_study,
        duration=extract_text(item, selectors.candidates("education", "duration")),
        description=extract_text(item, selectors.candidates("education", "description")),
    )


def parse_skill_item(item: Tag, selectors: SelectorConfig) -> SkillEntry | None:
    """Build a SkillEntry; endorsements stay free text (e.g. "99+ endorsements")."""
    name = extract_text(item, selectors.candidates("skills", "name"))
    if not name:
        logger.debug("Dropping skill item without a name")
        return None
    return SkillEntry(
        name=name,
        endorsements=extract_text(item, selectors.candidates("skills", "endorsements")),
    )


def parse_connection_item(
    item: Tag,
    selectors: SelectorConfig,
    base_url: str | None = None,
) -> ConnectionRecord | None:
    """Build a ConnectionRecord from one search-result row.

    Args:
        item: The result-item container.
        selectors: Selector tables to read fields with.
        base_url: Page URL used to resolve relative profile links.

    Returns:
        The record, or None if the name or profile URL is missing.
    """
    name = extract_text(item, selectors.candidates("connection", "name"))
    href = extract_attribute(item, selectors.candidates("connection", "profile_url"), "href")
    if not name or not href:
        logger.debug("Dropping result item (name=%r, url=%r)", name, href)
        return None

    profile_url = urljoin(base_url, href) if base_url else href
    degree = extract_text(item, selectors.candidates("connection", "degree"))
    if degree:
        degree = degree.strip(_BULLETS + " ") or None

    try:
        return ConnectionRecord(
            name=name,
            profile_url=profile_url,
            headline=extract_text(item, selectors.candidates("connection", "headline")),
            location=extract_text(item, selectors.candidates("connection", "location")),
            profile_image_url=extract_attribute(
                item, selectors.candidates("connection", "image"), "src"
            ),
            connection_degree=degree,
            is_premium=has_match(item, selectors.candidates("connection", "premium")),
        )
    except ValidationError as e:
        logger.warning("Dropping invalid result item %r: %s", name, e)
        return None


def parse_profile_header(root: Tag, selectors: SelectorConfig) -> dict[str, object]:
    """Read the top-card fields of a profile page.

    Returns:
        Dict of ProfileRecord field names to values; missing fields are None.
    """
    return {
        "name": extract_text(root, selectors.candidates("profile", "name")),
        "title": extract_text(root, selectors.candidates("profile", "title")),
        "location": extract_text(root, selectors.candidates("profile", "location")),
        "profile_image_url": extract_attribute(
            root, selectors.candidates("profile", "image"), "src"
        ),
        "about": extract_text(root, selectors.candidates("profile", "about")),
        "connections_count": find_count(
            root, selectors.candidates("profile", "connections_count"), "connection"
        ),
        "followers_count": find_count(
            root, selectors.candidates("profile", "followers_count"), "follower"
        ),
        "mutual_connections_count": find_count(
            root, selectors.candidates("profile", "mutual_connections"), "mutual"
        ),
        "mutual_connections_url": extract_attribute(
            root, selectors.candidates("profile", "mutual_connections"), "href"
        ),
        "is_premium": has_match(root, selectors.candidates("profile", "premium")),
    }
