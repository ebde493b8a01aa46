# ABOUTME: Page parser for profile pages and paginated connection search results.
# ABOUTME: Selector tables are injected so drifted markup can be patched without code changes.

import logging
import re
from typing import Annotated
from urllib.parse import parse_qs, urljoin, urlparse

from bs4 import Tag
from pydantic import BaseModel, Field

from linkedin_relay.models import (
    ConnectionRecord,
    ConnectionsAffordance,
    EducationEntry,
    ExperienceEntry,
    ProfileRecord,
    SkillEntry,
)
from linkedin_relay.parsing.fields import (
    ensure_soup,
    extract_attribute,
    normalize_text,
    parse_count,
    select_all,
    select_first,
)
from linkedin_relay.parsing.sections import (
    parse_connection_item,
    parse_education_item,
    parse_experience_item,
    parse_profile_header,
    parse_skill_item,
)
from linkedin_relay.parsing.selectors import SECTIONS, SelectorConfig

logger = logging.getLogger(__name__)

# The shared-connections label ("Jane, John and 5 other mutual connections")
# counts only the people not named inline. Two names are shown inline, so the
# total is the label count plus this offset. Observed UI convention, unverified.
NAMED_CONNECTIONS_OFFSET = 2

CONNECTION_FACET_PARAM = "facetConnectionOf"

_PROFILE_SLUG = re.compile(r"/in/([^/?#]+)")


def extract_linkedin_id(url: str | None) -> str | None:
    """Return the profile slug from a /in/<slug> URL, or None."""
    if not url:
        return None
    match = _PROFILE_SLUG.search(url)
    return match.group(1) if match else None


def decode_facet_value(raw: str) -> str | None:
    """Normalize a facetConnectionOf value.

    The parameter is sent either as a quoted string (``"ABC"``) or a JSON-ish
    list (``["ABC"]``); both reduce to the bare identifier.

    Args:
        raw: The URL-decoded parameter value.

    Returns:
        The first identifier, or None when nothing is left after stripping.
    """
    value = raw.strip().strip("[]")
    first = value.split(",", 1)[0].strip().strip("\"'")
    return first or None


class SelectorProbe(BaseModel):
    """Match counts for one field's candidate selectors on a page."""

    section: str
    field: str
    counts: Annotated[dict[str, int], Field(default_factory=dict)]

    @property
    def matched(self) -> bool:
        return any(count > 0 for count in self.counts.values())

    @property
    def winning_selector(self) -> str | None:
        """First candidate with at least one match, which is what parsing uses."""
        for selector, count in self.counts.items():
            if count > 0:
                return selector
        return None


class PageParser:
    """Parses profile pages and connection search-result pages.

    All reads are best-effort: missing markup yields None fields or dropped
    records, never an exception.
    """

    def __init__(self, selectors: SelectorConfig | None = None) -> None:
        """Initialize the parser.

        Args:
            selectors: Selector tables; defaults to the built-in tables.
        """
        self.selectors = selectors or SelectorConfig()

    def parse_profile_page(self, page: "str | bytes | Tag", url: str | None = None) -> ProfileRecord:
        """Assemble a ProfileRecord from a profile page.

        Args:
            page: HTML snapshot or parsed tree.
            url: Canonical profile URL, used for the id and relative links.

        Returns:
            A (possibly partial) ProfileRecord.
        """
        soup = ensure_soup(page)
        header = parse_profile_header(soup, self.selectors)
        mutual_url = header.get("mutual_connections_url")
        if isinstance(mutual_url, str) and url:
            header["mutual_connections_url"] = urljoin(url, mutual_url)

        profile = ProfileRecord(
            **header,
            profile_url=url,
            linkedin_id=extract_linkedin_id(url),
            experience=self._parse_section(soup, "experience", parse_experience_item),
            education=self._parse_section(soup, "education", parse_education_item),
            skills=self._parse_section(soup, "skills", parse_skill_item),
        )
        logger.info(
            "Parsed profile %r: %d experience, %d education, %d skills",
            profile.name,
            len(profile.experience),
            len(profile.education),
            len(profile.skills),
        )
        return profile

    def _parse_section(self, soup: Tag, section: str, build) -> list:
        container = select_first(soup, self.selectors.candidates("profile", f"{section}_section"))
        if container is None:
            logger.debug("No %s section found", section)
            return []
        items = select_all(container, self.selectors.candidates(section, "items"))
        records: list[ExperienceEntry | EducationEntry | SkillEntry] = []
        for item in items:
            record = build(item, self.selectors)
            if record is not None:
                records.append(record)
        return records

    def detect_connections_affordance(
        self,
        page: "str | bytes | Tag",
        base_url: str | None = None,
    ) -> ConnectionsAffordance | None:
        """Locate the shared-connections link on a profile page.

        Args:
            page: HTML snapshot or parsed tree.
            base_url: Page URL used to resolve a relative href.

        Returns:
            The affordance, or None when no link carries a facetConnectionOf
            parameter.
        """
        soup = ensure_soup(page)
        candidates = self.selectors.candidates("search", "connections_link")
        for selector in candidates:
            for anchor in select_all(soup, [selector]):
                href = anchor.get("href")
                if not isinstance(href, str) or not href:
                    continue
                values = parse_qs(urlparse(href).query).get(CONNECTION_FACET_PARAM)
                if not values:
                    continue
                encoded_id = decode_facet_value(values[0])
                if not encoded_id:
                    continue

                raw_text = normalize_text(anchor.get_text(" ")) or ""
                label_count = parse_count(raw_text, "mutual")
                approx_count = (
                    label_count + NAMED_CONNECTIONS_OFFSET if label_count is not None else None
                )
                return ConnectionsAffordance(
                    search_url=urljoin(base_url, href) if base_url else href,
                    encoded_id=encoded_id,
                    approx_count=approx_count,
                    raw_text=raw_text,
                )
        logger.debug("No shared-connections link found")
        return None

    def has_next_page(self, page: "str | bytes | Tag") -> bool:
        """Check whether the pagination's next button is present and enabled."""
        soup = ensure_soup(page)
        button = select_first(soup, self.selectors.candidates("search", "next_button"))
        if button is None:
            return False
        if button.has_attr("disabled"):
            return False
        return str(button.get("aria-disabled", "")).lower() != "true"

    def next_button_selector(self, page: "str | bytes | Tag") -> str | None:
        """Return the candidate selector that currently matches the next button."""
        soup = ensure_soup(page)
        for selector in self.selectors.candidates("search", "next_button"):
            if select_first(soup, [selector]) is not None:
                return selector
        return None

    def has_results_container(self, page: "str | bytes | Tag") -> bool:
        soup = ensure_soup(page)
        return select_first(soup, self.selectors.candidates("search", "results_container")) is not None

    def result_fingerprint(self, page: "str | bytes | Tag") -> tuple[str, ...]:
        """Identify a result page by the profile links it lists, in order.

        Used to tell a freshly loaded page apart from the one that was shown
        before clicking next.
        """
        soup = ensure_soup(page)
        links = self.selectors.candidates("connection", "profile_url")
        hrefs = (extract_attribute(item, links, "href") for item in self.result_items(soup))
        return tuple(href for href in hrefs if href)

    def result_items(self, soup: Tag) -> list[Tag]:
        """Return result-item containers, using the fallback list when needed."""
        items = select_all(soup, self.selectors.candidates("search", "result_items"))
        if items:
            return items
        fallback = select_all(soup, self.selectors.candidates("search", "fallback_result_items"))
        if fallback:
            logger.info("Primary result selectors matched nothing; %d fallback items", len(fallback))
        return fallback

    def parse_result_item(self, item: Tag, base_url: str | None = None) -> ConnectionRecord | None:
        """Parse one result row; None when the name or profile URL is missing."""
        return parse_connection_item(item, self.selectors, base_url)

    def parse_result_page(
        self,
        page: "str | bytes | Tag",
        base_url: str | None = None,
    ) -> list[ConnectionRecord]:
        """Parse every result row on a search-results page.

        Args:
            page: HTML snapshot or parsed tree.
            base_url: Page URL used to resolve relative profile links.

        Returns:
            Valid ConnectionRecords in page order.
        """
        soup = ensure_soup(page)
        records = []
        for item in self.result_items(soup):
            record = self.parse_result_item(item, base_url)
            if record is not None:
                records.append(record)
        return records

    def test_selectors(self, page: "str | bytes | Tag") -> dict[str, SelectorProbe]:
        """Count matches for every configured candidate selector.

        Used to diagnose selector drift against a saved page.

        Args:
            page: HTML snapshot or parsed tree.

        Returns:
            Mapping of "section.field" to its SelectorProbe.
        """
        soup = ensure_soup(page)
        probes: dict[str, SelectorProbe] = {}
        for section in SECTIONS:
            table: dict[str, list[str]] = getattr(self.selectors, section)
            for field, candidates in table.items():
                counts = {selector: len(select_all(soup, [selector])) for selector in candidates}
                probes[f"{section}.{field}"] = SelectorProbe(
                    section=section, field=field, counts=counts
                )
        return probes
