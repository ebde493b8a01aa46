# ABOUTME: Ordered fallback-selector tables for every field the parsers read.
# ABOUTME: SelectorConfig is passed to PageParser so drifted selectors can be patched from JSON.

from collections.abc import Mapping, Sequence
from copy import deepcopy
from typing import Annotated, Any

from pydantic import BaseModel, Field

SelectorTable = dict[str, list[str]]

# Candidates are tried in order; the first entry is the current markup and the
# rest are older or alternate variants.

PROFILE_SELECTORS: SelectorTable = {
    "name": [
        "h1.text-heading-xlarge",
        ".text-heading-xlarge",
        ".pv-text-details__title h1",
        ".pv-top-card--list h1",
        ".pv-text-details__left-panel h1",
        'div[data-test-id="hero-title"] h1',
        "main h1.inline.t-24",
    ],
    "title": [
        ".text-body-medium.break-words",
        ".pv-text-details__title + div",
        ".pv-top-card--list-bullet .text-body-medium",
        ".pv-text-details__left-panel div.text-body-medium",
        'span[data-test-id="hero-title"]',
        ".pv-top-card .text-body-medium",
    ],
    "location": [
        ".text-body-small.inline.t-black--light.break-words",
        ".pv-text-details__left-panel .geo-text",
        'span[data-test-id="hero-location"]',
        'div[data-test-id="hero-location"] span',
        ".pv-top-card .text-body-small",
    ],
    "image": [
        ".pv-top-card-profile-picture__image",
        ".pv-member-photo-edit__image",
        "img.pv-top-card-profile-picture__image--show",
        "img.profile-photo-edit__preview",
        'img[alt*="Profile photo"]',
    ],
    "about": [
        'section:has(> #about) .inline-show-more-text span[aria-hidden="true"]',
        ".pv-about-section .pv-about__summary-text",
        ".pv-shared-text-with-see-more .inline-show-more-text",
        'section[data-section="about"] .inline-show-more-text',
        'section[data-section="about"] span[aria-hidden="true"]',
        "div#about",
    ],
    "connections_count": [
        "li.text-body-small",
        ".pv-top-card--list-bullet .t-black--light span",
        '.pv-top-card--list-bullet a[href*="overlay/connections"]',
        'span[data-test-id="hero-summary-counts__connections"]',
        'a[data-test-id="hero-summary-counts__connections"] span',
        "ul li span.t-bold",
    ],
    "followers_count": [
        "li.text-body-small",
        ".pv-top-card--list-bullet .t-black--light span",
        'span[data-test-id="hero-summary-counts__followers"]',
        'a[data-test-id="hero-summary-counts__followers"] span',
    ],
    "mutual_connections": [
        '.pv-top-card--list-bullet a[href*="facetConnectionOf"]',
        '.pv-top-card--list-bullet a[href*="mutual"]',
        'a[href*="connections/shared"]',
        'a[data-test-id="hero-summary-counts__mutualConnections"]',
        'a[href*="facetConnectionOf"]',
    ],
    "premium": [
        'li-icon[type="linkedin-bug"]',
        ".premium-icon",
        '[data-test-id*="premium"]',
    ],
    "experience_section": [
        "section:has(> #experience)",
        'section[data-section="experience"]',
        "section#experience",
        'section[data-test-id="experience"]',
        ".pv-profile-section.experience-section",
        "div#experience",
    ],
    "education_section": [
        "section:has(> #education)",
        'section[data-section="education"]',
        "section#education",
        'section[data-test-id="education"]',
        ".pv-profile-section.education-section",
        "div#education",
    ],
    "skills_section": [
        "section:has(> #skills)",
        'section[data-section="skills"]',
        "section#skills",
        'section[data-test-id="skills"]',
        ".pv-skill-categories-section",
        "div#skills",
    ],
}

EXPERIENCE_SELECTORS: SelectorTable = {
    "items": [
        "li.artdeco-list__item",
        ".pvs-list__paged-list-item",
        "li.pvs-list__item--line-separated",
        ".pv-entity__position-group-pager li",
    ],
    "title": [
        '.t-bold span[aria-hidden="true"]',
        ".mr1.t-bold span",
        ".pv-entity__summary-info h3",
    ],
    "company": [
        '.t-14.t-normal span[aria-hidden="true"]',
        ".pv-entity__secondary-title",
        ".t-14.t-normal a",
    ],
    "duration": [
        '.t-14.t-normal.t-black--light span[aria-hidden="true"]',
        ".pv-entity__date-range span:last-child",
        ".pv-entity__bullet-item-v2",
    ],
    "location": [
        '.t-12.t-normal.t-black--light span[aria-hidden="true"]',
        '.t-14.t-normal.t-black--light ~ .t-14.t-normal.t-black--light span[aria-hidden="true"]',
        ".pv-entity__location span:last-child",
    ],
    "description": [
        ".inline-show-more-text",
        ".pv-entity__extra-details",
        '.pv-shared-text-with-see-more span[aria-hidden="true"]',
    ],
}

EDUCATION_SELECTORS: SelectorTable = {
    "items": [
        "li.artdeco-list__item",
        ".pvs-list__paged-list-item",
        "li.pvs-list__item--line-separated",
        ".pv-education-entity",
    ],
    "school": [
        '.t-bold span[aria-hidden="true"]',
        ".mr1.t-bold span",
        ".pv-entity__school-name",
    ],
    "degree": [
        '.t-14.t-normal span[aria-hidden="true"]',
        ".pv-entity__degree-name .pv-entity__comma-item",
    ],
    "field_of_study": [
        ".pv-entity__fos .pv-entity__comma-item",
    ],
    "duration": [
        '.t-14.t-normal.t-black--light ~ .t-14.t-normal.t-black--light span[aria-hidden="true"]',
        ".pv-entity__dates .pv-entity__bullet-item",
        ".pv-entity__dates span:last-child",
    ],
    "description": [
        ".inline-show-more-text",
        ".pv-entity__extra-details",
    ],
}

SKILL_SELECTORS: SelectorTable = {
    "items": [
        "li.artdeco-list__item",
        ".pvs-list__paged-list-item",
        "li.pvs-list__item--line-separated",
        ".pv-skill-category-entity__skill-wrapper",
    ],
    "name": [
        '.t-bold span[aria-hidden="true"]',
        ".mr1.t-bold span",
        ".pv-skill-category-entity__name a",
        ".pv-skill-category-entity__name-text",
    ],
    "endorsements": [
        ".t-12.t-normal.t-black--light",
        ".pv-skill-category-entity__endorsement-count",
        '.t-14.t-normal.t-black--light span[aria-hidden="true"]',
    ],
}

CONNECTION_SELECTORS: SelectorTable = {
    "name": [
        'span.entity-result__title-text a span[dir="ltr"] > span[aria-hidden="true"]',
        'span.entity-result__title-text a span[dir="ltr"]',
        ".entity-result__title-text a span",
        "span.reusable-search__entity-result-list__result-link-text",
        ".entity-result__title-text a",
        ".search-result__title a",
        ".actor-name",
    ],
    "profile_url": [
        'a.app-aware-link[href*="/in/"]',
        'a[href*="/in/"]',
        ".entity-result__title-text a",
    ],
    "headline": [
        ".entity-result__primary-subtitle",
        ".entity-result__summary",
        'div[data-test-id="hero-title"] ~ div',
        ".search-result__summary",
    ],
    "location": [
        ".entity-result__secondary-subtitle",
        ".entity-result__location",
        'span[data-test-id="hero-location"]',
        ".search-result__location",
    ],
    "image": [
        "img.presence-entity__image",
        ".entity-result__image img",
        "img.reusable-search__result-image",
        'img[alt*="profile"]',
    ],
    "degree": [
        '.entity-result__badge-text span[aria-hidden="true"]',
        ".entity-result__badge-text",
        ".entity-result__badge",
        'span[aria-hidden="true"][class*="entity-result__badge"]',
        ".search-result__badge",
    ],
    "premium": [
        'li-icon[type="linkedin-bug"]',
        ".premium-icon",
        '[data-test-id*="premium"]',
    ],
}

SEARCH_SELECTORS: SelectorTable = {
    "result_items": [
        "li.reusable-search__result-container",
        "li.reusable-search__entity-result-list__item",
        "div.reusable-search__entity-result",
        "li.search-reusables__result-container",
        ".search-result",
    ],
    "fallback_result_items": [
        ".entity-result",
        ".search-result__wrapper",
    ],
    "results_container": [
        ".search-results-container",
        ".search-results__list",
        ".reusable-search__entity-result-list",
        ".search-results-page__results-list",
    ],
    "pagination": [
        ".artdeco-pagination",
        "nav.artdeco-pagination",
        ".pagination",
    ],
    "next_button": [
        "button.artdeco-pagination__button--next",
        'button[aria-label*="Next"]',
        ".artdeco-pagination__button--next",
    ],
    "connections_link": [
        'a[href*="facetConnectionOf"]',
        'a[href*="connections/shared"]',
        'a[href*="keyword=mutual"]',
        'a[href*="mutual"]',
    ],
}

BLOCK_SELECTORS: SelectorTable = {
    "captcha": [
        '[id*="captcha"]',
        ".g-recaptcha",
        'iframe[src*="captcha"]',
    ],
    "challenge": [
        '[class*="challenge"]',
    ],
    "auth_wall": [
        '[data-test-id="auth-wall"]',
        ".authwall",
    ],
    "security_challenge": [
        ".challenge-page",
        ".security-challenge",
    ],
}

SECTIONS = ("profile", "experience", "education", "skills", "connection", "search", "block")


def _table(defaults: SelectorTable) -> Any:
    return Field(default_factory=lambda: deepcopy(defaults))


class SelectorConfig(BaseModel):
    """Field -> ordered candidate selectors, grouped by page section."""

    profile: Annotated[SelectorTable, _table(PROFILE_SELECTORS)]
    experience: Annotated[SelectorTable, _table(EXPERIENCE_SELECTORS)]
    education: Annotated[SelectorTable, _table(EDUCATION_SELECTORS)]
    skills: Annotated[SelectorTable, _table(SKILL_SELECTORS)]
    connection: Annotated[SelectorTable, _table(CONNECTION_SELECTORS)]
    search: Annotated[SelectorTable, _table(SEARCH_SELECTORS)]
    block: Annotated[SelectorTable, _table(BLOCK_SELECTORS)]

    def candidates(self, section: str, field: str) -> list[str]:
        """Get the candidate selectors for one field.

        Args:
            section: Section name (e.g. "profile", "connection").
            field: Field name within the section.

        Returns:
            The ordered candidate list, or an empty list for unknown fields.
        """
        table: SelectorTable = getattr(self, section, None) or {}
        return list(table.get(field, []))

    def with_overrides(
        self,
        overrides: Mapping[str, Mapping[str, Sequence[str]]],
    ) -> "SelectorConfig":
        """Return a copy with some candidate lists replaced.

        Overrides replace whole candidate lists so that a patched selector can
        be moved ahead of the stale one. Unknown sections are rejected.

        Args:
            overrides: Mapping of section -> field -> candidate selectors.

        Returns:
            A new SelectorConfig with the overrides applied.

        Raises:
            ValueError: If a section name is not recognised.
        """
        data = self.model_dump()
        for section, fields in overrides.items():
            if section not in SECTIONS:
                raise ValueError(f"Unknown selector section '{section}'")
            for field, selectors in fields.items():
                data[section][field] = [str(selector) for selector in selectors]
        return SelectorConfig.model_validate(data)
