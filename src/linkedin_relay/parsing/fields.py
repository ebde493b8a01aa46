# ABOUTME: Field extractor that walks an ordered list of candidate CSS selectors.
# ABOUTME: A selector that misses or fails to compile counts as "no match"; exhaustion yields None.

import logging
import re
from collections.abc import Iterable

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"(\d[\d,]*)")


def parse_html(html: str | bytes) -> BeautifulSoup:
    """Parse a page snapshot into a BeautifulSoup tree.

    Args:
        html: Raw HTML text or bytes.

    Returns:
        BeautifulSoup document using the stdlib html.parser backend.
    """
    return BeautifulSoup(html, "html.parser")


def ensure_soup(page: "str | bytes | Tag") -> Tag:
    """Accept either raw HTML or an already parsed tree."""
    if isinstance(page, Tag):
        return page
    return parse_html(page)


def normalize_text(text: str | None) -> str | None:
    """Collapse whitespace runs and strip; empty strings become None."""
    if text is None:
        return None
    cleaned = " ".join(text.split())
    return cleaned or None


def _safe_select(root: Tag, selector: str, first_only: bool) -> list[Tag]:
    try:
        if first_only:
            found = root.select_one(selector)
            return [found] if found is not None else []
        return list(root.select(selector))
    except Exception as e:
        logger.debug("Selector %r failed, skipping: %s", selector, e)
        return []


def select_first(root: Tag, selectors: Iterable[str]) -> Tag | None:
    """Return the first element matched by the first matching selector.

    Args:
        root: Subtree to search.
        selectors: Candidate selectors in priority order.

    Returns:
        The matched element, or None if every candidate missed.
    """
    for selector in selectors:
        found = _safe_select(root, selector, first_only=True)
        if found:
            return found[0]
    return None


def select_all(root: Tag, selectors: Iterable[str]) -> list[Tag]:
    """Return all elements matched by the first selector that matches anything.

    Args:
        root: Subtree to search.
        selectors: Candidate selectors in priority order.

    Returns:
        Matched elements in document order, or an empty list.
    """
    for selector in selectors:
        found = _safe_select(root, selector, first_only=False)
        if found:
            return found
    return []


def extract_text(root: Tag, selectors: Iterable[str]) -> str | None:
    """Extract trimmed text using the first selector that yields non-empty text.

    Selectors that match an element with only whitespace are skipped so a
    stale placeholder node does not shadow a later, populated candidate.

    Args:
        root: Subtree to search.
        selectors: Candidate selectors in priority order.

    Returns:
        Normalized text, or None when no candidate produced any.
    """
    for selector in selectors:
        found = _safe_select(root, selector, first_only=True)
        if not found:
            continue
        text = normalize_text(found[0].get_text(" "))
        if text:
            return text
    return None


def extract_attribute(root: Tag, selectors: Iterable[str], attr: str) -> str | None:
    """Extract an attribute value using the first selector that has it.

    Args:
        root: Subtree to search.
        selectors: Candidate selectors in priority order.
        attr: Attribute name (e.g. "href", "src").

    Returns:
        The stripped attribute value, or None.
    """
    for selector in selectors:
        found = _safe_select(root, selector, first_only=True)
        if not found:
            continue
        value = found[0].get(attr)
        if isinstance(value, list):
            value = " ".join(value)
        if value and value.strip():
            return value.strip()
    return None


def has_match(root: Tag, selectors: Iterable[str]) -> bool:
    """Presence test used for badges and block markers."""
    return select_first(root, selectors) is not None


def parse_count(text: str | None, noun: str | None = None) -> int | None:
    """Pull the leading integer out of a label such as "1,234 followers".

    Args:
        text: Label text, may be None.
        noun: Optional word that must follow the number (e.g. "follower").
            Plural forms and an "other" qualifier are accepted.

    Returns:
        The integer with thousands separators removed, or None if the text
        has no matching numeric pattern.
    """
    if not text:
        return None
    if noun:
        pattern = re.compile(
            rf"(\d[\d,]*)\+?\s+(?:other\s+)?{re.escape(noun)}", re.IGNORECASE
        )
        match = pattern.search(text)
    else:
        match = _LEADING_INT.search(text)
    if not match:
        return None
    digits = match.group(1).replace(",", "")
    return int(digits) if digits else None


def find_count(root: Tag, selectors: Iterable[str], noun: str) -> int | None:
    """Scan candidate elements for the first one whose text counts ``noun``.

    Args:
        root: Subtree to search.
        selectors: Candidate selectors in priority order.
        noun: Word that must follow the number (e.g. "connection").

    Returns:
        The parsed count, or None.
    """
    for selector in selectors:
        for element in _safe_select(root, selector, first_only=False):
            count = parse_count(element.get_text(" "), noun)
            if count is not None:
                return count
    return None
