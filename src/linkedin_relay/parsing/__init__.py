# ABOUTME: Parsing package for LinkedIn profile and search-result pages.
# ABOUTME: Exports PageParser, the selector tables and the field extraction helpers.

from linkedin_relay.parsing.fields import extract_attribute, extract_text, parse_count
from linkedin_relay.parsing.page import (
    NAMED_CONNECTIONS_OFFSET,
    PageParser,
    SelectorProbe,
    extract_linkedin_id,
)
from linkedin_relay.parsing.selectors import SelectorConfig

__all__ = [
    "NAMED_CONNECTIONS_OFFSET",
    "PageParser",
    "SelectorConfig",
    "SelectorProbe",
    "extract_attribute",
    "extract_linkedin_id",
    "extract_text",
    "parse_count",
]
