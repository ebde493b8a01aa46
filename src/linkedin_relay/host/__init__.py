# ABOUTME: Page host package: the protocol the core drives plus a snapshot-backed host.
# ABOUTME: The Playwright adapter lives in host.playwright_host and needs the "browser" extra.

from linkedin_relay.host.base import PageHost, ScrollState, wait_for
from linkedin_relay.host.exceptions import HostError, NavigationError
from linkedin_relay.host.static import StaticPageHost

__all__ = [
    "HostError",
    "NavigationError",
    "PageHost",
    "ScrollState",
    "StaticPageHost",
    "wait_for",
]
