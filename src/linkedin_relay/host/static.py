# ABOUTME: PageHost backed by saved HTML snapshots; clicking "next" advances to the next one.
# ABOUTME: Used by the CLI for offline runs and by the test suite to script page sequences.

import logging

from linkedin_relay.host.base import ScrollState
from linkedin_relay.host.exceptions import NavigationError
from linkedin_relay.parsing.fields import parse_html, select_first

logger = logging.getLogger(__name__)


class StaticPageHost:
    """Serves a fixed sequence of page snapshots.

    Snapshots have no layout, so every matched element reports the same
    ``element_offset``. All actions are recorded for inspection.
    """

    def __init__(
        self,
        pages: list[str],
        urls: list[str] | None = None,
        viewport: tuple[float, float] = (1280.0, 800.0),
        element_offset: float = 2000.0,
    ) -> None:
        """Initialize the host.

        Args:
            pages: HTML snapshots in navigation order. Must not be empty.
            urls: URL of each snapshot; defaults to empty strings.
            viewport: Viewport (width, height) reported by scroll_state.
            element_offset: Document offset reported for any matched element.
        """
        if not pages:
            raise ValueError("StaticPageHost needs at least one page")
        self.pages = list(pages)
        self.urls = list(urls) if urls else [""] * len(self.pages)
        self.index = 0
        self.scroll_y = 0.0
        self.viewport = viewport
        self.offset = element_offset
        self.clicks: list[str] = []
        self.scrolls: list[float] = []
        self.mouse_moves: list[tuple[float, float]] = []

    async def content(self) -> str:
        return self.pages[self.index]

    async def url(self) -> str:
        return self.urls[self.index] if self.index < len(self.urls) else ""

    async def click(self, selector: str) -> None:
        """Click ``selector`` on the current page, advancing to the next snapshot.

        Raises:
            NavigationError: If nothing matches or there is no next snapshot.
        """
        self.clicks.append(selector)
        if select_first(parse_html(self.pages[self.index]), [selector]) is None:
            raise NavigationError(f"No element matches '{selector}'", selector=selector)
        if self.index + 1 >= len(self.pages):
            raise NavigationError("No further page snapshots", selector=selector)
        self.index += 1
        self.scroll_y = 0.0
        logger.debug("Advanced to snapshot %d", self.index)

    async def scroll_state(self) -> ScrollState:
        width, height = self.viewport
        return ScrollState(scroll_y=self.scroll_y, viewport_width=width, viewport_height=height)

    async def element_offset(self, selector: str) -> float | None:
        if select_first(parse_html(self.pages[self.index]), [selector]) is None:
            return None
        return self.offset

    async def scroll_by(self, dy: float) -> None:
        self.scrolls.append(dy)
        self.scroll_y += dy

    async def move_mouse(self, x: float, y: float) -> None:
        self.mouse_moves.append((x, y))
