# ABOUTME: PageHost adapter over a Playwright async Page (install the "browser" extra).
# ABOUTME: Scrolling uses mouse wheel events and navigation failures become NavigationError.

from typing import TYPE_CHECKING

from linkedin_relay.host.base import ScrollState
from linkedin_relay.host.exceptions import NavigationError

if TYPE_CHECKING:
    from playwright.async_api import Page

_SCROLL_STATE_JS = (
    "() => ({scrollY: window.scrollY, width: window.innerWidth, height: window.innerHeight})"
)

_ELEMENT_OFFSET_JS = """(selector) => {
    const el = document.querySelector(selector);
    return el ? el.getBoundingClientRect().top + window.scrollY : null;
}"""


class PlaywrightPageHost:
    """Drives a live Playwright tab.

    The caller owns the browser lifecycle; this class only reads and acts on
    the page it was given.
    """

    def __init__(self, page: "Page", click_timeout_ms: int = 10_000) -> None:
        """Initialize the host.

        Args:
            page: An open Playwright async Page.
            click_timeout_ms: Timeout passed to Playwright for clicks.
        """
        self._page = page
        self._click_timeout_ms = click_timeout_ms

    async def content(self) -> str:
        return await self._page.content()

    async def url(self) -> str:
        return self._page.url

    async def click(self, selector: str) -> None:
        try:
            await self._page.click(selector, timeout=self._click_timeout_ms)
        except Exception as e:
            raise NavigationError(f"Could not click '{selector}': {e}", selector=selector) from e

    async def scroll_state(self) -> ScrollState:
        state = await self._page.evaluate(_SCROLL_STATE_JS)
        return ScrollState(
            scroll_y=float(state["scrollY"]),
            viewport_width=float(state["width"]),
            viewport_height=float(state["height"]),
        )

    async def element_offset(self, selector: str) -> float | None:
        offset = await self._page.evaluate(_ELEMENT_OFFSET_JS, selector)
        return float(offset) if offset is not None else None

    async def scroll_by(self, dy: float) -> None:
        await self._page.mouse.wheel(0, dy)

    async def move_mouse(self, x: float, y: float) -> None:
        await self._page.mouse.move(x, y)
