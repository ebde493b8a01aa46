# ABOUTME: Pacing and block detection used between page actions.
# ABOUTME: Delays are randomized; any block marker is reported so the session can stop, not disguise.

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable

from bs4 import Tag
from pydantic import BaseModel

from linkedin_relay.host.base import PageHost
from linkedin_relay.models.config import RelayConfig
from linkedin_relay.parsing.fields import ensure_soup, select_first
from linkedin_relay.parsing.selectors import SelectorConfig

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

RATE_LIMIT_PHRASES = ("slow down", "too many requests", "unusual activity")

# Specific markers come before the broad "[class*=challenge]" match so the
# reported category is the most precise one.
_SELECTOR_CATEGORIES = ("captcha", "security_challenge", "auth_wall", "challenge")

SCROLL_TOLERANCE_PX = 100
SCROLL_FRAME_MS = 16


class BlockSignal(BaseModel):
    """Why a page was judged to be blocked."""

    category: str
    marker: str

    def describe(self) -> str:
        return f"{self.category} ({self.marker})"


class PacingPolicy:
    """Decides how long to wait between actions and whether the page is blocked.

    Randomness and sleeping are injectable so tests can run without real time.
    """

    def __init__(
        self,
        config: RelayConfig | None = None,
        selectors: SelectorConfig | None = None,
        rng: random.Random | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize the policy.

        Args:
            config: Delay bounds and the optional fixed pacing override.
            selectors: Selector tables holding the block markers.
            rng: Random source; defaults to a fresh random.Random.
            sleep: Awaitable sleep used for every pause.
        """
        self.config = config or RelayConfig()
        self.selectors = selectors or SelectorConfig()
        self.rng = rng or random.Random()
        self.sleep = sleep

    async def random_delay(self, min_ms: float, max_ms: float) -> float:
        """Sleep for a uniformly random duration in [min_ms, max_ms].

        Returns:
            The delay slept, in seconds.
        """
        low, high = sorted((min_ms, max_ms))
        delay = self.rng.uniform(low, high) / 1000
        await self.sleep(delay)
        return delay

    async def page_delay(self) -> float:
        """Pause between result pages; a configured fixed override wins."""
        if self.config.pacing_delay_seconds is not None:
            await self.sleep(self.config.pacing_delay_seconds)
            return self.config.pacing_delay_seconds
        return await self.random_delay(self.config.min_page_delay_ms, self.config.max_page_delay_ms)

    async def item_delay(self) -> float:
        """Pause between result items on the same page."""
        return await self.random_delay(self.config.min_item_delay_ms, self.config.max_item_delay_ms)

    def detect_blocked(self, page: "str | bytes | Tag") -> BlockSignal | None:
        """Inspect a page for anti-automation signals.

        Args:
            page: HTML snapshot or parsed tree.

        Returns:
            The first signal found, or None if the page looks normal.
        """
        soup = ensure_soup(page)
        for category in _SELECTOR_CATEGORIES:
            for selector in self.selectors.candidates("block", category):
                if select_first(soup, [selector]) is not None:
                    signal = BlockSignal(category=category, marker=selector)
                    logger.warning("Block signal detected: %s", signal.describe())
                    return signal

        body = soup.find("body")
        text = (body or soup).get_text(" ").lower()
        for phrase in RATE_LIMIT_PHRASES:
            if phrase in text:
                signal = BlockSignal(category="rate_limited", marker=phrase)
                logger.warning("Block signal detected: %s", signal.describe())
                return signal
        return None

    def is_blocked(self, page: "str | bytes | Tag") -> bool:
        return self.detect_blocked(page) is not None

    async def human_scroll(self, host: PageHost, selector: str) -> bool:
        """Scroll toward an element in small steps over one to three seconds.

        The target puts the element in the middle of the viewport. Nothing
        happens when the element is missing or already within reach.

        Args:
            host: Page to scroll.
            selector: Element to bring into view.

        Returns:
            True if a scroll was performed.
        """
        offset = await host.element_offset(selector)
        if offset is None:
            return False
        state = await host.scroll_state()
        target = offset - state.viewport_height / 2
        distance = target - state.scroll_y
        if abs(distance) < SCROLL_TOLERANCE_PX:
            return False

        duration_ms = self.rng.uniform(1000, 3000)
        steps = max(1, int(duration_ms // SCROLL_FRAME_MS))
        step = distance / steps
        for _ in range(steps):
            await host.scroll_by(step)
            await self.sleep(SCROLL_FRAME_MS / 1000)
        logger.debug("Scrolled %.0fpx toward %s in %d steps", distance, selector, steps)
        return True

    async def simulate_mouse_movement(self, host: PageHost, moves: int | None = None) -> int:
        """Move the pointer to a few random points inside the viewport.

        Returns:
            The number of moves made.
        """
        count = moves if moves is not None else self.rng.randint(1, 3)
        state = await host.scroll_state()
        for _ in range(count):
            x = self.rng.uniform(0, state.viewport_width)
            y = self.rng.uniform(0, state.viewport_height)
            await host.move_mouse(x, y)
            await self.sleep(self.rng.uniform(0.05, 0.2))
        return count
