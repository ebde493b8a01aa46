# ABOUTME: Drives the page parser across paginated connection search results.
# ABOUTME: One session at a time per collector; aborts keep the partial results on the exception.

import logging
import time
from collections.abc import Callable

from bs4 import Tag

from linkedin_relay.host.base import PageHost, wait_for
from linkedin_relay.host.exceptions import NavigationError
from linkedin_relay.models import RelayConfig, SessionResult, SessionState, SessionStatus, SourceProfile
from linkedin_relay.pacing.policy import PacingPolicy
from linkedin_relay.parsing.fields import parse_html
from linkedin_relay.parsing.page import PageParser
from linkedin_relay.session.exceptions import (
    BlockedError,
    SessionAbortedError,
    SessionInProgressError,
    SessionTimeoutError,
)

logger = logging.getLogger(__name__)


class SessionCollector:
    """Collects every connection across the pages of one search result set.

    State machine: IDLE -> RUNNING -> COMPLETED or ABORTED -> IDLE. Starting a
    second session while one is running fails immediately. Cancellation,
    the timeout and block detection are all checked once per page.
    """

    def __init__(
        self,
        parser: PageParser | None = None,
        policy: PacingPolicy | None = None,
        config: RelayConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the collector.

        Args:
            parser: Page parser for result pages.
            policy: Pacing policy; its sleep is also used for page-load polling.
            config: Page cap and timeouts.
            clock: Monotonic clock, injectable for tests.
        """
        self.config = config or RelayConfig()
        self.parser = parser or PageParser()
        self.policy = policy or PacingPolicy(self.config, self.parser.selectors)
        self._clock = clock
        self._processing = False
        self._cancel_requested = False
        self._state: SessionState | None = None

    @property
    def is_running(self) -> bool:
        return self._processing

    @property
    def state(self) -> SessionState | None:
        """The running session's state, or None when idle."""
        return self._state

    def cancel(self) -> None:
        """Ask the running session to stop at the top of its next page."""
        if self._processing:
            self._cancel_requested = True

    async def collect_all_connections(self, host: PageHost, source: SourceProfile) -> SessionResult:
        """Collect connections from the current results page onward.

        Args:
            host: Page positioned on the first results page.
            source: Profile whose connections are being collected.

        Returns:
            SessionResult with status COMPLETED.

        Raises:
            SessionInProgressError: If a session is already running.
            BlockedError: If a block signal is seen on any page.
            SessionTimeoutError: If the session outlives its time limit.
            SessionAbortedError: On cancellation or any unexpected failure.
        """
        if self._processing:
            raise SessionInProgressError("Connection collection already in progress")

        self._processing = True
        self._cancel_requested = False
        state = SessionState(source=source, started_monotonic=self._clock())
        self._state = state
        logger.info("Starting connection collection for %r", source.name or source.profile_url)

        try:
            await self._run(host, state)
        except SessionAbortedError as e:
            logger.error(
                "Collection aborted after %d pages (%d connections): %s",
                e.partial.pages_processed,
                len(e.partial.connections),
                e,
            )
            raise
        except Exception as e:
            partial = state.to_result(self._clock(), SessionStatus.ABORTED_ERROR, str(e))
            logger.error("Collection failed after %d pages: %s", state.pages_processed, e)
            raise SessionAbortedError(f"Connection collection failed: {e}", partial) from e
        finally:
            self._processing = False
            self._cancel_requested = False
            self._state = None

        result = state.to_result(self._clock(), SessionStatus.COMPLETED)
        logger.info(
            "Collected %d connections from %d pages in %d ms",
            len(result.connections),
            result.pages_processed,
            result.duration_ms,
        )
        return result

    async def _run(self, host: PageHost, state: SessionState) -> None:
        max_pages = self.config.max_pages
        timeout = self.config.session_timeout_seconds

        for page_number in range(1, max_pages + 1):
            if self._cancel_requested:
                raise SessionAbortedError(
                    "Connection collection cancelled",
                    state.to_result(self._clock(), SessionStatus.ABORTED_ERROR, "cancelled"),
                )

            elapsed = self._clock() - state.started_monotonic
            if elapsed > timeout:
                message = f"Session timed out after {elapsed:.0f}s"
                raise SessionTimeoutError(
                    message,
                    state.to_result(self._clock(), SessionStatus.ABORTED_TIMEOUT, message),
                )

            html = await host.content()
            page_url = await host.url()
            soup = parse_html(html)

            signal = self.policy.detect_blocked(soup)
            if signal is not None:
                message = f"Protection triggered: {signal.describe()}"
                raise BlockedError(
                    message,
                    state.to_result(self._clock(), SessionStatus.ABORTED_BLOCKED, message),
                    signal,
                )

            items = self.parser.result_items(soup)
            for index, item in enumerate(items):
                if index:
                    await self.policy.item_delay()
                record = self.parser.parse_result_item(item, page_url or None)
                if record is not None:
                    state.connections.append(record)
            state.pages_processed += 1
            logger.info(
                "Page %d: %d items, %d connections so far",
                page_number,
                len(items),
                len(state.connections),
            )

            if not self.parser.has_next_page(soup):
                logger.info("No next page; collection complete")
                return
            if page_number == max_pages:
                logger.warning("Reached the page cap of %d", max_pages)
                return

            await self.policy.page_delay()
            await self._go_to_next_page(host, soup)

    async def _go_to_next_page(self, host: PageHost, soup: Tag) -> None:
        selector = self.parser.next_button_selector(soup)
        if selector is None:
            raise NavigationError("Next page button not found")

        await self.policy.human_scroll(host, selector)
        await self.policy.simulate_mouse_movement(host)
        previous = self.parser.result_fingerprint(soup)
        await self.policy.item_delay()
        await host.click(selector)

        # The old page's container stays in the DOM until the new results render.
        async def results_ready() -> bool:
            page = parse_html(await host.content())
            return (
                self.parser.has_results_container(page)
                and self.parser.result_fingerprint(page) != previous
            )

        loaded = await wait_for(
            results_ready,
            timeout=self.config.page_load_timeout_seconds,
            sleep=self.policy.sleep,
            clock=self._clock,
        )
        if not loaded:
            logger.warning(
                "New results did not appear within %.0fs; continuing",
                self.config.page_load_timeout_seconds,
            )
