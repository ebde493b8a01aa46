# ABOUTME: Tests for page hosts and the bounded wait helper.
# ABOUTME: Covers snapshot navigation, wait_for timeouts, and the Playwright adapter with a mocked page.

import asyncio
from unittest import mock

import pytest

from linkedin_relay.host import NavigationError, PageHost, ScrollState, StaticPageHost, wait_for
from linkedin_relay.host.playwright_host import PlaywrightPageHost

NEXT = "button.artdeco-pagination__button--next"


class TestStaticPageHost:
    """Tests for the snapshot-backed host."""

    def test_requires_pages(self) -> None:
        with pytest.raises(ValueError):
            StaticPageHost([])

    def test_satisfies_protocol(self, results_page_html: str) -> None:
        assert isinstance(StaticPageHost([results_page_html]), PageHost)

    def test_content_and_url(self, results_page_html: str) -> None:
        host = StaticPageHost([results_page_html], urls=["https://example.test/1"])

        assert asyncio.run(host.content()) == results_page_html
        assert asyncio.run(host.url()) == "https://example.test/1"

    def test_url_defaults_to_empty(self, results_page_html: str) -> None:
        assert asyncio.run(StaticPageHost([results_page_html]).url()) == ""

    def test_click_advances_and_resets_scroll(self, results_page_html: str, last_page_html: str) -> None:
        host = StaticPageHost([results_page_html, last_page_html])
        host.scroll_y = 500

        asyncio.run(host.click(NEXT))

        assert host.index == 1
        assert host.scroll_y == 0
        assert host.clicks == [NEXT]
        assert asyncio.run(host.content()) == last_page_html

    def test_click_on_missing_element(self, results_page_html: str) -> None:
        host = StaticPageHost([results_page_html, results_page_html])

        with pytest.raises(NavigationError) as exc_info:
            asyncio.run(host.click(".missing"))

        assert exc_info.value.selector == ".missing"
        assert host.index == 0

    def test_click_past_last_snapshot(self, results_page_html: str) -> None:
        host = StaticPageHost([results_page_html])

        with pytest.raises(NavigationError, match="No further page snapshots"):
            asyncio.run(host.click(NEXT))

    def test_scroll_state_and_offsets(self, results_page_html: str) -> None:
        host = StaticPageHost([results_page_html], viewport=(1024, 768), element_offset=1500)

        asyncio.run(host.scroll_by(120))

        assert asyncio.run(host.scroll_state()) == ScrollState(120, 1024, 768)
        assert asyncio.run(host.element_offset(NEXT)) == 1500
        assert asyncio.run(host.element_offset(".missing")) is None


class TestWaitFor:
    """Tests for wait_for."""

    def test_immediately_true(self, fake_clock) -> None:
        result = asyncio.run(wait_for(lambda: True, timeout=5, sleep=fake_clock.sleep, clock=fake_clock))

        assert result is True
        assert fake_clock.sleeps == []

    def test_becomes_true_after_polls(self, fake_clock) -> None:
        calls = []

        def predicate() -> bool:
            calls.append(1)
            return len(calls) >= 3

        result = asyncio.run(wait_for(predicate, timeout=5, poll=0.5, sleep=fake_clock.sleep, clock=fake_clock))

        assert result is True
        assert fake_clock.sleeps == [0.5, 0.5]

    def test_async_predicate(self, fake_clock) -> None:
        async def predicate() -> bool:
            return True

        assert asyncio.run(wait_for(predicate, timeout=1, sleep=fake_clock.sleep, clock=fake_clock)) is True

    def test_times_out_with_false(self, fake_clock) -> None:
        """A predicate that never holds resolves False after the timeout, without raising."""
        start = fake_clock.now

        result = asyncio.run(wait_for(lambda: False, timeout=2, poll=0.25, sleep=fake_clock.sleep, clock=fake_clock))

        assert result is False
        assert fake_clock.now - start == pytest.approx(2)


class TestPlaywrightPageHost:
    """Tests for the Playwright adapter against a mocked Page."""

    @pytest.fixture
    def page(self) -> mock.MagicMock:
        page = mock.MagicMock()
        page.url = "https://www.linkedin.com/search/results/people/"
        page.content = mock.AsyncMock(return_value="<html></html>")
        page.click = mock.AsyncMock()
        page.evaluate = mock.AsyncMock()
        page.mouse.wheel = mock.AsyncMock()
        page.mouse.move = mock.AsyncMock()
        return page

    def test_content_and_url(self, page: mock.MagicMock) -> None:
        host = PlaywrightPageHost(page)

        assert asyncio.run(host.content()) == "<html></html>"
        assert asyncio.run(host.url()) == "https://www.linkedin.com/search/results/people/"

    def test_click_passes_timeout(self, page: mock.MagicMock) -> None:
        host = PlaywrightPageHost(page, click_timeout_ms=2500)

        asyncio.run(host.click(NEXT))

        page.click.assert_awaited_once_with(NEXT, timeout=2500)

    def test_click_failure_becomes_navigation_error(self, page: mock.MagicMock) -> None:
        page.click.side_effect = RuntimeError("Timeout 2500ms exceeded")
        host = PlaywrightPageHost(page)

        with pytest.raises(NavigationError) as exc_info:
            asyncio.run(host.click(NEXT))

        assert exc_info.value.selector == NEXT
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_scroll_state(self, page: mock.MagicMock) -> None:
        page.evaluate.return_value = {"scrollY": 300, "width": 1280, "height": 720}

        state = asyncio.run(PlaywrightPageHost(page).scroll_state())

        assert state == ScrollState(300.0, 1280.0, 720.0)

    def test_element_offset(self, page: mock.MagicMock) -> None:
        page.evaluate.return_value = 1840
        host = PlaywrightPageHost(page)

        assert asyncio.run(host.element_offset(NEXT)) == 1840.0
        assert page.evaluate.await_args.args[1] == NEXT

        page.evaluate.return_value = None
        assert asyncio.run(host.element_offset(".missing")) is None

    def test_scroll_and_mouse(self, page: mock.MagicMock) -> None:
        host = PlaywrightPageHost(page)

        asyncio.run(host.scroll_by(40))
        asyncio.run(host.move_mouse(10, 20))

        page.mouse.wheel.assert_awaited_once_with(0, 40)
        page.mouse.move.assert_awaited_once_with(10, 20)
