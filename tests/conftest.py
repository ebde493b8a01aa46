# ABOUTME: Shared pytest fixtures for linkedin-relay tests.
# ABOUTME: Provides saved-page HTML, fake clocks, and recording sinks and senders.

import asyncio
import heapq
from pathlib import Path

import pytest

from linkedin_relay.delivery import DeliveryResult
from linkedin_relay.notifications import RecordingSink

PROFILE_URL = "https://www.linkedin.com/in/jane-doe/"
SEARCH_URL = (
    "https://www.linkedin.com/search/results/people/"
    "?facetConnectionOf=%22ABC%22&origin=MEMBER_PROFILE_CANNED_SEARCH"
)

PROFILE_HTML = """
<html><body><main>
<section class="pv-top-card">
  <h1 class="text-heading-xlarge">Jane Doe</h1>
  <div class="text-body-medium break-words">Staff Engineer at Acme</div>
  <span class="text-body-small inline t-black--light break-words">Berlin, Germany</span>
  <img class="pv-top-card-profile-picture__image" src="https://media.licdn.com/jane.jpg">
  <ul>
    <li class="text-body-small"><span>1,234 followers</span></li>
    <li class="text-body-small"><span>500+ connections</span></li>
  </ul>
  <a href="/search/results/people/?facetConnectionOf=%22ABC%22&amp;origin=MEMBER_PROFILE_CANNED_SEARCH">
    Alex Kim, Sam Lee and 5 other mutual connections
  </a>
  <li-icon type="linkedin-bug"></li-icon>
</section>
<section>
  <div id="about"></div>
  <div class="inline-show-more-text"><span aria-hidden="true">Building reliable systems.</span></div>
</section>
<section>
  <div id="experience"></div>
  <ul>
    <li class="artdeco-list__item">
      <div class="t-bold"><span aria-hidden="true">Staff Engineer</span></div>
      <span class="t-14 t-normal"><span aria-hidden="true">Acme Corp</span></span>
      <span class="t-14 t-normal t-black--light"><span aria-hidden="true">2020 - Present</span></span>
      <span class="t-12 t-normal t-black--light"><span aria-hidden="true">Berlin</span></span>
    </li>
    <li class="artdeco-list__item">
      <span class="t-14 t-normal"><span aria-hidden="true">Entry without a title</span></span>
    </li>
  </ul>
</section>
<section>
  <div id="education"></div>
  <ul>
    <li class="artdeco-list__item">
      <div class="t-bold"><span aria-hidden="true">TU Berlin</span></div>
      <span class="t-14 t-normal"><span aria-hidden="true">MSc, Computer Science</span></span>
    </li>
  </ul>
</section>
<section>
  <div id="skills"></div>
  <ul>
    <li class="artdeco-list__item">
      <div class="t-bold"><span aria-hidden="true">Python</span></div>
      <div class="t-12 t-normal t-black--light">99+ endorsements</div>
    </li>
    <li class="artdeco-list__item">
      <div class="t-bold"><span aria-hidden="true">Distributed Systems</span></div>
    </li>
  </ul>
</section>
</main></body></html>
"""

RESULTS_PAGE_HTML = """
<html><body>
<div class="search-results-container">
  <ul>
    <li class="reusable-search__result-container">
      <div class="entity-result">
        <img class="presence-entity__image" src="https://media.licdn.com/alex.jpg">
        <span class="entity-result__title-text">
          <a class="app-aware-link" href="https://www.linkedin.com/in/alex-kim?miniProfileUrn=x">
            <span dir="ltr"><span aria-hidden="true">Alex Kim</span></span>
          </a>
        </span>
        <span class="entity-result__badge-text"><span aria-hidden="true">&bull; 2nd</span></span>
        <div class="entity-result__primary-subtitle">Product Manager</div>
        <div class="entity-result__secondary-subtitle">Munich</div>
      </div>
    </li>
    <li class="reusable-search__result-container">
      <div class="entity-result">
        <span class="entity-result__title-text">
          <a class="app-aware-link" href="/in/sam-lee/">
            <span dir="ltr"><span aria-hidden="true">Sam Lee</span></span>
          </a>
        </span>
        <li-icon type="linkedin-bug"></li-icon>
        <span class="entity-result__badge-text"><span aria-hidden="true">&bull; 1st</span></span>
        <div class="entity-result__primary-subtitle">Designer</div>
      </div>
    </li>
    <li class="reusable-search__result-container">
      <div class="entity-result">
        <div class="entity-result__primary-subtitle">LinkedIn Member</div>
      </div>
    </li>
  </ul>
</div>
<div class="artdeco-pagination">
  <button class="artdeco-pagination__button--next" aria-label="Next">Next</button>
</div>
</body></html>
"""

LAST_PAGE_HTML = """
<html><body>
<div class="search-results-container">
  <ul>
    <li class="reusable-search__result-container">
      <div class="entity-result">
        <span class="entity-result__title-text">
          <a class="app-aware-link" href="https://www.linkedin.com/in/priya-patel">
            <span dir="ltr"><span aria-hidden="true">Priya Patel</span></span>
          </a>
        </span>
        <span class="entity-result__badge-text"><span aria-hidden="true">&bull; 2nd</span></span>
        <div class="entity-result__primary-subtitle">Data Scientist</div>
      </div>
    </li>
  </ul>
</div>
<div class="artdeco-pagination">
  <button class="artdeco-pagination__button--next" aria-label="Next" disabled>Next</button>
</div>
</body></html>
"""

FALLBACK_PAGE_HTML = """
<html><body>
<div class="search-results-container">
  <div class="entity-result">
    <span class="entity-result__title-text">
      <a href="https://www.linkedin.com/in/chris-wu"><span dir="ltr">Chris Wu</span></a>
    </span>
  </div>
  <div class="entity-result">
    <span class="entity-result__title-text">
      <a href="https://www.linkedin.com/in/dana-ross"><span dir="ltr">Dana Ross</span></a>
    </span>
  </div>
</div>
</body></html>
"""

BLOCKED_PAGE_HTML = """
<html><body>
<div class="challenge-page"><h1>Let's do a quick security check</h1></div>
</body></html>
"""

RATE_LIMITED_PAGE_HTML = """
<html><body>
<div class="search-results-container">
  <p>You've made too many searches. Please Slow Down and try again later.</p>
</div>
</body></html>
"""


class FakeClock:
    """Monotonic clock whose sleep advances time instantly.

    Still yields to the event loop on every sleep so other tasks can run.
    """

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


class VirtualClock:
    """Fake time for code with several concurrent sleepers.

    Sleepers park on futures; advance() wakes them in deadline order and
    lets the loop settle after each wake-up.
    """

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self._waiters: list[tuple[float, int, asyncio.Future]] = []
        self._seq = 0

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        future = asyncio.get_running_loop().create_future()
        heapq.heappush(self._waiters, (self.now + max(0.0, seconds), self._seq, future))
        self._seq += 1
        await future

    async def settle(self) -> None:
        for _ in range(100):
            await asyncio.sleep(0)

    async def advance(self, seconds: float) -> None:
        target = self.now + seconds
        await self.settle()
        while self._waiters and self._waiters[0][0] <= target:
            deadline, _, future = heapq.heappop(self._waiters)
            if future.done():
                continue
            self.now = max(self.now, deadline)
            future.set_result(None)
            await self.settle()
        self.now = target


class RecordingSender:
    """Sender stand-in that records (url, payload, time) and always succeeds."""

    def __init__(self, clock=None) -> None:
        self.clock = clock
        self.sent: list[tuple[str, dict, float | None]] = []
        self.closed = False

    async def send(self, url: str, payload: dict, display_name: str = "Webhook") -> DeliveryResult:
        self.sent.append((url, payload, self.clock() if self.clock else None))
        return DeliveryResult(url=url, display_name=display_name, ok=True, attempts=1, status_code=200)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def profile_html() -> str:
    return PROFILE_HTML


@pytest.fixture
def results_page_html() -> str:
    return RESULTS_PAGE_HTML


@pytest.fixture
def last_page_html() -> str:
    return LAST_PAGE_HTML


@pytest.fixture
def fallback_page_html() -> str:
    return FALLBACK_PAGE_HTML


@pytest.fixture
def blocked_page_html() -> str:
    return BLOCKED_PAGE_HTML


@pytest.fixture
def rate_limited_page_html() -> str:
    return RATE_LIMITED_PAGE_HTML


@pytest.fixture
def fake_clock() -> FakeClock:
    """A FakeClock starting at t=1000."""
    return FakeClock()


@pytest.fixture
def virtual_clock() -> VirtualClock:
    """A VirtualClock starting at t=0."""
    return VirtualClock()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def page_files(tmp_path: Path) -> dict[str, Path]:
    """Write every sample page to disk and return their paths by name."""
    pages = {
        "profile": PROFILE_HTML,
        "results": RESULTS_PAGE_HTML,
        "last": LAST_PAGE_HTML,
        "fallback": FALLBACK_PAGE_HTML,
        "blocked": BLOCKED_PAGE_HTML,
    }
    paths = {}
    for name, html in pages.items():
        path = tmp_path / f"{name}.html"
        path.write_text(html, encoding="utf-8")
        paths[name] = path
    return paths
