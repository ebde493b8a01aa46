# ABOUTME: PageHost protocol the core uses to read and drive the current page.
# ABOUTME: Also provides wait_for, a bounded predicate poll that resolves False on timeout.

import asyncio
import inspect
import time
from collections.abc import Awaitable, Callable
from typing import NamedTuple, Protocol, runtime_checkable

Sleep = Callable[[float], Awaitable[None]]
Clock = Callable[[], float]


class ScrollState(NamedTuple):
    """Current scroll position and viewport size, in CSS pixels."""

    scroll_y: float
    viewport_width: float
    viewport_height: float


@runtime_checkable
class PageHost(Protocol):
    """The page the core reads from and acts on.

    Implementations wrap a live browser tab or a sequence of saved snapshots.
    """

    async def content(self) -> str: ...

    async def url(self) -> str: ...

    async def click(self, selector: str) -> None: ...

    async def scroll_state(self) -> ScrollState: ...

    async def element_offset(self, selector: str) -> float | None:
        """Document-relative top of the first element matching ``selector``."""
        ...

    async def scroll_by(self, dy: float) -> None: ...

    async def move_mouse(self, x: float, y: float) -> None: ...


async def wait_for(
    predicate: Callable[[], bool | Awaitable[bool]],
    timeout: float,
    poll: float = 0.25,
    sleep: Sleep = asyncio.sleep,
    clock: Clock = time.monotonic,
) -> bool:
    """Poll ``predicate`` until it is truthy or ``timeout`` seconds pass.

    Never raises on timeout, so a page that never settles cannot hang a
    session.

    Args:
        predicate: Sync or async callable checked on every poll.
        timeout: Upper bound on the wait, in seconds.
        poll: Seconds between checks.
        sleep: Awaitable sleep, injectable for tests.
        clock: Monotonic clock, injectable for tests.

    Returns:
        True if the predicate became truthy, False on timeout.
    """
    deadline = clock() + timeout
    while True:
        result = predicate()
        if inspect.isawaitable(result):
            result = await result
        if result:
            return True
        remaining = deadline - clock()
        if remaining <= 0:
            return False
        await sleep(min(poll, remaining))
