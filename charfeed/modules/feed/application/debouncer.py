"""Search input debouncer.

Coalesces rapid text changes into one delayed dispatch carrying the latest
text. Holds no feed state.
"""

import asyncio
from collections.abc import Awaitable, Callable

from loguru import logger

from charfeed.core.config import settings

SearchDispatch = Callable[[str], Awaitable[None]]


class SearchDebouncer:
    """At most one pending timer; each new input restarts it.

    Once the timer fires the dispatch is detached from the timer, so later
    input never cancels a search that has already started.
    """

    def __init__(self, dispatch: SearchDispatch, delay: float | None = None):
        self._dispatch = dispatch
        self.delay = delay if delay is not None else settings.SEARCH_DEBOUNCE_SEC
        self._latest_text = ""
        self._timer: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task[None]] = set()

    @property
    def latest_text(self) -> str:
        return self._latest_text

    @property
    def has_pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def submit(self, text: str) -> None:
        """Record ``text`` and restart the quiet-period timer."""
        self._latest_text = text
        # 原子替换：先摘下旧计时器再取消
        old_timer = self._timer
        self._timer = None
        if old_timer is not None and not old_timer.done():
            old_timer.cancel()
        self._timer = asyncio.get_running_loop().create_task(self._wait_then_fire())

    def cancel(self) -> None:
        """Drop the pending dispatch, if any."""
        timer = self._timer
        self._timer = None
        if timer is not None and not timer.done():
            timer.cancel()

    async def flush(self) -> None:
        """Dispatch the latest text immediately, skipping the quiet period."""
        self.cancel()
        await self._dispatch(self._latest_text)

    async def wait_idle(self) -> None:
        """Wait until no timer is pending and no dispatch is running."""
        while self._timer is not None or self._in_flight:
            pending = [t for t in (self._timer, *self._in_flight) if t is not None]
            await asyncio.gather(*pending, return_exceptions=True)

    async def _wait_then_fire(self) -> None:
        await asyncio.sleep(self.delay)
        current = asyncio.current_task()
        if self._timer is not current:
            return
        self._timer = None

        task = asyncio.get_running_loop().create_task(self._dispatch(self._latest_text))
        self._in_flight.add(task)
        task.add_done_callback(self._on_dispatch_done)

    def _on_dispatch_done(self, task: asyncio.Task[None]) -> None:
        self._in_flight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.opt(exception=exc).error(f"Debounced search dispatch failed: {exc}")
