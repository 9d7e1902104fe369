"""SearchDebouncer 单元测试。"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from charfeed.modules.feed.application.controller import FeedController
from charfeed.modules.feed.application.debouncer import SearchDebouncer
from charfeed.modules.feed.application.dependencies import create_search_debouncer
from charfeed.modules.feed.domain.state import FeedMode
from tests.fakes import InMemoryCharacterSource

pytestmark = pytest.mark.anyio

QUIET = 0.05


async def test_rapid_input_dispatches_latest_text_once():
    dispatch = AsyncMock()
    debouncer = SearchDebouncer(dispatch, delay=QUIET)

    for text in ("a", "ab", "abc"):
        debouncer.submit(text)
        await asyncio.sleep(QUIET / 5)

    await debouncer.wait_idle()

    dispatch.assert_awaited_once_with("abc")


async def test_separate_quiet_periods_dispatch_each():
    dispatch = AsyncMock()
    debouncer = SearchDebouncer(dispatch, delay=QUIET)

    debouncer.submit("goofy")
    await debouncer.wait_idle()
    debouncer.submit("pluto")
    await debouncer.wait_idle()

    assert [call.args[0] for call in dispatch.await_args_list] == ["goofy", "pluto"]


async def test_nothing_dispatched_before_quiet_period():
    dispatch = AsyncMock()
    debouncer = SearchDebouncer(dispatch, delay=QUIET)

    debouncer.submit("mickey")
    await asyncio.sleep(QUIET / 5)

    assert debouncer.has_pending is True
    dispatch.assert_not_awaited()
    debouncer.cancel()


async def test_cancel_drops_pending_dispatch():
    dispatch = AsyncMock()
    debouncer = SearchDebouncer(dispatch, delay=QUIET)

    debouncer.submit("donald")
    debouncer.cancel()
    await asyncio.sleep(QUIET * 2)

    assert debouncer.has_pending is False
    dispatch.assert_not_awaited()


async def test_flush_dispatches_immediately():
    dispatch = AsyncMock()
    debouncer = SearchDebouncer(dispatch, delay=10)

    debouncer.submit("minnie")
    await debouncer.flush()

    dispatch.assert_awaited_once_with("minnie")
    assert debouncer.has_pending is False


async def test_new_input_does_not_cancel_started_dispatch():
    started = asyncio.Event()
    release = asyncio.Event()
    completed: list[str] = []

    async def slow_dispatch(text: str) -> None:
        started.set()
        await release.wait()
        completed.append(text)

    debouncer = SearchDebouncer(slow_dispatch, delay=QUIET)
    debouncer.submit("stitch")
    await started.wait()

    debouncer.submit("stitch and lilo")
    release.set()
    await debouncer.wait_idle()

    assert completed == ["stitch", "stitch and lilo"]


async def test_dispatch_errors_are_logged_not_raised():
    dispatch = AsyncMock(side_effect=RuntimeError("boom"))
    debouncer = SearchDebouncer(dispatch, delay=0)

    debouncer.submit("x")
    await debouncer.wait_idle()

    dispatch.assert_awaited_once_with("x")


async def test_wired_to_controller(characters):
    source = InMemoryCharacterSource(characters)
    controller = FeedController(source, page_size=2)
    debouncer = create_search_debouncer(controller, delay=QUIET)

    debouncer.submit("m")
    debouncer.submit("mi")
    debouncer.submit("minnie")
    await debouncer.wait_idle()

    assert source.calls == [("search_by_name", "minnie")]
    assert controller.mode is FeedMode.SEARCH

    debouncer.submit("")
    await debouncer.wait_idle()

    assert source.calls[-1] == ("fetch_page", 1, 2)
    assert controller.mode is FeedMode.BROWSE
