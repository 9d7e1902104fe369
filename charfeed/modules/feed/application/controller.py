"""Feed controller.

Owns the authoritative item list, page cursor, mode and loading flag, and
reports every committed change through its ``EventEmitter``.

At most one request is in flight at a time. ``load_first_page`` and
``load_next_page`` are no-ops while loading; ``search`` instead records the
latest query, which replaces the in-flight request once it completes.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace

from loguru import logger

from charfeed.core.config import settings
from charfeed.core.domain.events import EventEmitter
from charfeed.core.infrastructure.logging import FeedEvents
from charfeed.modules.characters.domain.entities import Character
from charfeed.modules.characters.domain.exceptions import FetchError
from charfeed.modules.characters.domain.ports import CharacterSource
from charfeed.modules.feed.domain.events import (
    DataChange,
    DataUpdatedEvent,
    ErrorOccurredEvent,
    LoadingChangedEvent,
)
from charfeed.modules.feed.domain.state import FeedMode, FeedState


@dataclass(frozen=True)
class _Commit:
    state: FeedState
    change: DataChange


_Operation = Callable[[], Awaitable[_Commit]]


class FeedController:
    """Browse / load-more / search controller over a ``CharacterSource``.

    职责：
    - 维护 items、分页游标、模式与加载状态
    - 串行化请求（同一时刻最多一个在途请求）
    - 成功时原子提交新状态，失败时保持原状态不变
    - 通过事件通知观察者
    """

    title = "Disney Characters"
    search_placeholder = "Search Disney Characters"

    def __init__(
        self,
        source: CharacterSource,
        page_size: int | None = None,
        prefetch_threshold: int | None = None,
        events: EventEmitter | None = None,
    ):
        self.source = source
        self.page_size = page_size or settings.DEFAULT_PAGE_SIZE
        self.prefetch_threshold = (
            prefetch_threshold
            if prefetch_threshold is not None
            else settings.PREFETCH_THRESHOLD
        )
        self.events = events or EventEmitter()
        self._state = FeedState()
        self._pending_query: str | None = None
        self._closed = False

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> FeedState:
        return self._state

    @property
    def items(self) -> tuple[Character, ...]:
        return self._state.items

    @property
    def mode(self) -> FeedMode:
        return self._state.mode

    @property
    def current_page(self) -> int:
        return self._state.current_page

    @property
    def total_pages(self) -> int:
        return self._state.total_pages

    @property
    def has_more_pages(self) -> bool:
        return self._state.has_more_pages

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def item_count(self) -> int:
        return self._state.item_count

    @property
    def is_empty(self) -> bool:
        return self._state.item_count == 0 and not self._state.is_loading

    @property
    def is_closed(self) -> bool:
        return self._closed

    def item_at(self, index: int) -> Character | None:
        if 0 <= index < self._state.item_count:
            return self._state.items[index]
        return None

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def load_first_page(self) -> None:
        if self._closed or self._state.is_loading:
            return
        await self._run(self._fetch_first_page, "load_first_page")

    async def load_next_page(self) -> None:
        if self._closed or self._state.is_loading or not self._state.has_more_pages:
            return
        await self._run(self._fetch_next_page, "load_next_page")

    async def search(self, name: str) -> None:
        """Replace the feed with the search results for ``name``.

        An empty name falls back to :meth:`load_first_page`. While another
        request is in flight the query is parked and dispatched afterwards;
        only the most recent parked query survives.
        """
        if self._closed:
            return
        if self._state.is_loading:
            self._pending_query = name
            logger.debug(f"Search {name!r} parked behind in-flight request")
            return
        operation, label = self._operation_for(name)
        await self._run(operation, label)

    async def refresh(self, search_text: str = "") -> None:
        """Pull-to-refresh: re-run the active search, or reload from page 1."""
        if search_text:
            await self.search(search_text)
        else:
            await self.load_first_page()

    def should_prefetch(self, row_index: int) -> bool:
        """True when ``row_index`` is close enough to the end to load more."""
        if self._closed or self._state.is_loading or not self._state.has_more_pages:
            return False
        return row_index >= self._state.item_count - self.prefetch_threshold

    async def on_row_displayed(self, row_index: int) -> bool:
        if not self.should_prefetch(row_index):
            return False
        await self.load_next_page()
        return True

    def close(self) -> None:
        """Tear down; completions arriving later are ignored."""
        self._closed = True
        self._pending_query = None
        self.events.clear_handlers()

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------

    def _operation_for(self, query: str) -> tuple[_Operation, str]:
        if not query:
            return self._fetch_first_page, "load_first_page"

        async def _search() -> _Commit:
            return await self._fetch_search(query)

        return _search, "search"

    async def _fetch_first_page(self) -> _Commit:
        envelope = await self.source.fetch_page(1, self.page_size)
        return _Commit(
            state=self._state.with_first_page(envelope.data, envelope.info.page_count),
            change=DataChange.REPLACED,
        )

    async def _fetch_next_page(self) -> _Commit:
        page = self._state.current_page + 1
        envelope = await self.source.fetch_page(page, self.page_size)
        state = self._state.with_next_page(page, envelope.data)
        if envelope.info.total_pages is not None:
            state = replace(state, total_pages=envelope.info.total_pages)
        return _Commit(state=state, change=DataChange.APPENDED)

    async def _fetch_search(self, query: str) -> _Commit:
        envelope = await self.source.search_by_name(query)
        return _Commit(
            state=self._state.with_search_results(query, envelope.data),
            change=DataChange.REPLACED,
        )

    async def _run(self, operation: _Operation, label: str) -> None:
        self._set_loading(True)
        commit: _Commit | None = None
        failure: FetchError | None = None
        try:
            while True:
                commit, failure = None, None
                try:
                    commit = await operation()
                except FetchError as exc:
                    failure = exc

                if self._closed:
                    logger.debug(f"Controller closed, dropping {label} result")
                    return
                if self._pending_query is None:
                    break

                query, self._pending_query = self._pending_query, None
                FeedEvents.request_superseded(
                    operation=label, superseded_by="search" if query else "load_first_page"
                )
                operation, label = self._operation_for(query)
        finally:
            # 取消或未预期异常：丢弃排队的搜索并复位 loading 标志
            if commit is None and failure is None and not self._closed:
                self._pending_query = None
                if self._state.is_loading:
                    self._set_loading(False)

        if commit is not None:
            self._apply(commit)
        elif failure is not None:
            self._fail(label, failure)

    def _apply(self, commit: _Commit) -> None:
        self._state = replace(commit.state, is_loading=False)
        self._emit_loading()

        state = self._state
        if state.mode is FeedMode.SEARCH:
            FeedEvents.search_completed(query=state.query, result_count=state.item_count)
        else:
            FeedEvents.page_loaded(
                page=state.current_page,
                total_pages=state.total_pages,
                item_count=state.item_count,
                appended=commit.change is DataChange.APPENDED,
            )

        self.events.emit(
            DataUpdatedEvent(
                change=commit.change,
                item_count=state.item_count,
                mode=state.mode,
            )
        )

    def _fail(self, label: str, error: FetchError) -> None:
        self._set_loading(False)
        FeedEvents.fetch_failed(
            operation=label,
            kind=error.kind.value,
            error=error.message,
            page=self._state.current_page,
        )
        self.events.emit(ErrorOccurredEvent(kind=error.kind, message=error.message))

    def _set_loading(self, loading: bool) -> None:
        if self._state.is_loading == loading:
            return
        self._state = replace(self._state, is_loading=loading)
        self._emit_loading()

    def _emit_loading(self) -> None:
        self.events.emit(
            LoadingChangedEvent(
                is_loading=self._state.is_loading,
                item_count=self._state.item_count,
            )
        )
