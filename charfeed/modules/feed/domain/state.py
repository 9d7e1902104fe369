"""Feed state owned by the controller."""

from dataclasses import dataclass, field, replace
from enum import StrEnum

from charfeed.modules.characters.domain.entities import Character


class FeedMode(StrEnum):
    """浏览模式（分页游标）或搜索模式（一次性结果集）。"""

    BROWSE = "browse"
    SEARCH = "search"


@dataclass(frozen=True)
class FeedState:
    """Immutable snapshot; the controller swaps whole snapshots on commit."""

    items: tuple[Character, ...] = field(default_factory=tuple)
    mode: FeedMode = FeedMode.BROWSE
    current_page: int = 1
    total_pages: int = 1
    is_loading: bool = False
    query: str = ""

    @property
    def has_more_pages(self) -> bool:
        if self.mode is FeedMode.SEARCH:
            return False
        return self.current_page < self.total_pages

    @property
    def item_count(self) -> int:
        return len(self.items)

    def with_first_page(self, items: tuple[Character, ...], total_pages: int) -> "FeedState":
        return replace(
            self,
            items=items,
            mode=FeedMode.BROWSE,
            current_page=1,
            total_pages=total_pages,
            query="",
        )

    def with_next_page(self, page: int, items: tuple[Character, ...]) -> "FeedState":
        return replace(self, items=self.items + items, current_page=page)

    def with_search_results(self, query: str, items: tuple[Character, ...]) -> "FeedState":
        return replace(self, items=items, mode=FeedMode.SEARCH, query=query)
