"""Feed module dependencies."""

from charfeed.core.config import settings
from charfeed.modules.characters.application.detail_service import (
    CharacterDetailService,
)
from charfeed.modules.characters.domain.ports import CharacterSource, ImageFetcher
from charfeed.modules.characters.infrastructure.client import CharacterApiClient
from charfeed.modules.characters.infrastructure.image_fetcher import HttpImageFetcher
from charfeed.modules.feed.application.controller import FeedController
from charfeed.modules.feed.application.debouncer import SearchDebouncer
from charfeed.modules.feed.application.image_loader import ImageApplied, ImageLoader


def get_character_client(base_url: str | None = None) -> CharacterApiClient:
    return CharacterApiClient(base_url=base_url or settings.API_BASE_URL)


def get_image_fetcher() -> HttpImageFetcher:
    return HttpImageFetcher()


def create_feed_controller(
    source: CharacterSource | None = None,
    page_size: int | None = None,
) -> FeedController:
    return FeedController(
        source=source or get_character_client(),
        page_size=page_size or settings.DEFAULT_PAGE_SIZE,
    )


def create_search_debouncer(
    controller: FeedController, delay: float | None = None
) -> SearchDebouncer:
    # search("") 回退为 load_first_page
    return SearchDebouncer(controller.search, delay=delay)


def create_detail_service(source: CharacterSource | None = None) -> CharacterDetailService:
    return CharacterDetailService(source or get_character_client())


def create_image_loader(
    on_image: ImageApplied | None = None,
    fetcher: ImageFetcher | None = None,
) -> ImageLoader:
    return ImageLoader(fetcher or get_image_fetcher(), on_image=on_image)
