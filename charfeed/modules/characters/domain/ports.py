"""Ports used by the feed to reach remote resources."""

from typing import Protocol

from charfeed.modules.characters.domain.entities import Character, CharacterPage


class CharacterSource(Protocol):
    """Remote paginated character collection.

    Implementations raise ``FetchError`` subclasses and never retry.
    """

    async def fetch_page(self, page: int, page_size: int) -> CharacterPage: ...

    async def fetch_by_id(self, character_id: int) -> Character: ...

    async def search_by_name(self, name: str) -> CharacterPage: ...


class ImageFetcher(Protocol):
    """Downloads raw image bytes, raising ``ImageFetchError`` on failure."""

    async def fetch(self, url: str) -> bytes: ...
