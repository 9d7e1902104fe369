"""单个角色详情加载服务。"""

from dataclasses import dataclass

from loguru import logger

from charfeed.core.infrastructure.logging import FeedEvents
from charfeed.modules.characters.domain.entities import CategorySection, Character
from charfeed.modules.characters.domain.exceptions import (
    CharacterNotFoundError,
    FetchError,
    TransportError,
)
from charfeed.modules.characters.domain.ports import CharacterSource


@dataclass(frozen=True)
class CharacterDetail:
    """角色详情：实体本身及按展示顺序排列的分类。"""

    character: Character
    sections: list[CategorySection]

    @property
    def non_empty_sections(self) -> list[CategorySection]:
        return [section for section in self.sections if not section.is_empty]

    def section(self, title: str) -> CategorySection | None:
        for section in self.sections:
            if section.title == title:
                return section
        return None


class CharacterDetailService:
    """通过 by-id 接口加载角色详情。

    404 转换为 CharacterNotFoundError，其余失败原样抛出 FetchError。
    """

    def __init__(self, source: CharacterSource):
        self.source = source

    async def load(self, character_id: int) -> CharacterDetail:
        try:
            character = await self.source.fetch_by_id(character_id)
        except TransportError as exc:
            if exc.status_code == 404:
                raise CharacterNotFoundError(character_id) from exc
            FeedEvents.fetch_failed("fetch_by_id", exc.kind.value, exc.message)
            raise
        except FetchError as exc:
            FeedEvents.fetch_failed("fetch_by_id", exc.kind.value, exc.message)
            raise

        logger.debug(f"Loaded character {character.id} ({character.name})")
        FeedEvents.character_loaded(character_id=character.id, name=character.name)
        return CharacterDetail(
            character=character,
            sections=character.category_sections(),
        )
