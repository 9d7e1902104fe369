"""Character domain entities and response envelopes."""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)


class CharacterCategory(StrEnum):
    """Named appearance categories, in detail-view order."""

    FILMS = "Films"
    TV_SHOWS = "TV Shows"
    SHORT_FILMS = "Short Films"
    VIDEO_GAMES = "Video Games"
    PARK_ATTRACTIONS = "Park Attractions"
    ALLIES = "Allies"
    ENEMIES = "Enemies"

    @property
    def field_name(self) -> str:
        return _CATEGORY_FIELDS[self]


_CATEGORY_FIELDS: dict[CharacterCategory, str] = {
    CharacterCategory.FILMS: "films",
    CharacterCategory.TV_SHOWS: "tv_shows",
    CharacterCategory.SHORT_FILMS: "short_films",
    CharacterCategory.VIDEO_GAMES: "video_games",
    CharacterCategory.PARK_ATTRACTIONS: "park_attractions",
    CharacterCategory.ALLIES: "allies",
    CharacterCategory.ENEMIES: "enemies",
}

# 列表行展示的主分类优先级
PRIMARY_CATEGORY_ORDER = (
    CharacterCategory.FILMS,
    CharacterCategory.TV_SHOWS,
    CharacterCategory.SHORT_FILMS,
    CharacterCategory.VIDEO_GAMES,
)
FALLBACK_CATEGORY = "Other"

# 计入出场次数的分类
APPEARANCE_CATEGORIES = (
    CharacterCategory.FILMS,
    CharacterCategory.SHORT_FILMS,
    CharacterCategory.TV_SHOWS,
    CharacterCategory.VIDEO_GAMES,
)


class CategorySection(BaseModel):
    """One category of a character's detail view."""

    model_config = ConfigDict(frozen=True)

    category: CharacterCategory
    items: tuple[str, ...] = ()

    @property
    def title(self) -> str:
        return self.category.value

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def empty_message(self, character_name: str) -> str:
        return f"{character_name} doesn't appear in any {self.title.lower()}."


class Character(BaseModel):
    """Immutable character decoded from the remote collection."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(..., alias="_id", description="远端唯一标识")
    name: str = Field(..., description="显示名称")
    image_url: str | None = Field(default=None, alias="imageUrl")
    source_url: str | None = Field(default=None, alias="sourceUrl")
    films: tuple[str, ...] = ()
    short_films: tuple[str, ...] = Field(default=(), alias="shortFilms")
    tv_shows: tuple[str, ...] = Field(default=(), alias="tvShows")
    video_games: tuple[str, ...] = Field(default=(), alias="videoGames")
    park_attractions: tuple[str, ...] = Field(default=(), alias="parkAttractions")
    allies: tuple[str, ...] = ()
    enemies: tuple[str, ...] = ()
    url: str = Field(..., description="资源规范 URL")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    @field_validator("created_at", "updated_at", mode="wrap")
    @classmethod
    def _lenient_timestamp(
        cls, value: Any, handler: ValidatorFunctionWrapHandler
    ) -> datetime | None:
        # 格式异常的时间戳置空
        try:
            return handler(value)
        except ValidationError:
            return None

    @property
    def has_image(self) -> bool:
        return bool(self.image_url)

    @property
    def total_appearances(self) -> int:
        return sum(len(self.items_in(category)) for category in APPEARANCE_CATEGORIES)

    @property
    def primary_category(self) -> str:
        for category in PRIMARY_CATEGORY_ORDER:
            if self.items_in(category):
                return category.value
        return FALLBACK_CATEGORY

    def items_in(self, category: CharacterCategory) -> tuple[str, ...]:
        return getattr(self, category.field_name)

    def category_sections(self) -> list[CategorySection]:
        """All categories in detail-view order, empty ones included."""
        return [
            CategorySection(category=category, items=self.items_in(category))
            for category in CharacterCategory
        ]


class PageInfo(BaseModel):
    """Pagination metadata of an envelope."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total_pages: int | None = Field(default=None, alias="totalPages")
    count: int = Field(..., description="本页条目数")
    previous_page: str | None = Field(default=None, alias="previousPage")
    next_page: str | None = Field(default=None, alias="nextPage")

    @property
    def page_count(self) -> int:
        """Total page count, treating an absent value as a single page."""
        return self.total_pages if self.total_pages is not None else 1


class CharacterPage(BaseModel):
    """List envelope: ``{"info": {...}, "data": [...]}``."""

    model_config = ConfigDict(frozen=True)

    info: PageInfo
    data: tuple[Character, ...]

    @field_validator("data", mode="before")
    @classmethod
    def _wrap_single_object(cls, value: Any) -> Any:
        # 远端在只有一个匹配结果时返回对象而不是数组
        if isinstance(value, dict):
            return [value]
        return value


class CharacterEnvelope(BaseModel):
    """Single-entity envelope returned by the by-id endpoint."""

    model_config = ConfigDict(frozen=True)

    info: PageInfo
    data: Character
