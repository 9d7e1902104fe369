"""
pytest 配置和共享 fixtures。

测试分层：
- unit/: 单元测试（不依赖外部服务，HTTP 通过 httpx.MockTransport 模拟）

使用方法：
    # 运行所有测试
    uv run pytest

    # 运行带覆盖率
    uv run pytest --cov=charfeed --cov-report=html
"""

from typing import Any

import pytest

from charfeed.core.config import Settings
from charfeed.modules.characters.domain.entities import Character
from tests.fakes import InMemoryCharacterSource, make_character_payload

# ============================================
# 配置 Fixtures
# ============================================


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def test_settings() -> Settings:
    """测试环境配置。"""
    return Settings(
        ENVIRONMENT="local",
        API_BASE_URL="https://api.test/",
        DEFAULT_PAGE_SIZE=2,
        SEARCH_DEBOUNCE_SEC=0.05,
    )


# ============================================
# 领域对象 Fixtures
# ============================================


@pytest.fixture
def sample_character_data() -> dict[str, Any]:
    """示例角色数据。"""
    return make_character_payload(
        308,
        "Mickey Mouse",
        films=["Fantasia", "Fun and Fancy Free"],
        shortFilms=["Steamboat Willie"],
        tvShows=["Mickey Mouse Clubhouse"],
        videoGames=["Kingdom Hearts"],
        parkAttractions=["Mickey's PhilharMagic"],
        allies=["Minnie Mouse", "Donald Duck"],
        enemies=["Pete"],
    )


@pytest.fixture
def characters() -> list[Character]:
    names = ["Mickey Mouse", "Minnie Mouse", "Donald Duck", "Goofy", "Pluto"]
    return [
        Character.model_validate(make_character_payload(index + 1, name))
        for index, name in enumerate(names)
    ]


@pytest.fixture
def source(characters: list[Character]) -> InMemoryCharacterSource:
    return InMemoryCharacterSource(characters)

