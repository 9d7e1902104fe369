"""Settings 校验测试。"""

import pytest
from pydantic import ValidationError

from charfeed.core.config import Settings


def test_base_url_is_normalized(test_settings):
    assert test_settings.API_BASE_URL == "https://api.test"
    assert test_settings.character_endpoint == "https://api.test/character"


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.DEFAULT_PAGE_SIZE == 50
    assert settings.SEARCH_DEBOUNCE_SEC == 0.5
    assert settings.PREFETCH_THRESHOLD == 5


def test_env_override(monkeypatch):
    monkeypatch.setenv("DEFAULT_PAGE_SIZE", "20")
    monkeypatch.setenv("API_BASE_URL", "http://localhost:8080/")
    settings = Settings(_env_file=None)
    assert settings.DEFAULT_PAGE_SIZE == 20
    assert settings.API_BASE_URL == "http://localhost:8080"


@pytest.mark.parametrize(
    "overrides",
    [
        {"API_BASE_URL": "ftp://api.test"},
        {"DEFAULT_PAGE_SIZE": 0},
        {"SEARCH_DEBOUNCE_SEC": -1},
    ],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)
