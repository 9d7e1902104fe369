"""Application configuration."""

from typing import Literal, Self

from pydantic import computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "charfeed"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    # Remote collection API
    API_BASE_URL: str = "https://api.disneyapi.dev"
    DEFAULT_PAGE_SIZE: int = 50
    HTTP_TIMEOUT_SEC: float = 15.0
    HTTP_USER_AGENT: str = "charfeed/0.1 (+https://github.com/charfeed/charfeed)"

    # Feed behaviour
    SEARCH_DEBOUNCE_SEC: float = 0.5
    PREFETCH_THRESHOLD: int = 5  # 距离列表末尾多少行时触发加载更多

    # Row images
    IMAGE_TIMEOUT_SEC: float = 10.0
    IMAGE_MAX_BYTES: int = 5 * 1024 * 1024

    @field_validator("API_BASE_URL")
    @classmethod
    def _normalize_base_url(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError("API_BASE_URL must be an HTTP(S) URL")
        return value

    @model_validator(mode="after")
    def _check_positive_limits(self) -> Self:
        if self.DEFAULT_PAGE_SIZE < 1:
            raise ValueError("DEFAULT_PAGE_SIZE must be at least 1")
        if self.SEARCH_DEBOUNCE_SEC < 0:
            raise ValueError("SEARCH_DEBOUNCE_SEC must not be negative")
        return self

    @computed_field
    @property
    def character_endpoint(self) -> str:
        return f"{self.API_BASE_URL}/character"


settings = Settings()
