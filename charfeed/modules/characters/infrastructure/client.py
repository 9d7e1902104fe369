"""Remote collection client for the character API.

GET {base}/character?page=N&pageSize=M   paginated listing
GET {base}/character?name=...            search by name
GET {base}/character/{id}                single character
"""

from __future__ import annotations

import time
from typing import TypeVar
from urllib.parse import quote

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from charfeed.core.config import settings
from charfeed.modules.characters.domain.entities import (
    Character,
    CharacterEnvelope,
    CharacterPage,
)
from charfeed.modules.characters.domain.exceptions import (
    DecodeError,
    InvalidRequestError,
    TransportError,
)

TModel = TypeVar("TModel", bound=BaseModel)


class CharacterApiClient:
    """Issues the three request kinds and decodes typed envelopes.

    The underlying ``httpx.AsyncClient`` is created lazily unless one is
    injected; injected clients are not closed by :meth:`aclose`.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.base_url = (base_url or settings.API_BASE_URL).strip().rstrip("/")
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SEC
        self._client = http_client
        self._owns_client = http_client is None

    async def __aenter__(self) -> CharacterApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch_page(self, page: int, page_size: int) -> CharacterPage:
        if page < 1:
            raise InvalidRequestError(f"page must be >= 1, got {page}")
        if page_size < 1:
            raise InvalidRequestError(f"pageSize must be >= 1, got {page_size}")
        url = self._build_url(f"/character?page={page}&pageSize={page_size}")
        return await self._get(url, CharacterPage)

    async def fetch_by_id(self, character_id: int) -> Character:
        url = self._build_url(f"/character/{character_id}")
        envelope = await self._get(url, CharacterEnvelope)
        return envelope.data

    async def search_by_name(self, name: str) -> CharacterPage:
        try:
            encoded = quote(name, safe="")
        except UnicodeEncodeError as exc:
            raise InvalidRequestError(f"cannot escape name {name!r}") from exc
        url = self._build_url(f"/character?name={encoded}")
        return await self._get(url, CharacterPage)

    def _build_url(self, path_and_query: str) -> httpx.URL:
        if not self.base_url.startswith(("http://", "https://")):
            raise InvalidRequestError(f"base URL must be HTTP(S): {self.base_url!r}")
        try:
            url = httpx.URL(f"{self.base_url}{path_and_query}")
        except (httpx.InvalidURL, UnicodeError, ValueError) as exc:
            raise InvalidRequestError(str(exc)) from exc
        if not url.host:
            raise InvalidRequestError(f"missing host in {self.base_url!r}")
        return url

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={
                    "User-Agent": settings.HTTP_USER_AGENT,
                    "Accept": "application/json",
                },
            )
        return self._client

    async def _get(self, url: httpx.URL, model: type[TModel]) -> TModel:
        start_time = time.time()
        try:
            response = await self._get_client().get(url)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning(f"Character API timeout for {url}: {exc}")
            raise TransportError(f"Timeout: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            logger.warning(f"Character API HTTP error for {url}: {status_code}")
            raise TransportError(f"HTTP {status_code}", status_code=status_code) from exc
        except httpx.HTTPError as exc:
            logger.warning(f"Character API request failed for {url}: {exc}")
            raise TransportError(str(exc) or exc.__class__.__name__) from exc

        if not response.content:
            raise DecodeError("No data received")
        try:
            decoded = model.model_validate_json(response.content)
        except ValidationError as exc:
            logger.warning(
                f"Character API returned unexpected payload for {url}: "
                f"{exc.error_count()} validation errors"
            )
            raise DecodeError() from exc

        duration_ms = int((time.time() - start_time) * 1000)
        logger.debug(f"GET {url} -> {model.__name__} in {duration_ms}ms")
        return decoded
