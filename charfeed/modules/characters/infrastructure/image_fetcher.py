"""HTTP image fetcher for row thumbnails."""

import httpx
from loguru import logger

from charfeed.core.config import settings
from charfeed.modules.characters.domain.exceptions import ImageFetchError


class HttpImageFetcher:
    """Downloads image bytes, rejecting non-image and oversized bodies."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        max_bytes: int | None = None,
    ):
        self.timeout = timeout if timeout is not None else settings.IMAGE_TIMEOUT_SEC
        self.max_bytes = max_bytes if max_bytes is not None else settings.IMAGE_MAX_BYTES
        self._client = http_client
        self._owns_client = http_client is None

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str) -> bytes:
        if not url.startswith(("http://", "https://")):
            raise ImageFetchError(f"Unsupported image URL: {url}")
        try:
            request_url = httpx.URL(url)
        except httpx.InvalidURL as exc:
            logger.debug(f"Malformed image URL {url!r}: {exc}")
            raise ImageFetchError(f"Invalid image URL: {exc}") from exc

        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={"User-Agent": settings.HTTP_USER_AGENT},
            )

        try:
            async with self._client.stream("GET", request_url) as response:
                response.raise_for_status()
                content_type = response.headers.get("content-type", "")
                if content_type and not content_type.startswith("image/"):
                    raise ImageFetchError(f"Not an image ({content_type}): {url}")

                chunks: list[bytes] = []
                received = 0
                async for chunk in response.aiter_bytes():
                    received += len(chunk)
                    if received > self.max_bytes:
                        raise ImageFetchError(
                            f"Image exceeds {self.max_bytes} bytes: {url}"
                        )
                    chunks.append(chunk)
        except httpx.HTTPError as exc:
            logger.debug(f"Image fetch failed for {url}: {exc}")
            raise ImageFetchError(f"Error: {exc}") from exc

        data = b"".join(chunks)
        if not data:
            raise ImageFetchError(f"Empty image body: {url}")
        return data
