"""Origin fetch collaborator (httpx)."""

import httpx
from loguru import logger
from pydantic import BaseModel

from ..config import ScalerSettings
from ..utils.media_types import is_image_mime
from ..utils.profiling import timed
from .errors import FetchError, NotAnImageError, PayloadTooLargeError, UpstreamStatusError


class FetchedImage(BaseModel):
    url: str
    status_code: int
    content_type: str
    content: bytes


class OriginFetcher:
    """Fetch source images from the configured origin.

    Status and content type are checked from the response headers before any
    body byte is read; the body is then streamed and abandoned as soon as it
    passes the size ceiling.
    """

    def __init__(
        self,
        settings: ScalerSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the fetcher.

        Args:
            settings: Service settings (origin URL, credential, limits)
            transport: Optional httpx transport, mainly for tests
        """
        self.settings: ScalerSettings = settings
        self.transport: httpx.AsyncBaseTransport | None = transport

    @property
    def headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.settings.user_agent,
            "VS-Auth": self.settings.auth_token,
        }

    @timed("fetch")
    async def fetch(self, asset_path: str) -> FetchedImage:
        """Download one source image.

        Args:
            asset_path: Path appended to the origin base URL

        Returns:
            FetchedImage with the body bytes

        Raises:
            FetchError: On network failure or timeout
            UpstreamStatusError: If the origin status is not 200
            NotAnImageError: If the content type is not image/*
            PayloadTooLargeError: If the body exceeds max_source_bytes
        """
        url = self.settings.asset_url(asset_path)
        limit = self.settings.max_source_bytes
        logger.debug(f"Requesting {url}")

        try:
            async with httpx.AsyncClient(
                transport=self.transport,
                headers=self.headers,
                timeout=self.settings.fetch_timeout,
                follow_redirects=False,
            ) as client:
                async with client.stream("GET", url) as response:
                    content_type = response.headers.get("content-type", "")

                    if response.status_code != 200:
                        raise UpstreamStatusError(response.status_code, url)

                    if not is_image_mime(content_type):
                        raise NotAnImageError(content_type, url)

                    declared = response.headers.get("content-length")
                    if declared is not None and declared.isdigit() and int(declared) > limit:
                        raise PayloadTooLargeError(int(declared), limit)

                    chunks: list[bytes] = []
                    received = 0
                    async for chunk in response.aiter_bytes():
                        received += len(chunk)
                        if received > limit:
                            raise PayloadTooLargeError(received, limit)
                        chunks.append(chunk)

                    logger.debug(
                        f"Fetched {url} - status {response.status_code}, "
                        + f"content-type {content_type}, bytes {received}"
                    )
                    return FetchedImage(
                        url=url,
                        status_code=response.status_code,
                        content_type=content_type,
                        content=b"".join(chunks),
                    )

        except httpx.TimeoutException as exc:
            logger.error(f"Timed out fetching {url}: {exc}")
            raise FetchError(f"Timed out fetching {url}") from exc
        except httpx.HTTPError as exc:
            logger.error(f"Image fetch error for {url}: {exc}")
            raise FetchError() from exc
