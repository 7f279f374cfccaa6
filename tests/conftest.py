"""Test configuration and fixtures for image_scaler.

This module provides:
- Synthetic source images generated with PIL
- A stub origin served through httpx.MockTransport
- Scaler, FastAPI client and settings fixtures wired to the stub origin
"""

from collections.abc import Callable
from io import BytesIO

import httpx
import pytest
from fastapi.testclient import TestClient
from PIL import Image, ImageDraw

from image_scaler.common.fetcher import OriginFetcher
from image_scaler.config import ScalerSettings
from image_scaler.scaler import ImageScaler
from image_scaler.shells.server import create_app

ORIGIN = "https://origin.test"

ImageFactory = Callable[..., bytes]


# ============================================================================
# Image Fixtures
# ============================================================================


def make_image_bytes(
    width: int = 900,
    height: int = 600,
    fmt: str = "JPEG",
    mode: str = "RGB",
    **save_kwargs: object,
) -> bytes:
    """Generate a patterned test image and return the encoded bytes.

    The pattern is drawn in RGB and converted to mode before saving. I;16
    sources are a flat 16-bit gray.
    """
    if mode == "I;16":
        img = Image.new("I;16", (width, height), 40000)
    else:
        img = Image.new("RGB", (width, height), color=(73, 109, 137))
        draw = ImageDraw.Draw(img)
        for i in range(0, width, 50):
            draw.line([(i, 0), (i, height)], fill=(255, 255, 255), width=2)
        for i in range(0, height, 50):
            draw.line([(0, i), (width, i)], fill=(255, 255, 255), width=2)
        draw.ellipse(
            [width // 3, height // 3, 2 * width // 3, 2 * height // 3],
            fill=(200, 100, 100),
        )
        if mode != "RGB":
            img = img.convert(mode)

    buffer = BytesIO()
    img.save(buffer, fmt, **save_kwargs)
    return buffer.getvalue()


@pytest.fixture
def image_factory() -> ImageFactory:
    """Provide the synthetic image generator."""
    return make_image_bytes


@pytest.fixture
def sample_jpeg() -> bytes:
    """900x600 JPEG, already at the 3:2 target ratio."""
    return make_image_bytes(900, 600)


# ============================================================================
# Origin Stub
# ============================================================================


class OriginStub:
    """In-memory origin for httpx.MockTransport.

    Serves registered paths and records every request it receives.
    """

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, dict[str, str], bytes]] = {}
        self.requests: list[httpx.Request] = []
        self.error: Exception | None = None

    def add(
        self,
        path: str,
        content: bytes,
        content_type: str = "image/jpeg",
        status_code: int = 200,
        headers: dict[str, str] | None = None,
    ) -> None:
        all_headers = {"content-type": content_type}
        all_headers.update(headers or {})
        self.routes[path] = (status_code, all_headers, content)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, headers={"content-type": "text/html"}, content=b"nope")
        status_code, headers, content = route
        return httpx.Response(status_code, headers=headers, content=content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def origin() -> OriginStub:
    return OriginStub()


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def settings() -> ScalerSettings:
    return ScalerSettings(
        base_url=ORIGIN,
        auth_token="secret-token",
        max_source_bytes=2 * 1024 * 1024,
    )


@pytest.fixture
def fetcher(settings: ScalerSettings, origin: OriginStub) -> OriginFetcher:
    return OriginFetcher(settings, transport=origin.transport)


@pytest.fixture
def scaler(fetcher: OriginFetcher) -> ImageScaler:
    return ImageScaler(fetcher)


@pytest.fixture
def api_client(settings: ScalerSettings, fetcher: OriginFetcher) -> TestClient:
    """FastAPI client for the persistent server shell."""
    return TestClient(create_app(settings, fetcher=fetcher))
