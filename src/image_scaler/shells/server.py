"""Persistent server shell (FastAPI + uvicorn)."""

from typing import Annotated

from fastapi import FastAPI, Query, Request, Response
from loguru import logger

from .. import __version__
from ..common.codec import ImageCodec
from ..common.fetcher import OriginFetcher
from ..config import ScalerSettings, configure_logging, get_settings
from ..scaler import FAVICON_PATH, ImageScaler
from .responses import ShellResponse


def _to_response(result: ShellResponse) -> Response:
    return Response(
        content=result.body,
        status_code=result.status_code,
        media_type=result.content_type,
    )


def create_app(
    settings: ScalerSettings,
    fetcher: OriginFetcher | None = None,
    codec: ImageCodec | None = None,
) -> FastAPI:
    """Create the scaler app with injected collaborators.

    Args:
        settings: Service settings
        fetcher: Origin fetcher, built from settings when omitted
        codec: Image codec, Pillow when omitted

    Returns:
        FastAPI app serving every path as an asset on the origin
    """
    app = FastAPI(title="Image Scaler", version=__version__)
    app.state.scaler = ImageScaler(fetcher or OriginFetcher(settings), codec)

    @app.get(FAVICON_PATH, include_in_schema=False)
    async def favicon() -> Response:
        return _to_response(ShellResponse.no_content())

    @app.get("/{asset_path:path}")
    async def scale_image(
        request: Request,
        asset_path: str,
        size: Annotated[str | None, Query(description="Size tier (xxs..xl)")] = None,
        quality: Annotated[str | None, Query(description="WEBP quality (1-100)")] = None,
        svg_method: Annotated[
            str | None, Query(alias="svgMethod", description="css or baked blur for xxs")
        ] = None,
    ) -> Response:
        scaler: ImageScaler = request.app.state.scaler
        result = await scaler.handle(
            "/" + asset_path, size=size, quality=quality, svg_method=svg_method
        )
        return _to_response(result)

    # Mark functions as used (accessed via FastAPI decorator)
    _ = favicon
    _ = scale_image

    return app


def serve() -> None:
    """Run the persistent server with uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings)
    logger.info(
        f"Server running at http://{settings.host}:{settings.port}/ "
        + f"- scaling images from {settings.base_url}"
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
