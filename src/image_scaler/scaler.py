"""Request pipeline: fetch, decode, plan, render."""

import asyncio

from loguru import logger

from .algo.plan_builder import build_plan
from .algo.render_executor import render
from .common.codec import ImageCodec, PillowCodec
from .common.errors import ScalerError
from .common.fetcher import OriginFetcher
from .common.schemas import RenderedOutput, RequestParams
from .shells.responses import ShellResponse
from .utils.profiling import timed

FAVICON_PATH = "/favicon.ico"


def is_favicon(asset_path: str) -> bool:
    return "/" + asset_path.lstrip("/") == FAVICON_PATH


def reduction_percent(original_bytes: int, output_bytes: int) -> float:
    if original_bytes <= 0:
        return 0.0
    return (original_bytes - output_bytes) / original_bytes * 100


class ImageScaler:
    """One scaler core shared by every deployment shell.

    Holds no per-request state, so a single instance serves concurrent
    requests.

    Example:
        settings = get_settings()
        scaler = ImageScaler(OriginFetcher(settings))
        response = await scaler.handle("/images/castle.jpg", size="sm")
    """

    def __init__(self, fetcher: OriginFetcher, codec: ImageCodec | None = None):
        self.fetcher: OriginFetcher = fetcher
        self.codec: ImageCodec = codec if codec is not None else PillowCodec()

    def transform(self, data: bytes, params: RequestParams) -> RenderedOutput:
        """Decode source bytes and render them per params (CPU bound)."""
        meta, image = self.codec.decode(data)
        try:
            logger.debug(f"Original size: {meta.width}x{meta.height}, bytes: {len(data)}")

            plan = build_plan(meta, params)
            if plan.crop is None:
                logger.debug(f"Ratio {meta.ratio:.4f} within tolerance, no cropping required")
            else:
                logger.debug(f"Ratio {meta.ratio:.4f} cropping to {plan.crop.as_box()}")
            logger.debug(
                f"Rendering {plan.output_mode} at width {plan.target_width}, "
                + f"quality {plan.quality}"
            )

            return render(image, plan, self.codec)
        finally:
            image.close()

    @timed("request")
    async def process(self, asset_path: str, params: RequestParams) -> RenderedOutput:
        """Fetch and render one asset.

        Raises:
            ScalerError: Any fetch or codec failure, never retried
        """
        fetched = await self.fetcher.fetch(asset_path)
        logger.debug(f"Processing {fetched.url} for resize to {params.size_tier}")

        output = await asyncio.to_thread(self.transform, fetched.content, params)

        logger.debug(
            f"Processed {fetched.url}: bytes {len(output.payload)} "
            + f"({reduction_percent(len(fetched.content), len(output.payload)):.2f}% reduction)"
        )
        return output

    async def handle(
        self,
        asset_path: str,
        size: str | None = None,
        quality: str | None = None,
        svg_method: str | None = None,
    ) -> ShellResponse:
        """Serve one request and never raise.

        The favicon path returns 204 without touching the fetcher or codec.
        """
        if is_favicon(asset_path):
            logger.debug(f"Rejected request for: {asset_path}")
            return ShellResponse.no_content()

        params = RequestParams.from_query(size=size, quality=quality, svg_method=svg_method)

        try:
            output = await self.process(asset_path, params)
        except ScalerError as exc:
            logger.error(f"Image processing error for {asset_path}: {exc}")
            return ShellResponse.from_error(exc)
        except Exception as exc:
            logger.exception(f"Unexpected failure for {asset_path}: {exc}")
            return ShellResponse.from_error(exc)

        logger.debug(f"Serving {asset_path}?size={params.size_tier}")
        return ShellResponse.from_output(output)
