"""Execute a rendering plan against a decoded image."""

from collections.abc import Callable, Mapping
from types import MappingProxyType

from loguru import logger
from PIL import Image

from ..common.codec import EncodeOptions, ImageCodec
from ..common.schemas import (
    BLUR_RADIUS,
    EncodingHint,
    OutputMode,
    RenderedOutput,
    RenderingPlan,
)
from ..utils.profiling import timed
from .svg_wrapper import css_blur_svg_document, plain_svg_document

SVG_CONTENT_TYPE = "image/svg+xml"
WEBP_CONTENT_TYPE = "image/webp"

ModeHandler = Callable[[Image.Image, RenderingPlan, ImageCodec], RenderedOutput]


def _placeholder_jpeg_options(plan: RenderingPlan) -> EncodeOptions:
    return EncodeOptions(quality=plan.quality, optimize=True, progressive=True)


def _render_webp(image: Image.Image, plan: RenderingPlan, codec: ImageCodec) -> RenderedOutput:
    payload = codec.encode(image, "webp", EncodeOptions(quality=plan.quality))
    return RenderedOutput(
        payload=payload,
        content_type=WEBP_CONTENT_TYPE,
        encoding_hint=EncodingHint.RAW,
    )


def _render_baked_blur_svg(
    image: Image.Image, plan: RenderingPlan, codec: ImageCodec
) -> RenderedOutput:
    jpeg = codec.encode(image, "jpeg", _placeholder_jpeg_options(plan))
    document = plain_svg_document(jpeg, plan.target_width)
    return RenderedOutput(
        payload=document.encode("utf-8"),
        content_type=SVG_CONTENT_TYPE,
        encoding_hint=EncodingHint.BASE64,
    )


def _render_css_blur_svg(
    image: Image.Image, plan: RenderingPlan, codec: ImageCodec
) -> RenderedOutput:
    logger.debug("Codec skips the blur, the SVG filter applies it")
    jpeg = codec.encode(image, "jpeg", _placeholder_jpeg_options(plan))
    document = css_blur_svg_document(jpeg)
    return RenderedOutput(
        payload=document.encode("utf-8"),
        content_type=SVG_CONTENT_TYPE,
        encoding_hint=EncodingHint.BASE64,
    )


MODE_HANDLERS: Mapping[OutputMode, ModeHandler] = MappingProxyType(
    {
        OutputMode.WEBP: _render_webp,
        OutputMode.BAKED_BLUR_SVG: _render_baked_blur_svg,
        OutputMode.CSS_BLUR_SVG: _render_css_blur_svg,
    }
)


@timed("render")
def render(image: Image.Image, plan: RenderingPlan, codec: ImageCodec) -> RenderedOutput:
    """
    Crop, resize and package an image according to plan.

    Args:
        image: Decoded source image
        plan: Plan produced by build_plan()
        codec: Codec performing the pixel operations

    Returns:
        RenderedOutput with payload, content type and encoding hint

    Raises:
        CodecError: If any codec step fails
    """
    if plan.crop is not None:
        image = codec.extract(image, plan.crop)

    resized = codec.resize(image, plan.target_width)

    if plan.apply_blur:
        logger.debug(f"Codec blurs the placeholder (radius {BLUR_RADIUS})")
        resized = codec.blur(resized, BLUR_RADIUS)

    return MODE_HANDLERS[plan.output_mode](resized, plan, codec)
