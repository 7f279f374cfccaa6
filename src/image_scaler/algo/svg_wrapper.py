"""SVG wrapper documents embedding a base64 JPEG placeholder."""

import base64

from ..common.schemas import CSS_BLUR_CANVAS_WIDTH, TARGET_RATIO
from .plan_builder import round_half_up

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

# Gaussian blur plus a discrete alpha pass so blurred edges stay opaque.
BLUR_STD_DEVIATION = "20 20"


def jpeg_data_uri(jpeg_bytes: bytes) -> str:
    encoded = base64.b64encode(jpeg_bytes).decode("ascii")
    return f"data:image/jpeg;base64,{encoded}"


def plain_svg_document(jpeg_bytes: bytes, width: int) -> str:
    """Wrap an already blurred JPEG in an SVG sized to the target width."""
    height = round_half_up(width / TARGET_RATIO)
    return (
        f'<svg width="{width}" height="{height}" xmlns="{SVG_NS}">'
        f'<image href="{jpeg_data_uri(jpeg_bytes)}" width="100%" height="100%"/>'
        "</svg>"
    )


def css_blur_svg_document(jpeg_bytes: bytes) -> str:
    """
    Wrap a sharp JPEG in an SVG that declares and applies a blur filter.

    The canvas is always CSS_BLUR_CANVAS_WIDTH wide, independent of the
    tier width the JPEG was resized to.
    """
    width = CSS_BLUR_CANVAS_WIDTH
    height = round_half_up(width / TARGET_RATIO)
    return (
        f'<svg xmlns="{SVG_NS}" xmlns:xlink="{XLINK_NS}" '
        f'width="{width}" height="{height}" viewBox="0 0 {width} {height}" version="1.1">'
        '<filter id="blur" filterUnits="userSpaceOnUse" color-interpolation-filters="sRGB">'
        f'<feGaussianBlur stdDeviation="{BLUR_STD_DEVIATION}" edgeMode="duplicate"/>'
        "<feComponentTransfer>"
        '<feFuncA type="discrete" tableValues="1 1"/>'
        "</feComponentTransfer>"
        "</filter>"
        f'<image filter="url(#blur)" xlink:href="{jpeg_data_uri(jpeg_bytes)}" '
        'x="0" y="0" width="100%" height="100%"/>'
        "</svg>"
    )
