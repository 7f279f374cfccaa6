"""Pure rendering plan computation (no I/O)."""

import math

from ..common.errors import CodecError
from ..common.schemas import (
    RATIO_TOLERANCE,
    SIZE_TIER_WIDTHS,
    SVG_QUALITY,
    TARGET_RATIO,
    CropRectangle,
    OutputMode,
    RenderingPlan,
    RenderMethod,
    RequestParams,
    SizeTier,
    SourceImageMeta,
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return math.floor(value + 0.5)


def compute_crop(meta: SourceImageMeta) -> CropRectangle | None:
    """
    Centered crop that brings the source to the target ratio.

    Sources within RATIO_TOLERANCE of the target are left uncropped.

    Raises:
        CodecError: If the computed crop has a non-positive dimension
    """
    current_ratio = meta.width / meta.height
    if abs(current_ratio - TARGET_RATIO) <= RATIO_TOLERANCE:
        return None

    if current_ratio > TARGET_RATIO:
        # too wide
        new_width = round_half_up(meta.height * TARGET_RATIO)
        left, top, width, height = (meta.width - new_width) // 2, 0, new_width, meta.height
    else:
        # too tall
        new_height = round_half_up(meta.width / TARGET_RATIO)
        left, top, width, height = 0, (meta.height - new_height) // 2, meta.width, new_height

    if width <= 0 or height <= 0:
        raise CodecError(
            f"Cannot crop {meta.width}x{meta.height} source to ratio {TARGET_RATIO}"
        )

    return CropRectangle(left=left, top=top, width=width, height=height)


def resolve_target_width(tier: SizeTier | str | None) -> int:
    """Tier width, with md as the fallback for anything unrecognized."""
    if not isinstance(tier, SizeTier):
        tier = SizeTier.parse(tier)
    return SIZE_TIER_WIDTHS[tier]


def select_output_mode(tier: SizeTier, method: RenderMethod) -> OutputMode:
    if tier != SizeTier.XXS:
        return OutputMode.WEBP
    if method == RenderMethod.CSS:
        return OutputMode.CSS_BLUR_SVG
    return OutputMode.BAKED_BLUR_SVG


def build_plan(meta: SourceImageMeta, params: RequestParams) -> RenderingPlan:
    """
    Turn source dimensions and request params into a rendering plan.

    Args:
        meta: Decoded source dimensions
        params: Defaulted request parameters

    Returns:
        Immutable RenderingPlan
    """
    output_mode = select_output_mode(params.size_tier, params.render_method)
    quality = params.quality if output_mode == OutputMode.WEBP else SVG_QUALITY

    return RenderingPlan(
        crop=compute_crop(meta),
        target_width=resolve_target_width(params.size_tier),
        output_mode=output_mode,
        quality=quality,
        apply_blur=output_mode == OutputMode.BAKED_BLUR_SVG,
    )
