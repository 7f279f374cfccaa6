"""Unit tests for the rendering plan builder.

Covers the crop policy, tier widths, output mode selection and quality
override.
"""

import math

import pytest

from image_scaler.algo.plan_builder import (
    build_plan,
    compute_crop,
    resolve_target_width,
    round_half_up,
    select_output_mode,
)
from image_scaler.common.errors import CodecError
from image_scaler.common.schemas import (
    SIZE_TIER_WIDTHS,
    OutputMode,
    RenderMethod,
    RequestParams,
    SizeTier,
    SourceImageMeta,
)

# ============================================================================
# ROUNDING
# ============================================================================


def test_round_half_up_rounds_halves_up():
    """Test .5 rounds up instead of to even."""
    assert round_half_up(0.5) == 1
    assert round_half_up(1.5) == 2
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2


# ============================================================================
# CROP TESTS
# ============================================================================


@pytest.mark.parametrize(
    ("width", "height"),
    [(900, 600), (1500, 1000), (3000, 2000), (1509, 1000), (1491, 1000), (3, 2)],
)
def test_compute_crop_within_tolerance_returns_none(width: int, height: int):
    """Test sources within 0.01 of 3:2 are passed through uncropped."""
    assert abs(width / height - 1.5) <= 0.01
    assert compute_crop(SourceImageMeta(width=width, height=height)) is None


@pytest.mark.parametrize(
    ("width", "height"),
    [(1920, 1080), (2000, 1000), (1000, 100), (1521, 1000), (7, 3), (101, 1)],
)
def test_compute_crop_too_wide_is_horizontally_centered(width: int, height: int):
    """Test wide sources keep full height and lose equal margins left and right."""
    crop = compute_crop(SourceImageMeta(width=width, height=height))

    assert crop is not None
    assert crop.top == 0
    assert crop.height == height
    assert crop.width == round_half_up(height * 1.5)
    assert crop.left == math.floor((width - crop.width) / 2)
    assert crop.left + crop.width <= width


@pytest.mark.parametrize(
    ("width", "height"),
    [(1080, 1920), (1000, 1000), (800, 600), (1479, 1000), (1, 100), (5, 4)],
)
def test_compute_crop_too_tall_is_vertically_centered(width: int, height: int):
    """Test tall sources keep full width and lose equal margins top and bottom."""
    crop = compute_crop(SourceImageMeta(width=width, height=height))

    assert crop is not None
    assert crop.left == 0
    assert crop.width == width
    assert crop.height == round_half_up(width / 1.5)
    assert crop.top == math.floor((height - crop.height) / 2)
    assert crop.top + crop.height <= height


def test_compute_crop_exact_values():
    """Test a 16:9 HD frame crops to 1620x1080 at x=150."""
    crop = compute_crop(SourceImageMeta(width=1920, height=1080))

    assert crop is not None
    assert crop.as_box() == (150, 0, 1770, 1080)


def test_compute_crop_degenerate_raises(monkeypatch: pytest.MonkeyPatch):
    """Test a non-positive crop dimension is a CodecError, not a fallback."""
    from image_scaler.algo import plan_builder

    monkeypatch.setattr(plan_builder, "round_half_up", lambda _value: 0)

    with pytest.raises(CodecError):
        _ = plan_builder.compute_crop(SourceImageMeta(width=1000, height=100))


# ============================================================================
# TARGET WIDTH TESTS
# ============================================================================


@pytest.mark.parametrize("tier", list(SizeTier))
def test_resolve_target_width_known_tiers(tier: SizeTier):
    """Test every tier maps to its table width."""
    assert resolve_target_width(tier) == SIZE_TIER_WIDTHS[tier]
    assert resolve_target_width(tier.value) == SIZE_TIER_WIDTHS[tier]


def test_tier_table_values():
    """Test the fixed tier table."""
    assert dict(SIZE_TIER_WIDTHS) == {
        SizeTier.XXS: 48,
        SizeTier.XS: 300,
        SizeTier.SM: 600,
        SizeTier.MD: 1200,
        SizeTier.LG: 2048,
        SizeTier.XL: 2048,
    }


@pytest.mark.parametrize("tier", ["huge", "", "MD", "xxxs", None])
def test_resolve_target_width_unknown_falls_back_to_md(tier: str | None):
    """Test unrecognized tiers use the md width."""
    assert resolve_target_width(tier) == 1200


# ============================================================================
# OUTPUT MODE TESTS
# ============================================================================


def test_select_output_mode_xxs_css():
    assert select_output_mode(SizeTier.XXS, RenderMethod.CSS) == OutputMode.CSS_BLUR_SVG


def test_select_output_mode_xxs_baked():
    assert select_output_mode(SizeTier.XXS, RenderMethod.BAKED) == OutputMode.BAKED_BLUR_SVG


@pytest.mark.parametrize("tier", [t for t in SizeTier if t != SizeTier.XXS])
@pytest.mark.parametrize("method", list(RenderMethod))
def test_select_output_mode_other_tiers_are_webp(tier: SizeTier, method: RenderMethod):
    """Test every non-xxs tier renders WEBP whatever the render method."""
    assert select_output_mode(tier, method) == OutputMode.WEBP


# ============================================================================
# BUILD PLAN TESTS
# ============================================================================


def test_build_plan_webp_uses_requested_quality():
    """Test WEBP plans carry the caller quality and no blur."""
    plan = build_plan(
        SourceImageMeta(width=1920, height=1080),
        RequestParams(size_tier=SizeTier.SM, quality=82),
    )

    assert plan.output_mode == OutputMode.WEBP
    assert plan.target_width == 600
    assert plan.quality == 82
    assert plan.apply_blur is False
    assert plan.crop is not None


def test_build_plan_css_blur_overrides_quality():
    """Test CSS blur plans force quality 50 and leave blurring to the SVG."""
    plan = build_plan(
        SourceImageMeta(width=900, height=600),
        RequestParams(size_tier=SizeTier.XXS, quality=95, render_method=RenderMethod.CSS),
    )

    assert plan.output_mode == OutputMode.CSS_BLUR_SVG
    assert plan.target_width == 48
    assert plan.quality == 50
    assert plan.apply_blur is False
    assert plan.crop is None


def test_build_plan_baked_blur_applies_blur():
    """Test baked blur plans force quality 50 and blur in the codec."""
    plan = build_plan(
        SourceImageMeta(width=900, height=600),
        RequestParams(size_tier=SizeTier.XXS, quality=95, render_method=RenderMethod.BAKED),
    )

    assert plan.output_mode == OutputMode.BAKED_BLUR_SVG
    assert plan.quality == 50
    assert plan.apply_blur is True


def test_build_plan_is_deterministic():
    meta = SourceImageMeta(width=1234, height=567)
    params = RequestParams.from_query(size="lg", quality="70")

    assert build_plan(meta, params) == build_plan(meta, params)
