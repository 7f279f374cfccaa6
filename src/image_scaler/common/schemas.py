"""Pydantic schemas for request parameters, rendering plans and outputs."""

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

# ─────────────────────────────────────────────────────────────
# Fixed policy constants
# ─────────────────────────────────────────────────────────────

TARGET_RATIO = 3 / 2
RATIO_TOLERANCE = 0.01

DEFAULT_QUALITY = 60
SVG_QUALITY = 50
BLUR_RADIUS = 25
CSS_BLUR_CANVAS_WIDTH = 1200


class SizeTier(StrEnum):
    XXS = "xxs"
    XS = "xs"
    SM = "sm"
    MD = "md"
    LG = "lg"
    XL = "xl"

    @classmethod
    def parse(cls, value: str | None) -> "SizeTier":
        """Return the tier named by value, falling back to md."""
        try:
            return cls(value)
        except ValueError:
            return cls.MD


SIZE_TIER_WIDTHS: Mapping[SizeTier, int] = MappingProxyType(
    {
        SizeTier.XXS: 48,
        SizeTier.XS: 300,
        SizeTier.SM: 600,
        SizeTier.MD: 1200,
        SizeTier.LG: 2048,
        SizeTier.XL: 2048,
    }
)


class RenderMethod(StrEnum):
    """Where the xxs placeholder blur is performed."""

    CSS = "css"
    BAKED = "baked"

    @classmethod
    def parse(cls, value: str | None) -> "RenderMethod":
        if not value or value == cls.CSS:
            return cls.CSS
        return cls.BAKED


class OutputMode(StrEnum):
    WEBP = "WEBP"
    BAKED_BLUR_SVG = "BAKED_BLUR_SVG"
    CSS_BLUR_SVG = "CSS_BLUR_SVG"


class EncodingHint(StrEnum):
    """How a payload travels through a text-only transport.

    raw: binary bytes, must be base64-encoded by stateless shells.
    base64: text document with the image already base64-embedded.
    """

    RAW = "raw"
    BASE64 = "base64"


# ─────────────────────────────────────────────────────────────
# Request side
# ─────────────────────────────────────────────────────────────


class SourceImageMeta(BaseModel):
    """Dimensions of the decoded source image."""

    width: int = Field(gt=0)
    height: int = Field(gt=0)

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    @property
    def ratio(self) -> float:
        return self.width / self.height


class RequestParams(BaseModel):
    """Caller parameters after defaulting."""

    size_tier: SizeTier = SizeTier.MD
    quality: int = Field(default=DEFAULT_QUALITY, ge=1, le=100)
    render_method: RenderMethod = RenderMethod.CSS

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    @classmethod
    def from_query(
        cls,
        size: str | None = None,
        quality: str | None = None,
        svg_method: str | None = None,
    ) -> "RequestParams":
        """Build params from raw query-string values.

        Unknown sizes fall back to md, unusable qualities to the default,
        and any svgMethod other than "css" selects the baked blur.
        """
        return cls(
            size_tier=SizeTier.parse(size),
            quality=_parse_quality(quality),
            render_method=RenderMethod.parse(svg_method),
        )


def _parse_quality(value: str | None) -> int:
    if value is None:
        return DEFAULT_QUALITY
    try:
        parsed = int(value.strip())
    except ValueError:
        return DEFAULT_QUALITY
    if not 1 <= parsed <= 100:
        return DEFAULT_QUALITY
    return parsed


# ─────────────────────────────────────────────────────────────
# Plan and output
# ─────────────────────────────────────────────────────────────


class CropRectangle(BaseModel):
    """Sub-region of the source image in pixel coordinates."""

    left: int = Field(ge=0)
    top: int = Field(ge=0)
    width: int = Field(gt=0)
    height: int = Field(gt=0)

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    def as_box(self) -> tuple[int, int, int, int]:
        """Return (left, top, right, bottom) as Pillow expects."""
        return (self.left, self.top, self.left + self.width, self.top + self.height)


class RenderingPlan(BaseModel):
    crop: CropRectangle | None = None
    target_width: int = Field(gt=0)
    output_mode: OutputMode
    quality: int = Field(ge=1, le=100)
    apply_blur: bool = False

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)


class RenderedOutput(BaseModel):
    """Final payload handed to a deployment shell."""

    payload: bytes
    content_type: str
    encoding_hint: EncodingHint

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)
