"""Image codec collaborator backed by Pillow."""

import math
from io import BytesIO
from typing import Protocol

from loguru import logger
from PIL import Image, ImageFilter, UnidentifiedImageError
from pydantic import BaseModel, Field

from ..utils.profiling import timed
from .errors import CodecError
from .schemas import CropRectangle, SourceImageMeta

PIL_ERRORS = (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError)
WORKING_MODES = ("RGB", "RGBA", "L")


class EncodeOptions(BaseModel):
    """Encoder settings passed through to Pillow's save()."""

    quality: int = Field(ge=1, le=100)
    optimize: bool = False
    progressive: bool = False


def get_pil_format(format_str: str) -> str:
    """Convert format string to PIL format name."""
    format_map = {
        "jpg": "JPEG",
        "jpeg": "JPEG",
        "webp": "WEBP",
    }
    return format_map.get(format_str.lower(), format_str.upper())


def normalize_mode(img: Image.Image) -> Image.Image:
    """Convert img to a mode that LANCZOS resampling and blur filters accept.

    Palette, bilevel and CMYK sources become RGB, or RGBA when they carry
    transparency. 16-bit integer grayscale becomes L. RGB, RGBA and L images are
    returned unchanged.
    """
    if img.mode in WORKING_MODES:
        return img

    if img.mode == "I" or img.mode.startswith("I;16"):
        # 16-bit samples scaled down to 8 bits
        converted = img.convert("I").point(lambda v: v * (1 / 256)).convert("L")
    else:
        converted = img.convert("RGBA" if img.has_transparency_data else "RGB")

    logger.debug(f"Converted source from mode {img.mode} to {converted.mode}")
    img.close()
    return converted


class ImageCodec(Protocol):
    """Pixel-level operations the render executor relies on."""

    def decode(self, data: bytes) -> tuple[SourceImageMeta, Image.Image]: ...

    def extract(self, image: Image.Image, crop: CropRectangle) -> Image.Image: ...

    def resize(self, image: Image.Image, width: int) -> Image.Image: ...

    def blur(self, image: Image.Image, radius: float) -> Image.Image: ...

    def encode(self, image: Image.Image, fmt: str, options: EncodeOptions) -> bytes: ...


class PillowCodec:
    """ImageCodec implementation on top of Pillow.

    Every Pillow failure surfaces as CodecError.
    """

    @timed("decode")
    def decode(self, data: bytes) -> tuple[SourceImageMeta, Image.Image]:
        try:
            img = Image.open(BytesIO(data))
            img.load()
            img = normalize_mode(img)
        except PIL_ERRORS as exc:
            raise CodecError(f"Could not decode source image: {exc}") from exc

        width, height = img.size
        if width <= 0 or height <= 0:
            raise CodecError(f"Source image has degenerate size {width}x{height}")

        return SourceImageMeta(width=width, height=height), img

    def extract(self, image: Image.Image, crop: CropRectangle) -> Image.Image:
        width, height = image.size
        if crop.left + crop.width > width or crop.top + crop.height > height:
            raise CodecError(
                f"Crop {crop.as_box()} falls outside a {width}x{height} image"
            )
        try:
            return image.crop(crop.as_box())
        except PIL_ERRORS as exc:
            raise CodecError(f"Could not crop image: {exc}") from exc

    @timed("resize")
    def resize(self, image: Image.Image, width: int) -> Image.Image:
        original_width, original_height = image.size
        height = max(1, math.floor(width * original_height / original_width + 0.5))
        try:
            return image.resize((width, height), Image.Resampling.LANCZOS)
        except PIL_ERRORS as exc:
            raise CodecError(f"Could not resize image: {exc}") from exc

    def blur(self, image: Image.Image, radius: float) -> Image.Image:
        try:
            return image.filter(ImageFilter.GaussianBlur(radius=radius))
        except PIL_ERRORS as exc:
            raise CodecError(f"Could not blur image: {exc}") from exc

    @timed("encode")
    def encode(self, image: Image.Image, fmt: str, options: EncodeOptions) -> bytes:
        pil_format = get_pil_format(fmt)

        # JPEG does not support alpha channel
        if pil_format == "JPEG" and image.mode not in ("RGB", "L"):
            image = image.convert("RGB")

        save_kwargs: dict[str, object] = {"quality": options.quality}
        if options.optimize:
            save_kwargs["optimize"] = True
        if options.progressive:
            save_kwargs["progressive"] = True

        buffer = BytesIO()
        try:
            image.save(buffer, format=pil_format, **save_kwargs)
        except (KeyError, *PIL_ERRORS) as exc:
            raise CodecError(f"Could not encode image as {pil_format}: {exc}") from exc
        return buffer.getvalue()
