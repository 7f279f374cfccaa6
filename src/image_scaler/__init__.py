"""image_scaler - on-demand crop, resize and placeholder rendering proxy."""

__version__ = "0.1.0"

from .algo.plan_builder import build_plan
from .algo.render_executor import render
from .common.codec import ImageCodec, PillowCodec
from .common.errors import (
    CodecError,
    FetchError,
    NotAnImageError,
    PayloadTooLargeError,
    ScalerError,
    UpstreamStatusError,
)
from .common.fetcher import OriginFetcher
from .common.schemas import (
    CropRectangle,
    EncodingHint,
    OutputMode,
    RenderedOutput,
    RenderingPlan,
    RenderMethod,
    RequestParams,
    SizeTier,
    SourceImageMeta,
)
from .config import ScalerSettings, get_settings
from .scaler import ImageScaler

__all__ = [
    "CodecError",
    "CropRectangle",
    "EncodingHint",
    "FetchError",
    "ImageCodec",
    "ImageScaler",
    "NotAnImageError",
    "OriginFetcher",
    "OutputMode",
    "PayloadTooLargeError",
    "PillowCodec",
    "RenderMethod",
    "RenderedOutput",
    "RenderingPlan",
    "RequestParams",
    "ScalerError",
    "ScalerSettings",
    "SizeTier",
    "SourceImageMeta",
    "UpstreamStatusError",
    "__version__",
    "build_plan",
    "get_settings",
    "render",
]
