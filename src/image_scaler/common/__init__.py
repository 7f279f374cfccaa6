"""Common module - schemas, errors and the fetch/codec collaborators."""

from .codec import EncodeOptions, ImageCodec, PillowCodec
from .errors import ScalerError
from .fetcher import FetchedImage, OriginFetcher
from .schemas import RenderedOutput, RenderingPlan, RequestParams, SourceImageMeta

__all__ = [
    "EncodeOptions",
    "FetchedImage",
    "ImageCodec",
    "OriginFetcher",
    "PillowCodec",
    "RenderedOutput",
    "RenderingPlan",
    "RequestParams",
    "ScalerError",
    "SourceImageMeta",
]
