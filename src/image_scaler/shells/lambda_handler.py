"""Stateless invocation shell (AWS Lambda behind API Gateway)."""

import asyncio
from collections.abc import Mapping

from loguru import logger

from ..common.fetcher import OriginFetcher
from ..config import configure_logging, get_settings
from ..scaler import ImageScaler

_scaler: ImageScaler | None = None


def get_scaler() -> ImageScaler:
    """Get or create the scaler reused across warm invocations."""
    global _scaler
    if _scaler is None:
        settings = get_settings()
        configure_logging(settings)
        _scaler = ImageScaler(OriginFetcher(settings))
    return _scaler


def _event_path(event: Mapping[str, object]) -> str:
    path = event.get("rawPath") or event.get("path") or ""
    return str(path)


def _event_query(event: Mapping[str, object]) -> Mapping[str, str]:
    query = event.get("queryStringParameters")
    if not isinstance(query, Mapping):
        return {}
    return {str(k): str(v) for k, v in query.items() if v is not None}


async def handle_event(
    event: Mapping[str, object], scaler: ImageScaler | None = None
) -> dict[str, object]:
    """Serve one API Gateway event and return the proxy envelope."""
    scaler = scaler or get_scaler()
    query = _event_query(event)
    result = await scaler.handle(
        _event_path(event),
        size=query.get("size"),
        quality=query.get("quality"),
        svg_method=query.get("svgMethod"),
    )
    return result.to_lambda()


def handler(event: Mapping[str, object], context: object = None) -> dict[str, object]:
    """Lambda entry point."""
    _ = context
    logger.debug(f"Invocation for {_event_path(event)}")
    return asyncio.run(handle_event(event))
