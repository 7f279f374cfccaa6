"""Per-stage timing for the scaling pipeline.

Each stage (fetch, decode, resize, render, ...) logs one ``[PROFILE]`` line at
DEBUG level, so timings only appear with verbose logging enabled.
"""

import inspect
import time
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from functools import wraps
from typing import ParamSpec, TypeVar, cast

from loguru import logger

P = ParamSpec("P")
R = TypeVar("R")


@contextmanager
def stage_timer(stage: str) -> Iterator[None]:
    """Log how long the enclosed block took, even when it raises."""
    start_time = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(f"[PROFILE] {stage} took {elapsed_ms:.1f}ms")


def timed(stage: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Decorator factory timing a pipeline stage under a fixed label.

    Works for plain and coroutine functions.

    Usage:
        @timed("decode")
        def decode(self, data):
            ...
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        if inspect.iscoroutinefunction(func):
            coro_func = cast(Callable[P, Awaitable[object]], func)

            @wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> object:
                with stage_timer(stage):
                    return await coro_func(*args, **kwargs)

            return cast(Callable[P, R], async_wrapper)

        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            with stage_timer(stage):
                return func(*args, **kwargs)

        return wrapper

    return decorator
