"""Error taxonomy for a single scaling request.

Every error is terminal for its request and carries the HTTP status and the
short message a shell sends back to the caller.
"""

from typing_extensions import override


class ScalerError(Exception):
    """Base class for request-terminating failures."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None):
        self.message: str = message or self.default_message
        super().__init__(self.message)

    @property
    def response_message(self) -> str:
        """Text sent to the caller."""
        return self.message

    @override
    def __str__(self):
        return self.message


class FetchError(ScalerError):
    """Network failure or timeout reaching the origin."""

    status_code = 502
    default_message = "Image could not be fetched."


class UpstreamStatusError(ScalerError):
    """Origin answered with a status other than 200."""

    def __init__(self, origin_status: int, url: str):
        self.origin_status: int = origin_status
        self.status_code = origin_status if origin_status >= 400 else 502
        super().__init__(f"Remote server returned status {origin_status} for {url}")


class NotAnImageError(ScalerError):
    """Origin answered with a content type outside image/*."""

    status_code = 415

    def __init__(self, content_type: str, url: str):
        self.content_type: str = content_type
        super().__init__(f"Remote server returned content-type '{content_type}' for {url}")


class PayloadTooLargeError(ScalerError):
    status_code = 413

    def __init__(self, size: int, limit: int):
        self.size: int = size
        self.limit: int = limit
        super().__init__(f"Image too large: {size} bytes (limit {limit} bytes)")


class CodecError(ScalerError):
    """Decode, crop, resize or encode failure."""

    status_code = 500
    default_message = "Image could not be processed."

    @property
    @override
    def response_message(self) -> str:
        # codec detail stays in the logs
        return self.default_message
