IMAGE_MIME_PREFIX = "image/"


def is_image_mime(file_type: str | None) -> bool:
    """True when a Content-Type header names an image/* type."""
    if not file_type:
        return False
    return file_type.strip().lower().startswith(IMAGE_MIME_PREFIX)
