"""Image MIME types accepted by the image scan endpoint."""

from __future__ import annotations

IMAGE_MIME_TYPES = frozenset(
    {
        "image/png",
        "image/jpeg",
        "image/jpg",
        "image/gif",
        "image/webp",
    }
)


def is_image_mime_type(mime_type: str | None) -> bool:
    """Return True if *mime_type* names an image format the scanner accepts."""
    if not mime_type:
        return False
    return mime_type.strip().lower() in IMAGE_MIME_TYPES
