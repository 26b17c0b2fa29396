"""Picture qualification for media URLs."""

from __future__ import annotations

import logging
import posixpath
from typing import Dict, Iterable, Optional, Tuple
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

SUPPORTED_IMAGE_FORMATS: Dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".avif": "image/avif",
    ".apng": "image/apng",
}


def media_type_for(url: str) -> Optional[str]:
    """Return the IANA media type implied by *url*'s file extension.

    Raises ``ValueError`` when *url* cannot be parsed.
    """
    path = urlparse(url).path
    ext = posixpath.splitext(path)[1].lower()
    media_type = SUPPORTED_IMAGE_FORMATS.get(ext)
    if media_type is None:
        logger.debug("Unsupported image extension %r for %s", ext, url)
    return media_type


def select_picture(urls: Iterable[str]) -> Optional[Tuple[str, str]]:
    """Return ``(url, media_type)`` for the first supported image in *urls*."""
    for url in urls:
        if not url or not url.strip():
            continue
        try:
            media_type = media_type_for(url)
        except ValueError as exc:
            logger.warning("Failed to parse image URL %s: %s", url, exc)
            continue
        if media_type:
            return url, media_type
    return None

__all__ = ["SUPPORTED_IMAGE_FORMATS", "media_type_for", "select_picture"]
