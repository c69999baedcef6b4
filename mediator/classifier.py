"""Decide whether an upstream payload is an HLS manifest or opaque media."""
from __future__ import annotations

from enum import Enum
from urllib.parse import urlsplit

MANIFEST_CONTENT_TYPES = ("application/vnd.apple.mpegurl", "application/x-mpegurl")
MANIFEST_EXTENSION = ".m3u8"


class MediaKind(str, Enum):
    MANIFEST = "manifest"
    OPAQUE = "opaque"


def classify(content_type: str | None, request_url: str) -> MediaKind:
    """Classify by declared content type, falling back to the URL path suffix.

    Many origins serve playlists as ``text/plain`` or ``application/octet-stream``,
    so a ``.m3u8`` path is treated as a manifest whatever the header says.
    """

    declared = (content_type or "").lower()
    if any(marker in declared for marker in MANIFEST_CONTENT_TYPES):
        return MediaKind.MANIFEST
    if urlsplit(request_url).path.lower().endswith(MANIFEST_EXTENSION):
        return MediaKind.MANIFEST
    return MediaKind.OPAQUE
