"""
MIME type detection and utilities
"""
from __future__ import annotations

import logging
import mimetypes
from enum import Enum
from pathlib import Path

import filetype

logger = logging.getLogger(__name__)


class MediaKind(str, Enum):
    """Media type classification."""
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    UNKNOWN = "unknown"


# MIME to extension mapping
EXT_BY_MIME = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
    "image/bmp": ".bmp",
    "audio/mpeg": ".mp3",
    "audio/mp3": ".mp3",
    "audio/ogg": ".ogg",
    "audio/wav": ".wav",
    "audio/x-m4a": ".m4a",
    "audio/mp4": ".m4a",
    "video/mp4": ".mp4",
    "video/webm": ".webm",
    "video/quicktime": ".mov",
    "video/x-matroska": ".mkv",
}

# Extension to MIME mapping
MIME_BY_EXT = {ext: mime for mime, ext in EXT_BY_MIME.items()}
MIME_BY_EXT[".jpeg"] = "image/jpeg"
MIME_BY_EXT[".mp3"] = "audio/mpeg"


def normalize_header_mime(mime: str | None) -> str | None:
    """
    Normalize a MIME string taken from a header or a data URL prefix.

    Args:
        mime: Raw MIME type, possibly with parameters

    Returns:
        Lowercased MIME type without parameters, or None
    """
    if not mime:
        return None
    cleaned = mime.split(";")[0].strip().lower()
    return cleaned if cleaned else None


def extension_for_mime(mime: str) -> str | None:
    """Get file extension (with dot) for a MIME type."""
    return EXT_BY_MIME.get(mime.lower().strip())


def mime_for_extension(ext: str) -> str | None:
    """
    Get MIME type for file extension.

    Args:
        ext: File extension (with or without dot)

    Returns:
        MIME type or None
    """
    if not ext.startswith("."):
        ext = f".{ext}"

    ext_lower = ext.lower()
    if ext_lower in MIME_BY_EXT:
        return MIME_BY_EXT[ext_lower]

    mime, _ = mimetypes.guess_type(f"file{ext}")
    return mime


def detect_mime(file_path: Path | str | None = None, buffer: bytes | None = None) -> str | None:
    """
    Detect MIME type from file contents, falling back to the file extension.

    Args:
        file_path: File path
        buffer: File buffer

    Returns:
        MIME type or None
    """
    if buffer:
        kind = filetype.guess(buffer)
        if kind:
            return kind.mime
        logger.debug("filetype could not sniff buffer, using extension")
    if file_path:
        path_obj = Path(file_path) if isinstance(file_path, str) else file_path
        if path_obj.suffix:
            return mime_for_extension(path_obj.suffix)
    return None


def media_kind_from_mime(mime: str | None) -> MediaKind:
    """Get media kind from MIME type."""
    if not mime:
        return MediaKind.UNKNOWN

    mime_lower = mime.lower().strip()
    if mime_lower.startswith("image/"):
        return MediaKind.IMAGE
    if mime_lower.startswith("audio/"):
        return MediaKind.AUDIO
    if mime_lower.startswith("video/"):
        return MediaKind.VIDEO
    return MediaKind.UNKNOWN
