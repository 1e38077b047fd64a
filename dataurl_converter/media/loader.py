"""
Media source loader

Loads media from files, http(s) URLs and data URLs so it can be handed to
the converter as a data URL.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

import httpx

from .data_url import data_url_media_type, decode_data_url, encode_as_data_url, is_data_url
from .mime import MediaKind, detect_mime, media_kind_from_mime, normalize_header_mime

logger = logging.getLogger(__name__)

FALLBACK_MIME = "application/octet-stream"


@dataclass
class MediaResult:
    """
    Media load result.
    Attributes:
        buffer: Media data
        content_type: MIME type
        kind: Media kind (image/audio/video)
        file_name: Original file name
    """
    buffer: bytes
    content_type: str | None
    kind: MediaKind
    file_name: str | None = None

    def to_data_url(self) -> str:
        return encode_as_data_url(self.buffer, self.content_type or FALLBACK_MIME)


class MediaLoader:
    """
    Media loader supporting:
    - Local files (file:// or absolute/relative paths)
    - HTTP/HTTPS URLs
    - Data URLs (data:video/mp4;base64,...)
    - Size limits
    """
    def __init__(self, max_bytes: int | None = None, allow_remote: bool = True, timeout: float = 30.0):
        self.max_bytes = max_bytes
        self.allow_remote = allow_remote
        self.timeout = timeout

    async def load(self, source: str) -> MediaResult:
        """
        Load media from source.

        Raises:
            ValueError: If source is invalid or not allowed
            FileNotFoundError: If file not found
            httpx.HTTPError: If HTTP request fails
        """
        source = source.strip()

        if is_data_url(source):
            return self._load_data_url(source)

        if source.startswith("http://") or source.startswith("https://"):
            if not self.allow_remote:
                raise ValueError("Remote URLs not allowed in this context")
            return await self._load_http_url(source)

        if source.startswith("file://"):
            source = source[7:]

        return self._load_file(source)

    def _check_size(self, buffer: bytes, what: str) -> None:
        if self.max_bytes and len(buffer) > self.max_bytes:
            raise ValueError(f"{what} exceeds size limit: {len(buffer)} > {self.max_bytes}")

    def _load_data_url(self, data_url: str) -> MediaResult:
        buffer = decode_data_url(data_url)
        self._check_size(buffer, "Data URL")
        mime_type = data_url_media_type(data_url)
        return MediaResult(buffer=buffer, content_type=mime_type, kind=media_kind_from_mime(mime_type))

    async def _load_http_url(self, url: str) -> MediaResult:
        async with httpx.AsyncClient(follow_redirects=True, timeout=self.timeout) as client:
            response = await client.get(url)
            response.raise_for_status()

        buffer = response.content
        self._check_size(buffer, "Remote media")

        content_type = normalize_header_mime(response.headers.get("content-type"))
        if not content_type:
            content_type = detect_mime(buffer=buffer)

        parsed = urlparse(url)
        file_name = Path(parsed.path).name if parsed.path else None
        logger.info(f"Fetched {url} ({len(buffer)} bytes, {content_type})")

        return MediaResult(
            buffer=buffer,
            content_type=content_type,
            kind=media_kind_from_mime(content_type),
            file_name=file_name or None,
        )

    def _load_file(self, file_path: str) -> MediaResult:
        path = Path(file_path).expanduser()

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        if not path.is_file():
            raise ValueError(f"Not a file: {path}")

        buffer = path.read_bytes()
        self._check_size(buffer, "File")

        content_type = detect_mime(file_path=path, buffer=buffer)
        return MediaResult(
            buffer=buffer,
            content_type=content_type,
            kind=media_kind_from_mime(content_type),
            file_name=path.name,
        )


async def load_media(source: str, max_bytes: int | None = None, allow_remote: bool = True) -> MediaResult:
    """Load media from any source (convenience function)."""
    loader = MediaLoader(max_bytes=max_bytes, allow_remote=allow_remote)
    return await loader.load(source)
