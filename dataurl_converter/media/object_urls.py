"""
Object URL registry

Host-side table of in-memory blobs addressed by opaque ``blob:`` URLs.
Whoever holds a URL is responsible for revoking it.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Blob:
    """Immutable byte payload with its MIME type."""
    data: bytes
    type: str

    @property
    def size(self) -> int:
        return len(self.data)


class ObjectURLRegistry:
    """
    Issues and resolves ``blob:<origin>/<uuid>`` reference URLs.

    Features:
    - create_object_url: register bytes, get a reference string
    - resolve: dereference a URL to its Blob
    - revoke_object_url: release a URL (unknown URLs are ignored)
    """

    def __init__(self, origin: str = "null"):
        self.origin = origin
        self._blobs: dict[str, Blob] = {}

    def create_object_url(self, data: bytes, mime_type: str) -> str:
        url = f"blob:{self.origin}/{uuid.uuid4()}"
        self._blobs[url] = Blob(data=bytes(data), type=mime_type)
        logger.debug(f"Registered {url} ({len(data)} bytes, {mime_type})")
        return url

    def resolve(self, url: str) -> Blob:
        """
        Dereference an object URL.

        Raises:
            KeyError: If the URL was never issued or has been revoked
        """
        try:
            return self._blobs[url]
        except KeyError:
            raise KeyError(f"Unknown or revoked object URL: {url}") from None

    def revoke_object_url(self, url: str) -> None:
        if self._blobs.pop(url, None) is not None:
            logger.debug(f"Revoked {url}")

    def clear(self) -> None:
        self._blobs.clear()

    def __contains__(self, url: object) -> bool:
        return url in self._blobs

    def __len__(self) -> int:
        return len(self._blobs)


_registry: ObjectURLRegistry | None = None


def get_object_url_registry() -> ObjectURLRegistry:
    """Return the process-wide object URL registry."""
    global _registry
    if _registry is None:
        _registry = ObjectURLRegistry()
    return _registry
