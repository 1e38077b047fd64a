"""
Data URL encoding and decoding

Format: data:<mime>;base64,<payload>
"""
from __future__ import annotations

import base64
import binascii

from ..errors import InvalidDataURLError
from .mime import normalize_header_mime
from .object_urls import ObjectURLRegistry, get_object_url_registry

DATA_URL_PREFIX = "data:"


def is_data_url(value: str) -> bool:
    return value.startswith(DATA_URL_PREFIX)


def decode_data_url(data_url: str) -> bytes:
    """
    Decode the base64 payload of a data URL.

    The mime segment is not validated; everything after the first comma is
    treated as base64.

    Raises:
        InvalidDataURLError: If the string is not a data URL or the payload
            is not valid base64
    """
    if not is_data_url(data_url) or "," not in data_url:
        raise InvalidDataURLError()
    payload = data_url.split(",", 1)[1]
    try:
        return base64.b64decode(payload, validate=False)
    except (binascii.Error, ValueError) as e:
        raise InvalidDataURLError(f"Invalid data URL: {e}") from e


def data_url_media_type(data_url: str) -> str | None:
    """Return the normalized mime segment of a data URL, if any."""
    if not is_data_url(data_url):
        return None
    header = data_url.split(",", 1)[0][len(DATA_URL_PREFIX):]
    return normalize_header_mime(header)


def encode_as_data_url(data: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"{DATA_URL_PREFIX}{mime_type};base64,{encoded}"


def encode_as_object_url(
    data: bytes,
    mime_type: str,
    registry: ObjectURLRegistry | None = None,
) -> str:
    """
    Register bytes as a blob and return its reference URL.

    The registry owns the bytes from here on; the caller must revoke the URL
    when done with it.
    """
    if registry is None:
        registry = get_object_url_registry()
    return registry.create_object_url(data, mime_type)
