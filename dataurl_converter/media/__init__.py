"""Media handling (data URLs, object URLs, ffmpeg and raster gateways)"""

from .data_url import (
    data_url_media_type,
    decode_data_url,
    encode_as_data_url,
    encode_as_object_url,
    is_data_url,
)
from .ffmpeg_gateway import FFmpegGateway, get_ffmpeg_gateway, reset_ffmpeg_gateway
from .loader import MediaLoader, MediaResult, load_media
from .mime import MediaKind, detect_mime, extension_for_mime, media_kind_from_mime
from .object_urls import Blob, ObjectURLRegistry, get_object_url_registry
from .raster import Canvas, RasterGateway

__all__ = [
    "decode_data_url",
    "encode_as_data_url",
    "encode_as_object_url",
    "data_url_media_type",
    "is_data_url",
    "FFmpegGateway",
    "get_ffmpeg_gateway",
    "reset_ffmpeg_gateway",
    "MediaLoader",
    "MediaResult",
    "load_media",
    "MediaKind",
    "detect_mime",
    "extension_for_mime",
    "media_kind_from_mime",
    "Blob",
    "ObjectURLRegistry",
    "get_object_url_registry",
    "Canvas",
    "RasterGateway",
]
