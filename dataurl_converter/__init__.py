"""Convert media data URLs between formats (video to mp3, image re-encoding)."""

from .converter import (
    ConversionFailure,
    ConversionFormat,
    ConversionResult,
    ConversionSuccess,
    DataURLConverter,
)
from .errors import (
    ConversionError,
    ErrorCode,
    GatewayFailureError,
    ImageDecodeError,
    InvalidDataURLError,
    UnsupportedFormatError,
)

__version__ = "0.1.0"

__all__ = [
    "DataURLConverter",
    "ConversionFormat",
    "ConversionResult",
    "ConversionSuccess",
    "ConversionFailure",
    "ConversionError",
    "ErrorCode",
    "GatewayFailureError",
    "ImageDecodeError",
    "InvalidDataURLError",
    "UnsupportedFormatError",
]
