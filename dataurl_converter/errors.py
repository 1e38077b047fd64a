from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    DECODE_FAILURE = "DECODE_FAILURE"
    GATEWAY_FAILURE = "GATEWAY_FAILURE"


class ConversionError(Exception):
    def __init__(self, message: str, error_code: ErrorCode, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.error_code.value,
            "message": str(self),
            "details": self.details,
        }


class InvalidDataURLError(ConversionError):
    def __init__(self, message: str | None = None):
        msg = message or "Invalid data URL"
        super().__init__(msg, ErrorCode.INVALID_INPUT)


class UnsupportedFormatError(ConversionError):
    def __init__(self, message: str | None = None, format: str | None = None):
        msg = message or "Unsupported format"
        super().__init__(msg, ErrorCode.UNSUPPORTED_FORMAT, {"format": format} if format else None)


class ImageDecodeError(ConversionError):
    def __init__(self, message: str | None = None):
        msg = message or "Invalid image data URL"
        super().__init__(msg, ErrorCode.DECODE_FAILURE)


class GatewayFailureError(ConversionError):
    """Raised when the external transcoder cannot be loaded or rejects the media."""

    def __init__(
        self,
        message: str | None = None,
        returncode: int | None = None,
        stderr: str | None = None,
    ):
        msg = message or "Media gateway failed"
        details: dict[str, Any] = {}
        if returncode is not None:
            details["returncode"] = returncode
        if stderr:
            details["stderr"] = stderr
        super().__init__(msg, ErrorCode.GATEWAY_FAILURE, details)
        self.returncode = returncode
        self.stderr = stderr


__all__ = [
    "ErrorCode",
    "ConversionError",
    "InvalidDataURLError",
    "UnsupportedFormatError",
    "ImageDecodeError",
    "GatewayFailureError",
]
