"""Unit tests for error types"""

from dataurl_converter.converter import ConversionFailure
from dataurl_converter.errors import (
    ConversionError,
    ErrorCode,
    GatewayFailureError,
    ImageDecodeError,
    InvalidDataURLError,
    UnsupportedFormatError,
)


def test_default_messages():
    assert str(InvalidDataURLError()) == "Invalid data URL"
    assert str(UnsupportedFormatError()) == "Unsupported format"
    assert str(ImageDecodeError()) == "Invalid image data URL"
    assert str(GatewayFailureError()) == "Media gateway failed"


def test_all_are_conversion_errors():
    for error in (InvalidDataURLError(), UnsupportedFormatError(), ImageDecodeError(), GatewayFailureError()):
        assert isinstance(error, ConversionError)


def test_to_dict():
    error = UnsupportedFormatError(format="wav")
    assert error.to_dict() == {
        "error": "UNSUPPORTED_FORMAT",
        "message": "Unsupported format",
        "details": {"format": "wav"},
    }


def test_gateway_failure_details():
    error = GatewayFailureError("ffmpeg exited with code 1", returncode=1, stderr="moov atom not found")

    assert error.error_code == ErrorCode.GATEWAY_FAILURE
    assert error.returncode == 1
    assert error.details == {"returncode": 1, "stderr": "moov atom not found"}


def test_failure_result_from_error():
    failure = ConversionFailure.from_error(ImageDecodeError())

    assert failure.kind == ErrorCode.DECODE_FAILURE
    assert failure.status == "error"
    assert not failure.ok
    assert failure.to_text() == "Invalid image data URL"
