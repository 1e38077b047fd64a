"""
Data URL conversion dispatcher

convert(data_url, format) picks one of two paths:
- mp3: extract the audio stream with ffmpeg, return an object URL
- png / jpeg: re-encode through the raster gateway, return a data URL

Modeled failures come back as ConversionFailure values. Gateway failures
(GatewayFailureError) are not translated and propagate to the caller.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Mapping, Union

from .config import ConverterConfig
from .errors import (
    ConversionError,
    ErrorCode,
    ImageDecodeError,
    InvalidDataURLError,
    UnsupportedFormatError,
)
from .logging import create_subsystem_logger
from .media.data_url import decode_data_url, encode_as_object_url, is_data_url
from .media.ffmpeg_gateway import FFmpegGateway, get_ffmpeg_gateway
from .media.object_urls import ObjectURLRegistry, get_object_url_registry
from .media.raster import RasterGateway

logger = create_subsystem_logger("converter")


class ConversionPath(str, Enum):
    AUDIO = "audio"
    IMAGE = "image"


class ConversionFormat(str, Enum):
    """Supported target formats. Also the source of the extension's menu."""
    MP3 = "mp3"
    PNG = "png"
    JPEG = "jpeg"

    @property
    def mime_type(self) -> str:
        if self is ConversionFormat.MP3:
            return "audio/mp3"
        return f"image/{self.value}"

    @property
    def path(self) -> ConversionPath:
        if self is ConversionFormat.MP3:
            return ConversionPath.AUDIO
        return ConversionPath.IMAGE

    @classmethod
    def parse(cls, token: str) -> "ConversionFormat":
        """
        Raises:
            UnsupportedFormatError: If token is not a member value
        """
        try:
            return cls(token)
        except ValueError:
            raise UnsupportedFormatError(format=str(token)) from None

    @classmethod
    def menu_items(cls) -> list[str]:
        return [member.value for member in cls]


@dataclass(frozen=True)
class ConversionSuccess:
    """A converted result: a data URL (images) or an object URL (audio)."""
    url: str
    format: ConversionFormat
    status: Literal["ok"] = "ok"

    @property
    def ok(self) -> bool:
        return True

    def to_text(self) -> str:
        return self.url


@dataclass(frozen=True)
class ConversionFailure:
    """A recovered failure with its human-readable message."""
    kind: ErrorCode
    message: str
    status: Literal["error"] = "error"

    @property
    def ok(self) -> bool:
        return False

    def to_text(self) -> str:
        return self.message

    @classmethod
    def from_error(cls, error: ConversionError) -> "ConversionFailure":
        return cls(kind=error.error_code, message=str(error))


ConversionResult = Union[ConversionSuccess, ConversionFailure]


class DataURLConverter:
    """
    Converts media data URLs between formats.

    The ffmpeg gateway defaults to the process-wide handle and is loaded
    lazily on the first mp3 request. Audio transcodes are serialized on the
    gateway's transcode lock because they share fixed virtual file names.
    """

    def __init__(
        self,
        config: ConverterConfig | None = None,
        gateway: FFmpegGateway | None = None,
        raster: RasterGateway | None = None,
        object_urls: ObjectURLRegistry | None = None,
    ):
        self.config = config or ConverterConfig.default()
        self._gateway = gateway
        self.raster = raster or RasterGateway(jpeg_quality=self.config.jpeg_quality)
        self.object_urls = object_urls if object_urls is not None else get_object_url_registry()

    @property
    def gateway(self) -> FFmpegGateway:
        if self._gateway is None:
            self._gateway = get_ffmpeg_gateway(self.config.ffmpeg_binary)
        return self._gateway

    async def convert(self, data_url: str, format: str) -> ConversionResult:
        """
        Convert a data URL to the given format.

        Returns:
            ConversionSuccess or ConversionFailure

        Raises:
            GatewayFailureError: If ffmpeg is unavailable or rejects the media
        """
        if not is_data_url(data_url):
            return ConversionFailure.from_error(InvalidDataURLError())

        try:
            target = ConversionFormat.parse(format)
        except UnsupportedFormatError as e:
            logger.debug(f"Rejected format {format!r}")
            return ConversionFailure.from_error(e)

        try:
            if target.path is ConversionPath.AUDIO:
                url = await self._extract_audio(data_url, target)
            else:
                url = await self._convert_image(data_url, target)
        except (InvalidDataURLError, ImageDecodeError) as e:
            logger.info(f"Conversion to {target.value} failed: {e}")
            return ConversionFailure.from_error(e)

        logger.info(f"Converted data URL to {target.value}")
        return ConversionSuccess(url=url, format=target)

    async def _extract_audio(self, data_url: str, target: ConversionFormat) -> str:
        gateway = self.gateway
        await gateway.load()

        raw = decode_data_url(data_url)
        input_name = self.config.input_name
        output_name = self.config.output_name

        async with gateway.transcode_lock:
            gateway.write_file(input_name, raw)
            try:
                await gateway.run(
                    "-i", input_name,
                    "-q:a", self.config.audio_quality,
                    "-map", "a",
                    output_name,
                )
                audio = gateway.read_file(output_name)
            finally:
                gateway.unlink(input_name)
                gateway.unlink(output_name)

        logger.debug(f"Extracted {len(audio)} bytes of audio from {len(raw)} bytes")
        return encode_as_object_url(audio, target.mime_type, self.object_urls)

    async def _convert_image(self, data_url: str, target: ConversionFormat) -> str:
        return await self.raster.reencode(data_url, target.mime_type)

    async def convert_data_url(self, args: Mapping[str, object]) -> str:
        """Host entry point: {DATAURL, FORMAT} in, a string out."""
        data_url = str(args.get("DATAURL") or "")
        format = str(args.get("FORMAT") or "")
        result = await self.convert(data_url, format)
        return result.to_text()
