"""
Raster operations (decode, draw, encode)

Pillow stands in for the browser's image element and 2D canvas:
decode a data URL, draw it onto an off-screen canvas at its natural size,
then re-encode the canvas as a data URL.
"""

from __future__ import annotations

import asyncio
import io
import logging
import struct
from dataclasses import dataclass

from PIL import Image

from ..errors import ImageDecodeError, InvalidDataURLError
from .data_url import decode_data_url, encode_as_data_url

logger = logging.getLogger(__name__)

DEFAULT_JPEG_QUALITY = 92

# Pillow save formats per canvas mime type
_PIL_FORMATS = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
}


@dataclass
class Canvas:
    """Off-screen RGBA pixel buffer."""
    image: Image.Image

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height


class RasterGateway:
    """
    Image decode/draw/encode.

    Decoding has exactly two outcomes: a fully loaded image, or
    ImageDecodeError. Encoding is deterministic for a given input.
    """

    def __init__(self, jpeg_quality: int = DEFAULT_JPEG_QUALITY):
        self.jpeg_quality = jpeg_quality

    async def decode(self, data_url: str) -> Image.Image:
        """
        Decode an image data URL.

        Raises:
            ImageDecodeError: If the payload is not a decodable image
        """
        try:
            return await asyncio.to_thread(_decode_sync, data_url)
        except (
            InvalidDataURLError,
            OSError,
            ValueError,
            SyntaxError,
            struct.error,
            Image.DecompressionBombError,
        ) as e:
            logger.debug(f"Image decode failed: {e}")
            raise ImageDecodeError() from e

    @staticmethod
    def draw(image: Image.Image) -> Canvas:
        """Draw image at (0, 0) onto a transparent canvas of its natural size."""
        canvas = Image.new("RGBA", image.size, (0, 0, 0, 0))
        canvas.paste(image.convert("RGBA"), (0, 0))
        return Canvas(image=canvas)

    def encode(self, canvas: Canvas, mime_type: str, quality: int | None = None) -> str:
        """
        Encode canvas content as a data URL.

        JPEG has no alpha, so transparent pixels are flattened onto black.
        Unsupported mime types fall back to PNG.
        """
        pil_format = _PIL_FORMATS.get(mime_type)
        if pil_format is None:
            logger.debug(f"Canvas cannot encode {mime_type}, falling back to image/png")
            mime_type, pil_format = "image/png", "PNG"

        output = io.BytesIO()
        if pil_format == "JPEG":
            flattened = Image.new("RGB", canvas.image.size, (0, 0, 0))
            flattened.paste(canvas.image, (0, 0), mask=canvas.image.getchannel("A"))
            flattened.save(output, format="JPEG", quality=quality or self.jpeg_quality)
        else:
            canvas.image.save(output, format="PNG")

        return encode_as_data_url(output.getvalue(), mime_type)

    async def reencode(self, data_url: str, mime_type: str) -> str:
        """Decode, draw and encode in one step."""
        image = await self.decode(data_url)
        canvas = self.draw(image)
        logger.debug(f"Drew {canvas.width}x{canvas.height} canvas for {mime_type}")
        return self.encode(canvas, mime_type)


def _decode_sync(data_url: str) -> Image.Image:
    buffer = decode_data_url(data_url)
    img = Image.open(io.BytesIO(buffer))
    img.load()
    return img
