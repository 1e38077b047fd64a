"""
Converter configuration

Tunables for the ffmpeg gateway, the raster encoder and logging.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class ConverterConfig:
    """
    Converter configuration

    Defaults reproduce the extension's fixed behavior: ffmpeg on PATH,
    highest mp3 VBR quality, browser-default JPEG quality.
    """
    # ffmpeg gateway
    ffmpeg_binary: str = "ffmpeg"
    audio_quality: str = "0"  # -q:a, 0 is best
    input_name: str = "input.mp4"
    output_name: str = "output.mp3"

    # Raster encoder
    jpeg_quality: int = 92

    log_level: str = "INFO"

    def __post_init__(self):
        if not 1 <= int(self.jpeg_quality) <= 100:
            raise ValueError(f"jpeg_quality must be in 1..100, got {self.jpeg_quality}")
        self.jpeg_quality = int(self.jpeg_quality)
        self.audio_quality = str(self.audio_quality)
        self.log_level = str(self.log_level).upper()
        if self.log_level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log_level: {self.log_level!r}")

    @classmethod
    def default(cls) -> "ConverterConfig":
        """Create default configuration"""
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConverterConfig":
        """Build from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")
        return cls(**{k: v for k, v in data.items() if k in known})
