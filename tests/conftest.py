"""
Pytest configuration for dataurl-converter tests

Shared fixtures and process-wide state resets
"""
from __future__ import annotations

import base64
import io
import shutil
import subprocess

import pytest
from PIL import Image

from dataurl_converter.config import invalidate_config_cache
from dataurl_converter.media import ffmpeg_gateway, object_urls


def _ffmpeg_can_encode_mp3() -> bool:
    binary = shutil.which("ffmpeg")
    if binary is None:
        return False
    try:
        result = subprocess.run([binary, "-hide_banner", "-encoders"], capture_output=True, timeout=30)
    except (OSError, subprocess.TimeoutExpired):
        return False
    return result.returncode == 0 and b"libmp3lame" in result.stdout


@pytest.fixture(scope="session")
def require_ffmpeg():
    """Skip unless an ffmpeg that can encode mp3 is on PATH."""
    if not _ffmpeg_can_encode_mp3():
        pytest.skip("ffmpeg with libmp3lame not available")


def png_bytes(size=(1, 1), color=(255, 0, 0), mode="RGB") -> bytes:
    img = Image.new(mode, size, color=color)
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def to_data_url(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


@pytest.fixture(autouse=True)
def reset_process_state():
    """Fresh gateway handle, object URL table and config cache per test."""
    ffmpeg_gateway.reset_ffmpeg_gateway()
    object_urls._registry = None
    invalidate_config_cache()
    yield
    ffmpeg_gateway.reset_ffmpeg_gateway()
    object_urls._registry = None
    invalidate_config_cache()


@pytest.fixture
def make_png_data_url():
    """Factory: PNG data URL for a solid image."""
    def _make(size=(1, 1), color=(255, 0, 0), mode="RGB") -> str:
        return to_data_url(png_bytes(size, color, mode), "image/png")
    return _make


@pytest.fixture
def red_pixel_png() -> bytes:
    """1x1 red pixel PNG."""
    return png_bytes()


@pytest.fixture
def red_pixel_data_url(red_pixel_png) -> str:
    return to_data_url(red_pixel_png, "image/png")


@pytest.fixture
def transparent_data_url() -> str:
    """4x4 fully transparent RGBA PNG."""
    return to_data_url(png_bytes(size=(4, 4), color=(255, 255, 255, 0), mode="RGBA"), "image/png")


@pytest.fixture
def truncated_png_data_url() -> str:
    """PNG cut off inside its image data."""
    img = Image.effect_noise((64, 64), 64).convert("RGB")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    data = buffer.getvalue()
    return to_data_url(data[: len(data) // 2], "image/png")


@pytest.fixture
def sample_mp4(require_ffmpeg, tmp_path) -> bytes:
    """One second of 440Hz tone muxed with a tiny black video track."""
    output = tmp_path / "sample.mp4"
    subprocess.run(
        [
            "ffmpeg", "-hide_banner", "-nostdin", "-y",
            "-f", "lavfi", "-i", "sine=frequency=440:duration=1",
            "-f", "lavfi", "-i", "color=c=black:s=16x16:d=1",
            "-shortest", "-c:v", "mpeg4", "-c:a", "aac",
            str(output),
        ],
        check=True,
        capture_output=True,
    )
    return output.read_bytes()
