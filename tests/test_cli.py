"""
Tests for the command line interface
"""
from __future__ import annotations

import io
import json

from PIL import Image
from typer.testing import CliRunner

from dataurl_converter.cli import app

runner = CliRunner()


def _stdout_lines(result) -> list[str]:
    return [line.strip() for line in result.stdout.splitlines()]


def test_png_to_jpeg_prints_data_url(red_pixel_data_url):
    result = runner.invoke(app, ["convert", red_pixel_data_url, "--format", "jpeg"])

    assert result.exit_code == 0
    assert any(line.startswith("data:image/jpeg;base64,") for line in _stdout_lines(result))


def test_output_file(red_pixel_data_url, tmp_path):
    target = tmp_path / "pixel.jpg"

    result = runner.invoke(app, ["convert", red_pixel_data_url, "-f", "jpeg", "-o", str(target)])

    assert result.exit_code == 0
    img = Image.open(io.BytesIO(target.read_bytes()))
    assert img.format == "JPEG"
    assert img.size == (1, 1)


def test_file_source(red_pixel_png, tmp_path):
    source = tmp_path / "pixel.png"
    source.write_bytes(red_pixel_png)
    target = tmp_path / "out.png"

    result = runner.invoke(app, ["convert", str(source), "-f", "png", "-o", str(target)])

    assert result.exit_code == 0
    assert Image.open(target).size == (1, 1)


def test_unsupported_format(red_pixel_data_url):
    result = runner.invoke(app, ["convert", red_pixel_data_url, "-f", "wav"])

    assert result.exit_code == 1
    assert "Unsupported format" in result.output


def test_corrupted_image(truncated_png_data_url):
    result = runner.invoke(app, ["convert", truncated_png_data_url, "-f", "png"])

    assert result.exit_code == 1
    assert "Invalid image data URL" in result.output


def test_missing_source_file(tmp_path):
    result = runner.invoke(app, ["convert", str(tmp_path / "missing.mp4"), "-f", "mp3"])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_mp3_output_file(sample_mp4, tmp_path):
    source = tmp_path / "clip.mp4"
    source.write_bytes(sample_mp4)
    target = tmp_path / "clip.mp3"

    result = runner.invoke(app, ["convert", str(source), "-f", "mp3", "-o", str(target)])

    assert result.exit_code == 0
    assert target.stat().st_size > 0


def test_manifest_json():
    result = runner.invoke(app, ["manifest", "--json"])

    assert result.exit_code == 0
    manifest = json.loads(result.stdout)
    assert manifest["id"] == "dataURLConverter"
    assert manifest["menus"]["formats"]["items"] == ["mp3", "png", "jpeg"]


def test_manifest_table():
    result = runner.invoke(app, ["manifest"])

    assert result.exit_code == 0
    assert "convertDataURL" in result.stdout


def test_invalid_log_level_env_uses_defaults(red_pixel_data_url):
    result = runner.invoke(
        app,
        ["convert", red_pixel_data_url, "-f", "jpeg"],
        env={"DATAURL_CONVERTER_LOG_LEVEL": "verbose"},
    )

    assert result.exit_code == 0
    assert any(line.startswith("data:image/jpeg;base64,") for line in _stdout_lines(result))


def test_missing_config_file_is_rejected(red_pixel_data_url, tmp_path):
    result = runner.invoke(app, ["convert", red_pixel_data_url, "-f", "png", "--config", str(tmp_path / "nope.json")])

    assert result.exit_code == 2


def test_output_directory_names_file_after_source(red_pixel_png, tmp_path):
    source = tmp_path / "pixel.png"
    source.write_bytes(red_pixel_png)
    out_dir = tmp_path / "out"
    out_dir.mkdir()

    result = runner.invoke(app, ["convert", str(source), "-f", "jpeg", "-o", str(out_dir)])

    assert result.exit_code == 0
    assert Image.open(out_dir / "pixel.jpg").format == "JPEG"


def test_output_directory_for_data_url(red_pixel_data_url, tmp_path):
    result = runner.invoke(app, ["convert", red_pixel_data_url, "-f", "png", "-o", str(tmp_path)])

    assert result.exit_code == 0
    assert Image.open(tmp_path / "converted.png").size == (1, 1)


def test_unknown_kind_is_left_to_the_converter(tmp_path):
    source = tmp_path / "notes.txt"
    source.write_bytes(b"plain text")

    result = runner.invoke(app, ["convert", str(source), "-f", "png"])

    assert result.exit_code == 1
    assert "Invalid image data URL" in result.output
    assert "Warning" not in result.output


def test_image_source_to_mp3_warns(red_pixel_png, tmp_path, monkeypatch):
    source = tmp_path / "pixel.png"
    source.write_bytes(red_pixel_png)
    monkeypatch.setenv("DATAURL_CONVERTER_FFMPEG", "no-such-ffmpeg-binary")

    result = runner.invoke(app, ["convert", str(source), "-f", "mp3"])

    assert result.exit_code == 1
    assert "image source converted to mp3" in result.output
    assert "not found" in result.output
