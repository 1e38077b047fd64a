"""Unit tests for configuration loader"""

from pathlib import Path

import pytest

from dataurl_converter.config import ConverterConfig, invalidate_config_cache, load_config
from dataurl_converter.config.loader import get_config_candidates, load_config_raw


def test_defaults_when_file_missing(tmp_path):
    config = load_config(tmp_path / "nonexistent.json")

    assert config == ConverterConfig.default()
    assert config.ffmpeg_binary == "ffmpeg"
    assert config.audio_quality == "0"
    assert (config.input_name, config.output_name) == ("input.mp4", "output.mp3")
    assert config.jpeg_quality == 92


def test_config_candidates():
    names = [p.name for p in get_config_candidates()]
    assert names == ["dataurl-converter.json", "dataurl-converter.json5", "config.json", "config.json5"]


def test_json5_file(tmp_path):
    config_path = tmp_path / "dataurl-converter.json5"
    config_path.write_text(
        """
        {
          // local build
          ffmpeg_binary: '/opt/ffmpeg/bin/ffmpeg',
          jpeg_quality: 80,
          log_level: 'debug',
        }
        """
    )

    config = load_config(config_path)

    assert config.ffmpeg_binary == "/opt/ffmpeg/bin/ffmpeg"
    assert config.jpeg_quality == 80
    assert config.log_level == "DEBUG"


def test_discovers_file_in_cwd(tmp_path, monkeypatch):
    (tmp_path / "dataurl-converter.json").write_text('{"audio_quality": 2}')
    monkeypatch.chdir(tmp_path)

    assert load_config().audio_quality == "2"


def test_env_var_substitution(tmp_path, monkeypatch):
    monkeypatch.setenv("FFMPEG_HOME", "/srv/ffmpeg")
    config_path = tmp_path / "config.json"
    config_path.write_text('{"ffmpeg_binary": "${FFMPEG_HOME}/ffmpeg", "input_name": "${UNSET_VAR_XYZ}.mp4"}')

    raw = load_config_raw(config_path)

    assert raw["ffmpeg_binary"] == "/srv/ffmpeg/ffmpeg"
    assert raw["input_name"] == "${UNSET_VAR_XYZ}.mp4"


def test_env_overrides_win_over_file(tmp_path, monkeypatch):
    config_path = tmp_path / "config.json"
    config_path.write_text('{"jpeg_quality": 50, "ffmpeg_binary": "from-file"}')
    monkeypatch.setenv("DATAURL_CONVERTER_JPEG_QUALITY", "70")
    monkeypatch.setenv("DATAURL_CONVERTER_FFMPEG", "from-env")

    config = load_config(config_path)

    assert config.jpeg_quality == 70
    assert config.ffmpeg_binary == "from-env"


def test_result_is_cached(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text('{"jpeg_quality": 60}')
    first = load_config(config_path)

    config_path.write_text('{"jpeg_quality": 40}')
    assert load_config(config_path) is first

    invalidate_config_cache()
    assert load_config(config_path).jpeg_quality == 40


def test_broken_file_is_skipped(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text("{not json")

    assert load_config(config_path) == ConverterConfig()


@pytest.mark.parametrize("value", [0, 101, "high"])
def test_invalid_values_fall_back_to_defaults(tmp_path, value):
    config_path = tmp_path / "config.json"
    config_path.write_text(f'{{"jpeg_quality": {value!r}}}'.replace("'", '"'))

    assert load_config(config_path).jpeg_quality == 92


def test_unknown_keys_are_ignored(tmp_path, caplog):
    config_path = tmp_path / "config.json"
    config_path.write_text('{"jpeg_quality": 75, "telemetry": true}')

    config = load_config(config_path)

    assert config.jpeg_quality == 75
    assert "telemetry" in caplog.text


def test_config_validation():
    with pytest.raises(ValueError, match="jpeg_quality"):
        ConverterConfig(jpeg_quality=0)
    assert ConverterConfig(audio_quality=3).audio_quality == "3"


def test_invalid_env_log_level_falls_back_to_defaults(monkeypatch, caplog):
    monkeypatch.setenv("DATAURL_CONVERTER_LOG_LEVEL", "verbose")

    config = load_config(Path("/nonexistent/config.json"))

    assert config.log_level == "INFO"
    assert "log_level" in caplog.text


@pytest.mark.parametrize("level", ["debug", "Warning", "ERROR"])
def test_log_level_is_normalized(level):
    assert ConverterConfig(log_level=level).log_level == level.upper()


def test_unknown_log_level_rejected():
    with pytest.raises(ValueError, match="Unknown log_level"):
        ConverterConfig(log_level="chatty")


def test_missing_explicit_config_is_reported(tmp_path, caplog):
    config = load_config(tmp_path / "missing.json5")

    assert config == ConverterConfig()
    assert "Config file not found" in caplog.text
