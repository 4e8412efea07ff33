import logging

from refclip.config import load_config


def test_defaults():
    config = load_config({})
    assert config.log_level == logging.INFO
    assert config.screen_index is None
    assert config.ffmpeg_binary == "ffmpeg"
    assert config.export_dir is None


def test_environment_overrides():
    config = load_config(
        {
            "REFCLIP_LOG_LEVEL": "debug",
            "REFCLIP_SCREEN_INDEX": "1",
            "REFCLIP_FFMPEG": "/usr/local/bin/ffmpeg",
            "REFCLIP_EXPORT_DIR": "/exports",
        }
    )
    assert config.log_level == logging.DEBUG
    assert config.screen_index == 1
    assert config.ffmpeg_binary == "/usr/local/bin/ffmpeg"
    assert config.export_dir == "/exports"


def test_bad_values_fall_back(caplog):
    with caplog.at_level("WARNING"):
        config = load_config({"REFCLIP_LOG_LEVEL": "chatty", "REFCLIP_SCREEN_INDEX": "left"})
    assert config.log_level == logging.INFO
    assert config.screen_index is None
    assert "REFCLIP_SCREEN_INDEX" in caplog.text
