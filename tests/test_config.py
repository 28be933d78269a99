"""Tests for configuration loading."""

import json
from unittest.mock import patch

from dusk.config import DEFAULT_IGNORE_DIRS, Settings, load_config
from dusk.models import ByteFormat


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        settings = load_config(tmp_path / "config.json")
        assert settings == Settings()
        assert settings.format == ByteFormat.METRIC
        assert settings.ignore_dirs == DEFAULT_IGNORE_DIRS

    def test_reads_values(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(
            json.dumps(
                {
                    "format": "binary",
                    "apparent_size": True,
                    "stay_on_filesystem": True,
                    "ignore_dirs": ["/mnt"],
                }
            )
        )

        settings = load_config(config_file)
        assert settings.format == ByteFormat.BINARY
        assert settings.apparent_size
        assert settings.stay_on_filesystem
        assert not settings.count_hard_links
        assert settings.ignore_dirs == ["/mnt"]

    def test_invalid_json_gives_defaults(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text("{not json")

        with patch("dusk.config.logger") as mock_logger:
            settings = load_config(config_file)

        assert settings == Settings()
        mock_logger.warning.assert_called_once()

    def test_invalid_value_gives_defaults(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"format": "furlongs"}))
        assert load_config(config_file) == Settings()

    def test_non_object_gives_defaults(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text("[1, 2, 3]")
        assert load_config(config_file) == Settings()
