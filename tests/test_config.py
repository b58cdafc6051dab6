"""Tests for configuration loading and validation."""

from __future__ import annotations

import tempfile
from pathlib import Path
import unittest

from pydantic import ValidationError

from delayed_playback.config import DEFAULT_CONFIG, Config, PlaybackConfig, load_config


class ConfigTests(unittest.TestCase):
    """Validate config merge and fallback behavior."""

    def test_missing_config_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config = load_config(config_path=Path(temp_dir) / "config.toml")
        self.assertEqual(
            config.playback.base_delay_multiplier,
            DEFAULT_CONFIG["playback"]["base_delay_multiplier"],
        )
        self.assertTrue(config.playback.logging_enabled)
        self.assertEqual(config.playback.default_strategy, "identity")
        self.assertEqual(config.logging.level, DEFAULT_CONFIG["logging"]["level"])

    def test_partial_config_overrides_selected_values(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text(
                """
[playback]
base_delay_multiplier = 2.5
log_prefix = "~ "

[logging]
level = "debug"
                """.strip(),
                encoding="utf-8",
            )
            config = load_config(config_path=config_path)
        self.assertEqual(config.playback.base_delay_multiplier, 2.5)
        self.assertEqual(config.playback.log_prefix, "~ ")
        self.assertTrue(config.playback.timestamps_enabled)
        self.assertEqual(config.logging.level, "DEBUG")

    def test_invalid_values_fall_back_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text(
                "[playback]\nbase_delay_multiplier = -3\n", encoding="utf-8"
            )
            with self.assertLogs("delayed_playback.config", level="WARNING"):
                config = load_config(config_path=config_path)
        self.assertEqual(config, Config())

    def test_unparsable_toml_falls_back_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text("[playback\nnot toml", encoding="utf-8")
            with self.assertLogs("delayed_playback.config", level="WARNING"):
                config = load_config(config_path=config_path)
        self.assertEqual(config, Config())

    def test_playback_config_validates_assignment(self) -> None:
        config = PlaybackConfig()
        with self.assertRaises(ValidationError):
            config.base_delay_multiplier = -1
        with self.assertRaises(ValidationError):
            PlaybackConfig(default_strategy="  ")


if __name__ == "__main__":
    unittest.main()
