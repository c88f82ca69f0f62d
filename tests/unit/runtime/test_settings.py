"""Tests for preview settings loading and sanitization.

Malformed config data falls back to defaults one key at a time.
"""

from __future__ import annotations

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fuzzview import config


def write_config(data: dict[str, object], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


class PreviewSettingsTests(unittest.TestCase):
    def test_missing_config_gives_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            settings = config.load_preview_settings(Path(tmp) / "absent.json")
        self.assertEqual(settings, config.PreviewSettings())
        self.assertEqual(settings.max_concurrent_previews, 3)
        self.assertEqual(settings.preview_cache_size, 100)
        self.assertEqual(settings.rendered_cache_size, 25)
        self.assertIsNone(settings.preview_command_timeout)
        self.assertEqual(settings.default_delimiter, ":")
        self.assertIsNone(settings.shell)

    def test_valid_values_round_trip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "config.json"
            write_config(
                {
                    "max_concurrent_previews": 5,
                    "preview_cache_size": 10,
                    "rendered_cache_size": 4,
                    "preview_command_timeout": 2,
                    "default_delimiter": "\t",
                    "shell": ["bash", "-c"],
                },
                path,
            )
            settings = config.load_preview_settings(path)

        self.assertEqual(
            settings,
            config.PreviewSettings(
                max_concurrent_previews=5,
                preview_cache_size=10,
                rendered_cache_size=4,
                preview_command_timeout=2.0,
                default_delimiter="\t",
                shell=("bash", "-c"),
            ),
        )

    def test_invalid_values_fall_back_per_key(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            write_config(
                {
                    "max_concurrent_previews": 0,
                    "preview_cache_size": True,
                    "rendered_cache_size": 7.5,
                    "preview_command_timeout": -1,
                    "default_delimiter": "",
                    "shell": ["sh", 3],
                },
                path,
            )
            settings = config.load_preview_settings(path)

        self.assertEqual(settings, config.PreviewSettings())

    def test_malformed_json_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text("{not json", encoding="utf-8")
            self.assertEqual(config.load_config(path), {})
            path.write_text("[1, 2]", encoding="utf-8")
            self.assertEqual(config.load_config(path), {})

    def test_env_var_overrides_config_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "custom.json"
            write_config({"preview_cache_size": 9}, path)
            with mock.patch.dict(os.environ, {config.CONFIG_ENV_VAR: str(path)}):
                self.assertEqual(config.config_path(), path)
                self.assertEqual(config.load_preview_settings().preview_cache_size, 9)

        with mock.patch.dict(os.environ, {config.CONFIG_ENV_VAR: "  "}):
            self.assertEqual(config.config_path(), config.DEFAULT_CONFIG_PATH)


if __name__ == "__main__":
    unittest.main()
