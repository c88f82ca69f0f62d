"""Persistent JSON settings for the preview pipeline.

Stores concurrency and cache limits, the command timeout, and the shell used
to run preview commands. All access is defensive: a malformed or missing
config falls back to defaults, one key at a time.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .entry import DEFAULT_DELIMITER

logger = logging.getLogger(__name__)

APP_NAME = "fuzzview"
CONFIG_FILENAME = "config.json"
CONFIG_ENV_VAR = "FUZZVIEW_CONFIG"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass(frozen=True)
class PreviewSettings:
    """Validated preview-pipeline settings."""

    max_concurrent_previews: int = 3
    preview_cache_size: int = 100
    rendered_cache_size: int = 25
    preview_command_timeout: float | None = None
    default_delimiter: str = DEFAULT_DELIMITER
    shell: tuple[str, ...] | None = None


def config_path() -> Path:
    """Return the config location, honoring ``FUZZVIEW_CONFIG`` when set."""
    override = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    target = path if path is not None else config_path()
    try:
        data = json.loads(target.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", target, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _positive_int(value: object, default: int) -> int:
    """Booleans and non-integers are invalid; so is anything below 1."""
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value if value >= 1 else default


def _positive_seconds(value: object, default: float | None) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value) if value > 0 else default


def _non_empty_str(value: object, default: str) -> str:
    if not isinstance(value, str) or not value:
        return default
    return value


def _shell_argv(value: object) -> tuple[str, ...] | None:
    if not isinstance(value, list) or not value:
        return None
    if not all(isinstance(part, str) and part for part in value):
        return None
    return tuple(value)


def load_preview_settings(path: Path | None = None) -> PreviewSettings:
    """Read :class:`PreviewSettings`, replacing each invalid key with its default."""
    data = load_config(path)
    defaults = PreviewSettings()
    return PreviewSettings(
        max_concurrent_previews=_positive_int(
            data.get("max_concurrent_previews"), defaults.max_concurrent_previews
        ),
        preview_cache_size=_positive_int(data.get("preview_cache_size"), defaults.preview_cache_size),
        rendered_cache_size=_positive_int(data.get("rendered_cache_size"), defaults.rendered_cache_size),
        preview_command_timeout=_positive_seconds(
            data.get("preview_command_timeout"), defaults.preview_command_timeout
        ),
        default_delimiter=_non_empty_str(data.get("default_delimiter"), defaults.default_delimiter),
        shell=_shell_argv(data.get("shell")),
    )


__all__ = [
    "APP_NAME",
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
    "PreviewSettings",
    "config_path",
    "load_config",
    "load_preview_settings",
]
