"""File logging bootstrap.

The preview pane owns the terminal, so log records go to a rotating file
under the platform log directory instead of stderr.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

from platformdirs import user_log_dir

from .config import APP_NAME

LOG_ENV_VAR = "FUZZVIEW_LOG"
LOG_FILENAME = f"{APP_NAME}.log"
DEFAULT_LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"

_handler: logging.Handler | None = None


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.environ.get(LOG_ENV_VAR, "").strip() or logging.INFO
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        return resolved if isinstance(resolved, int) else logging.INFO
    return level


def init_logging(log_path: Path | None = None, level: int | str | None = None) -> Path:
    """Attach a rotating file handler to the ``fuzzview`` logger.

    Calling this again replaces the previous handler. Returns the log path.
    """
    global _handler

    target = Path(log_path).expanduser() if log_path is not None else DEFAULT_LOG_PATH
    target.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(APP_NAME)
    logger.setLevel(_resolve_level(level))
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler.close()

    handler = logging.handlers.RotatingFileHandler(
        target,
        maxBytes=5 * 1024 * 1024,
        backupCount=2,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    _handler = handler
    return target


def shutdown_logging() -> None:
    """Detach and close the handler installed by :func:`init_logging`."""
    global _handler

    if _handler is None:
        return
    logging.getLogger(APP_NAME).removeHandler(_handler)
    _handler.close()
    _handler = None


__all__ = ["DEFAULT_LOG_PATH", "LOG_ENV_VAR", "init_logging", "shutdown_logging"]
