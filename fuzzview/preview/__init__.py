"""Public preview API.

Implementation lives in small focused modules; this package file re-exports
what the render loop and channels need.
"""

from __future__ import annotations

from .cache import (
    DEFAULT_PREVIEW_CACHE_SIZE,
    DEFAULT_RENDERED_PREVIEW_CACHE_SIZE,
    PreviewCache,
    RenderedPreviewCache,
)
from .command import CommandResult, PreviewCommandError, format_command, run_preview_command, shell_command
from .previewer import MAX_CONCURRENT_PREVIEW_TASKS, Previewer, preview_cache_key
from .rendering import PreviewPane, render_title, rendered_cache_key
from .ring_set import RingSet
from .types import (
    FILE_TOO_LARGE_MSG,
    PREVIEW_NOT_SUPPORTED_MSG,
    AnsiText,
    Empty,
    FileTooLarge,
    Loading,
    NotSupported,
    Preview,
    PreviewContent,
    file_too_large,
    loading,
    not_supported,
)

__all__ = [
    "DEFAULT_PREVIEW_CACHE_SIZE",
    "DEFAULT_RENDERED_PREVIEW_CACHE_SIZE",
    "FILE_TOO_LARGE_MSG",
    "MAX_CONCURRENT_PREVIEW_TASKS",
    "PREVIEW_NOT_SUPPORTED_MSG",
    "AnsiText",
    "CommandResult",
    "Empty",
    "FileTooLarge",
    "Loading",
    "NotSupported",
    "Preview",
    "PreviewCache",
    "PreviewCommandError",
    "PreviewContent",
    "PreviewPane",
    "Previewer",
    "RenderedPreviewCache",
    "RingSet",
    "file_too_large",
    "format_command",
    "loading",
    "not_supported",
    "preview_cache_key",
    "render_title",
    "rendered_cache_key",
    "run_preview_command",
    "shell_command",
]
