"""Turn previews into terminal rows for the preview pane.

Rows are plain ``str`` values with inline SGR sequences, clipped to the pane
width. Rendering parsed text is the expensive part of drawing a frame, so
rows for settled (non-stale) previews are kept in a
:class:`RenderedPreviewCache`.
"""

from __future__ import annotations

import logging

from ..ansi import DEFAULT_STYLE, Span, style_to_sgr
from ..entry import Entry, PreviewCommand
from ..strings import DEFAULT_TAB_WIDTH, clip_to_width, replace_non_printable, shrink_with_ellipsis
from .cache import RenderedPreviewCache
from .types import (
    FILE_TOO_LARGE_MSG,
    LOADING_MSG,
    PREVIEW_NOT_SUPPORTED_MSG,
    AnsiText,
    FileTooLarge,
    Loading,
    NotSupported,
    Preview,
)

logger = logging.getLogger(__name__)

RESET = "\033[0m"
ITALIC = "\033[3m"
FILL_CHAR_EMPTY = " "


def rendered_cache_key(entry: Entry, command: PreviewCommand) -> str:
    line_number = "" if entry.line_number is None else str(entry.line_number)
    return f"{entry.name}{line_number}{command.template}"


def render_styled_line(spans: tuple[Span, ...] | list[Span], width: int, tab_width: int = DEFAULT_TAB_WIDTH) -> str:
    """Encode one parsed line as a row of at most ``width`` columns.

    Span text is sanitized before clipping so tabs and control bytes cannot
    move the cursor. A styled row always ends with a reset.
    """
    out: list[str] = []
    col = 0
    current = DEFAULT_STYLE
    for span in spans:
        remaining = width - col
        if remaining <= 0:
            break
        text, used = clip_to_width(replace_non_printable(span.text, tab_width=tab_width), remaining)
        if not text:
            break
        if span.style != current:
            if current != DEFAULT_STYLE:
                out.append(RESET)
            out.append(style_to_sgr(span.style))
            current = span.style
        out.append(text)
        col += used
    if current != DEFAULT_STYLE:
        out.append(RESET)
    return "".join(out)


def build_meta_preview_rows(width: int, height: int, message: str, fill_char: str = FILL_CHAR_EMPTY) -> list[str]:
    """Center ``message`` in a ``width`` x ``height`` block of ``fill_char``.

    Returns blank rows when the message plus margins does not fit.
    """
    if height <= 0:
        return []
    if len(message) + 8 > width:
        return [""] * height

    fill_line = fill_char * width
    center = height // 2
    left = (width - len(message)) // 2
    right = width - left - len(message)
    rows: list[str] = []
    for row_idx in range(height):
        if row_idx == center:
            rows.append(f"{fill_char * left}{ITALIC}{message}{RESET}{fill_char * right}")
        elif abs(row_idx - center) == 1:
            rows.append(f"{fill_char * left}{' ' * len(message)}{fill_char * right}")
        else:
            rows.append(fill_line)
    return rows


def build_preview_rows(preview: Preview, width: int, height: int, tab_width: int = DEFAULT_TAB_WIDTH) -> tuple[str, ...]:
    """Render every row of ``preview`` for a pane of the given size."""
    content = preview.content
    if isinstance(content, AnsiText):
        lines = content.lines
        if not lines and content.text:
            lines = AnsiText.from_output(content.text).lines
        return tuple(render_styled_line(line, width, tab_width) for line in lines)
    if isinstance(content, Loading):
        return tuple(build_meta_preview_rows(width, height, LOADING_MSG))
    if isinstance(content, NotSupported):
        return tuple(build_meta_preview_rows(width, height, PREVIEW_NOT_SUPPORTED_MSG))
    if isinstance(content, FileTooLarge):
        return tuple(build_meta_preview_rows(width, height, FILE_TOO_LARGE_MSG))
    return ()


def render_title(preview: Preview, width: int) -> str:
    """Build the pane title: optional icon, then the title shrunk to fit."""
    title = shrink_with_ellipsis(replace_non_printable(preview.title), max(0, width - 4))
    if preview.icon:
        return f" {preview.icon} {title} "
    return f" {title} "


class PreviewPane:
    """Renders previews and remembers rows for settled previews."""

    def __init__(
        self,
        rendered_cache: RenderedPreviewCache | None = None,
        tab_width: int = DEFAULT_TAB_WIDTH,
    ) -> None:
        self.rendered_cache = rendered_cache if rendered_cache is not None else RenderedPreviewCache()
        self.tab_width = tab_width
        self._size: tuple[int, int] | None = None

    def rows(self, entry: Entry, preview: Preview, command: PreviewCommand, width: int, height: int) -> tuple[str, ...]:
        """Return all rows for ``preview``, from the rendered cache when possible.

        Cached rows are only valid for one pane size; a resize drops them.
        """
        if self._size != (width, height):
            if self._size is not None:
                logger.debug("pane resized to %sx%s, clearing rendered previews", width, height)
                self.rendered_cache.clear()
            self._size = (width, height)

        key = rendered_cache_key(entry, command)
        cached = self.rendered_cache.get(key)
        if cached is not None:
            return cached

        logger.debug("preview not found in rendered cache, key: %r", key)
        rendered = build_preview_rows(preview, width, height, self.tab_width)
        if not preview.stale:
            self.rendered_cache.insert(key, rendered)
        return rendered

    def render(
        self,
        entry: Entry,
        preview: Preview,
        command: PreviewCommand,
        width: int,
        height: int,
        scroll: int = 0,
    ) -> list[str]:
        """Return the visible ``height`` rows starting at ``scroll`` (clamped)."""
        if width <= 0 or height <= 0:
            return []
        all_rows = self.rows(entry, preview, command, width, height)
        max_scroll = max(0, len(all_rows) - height)
        start = min(max(0, scroll), max_scroll)
        return list(all_rows[start : start + height])


__all__ = [
    "PreviewPane",
    "build_meta_preview_rows",
    "build_preview_rows",
    "render_styled_line",
    "render_title",
    "rendered_cache_key",
]
