"""Display-safe text helpers for the preview pane.

Command output can contain tabs, control bytes and zero-width marks that
would shift columns or corrupt the terminal when drawn verbatim.
"""

from __future__ import annotations

import unicodedata

NULL_SYMBOL = "␀"
ELLIPSIS = "…"
DEFAULT_TAB_WIDTH = 4


def char_display_width(ch: str) -> int:
    """Return terminal column width for one already-sanitized character.

    Combining marks consume no columns and East Asian wide/fullwidth
    characters consume two.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    return sum(char_display_width(ch) for ch in text)


def _is_non_printable(ch: str) -> bool:
    # Cf covers the byte-order mark and zero-width joiners.
    return unicodedata.category(ch) in {"Cc", "Cf", "Cs", "Co", "Cn"}


def replace_non_printable(
    text: str,
    tab_width: int = DEFAULT_TAB_WIDTH,
    replace_line_feed: bool = True,
    replace_control_characters: bool = True,
) -> str:
    """Make ``text`` safe to draw inside a pane row.

    Tabs become ``tab_width`` spaces, line feeds are removed when
    ``replace_line_feed`` is set, and other control or format characters
    (including DEL and the byte-order mark) become the ``␀`` symbol.
    """
    out: list[str] = []
    for ch in text:
        if ch == "\t":
            out.append(" " * tab_width)
        elif ch == "\n":
            if not replace_line_feed:
                out.append(ch)
        elif replace_control_characters and _is_non_printable(ch):
            out.append(NULL_SYMBOL)
        else:
            out.append(ch)
    return "".join(out)


def clip_to_width(text: str, max_cols: int) -> tuple[str, int]:
    """Trim ``text`` to at most ``max_cols`` columns.

    Returns the clipped text and the number of columns it occupies. A wide
    character that would straddle the limit is dropped entirely.
    """
    if max_cols <= 0:
        return "", 0
    out: list[str] = []
    col = 0
    for ch in text:
        w = char_display_width(ch)
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
    return "".join(out), col


def shrink_with_ellipsis(text: str, max_length: int) -> str:
    """Shorten ``text`` to ``max_length`` characters by eliding its middle."""
    if len(text) <= max_length:
        return text
    if max_length <= 1:
        return ELLIPSIS[:max(0, max_length)]
    keep = max_length - 1
    head = (keep + 1) // 2
    tail = keep - head
    return text[:head] + ELLIPSIS + (text[-tail:] if tail else "")


__all__ = [
    "DEFAULT_TAB_WIDTH",
    "ELLIPSIS",
    "NULL_SYMBOL",
    "char_display_width",
    "clip_to_width",
    "display_width",
    "replace_non_printable",
    "shrink_with_ellipsis",
]
