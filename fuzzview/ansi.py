"""ANSI escape parsing into styled lines.

Turns raw command output into ``list[list[Span]]`` where each span carries the
SGR style in effect for its text. Only Select Graphic Rendition codes change
style; cursor movement, OSC titles/hyperlinks and other escapes are consumed
and dropped. Parsing never raises and always advances on garbled input.
"""

from __future__ import annotations

from dataclasses import dataclass

ESC = 0x1B
BEL = 0x07

# Modifier bit flags carried on ``Style.modifiers``.
BOLD = 1 << 0
DIM = 1 << 1
ITALIC = 1 << 2
UNDERLINED = 1 << 3
SLOW_BLINK = 1 << 4
RAPID_BLINK = 1 << 5
REVERSED = 1 << 6
HIDDEN = 1 << 7
CROSSED_OUT = 1 << 8

_MODIFIER_CODES: tuple[tuple[int, int], ...] = (
    (BOLD, 1),
    (DIM, 2),
    (ITALIC, 3),
    (UNDERLINED, 4),
    (SLOW_BLINK, 5),
    (RAPID_BLINK, 6),
    (REVERSED, 7),
    (HIDDEN, 8),
    (CROSSED_OUT, 9),
)
_SET_MODIFIERS = {code: flag for flag, code in _MODIFIER_CODES}
_CLEAR_MODIFIERS = {
    22: BOLD | DIM,
    23: ITALIC,
    24: UNDERLINED,
    25: SLOW_BLINK | RAPID_BLINK,
    27: REVERSED,
    28: HIDDEN,
    29: CROSSED_OUT,
}

# SGR parameters longer than this can never be a meaningful code; they are
# mapped to an out-of-range value instead of being converted.
_MAX_PARAM_DIGITS = 9
_OUT_OF_RANGE = 1 << 31


@dataclass(frozen=True)
class NamedColor:
    """One of the 16 terminal palette colors (``index`` 0-7 normal, 8-15 bright)."""

    name: str
    index: int


@dataclass(frozen=True)
class IndexedColor:
    """256-color palette entry selected with ``38;5;N`` / ``48;5;N``."""

    index: int


@dataclass(frozen=True)
class RgbColor:
    """24-bit color selected with ``38;2;R;G;B`` / ``48;2;R;G;B``."""

    r: int
    g: int
    b: int


Color = NamedColor | IndexedColor | RgbColor

BLACK = NamedColor("black", 0)
RED = NamedColor("red", 1)
GREEN = NamedColor("green", 2)
YELLOW = NamedColor("yellow", 3)
BLUE = NamedColor("blue", 4)
MAGENTA = NamedColor("magenta", 5)
CYAN = NamedColor("cyan", 6)
WHITE = NamedColor("white", 7)
BRIGHT_BLACK = NamedColor("bright_black", 8)
BRIGHT_RED = NamedColor("bright_red", 9)
BRIGHT_GREEN = NamedColor("bright_green", 10)
BRIGHT_YELLOW = NamedColor("bright_yellow", 11)
BRIGHT_BLUE = NamedColor("bright_blue", 12)
BRIGHT_MAGENTA = NamedColor("bright_magenta", 13)
BRIGHT_CYAN = NamedColor("bright_cyan", 14)
BRIGHT_WHITE = NamedColor("bright_white", 15)

NAMED_COLORS: tuple[NamedColor, ...] = (
    BLACK,
    RED,
    GREEN,
    YELLOW,
    BLUE,
    MAGENTA,
    CYAN,
    WHITE,
    BRIGHT_BLACK,
    BRIGHT_RED,
    BRIGHT_GREEN,
    BRIGHT_YELLOW,
    BRIGHT_BLUE,
    BRIGHT_MAGENTA,
    BRIGHT_CYAN,
    BRIGHT_WHITE,
)


@dataclass(frozen=True)
class Style:
    """Text style; ``None`` colors mean the terminal default."""

    fg: Color | None = None
    bg: Color | None = None
    modifiers: int = 0

    def has(self, modifier: int) -> bool:
        return bool(self.modifiers & modifier)


DEFAULT_STYLE = Style()


@dataclass(frozen=True)
class Span:
    """A run of text rendered with a single style."""

    text: str
    style: Style = DEFAULT_STYLE


StyledLine = list[Span]


def line_text(spans: list[Span] | tuple[Span, ...]) -> str:
    """Return the visible text of one parsed line."""
    return "".join(span.text for span in spans)


def parse_ansi(data: bytes | str) -> list[StyledLine]:
    """Parse raw terminal output into styled lines.

    Lines split on ``\\n`` (a preceding ``\\r`` is dropped); a trailing newline
    does not add an empty line. Style state carries across line breaks the
    way a terminal keeps it. Invalid UTF-8 is replaced, never raised.
    """
    if isinstance(data, str):
        data = data.encode("utf-8", errors="replace")

    raw_lines = data.split(b"\n")
    if len(raw_lines) > 1 and raw_lines[-1] == b"":
        raw_lines.pop()

    lines: list[StyledLine] = []
    style = DEFAULT_STYLE
    for raw in raw_lines:
        if raw.endswith(b"\r"):
            raw = raw[:-1]
        spans, style = _parse_line(raw, style)
        lines.append(spans)
    return lines


def _parse_line(raw: bytes, style: Style) -> tuple[StyledLine, Style]:
    spans: StyledLine = []
    i = 0
    n = len(raw)
    while i < n:
        if raw[i] == ESC:
            i, style = _consume_escape(raw, i, style)
            continue
        end = raw.find(b"\x1b", i)
        if end < 0:
            end = n
        spans.append(Span(raw[i:end].decode("utf-8", errors="replace"), style))
        i = end
    return spans, style


def _consume_escape(raw: bytes, i: int, style: Style) -> tuple[int, Style]:
    """Consume one escape sequence starting at ``raw[i] == ESC``.

    Returns the index after the sequence and the possibly updated style. The
    returned index is always greater than ``i``.
    """
    n = len(raw)
    j = i + 1
    if j >= n:
        return n, style

    introducer = raw[j]
    if introducer == 0x5B:  # [
        return _consume_csi(raw, j + 1, style)
    if introducer == 0x5D:  # ]
        return _consume_osc(raw, j + 1), style
    if 0x20 <= introducer <= 0x2F:
        # nF escape such as ``ESC ( B``: intermediates then one final byte.
        k = j
        while k < n and 0x20 <= raw[k] <= 0x2F:
            k += 1
        if k < n and 0x30 <= raw[k] <= 0x7E:
            k += 1
        return k, style
    if 0x30 <= introducer <= 0x7E:
        return j + 1, style
    return j, style


def _consume_csi(raw: bytes, start: int, style: Style) -> tuple[int, Style]:
    n = len(raw)
    k = start
    while k < n and 0x30 <= raw[k] <= 0x3F:
        k += 1
    params_end = k
    while k < n and 0x20 <= raw[k] <= 0x2F:
        k += 1
    if k >= n:
        return n, style

    final = raw[k]
    if not 0x40 <= final <= 0x7E:
        # Interrupted sequence: drop what was scanned, resume at the odd byte.
        return k, style
    if final == 0x6D and params_end == k:  # m
        return k + 1, apply_sgr(style, raw[start:params_end])
    return k + 1, style


def _consume_osc(raw: bytes, start: int) -> int:
    n = len(raw)
    k = start
    while k < n:
        if raw[k] == BEL:
            return k + 1
        if raw[k] == ESC and k + 1 < n and raw[k + 1] == 0x5C:  # ESC \
            return k + 2
        k += 1
    return n


def _param_value(param: bytes) -> int:
    if not param:
        return 0
    if len(param) > _MAX_PARAM_DIGITS:
        return _OUT_OF_RANGE
    return int(param)


def apply_sgr(style: Style, body: bytes) -> Style:
    """Apply one SGR parameter list (the bytes between ``ESC[`` and ``m``).

    An empty body is an implicit reset. Bodies with private markers or
    colon sub-parameters are ignored. A malformed extended color stops
    processing; codes before it still apply.
    """
    if not body:
        return DEFAULT_STYLE
    if any(not (0x30 <= byte <= 0x39 or byte == 0x3B) for byte in body):
        return style

    codes = [_param_value(param) for param in body.split(b";")]
    fg = style.fg
    bg = style.bg
    modifiers = style.modifiers
    idx = 0
    while idx < len(codes):
        code = codes[idx]
        idx += 1
        if code == 0:
            fg = None
            bg = None
            modifiers = 0
        elif code in _SET_MODIFIERS:
            modifiers |= _SET_MODIFIERS[code]
        elif code in _CLEAR_MODIFIERS:
            modifiers &= ~_CLEAR_MODIFIERS[code]
        elif 30 <= code <= 37:
            fg = NAMED_COLORS[code - 30]
        elif 90 <= code <= 97:
            fg = NAMED_COLORS[code - 90 + 8]
        elif 40 <= code <= 47:
            bg = NAMED_COLORS[code - 40]
        elif 100 <= code <= 107:
            bg = NAMED_COLORS[code - 100 + 8]
        elif code == 39:
            fg = None
        elif code == 49:
            bg = None
        elif code in (38, 48):
            color, idx = _extended_color(codes, idx)
            if color is None:
                break
            if code == 38:
                fg = color
            else:
                bg = color
    return Style(fg=fg, bg=bg, modifiers=modifiers)


def _extended_color(codes: list[int], idx: int) -> tuple[Color | None, int]:
    """Read the ``5;N`` or ``2;R;G;B`` tail of a 38/48 code."""
    if idx >= len(codes):
        return None, idx
    mode = codes[idx]
    if mode == 5:
        if idx + 1 < len(codes) and codes[idx + 1] <= 255:
            return IndexedColor(codes[idx + 1]), idx + 2
        return None, idx
    if mode == 2:
        channels = codes[idx + 1 : idx + 4]
        if len(channels) == 3 and all(value <= 255 for value in channels):
            return RgbColor(*channels), idx + 4
    return None, idx


def _color_params(color: Color, background: bool) -> list[str]:
    if isinstance(color, NamedColor):
        if color.index < 8:
            return [str((40 if background else 30) + color.index)]
        return [str((100 if background else 90) + color.index - 8)]
    prefix = "48" if background else "38"
    if isinstance(color, IndexedColor):
        return [prefix, "5", str(color.index)]
    return [prefix, "2", str(color.r), str(color.g), str(color.b)]


def style_to_sgr(style: Style) -> str:
    """Encode ``style`` as one SGR sequence; the default style encodes to ``""``."""
    if style == DEFAULT_STYLE:
        return ""
    params = [str(code) for flag, code in _MODIFIER_CODES if style.modifiers & flag]
    if style.fg is not None:
        params.extend(_color_params(style.fg, background=False))
    if style.bg is not None:
        params.extend(_color_params(style.bg, background=True))
    return f"\033[{';'.join(params)}m"


__all__ = [
    "BOLD",
    "DIM",
    "ITALIC",
    "UNDERLINED",
    "SLOW_BLINK",
    "RAPID_BLINK",
    "REVERSED",
    "HIDDEN",
    "CROSSED_OUT",
    "Color",
    "NamedColor",
    "IndexedColor",
    "RgbColor",
    "NAMED_COLORS",
    "Style",
    "DEFAULT_STYLE",
    "Span",
    "StyledLine",
    "apply_sgr",
    "line_text",
    "parse_ansi",
    "style_to_sgr",
]
