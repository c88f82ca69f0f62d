"""Preview value types.

``PreviewContent`` is a closed union; renderers dispatch on the concrete
variant while the pipeline only moves previews around.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from ..ansi import Span, parse_ansi

PREVIEW_NOT_SUPPORTED_MSG = "Preview for this file type is not supported"
FILE_TOO_LARGE_MSG = "File too large"
LOADING_MSG = "Loading..."


@dataclass(frozen=True)
class Empty:
    pass


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class FileTooLarge:
    pass


@dataclass(frozen=True)
class NotSupported:
    pass


@dataclass(frozen=True)
class AnsiText:
    """Command output: the decoded text plus its parsed styled lines."""

    text: str
    lines: tuple[tuple[Span, ...], ...] = field(default=(), compare=False, repr=False)

    @classmethod
    def from_output(cls, output: bytes | str) -> AnsiText:
        if isinstance(output, bytes):
            text = output.decode("utf-8", errors="replace")
        else:
            text = output
        lines = tuple(tuple(line) for line in parse_ansi(output))
        return cls(text=text, lines=lines)


PreviewContent = Empty | Loading | FileTooLarge | NotSupported | AnsiText


@dataclass(frozen=True)
class Preview:
    """Preview shown for one entry.

    ``stale`` marks a result that is known to be superseded by a running
    recomputation but is fine to display meanwhile.
    """

    title: str = ""
    content: PreviewContent = field(default_factory=Empty)
    icon: str | None = None
    stale: bool = False

    def as_stale(self) -> Preview:
        return replace(self, stale=True)

    def total_lines(self) -> int:
        """Line count of text content, used for scroll bounds."""
        if not isinstance(self.content, AnsiText):
            return 0
        text = self.content.text
        if not text:
            return 0
        return text.count("\n") + (0 if text.endswith("\n") else 1)


def not_supported(title: str) -> Preview:
    return Preview(title=title, content=NotSupported())


def file_too_large(title: str) -> Preview:
    return Preview(title=title, content=FileTooLarge())


def loading(title: str) -> Preview:
    return Preview(title=title, content=Loading())


__all__ = [
    "FILE_TOO_LARGE_MSG",
    "LOADING_MSG",
    "PREVIEW_NOT_SUPPORTED_MSG",
    "AnsiText",
    "Empty",
    "FileTooLarge",
    "Loading",
    "NotSupported",
    "Preview",
    "PreviewContent",
    "file_too_large",
    "loading",
    "not_supported",
]
