"""Entry and preview-command datatypes shared by channels and previewers.

Entries are value objects: identity is ``(name, line_number)`` so the same
file listed with different match ranges or icons still maps to one preview.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path

DEFAULT_DELIMITER = ":"


def merge_ranges(ranges: list[tuple[int, int]] | tuple[tuple[int, int], ...]) -> tuple[tuple[int, int], ...]:
    """Collapse back-to-back ``(start, end)`` ranges into single spans.

    Only touching ranges merge (``end == next start``); overlapping or
    disjoint ranges are kept as given.
    """
    merged: list[tuple[int, int]] = []
    for start, end in ranges:
        if merged and merged[-1][1] == start:
            merged[-1] = (merged[-1][0], end)
            continue
        merged.append((start, end))
    return tuple(merged)


@dataclass(frozen=True)
class Entry:
    """One candidate row produced by a channel."""

    name: str
    line_number: int | None = None
    value: str | None = field(default=None, compare=False)
    name_match_ranges: tuple[tuple[int, int], ...] | None = field(default=None, compare=False)
    value_match_ranges: tuple[tuple[int, int], ...] | None = field(default=None, compare=False)
    icon: str | None = field(default=None, compare=False)

    def with_value(self, value: str) -> Entry:
        return replace(self, value=value)

    def with_name_match_ranges(self, ranges: list[tuple[int, int]]) -> Entry:
        return replace(self, name_match_ranges=merge_ranges(ranges))

    def with_value_match_ranges(self, ranges: list[tuple[int, int]]) -> Entry:
        return replace(self, value_match_ranges=merge_ranges(ranges))

    def with_icon(self, icon: str) -> Entry:
        return replace(self, icon=icon)

    def with_line_number(self, line_number: int) -> Entry:
        return replace(self, line_number=line_number)

    def stdout_repr(self) -> str:
        """Return the text printed for this entry when it is selected.

        Existing paths containing whitespace are single-quoted so the output
        can be pasted into a shell; a line number is appended as ``:N``.
        """
        repr_text = self.name
        if any(ch.isspace() for ch in repr_text) and Path(repr_text).exists():
            repr_text = f"'{repr_text}'"
        if self.line_number is not None:
            repr_text = f"{repr_text}:{self.line_number}"
        return repr_text


@dataclass(frozen=True)
class PreviewCommand:
    """Shell command template run against the selected entry.

    ``{}`` expands to the whole entry name and ``{N}`` to the Nth field of the
    name split on ``delimiter``.
    """

    template: str
    delimiter: str = DEFAULT_DELIMITER


__all__ = ["DEFAULT_DELIMITER", "Entry", "PreviewCommand", "merge_ranges"]
