"""Preview value type tests."""

from __future__ import annotations

import unittest

from fuzzview.ansi import Span, Style, YELLOW
from fuzzview.preview.types import (
    AnsiText,
    Empty,
    FileTooLarge,
    Loading,
    NotSupported,
    Preview,
    file_too_large,
    loading,
    not_supported,
)


class PreviewTypesTests(unittest.TestCase):
    def test_default_preview_is_empty_and_fresh(self) -> None:
        preview = Preview()
        self.assertEqual(preview.title, "")
        self.assertIsInstance(preview.content, Empty)
        self.assertIsNone(preview.icon)
        self.assertFalse(preview.stale)

    def test_as_stale_copies_everything_else(self) -> None:
        preview = Preview(title="x", content=AnsiText.from_output("body"), icon="*")
        stale = preview.as_stale()
        self.assertTrue(stale.stale)
        self.assertFalse(preview.stale)
        self.assertEqual((stale.title, stale.content, stale.icon), ("x", preview.content, "*"))

    def test_ansi_text_parses_output(self) -> None:
        content = AnsiText.from_output(b"\x1b[33mhi\x1b[0m\nthere\n")
        self.assertEqual(content.text, "\x1b[33mhi\x1b[0m\nthere\n")
        self.assertEqual(content.lines[0], (Span("hi", Style(fg=YELLOW)),))
        self.assertEqual(len(content.lines), 2)

    def test_total_lines(self) -> None:
        self.assertEqual(Preview(content=AnsiText.from_output("a\nb")).total_lines(), 2)
        self.assertEqual(Preview(content=AnsiText.from_output("a\nb\n")).total_lines(), 2)
        self.assertEqual(Preview(content=AnsiText.from_output("")).total_lines(), 0)
        self.assertEqual(Preview().total_lines(), 0)
        self.assertEqual(loading("x").total_lines(), 0)

    def test_helper_constructors(self) -> None:
        self.assertEqual(not_supported("t"), Preview(title="t", content=NotSupported()))
        self.assertEqual(file_too_large("t"), Preview(title="t", content=FileTooLarge()))
        self.assertEqual(loading("t"), Preview(title="t", content=Loading()))

    def test_content_variants_are_distinct(self) -> None:
        self.assertNotEqual(Preview(content=Empty()), Preview(content=Loading()))
        self.assertNotEqual(Preview(content=NotSupported()), Preview(content=FileTooLarge()))


if __name__ == "__main__":
    unittest.main()
