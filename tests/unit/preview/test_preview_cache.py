"""Bounded preview cache tests."""

from __future__ import annotations

import threading
import unittest

from fuzzview.preview.cache import (
    DEFAULT_PREVIEW_CACHE_SIZE,
    DEFAULT_RENDERED_PREVIEW_CACHE_SIZE,
    PreviewCache,
    RenderedPreviewCache,
)
from fuzzview.preview.types import AnsiText, Preview


def text_preview(text: str) -> Preview:
    return Preview(title=text, content=AnsiText.from_output(text))


class PreviewCacheTests(unittest.TestCase):
    def test_default_capacities(self) -> None:
        self.assertEqual(PreviewCache().capacity, DEFAULT_PREVIEW_CACHE_SIZE)
        self.assertEqual(RenderedPreviewCache().capacity, DEFAULT_RENDERED_PREVIEW_CACHE_SIZE)
        self.assertEqual(DEFAULT_PREVIEW_CACHE_SIZE, 100)
        self.assertEqual(DEFAULT_RENDERED_PREVIEW_CACHE_SIZE, 25)

    def test_inserting_past_capacity_drops_earliest_key(self) -> None:
        cache = PreviewCache(capacity=3)
        for idx in range(4):
            cache.insert(f"key{idx}", text_preview(str(idx)))

        self.assertEqual(len(cache), 3)
        self.assertIsNone(cache.get("key0"))
        self.assertNotIn("key0", cache)
        for idx in range(1, 4):
            self.assertEqual(cache.get(f"key{idx}"), text_preview(str(idx)))

    def test_insert_overwrites_existing_key_without_growing(self) -> None:
        cache = PreviewCache(capacity=2)
        first = text_preview("first")
        second = text_preview("second")
        cache.insert("k", first)
        cache.insert("k", second)

        self.assertIs(cache.get("k"), second)
        self.assertEqual(len(cache), 1)

    def test_overwrite_does_not_refresh_eviction_order(self) -> None:
        cache = PreviewCache(capacity=2)
        cache.insert("a", text_preview("a"))
        cache.insert("b", text_preview("b"))
        cache.insert("a", text_preview("a2"))
        cache.insert("c", text_preview("c"))

        self.assertIsNone(cache.get("a"))
        self.assertIsNotNone(cache.get("b"))
        self.assertIsNotNone(cache.get("c"))

    def test_clear(self) -> None:
        cache = PreviewCache(capacity=2)
        cache.insert("a", text_preview("a"))
        cache.clear()
        self.assertEqual(len(cache), 0)
        cache.insert("b", text_preview("b"))
        cache.insert("c", text_preview("c"))
        self.assertEqual(len(cache), 2)

    def test_concurrent_inserts_stay_bounded(self) -> None:
        cache = PreviewCache(capacity=10)
        preview = text_preview("x")

        def writer(prefix: str) -> None:
            for idx in range(200):
                cache.insert(f"{prefix}-{idx}", preview)

        threads = [threading.Thread(target=writer, args=(str(n),)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(cache), 10)


class RenderedPreviewCacheTests(unittest.TestCase):
    def test_stores_rendered_rows(self) -> None:
        cache = RenderedPreviewCache(capacity=1)
        cache.insert("a", ("row",))
        cache.insert("b", ("other",))
        self.assertIsNone(cache.get("a"))
        self.assertEqual(cache.get("b"), ("other",))


if __name__ == "__main__":
    unittest.main()
