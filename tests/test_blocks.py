"""Structured-block extraction tests for noisy JSON responses."""

from __future__ import annotations

import unittest

from asmview.errors import MalformedBlock, NoStructuredBlock, StructuredBlockError
from asmview.output import extract_json_array, try_extract_json_array


class ExtractJsonArrayTests(unittest.TestCase):
    def test_finds_array_between_noise(self) -> None:
        self.assertEqual(extract_json_array('junk INFO noise [{"a":1}] trailing'), [{"a": 1}])

    def test_drops_leading_diagnostic_lines(self) -> None:
        text = 'INFO: [x] Analyze all\nWARN: [ok]\n[{"name": "main", "offset": 4096}]\n'
        self.assertEqual(extract_json_array(text), [{"name": "main", "offset": 4096}])

    def test_unbalanced_brackets_raise_no_structured_block(self) -> None:
        for text in ("no brackets here", '[{"a": 1}', '{"a": 1}]', "] reversed ["):
            with self.subTest(text=text):
                with self.assertRaises(NoStructuredBlock):
                    extract_json_array(text)

    def test_undecodable_span_raises_malformed_block_with_snippet(self) -> None:
        text = "[" + "x" * 500 + "]"
        with self.assertRaises(MalformedBlock) as ctx:
            extract_json_array(text)
        self.assertTrue(ctx.exception.snippet.startswith("[xxx"))
        self.assertLessEqual(len(ctx.exception.snippet), 200)
        self.assertTrue(ctx.exception.reason)

    def test_deeply_nested_span_raises_malformed_block(self) -> None:
        text = "[" * 100000 + "]" * 100000
        with self.assertRaises(MalformedBlock) as ctx:
            extract_json_array(text)
        self.assertLessEqual(len(ctx.exception.snippet), 200)

    def test_non_object_items_are_skipped(self) -> None:
        self.assertEqual(extract_json_array('[1, "two", {"ok": true}, null]'), [{"ok": True}])

    def test_errors_share_a_common_base(self) -> None:
        self.assertTrue(issubclass(NoStructuredBlock, StructuredBlockError))
        self.assertTrue(issubclass(MalformedBlock, StructuredBlockError))


class TryExtractJsonArrayTests(unittest.TestCase):
    def test_returns_empty_list_for_unusable_blocks(self) -> None:
        self.assertEqual(try_extract_json_array(None), [])
        self.assertEqual(try_extract_json_array("nothing"), [])
        self.assertEqual(try_extract_json_array("[not json]"), [])

    def test_returns_empty_list_for_deeply_nested_block(self) -> None:
        self.assertEqual(try_extract_json_array("[" * 100000 + "]" * 100000), [])

    def test_returns_records_when_block_decodes(self) -> None:
        self.assertEqual(try_extract_json_array('[{"a": 2}]'), [{"a": 2}])


if __name__ == "__main__":
    unittest.main()
