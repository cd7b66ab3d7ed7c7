"""Search, filter, and highlight behavior over normalized listings.

Verifies the presentation layer never mutates the listing document and
that repeated searches do not compound highlight markers.
"""

from __future__ import annotations

import unittest

from asmview.listing import normalize_listing
from asmview.search import ListingView, MatchSpan, find_match_spans

LISTING = "\n".join(
    [
        "/ (fcn) sym.main ()",
        "0x1000 89e5 mov ebp, esp",
        "0x1002 8b45 mov eax, dword [ebp + 8]",
        "0x1005 01c0 add eax, eax",
        "0x1007 89c3 mov ebx, eax",
        "0x1009 c3 ret",
    ]
)


class MatchSpanTests(unittest.TestCase):
    def test_case_insensitive_non_overlapping_matches(self) -> None:
        self.assertEqual(
            find_match_spans("abcABCabc", "abc"),
            (MatchSpan(0, 3), MatchSpan(3, 6), MatchSpan(6, 9)),
        )

    def test_term_is_matched_literally(self) -> None:
        self.assertEqual(find_match_spans("dword [ebp + 8]", "[ebp"), (MatchSpan(6, 10),))
        self.assertEqual(find_match_spans("a.c abc", "a.c"), (MatchSpan(0, 3),))

    def test_empty_term_or_text(self) -> None:
        self.assertEqual(find_match_spans("text", ""), ())
        self.assertEqual(find_match_spans("", "x"), ())


class ListingViewTests(unittest.TestCase):
    def setUp(self) -> None:
        self.document = normalize_listing(LISTING)
        self.view = ListingView(self.document)

    def test_filter_hides_exactly_non_matching_lines(self) -> None:
        original_lines = self.document.lines
        self.view.apply_filter("mov")
        hidden = [item.index for item in self.view.presentation() if not item.visible]
        self.assertEqual(hidden, [3, 5])
        self.view.clear_filter()
        self.assertTrue(all(item.visible for item in self.view.presentation()))
        self.assertIs(self.document.lines, original_lines)
        self.assertEqual([line.search_text() for line in self.document.lines], [
            "Function: main",
            "0x1000 89e5 mov ebp, esp",
            "0x1002 8b45 mov eax, dword [ebp + 8]",
            "0x1005 01c0 add eax, eax",
            "0x1007 89c3 mov ebx, eax",
            "0x1009 c3 ret",
        ])

    def test_function_headers_stay_visible_under_filter(self) -> None:
        self.view.apply_filter("ret")
        visible = self.view.visible_lines()
        self.assertEqual([line.search_text() for line in visible], ["Function: main", "0x1009 c3 ret"])

    def test_highlight_marks_every_match(self) -> None:
        self.view.apply_highlight("EAX")
        self.assertEqual(self.view.highlights_for(3), (MatchSpan(16, 19), MatchSpan(21, 24)))
        self.assertEqual(self.view.highlights_for(1), ())
        self.assertEqual(self.view.first_match_index(), 2)

    def test_highlight_is_idempotent(self) -> None:
        self.view.apply_highlight("mov")
        first = self.view.presentation()
        self.view.clear_highlights()
        self.assertTrue(all(not item.highlights for item in self.view.presentation()))
        self.view.apply_highlight("mov")
        self.assertEqual(self.view.presentation(), first)
        self.view.apply_highlight("mov")
        self.assertEqual(self.view.presentation(), first)

    def test_search_resets_both_layers(self) -> None:
        self.view.search("mov", filter_enabled=True)
        self.assertEqual(len(self.view.visible_lines()), 4)
        self.view.search("ret")
        self.assertEqual(len(self.view.visible_lines()), len(self.document))
        self.assertEqual(self.view.highlights_for(1), ())
        self.assertEqual(self.view.highlights_for(5), (MatchSpan(10, 13),))

    def test_blank_search_clears_everything(self) -> None:
        self.view.search("mov", filter_enabled=True)
        self.view.search("   ", filter_enabled=True)
        self.assertIsNone(self.view.filter_term)
        self.assertIsNone(self.view.highlight_term)
        self.assertTrue(all(item.visible and not item.highlights for item in self.view.presentation()))

    def test_header_text_is_searchable(self) -> None:
        self.view.search("main")
        self.assertEqual(self.view.highlights_for(0), (MatchSpan(10, 14),))

    def test_first_match_skips_hidden_lines(self) -> None:
        self.view.apply_highlight("ebp")
        self.view.apply_filter("ebx")
        self.assertIsNone(self.view.first_match_index())


if __name__ == "__main__":
    unittest.main()
