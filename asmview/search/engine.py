"""Case-insensitive search over normalized listing lines.

Matching runs on ``DisassemblyLine.search_text()``. The document is never
touched: filtering and highlighting live in a ``ListingView`` that can be
cleared back to the unmarked presentation at any time.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..listing.types import DisassemblyLine, LineKind, ListingDocument


@dataclass(frozen=True)
class MatchSpan:
    start: int
    end: int


@dataclass(frozen=True)
class LinePresentation:
    index: int
    line: DisassemblyLine
    visible: bool
    highlights: tuple[MatchSpan, ...]


def compile_term(term: str) -> re.Pattern[str] | None:
    """Compile ``term`` as a literal, case-insensitive pattern."""
    if not term:
        return None
    return re.compile(re.escape(term), re.IGNORECASE)


def find_match_spans(text: str, term: str) -> tuple[MatchSpan, ...]:
    """Return every non-overlapping match of ``term`` in ``text``, left to right."""
    pattern = compile_term(term)
    if pattern is None or not text:
        return ()
    return tuple(MatchSpan(*match.span()) for match in pattern.finditer(text))


def _filterable(line: DisassemblyLine) -> bool:
    # Function headers frame their block and stay visible under a filter.
    return line.kind is not LineKind.FUNCTION_HEADER


class ListingView:
    """Filter and highlight state layered over an immutable listing."""

    def __init__(self, document: ListingDocument) -> None:
        self.document = document
        self.filter_term: str | None = None
        self.highlight_term: str | None = None
        self._hidden: frozenset[int] = frozenset()
        self._highlights: dict[int, tuple[MatchSpan, ...]] = {}

    def apply_filter(self, term: str) -> None:
        """Hide lines that do not contain ``term``; replaces any previous filter."""
        self.clear_filter()
        pattern = compile_term(term)
        if pattern is None:
            return
        self.filter_term = term
        self._hidden = frozenset(
            idx
            for idx, line in enumerate(self.document.lines)
            if _filterable(line) and pattern.search(line.search_text()) is None
        )

    def clear_filter(self) -> None:
        self.filter_term = None
        self._hidden = frozenset()

    def apply_highlight(self, term: str) -> None:
        """Mark every match of ``term``; replaces any previous highlight."""
        self.clear_highlights()
        if not term:
            return
        self.highlight_term = term
        for idx, line in enumerate(self.document.lines):
            spans = find_match_spans(line.search_text(), term)
            if spans:
                self._highlights[idx] = spans

    def clear_highlights(self) -> None:
        self.highlight_term = None
        self._highlights = {}

    def search(self, term: str, filter_enabled: bool = False) -> None:
        """Reset both layers, then highlight ``term`` and optionally filter by it."""
        self.clear_highlights()
        self.clear_filter()
        term = term.strip()
        if not term:
            return
        if filter_enabled:
            self.apply_filter(term)
        self.apply_highlight(term)

    def is_visible(self, index: int) -> bool:
        return index not in self._hidden

    def highlights_for(self, index: int) -> tuple[MatchSpan, ...]:
        return self._highlights.get(index, ())

    def presentation(self) -> list[LinePresentation]:
        return [
            LinePresentation(
                index=idx,
                line=line,
                visible=self.is_visible(idx),
                highlights=self.highlights_for(idx),
            )
            for idx, line in enumerate(self.document.lines)
        ]

    def visible_lines(self) -> list[DisassemblyLine]:
        return [line for idx, line in enumerate(self.document.lines) if self.is_visible(idx)]

    def first_match_index(self) -> int | None:
        """Index of the first visible highlighted line, for scrolling to it."""
        for idx in sorted(self._highlights):
            if self.is_visible(idx):
                return idx
        return None
