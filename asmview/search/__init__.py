"""Term search, line filtering, and highlight spans over listings."""

from __future__ import annotations

from .engine import LinePresentation, ListingView, MatchSpan, compile_term, find_match_spans

__all__ = [
    "LinePresentation",
    "ListingView",
    "MatchSpan",
    "compile_term",
    "find_match_spans",
]
