"""Terminal rendering for listings, symbol tables, and symbol details.

Listing rows are built from typed token segments whose text concatenates to
``DisassemblyLine.search_text()``, so highlight spans computed by the search
engine map directly onto rendered cells. Colours come from Pygments'
``TerminalFormatter``; search hits are layered on top in reverse video.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Iterable, Sequence

import pygments
from pygments.formatters import TerminalFormatter
from pygments.token import Token

from .listing.types import DisassemblyLine, LineKind, ListingDocument
from .output.sanitize import ANSI_ESCAPE_RE
from .search.engine import ListingView, MatchSpan
from .session import SymbolDetail
from .symbols.types import ExportEntry, ImportEntry, StringEntry, SymbolEntry

HIGHLIGHT_START = "\033[7;1m"
HIGHLIGHT_END = "\033[27;22m"
RESET = "\033[0m"
SEQUENCE_WIDTH = 5
NO_FUNCTIONS_MESSAGE = "No functions found"
MISSING_ADDRESS = "-"

TokenType = type(Token)

OPERAND_TOKENS: dict[str, TokenType] = {
    "register": Token.Name.Variable,
    "section": Token.Name.Namespace,
    "address": Token.Literal.Number.Hex,
}

_FORMATTERS: dict[str, TerminalFormatter] = {}

Segment = tuple[TokenType, str]


def _formatter(background: str = "dark") -> TerminalFormatter:
    """Return cached terminal formatter for a background kind."""
    formatter = _FORMATTERS.get(background)
    if formatter is None:
        formatter = TerminalFormatter(bg=background)
        _FORMATTERS[background] = formatter
    return formatter


def _operand_segments(line: DisassemblyLine) -> list[Segment]:
    operands = line.operands or ""
    out: list[Segment] = []
    cursor = 0
    for span in line.operand_spans:
        if span.start > cursor:
            out.append((Token.Text, operands[cursor : span.start]))
        out.append((OPERAND_TOKENS.get(span.kind, Token.Text), operands[span.start : span.end]))
        cursor = span.end
    if cursor < len(operands):
        out.append((Token.Text, operands[cursor:]))
    return out


def line_segments(line: DisassemblyLine) -> list[Segment]:
    """Split a line into token segments whose text joins to ``line.search_text()``."""
    if line.kind is LineKind.FUNCTION_HEADER:
        return [(Token.Keyword, "Function:"), (Token.Text, " "), (Token.Name.Function, line.name or "")]
    if line.kind is LineKind.SECTION_HEADER:
        return [(Token.Name.Tag, f"{line.name or ''}:")]
    if line.kind is LineKind.PLAIN_TEXT:
        return [(Token.Text, line.text or "")]

    parts: list[list[Segment]] = []
    if line.address:
        parts.append([(Token.Literal.Number.Hex, line.address)])
    if line.bytes:
        parts.append([(Token.Comment.Preproc, line.bytes)])
    if line.mnemonic:
        parts.append([(Token.Keyword, line.mnemonic)])
    if line.operands:
        parts.append(_operand_segments(line))
    if line.comment:
        parts.append([(Token.Comment.Single, f";{line.comment}")])

    out: list[Segment] = []
    for part in parts:
        if out:
            out.append((Token.Text, " "))
        out.extend(part)
    return out


def _split_at_highlights(
    segments: Sequence[Segment],
    highlights: Sequence[MatchSpan],
) -> list[tuple[TokenType, str, bool]]:
    """Cut segments at highlight boundaries and flag the highlighted pieces."""
    bounds = sorted({edge for span in highlights for edge in (span.start, span.end)})
    out: list[tuple[TokenType, str, bool]] = []
    offset = 0
    for ttype, text in segments:
        seg_start = offset
        seg_end = offset + len(text)
        cuts = [seg_start, *(b for b in bounds if seg_start < b < seg_end), seg_end]
        for start, end in zip(cuts, cuts[1:]):
            if start == end:
                continue
            marked = any(span.start <= start and end <= span.end for span in highlights)
            out.append((ttype, text[start - seg_start : end - seg_start], marked))
        offset = seg_end
    return out


def _sequence_column(line: DisassemblyLine) -> str:
    if line.sequence is None:
        return " " * (SEQUENCE_WIDTH + 1)
    return f"{line.sequence:>{SEQUENCE_WIDTH}} "


def render_line(
    line: DisassemblyLine,
    highlights: Sequence[MatchSpan] = (),
    no_color: bool = False,
) -> str:
    """Render one listing row, unclipped."""
    prefix = _sequence_column(line)
    if no_color:
        return prefix + line.search_text()

    formatter = _formatter()
    out: list[str] = [prefix]
    for ttype, text, marked in _split_at_highlights(line_segments(line), highlights):
        piece = pygments.format([(ttype, text)], formatter)
        if marked:
            piece = f"{HIGHLIGHT_START}{piece}{HIGHLIGHT_END}"
        out.append(piece)
    return "".join(out)


def char_display_width(ch: str) -> int:
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled row to ``max_cols`` display columns, keeping escapes verbatim."""
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        width = char_display_width(ch)
        if col + width > max_cols:
            break
        out.append(ch)
        col += width
        i += 1
    return "".join(out)


def _finish_rows(rows: Iterable[str], max_cols: int | None) -> str:
    out: list[str] = []
    for row in rows:
        if max_cols is not None:
            row = clip_ansi_line(row, max_cols)
        out.append(row)
        if "\033" in row:
            out.append(RESET)
        out.append("\n")
    return "".join(out)


def render_listing(view: ListingView, no_color: bool = False, max_cols: int | None = None) -> str:
    """Render every visible line of ``view`` with its search highlights."""
    rows = (
        render_line(item.line, item.highlights, no_color)
        for item in view.presentation()
        if item.visible
    )
    return _finish_rows(rows, max_cols)


def render_document(document: ListingDocument, no_color: bool = False, max_cols: int | None = None) -> str:
    return render_listing(ListingView(document), no_color, max_cols)


def listing_text(document: ListingDocument) -> str:
    """Plain one-line-per-row listing used as language-model context."""
    return "\n".join(line.search_text() for line in document.lines)


def _table(rows: Sequence[tuple[str, str]]) -> list[str]:
    width = max((len(left) for left, _right in rows), default=0)
    return [f"{left:<{width}}  {right}" for left, right in rows]


def render_functions(functions: Sequence[SymbolEntry], max_cols: int | None = None) -> str:
    if not functions:
        return _finish_rows([NO_FUNCTIONS_MESSAGE], max_cols)
    return _finish_rows(_table([(entry.offset, entry.name) for entry in functions]), max_cols)


def render_symbols(entries: Sequence[ImportEntry | ExportEntry], max_cols: int | None = None) -> str:
    rows = [(entry.offset or MISSING_ADDRESS, entry.symbol) for entry in entries]
    return _finish_rows(_table(rows), max_cols)


def render_strings(entries: Sequence[StringEntry], max_cols: int | None = None) -> str:
    return _finish_rows(_table([(entry.offset, entry.text) for entry in entries]), max_cols)


def render_symbol_detail(detail: SymbolDetail, no_color: bool = False, max_cols: int | None = None) -> str:
    header = f"{detail.symbol} @ {detail.offset or MISSING_ADDRESS}"
    if detail.context is None:
        return _finish_rows([header, "No address available for this symbol."], max_cols)
    parts = [
        _finish_rows([header, "", "Disassembly:"], max_cols),
        render_document(detail.context, no_color, max_cols),
        _finish_rows(["", "Cross-references:", *(detail.references or "").splitlines()], max_cols),
    ]
    return "".join(parts)
