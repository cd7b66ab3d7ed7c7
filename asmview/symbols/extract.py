"""Single-pass extractors for imports, exports, strings, and binary layout."""

from __future__ import annotations

from ..errors import MissingSection
from ..output.sanitize import sanitize_output
from .config import (
    DEFAULT_ENTRY_ADDRESS,
    DEFAULT_SECTION_SIZE,
    ENTRY_VADDR_RE,
    EXECUTABLE_SECTION_NAME,
    HEX_LITERAL_RE,
    SECTION_SIZE_RE,
    SECTION_VADDR_RE,
    STRING_CONTENT_TAGS,
)
from .names import canonical_address, format_address, parse_address
from .types import ExportEntry, ImportEntry, SectionSpan, StringEntry

# Table chrome radare2 prints around ``ii``/``iE`` rows.
_TABLE_HEADER_FIRST_TOKENS = ("nth", "[imports]", "[exports]", "[symbols]")


def _data_lines(output: str | None) -> list[str]:
    return [line.strip() for line in sanitize_output(output, prefix_only=True).splitlines()]


def _is_table_chrome(tokens: list[str]) -> bool:
    first = tokens[0].lower()
    if first in _TABLE_HEADER_FIRST_TOKENS:
        return True
    return all(ch in "-―=" for ch in first)


def _symbol_rows(output: str | None) -> list[tuple[str, str | None]]:
    rows: list[tuple[str, str | None]] = []
    for line in _data_lines(output):
        tokens = line.split()
        if not tokens or _is_table_chrome(tokens):
            continue
        offset = next((canonical_address(tok) for tok in tokens if HEX_LITERAL_RE.match(tok)), None)
        rows.append((tokens[-1], offset))
    return rows


def parse_imports(output: str | None) -> list[ImportEntry]:
    """One entry per ``ii`` row: last token is the symbol, first hex token the address."""
    return [ImportEntry(symbol=symbol, offset=offset) for symbol, offset in _symbol_rows(output)]


def parse_exports(output: str | None) -> list[ExportEntry]:
    """One entry per ``iE`` row, shaped like :func:`parse_imports`."""
    return [ExportEntry(symbol=symbol, offset=offset) for symbol, offset in _symbol_rows(output)]


def _string_address(tokens: list[str]) -> str:
    if HEX_LITERAL_RE.match(tokens[0]):
        return canonical_address(tokens[0]) or tokens[0]
    # Tabular ``iz`` output leads with a row index; the vaddr column follows.
    for token in tokens[1:]:
        if HEX_LITERAL_RE.match(token):
            return canonical_address(token) or token
    return tokens[0]


def parse_strings(output: str | None) -> list[StringEntry]:
    """Text after the last ``ascii``/``wide`` tag, whitespace collapsed; empty payloads dropped."""
    entries: list[StringEntry] = []
    for line in _data_lines(output):
        tag_start = max(line.rfind(tag) for tag in STRING_CONTENT_TAGS)
        if tag_start == -1:
            continue
        text = " ".join(line[tag_start:].split()[1:])
        if not text:
            continue
        entries.append(StringEntry(offset=_string_address(line.split()), text=text))
    return entries


def parse_entry_address(output: str | None) -> str:
    """Read the entry point from ``ie``; fall back to the well-known default."""
    clean = sanitize_output(output, prefix_only=True)
    match = ENTRY_VADDR_RE.search(clean)
    if match is not None:
        return canonical_address(match.group(1)) or format_address(DEFAULT_ENTRY_ADDRESS)
    for line in clean.splitlines():
        tokens = line.split()
        if tokens and HEX_LITERAL_RE.match(tokens[0]):
            return canonical_address(tokens[0]) or format_address(DEFAULT_ENTRY_ADDRESS)
    return format_address(DEFAULT_ENTRY_ADDRESS)


def parse_executable_section(output: str | None) -> SectionSpan:
    """Locate the ``.text`` row of ``iS`` and return its address and size.

    ``vaddr=``/``sz=`` pairs are preferred; otherwise the first hex token is
    the address and the next distinct hex token the size. Raises
    ``MissingSection`` when no row mentions the section.
    """
    row = next(
        (line for line in _data_lines(output) if EXECUTABLE_SECTION_NAME in line),
        None,
    )
    if row is None:
        raise MissingSection(f"could not find {EXECUTABLE_SECTION_NAME} section")

    vaddr_match = SECTION_VADDR_RE.search(row)
    size_match = SECTION_SIZE_RE.search(row)
    if vaddr_match is not None and size_match is not None:
        vaddr = canonical_address(vaddr_match.group(1)) or "0x0"
        size = parse_address(size_match.group(1)) or DEFAULT_SECTION_SIZE
        return SectionSpan(vaddr=vaddr, size=size)

    hex_tokens = [tok for tok in row.split() if HEX_LITERAL_RE.match(tok)]
    vaddr_token = hex_tokens[0] if hex_tokens else "0x0"
    size_token = next((tok for tok in hex_tokens[1:] if tok != vaddr_token), None)
    size = parse_address(size_token) if size_token is not None else None
    return SectionSpan(vaddr=canonical_address(vaddr_token) or "0x0", size=size or DEFAULT_SECTION_SIZE)
