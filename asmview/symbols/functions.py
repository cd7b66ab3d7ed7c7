"""Pure parsers for each function-discovery tier, plus merge rules.

Every parser takes one backend response and returns ``SymbolEntry`` values in
discovery order. None of them raise on malformed input; rows that yield no
usable address or name are skipped.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..output.blocks import try_extract_json_array
from ..output.sanitize import sanitize_output
from .config import (
    ADDRESS_NAME_RE,
    EMBEDDED_HEX_RUN_RE,
    FUNCTION_SYMBOL_TYPE,
    HEX_LITERAL_RE,
    HEX_LITERAL_SEARCH_RE,
    NAMESPACE_PREFIXES,
    NUMERIC_RE,
    RAW_FUNCTION_HINTS,
    RAW_HEADER_RE,
    RAW_QUALIFIED_NAME_RE,
    RAW_WELL_KNOWN_NAME_RE,
    SEARCH_HIT_MARKER,
    UNKNOWN_NAME,
    WELL_KNOWN_NAMES,
)
from .names import canonical_address, normalize_function_name, strip_namespace
from .types import SymbolEntry


def _record_size(raw: object) -> int | None:
    if isinstance(raw, bool) or not isinstance(raw, int) or raw <= 0:
        return None
    return raw


def _project_record(record: dict[str, object], address_keys: tuple[str, ...]) -> SymbolEntry | None:
    offset = None
    for key in address_keys:
        offset = canonical_address(record.get(key))
        if offset is not None:
            break
    raw_name = record.get("name")
    name = normalize_function_name(raw_name) if isinstance(raw_name, str) else ""
    if offset is None or not name:
        return None
    return SymbolEntry(offset=offset, name=name, size=_record_size(record.get("size")))


def parse_function_table_json(output: str | None) -> list[SymbolEntry]:
    """Tier 1: project ``aflj`` records (``offset``, or ``addr`` in newer radare2)."""
    entries: list[SymbolEntry] = []
    for record in try_extract_json_array(output):
        entry = _project_record(record, ("offset", "addr"))
        if entry is not None:
            entries.append(entry)
    return entries


def _text_row_address(tokens: list[str]) -> tuple[str | None, str | None]:
    """Return ``(address, name_token)`` for one ``afl`` row.

    The name token is only set when the address had to be recovered from an
    auto-generated name such as ``fcn.000005d8``.
    """
    for token in tokens:
        if HEX_LITERAL_RE.match(token):
            return canonical_address(token), None
    for token in tokens:
        if ADDRESS_NAME_RE.search(token) is None:
            continue
        run = EMBEDDED_HEX_RUN_RE.search(token)
        if run is not None:
            return canonical_address(run.group(0)), token
    return None, None


def _text_row_name(tokens: list[str]) -> str | None:
    for token in tokens:
        if token.startswith(NAMESPACE_PREFIXES) or token in WELL_KNOWN_NAMES:
            return token
    if not NUMERIC_RE.match(tokens[-1]):
        return tokens[-1]
    if not NUMERIC_RE.match(tokens[0]):
        return tokens[0]
    return None


def parse_function_table_text(output: str | None) -> list[SymbolEntry]:
    """Tier 2: whitespace-tokenize ``afl`` rows into entries."""
    entries: list[SymbolEntry] = []
    for line in sanitize_output(output, prefix_only=True).splitlines():
        tokens = line.split()
        if not tokens:
            continue
        offset, name_token = _text_row_address(tokens)
        if offset is None:
            continue
        if name_token is None:
            name_token = _text_row_name(tokens)
        if name_token is None or NUMERIC_RE.match(name_token):
            continue
        name = normalize_function_name(name_token)
        if name:
            entries.append(SymbolEntry(offset=offset, name=name))
    return entries


def parse_function_symbols_json(output: str | None) -> list[SymbolEntry]:
    """Tier 3: keep ``isj`` symbols the backend classifies as functions."""
    entries: list[SymbolEntry] = []
    for record in try_extract_json_array(output):
        if record.get("type") != FUNCTION_SYMBOL_TYPE:
            continue
        entry = _project_record(record, ("vaddr",))
        if entry is not None:
            entries.append(entry)
    return entries


def parse_prologue_scan(output: str | None) -> list[SymbolEntry]:
    """Tier 4: rows that start with a hex address; the last token names them."""
    entries: list[SymbolEntry] = []
    for line in sanitize_output(output, prefix_only=True).splitlines():
        tokens = line.split()
        if not tokens or not HEX_LITERAL_RE.match(tokens[0]):
            continue
        if any(token.startswith(SEARCH_HIT_MARKER) for token in tokens[1:]):
            continue
        offset = canonical_address(tokens[0])
        if offset is None:
            continue
        name = strip_namespace(tokens[-1]) if len(tokens) > 1 else f"fcn_{offset}"
        if name:
            entries.append(SymbolEntry(offset=offset, name=name))
    return entries


def _raw_row_name(line: str) -> str:
    qualified = RAW_QUALIFIED_NAME_RE.search(line)
    if qualified is not None:
        return normalize_function_name(qualified.group(1))
    well_known = RAW_WELL_KNOWN_NAME_RE.search(line)
    if well_known is not None:
        return normalize_function_name(well_known.group(1))
    return UNKNOWN_NAME


def parse_raw_disassembly(output: str | None) -> list[SymbolEntry]:
    """Tier 5: scan a raw ``pd`` dump for function headers and well-known names."""
    entries: list[SymbolEntry] = []
    for line in sanitize_output(output, prefix_only=True).splitlines():
        text = line.strip()
        if not any(hint in text for hint in RAW_FUNCTION_HINTS) and RAW_HEADER_RE.match(text) is None:
            continue
        address = HEX_LITERAL_SEARCH_RE.search(text)
        if address is None:
            continue
        offset = canonical_address(address.group(0))
        name = _raw_row_name(text)
        if offset is None or not name or name == UNKNOWN_NAME:
            continue
        entries.append(SymbolEntry(offset=offset, name=name))
    return entries


def merge_by_offset_or_name(existing: Iterable[SymbolEntry], incoming: Iterable[SymbolEntry]) -> list[SymbolEntry]:
    """Append incoming entries whose offset and name are both unseen; first seen wins."""
    merged = list(existing)
    offsets = {entry.offset for entry in merged}
    names = {entry.name for entry in merged}
    for entry in incoming:
        if entry.offset in offsets or entry.name in names:
            continue
        merged.append(entry)
        offsets.add(entry.offset)
        names.add(entry.name)
    return merged


def merge_by_offset(existing: Iterable[SymbolEntry], incoming: Iterable[SymbolEntry]) -> list[SymbolEntry]:
    """Append incoming entries whose offset is unseen; names may repeat."""
    merged = list(existing)
    offsets = {entry.offset for entry in merged}
    for entry in incoming:
        if entry.offset in offsets:
            continue
        merged.append(entry)
        offsets.add(entry.offset)
    return merged
