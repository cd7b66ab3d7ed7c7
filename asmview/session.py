"""Explicit per-binary session state and the operations that build on it.

A ``Session`` is an immutable snapshot of everything read from one binary.
Loading another binary builds a new one; nothing here mutates it in place.
Backend requests are issued strictly one after another, except for the
paired context/cross-reference fetch in :func:`describe_symbol`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from .backend import commands
from .backend.channel import BackendChannel, CommandScript, request_output
from .listing import ListingDocument, normalize_backend_listing
from .output import sanitize_output
from .search import ListingView
from .symbols import (
    ExportEntry,
    ImportEntry,
    SectionSpan,
    StringEntry,
    SymbolEntry,
    discover_functions,
    parse_entry_address,
    parse_executable_section,
    parse_exports,
    parse_imports,
    parse_strings,
)

logger = logging.getLogger(__name__)

Progress = Callable[[str], None]


@dataclass(frozen=True)
class Session:
    binary_path: Path
    entry_address: str
    functions: tuple[SymbolEntry, ...]
    imports: tuple[ImportEntry, ...]
    exports: tuple[ExportEntry, ...]
    strings: tuple[StringEntry, ...]
    text_section: SectionSpan
    entry_listing: ListingDocument
    listing: ListingDocument
    raw_listing: str

    def find_function(self, name: str) -> SymbolEntry | None:
        """Look up a function by display name or address."""
        for entry in self.functions:
            if entry.name == name or entry.offset == name:
                return entry
        folded = name.lower()
        return next((entry for entry in self.functions if entry.name.lower() == folded), None)

    def find_symbol(self, name: str) -> ImportEntry | ExportEntry | None:
        """Look up an import or export by symbol name; imports win on a tie."""
        for entry in (*self.imports, *self.exports):
            if entry.symbol == name:
                return entry
        return None

    def find_string(self, text: str) -> StringEntry | None:
        """Look up a string by its text or address, then by case-folded text."""
        for entry in self.strings:
            if entry.text == text or entry.offset == text:
                return entry
        folded = text.lower()
        return next((entry for entry in self.strings if entry.text.lower() == folded), None)


@dataclass(frozen=True)
class SymbolDetail:
    """Disassembly context and cross-references around one import or export."""

    symbol: str
    offset: str | None
    context: ListingDocument | None = None
    references: str | None = None


def _noop_progress(message: str) -> None:
    return None


def load_session(channel: BackendChannel, binary_path: Path, progress: Progress | None = None) -> Session:
    """Run the full load sequence for ``binary_path`` and return its session.

    ``progress`` is called with a short message before each backend step.
    Raises ``MissingSection`` when the binary has no executable section, and
    lets ``BackendUnavailable`` and ``BackendReportedError`` from
    non-discovery steps propagate.
    """
    report = progress or _noop_progress
    path = Path(binary_path)
    fetch = partial(_fetch, channel, path)

    report("Running deep analysis")
    fetch(commands.DEEP_ANALYSIS)

    report("Locating entry point")
    entry_address = parse_entry_address(fetch(commands.ENTRY_POINT))
    logger.info("entry point for %s at %s", path, entry_address)

    report("Disassembling entry point")
    fetch(commands.name_entry(entry_address))
    entry_listing = normalize_backend_listing(fetch(commands.entry_disassembly(entry_address)))

    report("Collecting cross-references")
    xrefs = fetch(commands.cross_references(entry_address))
    logger.debug("cross-references at entry:\n%s", sanitize_output(xrefs))

    report("Collecting binary info")
    logger.debug("diagnostic info:\n%s", fetch(commands.DIAGNOSTIC_INFO))

    report("Discovering functions")
    functions = discover_functions(fetch, entry_address)
    logger.info("discovered %d functions", len(functions))

    report("Reading imports")
    imports = parse_imports(fetch(commands.IMPORTS))
    report("Reading exports")
    exports = parse_exports(fetch(commands.EXPORTS))
    report("Reading strings")
    strings = parse_strings(fetch(commands.STRINGS))

    report("Reading sections")
    text_section = parse_executable_section(fetch(commands.SECTIONS))

    report("Disassembling code section")
    raw_listing = fetch(commands.section_disassembly(text_section.vaddr, text_section.size))
    listing = normalize_backend_listing(raw_listing)

    return Session(
        binary_path=path,
        entry_address=entry_address,
        functions=tuple(functions),
        imports=tuple(imports),
        exports=tuple(exports),
        strings=tuple(strings),
        text_section=text_section,
        entry_listing=entry_listing,
        listing=listing,
        raw_listing=raw_listing,
    )


def _fetch(channel: BackendChannel, binary_path: Path, script: CommandScript) -> str:
    return request_output(channel, script, binary_path)


def function_listing(channel: BackendChannel, session: Session, entry: SymbolEntry) -> ListingDocument:
    """Analyse and print the function at ``entry``, retrying once with a wider analysis."""
    output = _fetch(channel, session.binary_path, commands.function_disassembly(entry.offset))
    if commands.CANNOT_FIND_FUNCTION in output:
        logger.info("no function at %s, retrying with analysis", entry.offset)
        output = _fetch(channel, session.binary_path, commands.function_disassembly_retry(entry.offset))
    return normalize_backend_listing(output)


def describe_symbol(
    channel: BackendChannel,
    session: Session,
    entry: ImportEntry | ExportEntry,
) -> SymbolDetail:
    """Fetch a short disassembly and the cross-references for one import or export."""
    if entry.offset is None:
        return SymbolDetail(symbol=entry.symbol, offset=None)

    # Both requests only read at an already-resolved address.
    with ThreadPoolExecutor(max_workers=2) as executor:
        context_future = executor.submit(
            _fetch, channel, session.binary_path, commands.symbol_context(entry.offset)
        )
        xrefs_future = executor.submit(
            _fetch, channel, session.binary_path, commands.cross_references(entry.offset)
        )
        context_output = context_future.result()
        xrefs_output = xrefs_future.result()

    return SymbolDetail(
        symbol=entry.symbol,
        offset=entry.offset,
        context=normalize_backend_listing(context_output),
        references=sanitize_output(xrefs_output),
    )


def locate_string(session: Session, entry: StringEntry) -> ListingView:
    """Return the full listing with ``entry.text`` highlighted and no filter."""
    view = ListingView(session.listing)
    view.search(entry.text, filter_enabled=False)
    return view
