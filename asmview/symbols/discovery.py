"""Tiered function discovery.

Tiers run in a fixed order against one backend. Each tier has a gate that
looks at the working set built so far, a command script, a pure parser, and
a merge rule; later tiers can only add entries. Finalization makes sure the
program entry point is present and orders the result for display.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from ..backend import commands
from ..backend.channel import CommandScript
from ..errors import BackendReportedError
from .config import ENTRY_LABEL, PRIORITY_LABELS, TRIVIAL_RESULT_MAX
from .functions import (
    merge_by_offset,
    merge_by_offset_or_name,
    parse_function_symbols_json,
    parse_function_table_json,
    parse_function_table_text,
    parse_prologue_scan,
    parse_raw_disassembly,
)
from .types import SymbolEntry

logger = logging.getLogger(__name__)

Fetch = Callable[[CommandScript], str]
Parser = Callable[[str], list[SymbolEntry]]
Merge = Callable[[Iterable[SymbolEntry], Iterable[SymbolEntry]], list[SymbolEntry]]
Gate = Callable[[Sequence[SymbolEntry]], bool]


def always(found: Sequence[SymbolEntry]) -> bool:
    return True


def when_empty(found: Sequence[SymbolEntry]) -> bool:
    return not found


def when_trivial(found: Sequence[SymbolEntry]) -> bool:
    return len(found) <= TRIVIAL_RESULT_MAX


@dataclass(frozen=True)
class DiscoveryTier:
    name: str
    script: CommandScript
    parse: Parser
    merge: Merge
    should_run: Gate = always


DEFAULT_TIERS: tuple[DiscoveryTier, ...] = (
    DiscoveryTier(
        "json_function_table",
        commands.FUNCTION_LIST_JSON,
        parse_function_table_json,
        merge_by_offset_or_name,
    ),
    DiscoveryTier(
        "text_function_table",
        commands.FUNCTION_LIST_TEXT,
        parse_function_table_text,
        merge_by_offset_or_name,
        when_empty,
    ),
    DiscoveryTier(
        "symbol_table",
        commands.SYMBOLS_JSON,
        parse_function_symbols_json,
        merge_by_offset_or_name,
    ),
    DiscoveryTier(
        "prologue_scan",
        commands.PROLOGUE_SCAN,
        parse_prologue_scan,
        merge_by_offset_or_name,
        when_trivial,
    ),
    DiscoveryTier(
        "raw_disassembly",
        commands.RAW_DISASSEMBLY,
        parse_raw_disassembly,
        merge_by_offset,
        when_trivial,
    ),
)


def run_tiers(
    fetch: Fetch,
    tiers: Sequence[DiscoveryTier] = DEFAULT_TIERS,
    seed: Iterable[SymbolEntry] = (),
) -> list[SymbolEntry]:
    """Run each gated tier in order, merging its entries into the working set.

    A backend-reported error inside a tier counts as an empty response so the
    next tier still gets its turn. Transport failures propagate.
    """
    found = list(seed)
    for tier in tiers:
        if not tier.should_run(found):
            logger.debug("skipping tier %s with %d entries", tier.name, len(found))
            continue
        try:
            output = fetch(tier.script)
        except BackendReportedError as exc:
            logger.info("tier %s failed, falling through: %s", tier.name, exc)
            output = ""
        candidates = tier.parse(output)
        before = len(found)
        found = tier.merge(found, candidates)
        logger.info(
            "tier %s: %d candidates, %d added, %d total",
            tier.name,
            len(candidates),
            len(found) - before,
            len(found),
        )
    return found


def ensure_entry_point(functions: Sequence[SymbolEntry], entry_address: str) -> list[SymbolEntry]:
    """Prepend a synthetic entry-point function when none sits at ``entry_address``."""
    if any(entry.offset == entry_address for entry in functions):
        return list(functions)
    return [SymbolEntry(offset=entry_address, name=ENTRY_LABEL), *functions]


def _sort_key(entry: SymbolEntry) -> tuple[int, str]:
    folded = entry.name.lower()
    if folded in PRIORITY_LABELS:
        return PRIORITY_LABELS.index(folded), ""
    return len(PRIORITY_LABELS), entry.name


def order_functions(functions: Iterable[SymbolEntry]) -> list[SymbolEntry]:
    """Entry label first, then ``main``, then everything else by name."""
    return sorted(functions, key=_sort_key)


def discover_functions(
    fetch: Fetch,
    entry_address: str,
    tiers: Sequence[DiscoveryTier] = DEFAULT_TIERS,
) -> list[SymbolEntry]:
    """Produce the ordered function list for one loaded binary."""
    found = run_tiers(fetch, tiers)
    return order_functions(ensure_entry_point(found, entry_address))
