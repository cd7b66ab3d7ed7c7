"""Symbol model and the function-discovery pipeline."""

from __future__ import annotations

from .discovery import DEFAULT_TIERS, DiscoveryTier, discover_functions, order_functions, run_tiers
from .extract import (
    parse_entry_address,
    parse_executable_section,
    parse_exports,
    parse_imports,
    parse_strings,
)
from .types import ExportEntry, ImportEntry, SectionSpan, StringEntry, SymbolEntry

__all__ = [
    "DEFAULT_TIERS",
    "DiscoveryTier",
    "ExportEntry",
    "ImportEntry",
    "SectionSpan",
    "StringEntry",
    "SymbolEntry",
    "discover_functions",
    "order_functions",
    "parse_entry_address",
    "parse_executable_section",
    "parse_exports",
    "parse_imports",
    "parse_strings",
    "run_tiers",
]
