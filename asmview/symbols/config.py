"""Naming conventions, patterns, and defaults for symbol discovery."""

from __future__ import annotations

import re

NAMESPACE_PREFIXES = ("sym.", "fcn.", "sub.")
ENTRY_LABEL = "entry"
MAIN_LABEL = "main"
ENTRY_SYNONYMS = ("entry0", "entry")
WELL_KNOWN_NAMES = ("main", "_start", "entry0")
PRIORITY_LABELS = (ENTRY_LABEL, MAIN_LABEL)
UNKNOWN_NAME = "unknown"

# Used when the entry-point lookup cannot be parsed.
DEFAULT_ENTRY_ADDRESS = 0x08049000
DEFAULT_SECTION_SIZE = 4096
EXECUTABLE_SECTION_NAME = ".text"

# Backend classification of executable-function symbols in ``isj``.
FUNCTION_SYMBOL_TYPE = "FUNC"

# A working set this small means the earlier tiers found nothing real.
TRIVIAL_RESULT_MAX = 2

HEX_LITERAL_RE = re.compile(r"^0x[0-9a-fA-F]+$")
HEX_LITERAL_SEARCH_RE = re.compile(r"0x[0-9a-fA-F]+")
NUMERIC_RE = re.compile(r"^\d+$")
# Auto-generated names that embed their own address: fcn.000005d8, sub_401000.
ADDRESS_NAME_RE = re.compile(r"(?:sym\.|fcn\.|sub_?)[0-9a-fA-F]+")
EMBEDDED_HEX_RUN_RE = re.compile(r"[0-9a-fA-F]{4,}")
ENTRY_VADDR_RE = re.compile(r"vaddr=(0x[0-9a-fA-F]+)")
SECTION_VADDR_RE = re.compile(r"vaddr=(0x[0-9a-fA-F]+)")
SECTION_SIZE_RE = re.compile(r"sz=(0x[0-9a-fA-F]+)")

# Prologue-scan hit rows (``0x00001040  # 2: push rbp``) are not functions.
SEARCH_HIT_MARKER = "#"

# Raw-disassembly rows worth inspecting for a function start.
RAW_FUNCTION_HINTS = ("(fcn)", "main", "_start", "entry")
RAW_HEADER_RE = re.compile(r"^/\s+\d+:\s+fcn\.")
RAW_QUALIFIED_NAME_RE = re.compile(r"(?:fcn|sym)\.([^\s)]+)")
RAW_WELL_KNOWN_NAME_RE = re.compile(r"\b(main|_start|entry0|entry)\b")

STRING_CONTENT_TAGS = ("ascii ", "wide ")
