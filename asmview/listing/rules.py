"""Markers and token patterns for the disassembly line normalizer."""

from __future__ import annotations

import re

# Thread/task tag radare2 prefixes to some rows: ``37:`` always, a bare
# ``3`` only when an address follows (a bare number could be opcode bytes).
LEADING_INDEX_RE = re.compile(r"^\d+(?::\s*|\s+(?=0x)|$)")
ZERO_LINE_RE = re.compile(r"^0+$")
# Address wrapped onto its own line with the leading ``0`` lost.
ORPHAN_ADDRESS_RE = re.compile(r"^x[0-9a-fA-F]+$")

INVALID_MARKER = "invalid"
BLOCK_OPEN_MARKERS = ("/", "┌")
FUNCTION_TAG = "(fcn)"
SECTION_PREFIX = "section."

# Box-drawing gutter radare2 prints in front of function bodies.
GUTTER_RE = re.compile(r"^[│┌└├┐┘╎|]+\s*")

TOKEN_RE = re.compile(r"\S+")
ADDRESS_TOKEN_RE = re.compile(r"^0x[0-9a-fA-F]+$")
BYTE_TOKEN_RE = re.compile(r"^(?:[0-9a-fA-F]{2})+$")
MNEMONIC_TOKEN_RE = re.compile(r"^[A-Za-z][A-Za-z0-9._]*$")
# Operand words that can follow a mnemonic but never start an instruction.
OPERAND_SIZE_WORDS = frozenset(
    {"byte", "word", "dword", "qword", "tbyte", "xword", "xmmword", "ymmword", "zmmword", "ptr"}
)
COMMENT_MARKER = ";"

REGISTER_RE = re.compile(
    r"\b(?:"
    r"[re]?[abcd]x|[abcd][lh]"
    r"|[re]?[sd]i|[sd]il"
    r"|[re]?[sb]p|[sb]pl"
    r"|[re]?ip"
    r"|r(?:[89]|1[0-5])[dwb]?"
    r")\b"
)
SECTION_REF_RE = re.compile(r"\bsection\.[^\s,\]\[]+")
HEX_LITERAL_RE = re.compile(r"\b0x[0-9a-fA-F]+\b")

# Priority order: earlier kinds win when spans overlap.
OPERAND_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("section", SECTION_REF_RE),
    ("register", REGISTER_RE),
    ("address", HEX_LITERAL_RE),
)
