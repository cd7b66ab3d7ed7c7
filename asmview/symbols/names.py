"""Address canonicalization and function-name normalization."""

from __future__ import annotations

import re

from .config import ENTRY_LABEL, ENTRY_SYNONYMS, NAMESPACE_PREFIXES

_BARE_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


def parse_address(raw: object) -> int | None:
    """Interpret a JSON number or a hex string as an address.

    Strings without a ``0x`` prefix are read as hex, matching how radare2
    embeds addresses in generated names. Anything else yields ``None``.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw >= 0 else None
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if text[:2].lower() == "0x":
        text = text[2:]
    if not text or _BARE_HEX_RE.match(text) is None:
        return None
    return int(text, 16)


def format_address(value: int) -> str:
    return f"0x{value:x}"


def canonical_address(raw: object) -> str | None:
    """Return ``0x``-prefixed lowercase hex without leading zeros."""
    value = parse_address(raw)
    return None if value is None else format_address(value)


def strip_namespace(name: str) -> str:
    """Drop backend namespace prefixes such as ``sym.`` and ``fcn.``."""
    stripped = name.strip()
    changed = True
    while changed:
        changed = False
        for prefix in NAMESPACE_PREFIXES:
            if stripped.startswith(prefix) and len(stripped) > len(prefix):
                stripped = stripped[len(prefix) :]
                changed = True
    return stripped


def normalize_function_name(name: str) -> str:
    """Strip namespaces and map synthetic entry names to the canonical label."""
    stripped = strip_namespace(name)
    if stripped in ENTRY_SYNONYMS:
        return ENTRY_LABEL
    return stripped
