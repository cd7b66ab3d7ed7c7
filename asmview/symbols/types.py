"""Symbol records derived from backend responses."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SymbolEntry:
    """One discovered function; ``offset`` is canonical ``0x`` hex."""

    offset: str
    name: str
    size: int | None = None


@dataclass(frozen=True)
class ImportEntry:
    symbol: str
    offset: str | None = None


@dataclass(frozen=True)
class ExportEntry:
    symbol: str
    offset: str | None = None


@dataclass(frozen=True)
class StringEntry:
    offset: str
    text: str


@dataclass(frozen=True)
class SectionSpan:
    """Start address and byte size of the executable section."""

    vaddr: str
    size: int
