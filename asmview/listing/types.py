"""Typed records produced by the disassembly line normalizer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class LineKind(Enum):
    INSTRUCTION = "instruction"
    FUNCTION_HEADER = "function_header"
    SECTION_HEADER = "section_header"
    PLAIN_TEXT = "plain_text"


@dataclass(frozen=True)
class OperandSpan:
    """Presentation-only annotation over ``DisassemblyLine.operands``."""

    start: int
    end: int
    kind: str  # "register" | "section" | "address"


@dataclass(frozen=True)
class DisassemblyLine:
    """One normalized listing row.

    ``sequence`` is set only for instruction and plain-text rows; header rows
    carry their label in ``name`` instead.
    """

    kind: LineKind
    sequence: int | None = None
    address: str | None = None
    bytes: str | None = None
    mnemonic: str | None = None
    operands: str | None = None
    comment: str | None = None
    name: str | None = None
    text: str | None = None
    operand_spans: tuple[OperandSpan, ...] = field(default=())

    def search_text(self) -> str:
        """Return the full rendered text used for search and highlight matching."""
        if self.kind is LineKind.FUNCTION_HEADER:
            return f"Function: {self.name or ''}"
        if self.kind is LineKind.SECTION_HEADER:
            return f"{self.name or ''}:"
        if self.kind is LineKind.PLAIN_TEXT:
            return self.text or ""
        parts = [part for part in (self.address, self.bytes, self.mnemonic, self.operands) if part]
        if self.comment:
            parts.append(f";{self.comment}")
        return " ".join(parts)


@dataclass(frozen=True)
class FunctionBlock:
    """Half-open ``[start, end)`` range of document lines owned by one function.

    ``start`` indexes the block's ``FUNCTION_HEADER`` line.
    """

    name: str
    start: int
    end: int


@dataclass(frozen=True)
class ListingDocument:
    lines: tuple[DisassemblyLine, ...] = ()
    blocks: tuple[FunctionBlock, ...] = ()

    def __len__(self) -> int:
        return len(self.lines)

    def numbered_lines(self) -> list[DisassemblyLine]:
        return [line for line in self.lines if line.sequence is not None]

    def block_for_line(self, index: int) -> FunctionBlock | None:
        """Return the function block containing document line ``index``, if any."""
        for block in self.blocks:
            if block.start <= index < block.end:
                return block
        return None

    def function_names(self) -> list[str]:
        return [block.name for block in self.blocks]
