"""Disassembly listing model and normalizer."""

from __future__ import annotations

from .normalize import normalize_backend_listing, normalize_listing, parse_instruction
from .operands import annotate_operands
from .types import DisassemblyLine, FunctionBlock, LineKind, ListingDocument, OperandSpan

__all__ = [
    "DisassemblyLine",
    "FunctionBlock",
    "LineKind",
    "ListingDocument",
    "OperandSpan",
    "annotate_operands",
    "normalize_backend_listing",
    "normalize_listing",
    "parse_instruction",
]
