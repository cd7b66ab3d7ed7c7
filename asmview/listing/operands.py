"""Semantic spans over operand text.

Spans only describe where registers, section references and address
literals sit; the operand string itself is never rewritten.
"""

from __future__ import annotations

from .rules import OPERAND_PATTERNS
from .types import OperandSpan


def annotate_operands(operands: str | None) -> tuple[OperandSpan, ...]:
    """Return non-overlapping annotation spans sorted by start offset."""
    if not operands:
        return ()

    spans: list[OperandSpan] = []
    for kind, pattern in OPERAND_PATTERNS:
        for match in pattern.finditer(operands):
            start, end = match.span()
            if start == end:
                continue
            if any(start < span.end and span.start < end for span in spans):
                continue
            spans.append(OperandSpan(start=start, end=end, kind=kind))
    spans.sort(key=lambda span: span.start)
    return tuple(spans)
