"""Convert sanitized radare2 listing text into a ``ListingDocument``.

Each input line is stripped of its task tag and then offered to the rules in
``LINE_RULES`` in order; the first rule that consumes the line wins. The
final rule always consumes, emitting an instruction row, a plain-text row,
or nothing.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from ..output.sanitize import sanitize_output
from ..symbols.names import normalize_function_name
from .operands import annotate_operands
from .rules import (
    ADDRESS_TOKEN_RE,
    BLOCK_OPEN_MARKERS,
    BYTE_TOKEN_RE,
    COMMENT_MARKER,
    FUNCTION_TAG,
    GUTTER_RE,
    INVALID_MARKER,
    LEADING_INDEX_RE,
    MNEMONIC_TOKEN_RE,
    OPERAND_SIZE_WORDS,
    ORPHAN_ADDRESS_RE,
    SECTION_PREFIX,
    TOKEN_RE,
    ZERO_LINE_RE,
)
from .types import DisassemblyLine, FunctionBlock, LineKind, ListingDocument


@dataclass
class _NormalizerState:
    lines: list[DisassemblyLine] = field(default_factory=list)
    blocks: list[FunctionBlock] = field(default_factory=list)
    open_block: str | None = None
    open_block_start: int = 0
    pending_address: str | None = None
    next_sequence: int = 0

    def take_sequence(self) -> int:
        value = self.next_sequence
        self.next_sequence += 1
        return value

    def close_block(self) -> None:
        if self.open_block is None:
            return
        self.blocks.append(FunctionBlock(self.open_block, self.open_block_start, len(self.lines)))
        self.open_block = None


@dataclass(frozen=True)
class ParsedInstruction:
    address: str | None
    bytes: str | None
    mnemonic: str | None
    operands: str | None
    comment: str | None


def parse_instruction(text: str) -> ParsedInstruction | None:
    """Tolerant single-line parse: address, byte run, mnemonic, operands, ``;`` comment.

    Returns ``None`` when the first token is none of address, bytes, or
    mnemonic (the line is not instruction-shaped). A comment-only line parses
    successfully with every other field empty.
    """
    body, _sep, comment_text = GUTTER_RE.sub("", text).partition(COMMENT_MARKER)
    comment = comment_text.strip() or None
    tokens = list(TOKEN_RE.finditer(body))
    count = len(tokens)
    idx = 0

    address = None
    if idx < count and ADDRESS_TOKEN_RE.match(tokens[idx].group(0)):
        address = "0x" + tokens[idx].group(0)[2:]
        idx += 1

    byte_start = idx
    while idx < count and BYTE_TOKEN_RE.match(tokens[idx].group(0)):
        idx += 1
    if idx > byte_start and tokens[idx - 1].group(0).isalpha():
        following = tokens[idx].group(0) if idx < count else ""
        if not MNEMONIC_TOKEN_RE.match(following) or following.lower() in OPERAND_SIZE_WORDS:
            # ``d8c1 fadd st(1)`` or ``d800 fadd dword [eax]``: the last hex-looking token is the mnemonic.
            idx -= 1
    raw_bytes = " ".join(tok.group(0) for tok in tokens[byte_start:idx]) or None

    mnemonic = None
    if idx < count and MNEMONIC_TOKEN_RE.match(tokens[idx].group(0)):
        mnemonic = tokens[idx].group(0)
        idx += 1

    if idx == 0 and count:
        return None

    operands = body[tokens[idx].start() :].strip() if idx < count else ""
    return ParsedInstruction(
        address=address,
        bytes=raw_bytes,
        mnemonic=mnemonic,
        operands=operands or None,
        comment=comment,
    )


def _rule_zero_line(text: str, state: _NormalizerState) -> bool:
    return ZERO_LINE_RE.match(text) is not None


def _rule_orphan_address(text: str, state: _NormalizerState) -> bool:
    if ORPHAN_ADDRESS_RE.match(text) is None:
        return False
    state.pending_address = "0" + text
    return True


def _rule_invalid(text: str, state: _NormalizerState) -> bool:
    return INVALID_MARKER in text


def _rule_function_header(text: str, state: _NormalizerState) -> bool:
    if not text.startswith(BLOCK_OPEN_MARKERS) or FUNCTION_TAG not in text:
        return False
    tail = text.split(FUNCTION_TAG, 1)[1].split()
    name = normalize_function_name(tail[0]) if tail else ""
    state.close_block()
    state.open_block = name
    state.open_block_start = len(state.lines)
    state.lines.append(DisassemblyLine(kind=LineKind.FUNCTION_HEADER, name=name))
    return True


def _rule_section_header(text: str, state: _NormalizerState) -> bool:
    if not text.startswith(SECTION_PREFIX):
        return False
    name = text.split(":", 1)[0]
    state.lines.append(DisassemblyLine(kind=LineKind.SECTION_HEADER, name=name))
    return True


def _rule_instruction(text: str, state: _NormalizerState) -> bool:
    parsed = parse_instruction(text)
    if parsed is None:
        state.lines.append(
            DisassemblyLine(kind=LineKind.PLAIN_TEXT, sequence=state.take_sequence(), text=text)
        )
        return True

    address = parsed.address
    if address is None and state.pending_address is not None:
        address = state.pending_address
        state.pending_address = None
    if address is None and parsed.bytes is None and parsed.mnemonic is None:
        return True

    state.lines.append(
        DisassemblyLine(
            kind=LineKind.INSTRUCTION,
            sequence=state.take_sequence(),
            address=address,
            bytes=parsed.bytes,
            mnemonic=parsed.mnemonic,
            operands=parsed.operands,
            comment=parsed.comment,
            operand_spans=annotate_operands(parsed.operands),
        )
    )
    return True


LineRule = Callable[[str, _NormalizerState], bool]

LINE_RULES: tuple[tuple[str, LineRule], ...] = (
    ("zero_line", _rule_zero_line),
    ("orphan_address", _rule_orphan_address),
    ("invalid", _rule_invalid),
    ("function_header", _rule_function_header),
    ("section_header", _rule_section_header),
    ("instruction", _rule_instruction),
)


def normalize_listing(text: str | None) -> ListingDocument:
    """Build a listing document from already-sanitized listing text."""
    state = _NormalizerState()
    for raw_line in (text or "").splitlines():
        line = LEADING_INDEX_RE.sub("", raw_line.strip(), count=1).strip()
        if not line:
            continue
        for _name, rule in LINE_RULES:
            if rule(line, state):
                break
    state.close_block()
    return ListingDocument(lines=tuple(state.lines), blocks=tuple(state.blocks))


def normalize_backend_listing(output: str | None) -> ListingDocument:
    """Sanitize a raw disassembly response and normalize it.

    Diagnostics are matched as line prefixes only so instructions that
    reference symbols like ``GetStartupInfoW`` are kept.
    """
    return normalize_listing(sanitize_output(output, prefix_only=True))
