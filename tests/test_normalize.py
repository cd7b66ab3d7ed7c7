"""Disassembly line normalizer tests.

Exercises each rule of the ordered rule table, function block bookkeeping,
and operand annotation spans.
"""

from __future__ import annotations

import unittest

from asmview.listing import (
    LineKind,
    annotate_operands,
    normalize_backend_listing,
    normalize_listing,
    parse_instruction,
)


class InstructionParseTests(unittest.TestCase):
    def test_single_instruction_line(self) -> None:
        doc = normalize_listing("0x00001000   55              push ebp")
        self.assertEqual(len(doc), 1)
        line = doc.lines[0]
        self.assertIs(line.kind, LineKind.INSTRUCTION)
        self.assertEqual(line.sequence, 0)
        self.assertEqual(line.address, "0x00001000")
        self.assertEqual(line.bytes, "55")
        self.assertEqual(line.mnemonic, "push")
        self.assertEqual(line.operands, "ebp")
        self.assertIsNone(line.comment)

    def test_trailing_comment_is_split_off(self) -> None:
        parsed = parse_instruction("0x1003 83ec10 sub esp, 0x10 ; reserve locals")
        assert parsed is not None
        self.assertEqual(parsed.operands, "esp, 0x10")
        self.assertEqual(parsed.comment, "reserve locals")

    def test_hex_looking_mnemonic_after_bytes(self) -> None:
        parsed = parse_instruction("0x1000 d8c1 fadd st(0), st(1)")
        assert parsed is not None
        self.assertEqual(parsed.bytes, "d8c1")
        self.assertEqual(parsed.mnemonic, "fadd")
        self.assertEqual(parsed.operands, "st(0), st(1)")

    def test_hex_looking_mnemonic_without_bytes(self) -> None:
        parsed = parse_instruction("fadd st(0), st(1)")
        assert parsed is not None
        self.assertIsNone(parsed.bytes)
        self.assertEqual(parsed.mnemonic, "fadd")

    def test_letter_only_byte_followed_by_mnemonic_stays_bytes(self) -> None:
        parsed = parse_instruction("0x1000 cc int3")
        assert parsed is not None
        self.assertEqual(parsed.bytes, "cc")
        self.assertEqual(parsed.mnemonic, "int3")
        self.assertIsNone(parsed.operands)

    def test_spaced_bytes_ending_in_letters_pair(self) -> None:
        doc = normalize_listing("0x1000 eb fe jmp 0x1000")
        line = doc.lines[0]
        self.assertEqual(line.bytes, "eb fe")
        self.assertEqual(line.mnemonic, "jmp")
        self.assertEqual(line.operands, "0x1000")
        self.assertEqual(line.search_text(), "0x1000 eb fe jmp 0x1000")

    def test_spaced_bytes_with_letters_pairs_in_the_middle(self) -> None:
        parsed = parse_instruction("0x1000 e8 fb ff ff ff call 0x1234")
        assert parsed is not None
        self.assertEqual(parsed.bytes, "e8 fb ff ff ff")
        self.assertEqual(parsed.mnemonic, "call")
        self.assertEqual(parsed.operands, "0x1234")

    def test_hex_looking_mnemonic_before_size_word(self) -> None:
        parsed = parse_instruction("0x1000 d800 fadd dword [eax]")
        assert parsed is not None
        self.assertEqual(parsed.bytes, "d800")
        self.assertEqual(parsed.mnemonic, "fadd")
        self.assertEqual(parsed.operands, "dword [eax]")

    def test_unrecognized_first_token_fails_parse(self) -> None:
        self.assertIsNone(parse_instruction("(int argc, char **argv)"))

    def test_gutter_is_ignored(self) -> None:
        parsed = parse_instruction("│ 0x1010 c3 ret")
        assert parsed is not None
        self.assertEqual(parsed.address, "0x1010")
        self.assertEqual(parsed.mnemonic, "ret")


class LineRuleTests(unittest.TestCase):
    def test_pending_address_attaches_to_next_line(self) -> None:
        doc = normalize_listing("x00001000\n55 push ebp\n89e5 mov ebp, esp")
        self.assertEqual(len(doc), 2)
        self.assertEqual(doc.lines[0].address, "0x00001000")
        self.assertEqual(doc.lines[0].mnemonic, "push")
        self.assertIsNone(doc.lines[1].address)

    def test_pending_address_does_not_replace_own_address(self) -> None:
        doc = normalize_listing("x00001000\n0x2000 90 nop\n55 push ebp")
        self.assertEqual([line.address for line in doc.lines], ["0x2000", "0x00001000"])

    def test_zero_lines_yield_no_record(self) -> None:
        self.assertEqual(len(normalize_listing("00000000")), 0)
        self.assertEqual(len(normalize_listing("0\n000")), 0)

    def test_leading_index_tag_is_stripped(self) -> None:
        doc = normalize_listing("37: 0x1000 55 push ebp\n3 0x1001 c3 ret\n12:")
        self.assertEqual([line.address for line in doc.lines], ["0x1000", "0x1001"])

    def test_bare_opcode_bytes_are_not_taken_for_an_index(self) -> None:
        doc = normalize_listing("55 push ebp")
        self.assertEqual(doc.lines[0].bytes, "55")

    def test_invalid_lines_are_dropped(self) -> None:
        doc = normalize_listing("0x1000 ff invalid\n0x1001 c3 ret")
        self.assertEqual([line.mnemonic for line in doc.lines], ["ret"])
        self.assertEqual(doc.lines[0].sequence, 0)

    def test_section_header_uses_text_before_colon(self) -> None:
        doc = normalize_listing("section..text:\n0x1000 c3 ret")
        self.assertIs(doc.lines[0].kind, LineKind.SECTION_HEADER)
        self.assertEqual(doc.lines[0].name, "section..text")
        self.assertIsNone(doc.lines[0].sequence)
        self.assertEqual(doc.lines[1].sequence, 0)

    def test_unparseable_line_becomes_numbered_plain_text(self) -> None:
        doc = normalize_listing("0x1000 c3 ret\n(int argc, char **argv)")
        plain = doc.lines[1]
        self.assertIs(plain.kind, LineKind.PLAIN_TEXT)
        self.assertEqual(plain.text, "(int argc, char **argv)")
        self.assertEqual(plain.sequence, 1)

    def test_comment_only_line_is_dropped(self) -> None:
        doc = normalize_listing("; CALL XREF from main @ 0x1020\n0x1000 c3 ret")
        self.assertEqual(len(doc), 1)

    def test_sequences_are_dense_and_zero_based(self) -> None:
        text = "\n".join(
            [
                "/ (fcn) sym.main ()",
                "0x1000 55 push ebp",
                "0x1001 ff invalid",
                "(locals)",
                "section..text:",
                "0x1002 c3 ret",
            ]
        )
        doc = normalize_listing(text)
        self.assertEqual([line.sequence for line in doc.numbered_lines()], [0, 1, 2])


class FunctionBlockTests(unittest.TestCase):
    LISTING = "\n".join(
        [
            "/ (fcn) sym.main ()",
            "0x1000 55 push ebp",
            "0x1001 89e5 mov ebp, esp",
            "/ (fcn) fcn.00001010 ()",
            "0x1010 c3 ret",
        ]
    )

    def test_header_opens_block_named_without_namespace(self) -> None:
        doc = normalize_listing("/ (fcn) sym.main ()")
        self.assertIs(doc.lines[0].kind, LineKind.FUNCTION_HEADER)
        self.assertEqual(doc.lines[0].name, "main")
        self.assertEqual(doc.function_names(), ["main"])

    def test_next_header_closes_previous_block(self) -> None:
        doc = normalize_listing(self.LISTING)
        self.assertEqual([(b.name, b.start, b.end) for b in doc.blocks], [("main", 0, 3), ("00001010", 3, 5)])

    def test_trailing_block_is_closed_at_end_of_input(self) -> None:
        doc = normalize_listing(self.LISTING)
        self.assertEqual(doc.blocks[-1].end, len(doc))
        self.assertEqual(doc.block_for_line(4).name, "00001010")
        self.assertEqual(doc.block_for_line(1).name, "main")

    def test_box_drawing_header_and_entry_synonym(self) -> None:
        doc = normalize_listing("┌ (fcn) entry0 42\n│ 0x1000 c3 ret")
        self.assertEqual(doc.function_names(), ["entry"])
        self.assertEqual(doc.lines[1].address, "0x1000")

    def test_lines_before_first_header_belong_to_no_block(self) -> None:
        doc = normalize_listing("0x0ff0 90 nop\n/ (fcn) sym.main ()\n0x1000 c3 ret")
        self.assertIsNone(doc.block_for_line(0))
        self.assertEqual(doc.block_for_line(2).name, "main")


class OperandAnnotationTests(unittest.TestCase):
    def test_register_section_and_address_spans(self) -> None:
        operands = "eax, dword [section..data + 0x10]"
        spans = annotate_operands(operands)
        self.assertEqual([operands[s.start : s.end] for s in spans], ["eax", "section..data", "0x10"])
        self.assertEqual([s.kind for s in spans], ["register", "section", "address"])

    def test_register_families(self) -> None:
        operands = "rax, r8d, sil, bp, al"
        spans = annotate_operands(operands)
        self.assertEqual([operands[s.start : s.end] for s in spans], ["rax", "r8d", "sil", "bp", "al"])

    def test_annotation_leaves_text_untouched(self) -> None:
        doc = normalize_listing("0x1000 8b4508 mov eax, dword [ebp + 8]")
        line = doc.lines[0]
        self.assertEqual(line.operands, "eax, dword [ebp + 8]")
        self.assertEqual(line.search_text(), "0x1000 8b4508 mov eax, dword [ebp + 8]")
        self.assertEqual([s.kind for s in line.operand_spans], ["register", "register"])

    def test_empty_operands_have_no_spans(self) -> None:
        self.assertEqual(annotate_operands(None), ())
        self.assertEqual(annotate_operands(""), ())


class BackendListingTests(unittest.TestCase):
    def test_diagnostics_are_removed_but_symbol_rows_survive(self) -> None:
        output = (
            "WARN: Relocs has not been applied\n"
            "\x1b[33m0x1000\x1b[0m ff15 call dword [sym.imp.KERNEL32.dll_GetStartupInfoW]\n"
        )
        doc = normalize_backend_listing(output)
        self.assertEqual(len(doc), 1)
        self.assertEqual(doc.lines[0].mnemonic, "call")
        self.assertIn("GetStartupInfoW", doc.lines[0].operands or "")


if __name__ == "__main__":
    unittest.main()
