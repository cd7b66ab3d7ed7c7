"""Output sanitizer behavior tests.

Covers escape stripping, diagnostic and shell-noise line removal, and the
prefix-only mode used for data-bearing responses.
"""

from __future__ import annotations

import unittest

from asmview.output import ANSI_ESCAPE_RE, is_noise_line, sanitize_output, strip_ansi


RAW_RESPONSE = (
    "\x1b[33mWARN: relocs not applied\x1b[0m\n"
    "Active code page: 65001\n"
    "\n"
    "'chcp' is not recognized as an internal or external command, operable program\n"
    "INFO: Analyze all flags starting with sym. and entry0 (aa)\n"
    "\x1b[32m0x00001000\x1b[0m      55             push ebp\n"
    "0x00001001      89e5           mov ebp, esp\n"
)


class StripAnsiTests(unittest.TestCase):
    def test_removes_color_sequences(self) -> None:
        self.assertEqual(strip_ansi("\x1b[1;31mred\x1b[0m text"), "red text")

    def test_removes_sequences_revealed_by_first_pass(self) -> None:
        nested = "\x1b[\x1b[0m31mhidden"
        self.assertIsNone(ANSI_ESCAPE_RE.search(strip_ansi(nested)))


class NoiseLineTests(unittest.TestCase):
    def test_blank_lines_are_noise(self) -> None:
        self.assertTrue(is_noise_line(""))
        self.assertTrue(is_noise_line("   \t"))

    def test_diagnostic_markers_match_anywhere_by_default(self) -> None:
        self.assertTrue(is_noise_line("WARN: something"))
        self.assertTrue(is_noise_line("0x1000 call sym.imp.GetStartupInfoW"))

    def test_prefix_only_keeps_rows_that_mention_markers(self) -> None:
        self.assertTrue(is_noise_line("  INFO: analysing", prefix_only=True))
        self.assertFalse(is_noise_line("0x1000 call sym.imp.GetStartupInfoW", prefix_only=True))

    def test_shell_noise_is_dropped_in_both_modes(self) -> None:
        self.assertTrue(is_noise_line("chcp 65001", prefix_only=True))
        self.assertTrue(is_noise_line("not recognized as an operable program"))


class SanitizeOutputTests(unittest.TestCase):
    def test_clean_response_has_no_escapes_or_diagnostics(self) -> None:
        clean = sanitize_output(RAW_RESPONSE)
        self.assertIsNone(ANSI_ESCAPE_RE.search(clean))
        for line in clean.splitlines():
            lowered = line.strip().lower()
            self.assertNotIn("warn", lowered)
            self.assertNotIn("info", lowered)
            self.assertTrue(lowered)
        self.assertEqual(
            clean.splitlines(),
            [
                "Active code page: 65001",
                "0x00001000      55             push ebp",
                "0x00001001      89e5           mov ebp, esp",
            ],
        )

    def test_sanitizing_is_idempotent(self) -> None:
        samples = [RAW_RESPONSE, "", "plain", "\x1b[0m\n\nwarn\nkeep\n", "info inside\nx"]
        for sample in samples:
            once = sanitize_output(sample)
            self.assertEqual(sanitize_output(once), once)
            once_prefix = sanitize_output(sample, prefix_only=True)
            self.assertEqual(sanitize_output(once_prefix, prefix_only=True), once_prefix)

    def test_none_and_empty_input_yield_empty_text(self) -> None:
        self.assertEqual(sanitize_output(None), "")
        self.assertEqual(sanitize_output(""), "")


if __name__ == "__main__":
    unittest.main()
