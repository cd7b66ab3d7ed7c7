"""Terminal-escape and diagnostic-noise removal for backend responses.

radare2 mixes ``WARN``/``INFO`` diagnostics, console code-page banners and
SGR color codes into the same stream as the data we want. Everything here is
pure and idempotent: sanitizing clean text returns it unchanged.
"""

from __future__ import annotations

import re

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")

DIAGNOSTIC_MARKERS = ("warn", "info")
SHELL_NOISE_TOKENS = ("operable", "chcp")


def strip_ansi(text: str) -> str:
    """Remove terminal escape sequences, including ones revealed by a previous pass."""
    while True:
        stripped = ANSI_ESCAPE_RE.sub("", text)
        if stripped == text:
            return stripped
        text = stripped


def is_noise_line(line: str, prefix_only: bool = False) -> bool:
    """Return whether ``line`` is blank, a backend diagnostic, or shell noise.

    By default a diagnostic marker anywhere in the line disqualifies it. With
    ``prefix_only`` the marker must start the line, which keeps data rows that
    merely mention e.g. ``GetStartupInfoW``.
    """
    lower = line.strip().lower()
    if not lower:
        return True
    if any(token in lower for token in SHELL_NOISE_TOKENS):
        return True
    if prefix_only:
        return lower.startswith(DIAGNOSTIC_MARKERS)
    return any(marker in lower for marker in DIAGNOSTIC_MARKERS)


def sanitize_output(text: str | None, prefix_only: bool = False) -> str:
    """Strip escapes and drop blank, diagnostic, and shell-noise lines."""
    if not text:
        return ""
    clean = strip_ansi(text)
    return "\n".join(line for line in clean.splitlines() if not is_noise_line(line, prefix_only))
