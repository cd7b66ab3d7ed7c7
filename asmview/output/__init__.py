"""Cleanup and structured extraction for raw backend responses."""

from __future__ import annotations

from .blocks import extract_json_array, try_extract_json_array
from .sanitize import ANSI_ESCAPE_RE, is_noise_line, sanitize_output, strip_ansi

__all__ = [
    "ANSI_ESCAPE_RE",
    "extract_json_array",
    "is_noise_line",
    "sanitize_output",
    "strip_ansi",
    "try_extract_json_array",
]
