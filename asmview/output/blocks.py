"""Locate and decode the JSON array embedded in a noisy backend response."""

from __future__ import annotations

import json
import logging

from ..errors import MalformedBlock, NoStructuredBlock, StructuredBlockError
from .sanitize import sanitize_output

logger = logging.getLogger(__name__)

SNIPPET_MAX_CHARS = 200


def _snippet(text: str, max_chars: int = SNIPPET_MAX_CHARS) -> str:
    if len(text) <= max_chars:
        return text
    return text[: max(1, max_chars - 3)] + "..."


def extract_json_array(text: str | None) -> list[dict[str, object]]:
    """Decode the span between the first ``[`` and the last ``]``.

    Diagnostic lines are dropped first (prefix match only, so JSON that
    mentions ``info`` somewhere survives). Raises ``NoStructuredBlock`` when
    no ordered bracket pair exists and ``MalformedBlock`` when the span does
    not decode. Non-object array items are skipped; the returned records are
    loosely typed and callers must not assume any field is present.
    """
    cleaned = sanitize_output(text, prefix_only=True)
    start = cleaned.find("[")
    end = cleaned.rfind("]")
    if start == -1 or end == -1 or end <= start:
        raise NoStructuredBlock("response contains no JSON array")

    block = cleaned[start : end + 1]
    try:
        payload = json.loads(block)
    except (ValueError, RecursionError) as exc:
        raise MalformedBlock(_snippet(block), str(exc)) from exc
    if not isinstance(payload, list):
        raise MalformedBlock(_snippet(block), "top-level value is not an array")
    return [item for item in payload if isinstance(item, dict)]


def try_extract_json_array(text: str | None) -> list[dict[str, object]]:
    """Like :func:`extract_json_array` but returns ``[]`` for unusable blocks."""
    try:
        return extract_json_array(text)
    except StructuredBlockError as exc:
        logger.debug("no structured block: %s", exc)
        return []
