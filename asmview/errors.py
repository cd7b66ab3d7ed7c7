"""Error kinds raised by the backend, discovery, and language-model paths."""

from __future__ import annotations


class AsmviewError(Exception):
    """Base class for failures surfaced to the caller."""


class BackendUnavailable(AsmviewError):
    """The analysis backend could not be reached or started."""


class BackendReportedError(AsmviewError):
    """The analysis backend answered with an explicit error field."""


class StructuredBlockError(AsmviewError):
    """A response did not carry a usable JSON array."""


class NoStructuredBlock(StructuredBlockError):
    """No ``[ ... ]`` span was found in the response text."""


class MalformedBlock(StructuredBlockError):
    """A ``[ ... ]`` span was found but did not decode as JSON."""

    def __init__(self, snippet: str, reason: str) -> None:
        super().__init__(f"malformed JSON block ({reason}): {snippet}")
        self.snippet = snippet
        self.reason = reason


class MissingSection(AsmviewError):
    """The section table has no executable code section."""


class CredentialsMissing(AsmviewError):
    """No usable language-model API key is configured."""


class LanguageModelError(AsmviewError):
    """The language-model endpoint failed or returned an unusable payload."""
