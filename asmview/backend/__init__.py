"""Analysis backend: command scripts and request channels."""

from __future__ import annotations

from .channel import (
    BackendChannel,
    BackendResponse,
    CommandScript,
    HttpBackendChannel,
    Radare2Channel,
    request_output,
)

__all__ = [
    "BackendChannel",
    "BackendResponse",
    "CommandScript",
    "HttpBackendChannel",
    "Radare2Channel",
    "request_output",
]
