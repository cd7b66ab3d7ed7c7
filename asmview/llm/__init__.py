"""Language-model channel: chat over a listing and listing translation."""

from __future__ import annotations

from .client import (
    ChatConversation,
    ChatMessage,
    LanguageModelClient,
    ModelRequest,
    chat_system_prompt,
    translate_listing,
)

__all__ = [
    "ChatConversation",
    "ChatMessage",
    "LanguageModelClient",
    "ModelRequest",
    "chat_system_prompt",
    "translate_listing",
]
