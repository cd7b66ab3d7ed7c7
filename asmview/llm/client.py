"""OpenAI-style chat-completions client.

Requests are single-shot: nothing here retries, and nothing here shares
state with the discovery pipeline beyond the listing text it is handed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import requests

from ..config import LanguageModelSettings
from ..errors import LanguageModelError

logger = logging.getLogger(__name__)

CHAT_COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"
CHAT_MAX_TOKENS = 1024
TRANSLATION_MAX_TOKENS = 2048
TEMPERATURE = 0.2
EMPTY_CHAT_REPLY = "No response."
EMPTY_TRANSLATION = "No code returned."


@dataclass(frozen=True)
class ChatMessage:
    role: str
    content: str

    def as_payload(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class ModelRequest:
    system_prompt: str
    history: tuple[ChatMessage, ...]
    model: str
    max_tokens: int = CHAT_MAX_TOKENS
    temperature: float = TEMPERATURE

    def payload(self) -> dict[str, object]:
        messages = [{"role": "system", "content": self.system_prompt}]
        messages.extend(message.as_payload() for message in self.history)
        return {
            "model": self.model,
            "messages": messages,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }


def chat_system_prompt(disassembly: str) -> str:
    return (
        "You are an expert reverse engineer. The following is the full binary disassembly "
        f"for context:\n\n{disassembly}\n\n"
        "Answer the user's questions about this binary. Be concise and technical."
    )


def _reply_text(data: object) -> str:
    """Pull ``choices[0].message.content`` out of a completion payload."""
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message")
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    return content.strip() if isinstance(content, str) else ""


class LanguageModelClient:
    def __init__(
        self,
        settings: LanguageModelSettings,
        url: str = CHAT_COMPLETIONS_URL,
        timeout: float | None = 120.0,
        session: requests.Session | None = None,
    ) -> None:
        self.settings = settings
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()

    def complete(self, request: ModelRequest) -> str:
        """Send one completion request and return the stripped reply text.

        Raises ``CredentialsMissing`` before any network traffic when no key
        is configured, and ``LanguageModelError`` for transport or HTTP
        failures. An empty reply is returned as ``""``.
        """
        self.settings.require_credentials()
        headers = {"Authorization": f"Bearer {self.settings.api_key}"}
        logger.debug("requesting completion from %s with model %s", self.url, request.model)
        try:
            response = self._session.post(self.url, json=request.payload(), headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise LanguageModelError(f"language model request failed: {exc}") from exc
        if not response.ok:
            raise LanguageModelError(f"language model API error: {response.status_code}")
        try:
            data = response.json()
        except ValueError as exc:
            raise LanguageModelError(f"language model returned invalid JSON: {exc}") from exc
        return _reply_text(data)


@dataclass
class ChatConversation:
    """Question/answer history seeded with a full listing as system context."""

    client: LanguageModelClient
    disassembly: str
    history: list[ChatMessage] = field(default_factory=list)

    def ask(self, question: str) -> str:
        """Ask one question; history only grows when the request succeeds."""
        user_message = ChatMessage(role="user", content=question.strip())
        request = ModelRequest(
            system_prompt=chat_system_prompt(self.disassembly),
            history=(*self.history, user_message),
            model=self.client.settings.model,
            max_tokens=CHAT_MAX_TOKENS,
        )
        reply = self.client.complete(request) or EMPTY_CHAT_REPLY
        self.history.append(user_message)
        self.history.append(ChatMessage(role="assistant", content=reply))
        return reply


def translate_listing(client: LanguageModelClient, disassembly: str) -> str:
    """Translate a whole listing into high-level code using the configured prompt."""
    request = ModelRequest(
        system_prompt=client.settings.translation_prompt,
        history=(ChatMessage(role="user", content=disassembly),),
        model=client.settings.model,
        max_tokens=TRANSLATION_MAX_TOKENS,
    )
    return client.complete(request) or EMPTY_TRANSLATION
