"""Persistent JSON config helpers.

Holds language-model credentials, model selection, the translation prompt,
and backend location. A malformed or missing config falls back to defaults
instead of raising.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .errors import CredentialsMissing

logger = logging.getLogger(__name__)

APP_NAME = "asmview"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
LOCAL_CONFIG_PATH = Path(CONFIG_FILENAME)
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_MODEL = "gpt-4o"
DEFAULT_TRANSLATION_PROMPT = (
    "You are an expert reverse engineer. Convert the following assembly code into "
    "equivalent Python code. Only output the Python code, no explanations."
)
PLACEHOLDER_KEY_PREFIX = "sk-..."


@dataclass(frozen=True)
class LanguageModelSettings:
    api_key: str = ""
    model: str = DEFAULT_MODEL
    translation_prompt: str = DEFAULT_TRANSLATION_PROMPT

    @property
    def has_credentials(self) -> bool:
        key = self.api_key.strip()
        return bool(key) and not key.startswith(PLACEHOLDER_KEY_PREFIX)

    def require_credentials(self) -> None:
        """Raise ``CredentialsMissing`` unless a real API key is configured."""
        if not self.has_credentials:
            raise CredentialsMissing(f"language-model API key not set in {CONFIG_FILENAME}")


@dataclass(frozen=True)
class BackendSettings:
    radare2_path: str = "radare2"
    backend_url: str | None = None


def _load_config_path() -> Path:
    """Return the user config file, falling back to ``config.json`` in the working directory."""
    if CONFIG_PATH.exists():
        return CONFIG_PATH
    if CONFIG_PATH == DEFAULT_CONFIG_PATH and LOCAL_CONFIG_PATH.exists():
        return LOCAL_CONFIG_PATH
    return CONFIG_PATH


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = _load_config_path()
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", config_path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _first_string(data: dict[str, object], *keys: str) -> str | None:
    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def load_language_model_settings(data: dict[str, object] | None = None) -> LanguageModelSettings:
    """Build language-model settings; both camelCase and ``openai_*`` keys are accepted."""
    if data is None:
        data = load_config()
    return LanguageModelSettings(
        api_key=_first_string(data, "apiKey", "openai_api_key") or "",
        model=_first_string(data, "model", "openai_model") or DEFAULT_MODEL,
        translation_prompt=_first_string(data, "translationPrompt", "openai_prompt") or DEFAULT_TRANSLATION_PROMPT,
    )


def load_backend_settings(data: dict[str, object] | None = None) -> BackendSettings:
    if data is None:
        data = load_config()
    return BackendSettings(
        radare2_path=_first_string(data, "radare2_path") or "radare2",
        backend_url=_first_string(data, "backend_url"),
    )
