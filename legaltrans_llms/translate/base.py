"""
Translation backend interface and the Translation Invoker.

This module defines:
- ``TranslationBackend``: the capability every model backend implements
- ``DummyBackend``: offline backend for tests and dry runs
- ``TranslationInvoker``: sends a composed prompt plus the raw text to a
  backend and extracts the translated text from the reply
- ``create_backend``: factory by backend name

Design Philosophy:
- Backends are stateless: each call receives the full message list
- A backend may return plain text or schema-shaped data; the invoker
  normalises both to a string
- Backend exceptions never leak raw: they surface as ``TranslationFailed``
  chained to the original error
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

logger = logging.getLogger(__name__)


class BackendError(RuntimeError):
    """A backend could not produce a response (auth, network, API error)."""


class TranslationFailed(RuntimeError):
    """The model call for a translation failed; no partial result exists."""


@dataclass
class GenerationResponse:
    """Raw reply of a backend.

    Attributes:
        text: Message text, None if the model returned none
        data: Parsed structured output when a response schema was requested
        metadata: Backend info (model, token usage, ...)
    """
    text: Optional[str] = None
    data: Optional[dict[str, Any]] = None
    metadata: dict = field(default_factory=dict)


class TranslationBackend(ABC):
    """Abstract base class for model backends.

    All backends must implement:
    - name: backend identifier used in logs and metadata
    - generate(): run one chat completion over ``messages``
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the backend name (e.g. 'openai-gpt-4o', 'dummy-echo')."""

    @abstractmethod
    def generate(
        self,
        messages: list[dict[str, str]],
        response_schema: Optional[dict] = None,
    ) -> Optional[GenerationResponse]:
        """Run the model over a [system, user] message list.

        Args:
            messages: Chat messages with ``role`` and ``content``
            response_schema: Optional JSON schema for structured output

        Raises:
            BackendError (or any exception) when the call fails
        """


class DummyBackend(TranslationBackend):
    """A dummy backend for testing.

    Modes:
    - 'echo': Return the user message unchanged
    - 'upper': Return it uppercased
    - 'prefix': Add a [TRANSLATED] prefix
    - 'empty': Return no text at all
    """

    MODES = ("echo", "upper", "prefix", "empty")

    def __init__(self, mode: str = "echo"):
        if mode not in self.MODES:
            raise ValueError(f"Unknown dummy mode: {mode}. Available: {', '.join(self.MODES)}")
        self.mode = mode
        self.calls: list[list[dict[str, str]]] = []

    @property
    def name(self) -> str:
        return f"dummy-{self.mode}"

    def generate(self, messages, response_schema=None):
        self.calls.append(messages)
        text = next((m["content"] for m in reversed(messages) if m["role"] == "user"), "")

        if self.mode == "empty":
            translated = None
        elif self.mode == "upper":
            translated = text.upper()
        elif self.mode == "prefix":
            translated = f"[TRANSLATED] {text}"
        else:  # echo
            translated = text

        return GenerationResponse(text=translated, metadata={"backend": self.name})


# ============================================================================
# Response extraction
# ============================================================================

_PREFIXES = ("Translation:", "Translated text:", "Here is the translation:")
_TEXT_FIELDS = ("translatedText", "translated_text", "translation", "text")


def parse_response(response: str) -> str:
    """Strip code fences and "Translation:"-style preambles from a reply."""
    cleaned = response.strip()

    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        if lines[-1].strip() == "```":
            lines = lines[1:-1]
        else:
            lines = lines[1:]
        cleaned = "\n".join(lines).strip()

    for prefix in _PREFIXES:
        if cleaned.lower().startswith(prefix.lower()):
            cleaned = cleaned[len(prefix):].strip()

    return cleaned


def extract_text(response: Optional[GenerationResponse]) -> Optional[str]:
    """Text of a backend reply, or None when it carries none."""
    if response is None:
        return None
    if isinstance(response.data, dict):
        for key in _TEXT_FIELDS:
            value = response.data.get(key)
            if isinstance(value, str):
                return value
        return None
    if isinstance(response.text, str):
        return response.text
    return None


class TranslationInvoker:
    """Send a composed prompt and the source text to a backend.

    Usage:
        invoker = TranslationInvoker(create_backend("openai"))
        text = invoker.invoke(prompt_spec, "WHEREAS the parties ...")
    """

    def __init__(self, backend: TranslationBackend):
        self.backend = backend

    def build_messages(self, prompt_spec, raw_text: str) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": prompt_spec.system_prompt()},
            {"role": "user", "content": prompt_spec.user_message(raw_text)},
        ]

    def invoke(self, prompt_spec, raw_text: str, response_schema: Optional[dict] = None) -> str:
        """Translate ``raw_text`` under ``prompt_spec``.

        Returns:
            The extracted translation; "" when the model returned nothing
            usable (logged as a warning)

        Raises:
            TranslationFailed: the backend raised
        """
        messages = self.build_messages(prompt_spec, raw_text)
        try:
            response = self.backend.generate(messages, response_schema=response_schema)
        except Exception as e:
            logger.error("Backend %s failed: %s", self.backend.name, e)
            raise TranslationFailed(f"Translation failed: {e}") from e

        text = extract_text(response)
        if text is None:
            logger.warning("Backend %s returned no text; using empty translation", self.backend.name)
            return ""
        return parse_response(text)


def create_backend(backend: str, **kwargs) -> TranslationBackend:
    """Factory function to create a backend by name.

    Args:
        backend: Backend name ('dummy', 'openai', 'deepseek', 'anthropic')
        **kwargs: Backend-specific arguments (mode, model, config, api_key)

    Supported backends and aliases:
        - dummy, echo, test: DummyBackend
        - openai, gpt: OpenAI chat models
        - deepseek, ds: DeepSeek (OpenAI-compatible API)
        - anthropic, claude: Anthropic Claude models
    """
    backend_lower = backend.lower().replace("_", "-")

    if backend_lower in ("dummy", "echo", "test"):
        return DummyBackend(mode=kwargs.get("mode", "echo"))

    from legaltrans_llms.translate.llm import AnthropicBackend, DeepSeekBackend, LLMConfig, OpenAIBackend

    classes = {
        "openai": OpenAIBackend, "gpt": OpenAIBackend,
        "deepseek": DeepSeekBackend, "ds": DeepSeekBackend,
        "anthropic": AnthropicBackend, "claude": AnthropicBackend,
    }
    cls = classes.get(backend_lower)
    if cls is None:
        raise ValueError(
            f"Unknown translation backend: {backend}. "
            "Available backends: dummy, openai, deepseek, anthropic"
        )

    config = kwargs.get("config")
    if config is None:
        config = LLMConfig(model=kwargs["model"]) if kwargs.get("model") else cls.default_config()
    return cls(config=config, api_key=kwargs.get("api_key"))
