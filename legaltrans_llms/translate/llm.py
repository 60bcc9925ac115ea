"""
LLM-based translation backends.

This module provides:
- OpenAI chat models (GPT-4o and compatible)
- DeepSeek (OpenAI-compatible API)
- Anthropic Claude models

Each backend turns a [system, user] message list into a
``GenerationResponse``. Structured output is supported: OpenAI-style
backends pass the schema as ``response_format``; Anthropic receives it
appended to the system prompt and the reply is parsed as JSON.
"""

from __future__ import annotations

import json
import logging
from abc import ABC
from dataclasses import dataclass
from typing import Optional

import anthropic
from openai import OpenAI

from legaltrans_llms.keys import KeyManager, env_var_for
from legaltrans_llms.translate.base import BackendError, GenerationResponse, TranslationBackend

logger = logging.getLogger(__name__)


@dataclass
class LLMConfig:
    """Configuration for LLM backends."""
    model: str = "gpt-4o"
    temperature: float = 0.2
    max_tokens: int = 4096
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    timeout: float = 120.0
    max_retries: int = 3


def _parse_json(content: str) -> Optional[dict]:
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        logger.warning("Structured response is not valid JSON")
        return None
    return data if isinstance(data, dict) else None


class BaseLLMBackend(TranslationBackend, ABC):
    """Common key lookup and client caching for LLM backends."""

    service = "openai"
    DEFAULT_MODEL = "gpt-4o"

    def __init__(self, config: Optional[LLMConfig] = None, api_key: Optional[str] = None):
        self.config = config or self.default_config()
        self._api_key = api_key or self.config.api_key
        self._client = None

    @classmethod
    def default_config(cls) -> LLMConfig:
        return LLMConfig(model=cls.DEFAULT_MODEL)

    @property
    def name(self) -> str:
        return f"{self.service}-{self.config.model}"

    @property
    def api_key(self) -> str:
        if not self._api_key:
            self._api_key = KeyManager().get_key(self.service)
        if not self._api_key:
            raise BackendError(
                f"{self.service} API key required. Set {env_var_for(self.service)} "
                f"or run: legaltrans keys set {self.service}"
            )
        return self._api_key


class OpenAIBackend(BaseLLMBackend):
    """OpenAI chat completions backend.

    Usage:
        backend = OpenAIBackend(config=LLMConfig(model="gpt-4o"))
        response = backend.generate(messages)
    """

    service = "openai"
    DEFAULT_BASE_URL: Optional[str] = None

    def _get_client(self) -> OpenAI:
        """Lazy initialization of the OpenAI client."""
        if self._client is None:
            kwargs = {
                "api_key": self.api_key,
                "timeout": self.config.timeout,
                "max_retries": self.config.max_retries,
            }
            base_url = self.config.base_url or self.DEFAULT_BASE_URL
            if base_url:
                kwargs["base_url"] = base_url
            self._client = OpenAI(**kwargs)
        return self._client

    def generate(self, messages, response_schema=None):
        client = self._get_client()
        kwargs = {
            "model": self.config.model,
            "messages": messages,
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }
        if response_schema:
            kwargs["response_format"] = {
                "type": "json_schema",
                "json_schema": {"name": "translation", "strict": True, "schema": response_schema},
            }

        try:
            response = client.chat.completions.create(**kwargs)
        except Exception as e:
            raise BackendError(f"{self.name} request failed: {e}") from e

        if not response.choices:
            return GenerationResponse(metadata={"backend": self.name})
        content = response.choices[0].message.content
        usage = getattr(response, "usage", None)
        return GenerationResponse(
            text=content,
            data=_parse_json(content) if response_schema and content else None,
            metadata={
                "backend": self.name,
                "model": self.config.model,
                "total_tokens": getattr(usage, "total_tokens", None),
            },
        )


class DeepSeekBackend(OpenAIBackend):
    """DeepSeek chat API through the OpenAI-compatible client."""

    service = "deepseek"
    DEFAULT_MODEL = "deepseek-chat"
    DEFAULT_BASE_URL = "https://api.deepseek.com/v1"


class AnthropicBackend(BaseLLMBackend):
    """Anthropic Claude backend."""

    service = "anthropic"
    DEFAULT_MODEL = "claude-3-5-sonnet-20241022"

    def _get_client(self) -> anthropic.Anthropic:
        if self._client is None:
            self._client = anthropic.Anthropic(
                api_key=self.api_key,
                timeout=self.config.timeout,
                max_retries=self.config.max_retries,
            )
        return self._client

    def generate(self, messages, response_schema=None):
        client = self._get_client()
        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        turns = [m for m in messages if m["role"] != "system"]
        if response_schema:
            system += (
                "\n\nRespond ONLY with a JSON object matching this schema:\n"
                + json.dumps(response_schema, ensure_ascii=False)
            )

        try:
            response = client.messages.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                system=system,
                messages=turns,
            )
        except Exception as e:
            raise BackendError(f"{self.name} request failed: {e}") from e

        content = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        ) if response.content else None
        return GenerationResponse(
            text=content,
            data=_parse_json(content) if response_schema and content else None,
            metadata={"backend": self.name, "model": self.config.model},
        )
