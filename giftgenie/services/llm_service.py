"""LLM Service - Abstraction layer for AI model calls.

This module provides a unified interface for calling different LLM providers
(Gemini, OpenAI) with consistent error handling and response formatting.

Interface Contract:
- call() returns the raw response text (possibly empty)
- When a response_schema is given, the text is JSON matching that schema
- All methods raise LLMServiceError on failure
- Callers should not depend on specific LLM provider details
"""

from __future__ import annotations

import copy
import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Any

import google.generativeai as genai
from openai import OpenAI

from config import DEFAULT_MODEL, LLM_PROVIDER, OPENAI_MODEL


logger = logging.getLogger(__name__)


class LLMServiceError(Exception):
    """Raised when LLM call fails."""
    pass


class BaseLLMService(ABC):
    """Abstract base class for LLM services."""

    @abstractmethod
    def call(
        self,
        prompt: str,
        *,
        json_mode: bool = False,
        response_schema: dict[str, Any] | None = None,
    ) -> str:
        """Call the LLM with a prompt.

        Args:
            prompt: The prompt to send to the LLM
            json_mode: If True, expect JSON response
            response_schema: Optional JSON schema the response must follow.
                Implies json_mode.

        Returns:
            str: The LLM response text

        Raises:
            LLMServiceError: If the call fails
        """
        pass


class GeminiService(BaseLLMService):
    """Google Gemini LLM service implementation."""

    def __init__(self, model: str = DEFAULT_MODEL):
        self.model = model
        self._configured = False

    def _configure(self) -> None:
        """Configure Gemini API (lazy initialization)."""
        if self._configured:
            return
        api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")
        if not api_key:
            raise LLMServiceError("GEMINI_API_KEY or GOOGLE_API_KEY environment variable not set")
        genai.configure(api_key=api_key)
        self._configured = True

    def call(
        self,
        prompt: str,
        *,
        json_mode: bool = False,
        response_schema: dict[str, Any] | None = None,
    ) -> str:
        """Call Gemini model."""
        self._configure()
        try:
            gen_config = None
            if json_mode or response_schema is not None:
                gen_config = genai.GenerationConfig(
                    response_mime_type="application/json",
                    response_schema=response_schema,
                )
            model = genai.GenerativeModel(self.model)
            response = model.generate_content(prompt, generation_config=gen_config)
            return response.text
        except Exception as e:
            raise LLMServiceError(f"Gemini call failed: {e}") from e


class OpenAIService(BaseLLMService):
    """OpenAI LLM service implementation.

    OpenAI structured output needs an object at the top level, so array
    schemas are wrapped under an ``items`` property and unwrapped again
    before the text is returned.
    """

    WRAPPER_KEY = "items"

    def __init__(self, model: str = OPENAI_MODEL):
        self.model = model
        self._client: OpenAI | None = None

    def _get_client(self) -> OpenAI:
        """Get or create OpenAI client (lazy initialization)."""
        if self._client is None:
            api_key = os.environ.get("OPENAI_API_KEY")
            if not api_key:
                raise LLMServiceError("OPENAI_API_KEY environment variable not set")
            self._client = OpenAI(api_key=api_key)
        return self._client

    def call(
        self,
        prompt: str,
        *,
        json_mode: bool = False,
        response_schema: dict[str, Any] | None = None,
    ) -> str:
        """Call OpenAI model."""
        wrapped = False
        response_format = None
        if response_schema is not None:
            schema = _strict_schema(response_schema)
            if schema.get("type") != "object":
                schema = {
                    "type": "object",
                    "properties": {self.WRAPPER_KEY: schema},
                    "required": [self.WRAPPER_KEY],
                    "additionalProperties": False,
                }
                wrapped = True
            response_format = {
                "type": "json_schema",
                "json_schema": {"name": "response", "schema": schema, "strict": True},
            }
        elif json_mode:
            response_format = {"type": "json_object"}

        try:
            client = self._get_client()
            kwargs: dict[str, Any] = {}
            if response_format is not None:
                kwargs["response_format"] = response_format
            response = client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                **kwargs,
            )
            content = response.choices[0].message.content or ""
        except LLMServiceError:
            raise
        except Exception as e:
            raise LLMServiceError(f"OpenAI call failed: {e}") from e

        if wrapped and content:
            return self._unwrap(content)
        return content

    def _unwrap(self, content: str) -> str:
        """Pull the wrapped array back out; leave anything unexpected as-is."""
        try:
            data = json.loads(content)
        except (ValueError, RecursionError):
            logger.warning("[openai] response is not JSON, passing through")
            return content
        if isinstance(data, dict) and self.WRAPPER_KEY in data:
            return json.dumps(data[self.WRAPPER_KEY], ensure_ascii=False)
        return content


def _strict_schema(schema: dict[str, Any]) -> dict[str, Any]:
    """Copy of ``schema`` with ``additionalProperties: false`` on every object."""
    result = copy.deepcopy(schema)
    stack = [result]
    while stack:
        node = stack.pop()
        if node.get("type") == "object":
            node.setdefault("additionalProperties", False)
            stack.extend(node.get("properties", {}).values())
        elif node.get("type") == "array" and isinstance(node.get("items"), dict):
            stack.append(node["items"])
    return result


PROVIDERS = {
    "gemini": GeminiService,
    "openai": OpenAIService,
}


class LLMService:
    """Facade for LLM services with provider switching."""

    _instance: BaseLLMService | None = None

    @classmethod
    def get_instance(cls) -> BaseLLMService:
        """Get the configured LLM service instance."""
        if cls._instance is None:
            cls._instance = create_service(LLM_PROVIDER)
        return cls._instance

    @classmethod
    def set_instance(cls, service: BaseLLMService) -> None:
        """Set a custom LLM service (useful for testing)."""
        cls._instance = service

    @classmethod
    def reset(cls) -> None:
        """Reset to default service."""
        cls._instance = None


def create_service(provider: str) -> BaseLLMService:
    """Build the service for a provider name."""
    try:
        service_cls = PROVIDERS[provider]
    except KeyError:
        raise LLMServiceError(
            f"Unknown LLM provider '{provider}' (expected one of: {', '.join(PROVIDERS)})"
        ) from None
    logger.info("[llm] provider=%s", provider)
    return service_cls()
