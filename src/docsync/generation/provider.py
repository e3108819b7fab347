"""Generation provider interface with Anthropic and Gemini implementations."""

from __future__ import annotations

import logging
import time
from typing import Protocol

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from docsync import config
from docsync.errors import (
    RateLimitedError,
    ResponseFormatError,
    ServiceError,
    TransportError,
)

logger = logging.getLogger(__name__)

PROVIDERS = ("anthropic", "gemini")


class GenerationProvider(Protocol):
    """Protocol for text generation providers.

    Implementations raise RateLimitedError on HTTP 429, TransportError when
    no usable response arrives, ServiceError on other failure statuses and
    ResponseFormatError when the reply has no text.
    """

    def generate(self, prompt: str) -> str:
        """Generate text from a prompt, returning the response string."""
        ...


def _extract_text(body: object) -> str:
    """Pull ``content[0].text`` out of a Messages API response."""
    content = body.get("content") if isinstance(body, dict) else None
    if isinstance(content, list) and content:
        first = content[0]
        if isinstance(first, dict) and isinstance(first.get("text"), str):
            return first["text"]
    raise ResponseFormatError("Failed to extract content from API response")


class AnthropicProvider:
    """Anthropic Messages API over plain HTTP."""

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        max_tokens: int | None = None,
        api_url: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model or config.CLAUDE_MODEL
        self._max_tokens = max_tokens or config.MAX_TOKENS
        self._api_url = api_url or config.ANTHROPIC_API_URL
        self._client = client or httpx.Client(timeout=timeout or config.REQUEST_TIMEOUT)

    def generate(self, prompt: str) -> str:
        """Send one user message and return the first text block.

        Args:
            prompt: The user prompt.

        Returns:
            The generated text, untrimmed.
        """
        logger.debug("Generate via %s (%d char prompt)", self._model, len(prompt))
        t0 = time.perf_counter()
        try:
            response = self._client.post(
                self._api_url,
                headers={
                    "x-api-key": self._api_key,
                    "anthropic-version": config.ANTHROPIC_VERSION,
                    "content-type": "application/json",
                },
                json={
                    "model": self._model,
                    "max_tokens": self._max_tokens,
                    "messages": [{"role": "user", "content": prompt}],
                },
            )
        except httpx.RequestError as e:
            raise TransportError(f"Request to {self._api_url} failed: {e}") from e

        if response.status_code == 429:
            raise RateLimitedError("API request was rate limited (status 429)")
        if not response.is_success:
            raise ServiceError(response.status_code, response.text[:500])

        try:
            body = response.json()
        except ValueError as e:
            raise ResponseFormatError("API response is not valid JSON") from e

        text = _extract_text(body)
        logger.debug("Generate complete: %d chars, %.0fms", len(text), (time.perf_counter() - t0) * 1000)
        return text


class GeminiProvider:
    """Gemini implementation of the same capability."""

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        max_tokens: int | None = None,
    ) -> None:
        self._client = genai.Client(api_key=api_key)
        self._model = model or config.GEMINI_MODEL
        self._max_tokens = max_tokens or config.MAX_TOKENS

    def generate(self, prompt: str) -> str:
        logger.debug("Generate via %s (%d char prompt)", self._model, len(prompt))
        t0 = time.perf_counter()
        try:
            response = self._client.models.generate_content(
                model=self._model,
                contents=prompt,
                config=types.GenerateContentConfig(max_output_tokens=self._max_tokens),
            )
        except genai_errors.APIError as e:
            if e.code == 429:
                raise RateLimitedError(f"Gemini rate limited: {e}") from e
            raise ServiceError(e.code, str(e)) from e
        except httpx.RequestError as e:
            raise TransportError(f"Gemini request failed: {e}") from e

        if response.text is None:
            raise ResponseFormatError("Gemini response contained no text")
        logger.debug("Generate complete: %d chars, %.0fms", len(response.text), (time.perf_counter() - t0) * 1000)
        return response.text


def create_provider(name: str, api_key: str, model: str | None = None) -> GenerationProvider:
    """Build a provider by name with an explicit credential."""
    if name == "anthropic":
        return AnthropicProvider(api_key, model=model)
    if name == "gemini":
        return GeminiProvider(api_key, model=model)
    raise ValueError(f"Unknown provider: {name}")
