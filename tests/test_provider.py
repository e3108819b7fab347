"""Tests for the generation providers (HTTP faked with httpx.MockTransport)."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import httpx
import pytest
from google.genai import errors as genai_errors

from docsync.errors import (
    RateLimitedError,
    ResponseFormatError,
    ServiceError,
    TransportError,
)
from docsync.generation.provider import (
    AnthropicProvider,
    GeminiProvider,
    create_provider,
)

API_URL = "https://api.test/v1/messages"


def _provider(handler) -> AnthropicProvider:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return AnthropicProvider("secret", model="claude-test", max_tokens=100, api_url=API_URL, client=client)


class TestAnthropicProvider:
    def test_request_shape_and_text(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"content": [{"type": "text", "text": "/** doc */"}]})

        assert _provider(handler).generate("describe this") == "/** doc */"

        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == API_URL
        assert request.headers["x-api-key"] == "secret"
        assert request.headers["anthropic-version"] == "2023-06-01"
        assert json.loads(request.content) == {
            "model": "claude-test",
            "max_tokens": 100,
            "messages": [{"role": "user", "content": "describe this"}],
        }

    def test_429_is_rate_limited(self) -> None:
        provider = _provider(lambda request: httpx.Response(429, json={"error": "slow down"}))
        with pytest.raises(RateLimitedError):
            provider.generate("x")

    def test_other_status_is_service_error(self) -> None:
        provider = _provider(lambda request: httpx.Response(500, text="overloaded"))
        with pytest.raises(ServiceError) as exc_info:
            provider.generate("x")
        assert exc_info.value.status == 500
        assert "overloaded" in str(exc_info.value)

    def test_missing_text_field(self) -> None:
        provider = _provider(lambda request: httpx.Response(200, json={"content": []}))
        with pytest.raises(ResponseFormatError):
            provider.generate("x")

    def test_non_json_body(self) -> None:
        provider = _provider(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(ResponseFormatError):
            provider.generate("x")

    def test_connection_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(TransportError):
            _provider(handler).generate("x")

    def test_undecodable_body_is_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, headers={"content-encoding": "gzip"}, content=b"notgzip")

        with pytest.raises(TransportError) as exc_info:
            _provider(handler).generate("x")
        assert isinstance(exc_info.value.__cause__, httpx.DecodingError)


class TestGeminiProvider:
    def test_returns_text(self) -> None:
        with patch("docsync.generation.provider.genai.Client") as client_cls:
            client_cls.return_value.models.generate_content.return_value = MagicMock(text="/** g */")
            provider = GeminiProvider("key", model="gemini-test")
            assert provider.generate("prompt") == "/** g */"

        client_cls.assert_called_once_with(api_key="key")
        kwargs = client_cls.return_value.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert kwargs["contents"] == "prompt"

    def test_429_is_rate_limited(self) -> None:
        error = genai_errors.ClientError(
            429, {"error": {"code": 429, "message": "quota", "status": "RESOURCE_EXHAUSTED"}}
        )
        with patch("docsync.generation.provider.genai.Client") as client_cls:
            client_cls.return_value.models.generate_content.side_effect = error
            with pytest.raises(RateLimitedError):
                GeminiProvider("key").generate("prompt")

    def test_other_api_error_is_service_error(self) -> None:
        error = genai_errors.ClientError(
            400, {"error": {"code": 400, "message": "bad", "status": "INVALID_ARGUMENT"}}
        )
        with patch("docsync.generation.provider.genai.Client") as client_cls:
            client_cls.return_value.models.generate_content.side_effect = error
            with pytest.raises(ServiceError) as exc_info:
                GeminiProvider("key").generate("prompt")
        assert exc_info.value.status == 400

    def test_missing_text(self) -> None:
        with patch("docsync.generation.provider.genai.Client") as client_cls:
            client_cls.return_value.models.generate_content.return_value = MagicMock(text=None)
            with pytest.raises(ResponseFormatError):
                GeminiProvider("key").generate("prompt")


class TestCreateProvider:
    def test_anthropic(self) -> None:
        assert isinstance(create_provider("anthropic", "key"), AnthropicProvider)

    def test_gemini(self) -> None:
        with patch("docsync.generation.provider.genai.Client"):
            assert isinstance(create_provider("gemini", "key"), GeminiProvider)

    def test_unknown(self) -> None:
        with pytest.raises(ValueError):
            create_provider("nope", "key")
