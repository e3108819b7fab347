"""Tests for environment configuration."""

from __future__ import annotations

import pytest

from docsync import config
from docsync.errors import ConfigError


def test_require_returns_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCSYNC_TEST_VALUE", "abc")
    assert config.require("DOCSYNC_TEST_VALUE") == "abc"


@pytest.mark.parametrize("value", [None, ""])
def test_require_rejects_missing_or_empty(monkeypatch: pytest.MonkeyPatch, value: str | None) -> None:
    if value is None:
        monkeypatch.delenv("DOCSYNC_TEST_VALUE", raising=False)
    else:
        monkeypatch.setenv("DOCSYNC_TEST_VALUE", value)
    with pytest.raises(ConfigError, match="DOCSYNC_TEST_VALUE"):
        config.require("DOCSYNC_TEST_VALUE")


def test_api_key_for_provider(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CLAUDE_API_KEY", "claude-key")
    monkeypatch.setenv("GEMINI_API_KEY", "gemini-key")
    assert config.api_key_for("anthropic") == "claude-key"
    assert config.api_key_for("gemini") == "gemini-key"


def test_api_key_for_unknown_provider() -> None:
    with pytest.raises(ConfigError, match="Unknown provider"):
        config.api_key_for("nope")


def test_defaults() -> None:
    assert config.ANTHROPIC_VERSION == "2023-06-01"
    assert config.MAX_TOKENS > 0
    assert config.MAX_RETRIES >= 0


def test_api_key_is_read_at_call_time(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CLAUDE_API_KEY", "first")
    assert config.api_key_for("anthropic") == "first"
    monkeypatch.setenv("CLAUDE_API_KEY", "second")
    assert config.api_key_for("anthropic") == "second"
    assert not hasattr(config, "CLAUDE_API_KEY")
