"""Configuration loaded from environment variables."""

from __future__ import annotations

import os

from dotenv import load_dotenv

from docsync.errors import ConfigError

load_dotenv()


def require(name: str) -> str:
    val = os.getenv(name)
    if not val:
        raise ConfigError(f"Required environment variable {name} is not set")
    return val


# Generation service
PROVIDER: str = os.getenv("DOCSYNC_PROVIDER", "anthropic")
ANTHROPIC_API_URL: str = os.getenv("ANTHROPIC_API_URL", "https://api.anthropic.com/v1/messages")
ANTHROPIC_VERSION: str = "2023-06-01"
CLAUDE_MODEL: str = os.getenv("CLAUDE_MODEL", "claude-3-sonnet-20240229")
GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-3-flash-preview")
MAX_TOKENS: int = int(os.getenv("MAX_TOKENS", "1500"))
REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "60"))

# Sequential-mode pacing
PACING_DELAY: float = float(os.getenv("PACING_DELAY", "1.0"))
BACKOFF_BASE: float = float(os.getenv("BACKOFF_BASE", "1.0"))
MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "5"))

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Provider name -> environment variable holding its credential
API_KEY_VARS = {
    "anthropic": "CLAUDE_API_KEY",
    "gemini": "GEMINI_API_KEY",
}


def api_key_for(provider: str) -> str:
    """Return the credential for a provider, read fresh from the environment.

    Raises ConfigError when the provider is unknown or its key is unset.
    """
    var = API_KEY_VARS.get(provider)
    if var is None:
        raise ConfigError(f"Unknown provider: {provider}")
    return require(var)
