"""Exception types raised by the docsync pipeline."""

from __future__ import annotations


class DocsyncError(RuntimeError):
    """Base class for every docsync failure."""


class ConfigError(DocsyncError):
    """A required setting (usually a credential) is missing or invalid."""


class SourceFileError(DocsyncError):
    """The source file could not be read or written."""


class GenerationError(DocsyncError):
    """The generation service did not produce usable text."""


class RateLimitedError(GenerationError):
    """The service answered HTTP 429."""


class TransportError(GenerationError):
    """The request never got a response (connection, timeout, DNS)."""


class ServiceError(GenerationError):
    """The service answered with a non-success status other than 429."""

    def __init__(self, status: int, message: str = "") -> None:
        self.status = status
        detail = f": {message}" if message else ""
        super().__init__(f"API request failed with status {status}{detail}")


class ResponseFormatError(GenerationError):
    """The response body did not contain the expected text field."""


class EmptyResponseError(GenerationError):
    """The service returned only whitespace."""


class RetryExhaustedError(GenerationError):
    """Every retry of a rate-limited request was used up."""

    def __init__(self, attempts: int, last_error: Exception) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Gave up after {attempts} attempts: {last_error}")
