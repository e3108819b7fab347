"""Turn extracted methods into docblock text via a generation provider.

Two modes, chosen per run:

* bulk: one request covering every method; the reply is split on ``---``
  and later reconciled to the method count. Any failure aborts the batch.
* sequential: one request per method with pacing and exponential backoff;
  a failure only costs the method it happened on.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Sequence

from docsync import config
from docsync.errors import (
    EmptyResponseError,
    GenerationError,
    RateLimitedError,
    RetryExhaustedError,
    TransportError,
)
from docsync.generation.provider import GenerationProvider
from docsync.generation.reconciler import DELIMITER, split_segments
from docsync.models import Method, MethodFailure

logger = logging.getLogger(__name__)

BULK_PROMPT = (
    "Generate PHP docblocks for the following {count} methods. For each method, "
    "provide a concise description, @param tags for each parameter, and @return tag "
    "if applicable. If there's an existing docblock, improve it if it's vague or "
    "incomplete. Separate each docblock with '{delimiter}'.\n\n{methods}"
)

METHOD_PROMPT = (
    "Generate a PHP docblock for the following method. Provide a concise description, "
    "@param tags for each parameter, and @return tag if applicable. If there's an "
    "existing docblock, improve it if it's vague or incomplete. Reply with the docblock "
    "only, starting with /** and ending with */.\n\n{method}"
)

# Failures repeated after a backoff delay
_RETRYABLE = (RateLimitedError, TransportError)


def describe_method(method: Method, index: int) -> str:
    """Render one method the way both prompts present it."""
    existing = method.docblock.strip() if method.docblock else "None"
    return (
        f"Method {index}:\n"
        f"Visibility: {method.visibility.value}\n"
        f"Name: {method.name}\n"
        f"Parameters: {method.parameters}\n"
        f"Body:\n{method.body}\n"
        f"Existing docblock (if any):\n{existing}\n"
    )


def build_bulk_prompt(methods: Sequence[Method]) -> str:
    described = f"\n{DELIMITER}\n".join(
        describe_method(m, i) for i, m in enumerate(methods, 1)
    )
    return BULK_PROMPT.format(count=len(methods), delimiter=DELIMITER, methods=described)


def build_method_prompt(method: Method) -> str:
    return METHOD_PROMPT.format(method=describe_method(method, 1))


@dataclass
class BulkResponse:
    """Raw reply text and its delimiter-split segments (not yet reconciled)."""

    raw: str
    segments: list[str]


@dataclass
class SequentialResult:
    """One entry per input method; None where generation failed."""

    annotations: list[str | None]
    failures: list[MethodFailure] = field(default_factory=list)


class BulkGenerator:
    """Generates every docblock with a single request."""

    def __init__(self, provider: GenerationProvider) -> None:
        self._provider = provider

    def generate(
        self,
        methods: Sequence[Method],
        on_progress: Callable[[dict], None] | None = None,
    ) -> BulkResponse:
        """Send one prompt for all methods and split the reply.

        Provider errors propagate unchanged: one failed request invalidates
        the whole batch.
        """
        prompt = build_bulk_prompt(methods)
        if on_progress:
            on_progress({"step": "generate", "current": 0, "total": len(methods), "method": None})

        raw = self._provider.generate(prompt)
        segments = split_segments(raw)
        logger.info("Bulk response split into %d segment(s) for %d method(s)", len(segments), len(methods))

        if on_progress:
            on_progress({"step": "generate", "current": len(methods), "total": len(methods), "method": None})
        return BulkResponse(raw=raw, segments=segments)


class SequentialGenerator:
    """Generates docblocks one method at a time with pacing and backoff."""

    def __init__(
        self,
        provider: GenerationProvider,
        pacing_delay: float | None = None,
        backoff_base: float | None = None,
        max_retries: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._provider = provider
        self._pacing_delay = config.PACING_DELAY if pacing_delay is None else pacing_delay
        self._backoff_base = config.BACKOFF_BASE if backoff_base is None else backoff_base
        self._max_retries = config.MAX_RETRIES if max_retries is None else max_retries
        self._sleep = sleep

    def generate_one(self, method: Method) -> str:
        """Generate a docblock for one method.

        Rate-limited and transport failures are retried after
        ``backoff_base * 2**n`` seconds, at most ``max_retries`` times.

        Raises:
            RetryExhaustedError: every retry was rate limited or failed to connect.
            EmptyResponseError: the reply was blank.
            GenerationError: any other failure, without retrying.
        """
        prompt = build_method_prompt(method)
        attempt = 0
        while True:
            try:
                text = self._provider.generate(prompt)
            except _RETRYABLE as e:
                if attempt >= self._max_retries:
                    raise RetryExhaustedError(attempt + 1, e) from e
                delay = self._backoff_base * (2 ** attempt)
                logger.info("%s for %s, retrying in %.1fs", type(e).__name__, method.name, delay)
                self._sleep(delay)
                attempt += 1
                continue

            text = text.strip()
            if not text:
                raise EmptyResponseError(f"Empty docblock returned for {method.name}")
            return text

    def generate(
        self,
        methods: Sequence[Method],
        on_progress: Callable[[dict], None] | None = None,
    ) -> SequentialResult:
        """Generate docblocks for each method in order, isolating failures."""
        result = SequentialResult(annotations=[])
        total = len(methods)

        for i, method in enumerate(methods, 1):
            try:
                result.annotations.append(self.generate_one(method))
            except GenerationError as e:
                logger.warning("Error generating docblock for %s: %s", method.name, e)
                result.annotations.append(None)
                result.failures.append(MethodFailure(method=method, error=e))

            if on_progress:
                on_progress({"step": "generate", "current": i, "total": total, "method": method.name})

            if i < total and self._pacing_delay > 0:
                self._sleep(self._pacing_delay)

        return result
