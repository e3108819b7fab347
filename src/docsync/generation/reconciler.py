"""Align a bulk response with the methods it was generated for."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

DELIMITER = "---"
PLACEHOLDER_DOCBLOCK = "/** Generated docblock */"


def split_segments(text: str, delimiter: str = DELIMITER) -> list[str]:
    """Split a bulk response into trimmed, non-empty segments."""
    return [s.strip() for s in text.split(delimiter) if s.strip()]


def reconcile(
    segments: list[str],
    expected: int,
    placeholder: str = PLACEHOLDER_DOCBLOCK,
    raw_response: str | None = None,
) -> list[str]:
    """Force the segment list to exactly ``expected`` items.

    Segment i stays paired with method i. A short list is padded with the
    placeholder, a long one truncated. A mismatch is logged, never raised.
    """
    found = len(segments)
    if found == expected:
        return list(segments)

    logger.warning(
        "Mismatch between number of methods (%d) and generated docblocks (%d)",
        expected, found,
    )
    if raw_response is not None:
        logger.warning("AI response content:\n%s", raw_response)

    if found < expected:
        adjusted = list(segments) + [placeholder] * (expected - found)
    else:
        adjusted = list(segments[:expected])
    logger.warning(
        "Adjusted number of docblocks to match methods. "
        "Some docblocks may be missing or incomplete."
    )
    return adjusted
