"""Apply generated docblocks to the source text.

Two ways to find where a docblock goes:

* ``OffsetRewriter`` trusts the offsets recorded at extraction and shifts
  them by everything inserted so far. Safe for a whole batch.
* ``NameRewriter`` searches the current text for each method's signature.
  Needs no offsets, but a signature that occurs more than once always
  resolves to its first occurrence, so repeats in a batch are skipped.
"""

from __future__ import annotations

import logging
import re
import textwrap
from enum import Enum
from pathlib import Path
from typing import Protocol, Sequence

from docsync.errors import SourceFileError
from docsync.models import Method

logger = logging.getLogger(__name__)

REWRITERS = ("offset", "name")

_MODIFIERS = r"(?:(?:final|abstract|static|public|protected|private)\s+)*"
_DOCBLOCK_LINES = r"(/\*\*(?:(?!\*/).)*\*/[ \t]*\n)?"


class DocblockPolicy(str, Enum):
    """What happens to a docblock the method already had."""

    PREPEND = "prepend"  # keep it, insert the new one in front
    REPLACE = "replace"  # swap it for the new one


class Rewriter(Protocol):
    name: str
    applied: list[Method]  # methods placed by the last apply()

    def apply(self, source: str, methods: Sequence[Method]) -> str:
        """Return the source with each method's annotation applied."""
        ...


class OffsetRewriter:
    """Inserts at recorded offsets, compensating for earlier insertions."""

    name = "offset"

    def __init__(self, policy: DocblockPolicy = DocblockPolicy.PREPEND) -> None:
        self._policy = policy
        self.applied: list[Method] = []

    def apply(self, source: str, methods: Sequence[Method]) -> str:
        """Apply annotations in ascending offset order.

        Each insertion at ``start_position + adjustment`` grows ``adjustment``
        by the length it added. Methods without an annotation leave the text
        untouched.

        Raises:
            ValueError: methods are not in ascending start_position order.
        """
        buffer = source
        adjustment = 0
        previous = -1
        self.applied = []

        for method in methods:
            if method.start_position < previous:
                raise ValueError(
                    f"Method {method.name} at {method.start_position} is out of order "
                    f"(previous method started at {previous})"
                )
            previous = method.start_position
            if not method.annotation:
                continue

            position = method.start_position + adjustment
            if self._policy is DocblockPolicy.REPLACE and method.docblock:
                # A captured docblock always starts the matched construct
                stale = len(method.docblock.rstrip())
                buffer = buffer[:position] + method.annotation + buffer[position + stale:]
                adjustment += len(method.annotation) - stale
            else:
                inserted = f"\n{method.annotation}\n"
                buffer = buffer[:position] + inserted + buffer[position:]
                adjustment += len(inserted)
            self.applied.append(method)

        return buffer


class NameRewriter:
    """Re-locates each method by name and parameters in the current text."""

    name = "name"

    def __init__(self, policy: DocblockPolicy = DocblockPolicy.PREPEND) -> None:
        self._policy = policy
        self.applied: list[Method] = []

    def _pattern(self, method: Method) -> re.Pattern[str]:
        params = r"\s+".join(re.escape(tok) for tok in method.parameters.split())
        docblock = _DOCBLOCK_LINES if self._policy is DocblockPolicy.REPLACE else "()"
        return re.compile(
            rf"^([ \t]*){docblock}[ \t]*"
            rf"({_MODIFIERS}function\s+&?\s*{re.escape(method.name)}\s*\(\s*{params}\s*\))",
            re.MULTILINE | re.DOTALL,
        )

    def apply_one(self, source: str, method: Method) -> str:
        """Put one method's annotation above its signature line.

        Returns the source unchanged when the method has no annotation or
        its signature can no longer be found.
        """
        if not method.annotation:
            return source
        match = self._pattern(method).search(source)
        if match is None:
            logger.warning("Could not locate %s(%s); skipping", method.name, method.parameters.strip())
            return source

        indent, _stale, signature = match.groups()
        annotation = textwrap.indent(textwrap.dedent(method.annotation), indent)
        replacement = f"{annotation}\n{indent}{signature}"
        return source[:match.start()] + replacement + source[match.end():]

    def apply(self, source: str, methods: Sequence[Method]) -> str:
        """Apply each annotation by signature search.

        Only the first method with a given name and parameter list is
        placed; later ones would land on that same first occurrence, so they
        are logged and left for a single-method run on a re-scanned file.
        """
        buffer = source
        self.applied = []
        seen: set[tuple[str, tuple[str, ...]]] = set()
        for method in methods:
            key = (method.name, tuple(method.parameters.split()))
            if key in seen:
                if method.annotation:
                    logger.warning(
                        "Duplicate signature %s(%s) at %d; skipping",
                        method.name, method.parameters.strip(), method.start_position,
                    )
                continue
            seen.add(key)

            updated = self.apply_one(buffer, method)
            if updated != buffer:
                self.applied.append(method)
            buffer = updated
        return buffer


def get_rewriter(name: str = "offset", policy: DocblockPolicy = DocblockPolicy.PREPEND) -> Rewriter:
    if name == "offset":
        return OffsetRewriter(policy)
    if name == "name":
        return NameRewriter(policy)
    raise ValueError(f"Unknown rewrite strategy: {name}")


def write_source(path: Path, text: str) -> None:
    """Overwrite the file in a single write.

    Not atomic: a crash mid-write can leave the file truncated.
    """
    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
    except OSError as e:
        raise SourceFileError(f"Cannot write {path}: {e}") from e
