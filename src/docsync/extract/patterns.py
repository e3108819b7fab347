"""Pattern-matching method extractor for PHP source.

This is best-effort extraction, not a parse. The body of a method ends at the
first closing brace that starts a line (after optional indentation), found
non-greedily; brace depth is never counted. Two consequences follow and are
accepted:

* a method whose body contains a nested block whose ``}`` starts a line is
  cut short at that brace, and the rest of its body is left unmatched;
* a method with no line-leading closing brace of its own (a one-line
  method such as ``function a() {}``) runs on to the next line-leading
  brace, swallowing whatever methods follow it up to that point; with no
  such brace anywhere after it, it does not match at all.

Declarations without a body (abstract and interface methods) never match.
Anything the pattern cannot match is skipped silently. Use
``TreeSitterExtractor`` when a brace-aware parse is needed.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Protocol

from docsync.errors import SourceFileError
from docsync.models import Method, Visibility

logger = logging.getLogger(__name__)

METHOD_PATTERN = re.compile(
    r"""
    (/\*\*(?:(?!\*/).)*\*/\s*)?             # docblock directly above
    \s*
    (?:(?:final|abstract|static)\s+)*
    (public|protected|private)?\s*
    (?:(?:final|static)\s+)*
    function\s+&?\s*(\w+)\s*
    \(([^;{]*?)\)                           # parameters
    (?:\s*:\s*\??[\w\\|]+)?                 # return type
    \s*\{(.*?)\n\s*\}                       # body, up to the first line-leading brace
    """,
    re.MULTILINE | re.DOTALL | re.VERBOSE,
)


class Extractor(Protocol):
    """Anything that turns source text into ordered Method records."""

    name: str

    def extract(self, source: str) -> list[Method]:
        """Return methods in ascending start_position order."""
        ...


def read_source(path: Path) -> str:
    """Read a source file as UTF-8 without newline translation."""
    try:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceFileError(f"Cannot read {path}: {e}") from e


class PatternExtractor:
    name = "pattern"

    def __init__(self, pattern: re.Pattern[str] = METHOD_PATTERN) -> None:
        self._pattern = pattern

    def extract(self, source: str) -> list[Method]:
        methods: list[Method] = []
        for match in self._pattern.finditer(source):
            docblock, visibility, name, parameters, body = match.groups()
            methods.append(
                Method(
                    visibility=Visibility(visibility) if visibility else Visibility.PUBLIC,
                    name=name,
                    parameters=parameters,
                    body=body.strip(),
                    start_position=match.start(),
                    end_position=match.end(),
                    docblock=docblock,
                )
            )
        logger.debug("Pattern extractor matched %d method(s)", len(methods))
        return methods


def extract_file(path: Path, extractor: Extractor | None = None) -> tuple[str, list[Method]]:
    """Read a file once and extract its methods.

    Returns the original text alongside the methods, since their offsets are
    only valid against that exact text.
    """
    source = read_source(path)
    methods = (extractor or PatternExtractor()).extract(source)
    return source, methods
