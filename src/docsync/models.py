"""Records passed between pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Visibility(str, Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


@dataclass
class Method:
    """One extracted method definition.

    Offsets index the original, unmodified source text: any insertion
    before ``start_position`` shifts it, so rewriters must compensate.
    """

    visibility: Visibility
    name: str
    parameters: str
    body: str
    start_position: int
    end_position: int
    docblock: str | None = None
    annotation: str | None = None

    @property
    def parameter_list(self) -> list[str]:
        """Parameters split on commas, trimmed, in source order."""
        return [p.strip() for p in self.parameters.split(",") if p.strip()]

    @property
    def signature(self) -> str:
        return f"{self.visibility.value} function {self.name}({self.parameters.strip()})"


@dataclass
class MethodFailure:
    """A method whose annotation could not be generated."""

    method: Method
    error: Exception
