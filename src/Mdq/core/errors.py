"""Error taxonomy for ingestion and query compilation.

Ingestion errors are always scoped to one file and recoverable by the caller
(log and skip). Compile errors are always scoped to one query and recoverable
by the interactive loop (display and keep reading input).
"""

from __future__ import annotations


class MdqError(Exception):
    """Base class for all mdq errors."""


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------


class IngestError(MdqError):
    """A source document could not be turned into a Document."""


class NoFrontMatter(IngestError):
    """The text does not start with a front-matter block."""

    def __init__(self, message: str = "No front matter block found") -> None:
        super().__init__(message)


class MalformedFrontMatter(IngestError):
    """The front-matter block is not a valid document description.

    Attributes:
        raw_yaml: The offending front-matter text, verbatim.
    """

    def __init__(self, message: str, raw_yaml: str) -> None:
        super().__init__(message)
        self.raw_yaml = raw_yaml

    def __str__(self) -> str:
        return f"{self.args[0]}\n--- front matter ---\n{self.raw_yaml}"


class DateParseError(IngestError):
    """The `date` value matches none of the accepted formats.

    Attributes:
        value: The raw value found in the front matter.
    """

    def __init__(self, value: object) -> None:
        super().__init__(
            f"Cannot parse date {value!r}: expected RFC 3339, "
            "%Y-%m-%dT%H:%M:%S%z or integer epoch seconds"
        )
        self.value = value


# ---------------------------------------------------------------------------
# Query compilation
# ---------------------------------------------------------------------------


class CompileError(MdqError):
    """A query string could not be turned into an engine query."""


class EmptyQuery(CompileError):
    """There is nothing to compile."""

    def __init__(self, message: str = "Empty query") -> None:
        super().__init__(message)


class UnterminatedQuote(CompileError):
    """A quoted phrase was opened but never closed.

    Attributes:
        position: Offset of the opening quote in the lexed text.
        quote: The quote character.
    """

    def __init__(self, position: int, quote: str) -> None:
        super().__init__(f"Unterminated {quote} quote opened at offset {position}")
        self.position = position
        self.quote = quote


class QueryTooComplex(CompileError):
    """The operator-split loop exceeded its iteration guard.

    Attributes:
        remaining: Query text that was still unconsumed.
    """

    def __init__(self, limit: int, remaining: str) -> None:
        super().__init__(f"Operator limit of {limit} exceeded with remaining {remaining!r}")
        self.remaining = remaining


class EngineRejected(CompileError):
    """The search engine adapter cannot express a compiled subtree."""
