"""Query service: compile user text and run it against the index."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from Mdq.core.errors import QueryTooComplex
from Mdq.core.query import Node, describe
from Mdq.engine.searcher import DocumentSearcher, SearchHit
from Mdq.query.compiler import QueryCompiler
from Mdq.utils.log import log


@dataclass(slots=True)
class QueryService:
    """Application service that answers query-language text."""

    compiler: QueryCompiler
    searcher: DocumentSearcher
    default_limit: int = 20

    def compile(self, text: str) -> Node:
        """Compile query text.

        Raises:
            CompileError: If the text cannot be compiled.
        """
        try:
            return self.compiler.compile(text)
        except QueryTooComplex as e:
            # Linear scanning cannot exhaust the guard on well-formed input.
            log.error("Query compiler guard tripped, likely a bug: %s", e)
            raise

    def search(self, text: str, limit: Optional[int] = None) -> tuple[Node, list[SearchHit]]:
        """Compile and run a query.

        Args:
            text: Query-language text.
            limit: Maximum hits; defaults to `default_limit`.

        Returns:
            The compiled tree and the ranked hits.

        Raises:
            CompileError: If compilation fails or the index rejects the plan.
        """
        node = self.compile(text)
        hits = self.searcher.search(node, limit or self.default_limit)
        log.debug("query %r -> %s (%d hits)", text, describe(node), len(hits))
        return node, hits

    def explain(self, text: str) -> str:
        """Return the compiled tree of `text` as one line."""
        return describe(self.compile(text))
