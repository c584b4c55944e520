"""Command implementations for the mdq CLI.

Encapsulates business logic for `update` and `query`, separated from CLI
parameter handling and terminal output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from Mdq.core.query import describe
from Mdq.interactive import QuerySession
from Mdq.query.compiler import QueryCompiler
from Mdq.renderers import HitRenderer
from Mdq.services import IngestionService, IngestReport, QueryService
from Mdq.utils.log import log


@dataclass(slots=True)
class UpdateCommand:
    """Bulk-ingest source files into the index."""

    ingest_service: IngestionService
    patterns: Sequence[str]

    def execute(self) -> IngestReport:
        """Index every matched file; per-file failures are logged and skipped."""
        log.info("Updating index from %s", ", ".join(self.patterns))
        report = self.ingest_service.update(self.patterns)
        for path in report.failed_paths:
            log.debug("failed: %s", path)
        return report


@dataclass(slots=True)
class QueryCommand:
    """Run one query and render its hits."""

    query_service: QueryService
    text: str
    limit: int
    renderer: HitRenderer

    def execute(self) -> str:
        """Return the rendered hits.

        Raises:
            CompileError: If the query cannot be compiled or executed.
        """
        node, hits = self.query_service.search(self.text, self.limit)
        log.debug("Found %d hits", len(hits))
        return self.renderer(hits)


@dataclass(slots=True)
class ExplainCommand:
    """Show how a query compiles."""

    compiler: QueryCompiler
    text: str

    def execute(self) -> str:
        return describe(self.compiler.compile(self.text)) + "\n"


@dataclass(slots=True)
class InteractiveCommand:
    """Run the interactive query loop."""

    session: QuerySession
    initial_query: str

    def execute(self) -> list[str]:
        """Return full paths of the chosen documents."""
        return self.session.run(self.initial_query)
