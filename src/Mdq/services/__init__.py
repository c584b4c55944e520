"""Application services for mdq.

Factories wire services to an open index according to the configuration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from Mdq.engine.db import IndexManager
from Mdq.engine.indexer import DocumentIndexer
from Mdq.engine.searcher import DocumentSearcher
from Mdq.query.compiler import QueryCompiler
from Mdq.services.ingest import IngestionService, IngestReport
from Mdq.services.search import QueryService

if TYPE_CHECKING:
    from Mdq.config import AppConfig


def create_ingestion_service(config: AppConfig, manager: IndexManager) -> IngestionService:
    """Create an ingestion service writing to `manager`'s index."""
    return IngestionService(
        manager=manager,
        indexer=DocumentIndexer(manager),
        extensions=config.ingest.extensions,
    )


def create_query_service(config: AppConfig, manager: IndexManager) -> QueryService:
    """Create a query service reading from `manager`'s index."""
    return QueryService(
        compiler=QueryCompiler(),
        searcher=DocumentSearcher(manager),
        default_limit=config.query.limit,
    )


__all__ = [
    "IngestReport",
    "IngestionService",
    "QueryService",
    "create_ingestion_service",
    "create_query_service",
]
