"""SQLite FTS5 index adapter.

Holds the index database, the document indexer, the query plan builder and
the searcher.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from Mdq.engine.builder import SqlQuery, build_query
from Mdq.engine.db import IndexManager
from Mdq.engine.indexer import DocumentIndexer
from Mdq.engine.migration import run_migrations
from Mdq.engine.searcher import DocumentSearcher, SearchHit
from Mdq.utils.log import log

if TYPE_CHECKING:
    from Mdq.config import AppConfig


def create_index(config: AppConfig) -> IndexManager:
    """Open the index database named by the config.

    Raises:
        OSError: If the database directory cannot be created.
        sqlite3.Error: If the database cannot be opened or migrated.
    """
    db_path = Path(config.index.db_path).expanduser()
    log.debug("Opening index %s", db_path)
    return IndexManager(db_path)


__all__ = [
    "DocumentIndexer",
    "DocumentSearcher",
    "IndexManager",
    "SearchHit",
    "SqlQuery",
    "build_query",
    "create_index",
    "run_migrations",
]
