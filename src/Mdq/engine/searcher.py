"""Execute query plans and rebuild ranked documents."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import TYPE_CHECKING

from Mdq.core.errors import EngineRejected
from Mdq.core.models import Document
from Mdq.core.query import Node
from Mdq.document.render import load_storage
from Mdq.engine.builder import build_query
from Mdq.utils.log import log

if TYPE_CHECKING:
    from Mdq.engine.db import IndexManager


@dataclass(frozen=True, slots=True)
class SearchHit:
    """One ranked search result.

    Attributes:
        document: Document rebuilt from its stored payload.
        score: Plan weight plus the document's own `weight`.
        rank: Position in the result list, starting at 1.
    """

    document: Document
    score: float
    rank: int


class DocumentSearcher:
    """Runs compiled queries against the index."""

    def __init__(self, manager: IndexManager) -> None:
        self.conn = manager.get_connection()

    def search(self, node: Node, limit: int = 20) -> list[SearchHit]:
        """Return the best `limit` documents matching a query tree.

        Hits are ordered by score, then by date (newest first).

        Raises:
            EngineRejected: If the tree cannot be expressed or the index
                refuses the resulting statement.
        """
        plan = build_query(node)
        sql = (
            f"SELECT d.payload, p.weight + d.weight AS score "
            f"FROM ({plan.sql}) AS p JOIN documents AS d ON d.id = p.docid "
            f"ORDER BY score DESC, d.date DESC, d.id ASC LIMIT ?"
        )
        log.debug("search plan: %s params=%s", plan.sql, plan.params)
        try:
            rows = self.conn.execute(sql, plan.params + (limit,)).fetchall()
        except sqlite3.Error as e:
            raise EngineRejected(f"Index rejected query: {e}") from e
        return [
            SearchHit(document=load_storage(payload), score=float(score), rank=rank)
            for rank, (payload, score) in enumerate(rows, start=1)
        ]
