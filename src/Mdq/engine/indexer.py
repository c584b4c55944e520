"""Submit documents to the index."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Optional

from Mdq.core.models import Document, SerializationMode
from Mdq.document.dates import format_date
from Mdq.document.render import load_storage, render
from Mdq.utils.log import log

if TYPE_CHECKING:
    from Mdq.engine.db import IndexManager

UNIQUE_TERM_PREFIX = "Q"
FIELD_COLUMNS = ("A", "D", "F", "S", "XS", "K", "body")


def unique_term(filename: str) -> str:
    """Key that identifies a document for replacement on re-index."""
    return UNIQUE_TERM_PREFIX + filename


def field_texts(doc: Document) -> dict[str, str]:
    """Map each index field code to the text indexed under it.

    `F` carries both the file name and the full path.
    """
    return {
        "A": " ".join(doc.authors),
        "D": format_date(doc.date),
        "F": " ".join(part for part in (doc.filename, doc.full_path) if part),
        "S": doc.title,
        "XS": doc.subtitle,
        "K": " ".join(doc.tags),
        "body": doc.body,
    }


class DocumentIndexer:
    """Writes documents and their field text into the index.

    `update` and `delete` leave committing to the caller so that a bulk
    update commits once. `record_usage` commits immediately.
    """

    def __init__(self, manager: IndexManager) -> None:
        self.manager = manager
        self.conn = manager.get_connection()

    def update(self, doc: Document) -> int:
        """Insert or replace a document keyed by its filename.

        Args:
            doc: Parsed document.

        Returns:
            Row id of the stored document.
        """
        term = unique_term(doc.filename)
        row = self.conn.execute(
            "SELECT id, payload FROM documents WHERE unique_term = ?", (term,)
        ).fetchone()

        if row:
            doc_id = row[0]
            doc = _carry_counters(doc, load_storage(row[1]))
            payload = render(doc, SerializationMode.STORAGE)
            self.conn.execute(
                """
                UPDATE documents
                SET date = ?, weight = ?, payload = ?,
                    indexed_at = CAST(strftime('%s','now') AS INTEGER)
                WHERE id = ?
                """,
                (doc.date, doc.weight, payload, doc_id),
            )
            self.conn.execute("DELETE FROM document_terms WHERE rowid = ?", (doc_id,))
            log.debug("Replacing %s (id=%d)", term, doc_id)
        else:
            payload = render(doc, SerializationMode.STORAGE)
            cursor = self.conn.execute(
                "INSERT INTO documents (unique_term, date, weight, payload) VALUES (?, ?, ?, ?)",
                (term, doc.date, doc.weight, payload),
            )
            doc_id = cursor.lastrowid
            log.debug("Indexing %s (id=%d)", term, doc_id)

        texts = field_texts(doc)
        self.conn.execute(
            """
            INSERT INTO document_terms (rowid, A, D, F, S, XS, K, body)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (doc_id, *(texts[name] for name in FIELD_COLUMNS)),
        )
        return doc_id

    def get(self, filename: str) -> Optional[Document]:
        """Return the stored document for `filename`, or None."""
        row = self.conn.execute(
            "SELECT payload FROM documents WHERE unique_term = ?", (unique_term(filename),)
        ).fetchone()
        return load_storage(row[0]) if row else None

    def record_usage(self, filename: str, *, views: int = 0, writes: int = 0) -> Optional[Document]:
        """Add to a stored document's view and write counters.

        Args:
            filename: Filename the document was indexed under.
            views: Views to add.
            writes: Writes to add.

        Returns:
            The updated document, or None when nothing is indexed under
            `filename`.
        """
        doc = self.get(filename)
        if doc is None:
            log.warning("No indexed document for %s, usage not recorded", filename)
            return None
        updated = dataclasses.replace(doc, views=doc.views + views, writes=doc.writes + writes)
        self.conn.execute(
            "UPDATE documents SET payload = ? WHERE unique_term = ?",
            (render(updated, SerializationMode.STORAGE), unique_term(filename)),
        )
        self.conn.commit()
        return updated

    def delete(self, filename: str) -> bool:
        """Remove a document. Returns whether anything was removed."""
        row = self.conn.execute(
            "SELECT id FROM documents WHERE unique_term = ?", (unique_term(filename),)
        ).fetchone()
        if not row:
            return False
        self.conn.execute("DELETE FROM document_terms WHERE rowid = ?", (row[0],))
        self.conn.execute("DELETE FROM documents WHERE id = ?", (row[0],))
        return True

    def count(self) -> int:
        return self.conn.execute("SELECT COUNT(*) FROM documents").fetchone()[0]


def _carry_counters(doc: Document, stored: Document) -> Document:
    """Keep usage counters the source file does not carry.

    Files rewritten to disk omit `views` and `writes`, so a re-indexed copy
    inherits them from the stored one unless the front matter sets them.
    """
    return dataclasses.replace(
        doc,
        views=doc.views or stored.views,
        writes=doc.writes or stored.writes,
    )
