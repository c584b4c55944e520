"""Migration v001: initial schema (documents, document_terms)."""

from __future__ import annotations

from Mdq.engine.migration import Migration

MIGRATION = Migration(
    version=1,
    description="Initial schema: documents, document_terms (fts5)",
    sql="""
        CREATE TABLE IF NOT EXISTS documents (
          id INTEGER PRIMARY KEY AUTOINCREMENT,
          unique_term TEXT NOT NULL UNIQUE,
          date INTEGER NOT NULL,
          weight INTEGER NOT NULL DEFAULT 0,
          payload TEXT NOT NULL,
          indexed_at INTEGER NOT NULL DEFAULT (
            CAST(strftime('%s','now') AS INTEGER)
          )
        );

        CREATE INDEX IF NOT EXISTS idx_documents_date
          ON documents(date);

        CREATE VIRTUAL TABLE IF NOT EXISTS document_terms USING fts5(
          A, D, F, S, XS, K, body,
          tokenize = 'porter unicode61'
        );
    """,
)
