"""SQLite index database utilities."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from Mdq.engine.migration import run_migrations


class IndexManager:
    """Owner of the connection to one index database.

    Opening the manager creates the database file when needed and brings the
    schema up to date. Supports the context manager protocol; leaving the
    block closes the connection without committing.
    """

    def __init__(self, db_path: Path) -> None:
        """Open the index database.

        Args:
            db_path: Path to the database file.

        Raises:
            OSError: If the parent directory cannot be created.
            sqlite3.Error: If the database cannot be opened or migrated.
        """
        self.db_path = db_path
        self.conn: sqlite3.Connection | None = ensure_db(db_path)
        run_migrations(self.conn)

    def get_connection(self) -> sqlite3.Connection:
        """Get the open database connection.

        Raises:
            RuntimeError: If the manager was closed.
        """
        if self.conn is None:
            raise RuntimeError(f"Index {self.db_path} is closed")
        return self.conn

    def commit(self) -> None:
        self.get_connection().commit()

    def close(self) -> None:
        """Close the connection; uncommitted changes are discarded."""
        if self.conn is not None:
            self.conn.close()
            self.conn = None

    def __enter__(self) -> IndexManager:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def ensure_db(db_path: Path) -> sqlite3.Connection:
    """Ensure the database file's directory exists and return a connection.

    Args:
        db_path: Path to the database file.

    Returns:
        SQLite connection.

    Raises:
        OSError: If directory creation fails.
        sqlite3.Error: If database connection fails.
    """
    db_path = Path(db_path).expanduser()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(str(db_path))
