"""Schema migration mechanism for the mdq index database.

Migrations live in `Mdq.engine.migrations` as ``vNNN_<description>.py``
modules, each exposing one ``MIGRATION`` constant. They are discovered,
sorted and applied automatically when an `IndexManager` opens the database.
Each migration runs in an explicit transaction; failures roll back
atomically.
"""

from __future__ import annotations

import importlib
import pkgutil
import sqlite3
from dataclasses import dataclass

from Mdq.utils.log import log

_MIN_SQLITE_VERSION = (3, 31, 0)

_SCHEMA_VERSION_DDL = """
CREATE TABLE IF NOT EXISTS schema_version (
    id      INTEGER PRIMARY KEY CHECK (id = 1),
    version INTEGER NOT NULL
)
"""


@dataclass(frozen=True)
class Migration:
    """A single versioned schema migration.

    Attributes:
        version: Monotonically increasing integer, starting at 1.
        description: Human-readable summary of what this migration does.
        sql: One or more semicolon-separated statements. Semicolons are
            statement separators only and must not appear inside literals.
    """

    version: int
    description: str
    sql: str


def load_migrations() -> list[Migration]:
    """Collect ``MIGRATION`` constants from the migrations package, by version."""
    from Mdq.engine import migrations as package

    found: list[Migration] = []
    for info in pkgutil.iter_modules(package.__path__):
        if not info.name.startswith("v"):
            continue
        module = importlib.import_module(f"{package.__name__}.{info.name}")
        migration = getattr(module, "MIGRATION", None)
        if not isinstance(migration, Migration):
            raise ValueError(f"Migration module {info.name} has no MIGRATION constant")
        found.append(migration)
    return sorted(found, key=lambda m: m.version)


def run_migrations(conn: sqlite3.Connection) -> list[int]:
    """Bring the index schema up to the newest migration.

    Args:
        conn: Open SQLite connection.

    Returns:
        Versions applied by this call, oldest first; empty when the schema
        was already current.

    Raises:
        RuntimeError: If the SQLite library is too old for FTS5 `bm25()`.
        ValueError: If migration versions are not 1, 2, 3, ...
        sqlite3.Error: If a statement fails; that migration is rolled back.
    """
    _require_sqlite(_MIN_SQLITE_VERSION)
    migrations = load_migrations()
    versions = [m.version for m in migrations]
    if versions != list(range(1, len(versions) + 1)):
        raise ValueError(f"Migration versions must run 1..N without gaps, found {versions}")

    conn.execute(_SCHEMA_VERSION_DDL)
    conn.commit()
    row = conn.execute("SELECT version FROM schema_version WHERE id = 1").fetchone()
    current = row[0] if row else 0

    applied: list[int] = []
    for migration in migrations:
        if migration.version <= current:
            continue
        _apply(conn, migration)
        log.info("Index schema migrated to v%d: %s", migration.version, migration.description)
        applied.append(migration.version)
    if not applied:
        log.debug("Index schema is current (v%d)", current)
    return applied


def _require_sqlite(minimum: tuple[int, ...]) -> None:
    found = tuple(int(part) for part in sqlite3.sqlite_version.split("."))
    if found < minimum:
        wanted = ".".join(map(str, minimum))
        raise RuntimeError(f"mdq needs SQLite {wanted} or newer, found {sqlite3.sqlite_version}")


def _apply(conn: sqlite3.Connection, migration: Migration) -> None:
    """Run one migration and its version bump as a single transaction.

    Statements go through `conn.execute()` one at a time because
    `executescript()` commits first.
    """
    statements = [part.strip() for part in migration.sql.split(";")]
    conn.execute("BEGIN")
    try:
        for statement in filter(None, statements):
            conn.execute(statement)
        conn.execute(
            "INSERT OR REPLACE INTO schema_version (id, version) VALUES (1, ?)",
            (migration.version,),
        )
    except Exception:
        conn.execute("ROLLBACK")
        raise
    conn.execute("COMMIT")
