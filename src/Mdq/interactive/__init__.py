"""Interactive query loop: event producers, terminal handling and session."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

from Mdq.engine.db import IndexManager
from Mdq.interactive.events import EventQueue, KeyEvent, TickEvent
from Mdq.interactive.session import QuerySession, SessionState, make_editor, make_pager
from Mdq.interactive.terminal import terminal_session
from Mdq.services import create_ingestion_service, create_query_service

if TYPE_CHECKING:
    from Mdq.config import AppConfig


def create_query_session(config: AppConfig, manager: IndexManager, *, verbose: bool = False) -> QuerySession:
    """Create an interactive session over an open index."""
    ingest = create_ingestion_service(config, manager)
    return QuerySession(
        service=create_query_service(config, manager),
        indexer=ingest.indexer,
        ingest=ingest,
        events_factory=partial(EventQueue, tick_rate=config.interactive.tick_rate),
        pager=make_pager(config.interactive.pager),
        editor=make_editor(config.interactive.editor),
        verbose=verbose,
    )


__all__ = [
    "EventQueue",
    "KeyEvent",
    "QuerySession",
    "SessionState",
    "TickEvent",
    "create_query_session",
    "terminal_session",
]
