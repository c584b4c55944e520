"""Interactive query loop.

The loop is message driven and strictly serial: each key is handled, the
input buffer is compiled and the index is queried again before the next
event is read. Compile errors are shown and never end the session.
"""

from __future__ import annotations

import os
from contextlib import AbstractContextManager, ExitStack, contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator, Optional

import click

from Mdq.core.errors import CompileError, IngestError
from Mdq.core.models import SerializationMode
from Mdq.core.query import describe
from Mdq.document.render import render
from Mdq.engine.indexer import DocumentIndexer
from Mdq.engine.searcher import SearchHit
from Mdq.interactive.events import EventQueue, KeyEvent
from Mdq.interactive.terminal import draw_screen, terminal_session
from Mdq.services.ingest import IngestionService
from Mdq.services.search import QueryService
from Mdq.utils.log import log

Pager = Callable[[str], None]
Editor = Callable[[str], None]


@dataclass(slots=True)
class SessionState:
    """What the interactive screen shows.

    Attributes:
        query_input: Text typed so far.
        matches: Hits for the last query that compiled.
        selected: Index into `matches`, None until the user moves.
        preview: Body of the selected document.
        error: Message of the last compile or shell-out failure.
        description: Compiled form of the last successful query.
    """

    query_input: str = ""
    matches: list[SearchHit] = field(default_factory=list)
    selected: Optional[int] = None
    preview: str = ""
    error: str = ""
    description: str = ""


class QuerySession:
    """State and key dispatch of the interactive query loop.

    Args:
        service: Query service used on every key.
        indexer: Indexer used to record views and writes.
        ingest: Service that re-reads a document after it was edited.
        events_factory: Builds the event queue for one run; it is paused
            around each shell-out.
        terminal_factory: Builds the terminal context; entered again after
            each shell-out.
        pager: Shows text to the user. Defaults to `click.echo_via_pager`.
        editor: Edits a file in place. Defaults to `click.edit`.
        screen: Draws the state; defaults to a full redraw of the terminal.
        verbose: Show the compiled query under the input line.
    """

    def __init__(
        self,
        service: QueryService,
        indexer: DocumentIndexer,
        ingest: Optional[IngestionService] = None,
        *,
        events_factory: Callable[[], EventQueue] = EventQueue,
        terminal_factory: Callable[[], AbstractContextManager] = terminal_session,
        pager: Optional[Pager] = None,
        editor: Optional[Editor] = None,
        screen: Optional[Callable[[SessionState], None]] = None,
        verbose: bool = False,
    ) -> None:
        self.service = service
        self.indexer = indexer
        self.ingest = ingest
        self.state = SessionState()
        self.done = False
        self.selection: list[str] = []
        self._events_factory = events_factory
        self._terminal_factory = terminal_factory
        self._pager = pager or make_pager(None)
        self._editor = editor or make_editor(None)
        self._screen = screen or (lambda state: draw_screen(state, verbose=verbose))
        self._events: Optional[EventQueue] = None
        self._attached: Optional[ExitStack] = None

    def run(self, initial_query: str = "") -> list[str]:
        """Run the loop until a document is chosen or the user quits.

        Returns:
            Full paths of the chosen documents (empty when the user quit).
        """
        self.state.query_input = initial_query
        self.refresh()
        self._events = self._events_factory()
        try:
            self._attach()
            self._events.start()
            while not self.done:
                self._screen(self.state)
                event = self._events.get()
                if isinstance(event, KeyEvent):
                    self.handle_key(event.key)
        finally:
            try:
                self._detach()
            finally:
                self._events.close()
                self._events = None
        return self.selection

    def handle_key(self, key: str) -> None:
        """Apply one key to the session state."""
        if key == "enter":
            self._choose()
            return
        if key == "ctrl-c":
            self.done = True
            return

        failure: Optional[str] = None
        if key in ("down", "ctrl-n"):
            self._move(1)
        elif key in ("up", "ctrl-p"):
            self._move(-1)
        elif key == "backspace":
            self.state.query_input = self.state.query_input[:-1]
        elif key == "ctrl-v":
            self._view_selected()
        elif key == "ctrl-e":
            failure = self._edit_selected()
        elif len(key) == 1 and key.isprintable():
            self.state.query_input += key
        self.refresh()
        if failure:
            self.state.error = failure

    def refresh(self) -> None:
        """Compile the input buffer and query the index again.

        On a compile error the previous matches stay on screen.
        """
        state = self.state
        if not state.query_input.strip():
            state.matches = []
            state.error = ""
            state.description = ""
        else:
            try:
                node, hits = self.service.search(state.query_input)
            except CompileError as e:
                state.error = str(e)
            else:
                state.matches = hits
                state.error = ""
                state.description = describe(node)

        if not state.matches:
            state.selected = None
        elif state.selected is not None:
            state.selected = min(state.selected, len(state.matches) - 1)
        self._update_preview()

    def selected_hit(self) -> Optional[SearchHit]:
        if self.state.selected is None:
            return None
        return self.state.matches[self.state.selected]

    def _move(self, step: int) -> None:
        count = len(self.state.matches)
        if not count:
            return
        if self.state.selected is None:
            self.state.selected = 0
        else:
            self.state.selected = (self.state.selected + step) % count
        self._update_preview()

    def _update_preview(self) -> None:
        hit = self.selected_hit()
        self.state.preview = render(hit.document, SerializationMode.HUMAN) if hit else ""

    def _choose(self) -> None:
        hit = self.selected_hit()
        if hit is not None:
            self.selection = [hit.document.full_path or hit.document.filename]
        self.done = True

    def _view_selected(self) -> None:
        hit = self.selected_hit()
        if hit is None:
            return
        with self._suspended():
            self._pager(render(hit.document, SerializationMode.HUMAN))
        self.indexer.record_usage(hit.document.filename, views=1)

    def _edit_selected(self) -> Optional[str]:
        """Edit the selected file, re-index it and count the write.

        Returns:
            A message describing why the edit failed, or None.
        """
        hit = self.selected_hit()
        if hit is None:
            return None
        path = hit.document.full_path
        if not path:
            return f"No file recorded for {hit.document.filename}"
        try:
            with self._suspended():
                self._editor(path)
        except click.ClickException as e:
            return e.format_message()

        if self.ingest is not None:
            try:
                self.ingest.ingest_file(Path(path))
                self.ingest.manager.commit()
            except (IngestError, UnicodeDecodeError, OSError) as e:
                log.error("Failed to re-index %s: %s", path, e)
                return f"Failed to re-index {path}: {e}"
        self.indexer.record_usage(hit.document.filename, writes=1)
        return None

    def _attach(self) -> None:
        stack = ExitStack()
        stack.enter_context(self._terminal_factory())
        self._attached = stack

    def _detach(self) -> None:
        if self._attached is not None:
            self._attached.close()
            self._attached = None

    @contextmanager
    def _suspended(self) -> Iterator[None]:
        """Pause the event producers and release the terminal around a shell-out."""
        was_attached = self._attached is not None
        if self._events is not None:
            self._events.stop()
        self._detach()
        try:
            yield
        finally:
            if was_attached:
                self._attach()
            if self._events is not None:
                self._events.start()


def make_pager(command: Optional[str]) -> Pager:
    """Return a pager that runs `command`, or click's default when None."""
    if not command:
        return click.echo_via_pager

    def page(text: str) -> None:
        previous = os.environ.get("PAGER")
        os.environ["PAGER"] = command
        try:
            click.echo_via_pager(text)
        finally:
            if previous is None:
                os.environ.pop("PAGER", None)
            else:
                os.environ["PAGER"] = previous

    return page


def make_editor(command: Optional[str]) -> Editor:
    """Return an editor callable that edits files in place with `command`."""

    def edit(path: str) -> None:
        click.edit(filename=path, editor=command)

    return edit
