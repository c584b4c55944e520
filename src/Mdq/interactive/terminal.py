"""Terminal state handling and screen drawing for the interactive loop."""

from __future__ import annotations

import shutil
import sys
from contextlib import contextmanager
from typing import IO, TYPE_CHECKING, Iterator, Optional

import click

if TYPE_CHECKING:
    from Mdq.interactive.session import SessionState

ENTER_ALT_SCREEN = "\x1b[?1049h"
LEAVE_ALT_SCREEN = "\x1b[?1049l"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"


@contextmanager
def terminal_session(stream: Optional[IO[str]] = None) -> Iterator[None]:
    """Switch to the alternate screen for the duration of the block.

    The main screen and the cursor are restored on every exit path,
    including exceptions, so a crash report is printed on a usable terminal.
    """
    out = stream or sys.stdout
    click.echo(ENTER_ALT_SCREEN + HIDE_CURSOR, file=out, nl=False)
    out.flush()
    try:
        yield
    finally:
        click.echo(SHOW_CURSOR + LEAVE_ALT_SCREEN, file=out, nl=False)
        out.flush()


def render_screen(state: SessionState, *, width: int = 80, height: int = 24, verbose: bool = False) -> str:
    """Lay out the session state as plain styled text.

    Top to bottom: the query line, the error line (or the compiled query when
    verbose), the match list and a preview of the selected document.
    """
    lines: list[str] = [click.style("> ", fg="yellow") + state.query_input]
    if state.error:
        lines.append(click.style(_clip(state.error.splitlines()[0], width), fg="red"))
    elif verbose and state.description:
        lines.append(click.style(_clip(state.description, width), fg="green"))
    else:
        lines.append("")

    list_rows = max(3, (height - len(lines)) // 2)
    for idx, hit in enumerate(state.matches[:list_rows]):
        marker = "> " if idx == state.selected else "  "
        title = _clip(marker + hit.document.title, width)
        lines.append(click.style(title, reverse=True) if idx == state.selected else title)
    lines.append(click.style("-" * width, dim=True))

    preview_rows = max(0, height - len(lines) - 1)
    for line in state.preview.splitlines()[:preview_rows]:
        lines.append(_clip(line, width))
    return "\n".join(lines)


def draw_screen(state: SessionState, verbose: bool = False) -> None:
    """Clear the terminal and draw the session state."""
    size = shutil.get_terminal_size()
    click.clear()
    click.echo(render_screen(state, width=size.columns, height=size.lines, verbose=verbose), nl=False)


def _clip(text: str, width: int) -> str:
    return text if len(text) <= width else text[: max(0, width - 1)] + "…"
