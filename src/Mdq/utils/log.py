"""mdq logging utilities.

All modules log through the ``Mdq`` logger. Lines look like::

    06-22 12:48:16 [WARN] Pattern ~/notes/*.md matched no files

The CLI configures the logger once per action: a stderr handler and,
optionally, a DEBUG-level file per run.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Final, Iterator

_LEVEL_TAGS: Final[dict[int, str]] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "CRIT",
}

_LINE_FORMAT = "%(asctime)s [%(leveltag)s] %(message)s"
_DATE_FORMAT = "%m-%d %H:%M:%S"
_CONSOLE_HANDLER = "mdq-console"

log = logging.getLogger("Mdq")


class _LevelTagFormatter(logging.Formatter):
    """Formatter exposing a four-letter `leveltag` to the format string."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - stdlib name
        record.leveltag = _LEVEL_TAGS.get(record.levelno, record.levelname[:4])
        return super().format(record)


def configure_logging(
    *,
    level: str = "INFO",
    action: str | None = None,
    log_to_file: bool = False,
    log_dir: str = "log",
) -> None:
    """Replace the handlers of the mdq logger.

    Args:
        level: Console level name (DEBUG, INFO, ...).
        action: CLI action name; names the log file.
        log_to_file: Also write every record, DEBUG included, to
            ``<log_dir>/<action>-<timestamp>.log``.
        log_dir: Directory for log files; ``~`` is expanded.
    """
    console_level = logging.getLevelName((level or "INFO").upper())
    if not isinstance(console_level, int):
        console_level = logging.INFO
    formatter = _LevelTagFormatter(fmt=_LINE_FORMAT, datefmt=_DATE_FORMAT)

    handlers: list[logging.Handler] = [_console_handler(console_level, formatter)]
    if log_to_file and action:
        handlers.append(_file_handler(Path(log_dir or "log").expanduser(), action, formatter))

    log.handlers.clear()
    for handler in handlers:
        log.addHandler(handler)
    log.setLevel(logging.DEBUG if log_to_file else console_level)
    log.propagate = False


@contextmanager
def console_muted() -> Iterator[None]:
    """Silence the stderr handler while the interactive loop owns the terminal.

    File handlers keep logging.
    """
    muted = [h for h in log.handlers if h.get_name() == _CONSOLE_HANDLER]
    levels = [h.level for h in muted]
    for handler in muted:
        handler.setLevel(logging.CRITICAL + 1)
    try:
        yield
    finally:
        for handler, level in zip(muted, levels):
            handler.setLevel(level)


def _console_handler(level: int, formatter: logging.Formatter) -> logging.Handler:
    # stdout is reserved for command output (`query --print`, chosen paths).
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_CONSOLE_HANDLER)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _file_handler(log_dir: Path, action: str, formatter: logging.Formatter) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    handler = logging.FileHandler(log_dir / f"{action}-{stamp}.log", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler
