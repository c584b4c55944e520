"""Keyboard and tick events delivered through one queue.

Two producer threads feed a single `queue.Queue`: `KeyReader` turns blocking
key reads into `KeyEvent`s and `Ticker` publishes a `TickEvent` every
`tick_rate` seconds. The consumer performs one blocking `get()` per loop
iteration.
"""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Union

import click

from Mdq.utils.log import log

KeySource = Callable[[], str]

# Raw sequences returned by `click.getchar` and their key names.
_KEY_NAMES: dict[str, str] = {
    "\r": "enter",
    "\n": "enter",
    "\t": "tab",
    "\x03": "ctrl-c",
    "\x05": "ctrl-e",
    "\x0e": "ctrl-n",
    "\x10": "ctrl-p",
    "\x16": "ctrl-v",
    "\x08": "backspace",
    "\x7f": "backspace",
    "\x1b": "escape",
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
}


def decode_key(raw: str) -> str:
    """Map a raw key sequence to a key name; printable text is returned as is."""
    return _KEY_NAMES.get(raw, raw)


@dataclass(frozen=True, slots=True)
class KeyEvent:
    key: str


@dataclass(frozen=True, slots=True)
class TickEvent:
    pass


Event = Union[KeyEvent, TickEvent]


class KeyReader(threading.Thread):
    """Publish one `KeyEvent` per key read from `source`.

    The reader starts a read only when allowed. Each published key uses up
    the permission, so no key is read between the moment a key is handed
    over and the moment the consumer asks for the next one.
    """

    def __init__(self, events: queue.Queue, source: KeySource) -> None:
        super().__init__(name="mdq-keys", daemon=True)
        self._events = events
        self._source = source
        self._permit = threading.Event()
        self._closed = threading.Event()

    def allow(self) -> None:
        """Let the reader start its next key read."""
        self._permit.set()

    def close(self) -> None:
        self._closed.set()
        self._permit.set()

    def run(self) -> None:
        while True:
            self._permit.wait()
            if self._closed.is_set():
                return
            try:
                raw = self._source()
            except KeyboardInterrupt:
                raw = "\x03"
            except EOFError:
                log.debug("Key source closed")
                self._events.put(KeyEvent("ctrl-c"))
                return
            self._permit.clear()
            if self._closed.is_set():
                return
            self._events.put(KeyEvent(decode_key(raw)))


class Ticker(threading.Thread):
    """Publish a `TickEvent` every `tick_rate` seconds until stopped."""

    def __init__(self, events: queue.Queue, tick_rate: float) -> None:
        super().__init__(name="mdq-ticks", daemon=True)
        self._events = events
        self._tick_rate = tick_rate
        self._stopped = threading.Event()

    def stop(self) -> None:
        self._stopped.set()

    def run(self) -> None:
        while not self._stopped.is_set():
            self._events.put(TickEvent())
            if self._stopped.wait(self._tick_rate):
                return


class EventQueue:
    """Single ordered mailbox fed by a key reader and a ticker.

    One key reader lives as long as the queue. `stop()` pauses it and ends
    the ticker so that a pager or editor can own the terminal; `start()`
    resumes both. A key is read only after the consumer has asked for the
    event following the last key, so pausing right after handling a key
    leaves stdin untouched until `start()`.

    Usable as a context manager: entering starts both producers, leaving
    closes them.

    Args:
        key_source: Blocking callable returning one raw key per call.
            Defaults to `click.getchar`.
        tick_rate: Seconds between tick events.
    """

    def __init__(self, key_source: Optional[KeySource] = None, tick_rate: float = 0.25) -> None:
        self._queue: queue.Queue = queue.Queue()
        self._key_source = key_source or click.getchar
        self._tick_rate = tick_rate
        self._keys: Optional[KeyReader] = None
        self._ticks: Optional[Ticker] = None
        self._running = False
        self._key_delivered = False

    def start(self) -> None:
        if self._running:
            return
        if self._keys is None:
            self._keys = KeyReader(self._queue, self._key_source)
            self._keys.start()
        self._ticks = Ticker(self._queue, self._tick_rate)
        self._ticks.start()
        self._running = True
        self._key_delivered = False
        self._keys.allow()

    def stop(self) -> None:
        """Pause the key reader and stop the ticker; queued events stay readable."""
        if not self._running:
            return
        self._running = False
        self._ticks.stop()
        self._ticks.join()
        self._ticks = None

    def close(self) -> None:
        """Stop both producers for good."""
        self.stop()
        if self._keys is not None:
            self._keys.close()
            self._keys = None

    def get(self, timeout: Optional[float] = None) -> Event:
        """Block until the next event arrives.

        Raises:
            queue.Empty: If `timeout` elapses first.
        """
        if self._running and self._key_delivered:
            self._key_delivered = False
            self._keys.allow()
        event = self._queue.get(timeout=timeout)
        if isinstance(event, KeyEvent):
            self._key_delivered = True
        return event

    def __enter__(self) -> EventQueue:
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
