"""Tests for the interactive event producers and terminal handling."""

import io
import queue
import sys
import threading
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

import click

from Mdq.interactive.events import EventQueue, KeyEvent, TickEvent, decode_key
from Mdq.interactive.session import SessionState
from Mdq.interactive.terminal import (
    ENTER_ALT_SCREEN,
    LEAVE_ALT_SCREEN,
    SHOW_CURSOR,
    render_screen,
    terminal_session,
)


class ScriptedKeys:
    """Key source that returns scripted keys, then blocks until released."""

    def __init__(self, *keys) -> None:
        self._keys = list(keys)
        self.released = threading.Event()

    def __call__(self) -> str:
        if self._keys:
            key = self._keys.pop(0)
            if isinstance(key, BaseException):
                raise key
            return key
        self.released.wait()
        raise EOFError


class TypedKeys:
    """Key source fed by the test; records when a read begins."""

    def __init__(self) -> None:
        self.typed: queue.Queue = queue.Queue()
        self.reading = threading.Event()

    def type(self, key: str) -> None:
        self.typed.put(key)

    def __call__(self) -> str:
        self.reading.set()
        return self.typed.get()


def _next_keys(events: EventQueue, count: int) -> list[str]:
    keys: list[str] = []
    while len(keys) < count:
        event = events.get(timeout=2)
        if isinstance(event, KeyEvent):
            keys.append(event.key)
    return keys


class TestDecodeKey(unittest.TestCase):
    def test_named_keys(self) -> None:
        cases = {
            "\r": "enter",
            "\x03": "ctrl-c",
            "\x05": "ctrl-e",
            "\x16": "ctrl-v",
            "\x0e": "ctrl-n",
            "\x10": "ctrl-p",
            "\x7f": "backspace",
            "\x1b[A": "up",
            "\x1b[B": "down",
        }
        for raw, name in cases.items():
            with self.subTest(raw=raw):
                self.assertEqual(decode_key(raw), name)

    def test_printable_passes_through(self) -> None:
        self.assertEqual(decode_key("a"), "a")
        self.assertEqual(decode_key('"'), '"')


class TestEventQueue(unittest.TestCase):
    def setUp(self) -> None:
        self.keys = ScriptedKeys()

    def tearDown(self) -> None:
        self.keys.released.set()

    def test_keys_arrive_in_order(self) -> None:
        self.keys = ScriptedKeys("v", "i", "\x1b[B", "\r")
        with EventQueue(self.keys, tick_rate=60) as events:
            self.assertEqual(_next_keys(events, 4), ["v", "i", "down", "enter"])

    def test_ticks_are_published(self) -> None:
        with EventQueue(self.keys, tick_rate=0.01) as events:
            ticks = 0
            while ticks < 3:
                if isinstance(events.get(timeout=2), TickEvent):
                    ticks += 1
        self.assertEqual(ticks, 3)

    def test_keyboard_interrupt_becomes_ctrl_c(self) -> None:
        self.keys = ScriptedKeys(KeyboardInterrupt(), "x")
        with EventQueue(self.keys, tick_rate=60) as events:
            self.assertEqual(_next_keys(events, 2), ["ctrl-c", "x"])

    def test_closed_source_ends_session(self) -> None:
        self.keys = ScriptedKeys(EOFError())
        with EventQueue(self.keys, tick_rate=60) as events:
            self.assertEqual(_next_keys(events, 1), ["ctrl-c"])

    def test_get_timeout(self) -> None:
        events = EventQueue(self.keys, tick_rate=60)
        with self.assertRaises(queue.Empty):
            events.get(timeout=0.01)

    def test_stop_is_idempotent(self) -> None:
        events = EventQueue(self.keys, tick_rate=60)
        events.start()
        events.stop()
        events.stop()

    def test_paused_reader_leaves_keys_unread(self) -> None:
        keys = TypedKeys()
        events = EventQueue(keys, tick_rate=60)
        events.start()
        try:
            keys.type("\x05")
            self.assertEqual(_next_keys(events, 1), ["ctrl-e"])
            keys.reading.clear()

            events.stop()
            keys.type("x")
            self.assertFalse(keys.reading.wait(0.2))
            self.assertEqual(keys.typed.qsize(), 1)

            events.start()
            self.assertEqual(_next_keys(events, 1), ["x"])
        finally:
            events.close()

    def test_no_read_ahead_before_next_get(self) -> None:
        keys = TypedKeys()
        with EventQueue(keys, tick_rate=60) as events:
            keys.type("a")
            keys.type("b")
            self.assertEqual(_next_keys(events, 1), ["a"])
            keys.reading.clear()
            self.assertFalse(keys.reading.wait(0.2))
            self.assertEqual(keys.typed.qsize(), 1)
            self.assertEqual(_next_keys(events, 1), ["b"])


class TestTerminal(unittest.TestCase):
    def test_session_restores_screen_on_error(self) -> None:
        out = io.StringIO()
        with self.assertRaises(RuntimeError):
            with terminal_session(out):
                raise RuntimeError("boom")
        text = out.getvalue()
        self.assertTrue(text.startswith(ENTER_ALT_SCREEN))
        self.assertTrue(text.endswith(SHOW_CURSOR + LEAVE_ALT_SCREEN))

    def test_render_screen_shows_error(self) -> None:
        state = SessionState(query_input='vim "', error="Unterminated \" quote\nmore")
        lines = click.unstyle(render_screen(state, width=40, height=10)).splitlines()
        self.assertEqual(lines[0], '> vim "')
        self.assertEqual(lines[1], 'Unterminated " quote')

    def test_render_screen_verbose_description(self) -> None:
        state = SessionState(query_input="a b", description="(a Or b)", preview="line one\nline two")
        text = click.unstyle(render_screen(state, width=40, height=10, verbose=True))
        self.assertIn("(a Or b)", text)
        self.assertIn("line two", text)


if __name__ == "__main__":
    unittest.main()
