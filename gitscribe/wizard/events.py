"""Keyboard event source for the TUI wizard.

A background thread polls the terminal with a bounded wait and turns what it
reads into a FIFO stream of events:

- ``KeyPress`` for every key pressed
- ``Tick`` whenever the wait times out with nothing to read

The foreground loop consumes the stream with ``EventSource.next()`` and never
touches the terminal itself. Terminal modes (raw input, alternate screen) are
set up by the runner, not here.
"""

from __future__ import annotations

import codecs
import logging
import os
import queue
import select
import sys
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, Union

import readchar

from gitscribe.errors import EventSourceClosed, TerminalIOError

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL = 0.05  # seconds


class KeyCode(Enum):
    """Normalized key identities."""

    CHAR = "char"
    ENTER = "enter"
    ESC = "esc"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    BACKSPACE = "backspace"
    TAB = "tab"
    SPACE = "space"


class Modifier(Enum):
    """Modifier keys held during a key press."""

    CTRL = "ctrl"
    ALT = "alt"


class KeyKind(Enum):
    """Whether a raw terminal key event is a press or a release."""

    PRESS = "press"
    RELEASE = "release"


@dataclass(frozen=True)
class KeyPress:
    """A single key press.

    Attributes:
        code: Which key was pressed
        char: The character for ``KeyCode.CHAR`` (and " " for SPACE)
        modifiers: Modifier keys held at the time
    """

    code: KeyCode
    char: str = ""
    modifiers: frozenset[Modifier] = field(default_factory=frozenset)

    @classmethod
    def of(cls, char: str) -> KeyPress:
        """Plain printable character."""
        if char == " ":
            return cls(KeyCode.SPACE, " ")
        return cls(KeyCode.CHAR, char)

    @classmethod
    def ctrl(cls, letter: str) -> KeyPress:
        """Ctrl + letter combination."""
        return cls(KeyCode.CHAR, letter.lower(), frozenset({Modifier.CTRL}))

    @property
    def is_interrupt(self) -> bool:
        """True for Ctrl+C, which cancels the wizard from any screen."""
        return (
            self.code is KeyCode.CHAR
            and self.char == "c"
            and Modifier.CTRL in self.modifiers
        )

    @property
    def is_text(self) -> bool:
        """True for a printable character typed without Ctrl or Alt."""
        return self.code is KeyCode.CHAR and not self.modifiers and self.char.isprintable()


@dataclass(frozen=True)
class Tick:
    """Periodic refresh signal, emitted when no input arrived in one interval."""


Event = Union[KeyPress, Tick]


@dataclass(frozen=True)
class RawKeyEvent:
    """Key event as reported by a terminal reader, before filtering."""

    key: KeyPress
    kind: KeyKind = KeyKind.PRESS


class TerminalReader(Protocol):
    """Source of raw key events.

    ``read`` raises ``EOFError`` once input is exhausted and ``OSError`` on
    terminal failures.
    """

    def poll(self, timeout: float) -> bool:
        """Wait up to ``timeout`` seconds for input; True if input is ready."""
        ...

    def read(self) -> list[RawKeyEvent]:
        """Read the pending input."""
        ...


# Multi-character sequences, longest first during matching
_SEQUENCES: dict[str, KeyCode] = {
    readchar.key.UP: KeyCode.UP,
    readchar.key.DOWN: KeyCode.DOWN,
    readchar.key.LEFT: KeyCode.LEFT,
    readchar.key.RIGHT: KeyCode.RIGHT,
    # Application cursor mode
    "\x1bOA": KeyCode.UP,
    "\x1bOB": KeyCode.DOWN,
    "\x1bOD": KeyCode.LEFT,
    "\x1bOC": KeyCode.RIGHT,
}

_SINGLE: dict[str, KeyCode] = {
    readchar.key.ENTER: KeyCode.ENTER,
    readchar.key.CR: KeyCode.ENTER,
    readchar.key.LF: KeyCode.ENTER,
    readchar.key.BACKSPACE: KeyCode.BACKSPACE,
    "\x08": KeyCode.BACKSPACE,
    readchar.key.TAB: KeyCode.TAB,
}


def _csi_length(text: str, start: int) -> int:
    """Length of an unrecognized CSI sequence starting at ``start``."""
    end = start + 2
    while end < len(text) and not ("@" <= text[end] <= "~"):
        end += 1
    return min(end + 1, len(text)) - start


def decode_keys(text: str) -> list[KeyPress]:
    """Decode raw terminal input into key presses.

    One read can carry several keys (fast typing, paste), so the input is
    split into as many presses as it contains, in order. Unrecognized escape
    sequences are dropped.

    Args:
        text: Characters read from a terminal in raw mode

    Returns:
        Key presses in input order
    """
    keys: list[KeyPress] = []
    sequences = sorted(_SEQUENCES, key=len, reverse=True)
    i = 0
    while i < len(text):
        ch = text[i]

        if ch == readchar.key.ESC:
            match = next((s for s in sequences if text.startswith(s, i)), None)
            if match is not None:
                keys.append(KeyPress(_SEQUENCES[match]))
                i += len(match)
                continue
            if text.startswith("\x1b[", i):
                i += _csi_length(text, i)
                continue
            following = text[i + 1] if i + 1 < len(text) else ""
            if following and following.isprintable() and following != readchar.key.ESC:
                keys.append(KeyPress(KeyCode.CHAR, following, frozenset({Modifier.ALT})))
                i += 2
                continue
            keys.append(KeyPress(KeyCode.ESC))
            i += 1
            continue

        if ch in _SINGLE:
            keys.append(KeyPress(_SINGLE[ch]))
        elif "\x01" <= ch <= "\x1a":
            keys.append(KeyPress.ctrl(chr(ord(ch) + ord("a") - 1)))
        elif ch.isprintable():
            keys.append(KeyPress.of(ch))
        i += 1
    return keys


class PosixTerminalReader:
    """Terminal reader for POSIX ttys.

    Expects the terminal to already be in raw mode; otherwise input only
    becomes ready line by line.
    """

    def __init__(self, fd: int | None = None) -> None:
        self.fd = sys.stdin.fileno() if fd is None else fd
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def poll(self, timeout: float) -> bool:
        ready, _, _ = select.select([self.fd], [], [], timeout)
        return bool(ready)

    def read(self) -> list[RawKeyEvent]:
        data = os.read(self.fd, 1024)
        if not data:
            raise EOFError("terminal input closed")
        text = self._decoder.decode(data)
        # Terminals do not report key releases, so everything is a press
        return [RawKeyEvent(key) for key in decode_keys(text)]


class _EndOfInput:
    """Queue marker: the producer stopped and nothing more will arrive."""


@dataclass(frozen=True)
class _Failure:
    """Queue marker carrying a terminal error raised in the worker."""

    error: OSError


_END_OF_INPUT = _EndOfInput()


class EventSource:
    """Polls a terminal reader on a background thread.

    Events are delivered in production order through an unbounded queue.
    Closing the source makes the worker exit at its next send attempt, so
    shutdown takes at most one tick interval.

    Usage:
        with EventSource(PosixTerminalReader(), tick_interval=0.05) as events:
            event = events.next()
    """

    def __init__(
        self,
        reader: TerminalReader,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
    ) -> None:
        """Initialize the event source.

        Args:
            reader: Terminal reader to poll
            tick_interval: Maximum wait for input before emitting a Tick
        """
        if tick_interval <= 0:
            raise ValueError("tick_interval must be positive")
        self.reader = reader
        self.tick_interval = tick_interval
        self._queue: queue.SimpleQueue[object] = queue.SimpleQueue()
        self._closed = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        """True while the worker thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> EventSource:
        """Launch the polling thread."""
        if self._thread is not None:
            raise RuntimeError("event source already started")
        self._thread = threading.Thread(
            target=self._run, name="gitscribe-events", daemon=True
        )
        self._thread.start()
        logger.debug("Event source started (tick=%.3fs)", self.tick_interval)
        return self

    def next(self) -> Event:
        """Block until the next event is available.

        Raises:
            EventSourceClosed: If input ended and the queue is drained
            TerminalIOError: If polling or reading the terminal failed
            TypeError: If something other than an event was queued
        """
        item = self._queue.get()
        if isinstance(item, _EndOfInput):
            # Keep the marker so later calls fail the same way
            self._queue.put(item)
            raise EventSourceClosed("no more terminal input")
        if isinstance(item, _Failure):
            raise TerminalIOError(f"terminal input failed: {item.error}") from item.error
        if not isinstance(item, (KeyPress, Tick)):
            raise TypeError(f"unexpected item in event queue: {item!r}")
        return item

    def close(self) -> None:
        """Stop listening; the worker exits at its next send attempt."""
        if self._closed.is_set():
            return
        self._closed.set()
        self._queue.put(_END_OF_INPUT)
        logger.debug("Event source closed")

    def join(self, timeout: float | None = None) -> None:
        """Wait for the worker thread to exit."""
        if self._thread is not None:
            self._thread.join(timeout)

    def __enter__(self) -> EventSource:
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _send(self, event: Event) -> bool:
        if self._closed.is_set():
            return False
        self._queue.put(event)
        return True

    def _run(self) -> None:
        try:
            while True:
                if self.reader.poll(self.tick_interval):
                    for raw in self.reader.read():
                        if raw.kind is KeyKind.RELEASE:
                            continue
                        if not self._send(raw.key):
                            return
                elif not self._send(Tick()):
                    return
        except EOFError:
            logger.debug("Terminal input exhausted")
            self._queue.put(_END_OF_INPUT)
        except OSError as e:
            logger.debug("Terminal input failed: %s", e)
            self._queue.put(_Failure(e))
            # Later calls see a closed source instead of blocking
            self._queue.put(_END_OF_INPUT)
