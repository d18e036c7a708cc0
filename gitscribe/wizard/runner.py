"""Terminal session and event loop of the TUI setup wizard.

``run_setup_wizard`` wires everything together:

1. Load the saved configuration as the starting draft
2. Put the terminal in raw mode and switch to the alternate screen
3. Feed events from the ``EventSource`` to ``SetupApp`` and redraw
4. Restore the terminal, then save the draft if the user confirmed

The terminal is restored on every exit path before anything is printed.
"""

from __future__ import annotations

import logging
import sys
import termios
import tty
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any, Protocol

from rich.console import Console
from rich.live import Live

from gitscribe.cli.formatting import format_error, format_success
from gitscribe.config import ConfigStore
from gitscribe.errors import ConfigError, EventSourceClosed
from gitscribe.providers import PROVIDERS, ProviderOption
from gitscribe.wizard.app import HookBackend, SetupApp, WizardState
from gitscribe.wizard.events import (
    DEFAULT_TICK_INTERVAL,
    Event,
    EventSource,
    KeyPress,
    PosixTerminalReader,
    TerminalReader,
)
from gitscribe.wizard.render import render_frame
from gitscribe.wizard.types import HandleResult, Screen, WizardOutcome

logger = logging.getLogger(__name__)
console = Console()


def _raw_attributes(attrs: list[Any]) -> list[Any]:
    """Raw input mode that keeps output post-processing.

    Echo, line buffering and signal keys are disabled so Ctrl+C and Esc
    reach the wizard as keys. OPOST stays on so Rich can keep writing
    ``\\n`` line endings.
    """
    mode = list(attrs)
    mode[tty.IFLAG] &= ~(
        termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON
    )
    mode[tty.LFLAG] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    cc = list(mode[tty.CC])
    cc[termios.VMIN] = 1
    cc[termios.VTIME] = 0
    mode[tty.CC] = cc
    return mode


@contextmanager
def terminal_session(
    console: Console = console, fd: int | None = None
) -> Iterator[Live]:
    """Raw keyboard input plus a full-screen Rich ``Live`` display.

    Args:
        console: Console to draw on
        fd: Terminal input descriptor (defaults to stdin)

    Yields:
        The running Live display; call ``update`` to draw a frame
    """
    fd = sys.stdin.fileno() if fd is None else fd
    saved = termios.tcgetattr(fd)
    live = Live(console=console, screen=True, auto_refresh=False, transient=True)
    try:
        termios.tcsetattr(fd, termios.TCSADRAIN, _raw_attributes(saved))
        live.start()
        logger.debug("Terminal session started")
        yield live
    finally:
        live.stop()
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        logger.debug("Terminal session restored")


class EventStream(Protocol):
    """Anything with a blocking ``next()`` that yields wizard events."""

    def next(self) -> Event: ...


def run_event_loop(
    app: SetupApp,
    events: EventStream,
    draw: Callable[[WizardState], None],
) -> HandleResult:
    """Drive the controller until the wizard completes or is cancelled.

    The first frame is drawn before any input is read. After that, every
    key press redraws; ticks redraw only on the Hooks screen, where the
    installed-state markers can change behind the wizard's back.

    Args:
        app: Controller receiving events
        events: Event source to consume
        draw: Callback drawing a frame for the given state

    Returns:
        COMPLETED or CANCELLED (input exhaustion counts as cancelled)

    Raises:
        TerminalIOError: If reading the terminal failed
    """
    draw(app.state)
    while True:
        try:
            event = events.next()
        except EventSourceClosed:
            logger.debug("Input ended on %s screen", app.screen.value)
            return HandleResult.CANCELLED

        result = app.handle(event)
        if result is not HandleResult.CONTINUE:
            logger.debug("Wizard finished on %s screen: %s", app.screen.value, result.value)
            return result
        if isinstance(event, KeyPress) or app.screen is Screen.HOOKS:
            draw(app.state)


def run_setup_wizard(
    store: ConfigStore | None = None,
    *,
    registry: Sequence[ProviderOption] = PROVIDERS,
    hooks: HookBackend | None = None,
    reader: TerminalReader | None = None,
    tick_interval: float = DEFAULT_TICK_INTERVAL,
    console: Console = console,
) -> WizardOutcome:
    """Run the full-screen setup wizard and persist the result.

    Args:
        store: Configuration store (defaults to the user config file)
        registry: Providers offered on the Provider screen
        hooks: Hook operations (defaults to the current repository)
        reader: Terminal reader (defaults to stdin)
        tick_interval: Seconds between idle ticks
        console: Console used for drawing and exit messages

    Returns:
        SAVED, CANCELLED or SAVE_FAILED

    Raises:
        TerminalIOError: If reading the terminal failed
    """
    store = store or ConfigStore()
    app = SetupApp(store.load_existing(), registry=registry, hooks=hooks)
    events = EventSource(reader or PosixTerminalReader(), tick_interval)

    with terminal_session(console) as live:

        def draw(state: WizardState) -> None:
            live.update(render_frame(state, app.registry), refresh=True)

        events.start()
        try:
            result = run_event_loop(app, events, draw)
        finally:
            events.close()
            events.join(timeout=tick_interval * 4)

    if result is HandleResult.CANCELLED:
        console.print("[yellow]Setup cancelled, nothing was saved[/yellow]")
        return WizardOutcome.CANCELLED

    try:
        path = store.save(app.draft)
    except ConfigError as e:
        console.print(
            format_error(
                str(e),
                "Check that the directory is writable and run 'gitscribe setup' "
                "again. 'gitscribe config path' shows where the file is written.",
            )
        )
        return WizardOutcome.SAVE_FAILED

    console.print(format_success("Configuration saved", str(path)))
    return WizardOutcome.SAVED
