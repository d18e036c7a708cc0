"""Type definitions for the setup wizard."""

from __future__ import annotations

from enum import Enum


class WizardMode(Enum):
    """Wizard interaction modes."""

    PROMPT = "prompt"  # Question-by-question prompts
    TUI = "tui"  # Full-screen event-driven wizard


class Screen(Enum):
    """Screens of the TUI wizard, in forward navigation order."""

    WELCOME = "welcome"
    PROVIDER = "provider"
    MODEL = "model"
    AUTH = "auth"
    STYLE = "style"
    HOOKS = "hooks"
    SETTINGS = "settings"
    SUMMARY = "summary"

    @property
    def position(self) -> int:
        """Zero-based position in the screen sequence."""
        return SCREEN_ORDER.index(self)

    @property
    def next(self) -> Screen:
        """Screen reached by Enter (Summary is the last screen)."""
        return SCREEN_ORDER[min(self.position + 1, len(SCREEN_ORDER) - 1)]

    @property
    def previous(self) -> Screen | None:
        """Screen reached by Esc, or None on the first screen."""
        if self.position == 0:
            return None
        return SCREEN_ORDER[self.position - 1]


SCREEN_ORDER: tuple[Screen, ...] = tuple(Screen)


class HandleResult(Enum):
    """What the event loop should do after an event was handled."""

    CONTINUE = "continue"
    COMPLETED = "completed"  # Persist the draft and exit
    CANCELLED = "cancelled"  # Discard the draft and exit


class WizardOutcome(Enum):
    """Final result of a wizard run, as reported to the CLI."""

    SAVED = "saved"
    CANCELLED = "cancelled"
    SAVE_FAILED = "save_failed"
