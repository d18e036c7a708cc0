"""Interactive setup wizards for the gitscribe CLI.

This module provides a full-screen TUI wizard and a prompt-based quick
setup for configuring the AI provider, commit style, git hooks and
advanced settings.
"""

from typing import Optional

from gitscribe.wizard.app import SetupApp, WizardState
from gitscribe.wizard.base import BaseWizard
from gitscribe.wizard.draft import CommitStyle, DraftConfig
from gitscribe.wizard.types import HandleResult, Screen, WizardMode, WizardOutcome

__all__ = [
    "BaseWizard",
    "CommitStyle",
    "DraftConfig",
    "HandleResult",
    "Screen",
    "SetupApp",
    "WizardMode",
    "WizardOutcome",
    "WizardState",
    "launch_tui_wizard",
]


def launch_tui_wizard(tick_interval: Optional[float] = None) -> WizardOutcome:
    """Launch the full-screen setup wizard.

    Args:
        tick_interval: Seconds between idle ticks (default 0.05)

    Returns:
        Outcome of the wizard run

    Raises:
        ImportError: On platforms without termios
    """
    from gitscribe.wizard.runner import run_setup_wizard

    if tick_interval is None:
        return run_setup_wizard()
    return run_setup_wizard(tick_interval=tick_interval)
