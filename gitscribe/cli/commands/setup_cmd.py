"""Setup command for gitscribe CLI."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import click
from rich.console import Console

from gitscribe.cli import RichCommand, format_error, format_success
from gitscribe.cli.utils import configure_logging
from gitscribe.errors import ConfigError, TerminalIOError

console = Console()
logger = logging.getLogger(__name__)


def _interactive_terminal() -> bool:
    return os.name == "posix" and sys.stdin.isatty() and sys.stdout.isatty()


def write_defaults() -> Path:
    """Save the default configuration, keeping the current provider if any.

    Raises:
        ConfigError: If the file cannot be written
    """
    from gitscribe.config import ConfigStore
    from gitscribe.providers import PROVIDERS
    from gitscribe.wizard.draft import DraftConfig

    store = ConfigStore()
    existing = store.load_existing()
    draft = DraftConfig(
        provider=existing.provider or PROVIDERS[0],
        model=existing.model,
        api_key=existing.api_key,
    )
    return store.save(draft)


@click.command(cls=RichCommand)
@click.option("--no-tui", is_flag=True, help="Use question-by-question prompts")
@click.option("--defaults", is_flag=True, help="Write the default configuration without prompting")
@click.option(
    "--debug-log",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write debug logs to this file",
)
def setup(no_tui: bool, defaults: bool, debug_log: Path | None) -> None:
    """Configure gitscribe interactively.

    Opens a full-screen wizard for choosing the AI provider, model, API key,
    commit style, git hooks and advanced settings. Nothing is saved until
    you confirm the summary screen.

    ## Examples

    Run the full-screen wizard:

        $ gitscribe setup

    Answer a few questions instead:

        $ gitscribe setup --no-tui

    Start over with defaults:

        $ gitscribe setup --defaults
    """
    from gitscribe.wizard.types import WizardOutcome

    configure_logging(debug_log)

    if defaults:
        try:
            path = write_defaults()
        except ConfigError as e:
            console.print(format_error(str(e)))
            raise click.ClickException("Configuration was not saved")
        console.print(format_success("Default configuration saved", str(path)))
        return

    if no_tui or not _interactive_terminal():
        if not no_tui:
            console.print("[dim]Not running in an interactive terminal, using prompts[/dim]")
        from gitscribe.wizard.prompt_wizard import run_quick_setup

        outcome = run_quick_setup()
    else:
        from gitscribe.wizard import launch_tui_wizard

        try:
            outcome = launch_tui_wizard()
        except TerminalIOError as e:
            logger.debug("Terminal failure: %s", e)
            console.print(format_error(str(e), "Try 'gitscribe setup --no-tui' instead."))
            raise click.ClickException("Setup aborted")

    if outcome is WizardOutcome.SAVE_FAILED:
        raise click.ClickException("Configuration was not saved")
