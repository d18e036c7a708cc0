"""Hook command group for gitscribe.

Installs and removes the gitscribe git hooks of the current repository.
"""

from __future__ import annotations

import click
from rich.console import Console

from gitscribe.cli import RichCommand, RichGroup, format_error
from gitscribe.errors import HookError
from gitscribe.hooks import HOOK_NAMES, HookManager

console = Console()


@click.group(cls=RichGroup)
def hook() -> None:
    """Manage gitscribe git hooks.

    ## Available Commands

    **install** - Install a hook into .git/hooks
    **uninstall** - Remove all gitscribe hooks
    **status** - Show which hooks are installed
    """


@hook.command(cls=RichCommand)
@click.argument("name", type=click.Choice(list(HOOK_NAMES)))
def install(name: str) -> None:
    """Install a gitscribe hook.

    An existing hook with the same name is backed up and restored when the
    gitscribe hook is uninstalled.

    Examples:

        gitscribe hook install prepare-commit-msg
    """
    try:
        message = HookManager().install_hook(name)
    except HookError as e:
        console.print(format_error(str(e)))
        raise click.ClickException(f"Could not install {name} hook")
    console.print(f"[green]✓[/green] {message}")


@hook.command(cls=RichCommand)
def uninstall() -> None:
    """Remove every gitscribe hook, restoring backed-up hooks."""
    try:
        removed = HookManager().uninstall_hooks()
    except HookError as e:
        console.print(format_error(str(e)))
        raise click.ClickException("Could not uninstall hooks")

    if not removed:
        console.print("[dim]○[/dim] No gitscribe hooks installed")
    for name in removed:
        console.print(f"[green]✓[/green] Removed {name} hook")


@hook.command(cls=RichCommand)
def status() -> None:
    """Show which gitscribe hooks are installed."""
    manager = HookManager()
    try:
        hooks_dir = manager.hooks_dir
    except HookError as e:
        console.print(format_error(str(e)))
        raise click.ClickException("Not a git repository")

    console.print()
    console.print(f"[bold]Hook Status[/bold] [dim]({hooks_dir})[/dim]")
    console.print()
    for name, installed in manager.status().items():
        if installed:
            console.print(f"[green]✓[/green] {name:<20} Installed")
        else:
            console.print(f"[dim]○[/dim] {name:<20} Not installed")
    console.print()
