"""Custom Click help formatting.

Standard Click formatting with a wider help width, and groups that list
their subcommands in registration order instead of alphabetically.
"""

from __future__ import annotations

import click

HELP_WIDTH = 88


class RichCommand(click.Command):
    """Click command with wider help output."""

    def get_help(self, ctx: click.Context) -> str:
        """Get help text for command.

        Args:
            ctx: Click context

        Returns:
            Formatted help text
        """
        formatter = click.HelpFormatter(width=HELP_WIDTH)
        self.format_help(ctx, formatter)
        return formatter.getvalue()


class RichGroup(click.Group):
    """Click group with wider help output.

    Subcommands default to ``RichCommand`` and are listed in the order they
    were added, which follows the typical workflow (setup, then config).
    """

    command_class = RichCommand

    def get_help(self, ctx: click.Context) -> str:
        formatter = click.HelpFormatter(width=HELP_WIDTH)
        self.format_help(ctx, formatter)
        return formatter.getvalue()

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(self.commands)
