"""Command-line interface for gitscribe."""

from __future__ import annotations

import click

from gitscribe.cli import RichGroup
from gitscribe.cli.commands import config, hook, setup


@click.group(cls=RichGroup)
@click.version_option(package_name="gitscribe")
def cli() -> None:
    """Write commit messages with AI.

    Configure once with the setup wizard:

        $ gitscribe setup

    Then install a git hook in your repository:

        $ gitscribe hook install prepare-commit-msg
    """


cli.add_command(setup)
cli.add_command(config)
cli.add_command(hook)


if __name__ == "__main__":
    cli()
