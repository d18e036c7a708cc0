"""CLI commands for gitscribe.

This package contains all CLI command definitions, organized by functionality.
Commands are registered by importing them in __main__.py.
"""

from __future__ import annotations

from gitscribe.cli.commands.config_cmd import config
from gitscribe.cli.commands.hook import hook
from gitscribe.cli.commands.setup_cmd import setup

__all__ = [
    "config",
    "hook",
    "setup",
]
