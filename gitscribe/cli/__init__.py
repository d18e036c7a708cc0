"""CLI utilities for gitscribe.

This package provides Rich-based formatting utilities and custom Click
help formatters for consistent CLI output.
"""

from __future__ import annotations

from gitscribe.cli.formatting import (
    format_error,
    format_success,
    format_warning,
)
from gitscribe.cli.help_formatter import RichCommand, RichGroup

__all__ = [
    "format_error",
    "format_success",
    "format_warning",
    "RichCommand",
    "RichGroup",
]
