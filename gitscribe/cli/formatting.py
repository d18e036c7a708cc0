"""Rich formatting utilities for CLI output.

Panels for error/warning/success messages and syntax-highlighted YAML,
shared by the CLI commands and the setup wizard's exit messages.
"""

from __future__ import annotations

from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax

PANEL_WIDTH = 78


def syntax_highlight_yaml(content: str) -> Syntax:
    """Create syntax-highlighted YAML block.

    Args:
        content: YAML text to highlight

    Returns:
        Syntax object with YAML highlighting
    """
    return Syntax(
        content,
        "yaml",
        theme="monokai",
        background_color="default",
        word_wrap=True,
    )


def _panel(message: str, extra: str | None, title: str, color: str) -> Panel:
    content = f"[bold {color}]{escape(message)}[/bold {color}]"
    if extra:
        content += f"\n\n[dim]{escape(extra)}[/dim]"

    return Panel(
        content,
        title=f"[bold {color}]{title}[/bold {color}]",
        border_style=color,
        width=PANEL_WIDTH,
        expand=False,
    )


def format_error(message: str, context: str | None = None) -> Panel:
    """Create formatted error panel.

    Args:
        message: Error message
        context: Optional hint for resolving the error

    Returns:
        Panel with error formatting
    """
    return _panel(message, context, "Error", "red")


def format_warning(message: str, context: str | None = None) -> Panel:
    """Create formatted warning panel."""
    return _panel(message, context, "Warning", "yellow")


def format_success(message: str, details: str | None = None) -> Panel:
    """Create formatted success panel.

    Args:
        message: Success message
        details: Optional details about the result

    Returns:
        Panel with success formatting
    """
    return _panel(f"✓ {message}", details, "Success", "green")
