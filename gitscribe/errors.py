"""
Custom exception types used across gitscribe.

The CLI catches GitscribeError subclasses and reports them as formatted
panels; anything else is treated as a bug.
"""

from __future__ import annotations


class GitscribeError(Exception):
    """Base class for all gitscribe specific errors."""


class ConfigError(GitscribeError):
    """Raised when the configuration file cannot be written."""


class HookError(GitscribeError):
    """Raised when a git hook cannot be installed or removed."""


class TerminalIOError(GitscribeError):
    """Raised when polling or reading the terminal fails at the OS level."""


class EventSourceClosed(GitscribeError):
    """Raised when no more input events will ever arrive."""


class WizardInvariantError(GitscribeError):
    """Raised when the wizard reaches a screen whose precondition is missing.

    This indicates a controller bug rather than a user error and is never
    handled at runtime.
    """
