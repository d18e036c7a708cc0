"""Menu items of the list-style wizard screens.

Each item names the draft field it edits (or the hook it manages) and how
Space and digit keys act on it. The controller and the renderer both read
these tables, so the item at a given menu index is the same for both.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from gitscribe.hooks import COMMIT_MSG, PREPARE_COMMIT_MSG
from gitscribe.wizard.draft import CommitStyle


class ItemKind(Enum):
    """How a menu item reacts to input."""

    RADIO = "radio"  # Space selects value for field
    TOGGLE = "toggle"  # Space flips a boolean field
    NUMBER = "number"  # Digits edit an integer field
    CHOICE = "choice"  # Space cycles through a list of values
    HOOK = "hook"  # Space installs or removes a git hook
    ACTION = "action"  # Space runs a one-off side effect


@dataclass(frozen=True)
class MenuItem:
    """One selectable row of a list screen.

    Attributes:
        label: Text shown in the list
        kind: Input behavior
        field: DraftConfig attribute edited by the item
        value: Radio value, or hook name for HOOK items
        unit: Suffix shown after numeric values
    """

    label: str
    kind: ItemKind
    field: str = ""
    value: object = None
    unit: str = ""


STYLE_ITEMS: tuple[MenuItem, ...] = (
    *(
        MenuItem(style.display_name, ItemKind.RADIO, "commit_style", style)
        for style in CommitStyle
    ),
    MenuItem("Capitalize description", ItemKind.TOGGLE, "description_capitalize"),
    MenuItem("Add trailing period", ItemKind.TOGGLE, "description_add_period"),
)

HOOK_ITEMS: tuple[MenuItem, ...] = (
    MenuItem("Install prepare-commit-msg hook", ItemKind.HOOK, value=PREPARE_COMMIT_MSG),
    MenuItem("Install commit-msg hook", ItemKind.HOOK, value=COMMIT_MSG),
    MenuItem("Uninstall all hooks", ItemKind.ACTION),
    MenuItem("Hook strict mode", ItemKind.TOGGLE, "hook_strict"),
)

SETTINGS_ITEMS: tuple[MenuItem, ...] = (
    MenuItem("Use emojis", ItemKind.TOGGLE, "emoji"),
    MenuItem("Auto-push", ItemKind.TOGGLE, "gitpush"),
    MenuItem("Multi-line commit body", ItemKind.TOGGLE, "enable_commit_body"),
    MenuItem("Learn from history", ItemKind.TOGGLE, "learn_from_history"),
    MenuItem("Clipboard on timeout", ItemKind.TOGGLE, "clipboard_on_timeout"),
    MenuItem("Max description length", ItemKind.NUMBER, "description_max_length", unit=" chars"),
    MenuItem("Generate count", ItemKind.NUMBER, "generate_count"),
    MenuItem("History commits", ItemKind.NUMBER, "history_commits_count"),
    MenuItem("Hook timeout", ItemKind.NUMBER, "hook_timeout_ms", unit="ms"),
    MenuItem("Max input tokens", ItemKind.NUMBER, "tokens_max_input"),
    MenuItem("Max output tokens", ItemKind.NUMBER, "tokens_max_output"),
    MenuItem("Language", ItemKind.CHOICE, "language"),
)
