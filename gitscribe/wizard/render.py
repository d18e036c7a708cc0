"""Frame rendering for the TUI setup wizard.

``render_frame`` turns a ``WizardState`` into a Rich ``Layout`` made of three
bands: a title band, the screen body and a footer with key hints. Rendering
only reads the state (hook status included), so drawing the same state twice
produces the same frame.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from rich.console import Console, ConsoleOptions, Group, RenderableType, RenderResult
from rich.layout import Layout
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from gitscribe.errors import WizardInvariantError
from gitscribe.providers import PROVIDERS, ProviderOption
from gitscribe.wizard.app import WizardState
from gitscribe.wizard.draft import language_name
from gitscribe.wizard.options import (
    HOOK_ITEMS,
    SETTINGS_ITEMS,
    STYLE_ITEMS,
    ItemKind,
    MenuItem,
)
from gitscribe.wizard.types import SCREEN_ORDER, Screen

TITLE_HEIGHT = 3
FOOTER_HEIGHT = 3

HIGHLIGHT = "bold black on cyan"

LIST_HINTS = "↑/↓ Move   Space Select   Enter Continue   Esc Back   Ctrl+C Quit"
TEXT_HINTS = "Type to edit   Backspace Delete   Enter Confirm   Esc Back   Ctrl+C Quit"

# (title, body, footer hints) for one screen
ScreenParts = tuple[str, RenderableType, str]

# (cursor, label, value, row style) cells of one menu row
MenuRow = tuple[Text, Text, Text, str | None]


def render_frame(
    state: WizardState, registry: Sequence[ProviderOption] = PROVIDERS
) -> Layout:
    """Build the full-screen frame for the current wizard state.

    Args:
        state: Wizard state to draw
        registry: Providers listed on the Provider screen

    Returns:
        Layout with ``title``, ``body`` and ``footer`` regions
    """
    title, body, hints = _RENDERERS[state.screen](state, registry)

    layout = Layout(name="root")
    layout.split_column(
        Layout(_title_band(state.screen, title), name="title", size=TITLE_HEIGHT),
        Layout(body, name="body", ratio=1),
        Layout(_footer_band(hints), name="footer", size=FOOTER_HEIGHT),
    )
    return layout


def _title_band(screen: Screen, title: str) -> Panel:
    text = Text()
    text.append("gitscribe setup", style="bold cyan")
    text.append("  │  ", style="dim")
    text.append(title, style="bold")
    step = f"Step {screen.position + 1}/{len(SCREEN_ORDER)}"
    return Panel(text, subtitle=step, subtitle_align="right", border_style="cyan")


def _footer_band(hints: str) -> Panel:
    return Panel(Text(hints, style="dim"), border_style="dim")


def _body(content: RenderableType, title: str | None = None) -> Panel:
    return Panel(content, title=title, title_align="left", border_style="blue", padding=(1, 2))


def _menu_table() -> Table:
    # One line per row so the scrolling window can count rows as lines
    table = Table.grid(padding=(0, 2))
    table.add_column(width=1, no_wrap=True)
    table.add_column(no_wrap=True, overflow="ellipsis")
    table.add_column(no_wrap=True, overflow="ellipsis")
    return table


class ScrollingMenu:
    """Menu rows cut down to the height they are drawn in.

    The visible window follows the cursor row, so the selected item is
    always on screen. When rows are hidden, a line above and below the
    window says how many. The window depends only on the rows, the cursor
    and the available height, so the same state draws the same frame.
    """

    def __init__(self, rows: list[MenuRow], cursor: int, reserve: int = 0) -> None:
        """Initialize the menu.

        Args:
            rows: Rows in display order (headings included)
            cursor: Index into ``rows`` of the selected row
            reserve: Lines of the same body taken by other content
        """
        self.rows = rows
        self.cursor = cursor
        self.reserve = reserve

    def window(self, height: int | None) -> tuple[int, int]:
        """Start and end (exclusive) of the rows drawn in ``height`` lines."""
        total = len(self.rows)
        if height is None or total <= height - self.reserve:
            return 0, total
        visible = max(1, height - self.reserve - 2)
        start = max(0, min(self.cursor - visible // 2, total - visible))
        return start, start + visible

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        total = len(self.rows)
        start, end = self.window(options.height)
        table = _menu_table()
        for cursor, label, value, style in self.rows[start:end]:
            table.add_row(cursor, label, value, style=style)

        if end - start == total:
            yield table
            return
        yield Text(f"  ▲ {start} more" if start else "", style="dim")
        yield table
        yield Text(f"  ▼ {total - end} more" if end < total else "", style="dim")


def _cursor(selected: bool) -> Text:
    return Text(">" if selected else " ", style="bold cyan")


def _flag(value: bool) -> Text:
    return Text("[ON]", style="green") if value else Text("[OFF]", style="dim")


def _item_cells(item: MenuItem, state: WizardState, selected: bool) -> tuple[Text, Text]:
    """Label and value cells of one menu item."""
    draft = state.draft
    kind = item.kind

    if kind is ItemKind.RADIO:
        dot = "●" if getattr(draft, item.field) == item.value else "○"
        return Text(f"{dot} {item.label}"), Text()
    if kind is ItemKind.TOGGLE:
        return Text(item.label), _flag(getattr(draft, item.field))
    if kind is ItemKind.NUMBER:
        if selected and state.pending_text is not None:
            return Text(item.label), Text(f"{state.pending_text}_", style="bold yellow")
        return Text(item.label), Text(f"{getattr(draft, item.field)}{item.unit}")
    if kind is ItemKind.CHOICE:
        code = getattr(draft, item.field)
        return Text(item.label), Text(f"{language_name(code)} ({code})")
    if kind is ItemKind.HOOK:
        if state.hook_status.get(str(item.value), False):
            return Text(item.label), Text("[INSTALLED]", style="green")
        return Text(item.label), Text("[NOT INSTALLED]", style="yellow")
    return Text(item.label), Text("[ACTION]", style="magenta")


def _menu(items: Sequence[MenuItem], state: WizardState, reserve: int = 0) -> ScrollingMenu:
    rows: list[MenuRow] = []
    for index, item in enumerate(items):
        selected = index == state.menu_index
        label, value = _item_cells(item, state, selected)
        rows.append((_cursor(selected), label, value, HIGHLIGHT if selected else None))
    return ScrollingMenu(rows, state.menu_index, reserve)


def _require_provider(state: WizardState) -> ProviderOption:
    provider = state.draft.provider
    if provider is None:
        raise WizardInvariantError(f"{state.screen.value} screen drawn without a provider")
    return provider


def _render_welcome(state: WizardState, registry: Sequence[ProviderOption]) -> ScreenParts:
    text = Text()
    text.append("Welcome to gitscribe!\n\n", style="bold")
    text.append("gitscribe writes commit messages for your staged changes using an AI model.\n\n")
    text.append("This wizard walks you through:\n")
    for step in (
        "Choosing an AI provider and model",
        "Entering an API key",
        "Picking a commit message style",
        "Installing git hooks",
        "Tuning advanced settings",
    ):
        text.append(f"  • {step}\n")
    text.append("\nNothing is saved until you confirm the summary.", style="dim")
    return "Welcome", _body(text), "Enter Start   Esc Quit   Ctrl+C Quit"


def _render_provider(state: WizardState, registry: Sequence[ProviderOption]) -> ScreenParts:
    rows: list[MenuRow] = []
    cursor_row = 0
    current = state.draft.provider
    category = None
    for index, option in enumerate(registry):
        if option.category is not category:
            category = option.category
            rows.append((Text(), Text(category.display_name, style="bold magenta"), Text(), None))
        selected = index == state.menu_index
        if selected:
            cursor_row = len(rows)
        dot = "●" if current is not None and current.name == option.name else "○"
        detail = option.default_model
        if not option.requires_api_key:
            detail += "  (no API key)"
        rows.append(
            (
                _cursor(selected),
                Text(f"{dot} {option.display}"),
                Text(detail, style="dim"),
                HIGHLIGHT if selected else None,
            )
        )
    body = _body(
        ScrollingMenu(rows, cursor_row), "Select the provider that generates your messages"
    )
    return "AI Provider", body, LIST_HINTS


def _render_model(state: WizardState, registry: Sequence[ProviderOption]) -> ScreenParts:
    draft = state.draft
    provider = _require_provider(state)

    info = Table.grid(padding=(0, 2))
    info.add_row(Text("Default model", style="dim"), Text(provider.default_model))
    info.add_row(
        Text("Current model", style="dim"),
        Text(draft.model or f"{provider.default_model} (default)"),
    )
    entry = Text()
    entry.append("Model: ", style="bold")
    entry.append(state.pending_text or "")
    entry.append("_", style="blink")
    help_text = Text("Leave empty and press Enter to keep the current model.", style="dim")
    content = Group(info, Text(), entry, Text(), help_text)
    return f"Model for {provider.display}", _body(content), TEXT_HINTS


def _render_auth(state: WizardState, registry: Sequence[ProviderOption]) -> ScreenParts:
    draft = state.draft
    provider = _require_provider(state)
    title = f"API Key for {provider.display}"

    if not provider.requires_api_key:
        text = Text()
        text.append(f"{provider.display} runs locally and needs no API key.\n\n")
        text.append("Press Enter to continue.", style="dim")
        return title, _body(text), "Enter Continue   Esc Back   Ctrl+C Quit"

    stored = Text()
    stored.append("Stored key: ", style="dim")
    stored.append(draft.masked_api_key)
    entry = Text()
    entry.append("Key: ", style="bold")
    entry.append("*" * len(state.pending_text or ""))
    entry.append("_", style="blink")
    help_text = Text(
        "The key is saved to your system keychain. Leave empty to keep the "
        "stored key, or set GITSCRIBE_API_KEY in your environment instead.",
        style="dim",
    )
    content = Group(stored, Text(), entry, Text(), help_text)
    return title, _body(content), TEXT_HINTS


def _render_style(state: WizardState, registry: Sequence[ProviderOption]) -> ScreenParts:
    example = Text()
    example.append("Example: ", style="dim")
    example.append(state.draft.commit_style.example, style="green")
    content = Group(_menu(STYLE_ITEMS, state, reserve=2), Text(), example)
    return "Commit Style", _body(content, "How commit messages are formatted"), LIST_HINTS


def _render_hooks(state: WizardState, registry: Sequence[ProviderOption]) -> ScreenParts:
    # Blank line and two lines of help, plus the notice when there is one
    reserve = 5 if state.notice else 3
    parts: list[RenderableType] = [_menu(HOOK_ITEMS, state, reserve)]
    if state.notice:
        parts.extend([Text(), Text(state.notice, style="yellow")])
    parts.extend(
        [
            Text(),
            Text(
                "prepare-commit-msg fills in the message when you run git commit; "
                "commit-msg generates it without prompting.",
                style="dim",
            ),
        ]
    )
    return "Git Hooks", _body(Group(*parts), "Hooks in the current repository"), LIST_HINTS


def _render_settings(state: WizardState, registry: Sequence[ProviderOption]) -> ScreenParts:
    hints = "↑/↓ Move   Space Toggle   0-9 Edit number   Enter Continue   Esc Back"
    return "Advanced Settings", _body(_menu(SETTINGS_ITEMS, state)), hints


def _render_summary(state: WizardState, registry: Sequence[ProviderOption]) -> ScreenParts:
    draft = state.draft
    provider = draft.provider

    main = Table.grid(padding=(0, 2))
    main.add_column(style="dim", no_wrap=True)
    main.add_column(no_wrap=True, overflow="ellipsis")
    main.add_row("Provider", Text(provider.display if provider else "Not selected"))
    main.add_row("Model", Text(draft.effective_model or "Not selected"))
    main.add_row("API Key", Text(draft.masked_api_key))
    main.add_row("Commit style", Text(draft.commit_style.display_name))
    main.add_row("Language", Text(f"{language_name(draft.language)} ({draft.language})"))

    flags = [
        ("Capitalize description", _flag(draft.description_capitalize)),
        ("Add trailing period", _flag(draft.description_add_period)),
        ("Use emojis", _flag(draft.emoji)),
        ("Auto-push", _flag(draft.gitpush)),
        ("Multi-line commit body", _flag(draft.enable_commit_body)),
        ("Learn from history", _flag(draft.learn_from_history)),
        ("Clipboard on timeout", _flag(draft.clipboard_on_timeout)),
        ("Hook strict mode", _flag(draft.hook_strict)),
    ]
    numbers = [
        ("Max description length", Text(f"{draft.description_max_length} chars")),
        ("Generate count", Text(str(draft.generate_count))),
        ("History commits", Text(str(draft.history_commits_count))),
        ("Hook timeout", Text(f"{draft.hook_timeout_ms}ms")),
        ("Max input tokens", Text(str(draft.tokens_max_input))),
        ("Max output tokens", Text(str(draft.tokens_max_output))),
    ]

    # Toggles on the left, numbers on the right, so the summary fits 80x24
    settings = Table.grid(padding=(0, 2))
    settings.add_column(style="dim", no_wrap=True)
    settings.add_column(no_wrap=True)
    settings.add_column(style="dim", no_wrap=True)
    settings.add_column(no_wrap=True)
    for index, (label, value) in enumerate(flags):
        number_label, number = numbers[index] if index < len(numbers) else ("", Text())
        settings.add_row(label, value, number_label, number)

    return (
        "Summary",
        _body(Group(main, Text(), settings), "Review your configuration"),
        "Enter Save   Esc Back   Ctrl+C Quit without saving",
    )


_RENDERERS: dict[
    Screen, Callable[[WizardState, Sequence[ProviderOption]], ScreenParts]
] = {
    Screen.WELCOME: _render_welcome,
    Screen.PROVIDER: _render_provider,
    Screen.MODEL: _render_model,
    Screen.AUTH: _render_auth,
    Screen.STYLE: _render_style,
    Screen.HOOKS: _render_hooks,
    Screen.SETTINGS: _render_settings,
    Screen.SUMMARY: _render_summary,
}
