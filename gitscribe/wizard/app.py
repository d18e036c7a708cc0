"""Controller of the TUI setup wizard.

``SetupApp`` is the single authority over which screen is active and what
the draft configuration holds. The event loop hands it one event at a time;
it applies the universal key bindings, then the active screen's rules, and
reports whether the wizard should continue, save or quit.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from gitscribe.errors import HookError, WizardInvariantError
from gitscribe.hooks import HOOK_NAMES, HookManager
from gitscribe.providers import PROVIDERS, ProviderOption
from gitscribe.wizard.draft import LANGUAGES, NUMERIC_LIMITS, DraftConfig, clamp_setting
from gitscribe.wizard.events import Event, KeyCode, KeyPress, Tick
from gitscribe.wizard.options import (
    HOOK_ITEMS,
    SETTINGS_ITEMS,
    STYLE_ITEMS,
    ItemKind,
    MenuItem,
)
from gitscribe.wizard.types import HandleResult, Screen

logger = logging.getLogger(__name__)

# Screens whose body is a text field rather than a list
TEXT_SCREENS = frozenset({Screen.MODEL, Screen.AUTH})

# Screens that need a committed provider to render
PROVIDER_SCREENS = frozenset({Screen.MODEL, Screen.AUTH})


class HookBackend(Protocol):
    """Git hook operations used by the Hooks screen."""

    def hook_exists(self, name: str) -> bool: ...

    def install_hook(self, name: str) -> str: ...

    def uninstall_hook(self, name: str) -> bool: ...

    def uninstall_hooks(self) -> list[str]: ...


@dataclass
class WizardState:
    """Everything the renderer needs to draw a frame.

    Attributes:
        screen: Active screen
        menu_index: Cursor position in the active list screen
        draft: Configuration being assembled
        pending_text: Text typed on Model/Auth, or the digits of a numeric
            setting being edited; None when nothing is being typed
        hook_status: Installed state of each hook, as last checked
        notice: Result of the last hook action, shown on the Hooks screen
    """

    screen: Screen = Screen.WELCOME
    menu_index: int = 0
    draft: DraftConfig = field(default_factory=DraftConfig)
    pending_text: str | None = None
    hook_status: dict[str, bool] = field(default_factory=dict)
    notice: str | None = None


class SetupApp:
    """Event-driven state machine behind the setup wizard."""

    def __init__(
        self,
        draft: DraftConfig | None = None,
        *,
        registry: Sequence[ProviderOption] = PROVIDERS,
        hooks: HookBackend | None = None,
    ) -> None:
        """Initialize the wizard at the Welcome screen.

        Args:
            draft: Starting configuration (defaults, or the saved config)
            registry: Providers offered on the Provider screen
            hooks: Hook operations (defaults to the current repository)
        """
        if not registry:
            raise ValueError("provider registry must not be empty")
        self.registry = tuple(registry)
        self.hooks: HookBackend = hooks if hooks is not None else HookManager()
        self.state = WizardState(draft=draft if draft is not None else DraftConfig())

        self._commit: dict[Screen, Callable[[], None]] = {
            Screen.PROVIDER: self._commit_provider,
            Screen.MODEL: self._commit_model,
            Screen.AUTH: self._commit_auth,
        }
        self._input: dict[Screen, Callable[[KeyPress], None]] = {
            Screen.MODEL: self._input_model,
            Screen.AUTH: self._input_auth,
            Screen.STYLE: self._input_style,
            Screen.HOOKS: self._input_hooks,
            Screen.SETTINGS: self._input_settings,
        }

    @property
    def screen(self) -> Screen:
        return self.state.screen

    @property
    def menu_index(self) -> int:
        return self.state.menu_index

    @property
    def draft(self) -> DraftConfig:
        return self.state.draft

    def items(self, screen: Screen | None = None) -> tuple[MenuItem, ...]:
        """Menu items of a list screen (empty for other screens)."""
        screen = screen or self.state.screen
        if screen is Screen.STYLE:
            return STYLE_ITEMS
        if screen is Screen.HOOKS:
            return HOOK_ITEMS
        if screen is Screen.SETTINGS:
            return SETTINGS_ITEMS
        return ()

    def item_count(self, screen: Screen | None = None) -> int:
        """Number of selectable rows on a screen."""
        screen = screen or self.state.screen
        if screen is Screen.PROVIDER:
            return len(self.registry)
        return len(self.items(screen))

    def handle(self, event: Event) -> HandleResult:
        """Apply one event to the wizard state.

        Args:
            event: Key press or tick from the event source

        Returns:
            CONTINUE, COMPLETED (save and exit) or CANCELLED (exit)
        """
        if isinstance(event, Tick):
            self._on_tick()
            return HandleResult.CONTINUE

        key = event
        if key.is_interrupt:
            logger.debug("Interrupted on %s", self.state.screen.value)
            return HandleResult.CANCELLED

        if key.code is KeyCode.ESC:
            return self._go_back()
        if key.code is KeyCode.UP:
            self._move(-1)
        elif key.code is KeyCode.DOWN:
            self._move(1)
        elif key.code is KeyCode.ENTER:
            if self.state.screen is Screen.SUMMARY:
                return HandleResult.COMPLETED
            commit = self._commit.get(self.state.screen)
            if commit is not None:
                commit()
            self._enter(self.state.screen.next, forward=True)
        else:
            handler = self._input.get(self.state.screen)
            if handler is not None:
                handler(key)
        return HandleResult.CONTINUE

    # Navigation

    def _enter(self, screen: Screen, forward: bool = False) -> None:
        if screen in PROVIDER_SCREENS and self.state.draft.provider is None:
            raise WizardInvariantError(
                f"{screen.value} screen reached without a committed provider"
            )
        logger.debug("Screen %s -> %s", self.state.screen.value, screen.value)
        self.state.screen = screen
        self.state.menu_index = 0
        if forward and screen is Screen.PROVIDER:
            # Start on the provider already chosen so Enter keeps it
            self.state.menu_index = self._provider_index()
        self.state.pending_text = "" if screen in TEXT_SCREENS else None
        self.state.notice = None
        if screen is Screen.HOOKS:
            self._refresh_hooks()

    def _provider_index(self) -> int:
        current = self.state.draft.provider
        if current is None:
            return 0
        return next(
            (i for i, option in enumerate(self.registry) if option.name == current.name), 0
        )

    def _go_back(self) -> HandleResult:
        previous = self.state.screen.previous
        if previous is None:
            return HandleResult.CANCELLED
        self._enter(previous)
        return HandleResult.CONTINUE

    def _move(self, delta: int) -> None:
        count = self.item_count()
        if count == 0:
            return
        index = max(0, min(count - 1, self.state.menu_index + delta))
        if index != self.state.menu_index:
            self.state.menu_index = index
            if self.state.screen is Screen.SETTINGS:
                # Moving away ends any numeric edit
                self.state.pending_text = None

    def _on_tick(self) -> None:
        if self.state.screen is Screen.HOOKS:
            self._refresh_hooks()

    def _refresh_hooks(self) -> None:
        self.state.hook_status = {name: self.hooks.hook_exists(name) for name in HOOK_NAMES}

    def _selected(self) -> MenuItem:
        return self.items()[self.state.menu_index]

    # Enter commits

    def _commit_provider(self) -> None:
        selected = self.registry[self.state.menu_index]
        draft = self.state.draft
        if draft.provider is not None and draft.provider.name != selected.name:
            # Model and key belong to the previous provider
            draft.model = ""
            draft.api_key = None
        draft.provider = selected

    def _commit_model(self) -> None:
        draft = self.state.draft
        typed = (self.state.pending_text or "").strip()
        if typed:
            draft.model = typed
        elif not draft.model and draft.provider is not None:
            draft.model = draft.provider.default_model

    def _commit_auth(self) -> None:
        typed = (self.state.pending_text or "").strip()
        if typed:
            self.state.draft.api_key = typed

    # Screen-specific keys

    def _edit_text(self, key: KeyPress) -> None:
        text = self.state.pending_text or ""
        if key.code is KeyCode.BACKSPACE:
            self.state.pending_text = text[:-1]
        elif key.is_text:
            self.state.pending_text = text + key.char

    def _input_model(self, key: KeyPress) -> None:
        self._edit_text(key)

    def _input_auth(self, key: KeyPress) -> None:
        provider = self.state.draft.provider
        if provider is not None and provider.requires_api_key:
            self._edit_text(key)

    def _input_style(self, key: KeyPress) -> None:
        if key.code is not KeyCode.SPACE:
            return
        item = self._selected()
        if item.kind is ItemKind.RADIO:
            setattr(self.state.draft, item.field, item.value)
        elif item.kind is ItemKind.TOGGLE:
            self._toggle(item)

    def _input_hooks(self, key: KeyPress) -> None:
        if key.code is not KeyCode.SPACE:
            return
        item = self._selected()
        if item.kind is ItemKind.TOGGLE:
            self._toggle(item)
            return

        try:
            if item.kind is ItemKind.HOOK:
                name = str(item.value)
                if self.hooks.hook_exists(name):
                    self.hooks.uninstall_hook(name)
                    self.state.notice = f"{name} hook removed"
                else:
                    self.state.notice = self.hooks.install_hook(name)
            elif item.kind is ItemKind.ACTION:
                removed = self.hooks.uninstall_hooks()
                if removed:
                    self.state.notice = f"Uninstalled hooks: {', '.join(removed)}"
                else:
                    self.state.notice = "No gitscribe hooks installed"
        except HookError as e:
            logger.debug("Hook action failed: %s", e)
            self.state.notice = str(e)
        self._refresh_hooks()

    def _input_settings(self, key: KeyPress) -> None:
        item = self._selected()
        if key.code is KeyCode.SPACE:
            if item.kind is ItemKind.TOGGLE:
                self._toggle(item)
            elif item.kind is ItemKind.CHOICE:
                self._cycle_language()
        elif item.kind is ItemKind.NUMBER:
            if key.code is KeyCode.BACKSPACE:
                self._erase_digit(item)
            elif key.is_text and key.char.isdigit():
                self._type_digit(item, key.char)

    def _toggle(self, item: MenuItem) -> None:
        draft = self.state.draft
        setattr(draft, item.field, not getattr(draft, item.field))

    def _cycle_language(self) -> None:
        codes = [code for code, _ in LANGUAGES]
        current = self.state.draft.language
        if current in codes:
            self.state.draft.language = codes[(codes.index(current) + 1) % len(codes)]
        else:
            self.state.draft.language = codes[0]

    def _type_digit(self, item: MenuItem, digit: str) -> None:
        _, high = NUMERIC_LIMITS[item.field]
        buffer = (self.state.pending_text or "") + digit
        if len(buffer) > len(str(high)):
            return
        self.state.pending_text = buffer
        setattr(self.state.draft, item.field, clamp_setting(item.field, int(buffer)))

    def _erase_digit(self, item: MenuItem) -> None:
        if not self.state.pending_text:
            return
        buffer = self.state.pending_text[:-1]
        self.state.pending_text = buffer
        if buffer:
            setattr(self.state.draft, item.field, clamp_setting(item.field, int(buffer)))
