"""Unit tests for the setup wizard controller."""

import pytest
from conftest import FakeHooks

from gitscribe.errors import WizardInvariantError
from gitscribe.hooks import COMMIT_MSG, PREPARE_COMMIT_MSG
from gitscribe.providers import PROVIDERS, get_provider
from gitscribe.wizard.app import SetupApp
from gitscribe.wizard.draft import CommitStyle, DraftConfig
from gitscribe.wizard.events import KeyCode, KeyPress, Tick
from gitscribe.wizard.options import SETTINGS_ITEMS, STYLE_ITEMS, ItemKind
from gitscribe.wizard.types import SCREEN_ORDER, HandleResult, Screen

ENTER = KeyPress(KeyCode.ENTER)
ESC = KeyPress(KeyCode.ESC)
UP = KeyPress(KeyCode.UP)
DOWN = KeyPress(KeyCode.DOWN)
SPACE = KeyPress(KeyCode.SPACE, " ")
BACKSPACE = KeyPress(KeyCode.BACKSPACE)
CTRL_C = KeyPress.ctrl("c")


def press(app: SetupApp, *keys: KeyPress) -> HandleResult:
    """Feed keys to the app, returning the last result."""
    result = HandleResult.CONTINUE
    for key in keys:
        result = app.handle(key)
    return result


def type_text(app: SetupApp, text: str) -> None:
    for char in text:
        app.handle(KeyPress.of(char))


def advance_to(app: SetupApp, screen: Screen) -> None:
    """Press Enter until the given screen is active."""
    while app.screen is not screen:
        assert app.handle(ENTER) is HandleResult.CONTINUE


def select_item(app: SetupApp, index: int) -> None:
    for _ in range(index):
        app.handle(DOWN)
    assert app.menu_index == index


@pytest.fixture
def app(fake_hooks: FakeHooks) -> SetupApp:
    return SetupApp(hooks=fake_hooks)


class TestNavigation:
    """Test screen transitions and cursor movement."""

    @pytest.mark.unit
    def test_starts_at_welcome(self, app: SetupApp) -> None:
        """Test the wizard starts on the Welcome screen with defaults."""
        assert app.screen is Screen.WELCOME
        assert app.menu_index == 0
        assert app.draft == DraftConfig()

    @pytest.mark.unit
    def test_empty_registry_rejected(self, fake_hooks: FakeHooks) -> None:
        """Test a provider registry must not be empty."""
        with pytest.raises(ValueError):
            SetupApp(registry=(), hooks=fake_hooks)

    @pytest.mark.unit
    def test_six_enters_reach_summary_with_defaults(self, app: SetupApp) -> None:
        """Test accepting every default lands on Summary with the first provider."""
        press(app, *[ENTER] * 6)

        assert app.screen is Screen.SUMMARY
        assert app.draft.provider == PROVIDERS[0]
        assert app.draft.model == PROVIDERS[0].default_model

    @pytest.mark.unit
    def test_enter_advances_exactly_one_screen(self, app: SetupApp) -> None:
        """Test Enter moves to the next screen in order."""
        for expected in SCREEN_ORDER[1:]:
            assert app.handle(ENTER) is HandleResult.CONTINUE
            assert app.screen is expected
            assert app.menu_index == 0

    @pytest.mark.unit
    def test_enter_on_summary_completes(self, app: SetupApp) -> None:
        """Test Enter on Summary completes without leaving the screen."""
        advance_to(app, Screen.SUMMARY)
        assert app.handle(ENTER) is HandleResult.COMPLETED
        assert app.screen is Screen.SUMMARY

    @pytest.mark.unit
    def test_esc_on_welcome_cancels(self, app: SetupApp) -> None:
        """Test Esc on the first screen cancels the wizard."""
        assert app.handle(ESC) is HandleResult.CANCELLED

    @pytest.mark.unit
    @pytest.mark.parametrize("screen", SCREEN_ORDER[1:])
    def test_esc_returns_to_previous_screen(self, app: SetupApp, screen: Screen) -> None:
        """Test Esc goes back one screen without losing committed values."""
        advance_to(app, screen)
        app.state.menu_index = app.item_count() - 1 if app.item_count() else 0
        before = app.draft.snapshot()

        assert app.handle(ESC) is HandleResult.CONTINUE
        assert app.screen is screen.previous
        assert app.menu_index == 0
        assert app.draft.snapshot() == before

    @pytest.mark.unit
    @pytest.mark.parametrize("screen", SCREEN_ORDER)
    def test_ctrl_c_cancels_everywhere(self, app: SetupApp, screen: Screen) -> None:
        """Test Ctrl+C cancels from any screen."""
        advance_to(app, screen)
        assert app.handle(CTRL_C) is HandleResult.CANCELLED

    @pytest.mark.unit
    def test_up_at_top_stays(self, app: SetupApp) -> None:
        """Test Up on the first item is a no-op."""
        advance_to(app, Screen.PROVIDER)
        app.handle(UP)
        assert app.menu_index == 0

    @pytest.mark.unit
    def test_down_clamps_without_wrapping(self, app: SetupApp) -> None:
        """Test Down stops at the last item."""
        advance_to(app, Screen.PROVIDER)
        press(app, *[DOWN] * (len(PROVIDERS) + 5))
        assert app.menu_index == len(PROVIDERS) - 1

        app.handle(UP)
        assert app.menu_index == len(PROVIDERS) - 2

    @pytest.mark.unit
    @pytest.mark.parametrize("screen", [Screen.WELCOME, Screen.MODEL, Screen.AUTH, Screen.SUMMARY])
    def test_arrows_ignored_on_screens_without_items(self, app: SetupApp, screen: Screen) -> None:
        """Test Up/Down do nothing where there is no list."""
        advance_to(app, screen)
        press(app, DOWN, DOWN, UP)
        assert app.menu_index == 0
        assert app.screen is screen

    @pytest.mark.unit
    def test_item_counts(self, app: SetupApp) -> None:
        """Test each screen reports its number of selectable rows."""
        assert app.item_count(Screen.WELCOME) == 0
        assert app.item_count(Screen.PROVIDER) == len(PROVIDERS)
        assert app.item_count(Screen.STYLE) == 5
        assert app.item_count(Screen.HOOKS) == 4
        assert app.item_count(Screen.SETTINGS) == 12
        assert app.item_count(Screen.SUMMARY) == 0

    @pytest.mark.unit
    def test_unknown_keys_are_ignored(self, app: SetupApp) -> None:
        """Test stray keys on list screens change nothing."""
        advance_to(app, Screen.STYLE)
        before = app.draft.snapshot()
        press(app, KeyPress.of("x"), KeyPress(KeyCode.TAB), KeyPress(KeyCode.LEFT), BACKSPACE)
        assert app.draft.snapshot() == before
        assert app.screen is Screen.STYLE

    @pytest.mark.unit
    def test_model_screen_requires_provider(self, app: SetupApp) -> None:
        """Test reaching Model without a provider is a programming error."""
        app.state.screen = Screen.AUTH
        with pytest.raises(WizardInvariantError):
            app.handle(ESC)


class TestProviderAndModel:
    """Test provider selection, model and key entry."""

    @pytest.mark.unit
    def test_enter_commits_highlighted_provider(self, app: SetupApp) -> None:
        """Test the provider under the cursor is committed on Enter."""
        advance_to(app, Screen.PROVIDER)
        select_item(app, 3)
        app.handle(ENTER)

        assert app.draft.provider == PROVIDERS[3]
        assert app.screen is Screen.MODEL

    @pytest.mark.unit
    def test_changing_provider_resets_model_and_key(self, fake_hooks: FakeHooks) -> None:
        """Test switching providers drops the old model and key."""
        draft = DraftConfig(provider=get_provider("anthropic"), model="claude-x", api_key="sk")
        app = SetupApp(draft, hooks=fake_hooks)
        advance_to(app, Screen.PROVIDER)
        press(app, *[UP] * len(PROVIDERS))
        app.handle(ENTER)  # index 0 is openai

        assert app.draft.provider == get_provider("openai")
        assert app.draft.model == ""
        assert app.draft.api_key is None

    @pytest.mark.unit
    def test_cursor_starts_on_saved_provider(self, fake_hooks: FakeHooks) -> None:
        """Test entering Provider forward puts the cursor on the saved choice."""
        anthropic = get_provider("anthropic")
        app = SetupApp(DraftConfig(provider=anthropic), hooks=fake_hooks)
        advance_to(app, Screen.PROVIDER)

        assert app.menu_index == PROVIDERS.index(anthropic)

    @pytest.mark.unit
    def test_enter_through_saved_config_keeps_provider(self, fake_hooks: FakeHooks) -> None:
        """Test pressing Enter on every screen keeps the saved provider, model and key."""
        anthropic = get_provider("anthropic")
        draft = DraftConfig(provider=anthropic, model="claude-x", api_key="sk-keep")
        app = SetupApp(draft, hooks=fake_hooks)
        press(app, *[ENTER] * 7)

        assert app.screen is Screen.SUMMARY
        assert app.draft.provider == anthropic
        assert app.draft.model == "claude-x"
        assert app.draft.api_key == "sk-keep"

    @pytest.mark.unit
    def test_back_into_provider_starts_at_top(self, fake_hooks: FakeHooks) -> None:
        """Test Esc into Provider resets the cursor to the first row."""
        app = SetupApp(DraftConfig(provider=get_provider("anthropic")), hooks=fake_hooks)
        advance_to(app, Screen.MODEL)
        app.handle(ESC)

        assert app.screen is Screen.PROVIDER
        assert app.menu_index == 0

    @pytest.mark.unit
    def test_same_provider_keeps_model_and_key(self, fake_hooks: FakeHooks) -> None:
        """Test re-selecting the saved provider keeps its settings."""
        draft = DraftConfig(provider=PROVIDERS[0], model="gpt-4o", api_key="sk")
        app = SetupApp(draft, hooks=fake_hooks)
        advance_to(app, Screen.AUTH)

        assert app.draft.model == "gpt-4o"
        assert app.draft.api_key == "sk"

    @pytest.mark.unit
    def test_typed_model_is_committed(self, app: SetupApp) -> None:
        """Test text typed on the Model screen becomes the model."""
        advance_to(app, Screen.MODEL)
        type_text(app, "gpt-4oo")
        app.handle(BACKSPACE)
        app.handle(ENTER)

        assert app.draft.model == "gpt-4o"
        assert app.screen is Screen.AUTH

    @pytest.mark.unit
    def test_space_is_not_typed_into_model(self, app: SetupApp) -> None:
        """Test Space does not end up in the model name."""
        advance_to(app, Screen.MODEL)
        press(app, KeyPress.of("a"), SPACE, KeyPress.of("b"))
        assert app.state.pending_text == "ab"

    @pytest.mark.unit
    def test_typed_api_key_is_committed(self, app: SetupApp) -> None:
        """Test a typed key is stored on Enter."""
        advance_to(app, Screen.AUTH)
        type_text(app, "sk-test")
        app.handle(ENTER)

        assert app.draft.api_key == "sk-test"
        assert app.screen is Screen.STYLE

    @pytest.mark.unit
    def test_empty_api_key_keeps_stored_key(self, fake_hooks: FakeHooks) -> None:
        """Test pressing Enter without typing keeps the existing key."""
        app = SetupApp(DraftConfig(provider=PROVIDERS[0], api_key="sk-old"), hooks=fake_hooks)
        advance_to(app, Screen.STYLE)
        assert app.draft.api_key == "sk-old"

    @pytest.mark.unit
    def test_local_provider_ignores_key_input(self, app: SetupApp) -> None:
        """Test key entry is disabled for providers without API keys."""
        advance_to(app, Screen.PROVIDER)
        index = next(i for i, p in enumerate(PROVIDERS) if not p.requires_api_key)
        select_item(app, index)
        press(app, ENTER, ENTER)
        type_text(app, "abc")
        app.handle(ENTER)

        assert app.draft.api_key is None

    @pytest.mark.unit
    def test_text_cleared_on_return(self, app: SetupApp) -> None:
        """Test leaving and re-entering the Model screen clears typed text."""
        advance_to(app, Screen.MODEL)
        type_text(app, "abc")
        press(app, ENTER, ESC)

        assert app.screen is Screen.MODEL
        assert app.state.pending_text == ""
        assert app.draft.model == "abc"


class TestStyle:
    """Test the commit style screen."""

    @pytest.mark.unit
    def test_space_selects_radio_item(self, app: SetupApp) -> None:
        """Test Space on GitMoji selects it."""
        advance_to(app, Screen.STYLE)
        select_item(app, 1)
        app.handle(SPACE)
        assert app.draft.commit_style is CommitStyle.GITMOJI

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "index", [i for i, item in enumerate(STYLE_ITEMS) if item.kind is ItemKind.TOGGLE]
    )
    def test_space_flips_exactly_one_boolean(self, app: SetupApp, index: int) -> None:
        """Test Space on a toggle changes that field only."""
        advance_to(app, Screen.STYLE)
        select_item(app, index)
        field = STYLE_ITEMS[index].field
        before = app.draft.snapshot()

        app.handle(SPACE)

        after = app.draft.snapshot()
        assert after[field] is (not before[field])
        assert {k: v for k, v in after.items() if k != field} == {
            k: v for k, v in before.items() if k != field
        }


class TestHooks:
    """Test the git hooks screen."""

    @pytest.mark.unit
    def test_status_refreshed_on_entry(self) -> None:
        """Test the hook status snapshot is taken when the screen opens."""
        hooks = FakeHooks(installed=[COMMIT_MSG])
        app = SetupApp(hooks=hooks)
        advance_to(app, Screen.HOOKS)

        assert app.state.hook_status == {PREPARE_COMMIT_MSG: False, COMMIT_MSG: True}

    @pytest.mark.unit
    def test_space_installs_prepare_commit_msg(self, app: SetupApp, fake_hooks: FakeHooks) -> None:
        """Test Space on the first hook item installs it."""
        advance_to(app, Screen.HOOKS)
        app.handle(SPACE)

        assert fake_hooks.hook_exists(PREPARE_COMMIT_MSG)
        assert app.state.hook_status[PREPARE_COMMIT_MSG] is True
        assert app.state.notice == f"{PREPARE_COMMIT_MSG} hook installed"

    @pytest.mark.unit
    def test_space_again_uninstalls(self, app: SetupApp, fake_hooks: FakeHooks) -> None:
        """Test Space on an installed hook removes it."""
        advance_to(app, Screen.HOOKS)
        press(app, SPACE, SPACE)

        assert not fake_hooks.hook_exists(PREPARE_COMMIT_MSG)
        assert app.state.hook_status[PREPARE_COMMIT_MSG] is False

    @pytest.mark.unit
    def test_uninstall_all(self) -> None:
        """Test the uninstall action removes every hook."""
        hooks = FakeHooks(installed=[PREPARE_COMMIT_MSG, COMMIT_MSG])
        app = SetupApp(hooks=hooks)
        advance_to(app, Screen.HOOKS)
        select_item(app, 2)
        app.handle(SPACE)

        assert hooks.installed == set()
        assert app.state.hook_status == {PREPARE_COMMIT_MSG: False, COMMIT_MSG: False}
        assert "Uninstalled hooks" in (app.state.notice or "")

    @pytest.mark.unit
    def test_hook_error_becomes_notice(self) -> None:
        """Test hook failures are shown instead of crashing the wizard."""
        app = SetupApp(hooks=FakeHooks(error="Not a git repository"))
        advance_to(app, Screen.HOOKS)

        assert app.handle(SPACE) is HandleResult.CONTINUE
        assert app.state.notice == "Not a git repository"
        assert app.screen is Screen.HOOKS

    @pytest.mark.unit
    def test_strict_mode_toggle(self, app: SetupApp) -> None:
        """Test the strict mode item toggles the draft field."""
        advance_to(app, Screen.HOOKS)
        select_item(app, 3)
        app.handle(SPACE)
        assert app.draft.hook_strict is False

    @pytest.mark.unit
    def test_tick_refreshes_status_on_hooks(self, app: SetupApp, fake_hooks: FakeHooks) -> None:
        """Test ticks pick up hooks installed outside the wizard."""
        advance_to(app, Screen.HOOKS)
        fake_hooks.installed.add(COMMIT_MSG)

        assert app.handle(Tick()) is HandleResult.CONTINUE
        assert app.state.hook_status[COMMIT_MSG] is True
        assert app.screen is Screen.HOOKS

    @pytest.mark.unit
    @pytest.mark.parametrize("screen", SCREEN_ORDER)
    def test_tick_never_changes_screen_or_draft(self, app: SetupApp, screen: Screen) -> None:
        """Test ticks leave navigation and committed values alone."""
        advance_to(app, screen)
        before = app.draft.snapshot()
        for _ in range(3):
            assert app.handle(Tick()) is HandleResult.CONTINUE
        assert app.screen is screen
        assert app.draft.snapshot() == before


class TestSettings:
    """Test the advanced settings screen."""

    @staticmethod
    def index_of(field: str) -> int:
        return next(i for i, item in enumerate(SETTINGS_ITEMS) if item.field == field)

    @pytest.mark.unit
    def test_emoji_toggle_survives_esc_and_return(self, app: SetupApp) -> None:
        """Test a toggled setting is kept when leaving and re-entering."""
        advance_to(app, Screen.SETTINGS)
        app.handle(SPACE)
        assert app.draft.emoji is True

        press(app, ESC, ENTER)
        assert app.screen is Screen.SETTINGS
        assert app.draft.emoji is True

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "index", [i for i, item in enumerate(SETTINGS_ITEMS) if item.kind is ItemKind.TOGGLE]
    )
    def test_space_flips_exactly_one_boolean(self, app: SetupApp, index: int) -> None:
        """Test Space on a settings toggle changes that field only."""
        advance_to(app, Screen.SETTINGS)
        select_item(app, index)
        field = SETTINGS_ITEMS[index].field
        before = app.draft.snapshot()

        app.handle(SPACE)

        after = app.draft.snapshot()
        changed = {k for k in after if after[k] != before[k]}
        assert changed == {field}

    @pytest.mark.unit
    def test_digits_edit_number_in_place(self, app: SetupApp) -> None:
        """Test typing digits replaces the value immediately."""
        advance_to(app, Screen.SETTINGS)
        select_item(app, self.index_of("description_max_length"))
        type_text(app, "250")

        assert app.draft.description_max_length == 250
        assert app.state.pending_text == "250"

    @pytest.mark.unit
    def test_number_clamped_to_range(self, app: SetupApp) -> None:
        """Test values outside the allowed range are clamped."""
        advance_to(app, Screen.SETTINGS)
        select_item(app, self.index_of("description_max_length"))
        type_text(app, "9")
        assert app.draft.description_max_length == 10

        type_text(app, "99")
        assert app.draft.description_max_length == 500

    @pytest.mark.unit
    def test_number_buffer_limited_to_max_digits(self, app: SetupApp) -> None:
        """Test extra digits beyond the maximum's width are ignored."""
        advance_to(app, Screen.SETTINGS)
        select_item(app, self.index_of("generate_count"))
        type_text(app, "345")

        assert app.state.pending_text == "34"
        assert app.draft.generate_count == 10

    @pytest.mark.unit
    def test_backspace_removes_digit(self, app: SetupApp) -> None:
        """Test Backspace edits the number being typed."""
        advance_to(app, Screen.SETTINGS)
        select_item(app, self.index_of("history_commits_count"))
        type_text(app, "123")
        app.handle(BACKSPACE)

        assert app.draft.history_commits_count == 12
        assert app.state.pending_text == "12"

    @pytest.mark.unit
    def test_moving_ends_numeric_edit(self, app: SetupApp) -> None:
        """Test leaving an item starts a fresh buffer next time."""
        advance_to(app, Screen.SETTINGS)
        index = self.index_of("history_commits_count")
        select_item(app, index)
        type_text(app, "12")
        press(app, DOWN, UP)
        assert app.state.pending_text is None

        type_text(app, "7")
        assert app.draft.history_commits_count == 7

    @pytest.mark.unit
    def test_letters_do_not_edit_numbers(self, app: SetupApp) -> None:
        """Test non-digit text leaves numeric values alone."""
        advance_to(app, Screen.SETTINGS)
        select_item(app, self.index_of("tokens_max_output"))
        type_text(app, "ab")
        assert app.draft.tokens_max_output == 500

    @pytest.mark.unit
    def test_language_cycles(self, app: SetupApp) -> None:
        """Test Space on Language moves to the next language."""
        advance_to(app, Screen.SETTINGS)
        select_item(app, self.index_of("language"))
        app.handle(SPACE)
        assert app.draft.language == "zh"

    @pytest.mark.unit
    def test_unknown_language_resets_to_first(self, fake_hooks: FakeHooks) -> None:
        """Test a language outside the list cycles back to English."""
        app = SetupApp(DraftConfig(language="xx"), hooks=fake_hooks)
        advance_to(app, Screen.SETTINGS)
        select_item(app, self.index_of("language"))
        app.handle(SPACE)
        assert app.draft.language == "en"
