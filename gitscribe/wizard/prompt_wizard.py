"""Question-by-question setup wizard for terminals without full-screen support."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, cast

import questionary
from questionary import Choice, Separator, ValidationError, Validator
from rich.console import Console

from gitscribe.cli.formatting import format_error, format_success
from gitscribe.config import ConfigStore
from gitscribe.errors import ConfigError, WizardInvariantError
from gitscribe.providers import PROVIDERS, ProviderOption, providers_by_category
from gitscribe.wizard.base import BaseWizard
from gitscribe.wizard.draft import CommitStyle, DraftConfig
from gitscribe.wizard.types import WizardMode, WizardOutcome

console = Console()


class _Cancelled(Exception):
    """A prompt was dismissed with Ctrl-C or Esc."""


class ApiKeyValidator(Validator):
    """Validator for API keys typed at a password prompt."""

    def validate(self, document: Any) -> None:
        """Reject empty keys and keys containing whitespace.

        Args:
            document: Document containing user input text.

        Raises:
            ValidationError: If the key is empty or contains whitespace.
        """
        text = document.text
        if not text:
            raise ValidationError(message="API key cannot be empty")
        if any(ch.isspace() for ch in text):
            raise ValidationError(
                message="API key cannot contain spaces",
                cursor_position=len(text),
            )


class QuickSetupWizard(BaseWizard):
    """Prompt-based quick setup.

    Covers the essentials only:
    - AI provider (grouped by category)
    - API key, when the provider needs one
    - Commit message style

    Everything else keeps its current value; the full-screen wizard edits
    the remaining settings.
    """

    def __init__(
        self,
        draft: DraftConfig | None = None,
        providers: tuple[ProviderOption, ...] = PROVIDERS,
    ) -> None:
        """Initialize quick setup.

        Args:
            draft: Starting configuration, usually the saved one.
            providers: Providers offered in the provider prompt.
        """
        super().__init__(mode=WizardMode.PROMPT, draft=draft)
        self.providers = providers

    def run(self) -> DraftConfig | None:
        """Run the prompts.

        Returns:
            The updated configuration, or None if the user cancelled.
        """
        console.print("\n[bold cyan]gitscribe quick setup[/bold cyan]")
        console.print("[dim]Press Ctrl-C to cancel at any time[/dim]\n")

        try:
            draft = self.config
            provider = self._prompt_provider()
            if draft.provider is None or draft.provider.name != provider.name:
                draft = replace(draft, provider=provider, model="", api_key=None)
            if provider.requires_api_key:
                draft = replace(draft, api_key=self._prompt_api_key(draft))
            draft = replace(draft, commit_style=self._prompt_commit_style())
            self.config = draft

            console.print()
            console.print(self.get_summary())
            if not self._confirm("Save this configuration?"):
                raise _Cancelled()
            return self.config

        except (_Cancelled, KeyboardInterrupt):
            console.print("\n[yellow]Setup cancelled by user[/yellow]")
            return None

    def _ask(self, question: Any) -> Any:
        result = question.ask()
        if result is None:
            raise _Cancelled()
        return result

    def _prompt_provider(self) -> ProviderOption:
        """Prompt for the AI provider.

        Returns:
            The selected provider.
        """
        choices: list[Any] = []
        for category, members in providers_by_category(self.providers):
            choices.append(Separator(f"── {category.display_name} ──"))
            for option in members:
                choices.append(
                    Choice(f"{option.display} ({option.default_model})", value=option.name)
                )

        current = self.config.provider
        default = current.name if current else self.providers[0].name
        name = self._ask(questionary.select("AI provider:", choices=choices, default=default))
        return next(option for option in self.providers if option.name == name)

    def _prompt_api_key(self, draft: DraftConfig) -> str:
        """Prompt for the provider's API key, offering to keep a stored one."""
        provider = draft.provider
        if provider is None:
            raise WizardInvariantError("API key requested before a provider was chosen")
        if draft.api_key and self._confirm(f"Keep the stored API key for {provider.display}?"):
            return draft.api_key

        key = self._ask(
            questionary.password(
                f"{provider.display} API key:",
                validate=ApiKeyValidator(),
            )
        )
        return cast(str, key)

    def _prompt_commit_style(self) -> CommitStyle:
        """Prompt for the commit message format."""
        choices = [Choice(style.display_name, value=style.value) for style in CommitStyle]
        value = self._ask(
            questionary.select(
                "Commit message style:",
                choices=choices,
                default=self.config.commit_style.value,
            )
        )
        return CommitStyle(value)

    def _confirm(self, message: str) -> bool:
        return bool(self._ask(questionary.confirm(message, default=True)))


def run_quick_setup(store: ConfigStore | None = None) -> WizardOutcome:
    """Run the prompt wizard and persist the result.

    Args:
        store: Configuration store (defaults to the user config file)

    Returns:
        SAVED, CANCELLED or SAVE_FAILED
    """
    store = store or ConfigStore()
    wizard = QuickSetupWizard(store.load_existing())
    draft = wizard.run()
    if draft is None:
        return WizardOutcome.CANCELLED

    is_valid, error = wizard.validate_config(draft)
    if not is_valid:
        console.print(format_error(error, "Run 'gitscribe setup' to try again."))
        return WizardOutcome.SAVE_FAILED

    try:
        path = store.save(draft)
    except ConfigError as e:
        console.print(format_error(str(e), "Run 'gitscribe setup --no-tui' to try again."))
        return WizardOutcome.SAVE_FAILED

    console.print(format_success("Configuration saved", str(path)))
    return WizardOutcome.SAVED
