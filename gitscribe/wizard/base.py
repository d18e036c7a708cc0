"""Base wizard class for the interactive setup wizards."""

from abc import ABC, abstractmethod
from typing import Optional

from gitscribe.wizard.draft import DraftConfig, language_name
from gitscribe.wizard.types import WizardMode


class BaseWizard(ABC):
    """Base class for all wizard implementations.

    Provides common functionality:
    - Configuration validation
    - Summary generation
    """

    def __init__(
        self, mode: WizardMode = WizardMode.PROMPT, draft: Optional[DraftConfig] = None
    ) -> None:
        """Initialize the wizard.

        Args:
            mode: Wizard interaction mode (prompt or TUI).
            draft: Starting configuration, usually the saved one.
        """
        self.mode = mode
        self.config: DraftConfig = draft if draft is not None else DraftConfig()

    @abstractmethod
    def run(self) -> Optional[DraftConfig]:
        """Run the wizard and collect configuration.

        Returns:
            The collected configuration, or None if the user cancelled.
        """
        pass

    def validate_config(self, config: DraftConfig) -> tuple[bool, str]:
        """Validate wizard configuration.

        Args:
            config: Draft configuration to validate.

        Returns:
            Tuple of (is_valid, error_message).
            error_message is empty string if valid.
        """
        if config.provider is None:
            return False, "No AI provider selected"
        if not config.effective_model:
            return False, "No model selected"
        if config.provider.requires_api_key and not config.api_key:
            return False, f"{config.provider.display} requires an API key"
        return True, ""

    def get_summary(self) -> str:
        """Get summary of wizard configuration.

        Returns:
            Human-readable summary of configuration.
        """
        draft = self.config
        if draft.provider is None:
            return "[dim]No configuration collected yet[/dim]"

        lines = ["[bold]Configuration Summary:[/bold]"]
        lines.append(f"  Provider: {draft.provider.display}")
        lines.append(f"  Model: {draft.effective_model}")
        lines.append(f"  API Key: {draft.masked_api_key}")
        lines.append(f"  Commit style: {draft.commit_style.display_name}")
        lines.append(f"  Language: {language_name(draft.language)}")
        return "\n".join(lines)
