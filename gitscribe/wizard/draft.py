"""Draft configuration edited by the setup wizard."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum

from gitscribe.providers import ProviderOption


class CommitStyle(str, Enum):
    """Commit message formats gitscribe can generate."""

    CONVENTIONAL = "conventional"
    GITMOJI = "gitmoji"
    CUSTOM = "custom"

    @property
    def display_name(self) -> str:
        """Label shown in the wizard."""
        names = {
            "conventional": "Conventional Commits (feat:, fix:, docs:, ...)",
            "gitmoji": "GitMoji (✨ feat:, \U0001f41b fix:, \U0001f4dd docs:, ...)",
            "custom": "Custom (no prefix, free-form)",
        }
        return names[self.value]

    @property
    def example(self) -> str:
        """Sample commit subject in this style."""
        examples = {
            "conventional": "feat(auth): Add login functionality",
            "gitmoji": "✨ feat(auth): Add login functionality",
            "custom": "Add login functionality",
        }
        return examples[self.value]


# Language tags offered by the wizard, in cycling order
LANGUAGES: tuple[tuple[str, str], ...] = (
    ("en", "English"),
    ("zh", "Chinese"),
    ("es", "Spanish"),
    ("fr", "French"),
    ("de", "German"),
    ("ja", "Japanese"),
    ("ko", "Korean"),
    ("pt", "Portuguese"),
    ("ru", "Russian"),
)

# Inclusive (min, max) bounds of the numeric settings
NUMERIC_LIMITS: dict[str, tuple[int, int]] = {
    "description_max_length": (10, 500),
    "generate_count": (1, 10),
    "history_commits_count": (1, 1000),
    "hook_timeout_ms": (1000, 600000),
    "tokens_max_input": (256, 1000000),
    "tokens_max_output": (16, 100000),
}


def language_name(tag: str) -> str:
    """Return the display name of a language tag, or the tag itself."""
    for code, name in LANGUAGES:
        if code == tag:
            return name
    return tag


def clamp_setting(name: str, value: int) -> int:
    """Clamp a numeric setting into its allowed range."""
    low, high = NUMERIC_LIMITS[name]
    return max(low, min(high, value))


@dataclass
class DraftConfig:
    """Mutable configuration assembled across the wizard screens.

    Every field has a usable default so any screen can be rendered in any
    order. An empty ``model`` means "use the provider's default model".
    """

    provider: ProviderOption | None = None
    model: str = ""
    api_key: str | None = None

    commit_style: CommitStyle = CommitStyle.CONVENTIONAL
    language: str = "en"

    description_capitalize: bool = True
    description_add_period: bool = False
    emoji: bool = False
    gitpush: bool = False
    enable_commit_body: bool = False
    learn_from_history: bool = False
    clipboard_on_timeout: bool = True
    hook_strict: bool = True

    description_max_length: int = 100
    generate_count: int = 1
    history_commits_count: int = 50
    hook_timeout_ms: int = 30000
    tokens_max_input: int = 4096
    tokens_max_output: int = 500

    @property
    def effective_model(self) -> str:
        """Model that will actually be used."""
        if self.model:
            return self.model
        if self.provider is not None:
            return self.provider.default_model
        return ""

    @property
    def masked_api_key(self) -> str:
        """API key for display: never the key itself."""
        if self.api_key:
            return "*" * 20
        return "Not entered"

    def snapshot(self) -> dict[str, object]:
        """Return a shallow copy of all field values, keyed by field name."""
        return {f.name: getattr(self, f.name) for f in fields(self)}
