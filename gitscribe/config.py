"""Configuration management for gitscribe.

The configuration lives in a single YAML file:

    $GITSCRIBE_CONFIG_HOME/config.yaml   (when the variable is set)
    ~/.config/gitscribe/config.yaml      (otherwise)

The API key is stored in the system keychain when one is available and only
written to the file as a fallback.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from rich.console import Console

from gitscribe.cli.formatting import format_warning
from gitscribe.credentials import CredentialStore, CredentialType
from gitscribe.errors import ConfigError
from gitscribe.providers import get_provider
from gitscribe.wizard.draft import NUMERIC_LIMITS, CommitStyle, DraftConfig

logger = logging.getLogger(__name__)
console = Console()

CONFIG_VERSION = "1.0"
CONFIG_FILENAME = "config.yaml"


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        $GITSCRIBE_CONFIG_HOME if set, else ~/.config/gitscribe.
    """
    config_home = os.environ.get("GITSCRIBE_CONFIG_HOME")
    if config_home:
        return Path(config_home)
    return Path.home() / ".config" / "gitscribe"


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    return get_config_dir() / CONFIG_FILENAME


def _limits(name: str) -> dict[str, int]:
    low, high = NUMERIC_LIMITS[name]
    return {"ge": low, "le": high}


class GitscribeConfig(BaseModel):
    """Schema of the persisted configuration file.

    Example:
        version: "1.0"
        ai_provider: openai
        model: gpt-4o-mini
        commit_type: conventional
        language: en
        emoji: false
        hook_timeout_ms: 30000
    """

    version: str = CONFIG_VERSION

    ai_provider: str | None = None
    model: str | None = None
    api_key: str | None = None  # Only set when the keychain is unavailable

    commit_type: CommitStyle = CommitStyle.CONVENTIONAL
    language: str = "en"

    description_capitalize: bool = True
    description_add_period: bool = False
    emoji: bool = False
    gitpush: bool = False
    enable_commit_body: bool = False
    learn_from_history: bool = False
    clipboard_on_timeout: bool = True
    hook_strict: bool = True

    description_max_length: int = Field(100, **_limits("description_max_length"))
    generate_count: int = Field(1, **_limits("generate_count"))
    history_commits_count: int = Field(50, **_limits("history_commits_count"))
    hook_timeout_ms: int = Field(30000, **_limits("hook_timeout_ms"))
    tokens_max_input: int = Field(4096, **_limits("tokens_max_input"))
    tokens_max_output: int = Field(500, **_limits("tokens_max_output"))

    model_config = {"frozen": True}

    @field_validator("commit_type", mode="before")
    @classmethod
    def parse_commit_type(cls, v: Any) -> CommitStyle:
        """Parse commit style from string."""
        if isinstance(v, CommitStyle):
            return v
        if isinstance(v, str):
            try:
                return CommitStyle(v.lower())
            except ValueError:
                valid = [s.value for s in CommitStyle]
                raise ValueError(f"Invalid commit_type '{v}'. Valid: {valid}")
        return CommitStyle(v)

    @field_validator("ai_provider")
    @classmethod
    def validate_provider(cls, v: str | None) -> str | None:
        """Reject providers that are not in the registry."""
        if v is None:
            return v
        if get_provider(v) is None:
            raise ValueError(f"Unknown provider '{v}'")
        return v.lower()

    @classmethod
    def from_yaml(cls, content: str) -> GitscribeConfig:
        """Parse config from YAML string."""
        data = yaml.safe_load(content) or {}
        return cls.model_validate(data)

    def to_yaml(self) -> str:
        """Serialize to YAML, omitting unset optional values."""
        data = self.model_dump(mode="json", exclude_none=True)
        return yaml.dump(data, default_flow_style=False, sort_keys=False)

    @classmethod
    def from_draft(cls, draft: DraftConfig) -> GitscribeConfig:
        """Build the persisted form of a wizard draft (API key excluded)."""
        return cls(
            ai_provider=draft.provider.name if draft.provider else None,
            model=draft.effective_model or None,
            commit_type=draft.commit_style,
            language=draft.language,
            description_capitalize=draft.description_capitalize,
            description_add_period=draft.description_add_period,
            emoji=draft.emoji,
            gitpush=draft.gitpush,
            enable_commit_body=draft.enable_commit_body,
            learn_from_history=draft.learn_from_history,
            clipboard_on_timeout=draft.clipboard_on_timeout,
            hook_strict=draft.hook_strict,
            description_max_length=draft.description_max_length,
            generate_count=draft.generate_count,
            history_commits_count=draft.history_commits_count,
            hook_timeout_ms=draft.hook_timeout_ms,
            tokens_max_input=draft.tokens_max_input,
            tokens_max_output=draft.tokens_max_output,
        )

    def to_draft(self, api_key: str | None = None) -> DraftConfig:
        """Build a wizard draft pre-populated from this config."""
        provider = get_provider(self.ai_provider) if self.ai_provider else None
        model = self.model or ""
        if provider is not None and model == provider.default_model:
            model = ""
        return DraftConfig(
            provider=provider,
            model=model,
            api_key=api_key or self.api_key,
            commit_style=self.commit_type,
            language=self.language,
            description_capitalize=self.description_capitalize,
            description_add_period=self.description_add_period,
            emoji=self.emoji,
            gitpush=self.gitpush,
            enable_commit_body=self.enable_commit_body,
            learn_from_history=self.learn_from_history,
            clipboard_on_timeout=self.clipboard_on_timeout,
            hook_strict=self.hook_strict,
            description_max_length=self.description_max_length,
            generate_count=self.generate_count,
            history_commits_count=self.history_commits_count,
            hook_timeout_ms=self.hook_timeout_ms,
            tokens_max_input=self.tokens_max_input,
            tokens_max_output=self.tokens_max_output,
        )


# Settings that 'gitscribe config' can read and change
SETTING_NAMES: tuple[str, ...] = tuple(
    name for name in GitscribeConfig.model_fields if name != "version"
)


def setting_name(key: str) -> str:
    """Normalize a user-supplied setting key ("Hook-Timeout-MS" -> "hook_timeout_ms").

    Raises:
        ConfigError: If the key is not a known setting
    """
    name = key.strip().lower().replace("-", "_")
    if name not in SETTING_NAMES:
        raise ConfigError(f"Unknown setting '{key}'. Valid: {', '.join(SETTING_NAMES)}")
    return name


def _validation_message(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        problems.append(f"{location}: {item['msg']}")
    return "; ".join(problems)


class ConfigStore:
    """Reads and writes the gitscribe configuration file.

    This is the persistence boundary of the setup wizard: the wizard calls
    ``load_existing`` once before it starts and ``save`` once when the user
    confirms the summary.
    """

    def __init__(
        self,
        path: Path | None = None,
        credentials: CredentialStore | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            path: Config file path (defaults to get_config_path())
            credentials: Keychain access for the API key
        """
        self.path = path or get_config_path()
        self.credentials = credentials or CredentialStore()

    def load(self) -> GitscribeConfig | None:
        """Load the configuration file.

        Returns:
            Parsed config, or None if:
            - File doesn't exist
            - File is not valid YAML or fails validation
            - Config version is incompatible
        """
        if not self.path.exists():
            return None

        try:
            config = GitscribeConfig.from_yaml(self.path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, ValidationError, OSError) as e:
            console.print(
                format_warning(
                    f"Could not load config {self.path}: {e}",
                    "Using defaults. Run 'gitscribe setup' to write a new file.",
                )
            )
            return None

        if config.version != CONFIG_VERSION:
            console.print(
                format_warning(
                    f"Config version {config.version} not supported, ignoring saved config"
                )
            )
            return None

        return config

    def load_existing(self) -> DraftConfig:
        """Return a draft pre-populated from disk, or defaults."""
        config = self.load()
        if config is None:
            logger.debug("No usable config at %s, starting from defaults", self.path)
            return DraftConfig()
        api_key = config.api_key or self.credentials.get(CredentialType.API_KEY)
        return config.to_draft(api_key)

    def save(self, draft: DraftConfig) -> Path:
        """Persist a draft.

        The API key goes to the keychain; if that fails it is written to the
        file instead.

        Returns:
            Path of the written file

        Raises:
            ConfigError: If the file cannot be written
        """
        config = GitscribeConfig.from_draft(draft)

        if draft.api_key:
            if self.credentials.set(CredentialType.API_KEY, draft.api_key):
                logger.debug("Stored API key in keychain")
            else:
                console.print(
                    "[yellow]Warning: Keychain unavailable, "
                    "storing API key in config file[/yellow]",
                    highlight=False,
                )
                config = config.model_copy(update={"api_key": draft.api_key})

        self._write(config)
        return self.path

    def reset(self) -> bool:
        """Delete the config file and the stored API key.

        Returns:
            True if a config file was removed
        """
        self.credentials.delete(CredentialType.API_KEY)
        if not self.path.exists():
            return False
        try:
            self.path.unlink()
        except OSError as e:
            raise ConfigError(f"Could not remove {self.path}: {e}") from e
        return True

    def get_value(self, key: str) -> Any:
        """Return one saved setting (the default when nothing is saved).

        The API key is resolved the same way as on load: file first, then
        the environment or keychain.

        Raises:
            ConfigError: If ``key`` is not a setting
        """
        name = setting_name(key)
        config = self.load() or GitscribeConfig()
        if name == "api_key":
            return config.api_key or self.credentials.get(CredentialType.API_KEY)
        value = getattr(config, name)
        return value.value if isinstance(value, CommitStyle) else value

    def set_values(self, values: dict[str, str]) -> GitscribeConfig:
        """Change settings in the saved file.

        All values are validated together against the config schema, so
        either every change is written or none is. An API key goes to the
        keychain when one is available.

        Args:
            values: Setting names mapped to their new text values

        Returns:
            The configuration as written

        Raises:
            ConfigError: If a key is unknown, a value is invalid or the file
                cannot be written
        """
        updates = {setting_name(key): value for key, value in values.items()}
        current = self.load() or GitscribeConfig()
        api_key = updates.pop("api_key", None)
        if api_key == "":
            raise ConfigError("api_key: must not be empty (use 'config reset api_key')")

        data = current.model_dump(mode="json")
        data.update(updates)
        try:
            config = GitscribeConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(_validation_message(e)) from e

        if api_key is not None:
            if self.credentials.set(CredentialType.API_KEY, api_key):
                logger.debug("Stored API key in keychain")
                config = config.model_copy(update={"api_key": None})
            else:
                console.print(
                    "[yellow]Warning: Keychain unavailable, "
                    "storing API key in config file[/yellow]",
                    highlight=False,
                )
                config = config.model_copy(update={"api_key": api_key})

        self._write(config)
        return config

    def reset_keys(self, keys: list[str]) -> GitscribeConfig:
        """Put individual settings back to their defaults.

        Resetting ``api_key`` also removes it from the keychain.

        Raises:
            ConfigError: If a key is unknown or the file cannot be written
        """
        names = [setting_name(key) for key in keys]
        current = self.load() or GitscribeConfig()
        defaults = {name: GitscribeConfig.model_fields[name].default for name in names}
        if "api_key" in names:
            self.credentials.delete(CredentialType.API_KEY)

        config = current.model_copy(update=defaults)
        self._write(config)
        return config

    def _write(self, config: GitscribeConfig) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(config.to_yaml(), encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not save config to {self.path}: {e}") from e
        logger.debug("Saved config to %s", self.path)
