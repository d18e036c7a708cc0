"""Registry of AI providers supported by gitscribe.

The registry is ordered: the setup wizard lists providers in this order and
pre-selects the first one, so the most common providers come first.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ProviderCategory(str, Enum):
    """Grouping used when listing providers."""

    POPULAR = "popular"
    LOCAL = "local"
    CLOUD = "cloud"
    ENTERPRISE = "enterprise"
    SPECIALIZED = "specialized"

    @property
    def display_name(self) -> str:
        """Human-readable heading for the category."""
        names = {
            "popular": "Popular Providers",
            "local": "Local/Private",
            "cloud": "Cloud Providers",
            "enterprise": "Enterprise",
            "specialized": "Specialized",
        }
        return names[self.value]


@dataclass(frozen=True)
class ProviderOption:
    """A provider the user can pick during setup.

    Attributes:
        name: Identifier written to the config file (e.g. "openai")
        display: Label shown in the wizard
        default_model: Model used when the user does not pick one
        requires_api_key: Whether the provider needs an API key
        category: Grouping for display
    """

    name: str
    display: str
    default_model: str
    requires_api_key: bool = True
    category: ProviderCategory = ProviderCategory.CLOUD


PROVIDERS: tuple[ProviderOption, ...] = (
    # Popular
    ProviderOption(
        "openai",
        "OpenAI (GPT-4o, GPT-4o-mini)",
        "gpt-4o-mini",
        category=ProviderCategory.POPULAR,
    ),
    ProviderOption(
        "anthropic",
        "Anthropic (Claude Sonnet, Haiku, Opus)",
        "claude-3-5-haiku-20241022",
        category=ProviderCategory.POPULAR,
    ),
    ProviderOption(
        "gemini",
        "Google Gemini (2.5 Flash, 2.5 Pro)",
        "gemini-2.5-flash",
        category=ProviderCategory.POPULAR,
    ),
    # Local / self-hosted
    ProviderOption(
        "ollama",
        "Ollama (Local models - free, private)",
        "llama3.2",
        requires_api_key=False,
        category=ProviderCategory.LOCAL,
    ),
    ProviderOption(
        "lmstudio",
        "LM Studio (Local GUI for LLMs)",
        "local-model",
        requires_api_key=False,
        category=ProviderCategory.LOCAL,
    ),
    ProviderOption(
        "llamacpp",
        "llama.cpp (Local inference)",
        "local-model",
        requires_api_key=False,
        category=ProviderCategory.LOCAL,
    ),
    # Cloud
    ProviderOption("groq", "Groq (Ultra-fast inference)", "llama-3.3-70b-versatile"),
    ProviderOption("cerebras", "Cerebras (Fast inference)", "llama-3.3-70b"),
    ProviderOption("xai", "xAI (Grok)", "grok-2"),
    ProviderOption("deepseek", "DeepSeek (V3, R1 Reasoner)", "deepseek-chat"),
    ProviderOption(
        "openrouter",
        "OpenRouter (Access 100+ models)",
        "anthropic/claude-3.5-haiku",
    ),
    ProviderOption("mistral", "Mistral AI", "mistral-small-latest"),
    ProviderOption("perplexity", "Perplexity", "sonar"),
    ProviderOption(
        "together",
        "Together AI",
        "meta-llama/Llama-3.3-70B-Instruct-Turbo",
    ),
    ProviderOption(
        "fireworks",
        "Fireworks AI",
        "accounts/fireworks/models/llama-v3p3-70b-instruct",
    ),
    # Enterprise
    ProviderOption(
        "azure",
        "Azure OpenAI",
        "gpt-4o",
        category=ProviderCategory.ENTERPRISE,
    ),
    ProviderOption(
        "bedrock",
        "AWS Bedrock",
        "anthropic.claude-3-haiku-20240307-v1:0",
        category=ProviderCategory.ENTERPRISE,
    ),
    ProviderOption(
        "vertex",
        "Google Vertex AI",
        "gemini-2.5-flash-001",
        category=ProviderCategory.ENTERPRISE,
    ),
    ProviderOption(
        "cohere",
        "Cohere (Command R)",
        "command-r",
        category=ProviderCategory.ENTERPRISE,
    ),
    # Specialized
    ProviderOption(
        "helicone",
        "Helicone (Observability proxy)",
        "gpt-4o-mini",
        category=ProviderCategory.SPECIALIZED,
    ),
)


def get_provider(name: str) -> ProviderOption | None:
    """Look up a provider by its identifier (case-insensitive)."""
    wanted = name.lower()
    for provider in PROVIDERS:
        if provider.name == wanted:
            return provider
    return None


def providers_by_category(
    providers: tuple[ProviderOption, ...] = PROVIDERS,
) -> list[tuple[ProviderCategory, list[ProviderOption]]]:
    """Group providers by category, keeping first-seen order.

    Args:
        providers: Providers to group

    Returns:
        List of (category, providers) pairs
    """
    grouped: list[tuple[ProviderCategory, list[ProviderOption]]] = []
    for provider in providers:
        for category, members in grouped:
            if category is provider.category:
                members.append(provider)
                break
        else:
            grouped.append((provider.category, [provider]))
    return grouped
