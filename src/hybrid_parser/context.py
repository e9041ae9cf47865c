"""Parser context passed alongside a raw response."""

from dataclasses import dataclass
from enum import Enum


class ProviderHint(str, Enum):
    """Closed set of structured provider families."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GENERIC = "generic"


# OpenAI-compatible servers all emit the Chat Completions shape
_PROVIDER_ALIASES: dict[str, ProviderHint] = {
    "openai": ProviderHint.OPENAI,
    "azure": ProviderHint.OPENAI,
    "azure-openai": ProviderHint.OPENAI,
    "azureopenai": ProviderHint.OPENAI,
    "cerebras": ProviderHint.OPENAI,
    "ollama": ProviderHint.OPENAI,
    "vllm": ProviderHint.OPENAI,
    "groq": ProviderHint.OPENAI,
    "together": ProviderHint.OPENAI,
    "fireworks": ProviderHint.OPENAI,
    "anthropic": ProviderHint.ANTHROPIC,
    "claude": ProviderHint.ANTHROPIC,
    "generic": ProviderHint.GENERIC,
}


@dataclass
class ParserContext:
    """Optional knowledge about where a response came from.

    Used only to break ties in format classification.

    Attributes:
        model_provider: Provider name, e.g. "openai", "anthropic", "ollama".
        model_name: Model name, e.g. "gpt-4o" or "claude-3-5-sonnet".
        strict_mode: Only classify on the primary provider markers.
    """
    model_provider: str = ""
    model_name: str = ""
    strict_mode: bool = False

    @property
    def provider_hint(self) -> ProviderHint | None:
        """Map the provider (or, failing that, the model name) to a family."""
        provider = self.model_provider.strip().lower()
        if provider in _PROVIDER_ALIASES:
            return _PROVIDER_ALIASES[provider]

        model = self.model_name.strip().lower()
        if model.startswith("claude"):
            return ProviderHint.ANTHROPIC
        if model.startswith(("gpt", "o1", "o3")):
            return ProviderHint.OPENAI
        return None
