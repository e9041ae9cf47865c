"""Provider extractor implementations."""

from hybrid_parser.context import ProviderHint

from .base import BaseExtractor
from .builder import IdFactory, ResponseBuilder, new_call_id
from .openai_extractor import OpenAIExtractor
from .anthropic_extractor import AnthropicExtractor
from .generic_extractor import GenericExtractor, extract_generic

# Closed set: one extractor per provider family
EXTRACTORS: dict[ProviderHint, type[BaseExtractor]] = {
    ProviderHint.OPENAI: OpenAIExtractor,
    ProviderHint.ANTHROPIC: AnthropicExtractor,
    ProviderHint.GENERIC: GenericExtractor,
}


def get_extractor(provider: ProviderHint, id_factory: IdFactory | None = None) -> BaseExtractor:
    """Instantiate the extractor for a provider family."""
    return EXTRACTORS[provider](id_factory)


__all__ = [
    "BaseExtractor",
    "IdFactory",
    "ResponseBuilder",
    "new_call_id",
    "OpenAIExtractor",
    "AnthropicExtractor",
    "GenericExtractor",
    "extract_generic",
    "EXTRACTORS",
    "get_extractor",
]
