"""Text fallback parsers for responses without structured markers."""

from .base import TextFallbackParser
from .plain_text import PlainTextParser
from .embedded_json import EmbeddedJsonParser

__all__ = [
    "TextFallbackParser",
    "PlainTextParser",
    "EmbeddedJsonParser",
]
