"""Identity fallback: the whole input is the text segment."""

from hybrid_parser.fallback.base import TextFallbackParser
from hybrid_parser.models import Metadata, ResponseNode, TextNode


class PlainTextParser(TextFallbackParser):
    """Returns the input verbatim as text with no tool calls."""

    @property
    def name(self) -> str:
        return "plain-text-parser"

    def parse_unstructured(self, raw: str) -> ResponseNode:
        return ResponseNode(
            text=TextNode(content=raw) if raw else None,
            metadata=Metadata(provider="text"),
        )
