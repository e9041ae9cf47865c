"""Abstract base class for text fallback parsers."""

from abc import ABC, abstractmethod

from hybrid_parser.models import ResponseNode


class TextFallbackParser(ABC):
    """Contract for parsers that handle responses with no structured markers.

    Implementations must return a ``ResponseNode`` for every string and must
    never raise.

    Example:
        class MyParser(TextFallbackParser):
            @property
            def name(self) -> str:
                return "my-parser"

            def parse_unstructured(self, raw: str) -> ResponseNode:
                # Implementation here
                pass
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this parser.

        Used in capabilities and logging.
        """
        pass

    @property
    def supported_formats(self) -> list[str]:
        return ["text"]

    @abstractmethod
    def parse_unstructured(self, raw: str) -> ResponseNode:
        """Parse free text into a ResponseNode.

        Args:
            raw: Complete response text.

        Returns:
            ResponseNode using the same node shapes as structured parsing.
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"
