"""Abstract base class for provider extractors."""

from abc import ABC, abstractmethod
from typing import Any

from hybrid_parser.context import ProviderHint
from hybrid_parser.errors import ExtractionError
from hybrid_parser.extractors.builder import IdFactory, ResponseBuilder
from hybrid_parser.extractors.json_utils import load_json
from hybrid_parser.models import ResponseNode


class BaseExtractor(ABC):
    """Base class that all provider extractors inherit from.

    An extractor knows exactly one provider wire shape. It receives either the
    raw response text or the already-decoded JSON value (so the classifier's
    parse can be reused) and walks it into a ``ResponseNode``.

    Example:
        class MyExtractor(BaseExtractor):
            provider = ProviderHint.GENERIC

            def extract_into(self, payload, builder):
                builder.add_text(payload.get("text"))
    """

    provider: ProviderHint

    def __init__(self, id_factory: IdFactory | None = None):
        self._id_factory = id_factory

    @property
    def name(self) -> str:
        """Identifier used in capabilities and logging."""
        return f"structured-{self.provider.value}"

    def new_builder(self, provider: str | None = None) -> ResponseBuilder:
        return ResponseBuilder(provider or self.provider.value, self._id_factory)

    def extract(self, payload: Any) -> ResponseNode:
        """Extract a ResponseNode from raw text or a decoded JSON value.

        Args:
            payload: Raw response text, or the decoded JSON object/array.

        Returns:
            ResponseNode populated from whatever fields were recognised.

        Raises:
            ExtractionError: If ``payload`` is not valid JSON or is not a
                JSON object or array.
        """
        if isinstance(payload, str):
            payload = load_json(payload)
        if not isinstance(payload, (dict, list)):
            raise ExtractionError(
                f"{self.name} expects a JSON object or array, got {type(payload).__name__}"
            )

        builder = self.new_builder()
        self.extract_into(payload, builder)
        return builder.build()

    @abstractmethod
    def extract_into(self, payload: dict[str, Any] | list[Any], builder: ResponseBuilder) -> None:
        """Walk ``payload`` and add everything recognised to ``builder``."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"
