"""Hybrid parser: structured provider payloads first, text fallback second.

``HybridParser.parse`` is total over strings. Classification, extraction and
fallback failures are all reported inside the returned ``ResponseNode``.
"""

import logging
import time

from hybrid_parser.classifier import Classification, classify
from hybrid_parser.context import ParserContext, ProviderHint
from hybrid_parser.errors import FallbackParserError
from hybrid_parser.extractors import BaseExtractor, IdFactory, get_extractor
from hybrid_parser.fallback import EmbeddedJsonParser, TextFallbackParser
from hybrid_parser.models import (
    ErrorDetail,
    ErrorNode,
    Metadata,
    ParserCapabilities,
    ResponseNode,
    TextNode,
    ValidationIssue,
    ValidationResult,
    ValidationSeverity,
)

logger = logging.getLogger(__name__)

NO_CONTENT_WARNING = "structured payload yielded no content"


class HybridParser:
    """Parses any provider response into a uniform ``ResponseNode``.

    Flow:
        1. Classify the raw text (one JSON decode at most)
        2. Structured input goes to the matching provider extractor
        3. If extraction raises or finds nothing, or the input is free text,
           the text fallback parser produces the result

    Attributes:
        text_parser: Collaborator used for unstructured input.

    Example:
        >>> parser = HybridParser()
        >>> result = parser.parse('{"choices": [{"message": {"content": "hi"}}]}')
        >>> result.text_content
        'hi'
    """

    def __init__(
        self,
        text_parser: TextFallbackParser | None = None,
        id_factory: IdFactory | None = None,
    ):
        """Initialize the parser.

        Args:
            text_parser: Fallback for unstructured input. Defaults to
                ``EmbeddedJsonParser``.
            id_factory: Produces synthesized call ids from a prefix.
        """
        self.text_parser = text_parser or EmbeddedJsonParser(id_factory)
        self._extractors: dict[ProviderHint, BaseExtractor] = {
            hint: get_extractor(hint, id_factory) for hint in ProviderHint
        }

    @property
    def name(self) -> str:
        """Return the parser identifier."""
        return "hybrid-parser"

    def parse(self, raw: str, context: ParserContext | None = None) -> ResponseNode:
        """Parse a complete provider response.

        Args:
            raw: Response body, already decoded from the transport.
            context: Optional provider knowledge used by the classifier.

        Returns:
            ResponseNode; never raises for string input.

        Raises:
            TypeError: If ``raw`` is not a string.
        """
        if not isinstance(raw, str):
            raise TypeError(f"raw response must be str, got {type(raw).__name__}")

        start_time = time.perf_counter()

        if not raw.strip():
            result = ResponseNode(
                metadata=Metadata(provider="hybrid", finish_reason="empty_input")
            )
        else:
            result = self._parse(raw, context)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        return result.with_metadata(parse_time_ms=elapsed_ms)

    def parse_multiple(
        self, texts: list[str], context: ParserContext | None = None
    ) -> list[ResponseNode]:
        """Parse multiple responses in batch."""
        return [self.parse(text, context) for text in texts]

    def _parse(self, raw: str, context: ParserContext | None) -> ResponseNode:
        try:
            classification = classify(raw, context)
        except Exception as e:
            logger.warning("Classification failed, treating input as text: %s", e)
            classification = Classification.unstructured()

        if not classification.is_structured:
            logger.debug("No structured markers found, using %s", self.text_parser.name)
            return self._fallback(raw, ())

        extractor = self._extractors[classification.provider]
        logger.debug("Detected structured %s payload", classification.provider.value)

        try:
            result = extractor.extract(classification.payload)
        except Exception as e:
            logger.warning(
                "%s extraction failed, falling back to %s: %s",
                extractor.name, self.text_parser.name, e,
            )
            return self._fallback(raw, (f"structured extraction failed: {e}",))

        if not result.has_content:
            logger.warning(
                "%s payload yielded no content, falling back to %s",
                extractor.name, self.text_parser.name,
            )
            # Keep what the extractor dropped on the way
            return self._fallback(raw, result.metadata.warnings + (NO_CONTENT_WARNING,))

        return result

    def _fallback(self, raw: str, failures: tuple[str, ...]) -> ResponseNode:
        """Run the text parser, adopting its AST as the result."""
        try:
            result = self.text_parser.parse_unstructured(raw)
            if not isinstance(result, ResponseNode):
                raise TypeError(
                    f"expected ResponseNode, got {type(result).__name__}"
                )
        except Exception as e:
            error = FallbackParserError(self.text_parser.name, e)
            logger.error("Text fallback parsing also failed", exc_info=True)
            return self._error_response(error, raw, failures)

        if failures:
            result = result.with_metadata(warnings=result.metadata.warnings + failures)
        return result

    def _error_response(
        self, error: FallbackParserError, raw: str, failures: tuple[str, ...]
    ) -> ResponseNode:
        """Last resort when even the fallback parser broke its contract."""
        return ResponseNode(
            text=TextNode(content=raw),
            errors=(
                ErrorNode(
                    message=f"Failed to parse LLM response: {error}",
                    error_code=type(error.cause).__name__,
                    detail=ErrorDetail(message=str(error), raw_input=raw),
                ),
            ),
            metadata=Metadata(
                provider="unknown",
                warnings=failures + (f"Parsing failed: {error}",),
            ),
        )

    def validate(self, ast: ResponseNode) -> ValidationResult:
        """Check a parsed AST for duplicate call ids and argument errors.

        Tool results are not matched against tool calls; that pairing spans
        conversation turns.
        """
        issues: list[ValidationIssue] = []

        seen: set[str] = set()
        reported: set[str] = set()
        for call in ast.tool_calls:
            if call.call_id in seen and call.call_id not in reported:
                reported.add(call.call_id)
                issues.append(ValidationIssue(
                    message=f"Duplicate tool call ID: {call.call_id}",
                    severity=ValidationSeverity.ERROR,
                    call_id=call.call_id,
                ))
            seen.add(call.call_id)

        for call in ast.tool_calls:
            if call.parse_error is not None:
                issues.append(ValidationIssue(
                    message=f"Tool call parsing error: {call.parse_error.message}",
                    severity=ValidationSeverity.ERROR,
                    call_id=call.call_id,
                ))

        return ValidationResult.from_issues(issues)

    def capabilities(self) -> ParserCapabilities:
        """Get parser capabilities and supported formats."""
        formats = list(self.text_parser.supported_formats)
        formats.extend(extractor.name for extractor in self._extractors.values())
        return ParserCapabilities(
            supports_streaming=False,
            supports_tool_calls=True,
            supported_formats=formats,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(text_parser={self.text_parser!r})"


def parse(raw: str, context: ParserContext | None = None) -> ResponseNode:
    """Parse ``raw`` with a default ``HybridParser``."""
    return HybridParser().parse(raw, context)
