"""Hybrid parsing of LLM provider responses into one uniform AST.

Structured tool-call payloads (OpenAI, Anthropic, schema-less) and tool calls
printed inline as text all come out as the same ``ResponseNode`` tree.

Example:
    >>> from hybrid_parser import parse
    >>> result = parse(raw_response_body)
    >>> for call in result.tool_calls:
    ...     dispatch(call.tool_name, call.arguments)
"""

import logging

from .arguments import parse_arguments, serialize_arguments
from .classifier import Classification, FormatKind, classify
from .context import ParserContext, ProviderHint
from .errors import ExtractionError, FallbackParserError, HybridParserError
from .extractors import (
    AnthropicExtractor,
    BaseExtractor,
    GenericExtractor,
    OpenAIExtractor,
    ResponseBuilder,
    extract_generic,
    get_extractor,
)
from .fallback import EmbeddedJsonParser, PlainTextParser, TextFallbackParser
from .models import (
    ErrorDetail,
    ErrorNode,
    ErrorSeverity,
    Metadata,
    ParserCapabilities,
    ResponseNode,
    TextNode,
    TokenUsage,
    ToolCallNode,
    ToolResultNode,
    ValidationIssue,
    ValidationResult,
    ValidationSeverity,
)
from .orchestrator import HybridParser, parse

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "parse_arguments",
    "serialize_arguments",
    "Classification",
    "FormatKind",
    "classify",
    "ParserContext",
    "ProviderHint",
    "ExtractionError",
    "FallbackParserError",
    "HybridParserError",
    "AnthropicExtractor",
    "BaseExtractor",
    "GenericExtractor",
    "OpenAIExtractor",
    "ResponseBuilder",
    "extract_generic",
    "get_extractor",
    "EmbeddedJsonParser",
    "PlainTextParser",
    "TextFallbackParser",
    "ErrorDetail",
    "ErrorNode",
    "ErrorSeverity",
    "Metadata",
    "ParserCapabilities",
    "ResponseNode",
    "TextNode",
    "TokenUsage",
    "ToolCallNode",
    "ToolResultNode",
    "ValidationIssue",
    "ValidationResult",
    "ValidationSeverity",
    "HybridParser",
    "parse",
]
