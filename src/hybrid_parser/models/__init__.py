"""Data models for parsed LLM responses.

This module provides Pydantic-validated models for:
- ResponseNode: Root of a parsed response
- ToolCallNode / ToolResultNode: Tool invocations and echoed results
- TextNode / ErrorNode: Text segment and in-band errors
- ValidationResult / ParserCapabilities: Validation and feature discovery
"""

from .ast import (
    ErrorDetail,
    ErrorNode,
    ErrorSeverity,
    Metadata,
    ResponseNode,
    TextNode,
    TokenUsage,
    ToolCallNode,
    ToolResultNode,
)
from .validation import (
    ParserCapabilities,
    ValidationIssue,
    ValidationResult,
    ValidationSeverity,
)

__all__ = [
    "ErrorDetail",
    "ErrorNode",
    "ErrorSeverity",
    "Metadata",
    "ResponseNode",
    "TextNode",
    "TokenUsage",
    "ToolCallNode",
    "ToolResultNode",
    "ParserCapabilities",
    "ValidationIssue",
    "ValidationResult",
    "ValidationSeverity",
]
