"""AST node models for parsed LLM responses.

Every parse produces exactly one ``ResponseNode``. Structured provider payloads
and text-derived tool calls populate the same node types, so downstream code
(tool dispatch, conversation history, UI rendering) never needs to know which
provider produced a response.

Key features:
- Frozen Pydantic models; sequences are tuples so a parsed tree is immutable
- Raw argument payloads always travel with either the parsed mapping or the error
- OpenAI Chat Completions compatible re-serialization of tool calls
"""

import json
from enum import Enum
from typing import Annotated, Any, Self

from pydantic import BaseModel, BeforeValidator, Field, field_validator, model_validator


def escape_surrogates(value: Any) -> Any:
    """Replace lone UTF-16 surrogates (e.g. from a ``"\\ud800"`` JSON escape)
    with their ``\\uXXXX`` spelling; pydantic rejects them as invalid unicode
    once a constraint or validator is attached to the field.

    Raw payload fields (``raw_arguments``, ``raw_input``) stay plain ``str``
    and are never rewritten.
    """
    if isinstance(value, str) and any("\ud800" <= ch <= "\udfff" for ch in value):
        return "".join(
            f"\\u{ord(ch):04x}" if "\ud800" <= ch <= "\udfff" else ch for ch in value
        )
    return value


SafeStr = Annotated[str, BeforeValidator(escape_surrogates)]


class ErrorSeverity(str, Enum):
    """Severity attached to an in-band ``ErrorNode``."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorDetail(BaseModel):
    """A recoverable parse failure together with the text that caused it.

    Attributes:
        message: Short description of the failure.
        raw_input: The original, unmodified text that could not be parsed.
    """

    message: SafeStr
    raw_input: str

    model_config = {"frozen": True}


class TokenUsage(BaseModel):
    """Token accounting reported by the provider."""

    input: int = Field(default=0, ge=0)
    output: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


class Metadata(BaseModel):
    """Descriptive information about a response.

    Nothing in here drives control flow inside the parser.

    Attributes:
        provider: Which path produced the AST ("openai", "anthropic", "generic",
            "text", "hybrid" or "unknown").
        model: Model name reported by the provider.
        finish_reason: Provider finish/stop reason, verbatim.
        token_usage: Token counts when the provider reported them.
        warnings: Recovered problems (folded extractor errors, dropped candidates).
        parse_time_ms: Wall time spent in the parse call.
    """

    provider: SafeStr = ""
    model: SafeStr | None = None
    finish_reason: SafeStr | None = None
    token_usage: TokenUsage | None = None
    warnings: tuple[SafeStr, ...] = ()
    parse_time_ms: float = Field(default=0.0, ge=0.0)

    model_config = {"frozen": True}

    @property
    def is_complete(self) -> bool:
        """Return False when the provider stopped on the length limit."""
        return self.finish_reason != "length"


class TextNode(BaseModel):
    """Plain text segment of a response."""

    content: SafeStr
    format: str = "plain"

    model_config = {"frozen": True}


class ToolCallNode(BaseModel):
    """A single tool invocation requested by the model.

    ``raw_arguments`` is always kept verbatim. Exactly one of
    ``parsed_arguments`` and ``parse_error`` is set; an empty payload counts as
    a call with no arguments.

    Example:
        >>> node = ToolCallNode(call_id="call_1", tool_name="search",
        ...                     raw_arguments='{"q": "x"}', parsed_arguments={"q": "x"})
        >>> node.is_complete
        True
    """

    call_id: SafeStr = Field(..., min_length=1)
    tool_name: SafeStr = Field(..., min_length=1)
    raw_arguments: str = ""
    parsed_arguments: dict[SafeStr, Any] | None = None
    parse_error: ErrorDetail | None = None

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def default_empty_arguments(cls, data: Any) -> Any:
        """Treat a missing/blank payload without an error as ``{}``."""
        if isinstance(data, dict):
            raw = data.get("raw_arguments") or ""
            if (
                isinstance(raw, str)
                and not raw.strip()
                and data.get("parsed_arguments") is None
                and data.get("parse_error") is None
            ):
                data = {**data, "parsed_arguments": {}}
        return data

    @field_validator("tool_name")
    @classmethod
    def validate_tool_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Tool name cannot be empty")
        return v

    @model_validator(mode="after")
    def validate_argument_outcome(self) -> Self:
        """Exactly one of parsed_arguments / parse_error must be present."""
        if (self.parsed_arguments is None) == (self.parse_error is None):
            raise ValueError(
                "ToolCallNode needs exactly one of parsed_arguments or parse_error"
            )
        return self

    @property
    def arguments(self) -> dict[str, Any]:
        """Parsed arguments, or an empty dict when parsing failed."""
        return self.parsed_arguments if self.parsed_arguments is not None else {}

    @property
    def is_complete(self) -> bool:
        return self.parse_error is None

    def to_openai_format(self) -> dict[str, Any]:
        """Convert to an OpenAI Chat Completions ``tool_calls[]`` entry.

        Failed payloads are re-emitted verbatim so nothing is lost.
        """
        if self.parsed_arguments is not None:
            arguments = json.dumps(self.parsed_arguments)
        else:
            arguments = self.raw_arguments
        return {
            "id": self.call_id,
            "type": "function",
            "function": {
                "name": self.tool_name,
                "arguments": arguments,
            },
        }


class ToolResultNode(BaseModel):
    """A prior tool execution echoed back in a provider payload.

    ``call_id`` is expected to reference a ``ToolCallNode`` from an earlier
    turn; the parser does not check that it does.
    """

    call_id: SafeStr = ""
    tool_name: SafeStr | None = None
    result: Any = None
    is_success: bool = True
    error_message: SafeStr | None = None

    model_config = {"frozen": True}


class ErrorNode(BaseModel):
    """An error reported in-band instead of being raised."""

    message: SafeStr
    severity: ErrorSeverity = ErrorSeverity.ERROR
    error_code: str | None = None
    detail: ErrorDetail | None = None

    model_config = {"frozen": True}


class ResponseNode(BaseModel):
    """Root of one parse: text, tool calls, tool results and metadata.

    Attributes:
        text: The response's text segment, if any.
        tool_calls: Tool calls in provider order.
        tool_results: Tool results echoed by the provider, in order.
        errors: In-band error nodes.
        metadata: Descriptive response metadata.
    """

    text: TextNode | None = None
    tool_calls: tuple[ToolCallNode, ...] = ()
    tool_results: tuple[ToolResultNode, ...] = ()
    errors: tuple[ErrorNode, ...] = ()
    metadata: Metadata = Field(default_factory=Metadata)

    model_config = {"frozen": True}

    @property
    def text_content(self) -> str | None:
        """The text segment as a plain string."""
        return self.text.content if self.text is not None else None

    @property
    def num_calls(self) -> int:
        return len(self.tool_calls)

    @property
    def has_tool_calls(self) -> bool:
        return len(self.tool_calls) > 0

    @property
    def has_content(self) -> bool:
        """Whether the response carries any text, tool call or tool result."""
        return bool(self.text_content) or self.has_tool_calls or bool(self.tool_results)

    def get_call_names(self) -> list[str]:
        """Get list of all tool names called."""
        return [call.tool_name for call in self.tool_calls]

    def get_tool_call(self, call_id: str) -> ToolCallNode | None:
        for call in self.tool_calls:
            if call.call_id == call_id:
                return call
        return None

    def to_openai_format(self) -> list[dict[str, Any]]:
        """Convert all tool calls to OpenAI API format."""
        return [call.to_openai_format() for call in self.tool_calls]

    def with_metadata(self, **updates: Any) -> "ResponseNode":
        """Return a copy whose metadata has the given fields replaced."""
        return self.model_copy(
            update={"metadata": self.metadata.model_copy(update=updates)}
        )
