"""Tests for AST models."""

import pytest
from pydantic import ValidationError

from hybrid_parser.models import (
    ErrorDetail,
    Metadata,
    ResponseNode,
    TextNode,
    ToolCallNode,
    ToolResultNode,
    ValidationIssue,
    ValidationResult,
    ValidationSeverity,
)


class TestToolCallNode:
    """Tests for ToolCallNode model."""

    def test_create_minimal(self):
        """Test creating a ToolCallNode with no arguments."""
        call = ToolCallNode(call_id="call_1", tool_name="test_func")
        assert call.tool_name == "test_func"
        assert call.raw_arguments == ""
        assert call.parsed_arguments == {}
        assert call.parse_error is None

    def test_create_with_all_fields(self):
        """Test creating a ToolCallNode with parsed arguments."""
        call = ToolCallNode(
            call_id="call_123",
            tool_name="get_weather",
            raw_arguments='{"location": "NYC", "unit": "celsius"}',
            parsed_arguments={"location": "NYC", "unit": "celsius"},
        )
        assert call.call_id == "call_123"
        assert call.arguments["location"] == "NYC"
        assert call.is_complete

    def test_create_with_error(self):
        """Test a node that carries a parse error instead of arguments."""
        error = ErrorDetail(message="bad", raw_input="{oops")
        call = ToolCallNode(
            call_id="call_1", tool_name="f", raw_arguments="{oops", parse_error=error
        )
        assert call.parsed_arguments is None
        assert call.arguments == {}
        assert not call.is_complete

    def test_both_outcomes_rejected(self):
        """Test that arguments and an error cannot both be set."""
        with pytest.raises(ValidationError):
            ToolCallNode(
                call_id="c",
                tool_name="f",
                raw_arguments="{}",
                parsed_arguments={},
                parse_error=ErrorDetail(message="x", raw_input="{}"),
            )

    def test_neither_outcome_rejected_for_nonempty_payload(self):
        """Test that a non-empty payload needs an outcome."""
        with pytest.raises(ValidationError):
            ToolCallNode(call_id="c", tool_name="f", raw_arguments='{"a": 1}')

    def test_missing_name_raises(self):
        """Test that missing or blank name raises validation error."""
        with pytest.raises(ValidationError):
            ToolCallNode(call_id="c")
        with pytest.raises(ValidationError):
            ToolCallNode(call_id="c", tool_name="   ")

    def test_empty_call_id_raises(self):
        with pytest.raises(ValidationError):
            ToolCallNode(call_id="", tool_name="f")

    def test_frozen(self):
        """Test nodes cannot be mutated after construction."""
        call = ToolCallNode(call_id="c", tool_name="f")
        with pytest.raises(ValidationError):
            call.tool_name = "g"

    def test_lone_surrogates_escaped(self):
        """Test strings with lone surrogates are accepted."""
        call = ToolCallNode(
            call_id="c\ud800", tool_name="f", parsed_arguments={"k\udfff": 1},
        )
        assert call.call_id == "c\\ud800"
        assert call.parsed_arguments == {"k\\udfff": 1}

    def test_raw_fields_not_rewritten(self):
        """Test raw payloads keep lone surrogates untouched."""
        raw = '{"q": "\ud800"'
        call = ToolCallNode(
            call_id="c",
            tool_name="f",
            raw_arguments=raw,
            parse_error=ErrorDetail(message="bad \ud800", raw_input=raw),
        )
        assert call.raw_arguments == raw
        assert call.parse_error.raw_input == raw
        assert call.parse_error.message == "bad \\ud800"
        assert call.to_openai_format()["function"]["arguments"] == raw

    def test_to_openai_format(self):
        """Test conversion to OpenAI tool_calls format."""
        call = ToolCallNode(
            call_id="call_1",
            tool_name="search",
            raw_arguments='{"query": "test"}',
            parsed_arguments={"query": "test"},
        )
        assert call.to_openai_format() == {
            "id": "call_1",
            "type": "function",
            "function": {"name": "search", "arguments": '{"query": "test"}'},
        }

    def test_to_openai_format_keeps_raw_on_error(self):
        """Test failed payloads are re-emitted verbatim."""
        call = ToolCallNode(
            call_id="c",
            tool_name="f",
            raw_arguments="{ invalid json",
            parse_error=ErrorDetail(message="x", raw_input="{ invalid json"),
        )
        assert call.to_openai_format()["function"]["arguments"] == "{ invalid json"


class TestResponseNode:
    """Tests for ResponseNode model."""

    def test_empty(self):
        """Test an empty response."""
        result = ResponseNode()
        assert result.text_content is None
        assert result.num_calls == 0
        assert not result.has_tool_calls
        assert not result.has_content

    def test_with_calls(self):
        """Test a response with text and tool calls."""
        result = ResponseNode(
            text=TextNode(content="I'll help"),
            tool_calls=(
                ToolCallNode(call_id="a", tool_name="one"),
                ToolCallNode(call_id="b", tool_name="two"),
            ),
            metadata=Metadata(provider="openai"),
        )
        assert result.text_content == "I'll help"
        assert result.num_calls == 2
        assert result.get_call_names() == ["one", "two"]
        assert result.get_tool_call("b").tool_name == "two"
        assert result.get_tool_call("missing") is None
        assert result.has_content

    def test_tool_results_count_as_content(self):
        result = ResponseNode(tool_results=(ToolResultNode(call_id="x", result="ok"),))
        assert result.has_content

    def test_with_metadata_returns_copy(self):
        """Test metadata updates do not touch the original."""
        result = ResponseNode(metadata=Metadata(provider="openai"))
        updated = result.with_metadata(warnings=("w",))
        assert updated.metadata.warnings == ("w",)
        assert updated.metadata.provider == "openai"
        assert result.metadata.warnings == ()

    def test_serialization(self):
        """Test JSON serialization."""
        result = ResponseNode(tool_calls=(ToolCallNode(call_id="a", tool_name="test"),))
        json_str = result.model_dump_json()
        assert '"tool_name":"test"' in json_str


class TestMetadata:
    """Tests for Metadata model."""

    def test_is_complete(self):
        assert Metadata(finish_reason="stop").is_complete
        assert Metadata().is_complete
        assert not Metadata(finish_reason="length").is_complete

    def test_negative_parse_time_rejected(self):
        with pytest.raises(ValidationError):
            Metadata(parse_time_ms=-1.0)


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_warning_only_is_valid(self):
        result = ValidationResult.from_issues([
            ValidationIssue(message="w", severity=ValidationSeverity.WARNING)
        ])
        assert result.is_valid
        assert result.errors == []

    def test_error_is_invalid(self):
        result = ValidationResult.from_issues([
            ValidationIssue(message="e", severity=ValidationSeverity.ERROR)
        ])
        assert not result.is_valid
        assert len(result.errors) == 1
