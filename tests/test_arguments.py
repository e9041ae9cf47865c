"""Tests for tool call argument parsing."""

import pytest

from hybrid_parser.arguments import (
    ERROR_PREFIX,
    create_tool_call,
    parse_arguments,
    serialize_arguments,
)


class TestParseArguments:
    """Tests for parse_arguments."""

    @pytest.mark.parametrize("raw", ["", " ", "\n\t  "])
    def test_blank_is_empty_mapping(self, raw):
        """Test empty and whitespace-only payloads mean no arguments."""
        parsed, error = parse_arguments(raw)
        assert parsed == {}
        assert error is None

    def test_simple_object(self):
        parsed, error = parse_arguments('{"query": "test", "limit": 5}')
        assert parsed == {"query": "test", "limit": 5}
        assert error is None

    def test_preserves_key_order(self):
        """Test keys come back in source order."""
        parsed, _ = parse_arguments('{"z": 1, "a": 2, "m": 3}')
        assert list(parsed) == ["z", "a", "m"]

    def test_nested_values(self):
        parsed, _ = parse_arguments('{"data": {"items": [1, {"x": null}]}, "ok": true}')
        assert parsed["data"]["items"][1] == {"x": None}
        assert parsed["ok"] is True

    @pytest.mark.parametrize("raw", [
        "{ invalid json",
        '{"a": 1,}',
        "{'a': 1}",
        '{"query": "te',
        "not json at all",
    ])
    def test_invalid_payload_is_captured(self, raw):
        """Test malformed payloads produce an ErrorDetail, never an exception."""
        parsed, error = parse_arguments(raw)
        assert parsed is None
        assert error is not None
        assert error.raw_input == raw
        assert error.message.startswith(ERROR_PREFIX)

    @pytest.mark.parametrize("raw,kind", [
        ("null", "null"),
        ("true", "boolean"),
        ("42", "number"),
        ("1.5", "number"),
        ('"text"', "string"),
        ("[1, 2]", "array"),
    ])
    def test_non_object_is_error(self, raw, kind):
        """Test valid JSON that is not an object is rejected."""
        parsed, error = parse_arguments(raw)
        assert parsed is None
        assert error.message.endswith(f"got {kind}")
        assert error.raw_input == raw

    def test_raw_input_kept_verbatim(self):
        """Test whitespace around a bad payload is not trimmed."""
        raw = "  {broken  "
        _, error = parse_arguments(raw)
        assert error.raw_input == raw

    def test_idempotent(self):
        """Test parsing the same payload twice gives equal results."""
        raw = '{"a": [1, 2], "b": "c"}'
        assert parse_arguments(raw) == parse_arguments(raw)
        bad = "{oops"
        assert parse_arguments(bad) == parse_arguments(bad)

    def test_deep_nesting_does_not_raise(self):
        """Test pathologically deep payloads are captured as errors."""
        raw = "[" * 100_000
        parsed, error = parse_arguments(raw)
        assert parsed is None
        assert error is not None

    def test_non_string_raises_type_error(self):
        with pytest.raises(TypeError):
            parse_arguments({"a": 1})
        with pytest.raises(TypeError):
            parse_arguments(None)


class TestSerializeArguments:
    """Tests for serialize_arguments."""

    def test_none(self):
        assert serialize_arguments(None) == ""

    def test_string_passthrough(self):
        assert serialize_arguments('{"x": 1}') == '{"x": 1}'
        assert serialize_arguments("{broken") == "{broken"

    def test_dict(self):
        assert serialize_arguments({"city": "Paris"}) == '{"city": "Paris"}'

    def test_non_ascii_kept(self):
        assert serialize_arguments({"text": "你好"}) == '{"text": "你好"}'

    def test_unserializable_falls_back_to_str(self):
        value = {"when": object}
        assert serialize_arguments(value) == str(value)


class TestCreateToolCall:
    """Tests for create_tool_call."""

    def test_valid(self):
        call = create_tool_call("call_1", "search", '{"q": "x"}')
        assert call.parsed_arguments == {"q": "x"}
        assert call.parse_error is None
        assert call.raw_arguments == '{"q": "x"}'

    def test_invalid(self):
        call = create_tool_call("call_1", "search", "{ invalid json")
        assert call.parsed_arguments is None
        assert call.parse_error.raw_input == "{ invalid json"
        assert call.raw_arguments == "{ invalid json"

    def test_empty(self):
        call = create_tool_call("call_1", "ping", "")
        assert call.parsed_arguments == {}
