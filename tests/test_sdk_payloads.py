"""Parse payloads serialized by the official provider SDKs.

The SDK models dump every optional field (``"tool_calls": null``,
``"citations": null`` ...), which is exactly what arrives on the wire.
"""

import pytest

from hybrid_parser import HybridParser, ParserContext

openai_types = pytest.importorskip("openai.types.chat")
anthropic_types = pytest.importorskip("anthropic.types")


@pytest.fixture
def parser():
    return HybridParser()


def openai_completion(message, finish_reason="stop"):
    return openai_types.ChatCompletion.model_validate({
        "id": "chatcmpl-123",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gpt-4o-mini",
        "choices": [{
            "index": 0,
            "finish_reason": finish_reason,
            "logprobs": None,
            "message": {"role": "assistant", **message},
        }],
        "usage": {"prompt_tokens": 20, "completion_tokens": 7, "total_tokens": 27},
    }).model_dump_json()


def anthropic_message(content, stop_reason="end_turn"):
    return anthropic_types.Message.model_validate({
        "id": "msg_01",
        "type": "message",
        "role": "assistant",
        "model": "claude-3-5-sonnet-latest",
        "content": content,
        "stop_reason": stop_reason,
        "stop_sequence": None,
        "usage": {"input_tokens": 15, "output_tokens": 9},
    }).model_dump_json()


class TestOpenAISDKPayloads:
    """Tests against ChatCompletion.model_dump_json() output."""

    def test_text_only(self, parser):
        raw = openai_completion({"content": "Hello there"})
        result = parser.parse(raw)

        assert result.metadata.provider == "openai"
        assert result.text_content == "Hello there"
        assert result.tool_calls == ()
        assert result.metadata.model == "gpt-4o-mini"
        assert result.metadata.finish_reason == "stop"
        assert result.metadata.token_usage.total == 27

    def test_tool_calls(self, parser):
        raw = openai_completion({
            "content": None,
            "tool_calls": [
                {"id": "call_a", "type": "function",
                 "function": {"name": "get_weather", "arguments": '{"city": "Oslo"}'}},
                {"id": "call_b", "type": "function",
                 "function": {"name": "get_time", "arguments": '{"tz": "CET"'}},
            ],
        }, finish_reason="tool_calls")
        result = parser.parse(raw)

        assert result.metadata.provider == "openai"
        assert result.text is None
        assert result.get_call_names() == ["get_weather", "get_time"]
        assert result.tool_calls[0].parsed_arguments == {"city": "Oslo"}
        assert result.tool_calls[1].parse_error is not None
        assert not parser.validate(result).is_valid

    def test_strict_mode(self, parser):
        raw = openai_completion({
            "content": None,
            "tool_calls": [{"id": "call_a", "type": "function",
                            "function": {"name": "f", "arguments": "{}"}}],
        }, finish_reason="tool_calls")
        result = parser.parse(raw, ParserContext(model_provider="openai", strict_mode=True))

        assert result.get_call_names() == ["f"]


class TestAnthropicSDKPayloads:
    """Tests against Message.model_dump_json() output."""

    def test_text_only(self, parser):
        raw = anthropic_message([{"type": "text", "text": "Hi!"}])
        result = parser.parse(raw)

        assert result.metadata.provider == "anthropic"
        assert result.text_content == "Hi!"
        assert result.metadata.finish_reason == "end_turn"
        assert result.metadata.token_usage.input == 15
        assert result.metadata.token_usage.output == 9
        assert result.metadata.token_usage.total == 24

    def test_tool_use(self, parser):
        raw = anthropic_message([
            {"type": "text", "text": "Looking that up."},
            {"type": "tool_use", "id": "toolu_01", "name": "search",
             "input": {"query": "test", "limit": 3}},
        ], stop_reason="tool_use")
        result = parser.parse(raw)

        assert result.metadata.provider == "anthropic"
        assert result.text_content == "Looking that up."
        call = result.tool_calls[0]
        assert call.call_id == "toolu_01"
        assert call.parsed_arguments == {"query": "test", "limit": 3}
        assert result.metadata.model == "claude-3-5-sonnet-latest"


class TestCrossProvider:
    """The same logical call through both SDKs."""

    def test_equivalent_nodes(self, parser):
        openai_raw = openai_completion({
            "content": "On it",
            "tool_calls": [{"id": "id_1", "type": "function",
                            "function": {"name": "search", "arguments": '{"query": "test"}'}}],
        }, finish_reason="tool_calls")
        anthropic_raw = anthropic_message([
            {"type": "text", "text": "On it"},
            {"type": "tool_use", "id": "id_1", "name": "search", "input": {"query": "test"}},
        ], stop_reason="tool_use")

        first = parser.parse(openai_raw)
        second = parser.parse(anthropic_raw)

        assert first.text_content == second.text_content
        assert first.tool_calls == second.tool_calls
