"""Extractor for OpenAI Chat Completions style payloads.

Handles, in order of precedence:
    - ``{"choices": [{"message": {...}, "finish_reason": ...}]}``
    - a bare message ``{"content": ..., "tool_calls": [...]}``
    - a message wrapper ``{"message": {...}}``

OpenAI-compatible servers (Azure, Ollama, vLLM, Cerebras, ...) emit the same
shape and go through here as well.
"""

import logging
from typing import Any

from hybrid_parser.arguments import serialize_arguments
from hybrid_parser.context import ProviderHint
from hybrid_parser.extractors.base import BaseExtractor
from hybrid_parser.extractors.builder import ResponseBuilder
from hybrid_parser.extractors.json_utils import (
    as_dict,
    as_list,
    as_str,
    parse_token_usage,
)

logger = logging.getLogger(__name__)

MESSAGE_KEYS = ("content", "tool_calls", "function_call")


class OpenAIExtractor(BaseExtractor):
    """Walks ``choices[].message`` into text, tool calls and metadata.

    Tool calls without an ``id`` and legacy ``function_call`` entries get a
    synthesized ``func_<hex>`` id.
    """

    provider = ProviderHint.OPENAI
    FUNCTION_ID_PREFIX = "func_"

    def extract_into(self, payload: dict[str, Any] | list[Any], builder: ResponseBuilder) -> None:
        root = as_dict(payload)

        choices = root.get("choices")
        if isinstance(choices, list):
            for choice in choices:
                if not isinstance(choice, dict):
                    continue
                message = choice.get("message")
                if isinstance(message, dict):
                    self._extract_message(message, builder)
                # Last choice wins, even when it reports no reason
                builder.finish_reason = as_str(choice.get("finish_reason"))
        elif any(key in root for key in MESSAGE_KEYS):
            self._extract_message(root, builder)
        elif isinstance(root.get("message"), dict):
            self._extract_message(root["message"], builder)

        builder.model = as_str(root.get("model"))
        if builder.finish_reason is None:
            builder.finish_reason = as_str(root.get("finish_reason"))
        builder.token_usage = parse_token_usage(root.get("usage"))

    def _extract_message(self, message: dict[str, Any], builder: ResponseBuilder) -> None:
        builder.add_text(self._message_text(message.get("content")))

        for index, tool_call in enumerate(as_list(message.get("tool_calls"))):
            self._extract_tool_call(index, tool_call, builder)

        function_call = message.get("function_call")
        if isinstance(function_call, dict):
            builder.add_tool_call(
                call_id=None,
                tool_name=as_str(function_call.get("name")),
                raw_arguments=serialize_arguments(function_call.get("arguments")),
                id_prefix=self.FUNCTION_ID_PREFIX,
            )

    def _message_text(self, content: Any) -> str | None:
        """Content is either a string or a list of typed content parts."""
        if isinstance(content, str):
            return content
        parts = [
            part["text"]
            for part in as_list(content)
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        ]
        return "".join(parts) if parts else None

    def _extract_tool_call(self, index: int, tool_call: Any, builder: ResponseBuilder) -> None:
        if not isinstance(tool_call, dict):
            builder.warn(f"tool_calls[{index}] is not an object")
            return

        call_type = tool_call.get("type")
        if call_type is not None and call_type != "function":
            logger.warning("Skipping unsupported tool call type: %s", call_type)
            builder.warn(f"tool_calls[{index}] has unsupported type {call_type!r}")
            return

        function = as_dict(tool_call.get("function"))
        builder.add_tool_call(
            call_id=as_str(tool_call.get("id")),
            tool_name=as_str(function.get("name")),
            raw_arguments=serialize_arguments(function.get("arguments")),
            id_prefix=self.FUNCTION_ID_PREFIX,
        )
