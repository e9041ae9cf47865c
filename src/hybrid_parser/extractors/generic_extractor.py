"""Extractor for schema-less tool call data.

Some providers (and most text-only models) describe a tool call with whatever
keys they like. Identity and arguments are recovered by consulting ordered
lists of candidate keys; an element whose name cannot be resolved is dropped.
"""

import json
import logging
from typing import Any

from hybrid_parser.arguments import serialize_arguments
from hybrid_parser.context import ProviderHint
from hybrid_parser.extractors.base import BaseExtractor
from hybrid_parser.extractors.builder import IdFactory, ResponseBuilder
from hybrid_parser.extractors.json_utils import (
    as_dict,
    as_str,
    first_present,
    first_string,
    parse_token_usage,
)
from hybrid_parser.models import ResponseNode, ToolCallNode

logger = logging.getLogger(__name__)

# Candidate keys, highest priority first
NAME_KEYS = ("name", "function", "tool")
ID_KEYS = ("id", "call_id")
ARGUMENT_KEYS = ("arguments", "parameters", "input")
TEXT_KEYS = ("text", "content")
TOOL_CALL_KEYS = ("tool_calls", "calls")


def is_flat_tool_call(value: Any) -> bool:
    """Whether ``value`` names a tool directly at element level."""
    return first_string(value, NAME_KEYS) is not None


class GenericExtractor(BaseExtractor):
    """Recovers tool calls from loosely shaped objects.

    The payload is either a list of candidate elements, or an object with a
    text field (``text``/``content``) and a side-channel of tool call data
    (``tool_calls``/``calls``).
    """

    provider = ProviderHint.GENERIC

    def extract_into(self, payload: dict[str, Any] | list[Any], builder: ResponseBuilder) -> None:
        if isinstance(payload, list):
            self.add_candidates(payload, builder)
            return

        builder.add_text(first_string(payload, TEXT_KEYS))
        _, tool_calls_data = first_present(payload, TOOL_CALL_KEYS)
        self.add_candidates(tool_calls_data, builder)

        builder.model = as_str(payload.get("model"))
        builder.finish_reason = as_str(payload.get("finish_reason")) or as_str(
            payload.get("stop_reason")
        )
        builder.token_usage = parse_token_usage(payload.get("usage"))

    def extract_from(self, text: str | None, tool_calls_data: Any = None) -> ResponseNode:
        """Build a response from plain text plus optional tool call data.

        Args:
            text: Text content of the response.
            tool_calls_data: Tool call data in an unknown shape: a list of
                elements, a single object, or JSON text encoding either.

        Returns:
            ResponseNode with provider "generic".
        """
        builder = self.new_builder()
        builder.add_text(text)
        self.add_candidates(tool_calls_data, builder)
        return builder.build()

    def add_candidates(self, data: Any, builder: ResponseBuilder) -> list[ToolCallNode]:
        """Try every element of ``data`` independently."""
        if data is None:
            return []

        if isinstance(data, str):
            try:
                data = json.loads(data)
            except (ValueError, RecursionError) as e:
                builder.warn(f"tool call data is not valid JSON: {e}")
                return []

        if isinstance(data, dict):
            data = [data]
        if not isinstance(data, list):
            builder.warn(f"tool call data has unsupported type {type(data).__name__}")
            return []

        added: list[ToolCallNode] = []
        for index, element in enumerate(data):
            try:
                node = self.add_candidate(element, builder)
            except Exception as e:
                # One bad element must not abort its siblings
                logger.warning("Skipping generic tool call %d: %s", index, e)
                builder.warn(f"tool call {index} skipped: {e}")
                continue
            if node is not None:
                added.append(node)
        return added

    def add_candidate(self, element: Any, builder: ResponseBuilder) -> ToolCallNode | None:
        """Decode one candidate element; returns None if it was dropped."""
        element = as_dict(element)

        name = first_string(element, NAME_KEYS)
        _, arguments = first_present(element, ARGUMENT_KEYS)

        # OpenAI-style {"function": {"name": ..., "arguments": ...}}
        function = element.get("function")
        if name is None and isinstance(function, dict):
            name = as_str(function.get("name"))
            if arguments is None:
                _, arguments = first_present(function, ARGUMENT_KEYS)

        return builder.add_tool_call(
            call_id=first_string(element, ID_KEYS),
            tool_name=name,
            raw_arguments=serialize_arguments(arguments),
        )


def extract_generic(
    text: str | None,
    tool_calls_data: Any = None,
    id_factory: IdFactory | None = None,
) -> ResponseNode:
    """Shortcut for ``GenericExtractor(id_factory).extract_from(...)``."""
    return GenericExtractor(id_factory).extract_from(text, tool_calls_data)
