"""Extractor for Anthropic Messages style payloads."""

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


class AnthropicExtractor(BaseExtractor):
    """Walks a ``content[]`` array of typed blocks.

    - ``text`` blocks are newline-joined into the text segment
    - ``tool_use`` blocks become tool calls; ``input`` is re-serialized so it
      goes through the same argument parser as every other provider
    - ``tool_result`` blocks become tool results (``is_error`` absent => success)

    A bare list of blocks is accepted as the ``content`` array itself.
    """

    provider = ProviderHint.ANTHROPIC

    def extract_into(self, payload: dict[str, Any] | list[Any], builder: ResponseBuilder) -> None:
        if isinstance(payload, list):
            root: dict[str, Any] = {"content": payload}
        else:
            root = payload

        content = root.get("content")
        if isinstance(content, str):
            builder.add_text(content)
        for block in as_list(content):
            self._extract_block(block, builder)

        builder.model = as_str(root.get("model"))
        builder.finish_reason = as_str(root.get("stop_reason"))
        builder.token_usage = parse_token_usage(root.get("usage"))

    def _extract_block(self, block: Any, builder: ResponseBuilder) -> None:
        block = as_dict(block)
        block_type = block.get("type")

        if block_type == "text":
            builder.add_text(as_str(block.get("text")))
        elif block_type == "tool_use":
            builder.add_tool_call(
                call_id=as_str(block.get("id")),
                tool_name=as_str(block.get("name")),
                raw_arguments=serialize_arguments(block.get("input")),
            )
        elif block_type == "tool_result":
            self._extract_tool_result(block, builder)
        else:
            logger.debug("Ignoring content block of type %r", block_type)

    def _extract_tool_result(self, block: dict[str, Any], builder: ResponseBuilder) -> None:
        content = block.get("content")
        is_error = block.get("is_error") is True
        builder.add_tool_result(
            call_id=as_str(block.get("tool_use_id")),
            tool_name=as_str(block.get("name")),
            result=content,
            is_success=not is_error,
            error_message=self._result_text(content) if is_error else None,
        )

    @staticmethod
    def _result_text(content: Any) -> str | None:
        if isinstance(content, str):
            return content
        texts = [
            item["text"]
            for item in as_list(content)
            if isinstance(item, dict) and isinstance(item.get("text"), str)
        ]
        return "\n".join(texts) if texts else None
