"""Mutable accumulator used while walking a payload, frozen into a ResponseNode."""

import logging
import uuid
from typing import Any, Callable

from hybrid_parser.arguments import create_tool_call
from hybrid_parser.models import (
    Metadata,
    ResponseNode,
    TextNode,
    TokenUsage,
    ToolCallNode,
    ToolResultNode,
)

logger = logging.getLogger(__name__)

IdFactory = Callable[[str], str]


def new_call_id(prefix: str = "") -> str:
    """Synthesize a fresh tool call id (``<prefix><hex>`` or a plain UUID)."""
    if prefix:
        return f"{prefix}{uuid.uuid4().hex}"
    return str(uuid.uuid4())


class ResponseBuilder:
    """Collects nodes for one parse and enforces the per-response invariants.

    - Text fragments are joined with ``separator``; empty fragments are skipped
    - Tool calls without a resolvable name are dropped
    - Missing or duplicate call ids are replaced with synthesized ones
    """

    def __init__(
        self,
        provider: str,
        id_factory: IdFactory | None = None,
        separator: str = "\n",
    ):
        self.provider = provider
        self.separator = separator
        self.model: str | None = None
        self.finish_reason: str | None = None
        self.token_usage: TokenUsage | None = None
        self._id_factory = id_factory or new_call_id
        self._text_parts: list[str] = []
        self._tool_calls: list[ToolCallNode] = []
        self._tool_results: list[ToolResultNode] = []
        self._warnings: list[str] = []
        self._seen_ids: set[str] = set()

    def add_text(self, text: str | None) -> None:
        if text:
            self._text_parts.append(text)

    def warn(self, message: str) -> None:
        self._warnings.append(message)

    def add_tool_call(
        self,
        call_id: str | None,
        tool_name: str | None,
        raw_arguments: str,
        id_prefix: str = "",
    ) -> ToolCallNode | None:
        """Append a tool call, returning None if it was dropped."""
        name = tool_name.strip() if isinstance(tool_name, str) else ""
        if not name:
            logger.warning("Dropping %s tool call without a resolvable name", self.provider)
            self.warn("dropped tool call without a resolvable name")
            return None

        if not call_id:
            call_id = self._id_factory(id_prefix)
        elif call_id in self._seen_ids:
            replacement = self._id_factory(id_prefix)
            self.warn(f"duplicate call_id {call_id} replaced with {replacement}")
            call_id = replacement
        self._seen_ids.add(call_id)

        node = create_tool_call(call_id, name, raw_arguments)
        self._tool_calls.append(node)
        return node

    def add_tool_result(
        self,
        call_id: str | None,
        result: Any,
        is_success: bool = True,
        tool_name: str | None = None,
        error_message: str | None = None,
    ) -> ToolResultNode:
        node = ToolResultNode(
            call_id=call_id or "",
            tool_name=tool_name,
            result=result,
            is_success=is_success,
            error_message=error_message,
        )
        self._tool_results.append(node)
        return node

    def build(self) -> ResponseNode:
        text = self.separator.join(self._text_parts)
        return ResponseNode(
            text=TextNode(content=text) if text.strip() else None,
            tool_calls=tuple(self._tool_calls),
            tool_results=tuple(self._tool_results),
            metadata=Metadata(
                provider=self.provider,
                model=self.model,
                finish_reason=self.finish_reason,
                token_usage=self.token_usage,
                warnings=tuple(self._warnings),
            ),
        )
