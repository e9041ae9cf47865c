"""Fallback parser for tool calls printed inline by text-only models."""

import json
import logging
import re
from typing import Any

from hybrid_parser.extractors.builder import IdFactory, ResponseBuilder
from hybrid_parser.extractors.generic_extractor import (
    ARGUMENT_KEYS,
    GenericExtractor,
    is_flat_tool_call,
)
from hybrid_parser.fallback.base import TextFallbackParser
from hybrid_parser.models import ResponseNode

logger = logging.getLogger(__name__)

_DECODER = json.JSONDecoder()
_WHITESPACE = re.compile(r"\s*")


class EmbeddedJsonParser(TextFallbackParser):
    """Scans free text for embedded JSON tool invocations.

    Supports:
        - ``<tool_call>{...}</tool_call>`` wrappers (Hermes/Qwen style)
        - Bare JSON objects and arrays anywhere in the text
        - ``{"tool_call": {...}}`` / ``{"function_call": {...}}`` wrappers

    A JSON object counts as a tool call when it names a tool and carries an
    argument key. Recognised spans are cut out of the text segment; if nothing
    is recognised the text is returned unchanged.

    Attributes:
        name: Parser identifier.
    """

    XML_START = "<tool_call>"
    XML_END = "</tool_call>"
    WRAPPER_KEYS = ("tool_call", "function_call")

    def __init__(self, id_factory: IdFactory | None = None):
        self._generic = GenericExtractor(id_factory)

    @property
    def name(self) -> str:
        """Return the parser identifier."""
        return "embedded-json-parser"

    @property
    def supported_formats(self) -> list[str]:
        return ["text", "embedded-json", "xml-wrapped"]

    def parse_unstructured(self, raw: str) -> ResponseNode:
        """Extract embedded tool calls and the remaining text.

        Args:
            raw: Free text, possibly containing tool calls.

        Returns:
            ResponseNode with provider "text".
        """
        builder = self._generic.new_builder("text")

        try:
            spans = self._scan(raw, builder)
        except Exception as e:
            logger.warning("Embedded tool call scan failed: %s", e)
            builder.warn(f"embedded tool call scan failed: {e}")
            spans = []

        builder.add_text(self._remaining_text(raw, spans))
        return builder.build()

    def _scan(self, text: str, builder: ResponseBuilder) -> list[tuple[int, int]]:
        """Walk the text once, returning the spans that held tool calls."""
        spans: list[tuple[int, int]] = []
        closers: dict[int, int | None] = {}
        xml_end = -1

        i = 0
        while i < len(text):
            if text.startswith(self.XML_START, i):
                content_start = i + len(self.XML_START)
                if xml_end < content_start:
                    xml_end = text.find(self.XML_END, content_start)
                    if xml_end == -1:
                        xml_end = len(text)
                if xml_end < len(text):
                    try:
                        decoded, data = self._decode(text, content_start, xml_end)
                    except RecursionError:
                        decoded, data = False, None
                    if decoded and self._add_data(data, builder):
                        end_pos = xml_end + len(self.XML_END)
                        spans.append((i, end_pos))
                        i = end_pos
                        continue
                i += 1
            elif text[i] in "{[":
                if i not in closers:
                    self._match_brackets(text, i, closers)
                close = closers[i]
                if close is None:
                    i += 1
                    continue
                try:
                    decoded, data = self._decode(text, i, close + 1)
                except RecursionError:
                    # Too deep to be a tool call
                    i = close + 1
                    continue
                if not decoded:
                    # Nested openers may still hold a complete call
                    i += 1
                    continue
                if self._add_data(data, builder):
                    spans.append((i, close + 1))
                i = close + 1
            else:
                i += 1

        return spans

    @staticmethod
    def _match_brackets(text: str, start: int, closers: dict[int, int | None]) -> None:
        """Record the closing position of the opener at ``start``.

        Every opener met on the way gets its closer recorded too (None when the
        text ends first), so later lookups never rescan the same region.
        """
        stack: list[int] = []
        in_string = False
        escape_next = False

        for i in range(start, len(text)):
            char = text[i]

            if escape_next:
                escape_next = False
                continue

            if in_string:
                if char == '\\':
                    escape_next = True
                elif char == '"':
                    in_string = False
                continue

            if char == '"':
                in_string = True
            elif char in '{[':
                stack.append(i)
            elif char in '}]':
                closers[stack.pop()] = i
                if not stack:
                    return

        for pos in stack:
            closers[pos] = None

    @staticmethod
    def _decode(text: str, start: int, end: int) -> tuple[bool, Any]:
        """Decode ``text[start:end]`` as one JSON value, allowing outer whitespace.

        Raises:
            RecursionError: If the value nests too deeply to decode.
        """
        pos = _WHITESPACE.match(text, start, end).end()
        if pos >= end:
            return False, None
        try:
            data, value_end = _DECODER.raw_decode(text, pos)
        except ValueError:
            return False, None
        if value_end > end or _WHITESPACE.match(text, value_end, end).end() != end:
            return False, None
        return True, data

    def _add_data(self, data: Any, builder: ResponseBuilder) -> bool:
        """Add every tool call found in a decoded fragment."""
        items = data if isinstance(data, list) else [data]
        added = False
        for item in items:
            item = self._unwrap(item)
            if not self._is_tool_call(item):
                continue
            if self._generic.add_candidate(item, builder) is not None:
                added = True
        return added

    def _unwrap(self, item: Any) -> Any:
        if isinstance(item, dict) and len(item) == 1:
            for key in self.WRAPPER_KEYS:
                if isinstance(item.get(key), dict):
                    return item[key]
        return item

    def _is_tool_call(self, item: Any) -> bool:
        """Check if data matches tool call structure."""
        return (
            isinstance(item, dict)
            and is_flat_tool_call(item)
            and any(key in item for key in ARGUMENT_KEYS)
        )

    @staticmethod
    def _remaining_text(text: str, spans: list[tuple[int, int]]) -> str:
        if not spans:
            return text

        pieces = []
        previous = 0
        for start, end in spans:
            pieces.append(text[previous:start])
            previous = end
        pieces.append(text[previous:])
        return "".join(pieces).strip()
