"""Format classification: structured provider payload or free text.

The raw response is decoded at most once. The decoded value travels with the
``Classification`` so the selected extractor can walk it without re-parsing.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

from hybrid_parser.context import ParserContext, ProviderHint
from hybrid_parser.extractors.generic_extractor import TOOL_CALL_KEYS, is_flat_tool_call
from hybrid_parser.extractors.json_utils import as_dict, as_list

# Tie-break order when a payload matches several families and no hint applies
_PROVIDER_ORDER = (ProviderHint.OPENAI, ProviderHint.ANTHROPIC, ProviderHint.GENERIC)


class FormatKind(str, Enum):
    STRUCTURED = "structured"
    UNSTRUCTURED = "unstructured"


@dataclass(frozen=True)
class Classification:
    """Result of ``classify``.

    Attributes:
        kind: Structured or unstructured.
        provider: Provider family for structured input, else None.
        payload: The decoded JSON value for structured input, else None.
    """
    kind: FormatKind
    provider: ProviderHint | None = None
    payload: Any = None

    @property
    def is_structured(self) -> bool:
        return self.kind == FormatKind.STRUCTURED

    @classmethod
    def unstructured(cls) -> "Classification":
        return cls(kind=FormatKind.UNSTRUCTURED)


def classify(raw: str, context: ParserContext | None = None) -> Classification:
    """Decide whether ``raw`` is a structured provider payload.

    Malformed JSON, JSON scalars and JSON without provider markers are all
    unstructured. Never raises for string input.

    Args:
        raw: Complete provider response body.
        context: Optional provider knowledge used to break ties.

    Raises:
        TypeError: If ``raw`` is not a string.
    """
    if not isinstance(raw, str):
        raise TypeError(f"raw response must be str, got {type(raw).__name__}")

    stripped = raw.strip()
    if not stripped or stripped[0] not in "{[":
        return Classification.unstructured()

    try:
        payload = json.loads(stripped)
    except (ValueError, RecursionError):
        return Classification.unstructured()

    return classify_payload(payload, context)


def classify_payload(payload: Any, context: ParserContext | None = None) -> Classification:
    """Classify an already-decoded JSON value."""
    strict = context is not None and context.strict_mode
    hint = context.provider_hint if context is not None else None

    candidates = _primary_markers(payload)
    if not candidates and not strict:
        candidates = _loose_markers(payload)
    if not candidates:
        return Classification.unstructured()

    provider = hint if hint in candidates else candidates[0]
    return Classification(kind=FormatKind.STRUCTURED, provider=provider, payload=payload)


def _ordered(found: set[ProviderHint]) -> list[ProviderHint]:
    return [hint for hint in _PROVIDER_ORDER if hint in found]


def _primary_markers(payload: Any) -> list[ProviderHint]:
    """``choices[].message.tool_calls|function_call`` or tool blocks in ``content[]``."""
    root = as_dict(payload)
    found: set[ProviderHint] = set()

    for choice in as_list(root.get("choices")):
        message = as_dict(as_dict(choice).get("message"))
        if message.get("tool_calls") is not None or message.get("function_call") is not None:
            found.add(ProviderHint.OPENAI)
            break

    for block in as_list(root.get("content")):
        if as_dict(block).get("type") in ("tool_use", "tool_result"):
            found.add(ProviderHint.ANTHROPIC)
            break

    return _ordered(found)


def _loose_markers(payload: Any) -> list[ProviderHint]:
    """Weaker shapes that still identify a provider family."""
    root = as_dict(payload)
    found: set[ProviderHint] = set()

    if any(isinstance(as_dict(c).get("message"), dict) for c in as_list(root.get("choices"))):
        found.add(ProviderHint.OPENAI)
    if isinstance(root.get("function_call"), dict):
        found.add(ProviderHint.OPENAI)
    message = root.get("message")
    if isinstance(message, dict) and ("content" in message or "tool_calls" in message):
        found.add(ProviderHint.OPENAI)

    for key in TOOL_CALL_KEYS:
        elements = root.get(key)
        if not isinstance(elements, list):
            continue
        if any(is_flat_tool_call(e) for e in elements):
            found.add(ProviderHint.GENERIC)
        elif key == "tool_calls" and any(
            isinstance(as_dict(e).get("function"), dict) for e in elements
        ):
            # A bare OpenAI message
            found.add(ProviderHint.OPENAI)

    content = root.get("content")
    if isinstance(content, list) and ("stop_reason" in root or root.get("type") == "message"):
        if any(as_dict(block).get("type") == "text" for block in content):
            found.add(ProviderHint.ANTHROPIC)

    return _ordered(found)
