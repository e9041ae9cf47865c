"""Safe tool-call argument parsing.

Every provider path funnels its argument payload through ``parse_arguments`` so
that structured and text-derived tool calls share one failure contract: a bad
payload becomes an ``ErrorDetail`` on the node, never an exception.
"""

import json
from typing import Any

from hybrid_parser.models import ErrorDetail, ToolCallNode

ERROR_PREFIX = "Error parsing tool call arguments"


def _json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return type(value).__name__


def parse_arguments(raw: str) -> tuple[dict[str, Any] | None, ErrorDetail | None]:
    """Parse a raw argument payload into a key-ordered mapping.

    Args:
        raw: Argument payload exactly as the provider sent it.

    Returns:
        ``(mapping, None)`` on success, ``(None, ErrorDetail)`` otherwise.
        Blank input succeeds with an empty mapping.

    Raises:
        TypeError: If ``raw`` is not a string.
    """
    if not isinstance(raw, str):
        raise TypeError(f"raw arguments must be str, got {type(raw).__name__}")

    if not raw.strip():
        return {}, None

    try:
        parsed = json.loads(raw)
    except (ValueError, RecursionError) as e:
        return None, ErrorDetail(message=f"{ERROR_PREFIX}: {e}", raw_input=raw)

    if not isinstance(parsed, dict):
        return None, ErrorDetail(
            message=f"{ERROR_PREFIX}: expected a JSON object, got {_json_type_name(parsed)}",
            raw_input=raw,
        )

    return parsed, None


def serialize_arguments(value: Any) -> str:
    """Turn an already-decoded argument value back into JSON text.

    Strings pass through untouched; ``None`` means no arguments.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError, RecursionError):
        return str(value)


def create_tool_call(call_id: str, tool_name: str, raw_arguments: str) -> ToolCallNode:
    """Build a ``ToolCallNode`` with safely parsed arguments."""
    parsed, error = parse_arguments(raw_arguments)
    return ToolCallNode(
        call_id=call_id,
        tool_name=tool_name,
        raw_arguments=raw_arguments,
        parsed_arguments=parsed,
        parse_error=error,
    )
