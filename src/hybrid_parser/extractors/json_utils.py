"""Tolerant accessors over decoded JSON trees.

Provider payloads are read with these helpers so that a field of the wrong
type is indistinguishable from a missing field.
"""

import json
from typing import Any, Iterable

from hybrid_parser.errors import ExtractionError
from hybrid_parser.models import TokenUsage


def load_json(raw: str) -> Any:
    """Decode raw provider text, raising ``ExtractionError`` on failure."""
    try:
        return json.loads(raw)
    except (ValueError, RecursionError) as e:
        raise ExtractionError(f"Invalid JSON payload: {e}") from e


def as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def as_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def as_count(value: Any) -> int | None:
    """Read a non-negative integer token count."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def first_present(obj: Any, keys: Iterable[str]) -> tuple[str | None, Any]:
    """Return the first ``(key, value)`` whose value is not null.

    Keys are consulted in priority order; ``(None, None)`` if none match.
    """
    data = as_dict(obj)
    for key in keys:
        value = data.get(key)
        if value is not None:
            return key, value
    return None, None


def first_string(obj: Any, keys: Iterable[str]) -> str | None:
    """Return the first non-blank string value among ``keys``."""
    data = as_dict(obj)
    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def parse_token_usage(usage: Any) -> TokenUsage | None:
    """Read OpenAI (prompt/completion) or Anthropic (input/output) usage."""
    data = as_dict(usage)
    if not data:
        return None

    input_tokens = as_count(data.get("prompt_tokens"))
    if input_tokens is None:
        input_tokens = as_count(data.get("input_tokens")) or 0

    output_tokens = as_count(data.get("completion_tokens"))
    if output_tokens is None:
        output_tokens = as_count(data.get("output_tokens")) or 0

    total_tokens = as_count(data.get("total_tokens"))
    if total_tokens is None:
        total_tokens = input_tokens + output_tokens

    return TokenUsage(input=input_tokens, output=output_tokens, total=total_tokens)
