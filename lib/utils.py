# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Small coercion helpers for values that arrive as multipart form strings.
# None of these raise: malformed input falls back to a caller-supplied default.
# =============================================================================

import json
import logging
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRUE_STRINGS = {"true", "1"}


# =============================================================================
# Form Field Decoding
# =============================================================================

def decode_json(raw: str | bytes | None, fallback: T) -> T | Any:
    """
    Decode a JSON form field, returning `fallback` on any failure.

    Empty and missing values also yield the fallback. Never raises.

    Example:
        decode_json('[{"title": "Pool"}]', [])  # [{"title": "Pool"}]
        decode_json("{not json", {})            # {}
        decode_json(None, [])                   # []
    """
    if raw is None or raw == "" or raw == b"":
        return fallback
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.debug(f"Falling back to default for undecodable JSON field: {e}")
        return fallback


def to_bool(value: Any) -> bool:
    """
    Interpret a form value as a boolean.

    Only True, "true" and "1" (case-insensitive, trimmed) count as true.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _TRUE_STRINGS
